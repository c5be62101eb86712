# constraint_monitor/config/modules/semantic.py
"""
Semantic Module Configuration

Configuration for the model-backed second tier of rule evaluation.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .base import ModuleConfig


@dataclass(frozen=True)
class SemanticConfig(ModuleConfig):
    """
    enabled: If False, semantic rules are regex-only
    timeout_ms: Per-validation provider timeout
    slow_threshold_ms: Validations slower than this are logged as warnings
    cache_max_size / cache_ttl_s: Verdict cache bounds
    breaker_threshold / breaker_reset_s: Per-provider circuit breaker
    model_routing: constraint id -> "provider/model" (merged over built-in routes)
    fallback_provider: Used when the routed provider has no credentials
    api_keys: provider -> key (environment variables otherwise)
    """

    enabled: bool = True
    timeout_ms: float = 300.0
    slow_threshold_ms: float = 300.0
    cache_max_size: int = 1000
    cache_ttl_s: float = 3600.0
    breaker_threshold: int = 5
    breaker_reset_s: float = 60.0
    model_routing: Optional[Dict[str, str]] = None
    fallback_provider: Optional[str] = None
    max_tokens: int = 200
    temperature: float = 0.1
    context_window: int = 200
    api_keys: Optional[Dict[str, str]] = None

    @classmethod
    def default(cls) -> "SemanticConfig":
        return cls()

    def to_dict(self):
        data = super().to_dict()
        # Never serialize credentials
        if data.get("api_keys"):
            data["api_keys"] = {k: "***" for k in data["api_keys"]}
        return data
