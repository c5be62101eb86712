# constraint_monitor/core/semantic/types.py
"""
Semantic validation types
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


FALLBACK_REASONING = "Fallback to regex-only (semantic validation unavailable)"


@dataclass(frozen=True)
class SemanticResult:
    """
    Verdict of a second-tier (model-based) check on a regex match

    ``fallback`` marks a trust-the-pattern result: the regex match is treated
    as a confirmed violation because no provider verdict was available.
    """
    is_violation: bool
    confidence: float
    reasoning: str
    fallback: bool = False
    semantic_override: bool = False
    provider: Optional[str] = None
    model: Optional[str] = None
    raw_response: Optional[str] = None

    @classmethod
    def trust_pattern(
        cls,
        reasoning: str = FALLBACK_REASONING,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> "SemanticResult":
        return cls(
            is_violation=True,
            confidence=0.5,
            reasoning=reasoning,
            fallback=True,
            provider=provider,
            model=model,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_violation": self.is_violation,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "fallback": self.fallback,
            "semantic_override": self.semantic_override,
            "provider": self.provider,
            "model": self.model,
        }


@dataclass(frozen=True)
class ValidationContext:
    """What the model sees besides the match itself"""
    content: str
    file_path: Optional[str] = None
    rule_message: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ModelRoute:
    """A (provider, model) pair, written ``provider/model`` in configuration"""
    provider: str
    model: str

    @classmethod
    def parse(cls, spec: Any) -> "ModelRoute":
        if isinstance(spec, ModelRoute):
            return spec
        if isinstance(spec, dict):
            return cls(provider=str(spec["provider"]).lower(), model=str(spec["model"]))
        provider, sep, model = str(spec).partition("/")
        if not sep or not provider or not model:
            raise ValueError(f"Model route must look like 'provider/model', got {spec!r}")
        return cls(provider=provider.lower(), model=model)

    def __str__(self) -> str:
        return f"{self.provider}/{self.model}"


__all__ = [
    "FALLBACK_REASONING",
    "SemanticResult",
    "ValidationContext",
    "ModelRoute",
]
