# constraint_monitor/core/semantic/__init__.py
"""
Semantic validation layer

Model-based second opinion on regex matches, with caching, per-provider
circuit breakers and constraint-to-model routing.
"""

from .types import (
    FALLBACK_REASONING,
    ModelRoute,
    SemanticResult,
    ValidationContext,
)
from .cache import SemanticCache, make_key
from .breaker import CircuitBreaker, CircuitBreakerState
from .routing import DEFAULT_MODEL_ROUTING, ModelRouter
from .prompts import build_prompt, parse_response
from .providers import (
    AnthropicProvider,
    GeminiProvider,
    GroqProvider,
    SemanticProvider,
    build_providers,
)
from .validator import SemanticValidator

__all__ = [
    "FALLBACK_REASONING",
    "ModelRoute",
    "SemanticResult",
    "ValidationContext",
    "SemanticCache",
    "make_key",
    "CircuitBreaker",
    "CircuitBreakerState",
    "DEFAULT_MODEL_ROUTING",
    "ModelRouter",
    "build_prompt",
    "parse_response",
    "SemanticProvider",
    "GroqProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "build_providers",
    "SemanticValidator",
]
