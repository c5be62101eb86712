# constraint_monitor/core/semantic/routing.py
"""
Constraint -> (provider, model) routing

Fast, cheap models handle naming and style checks; a stronger model handles
security-sensitive rules.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from .types import ModelRoute

logger = logging.getLogger(__name__)


DEFAULT_ROUTE_KEY = "default"

DEFAULT_MODEL_ROUTING: Dict[str, str] = {
    "no-evolutionary-names": "groq/llama-3.3-70b-versatile",
    "no-parallel-files": "groq/qwen-2.5-32b-instruct",
    "no-hardcoded-secrets": "anthropic/claude-3-haiku-20240307",
    "no-eval-usage": "anthropic/claude-3-haiku-20240307",
    "debug-not-speculate": "groq/llama-3.3-70b-versatile",
    "proper-error-handling": "gemini/gemini-1.5-flash",
    DEFAULT_ROUTE_KEY: "groq/llama-3.3-70b-versatile",
}

# Model used when a provider is chosen without one (e.g. ``fallback_provider: anthropic``)
DEFAULT_PROVIDER_MODELS: Dict[str, str] = {
    "groq": "llama-3.3-70b-versatile",
    "anthropic": "claude-3-haiku-20240307",
    "gemini": "gemini-1.5-flash",
}


def parse_provider_route(spec: str) -> ModelRoute:
    """``provider/model`` or a bare provider name"""
    if "/" in spec:
        return ModelRoute.parse(spec)
    provider = spec.strip().lower()
    if provider not in DEFAULT_PROVIDER_MODELS:
        raise ValueError(f"Unknown provider {spec!r}")
    return ModelRoute(provider=provider, model=DEFAULT_PROVIDER_MODELS[provider])


class ModelRouter:
    """Resolve a constraint id to a ModelRoute, falling back to the ``default`` entry"""

    def __init__(self, routing: Optional[Mapping[str, str]] = None):
        self._routes: Dict[str, ModelRoute] = {k: ModelRoute.parse(v) for k, v in DEFAULT_MODEL_ROUTING.items()}
        for key, spec in (routing or {}).items():
            try:
                route = ModelRoute.parse(spec)
            except (ValueError, KeyError) as e:
                # A bad entry only loses its override; the built-in route stays
                logger.warning(f"Ignoring model route for {key}: {e}")
                continue
            if route.provider not in DEFAULT_PROVIDER_MODELS:
                logger.warning(f"Ignoring model route for {key}: unknown provider {route.provider!r}")
                continue
            self._routes[key] = route

    def resolve(self, constraint_id: str) -> ModelRoute:
        return self._routes.get(constraint_id) or self._routes[DEFAULT_ROUTE_KEY]

    def routes(self) -> Dict[str, str]:
        return {k: str(v) for k, v in self._routes.items()}


__all__ = [
    "DEFAULT_ROUTE_KEY",
    "DEFAULT_MODEL_ROUTING",
    "DEFAULT_PROVIDER_MODELS",
    "parse_provider_route",
    "ModelRouter",
]
