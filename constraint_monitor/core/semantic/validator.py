# constraint_monitor/core/semantic/validator.py
"""
Semantic Validator

Second tier of rule evaluation: asks a model whether a regex match is a real
violation. Owns the verdict cache, the per-provider circuit breakers and the
usage statistics; one instance is shared by every evaluation in a process.

Every failure path (timeout, provider error, malformed reply, open breaker,
cancellation) resolves to trust-the-pattern: the regex match stands.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import threading
import time
from typing import Any, Callable, Dict, Mapping, Optional

from ..errors import ConstraintMonitorError
from ..rules.patterns import RegexMatch
from .breaker import CircuitBreaker
from .cache import SemanticCache, make_key
from .prompts import DEFAULT_CONTEXT_WINDOW, build_prompt, parse_response
from .providers import SemanticProvider
from .routing import ModelRouter, parse_provider_route
from .types import ModelRoute, SemanticResult, ValidationContext

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 300
DEFAULT_SLOW_THRESHOLD_MS = 300
DEFAULT_MAX_TOKENS = 200
DEFAULT_TEMPERATURE = 0.1


class _LatencyStats:
    __slots__ = ("calls", "failures", "total_ms")

    def __init__(self) -> None:
        self.calls = 0
        self.failures = 0
        self.total_ms = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "calls": self.calls,
            "failures": self.failures,
            "avg_latency_ms": round(self.total_ms / self.calls, 1) if self.calls else 0.0,
        }


class SemanticValidator:
    """
    Model-backed confirmation of regex matches

    Usage:
        validator = SemanticValidator(providers=build_providers())
        result = await validator.validate("no-eval-usage", regex_match, context)
        if result.is_violation:
            ...
    """

    def __init__(
        self,
        providers: Optional[Mapping[str, SemanticProvider]] = None,
        *,
        router: Optional[ModelRouter] = None,
        cache: Optional[SemanticCache] = None,
        breaker: Optional[CircuitBreaker] = None,
        fallback_provider: Optional[str] = None,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
        slow_threshold_ms: float = DEFAULT_SLOW_THRESHOLD_MS,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        context_window: int = DEFAULT_CONTEXT_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.providers: Dict[str, SemanticProvider] = dict(providers or {})
        self.router = router or ModelRouter()
        self.cache = cache or SemanticCache(clock=clock)
        self.breaker = breaker or CircuitBreaker(clock=clock)
        self.fallback_route: Optional[ModelRoute] = None
        if fallback_provider:
            try:
                self.fallback_route = parse_provider_route(fallback_provider)
            except ValueError as e:
                logger.warning(f"Ignoring fallback_provider: {e}")
        self.timeout_s = timeout_ms / 1000.0
        self.slow_threshold_ms = slow_threshold_ms
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.context_window = context_window

        self._stats_lock = threading.Lock()
        self._total_validations = 0
        self._provider_stats: Dict[str, _LatencyStats] = {}
        self._constraint_stats: Dict[str, _LatencyStats] = {}

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def resolve_route(self, constraint_id: str) -> Optional[ModelRoute]:
        """Routed provider if usable, else the fallback provider, else None"""
        route = self.router.resolve(constraint_id)
        if route.provider in self.providers:
            return route
        if self.fallback_route and self.fallback_route.provider in self.providers:
            logger.debug(
                f"Provider {route.provider} unavailable for {constraint_id}; "
                f"using fallback {self.fallback_route}"
            )
            return self.fallback_route
        return None

    async def validate(
        self,
        constraint_id: str,
        regex_match: RegexMatch,
        context: ValidationContext,
    ) -> SemanticResult:
        """
        Confirm or reject a regex match.

        Returns:
            SemanticResult; ``fallback=True`` when the regex match is trusted
            without a model verdict

        Raises:
            asyncio.CancelledError: re-raised after recording a provider failure
        """
        with self._stats_lock:
            self._total_validations += 1

        key = make_key(constraint_id, context.content, context.file_path)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Semantic cache hit for {constraint_id}")
            return cached

        route = self.resolve_route(constraint_id)
        if route is None:
            logger.debug(f"No semantic provider for {constraint_id}; trusting the pattern")
            return SemanticResult.trust_pattern()

        if self.breaker.is_open(route.provider):
            logger.debug(f"Circuit breaker open for {route.provider}; trusting the pattern for {constraint_id}")
            return SemanticResult.trust_pattern(provider=route.provider, model=route.model)

        prompt = build_prompt(constraint_id, regex_match, context, window=self.context_window)
        provider = self.providers[route.provider]
        started = time.perf_counter()
        try:
            text = await asyncio.wait_for(
                provider.complete(
                    prompt,
                    model=route.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                ),
                timeout=self.timeout_s,
            )
            result = parse_response(text)
        except asyncio.CancelledError:
            self._record_failure(route, constraint_id, started)
            logger.debug(f"Semantic validation of {constraint_id} cancelled")
            raise
        except asyncio.TimeoutError:
            self._record_failure(route, constraint_id, started)
            logger.warning(
                f"Semantic validation of {constraint_id} via {route} timed out "
                f"after {self.timeout_s * 1000:.0f}ms; trusting the pattern"
            )
            return SemanticResult.trust_pattern(provider=route.provider, model=route.model)
        except ConstraintMonitorError as e:
            self._record_failure(route, constraint_id, started)
            logger.warning(f"Semantic validation of {constraint_id} failed: {e}; trusting the pattern")
            return SemanticResult.trust_pattern(provider=route.provider, model=route.model)
        except Exception as e:
            self._record_failure(route, constraint_id, started)
            logger.warning(
                f"Semantic validation of {constraint_id} raised {type(e).__name__}: {e}; trusting the pattern",
                exc_info=True,
            )
            return SemanticResult.trust_pattern(provider=route.provider, model=route.model)

        elapsed_ms = self._record_success(route, constraint_id, started)
        if elapsed_ms > self.slow_threshold_ms:
            logger.warning(
                f"Slow semantic validation: {elapsed_ms:.0f}ms for {constraint_id} via {route}"
            )

        result = dataclasses.replace(result, provider=route.provider, model=route.model)
        self.cache.put(key, result)
        return result

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _observe(self, route: ModelRoute, constraint_id: str, started: float, failed: bool) -> float:
        elapsed_ms = (time.perf_counter() - started) * 1000
        with self._stats_lock:
            for stats in (
                self._provider_stats.setdefault(route.provider, _LatencyStats()),
                self._constraint_stats.setdefault(constraint_id, _LatencyStats()),
            ):
                stats.calls += 1
                stats.total_ms += elapsed_ms
                if failed:
                    stats.failures += 1
        return elapsed_ms

    def _record_failure(self, route: ModelRoute, constraint_id: str, started: float) -> None:
        self._observe(route, constraint_id, started, failed=True)
        self.breaker.record_failure(route.provider)

    def _record_success(self, route: ModelRoute, constraint_id: str, started: float) -> float:
        self.breaker.record_success(route.provider)
        return self._observe(route, constraint_id, started, failed=False)

    def get_stats(self) -> Dict[str, Any]:
        with self._stats_lock:
            providers = {k: v.to_dict() for k, v in self._provider_stats.items()}
            constraints = {k: v.to_dict() for k, v in self._constraint_stats.items()}
            total = self._total_validations
        return {
            "total_validations": total,
            "cache": {
                "hits": self.cache.hits,
                "misses": self.cache.misses,
                "size": len(self.cache),
                "hit_rate": round(self.cache.hit_rate, 3),
            },
            "providers": providers,
            "constraints": constraints,
            "open_breakers": self.breaker.open_providers(),
            "configured_providers": sorted(self.providers),
        }

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Semantic validation cache cleared")


__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "DEFAULT_SLOW_THRESHOLD_MS",
    "SemanticValidator",
]
