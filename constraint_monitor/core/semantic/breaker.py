# constraint_monitor/core/semantic/breaker.py
"""
Per-provider circuit breaker

A provider's state is created on its first failure and dropped on success.
The breaker is open while ``consecutive_failures >= threshold`` and the last
failure is younger than ``reset_timeout_s``. Once the timeout has elapsed the
counter is reset and the provider is tried again.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 5
DEFAULT_RESET_TIMEOUT_S = 60.0


@dataclass
class CircuitBreakerState:
    consecutive_failures: int = 0
    last_failure_at: float = 0.0


class CircuitBreaker:
    def __init__(
        self,
        threshold: int = DEFAULT_THRESHOLD,
        reset_timeout_s: float = DEFAULT_RESET_TIMEOUT_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.threshold = max(1, int(threshold))
        self.reset_timeout_s = float(reset_timeout_s)
        self._clock = clock
        self._states: Dict[str, CircuitBreakerState] = {}
        self._lock = threading.Lock()

    def is_open(self, provider: str) -> bool:
        with self._lock:
            state = self._states.get(provider)
            if state is None or state.consecutive_failures < self.threshold:
                return False
            if self._clock() - state.last_failure_at < self.reset_timeout_s:
                return True
            # Cooldown elapsed: half-open, give the provider another chance
            state.consecutive_failures = 0
            logger.info(f"Circuit breaker for {provider} reset after {self.reset_timeout_s:.0f}s")
            return False

    def record_failure(self, provider: str) -> int:
        """Count a failure; returns the provider's consecutive failure count"""
        with self._lock:
            state = self._states.setdefault(provider, CircuitBreakerState())
            state.consecutive_failures += 1
            state.last_failure_at = self._clock()
            failures = state.consecutive_failures
        if failures == self.threshold:
            logger.warning(f"Circuit breaker opened for {provider} after {failures} consecutive failures")
        return failures

    def record_success(self, provider: str) -> None:
        with self._lock:
            self._states.pop(provider, None)

    def failures(self, provider: str) -> int:
        with self._lock:
            state = self._states.get(provider)
            return state.consecutive_failures if state else 0

    def open_providers(self) -> List[str]:
        now = self._clock()
        with self._lock:
            return sorted(
                name for name, s in self._states.items()
                if s.consecutive_failures >= self.threshold
                and now - s.last_failure_at < self.reset_timeout_s
            )

    def reset(self) -> None:
        with self._lock:
            self._states.clear()


__all__ = [
    "CircuitBreakerState",
    "CircuitBreaker",
]
