# tests/semantic/test_circuit_breaker.py
from constraint_monitor.core.semantic import CircuitBreaker


class TestCircuitBreaker:
    def test_closed_until_threshold(self, clock):
        breaker = CircuitBreaker(threshold=5, reset_timeout_s=60, clock=clock)
        for _ in range(4):
            breaker.record_failure("groq")
        assert not breaker.is_open("groq")

        breaker.record_failure("groq")
        assert breaker.is_open("groq")
        assert breaker.open_providers() == ["groq"]

    def test_providers_are_independent(self, clock):
        breaker = CircuitBreaker(threshold=1, clock=clock)
        breaker.record_failure("groq")
        assert breaker.is_open("groq")
        assert not breaker.is_open("anthropic")

    def test_resets_after_timeout(self, clock):
        breaker = CircuitBreaker(threshold=5, reset_timeout_s=60, clock=clock)
        for _ in range(5):
            breaker.record_failure("groq")

        clock.advance(59)
        assert breaker.is_open("groq")
        clock.advance(1)
        assert not breaker.is_open("groq")
        assert breaker.failures("groq") == 0

    def test_success_clears_failures(self, clock):
        breaker = CircuitBreaker(threshold=5, clock=clock)
        for _ in range(4):
            breaker.record_failure("groq")
        breaker.record_success("groq")
        breaker.record_failure("groq")

        assert breaker.failures("groq") == 1
        assert not breaker.is_open("groq")
