# tests/semantic/test_providers.py
"""
Provider clients against stand-in SDK objects
"""

import asyncio
import json
import time
from types import SimpleNamespace

import pytest

from constraint_monitor.config.modules import EnforcementConfig
from constraint_monitor.core.engine import ActionDescriptor, ConstraintEngine
from constraint_monitor.core.rules import default_ruleset
from constraint_monitor.core.semantic import FALLBACK_REASONING, ModelRouter, SemanticValidator
from constraint_monitor.core.semantic.providers import GeminiProvider, build_providers
from constraint_monitor.hooks import EXIT_BLOCK, HookAdapter

pytest.importorskip("google.generativeai")

VERDICT = '{"isViolation": true, "confidence": 0.9, "reasoning": "dynamic code"}'
EVAL_ON_GEMINI = {"no-eval-usage": "gemini/gemini-1.5-flash"}


def _fake_genai(delay=0.0, reply=VERDICT):
    calls = []

    class Model:
        def __init__(self, model_name):
            self.model_name = model_name

        def generate_content(self, prompt, **kwargs):
            # Blocking call; must never be used from the event loop
            time.sleep(delay)
            return SimpleNamespace(text=reply)

        async def generate_content_async(self, prompt, **kwargs):
            calls.append({"model": self.model_name, **kwargs})
            await asyncio.sleep(delay)
            return SimpleNamespace(text=reply)

    return SimpleNamespace(GenerativeModel=Model, calls=calls)


@pytest.fixture
def gemini(monkeypatch):
    def factory(**kwargs):
        provider = GeminiProvider("test-key")
        monkeypatch.setattr(provider, "_genai", _fake_genai(**kwargs))
        return provider
    return factory


class TestGemini:
    @pytest.mark.anyio
    async def test_reply_text_and_generation_config(self, gemini):
        provider = gemini()

        text = await provider.complete("prompt", model="gemini-1.5-flash", max_tokens=200, temperature=0.1)

        assert json.loads(text)["isViolation"] is True
        call = provider._genai.calls[0]
        assert call["model"] == "gemini-1.5-flash"
        assert call["generation_config"]["max_output_tokens"] == 200
        assert call["generation_config"]["response_mime_type"] == "application/json"

    @pytest.mark.anyio
    async def test_stalled_call_is_abandoned_at_timeout(self, gemini):
        validator = SemanticValidator(
            {"gemini": gemini(delay=3.0)},
            router=ModelRouter(EVAL_ON_GEMINI),
            timeout_ms=100,
        )
        engine = ConstraintEngine(default_ruleset(), validator)

        started = time.perf_counter()
        result = await engine.evaluate(ActionDescriptor.prompt("eval(userInput)"))

        assert time.perf_counter() - started < 1.0
        assert result.get_violation("no-eval-usage").semantic_reasoning == FALLBACK_REASONING
        assert validator.breaker.failures("gemini") == 1

    def test_hook_returns_within_deadline(self, gemini):
        validator = SemanticValidator(
            {"gemini": gemini(delay=3.0)},
            router=ModelRouter(EVAL_ON_GEMINI),
            timeout_ms=300,
        )
        adapter = HookAdapter(ConstraintEngine(default_ruleset(), validator), EnforcementConfig(deadline_ms=500))
        payload = json.dumps({"tool_name": "Write", "tool_input": {"file_path": "a.js", "content": "eval(x)"}})

        started = time.perf_counter()
        outcome = adapter.handle_sync(payload)

        assert outcome.exit_code == EXIT_BLOCK
        assert time.perf_counter() - started < 2.0


class TestBuildProviders:
    def test_no_credentials_no_providers(self, no_provider_keys):
        assert build_providers() == {}

    def test_explicit_key_enables_provider(self, no_provider_keys):
        providers = build_providers({"gemini": "test-key"})
        assert set(providers) == {"gemini"}
