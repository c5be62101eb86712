# tests/conftest.py
"""
Shared fixtures: asyncio backend for anyio, a manual clock and fake model providers.
"""

import asyncio

import pytest

from constraint_monitor.core.semantic import SemanticProvider


PROVIDER_ENV_VARS = (
    "GROQ_API_KEY",
    "GROK_API_KEY",
    "ANTHROPIC_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_API_KEY",
)

CONFIRM_REPLY = '{"isViolation": true, "confidence": 0.9, "reasoning": "Real secret in source"}'
REJECT_REPLY = '{"isViolation": false, "confidence": 0.8, "reasoning": "Test fixture, not a real credential"}'


class ManualClock:
    """Monotonic clock advanced by hand"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider(SemanticProvider):
    """Records calls; replies with a fixed text, raises, or stalls"""

    def __init__(self, name="groq", reply=CONFIRM_REPLY, error=None, delay=0.0, on_call=None):
        self.name = name
        self.reply = reply
        self.error = error
        self.delay = delay
        self.on_call = on_call
        self.calls = []

    async def complete(self, prompt, *, model, max_tokens, temperature):
        self.calls.append({
            "prompt": prompt,
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if self.on_call:
            self.on_call()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def no_provider_keys(monkeypatch):
    """No credentials in the environment: nothing can reach a real provider"""
    for var in PROVIDER_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch, no_provider_keys):
    """Empty working directory and no config-file environment variables"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CONSTRAINT_MONITOR_CONFIG", raising=False)
    monkeypatch.delenv("CODING_REPO", raising=False)
    return tmp_path
