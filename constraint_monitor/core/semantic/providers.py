# constraint_monitor/core/semantic/providers.py
"""
Model providers for semantic validation

Each provider wraps one vendor SDK behind ``complete(prompt, model, ...)``.
SDKs are imported lazily so a missing package only disables that provider.

Supports: Groq (OpenAI-compatible endpoint), Anthropic (Claude), Google (Gemini).
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from ..errors import ConstraintMonitorError

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"

# Environment variables checked in order per provider
API_KEY_ENV_VARS: Dict[str, tuple] = {
    "groq": ("GROQ_API_KEY", "GROK_API_KEY"),
    "anthropic": ("ANTHROPIC_API_KEY",),
    "gemini": ("GOOGLE_API_KEY", "GEMINI_API_KEY"),
}


def load_api_key(provider: str, explicit: Optional[str] = None) -> Optional[str]:
    if explicit:
        return explicit
    for env_var in API_KEY_ENV_VARS.get(provider, ()):
        value = os.environ.get(env_var)
        if value:
            return value
    return None


class SemanticProvider(ABC):
    """
    Abstract model provider

    Implementations return the raw text reply and raise
    ConstraintMonitorError.provider(...) on any vendor failure.
    """

    name: str = "unknown"

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        ...

    @property
    def available(self) -> bool:
        return True


class GroqProvider(SemanticProvider):
    """Groq through the OpenAI-compatible endpoint, JSON response mode"""

    name = "groq"

    def __init__(self, api_key: str, base_url: str = GROQ_BASE_URL):
        self._client: Any = None
        try:
            import openai

            self._client = openai.AsyncOpenAI(api_key=api_key, base_url=base_url)
        except ImportError:
            logger.error("openai SDK not installed; Groq provider disabled")

    @property
    def available(self) -> bool:
        return self._client is not None

    async def complete(self, prompt: str, *, model: str, max_tokens: int, temperature: float) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=temperature,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise ConstraintMonitorError.provider(
                f"Groq call failed: {type(e).__name__}: {e}", provider=self.name, model=model, cause=e
            ) from e
        return response.choices[0].message.content or ""


class AnthropicProvider(SemanticProvider):
    name = "anthropic"

    def __init__(self, api_key: str):
        self._client: Any = None
        try:
            import anthropic

            self._client = anthropic.AsyncAnthropic(api_key=api_key)
        except ImportError:
            logger.error("anthropic SDK not installed; Anthropic provider disabled")

    @property
    def available(self) -> bool:
        return self._client is not None

    async def complete(self, prompt: str, *, model: str, max_tokens: int, temperature: float) -> str:
        try:
            message = await self._client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise ConstraintMonitorError.provider(
                f"Anthropic call failed: {type(e).__name__}: {e}", provider=self.name, model=model, cause=e
            ) from e
        if not message.content:
            return ""
        return getattr(message.content[0], "text", "") or ""


class GeminiProvider(SemanticProvider):
    """
    Google Gemini through the SDK's async call

    No worker thread: a timeout or deadline cancels the request itself, so
    nothing outlives the hook's event loop.
    """

    name = "gemini"

    def __init__(self, api_key: str):
        self._genai: Any = None
        try:
            import google.generativeai as genai

            genai.configure(api_key=api_key)
            self._genai = genai
        except ImportError:
            logger.error("google-generativeai SDK not installed; Gemini provider disabled")

    @property
    def available(self) -> bool:
        return self._genai is not None

    async def complete(self, prompt: str, *, model: str, max_tokens: int, temperature: float) -> str:
        generative_model = self._genai.GenerativeModel(model)
        try:
            response = await generative_model.generate_content_async(
                prompt,
                generation_config={
                    "temperature": temperature,
                    "max_output_tokens": max_tokens,
                    "response_mime_type": "application/json",
                },
            )
            return response.text or ""
        except Exception as e:
            raise ConstraintMonitorError.provider(
                f"Gemini call failed: {type(e).__name__}: {e}", provider=self.name, model=model, cause=e
            ) from e


PROVIDER_CLASSES = {
    "groq": GroqProvider,
    "anthropic": AnthropicProvider,
    "gemini": GeminiProvider,
}


def build_providers(api_keys: Optional[Mapping[str, Optional[str]]] = None) -> Dict[str, SemanticProvider]:
    """
    Instantiate every provider that has a credential and an installed SDK.

    Args:
        api_keys: Explicit keys by provider name; environment variables are used otherwise
    """
    api_keys = api_keys or {}
    providers: Dict[str, SemanticProvider] = {}
    for name, provider_cls in PROVIDER_CLASSES.items():
        key = load_api_key(name, api_keys.get(name))
        if not key:
            logger.debug(f"No API key for {name}; provider unavailable")
            continue
        provider = provider_cls(key)
        if provider.available:
            providers[name] = provider
    if providers:
        logger.info(f"Semantic providers initialized: {', '.join(sorted(providers))}")
    else:
        logger.info("No semantic providers configured; semantic checks will trust the pattern")
    return providers


__all__ = [
    "GROQ_BASE_URL",
    "API_KEY_ENV_VARS",
    "load_api_key",
    "SemanticProvider",
    "GroqProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "PROVIDER_CLASSES",
    "build_providers",
]
