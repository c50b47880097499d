"""Completion provider adapters behind one non-streaming interface.

Supports:
- Groq (default) through its OpenAI-compatible chat completions API
- Google Gemini

Each synthesis is a single call. Client-side retries are disabled so a
failed call surfaces immediately as ``SynthesisFailure``.
"""

from abc import ABC, abstractmethod
from typing import Any

import openai
from google import genai
from google.genai import types as genai_types
from openai import AsyncOpenAI

from app.core.config import get_settings
from app.core.exceptions import SynthesisFailure
from app.core.logging import get_logger
from app.services.prompts import SynthesisRequest

logger = get_logger(__name__)


class CompletionAdapter(ABC):
    """Abstract base class for completion provider adapters."""

    provider_name: str = "base"

    @abstractmethod
    async def complete(self, request: SynthesisRequest, model: str) -> str:
        """Return the raw text content of a single completion."""
        ...

    async def close(self) -> None:
        """Release provider connections."""
        return None


class OpenAICompatibleAdapter(CompletionAdapter):
    """Adapter for OpenAI-compatible chat completion endpoints (Groq)."""

    provider_name = "groq"

    def __init__(self, api_key: str | None = None, base_url: str | None = None):
        settings = get_settings()
        self.api_key = api_key or settings.groq_api_key

        if not self.api_key:
            logger.warning("Groq API key not configured")

        self.client = AsyncOpenAI(
            api_key=self.api_key or "not-configured",
            base_url=base_url or settings.groq_base_url,
            max_retries=0,
        )

    async def complete(self, request: SynthesisRequest, model: str) -> str:
        if not self.api_key:
            raise SynthesisFailure(self.provider_name, "API key not configured")

        try:
            completion = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": request.system_prompt},
                    {"role": "user", "content": request.user_prompt},
                ],
                temperature=request.temperature,
            )
        except openai.APIStatusError as e:
            logger.error(
                "Completion request rejected",
                provider=self.provider_name,
                status_code=e.status_code,
                operation=request.operation,
            )
            raise SynthesisFailure(self.provider_name, f"HTTP {e.status_code}") from e
        except openai.OpenAIError as e:
            logger.error(
                "Completion request failed",
                provider=self.provider_name,
                error=str(e),
                operation=request.operation,
            )
            raise SynthesisFailure(self.provider_name, str(e)) from e

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    async def close(self) -> None:
        await self.client.close()


class GeminiAdapter(CompletionAdapter):
    """Adapter for Google Gemini models."""

    provider_name = "gemini"

    def __init__(self, api_key: str | None = None):
        settings = get_settings()
        self.api_key = api_key or settings.gemini_api_key

        if not self.api_key:
            logger.warning("Gemini API key not configured")

        self.client = genai.Client(api_key=self.api_key or "not-configured")

    async def complete(self, request: SynthesisRequest, model: str) -> str:
        if not self.api_key:
            raise SynthesisFailure(self.provider_name, "API key not configured")

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=request.user_prompt,
                config=genai_types.GenerateContentConfig(
                    system_instruction=request.system_prompt,
                    temperature=request.temperature,
                    response_mime_type="application/json",
                ),
            )
        except Exception as e:
            logger.error(
                "Gemini completion error",
                error=str(e),
                model=model,
                operation=request.operation,
            )
            raise SynthesisFailure(self.provider_name, str(e)) from e

        return response.text or ""


class LLMService:
    """Service class to manage completion adapters."""

    def __init__(self, provider: str | None = None) -> None:
        settings = get_settings()
        self.provider = provider or settings.llm_provider
        self._adapters: dict[str, CompletionAdapter] = {}

    def get_adapter(self, provider: str) -> CompletionAdapter:
        """Get or create an adapter for the specified provider."""
        if provider not in self._adapters:
            if provider == "groq":
                self._adapters[provider] = OpenAICompatibleAdapter()
            elif provider == "gemini":
                self._adapters[provider] = GeminiAdapter()
            else:
                raise ValueError(f"Unknown completion provider: {provider}")

        return self._adapters[provider]

    def model_for(self, provider: str) -> str:
        settings = get_settings()
        return settings.gemini_model if provider == "gemini" else settings.llm_model

    def prewarm_adapters(self) -> None:
        """Pre-initialize the configured adapter to avoid first-request latency."""
        try:
            self.get_adapter(self.provider)
            logger.info("Pre-warmed completion adapter", provider=self.provider)
        except Exception as e:
            logger.warning("Failed to pre-warm completion adapter", provider=self.provider, error=str(e))

    async def complete(self, request: SynthesisRequest) -> str:
        """Run one synthesis call against the configured provider."""
        adapter = self.get_adapter(self.provider)
        return await adapter.complete(request, self.model_for(self.provider))

    def describe(self) -> dict[str, Any]:
        return {"provider": self.provider, "model": self.model_for(self.provider)}

    async def close(self) -> None:
        for adapter in self._adapters.values():
            await adapter.close()
        self._adapters.clear()


# Global LLM service instance
_llm_service: LLMService | None = None


def get_llm_service() -> LLMService:
    """Get or create the global LLM service instance."""
    global _llm_service

    if _llm_service is None:
        _llm_service = LLMService()

    return _llm_service
