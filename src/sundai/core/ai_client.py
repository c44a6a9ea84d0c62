"""
Azure OpenAI client wrapper for the assistant and voice transcription.

Connects directly to Azure OpenAI via AsyncAzureOpenAI using the deployment
names from configuration. Retries and fallbacks are the caller's business.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from openai import AsyncAzureOpenAI

from .config import AzureOpenAISettings, get_settings
from .exceptions import ConfigurationError


class AzureAIClient:
    """Thin wrapper around AsyncAzureOpenAI for chat and Whisper calls."""

    def __init__(self, settings: Optional[AzureOpenAISettings] = None) -> None:
        """
        Initialize AzureAIClient.

        If ``settings`` is omitted, values are loaded from application settings.
        """
        settings = settings or get_settings().azure_openai

        if not settings.is_configured:
            raise ConfigurationError(
                "Azure OpenAI endpoint and API key must be configured. "
                "Set AZURE_OPENAI_ENDPOINT and AZURE_OPENAI_API_KEY."
            )
        if not settings.deployment_name:
            raise ConfigurationError(
                "Azure OpenAI deployment name is required. Set AZURE_OPENAI_DEPLOYMENT_NAME."
            )

        self._deployment_name = settings.deployment_name
        self._whisper_deployment_name = settings.whisper_deployment_name

        # Azure SDK does not expect a trailing slash
        self._client = AsyncAzureOpenAI(
            api_key=settings.api_key,
            api_version=settings.api_version,
            azure_endpoint=settings.endpoint.rstrip("/"),
        )

    async def chat(
        self,
        messages: Sequence[Dict[str, str]],
        *,
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs: Any,
    ):
        """
        Generic chat completion helper.

        Args:
            messages: OpenAI chat messages list.
            model: Optional deployment name override. Defaults to configured deployment.
            temperature: Sampling temperature.
            max_tokens: Optional max tokens for the response.
            **kwargs: Passed directly to Azure OpenAI SDK.
        """
        return await self._client.chat.completions.create(
            model=model or self._deployment_name,
            messages=list(messages),
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )

    async def transcribe_whisper(self, file: Any, *, language: Optional[str] = None, **kwargs: Any):
        """
        Transcribe audio using an Azure OpenAI Whisper deployment.

        Args:
            file: Binary file-like object opened in rb mode.
            language: Optional language code.
        """
        if not self._whisper_deployment_name:
            raise ConfigurationError(
                "Azure OpenAI Whisper deployment name is required. Set AZURE_OPENAI_WHISPER_DEPLOYMENT_NAME."
            )
        extra = {"language": language} if language else {}
        return await self._client.audio.transcriptions.create(
            model=self._whisper_deployment_name,
            file=file,
            **extra,
            **kwargs,
        )

    async def close(self) -> None:
        await self._client.close()


__all__ = ["AzureAIClient"]
