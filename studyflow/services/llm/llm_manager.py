"""
StudyFlow - LLM Manager Service

This module handles interaction with the Gemini text-completion API.
The rest of the pipeline only sees a "prompt in, text out" capability.
"""

import logging
from typing import Any

import httpx

from ...core.config import LLMSettings, settings
from ...core.exceptions import ConfigurationError, LLMError, ModelResponseError

logger = logging.getLogger(__name__)


class LLMResponse:
    """Represents a response from the completion service."""

    def __init__(
        self,
        content: str,
        model: str,
        usage: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None
    ):
        self.content = content
        self.model = model
        self.usage = usage or {}
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return self.content


class LLMManager:
    """
    Thin async client for the Gemini generateContent endpoint.
    """

    def __init__(
        self,
        llm_settings: LLMSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        """
        Initialize LLM manager.

        Args:
            llm_settings: Settings to use instead of the global ones
            transport: Optional httpx transport (used by tests)
        """
        self.settings = llm_settings or settings.llm
        self.transport = transport

    @property
    def is_available(self) -> bool:
        """Whether an API key is configured."""
        return self.settings.is_configured

    async def generate_response(self, prompt: str, timeout: float | None = None) -> LLMResponse:
        """
        Send a prompt to Gemini and return the first completion.

        Args:
            prompt: Prompt text
            timeout: Request timeout in seconds, defaults to the configured one

        Returns:
            LLM response

        Raises:
            ConfigurationError: If no API key is configured
            LLMError: If the request fails or the response is malformed
        """
        if not self.settings.gemini_api_key:
            raise ConfigurationError(
                "Gemini API key not configured (LLM_GEMINI_API_KEY environment variable)",
                error_code="LLM_NOT_CONFIGURED"
            )

        timeout = timeout or self.settings.request_timeout
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                response = await client.post(
                    self.settings.gemini_api_url,
                    params={"key": self.settings.gemini_api_key},
                    headers={"Content-Type": "application/json"},
                    json=payload
                )
                response.raise_for_status()

            result = response.json()
            content = result["candidates"][0]["content"]["parts"][0]["text"]

            return LLMResponse(
                content=content,
                model=self.settings.gemini_model,
                usage=result.get("usageMetadata", {}),
                metadata={"provider": "gemini"}
            )

        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini API error: {e.response.status_code} - {e.response.text}")
            raise ModelResponseError(
                f"Gemini API request failed: {e.response.status_code}",
                model_name=self.settings.gemini_model,
                response=e.response.text,
                cause=e
            )
        except httpx.RequestError as e:
            logger.error(f"Gemini API connection error: {e}")
            raise LLMError(f"Failed to connect to Gemini API: {e}", cause=e)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Invalid Gemini API response: {e}")
            raise ModelResponseError(
                f"Invalid Gemini API response: {e}",
                model_name=self.settings.gemini_model,
                cause=e
            )


# Global LLM manager instance
_llm_manager: LLMManager | None = None


def get_llm_manager() -> LLMManager:
    """Get the global LLM manager instance."""
    global _llm_manager
    if _llm_manager is None:
        _llm_manager = LLMManager()
    return _llm_manager
