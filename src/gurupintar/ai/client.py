"""
AI Client with Provider Fallback

Providers are tried in order: Anthropic, then Grok (OpenAI-compatible). When
every configured provider fails the caller gets None and shows its own
Indonesian fallback text instead.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

ANTHROPIC = "anthropic"
GROK = "grok"

GROK_BASE_URL = "https://api.x.ai/v1"
GROK_MODEL = "grok-3"


class AIClient:
    """AI client that tries each configured provider in turn."""

    def __init__(
        self,
        *,
        anthropic_api_key: str | None = None,
        grok_api_key: str | None = None,
        grok_model: str = GROK_MODEL,
        timeout: float = 60.0,
    ):
        """Initialize AI client.

        Args:
            anthropic_api_key: Anthropic API key (tried first)
            grok_api_key: xAI API key (tried second)
            grok_model: Model used on the xAI endpoint, whatever the requested model
            timeout: Per-request timeout in seconds
        """
        self.anthropic_api_key = anthropic_api_key
        self.grok_api_key = grok_api_key
        self.grok_model = grok_model
        self.timeout = timeout

    @property
    def providers(self) -> list[str]:
        """Names of the providers with an API key, in the order they are tried."""
        keys = [(ANTHROPIC, self.anthropic_api_key), (GROK, self.grok_api_key)]
        return [name for name, key in keys if key]

    @property
    def is_configured(self) -> bool:
        return bool(self.providers)

    def generate_completion(
        self,
        *,
        model: str,
        system: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> str | None:
        """Generate a completion with the first provider that answers.

        Args:
            model: Anthropic model identifier (Grok always uses ``grok_model``)
            system: System prompt
            messages: Conversation messages (``role`` / ``content``)
            max_tokens: Maximum response tokens
            temperature: Sampling temperature

        Returns:
            Generated text, or None if every provider failed or none is configured
        """
        attempts: dict[str, Callable[..., str | None]] = {
            ANTHROPIC: self._try_anthropic,
            GROK: self._try_grok,
        }

        for position, name in enumerate(self.providers):
            result = attempts[name](
                model=model,
                system=system,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
            if result is not None:
                suffix = " (fallback)" if position else ""
                logger.info(f"AI completion successful via {name}{suffix}")
                return result

        if self.providers:
            logger.warning(f"All AI providers failed: {', '.join(self.providers)}")
        else:
            logger.warning("No AI provider configured")
        return None

    def _try_anthropic(
        self,
        *,
        model: str,
        system: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        try:
            from anthropic import Anthropic

            client = Anthropic(api_key=self.anthropic_api_key, timeout=self.timeout)

            response = client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=list(messages),  # type: ignore[arg-type]
            )

            texts = [block.text for block in response.content if hasattr(block, "text")]
            if texts:
                return "".join(texts)

            logger.warning("Anthropic response had no text content")
            return None

        except Exception as e:
            logger.warning(f"Anthropic API error: {e}")
            return None

    def _try_grok(
        self,
        *,
        model: str,  # noqa: ARG002
        system: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        try:
            from openai import OpenAI

            client = OpenAI(api_key=self.grok_api_key, base_url=GROK_BASE_URL, timeout=self.timeout)

            openai_messages: list[dict[str, Any]] = [{"role": "system", "content": system}]
            openai_messages.extend(messages)

            response = client.chat.completions.create(
                model=self.grok_model,
                messages=openai_messages,  # type: ignore[arg-type]
                max_tokens=max_tokens,
                temperature=temperature,
            )

            if response.choices and response.choices[0].message.content:
                return response.choices[0].message.content

            logger.warning("Grok response had no content")
            return None

        except Exception as e:
            logger.warning(f"Grok API error: {e}")
            return None


def get_ai_client() -> AIClient:
    """Build an AI client from the configured API keys."""
    from gurupintar.config import settings

    return AIClient(
        anthropic_api_key=settings.ANTHROPIC_API_KEY or None,
        grok_api_key=settings.GROK_API_KEY or None,
        grok_model=settings.GROK_MODEL,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )
