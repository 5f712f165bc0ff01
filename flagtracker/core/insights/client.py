"""OpenAI-compatible chat completion client used for weekly summaries."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class InsightError(Exception):
    """Base exception for summary generation."""

    pass


class MissingCredentialError(InsightError):
    """Raised when no API key is configured."""

    pass


class InsightProviderError(InsightError):
    """Raised when the remote call fails or returns an unusable body."""

    pass


class ChatCompletionClient:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: int = 60,
        reasoning: bool = True,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.reasoning = reasoning
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config) -> "ChatCompletionClient":
        return cls(
            api_key=config.get("INSIGHTS_API_KEY", ""),
            base_url=config.get("INSIGHTS_BASE_URL", "https://openrouter.ai/api/v1"),
            model=config.get("INSIGHTS_MODEL", "google/gemini-3-pro-preview"),
            timeout=int(config.get("INSIGHTS_TIMEOUT_SECONDS", 60)),
            reasoning=bool(config.get("INSIGHTS_REASONING", True)),
        )

    def complete(self, system: str, user: str) -> Optional[str]:
        """
        Send one system + user message pair and return the reply text.

        Returns:
            The assistant message content, or None when the provider sent an
            empty message.

        Raises:
            MissingCredentialError: If no API key is configured
            InsightProviderError: On network, HTTP, or response-shape errors
        """
        if not self.api_key:
            raise MissingCredentialError("API key is missing")

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }
        if self.reasoning:
            # OpenRouter extension; ignored by providers that do not support it
            payload["reasoning"] = {"enabled": True}

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            resp = self.session.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            logger.error(f"Chat completion request failed: {e}")
            raise InsightProviderError(f"Chat completion failed: {e}") from e
        except ValueError as e:
            logger.error(f"Chat completion returned invalid JSON: {e}")
            raise InsightProviderError("Chat completion returned invalid JSON") from e

        try:
            return data["choices"][0]["message"].get("content")
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            logger.error(f"Unexpected chat completion payload: {data!r}")
            raise InsightProviderError("Unexpected chat completion payload") from e
