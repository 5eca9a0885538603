"""
Anthropic Claude API client wrapper.

This module provides a thin wrapper around the Anthropic SDK that:
1. Implements our VideoModelClient protocol
2. Handles API-specific details (content blocks, response shape)
3. Turns every SDK failure into RequestFailed
4. Enables easy mocking for tests

One call per analysis. Retries are switched off in the SDK so a user
action maps to exactly one outbound request.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import anthropic
from anthropic import AnthropicError, APIStatusError, RateLimitError

from swingcoach.core.analysis.coach import VideoModelClient
from swingcoach.core.analysis.errors import RequestFailed
from swingcoach.core.analysis.models import EncodedPayload


logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


@dataclass
class AnthropicConfig:
    """
    Configuration for the Anthropic client.

    The API key may be empty. That isn't a startup error; the first
    analysis simply fails with RequestFailed.
    """
    api_key: str = ""
    model: str = DEFAULT_MODEL
    max_tokens: int = 2000

    def __post_init__(self) -> None:
        if not self.model:
            raise ValueError("model is required")
        if self.max_tokens < 1:
            raise ValueError("max_tokens must be positive")


class AnthropicVideoClient(VideoModelClient):
    """
    Implementation of VideoModelClient using Claude.

    This class knows about Anthropic's API format but doesn't know
    about golf. It sends one video and one instruction, and hands
    back the text of the first content block.
    """

    def __init__(
        self,
        config: AnthropicConfig,
        client: Optional[anthropic.AsyncAnthropic] = None,
    ) -> None:
        self._config = config
        self._client = client

    def build_request(self, payload: EncodedPayload, prompt: str) -> dict[str, Any]:
        """
        Build the messages.create arguments.

        Claude expects:
        [
            {"type": "video", "source": {"type": "base64", "media_type": "video/mp4", "data": "..."}},
            {"type": "text", "text": "..."}
        ]
        """
        return {
            "model": self._config.model,
            "max_tokens": self._config.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "video",
                            "source": {
                                "type": "base64",
                                "media_type": payload.media_type,
                                "data": payload.data,
                            },
                        },
                        {
                            "type": "text",
                            "text": prompt,
                        },
                    ],
                }
            ],
        }

    async def analyze_video(self, payload: EncodedPayload, prompt: str) -> str:
        """Send the video for analysis and return the raw reply text."""
        request = self.build_request(payload, prompt)

        try:
            client = self._get_client()
            response = await client.messages.create(**request)
        except RateLimitError as e:
            logger.warning("Rate limit hit", extra={"error": str(e)})
            raise RequestFailed("API rate limit exceeded. Please try again later.") from e
        except APIStatusError as e:
            logger.error("API error", extra={"error": str(e), "status": e.status_code})
            raise RequestFailed(f"API error: {e.message}") from e
        except AnthropicError as e:
            logger.error("Anthropic request failed", extra={"error": str(e)})
            raise RequestFailed(f"Request failed: {e}") from e

        return self._extract_text_response(response)

    def _get_client(self) -> anthropic.AsyncAnthropic:
        # Built lazily so a missing key surfaces as a failed request,
        # not a crash at startup.
        if self._client is None:
            if not self._config.api_key:
                raise RequestFailed("Anthropic API key is not configured")
            self._client = anthropic.AsyncAnthropic(
                api_key=self._config.api_key,
                max_retries=0,
            )
        return self._client

    def _extract_text_response(self, response: Any) -> str:
        """Return the text of the first content block."""
        content = getattr(response, "content", None)
        if not content:
            raise RequestFailed("Model reply had no content")

        text = getattr(content[0], "text", None)
        if not isinstance(text, str) or not text:
            raise RequestFailed("Model reply had no text in its first content block")

        return text


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_anthropic_client(
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    max_tokens: Optional[int] = None,
) -> AnthropicVideoClient:
    """
    Factory function to create a configured client.

    Anything not passed in comes from application settings, which read
    ANTHROPIC_API_KEY and friends from the environment.
    """
    from swingcoach.config.settings import get_settings

    settings = get_settings()
    config = AnthropicConfig(
        api_key=api_key if api_key is not None else settings.anthropic_api_key,
        model=model or settings.anthropic_model,
        max_tokens=max_tokens or settings.anthropic_max_tokens,
    )
    return AnthropicVideoClient(config)
