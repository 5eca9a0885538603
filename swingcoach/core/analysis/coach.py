"""
Golf coaching prompt and request logic.

This module holds the "coaching brain": the instruction we send with
every swing video. It's framework-agnostic and doesn't know about HTTP
or the Anthropic SDK.

The prompt is here, not in config, because it's core business logic.
Changing it changes what the product does, and the extractor depends on
the document shape it asks for.
"""

import logging
from typing import Protocol

from .errors import RequestFailed
from .models import EncodedPayload


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class VideoModelClient(Protocol):
    """
    Interface for video-capable LLM clients.

    The coach doesn't know or care whether it's talking to Claude or
    to a fake in a test. It just needs something that can watch a video
    and answer in text.
    """

    async def analyze_video(self, payload: EncodedPayload, prompt: str) -> str:
        """Send one video with one instruction and return the raw reply text."""
        ...


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

COACHING_PROMPT = """You are a professional golf coach analyzing a golf swing video. Please provide:

1. Swing Analysis: Detailed breakdown of the swing mechanics (setup, backswing, downswing, follow-through, tempo, weight transfer)
2. Key Issues: 2-3 specific problems you observe
3. Recommended Drills: 3 practical drills to address these issues, with clear step-by-step instructions for each

Format your response as JSON with this structure:
{
  "analysis": "detailed analysis text",
  "issues": ["issue 1", "issue 2", "issue 3"],
  "drills": [
    {
      "name": "drill name",
      "purpose": "what it fixes",
      "steps": ["step 1", "step 2", "step 3"],
      "frequency": "how often to practice"
    }
  ]
}

Only return the JSON, no other text."""


# ---------------------------------------------------------------------------
# Coach Service
# ---------------------------------------------------------------------------

class SwingCoach:
    """
    Sends a swing video to the model with the coaching instruction.

    Stateless beyond its client. One call to request_report is exactly
    one outbound request; there is no retry.
    """

    def __init__(self, model_client: VideoModelClient, prompt: str = COACHING_PROMPT) -> None:
        self._model_client = model_client
        self._prompt = prompt

    async def request_report(self, payload: EncodedPayload) -> str:
        """Return the model's raw reply for this payload, unmodified."""
        logger.info(
            "Requesting swing analysis",
            extra={"media_type": payload.media_type, "encoded_length": len(payload.data)},
        )

        try:
            raw_response = await self._model_client.analyze_video(payload, self._prompt)
        except RequestFailed:
            raise
        except Exception as e:
            # Clients are supposed to translate their own errors; anything
            # that slips through is still a failed request.
            logger.error("Model client raised", extra={"error": str(e)})
            raise RequestFailed(f"Analysis request failed: {e}") from e

        if not raw_response:
            raise RequestFailed("Model returned an empty reply")

        return raw_response
