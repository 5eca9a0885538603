"""
Shared fixtures.

The model client is always a fake: no test touches the network.
"""

import asyncio
import json
from typing import Optional

import pytest

from swingcoach.core.analysis.coach import SwingCoach
from swingcoach.core.analysis.models import EncodedPayload, VideoAsset


VALID_DOCUMENT = {
    "analysis": "Solid setup, but the hips stall in the downswing.",
    "issues": [
        "Early extension through impact",
        "Over-the-top move from the top",
    ],
    "drills": [
        {
            "name": "Chair drill",
            "purpose": "Keeps the hips back through impact",
            "steps": [
                "Set a chair behind you touching your glutes",
                "Make slow swings keeping contact through impact",
            ],
            "frequency": "10 swings before every range session",
        },
        {
            "name": "Headcover drill",
            "purpose": "Trains an inside path",
            "steps": ["Place a headcover outside the ball", "Swing without hitting it"],
            "frequency": "3 times a week",
        },
    ],
}


class FakeModelClient:
    """
    Stand-in for the Anthropic client.

    Returns a canned reply (or raises a canned error), records every
    call, and can be held open with `gate` to simulate a slow request.
    """

    def __init__(
        self,
        reply: str = json.dumps(VALID_DOCUMENT),
        error: Optional[Exception] = None,
    ) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[EncodedPayload, str]] = []
        self.gate: Optional[asyncio.Event] = None

    async def analyze_video(self, payload: EncodedPayload, prompt: str) -> str:
        self.calls.append((payload, prompt))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def valid_document() -> dict:
    return json.loads(json.dumps(VALID_DOCUMENT))


@pytest.fixture
def fake_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def coach(fake_client) -> SwingCoach:
    return SwingCoach(model_client=fake_client)


@pytest.fixture
def mp4_asset() -> VideoAsset:
    """A 10-byte fake video."""
    return VideoAsset.from_bytes(b"\x00\x00\x00\x18ftypmp", "video/mp4", "swing.mp4")


@pytest.fixture
def text_asset() -> VideoAsset:
    return VideoAsset.from_bytes(b"not a video", "text/plain", "notes.txt")
