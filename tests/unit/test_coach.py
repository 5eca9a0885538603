"""
Unit tests for the SwingCoach request step.
"""

import pytest

from swingcoach.core.analysis.coach import COACHING_PROMPT, SwingCoach
from swingcoach.core.analysis.errors import RequestFailed
from swingcoach.core.analysis.models import EncodedPayload


@pytest.fixture
def payload() -> EncodedPayload:
    return EncodedPayload(media_type="video/mp4", data="AAAAGGZ0eXBtcA==")


class TestCoachingPrompt:

    def test_prompt_asks_for_json_only(self):
        assert "golf coach" in COACHING_PROMPT
        assert "Only return the JSON" in COACHING_PROMPT

    @pytest.mark.parametrize("field", ['"analysis"', '"issues"', '"drills"', '"steps"', '"frequency"'])
    def test_prompt_names_every_field(self, field):
        assert field in COACHING_PROMPT


class TestRequestReport:

    @pytest.mark.asyncio
    async def test_returns_raw_reply_unmodified(self, fake_client, payload):
        fake_client.reply = "  Sure! {\"analysis\": \"x\"}  "
        coach = SwingCoach(model_client=fake_client)

        raw = await coach.request_report(payload)

        assert raw == "  Sure! {\"analysis\": \"x\"}  "

    @pytest.mark.asyncio
    async def test_sends_one_request_with_prompt(self, fake_client, payload):
        coach = SwingCoach(model_client=fake_client)

        await coach.request_report(payload)

        assert len(fake_client.calls) == 1
        sent_payload, sent_prompt = fake_client.calls[0]
        assert sent_payload is payload
        assert sent_prompt == COACHING_PROMPT

    @pytest.mark.asyncio
    async def test_empty_reply_is_request_failed(self, fake_client, payload):
        fake_client.reply = ""
        coach = SwingCoach(model_client=fake_client)

        with pytest.raises(RequestFailed, match="empty"):
            await coach.request_report(payload)

    @pytest.mark.asyncio
    async def test_transport_error_becomes_request_failed(self, fake_client, payload):
        fake_client.error = ConnectionError("connection reset")
        coach = SwingCoach(model_client=fake_client)

        with pytest.raises(RequestFailed, match="connection reset") as exc_info:
            await coach.request_report(payload)

        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_request_failed_passes_through(self, fake_client, payload):
        fake_client.error = RequestFailed("API error: overloaded")
        coach = SwingCoach(model_client=fake_client)

        with pytest.raises(RequestFailed, match="overloaded"):
            await coach.request_report(payload)
