"""
Unit tests for the Slack-channel dedup ledger.
"""

import pytest

from dealbell.domain.closed_won import Channel
from dealbell.usecases.dedup_ledger import DedupLedger
from dealbell.utils.errors import PipelineAbort
from tests.fakes import FakeSlackGateway


@pytest.fixture
def log_gateway() -> FakeSlackGateway:
    return FakeSlackGateway([Channel(name="bot-processed", id="CLOG")])


class TestHasKey:
    """Tests for DedupLedger.has_key."""

    @pytest.mark.asyncio
    async def test_exact_entry_is_found(self, log_gateway):
        log_gateway.add_message("CLOG", {"text": "Alice:Acme:1000", "ts": "1"})

        assert await DedupLedger(log_gateway).has_key("CLOG", "Alice:Acme:1000") is True

    @pytest.mark.asyncio
    async def test_unrelated_entries(self, log_gateway):
        log_gateway.add_message("CLOG", {"text": "Bob:WidgetCo:500", "ts": "1"})
        log_gateway.add_message("CLOG", {"text": "hello", "ts": "2"})

        assert await DedupLedger(log_gateway).has_key("CLOG", "Alice:Acme:1000") is False

    @pytest.mark.asyncio
    async def test_substring_match(self, log_gateway):
        log_gateway.add_message("CLOG", {"text": "processed Alice:Acme:1000 ok", "ts": "1"})

        assert await DedupLedger(log_gateway).has_key("CLOG", "Alice:Acme:1000") is True

    @pytest.mark.asyncio
    async def test_messages_without_text_are_ignored(self, log_gateway):
        log_gateway.add_message("CLOG", {"ts": "1", "subtype": "channel_join"})

        assert await DedupLedger(log_gateway).has_key("CLOG", "Alice:Acme:1000") is False

    @pytest.mark.asyncio
    async def test_only_recent_window_is_scanned(self, log_gateway):
        log_gateway.add_message("CLOG", {"text": "Alice:Acme:1000", "ts": "1"})
        for i in range(3):
            log_gateway.add_message("CLOG", {"text": f"Other:Deal:{i}", "ts": str(i + 2)})

        ledger = DedupLedger(log_gateway, scan_limit=3)

        assert await ledger.has_key("CLOG", "Alice:Acme:1000") is False
        assert log_gateway.history_calls[-1] == ("CLOG", 3)

    @pytest.mark.asyncio
    async def test_read_failure_aborts(self, log_gateway):
        log_gateway.history_errors["CLOG"] = "Error retrieving messages: not_in_channel"

        with pytest.raises(PipelineAbort):
            await DedupLedger(log_gateway).has_key("CLOG", "Alice:Acme:1000")


class TestRecord:
    """Tests for DedupLedger.record."""

    @pytest.mark.asyncio
    async def test_posts_key_verbatim(self, log_gateway):
        assert await DedupLedger(log_gateway).record("CLOG", "Alice:Acme:1000") is True
        assert log_gateway.posts == [("CLOG", "Alice:Acme:1000")]

    @pytest.mark.asyncio
    async def test_post_failure_returns_false(self, log_gateway, caplog):
        log_gateway.post_error = "Error sending message: channel_not_found"

        assert await DedupLedger(log_gateway).record("CLOG", "Alice:Acme:1000") is False
        assert "channel_not_found" in caplog.text
