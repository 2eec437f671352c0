"""
Dedup ledger backed by a Slack channel.

Each processed event is recorded by posting its idempotency key to the log
channel. Membership is a substring scan over the most recent messages only, so
events older than the scan window are invisible and could be processed again.
"""

import logging

from dealbell.infrastructure.slack_gateway import SlackGateway
from dealbell.utils.errors import alert_error

logger = logging.getLogger(__name__)

DEFAULT_SCAN_LIMIT = 100


class DedupLedger:
    """Append-only log of idempotency keys."""

    def __init__(self, gateway: SlackGateway, scan_limit: int = DEFAULT_SCAN_LIMIT):
        self.gateway = gateway
        self.scan_limit = scan_limit

    async def has_key(self, channel_id: str, key: str) -> bool:
        """
        Check whether any recent log message contains the key.

        Raises:
            PipelineAbort: if the log channel could not be read
        """
        result = await self.gateway.get_channel_messages(channel_id, self.scan_limit)
        if not result.ok:
            alert_error(result.error, raise_error=True)

        return any(key in (m.get("text") or "") for m in result.value or [])

    async def record(self, channel_id: str, key: str) -> bool:
        """
        Post the key to the log channel.

        Returns:
            True if the entry was written; failures are logged, not retried
        """
        result = await self.gateway.send_message_to_channel(channel_id, key)
        if not result.ok or not result.value:
            alert_error(result.error or f"Could not record {key}")
            return False

        logger.info(f"Recorded {key} in ledger")
        return True
