"""
Closed-won pipeline: finds the latest CRM announcement, rings the bell once per
unique deal and records it in the ledger.

A run moves through
START -> RESOLVE_CHANNELS -> FETCH_SOURCE_MESSAGES -> FILTER_AND_PARSE ->
CHECK_DEDUP -> NOTIFY -> RECORD -> DONE, leaving early when there is nothing to do.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from dealbell.config.settings import Settings
from dealbell.domain.closed_won import PipelineOutcome, PipelineState
from dealbell.domain.message_filters import filter_messages, select_filter
from dealbell.infrastructure.device_notifier import DeviceNotifier
from dealbell.infrastructure.slack_gateway import SlackGateway
from dealbell.parsing.event_parser import build_idempotency_key, parse_closed_won
from dealbell.usecases.channel_resolver import ChannelResolver
from dealbell.usecases.dedup_ledger import DedupLedger
from dealbell.utils.errors import PipelineAbort, alert_error, gather_settled, invariant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    """Process-wide configuration passed into each run."""

    closed_won_channel_name: str = "closed-won"
    processed_messages_channel_name: str = "bot-processed"
    source_message_limit: int = 10
    crm_bot_username: str = "HubSpot"
    is_dev: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        return cls(
            closed_won_channel_name=settings.closed_won_channel_name,
            processed_messages_channel_name=settings.processed_messages_channel_name,
            source_message_limit=settings.source_message_limit,
            crm_bot_username=settings.crm_bot_username,
            is_dev=settings.is_dev,
        )


class ClosedWonPipeline:
    """Orchestrates channel resolution, parsing, dedup, notification and recording."""

    def __init__(
        self,
        gateway: SlackGateway,
        notifier: DeviceNotifier,
        config: PipelineConfig,
        ledger: Optional[DedupLedger] = None,
        resolver: Optional[ChannelResolver] = None,
    ):
        self.gateway = gateway
        self.notifier = notifier
        self.config = config
        self.ledger = ledger or DedupLedger(gateway)
        self.resolver = resolver or ChannelResolver(gateway)
        self._filter = select_filter(config.is_dev, config.crm_bot_username)

    async def run(self, event: Any = None) -> PipelineOutcome:
        """
        Handle one trigger.

        Run-level failures are logged and reported in the outcome rather than raised.

        Args:
            event: Opaque trigger payload, only logged in development

        Returns:
            PipelineOutcome describing where the run ended
        """
        if self.config.is_dev:
            logger.info(f"received event {event}")

        try:
            return await self._run()
        except PipelineAbort as e:
            logger.error(f"Run aborted: {e}")
            return PipelineOutcome(state=PipelineState.ABORTED, error=str(e))

    async def _run(self) -> PipelineOutcome:
        # RESOLVE_CHANNELS: both lookups settle before either failure is acted on
        logger.debug(f"State: {PipelineState.RESOLVE_CHANNELS.value}")
        closed_won_channel_id, processed_channel_id = await gather_settled(
            self.resolver.resolve_required(self.config.closed_won_channel_name),
            self.resolver.resolve_or_create(self.config.processed_messages_channel_name),
        )
        invariant(closed_won_channel_id, "closed_won_channel_id")
        invariant(processed_channel_id, "processed_channel_id")

        # FETCH_SOURCE_MESSAGES
        logger.debug(f"State: {PipelineState.FETCH_SOURCE_MESSAGES.value}")
        result = await self.gateway.get_channel_messages(
            closed_won_channel_id, self.config.source_message_limit
        )
        if not result.ok:
            alert_error(result.error, raise_error=True)

        # FILTER_AND_PARSE
        logger.debug(f"State: {PipelineState.FILTER_AND_PARSE.value}")
        messages = filter_messages(result.value or [], self._filter)
        parsed = parse_closed_won(messages[0].get("text")) if messages else None
        if parsed is None:
            logger.info("No closed won message found... exiting")
            return PipelineOutcome(state=PipelineState.NO_ACTIONABLE_MESSAGE)

        # CHECK_DEDUP
        key = build_idempotency_key(parsed)
        logger.debug(f"State: {PipelineState.CHECK_DEDUP.value} ({key})")
        if await self.ledger.has_key(processed_channel_id, key):
            logger.info(f"Already processed {key}... exiting")
            return PipelineOutcome(state=PipelineState.ALREADY_PROCESSED, idempotency_key=key)

        # NOTIFY: a failed notification leaves the event unrecorded so a later run retries it
        logger.debug(f"State: {PipelineState.NOTIFY.value}")
        if not await self.notifier.notify(key):
            logger.info(f"Something went wrong while notifying for {key}... exiting")
            return PipelineOutcome(state=PipelineState.NOTIFY_FAILED, idempotency_key=key)

        # RECORD
        logger.debug(f"State: {PipelineState.RECORD.value}")
        if not await self.ledger.record(processed_channel_id, key):
            # TODO: retry the ledger write once the at-least-once vs at-most-once question is settled
            return PipelineOutcome(
                state=PipelineState.RECORD_FAILED,
                idempotency_key=key,
                error=f"Could not record {key}",
            )

        logger.info(f"Processed {key}")
        return PipelineOutcome(state=PipelineState.DONE, idempotency_key=key)


def build_pipeline(settings: Settings) -> ClosedWonPipeline:
    """Wire a pipeline from application settings."""
    gateway = SlackGateway(
        token=settings.slack_token,
        base_url=settings.slack_api_base_url,
        timeout=settings.http_timeout_seconds,
    )
    return ClosedWonPipeline(
        gateway=gateway,
        notifier=DeviceNotifier(),
        config=PipelineConfig.from_settings(settings),
        ledger=DedupLedger(gateway, scan_limit=settings.ledger_scan_limit),
    )
