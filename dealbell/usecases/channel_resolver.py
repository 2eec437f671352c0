"""
Channel resolver mapping human-readable channel names to Slack channel ids.
"""

import logging
from typing import Optional

from dealbell.infrastructure.slack_gateway import SlackGateway
from dealbell.utils.errors import alert_error, invariant

logger = logging.getLogger(__name__)


class ChannelResolver:
    """Service class for channel lookups."""

    def __init__(self, gateway: SlackGateway):
        self.gateway = gateway

    async def resolve_by_name(self, search: str, alert: bool = True) -> Optional[str]:
        """
        Find the first channel whose name contains the search string.

        Args:
            search: Substring to look for in channel names
            alert: Log list failures at error level

        Returns:
            Channel id, or None if listing failed or nothing matched
        """
        result = await self.gateway.list_channels()
        if not result.ok:
            if alert:
                alert_error(result.error)
            return None

        for channel in result.value or []:
            if search in channel.name:
                return channel.id
        return None

    async def resolve_required(self, name: str) -> str:
        """Resolve a channel that must already exist; aborts the run otherwise."""
        channel_id = await self.resolve_by_name(name)
        return invariant(channel_id, f"channel '{name}'")

    async def resolve_or_create(self, name: str) -> str:
        """
        Resolve a channel by name, creating it when absent.

        Args:
            name: Channel name, also used verbatim when creating

        Returns:
            Id of the existing or newly created channel

        Raises:
            ValueError: if no name is given
            PipelineAbort: if the channel could not be created
        """
        if not name:
            raise ValueError("No channel name provided")

        found = await self.resolve_by_name(name, alert=False)
        if found:
            return found

        logger.info(f"couldn't find channel {name}... creating")

        result = await self.gateway.create_channel(name)
        if not result.ok:
            alert_error(result.error, raise_error=True)

        logger.info(f"Successfully created channel {name}")
        return invariant(result.value.id, f"channel '{name}' id")
