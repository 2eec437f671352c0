"""
Hardware notification for closed-won events (the ESP32 deal bell).
"""

import logging

logger = logging.getLogger(__name__)


class DeviceNotifier:
    """Rings the deal bell once per newly processed event."""

    async def notify(self, event_id: str) -> bool:
        """
        Notify the device about a closed-won event.

        Args:
            event_id: Idempotency key of the event

        Returns:
            True if the device acknowledged the notification
        """
        # TODO: call the ESP32 once its endpoint exists; until then every notification succeeds
        logger.info(f"Notifying device for {event_id}")
        return True
