"""
Predicates selecting which source-channel messages count as closed-won announcements.

In development the announcements are typed by hand, so any message posted by a real
client qualifies. In production only bot messages posted by the CRM integration do.
"""

from typing import Any, Callable, Dict, List

Message = Dict[str, Any]
MessageFilter = Callable[[Message], bool]


def dev_filter(message: Message) -> bool:
    """Messages typed by a person carry a client_msg_id."""
    return "client_msg_id" in message


def make_prod_filter(bot_username: str = "HubSpot") -> MessageFilter:
    """Build the production predicate for a given CRM bot username."""

    def prod_filter(message: Message) -> bool:
        return (
            "ts" in message
            and "text" in message
            and message.get("type") == "message"
            and message.get("subtype") == "bot_message"
            and message.get("username") == bot_username
        )

    return prod_filter


def select_filter(is_dev: bool, bot_username: str = "HubSpot") -> MessageFilter:
    """Return the predicate for the current environment."""
    if is_dev:
        return dev_filter
    return make_prod_filter(bot_username)


def filter_messages(messages: List[Message], predicate: MessageFilter) -> List[Message]:
    """Keep qualifying messages, preserving the platform's most-recent-first order."""
    return [m for m in messages if isinstance(m, dict) and predicate(m)]
