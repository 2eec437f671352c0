"""
Pattern-based parser for CRM "closed-won" announcements.

Announcements look like "Alice just closed Acme for $1,000!". The closer and
customer spans are non-greedy, so when a text contains several "just closed ... for"
phrases only the leftmost one is used. A match whose closer or customer trims to
an empty string is still returned.
"""

import logging
import re
from typing import Optional

from dealbell.domain.closed_won import ParsedEvent

logger = logging.getLogger(__name__)

CLOSED_WON_PATTERN = re.compile(r"(.+?) just closed (.+?) for (.+)")

# Currency symbols and punctuation stripped from the amount
AMOUNT_STRIP_PATTERN = re.compile(r"[$,!]")


def parse_closed_won(text: Optional[str]) -> Optional[ParsedEvent]:
    """
    Extract closer, customer and amount from an announcement.

    Args:
        text: Raw message text

    Returns:
        ParsedEvent, or None if the text is not a closed-won announcement
    """
    if not text:
        return None

    match = CLOSED_WON_PATTERN.search(text)
    if match is None:
        logger.debug(f"Not a closed-won announcement: {text!r}")
        return None

    closer = match.group(1).strip()
    customer = match.group(2).strip()
    amount = AMOUNT_STRIP_PATTERN.sub("", match.group(3).strip())

    return ParsedEvent(closer=closer, customer=customer, amount=amount)


def build_idempotency_key(event: ParsedEvent) -> str:
    """Key used as the sole dedup discriminant, e.g. "Alice:Acme:1000"."""
    return event.idempotency_key
