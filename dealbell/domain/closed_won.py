"""
Closed-won domain models and schemas.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Channel(BaseModel):
    """A Slack channel as returned by conversations.list."""
    name: str
    id: str


class ParsedEvent(BaseModel):
    """Structured data extracted from a closed-won announcement."""
    closer: str
    customer: str
    amount: str

    @property
    def idempotency_key(self) -> str:
        """Colon-joined fields with every space removed, case preserved."""
        return ":".join([self.closer, self.customer, self.amount]).replace(" ", "")


class PipelineState(str, Enum):
    """States a closed-won run moves through, plus its terminal labels."""
    START = "start"
    RESOLVE_CHANNELS = "resolve_channels"
    FETCH_SOURCE_MESSAGES = "fetch_source_messages"
    FILTER_AND_PARSE = "filter_and_parse"
    CHECK_DEDUP = "check_dedup"
    NOTIFY = "notify"
    RECORD = "record"
    DONE = "done"

    # Early exits
    NO_ACTIONABLE_MESSAGE = "no_actionable_message"
    ALREADY_PROCESSED = "already_processed"
    NOTIFY_FAILED = "notify_failed"
    RECORD_FAILED = "record_failed"
    ABORTED = "aborted"


class PipelineOutcome(BaseModel):
    """Result of one pipeline run."""
    state: PipelineState
    idempotency_key: Optional[str] = None
    error: Optional[str] = None

    @property
    def aborted(self) -> bool:
        return self.state == PipelineState.ABORTED
