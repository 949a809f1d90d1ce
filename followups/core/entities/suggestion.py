"""Suggestion entity: an ephemeral, not-yet-persisted reminder proposal."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from followups.core.entities.common import UTCDateTime
from followups.core.entities.reminder import ReminderPriority, ReminderType
from followups.core.exceptions import InvalidSuggestionError


class SuggestionRule(str, Enum):
    """Rule that produced a suggestion."""

    OVERDUE_PAYMENT = "overdue_payment"
    DUE_SOON_PAYMENT = "due_soon_payment"
    STALE_CONTACT = "stale_contact"


class Suggestion(BaseModel):
    """
    A proposed reminder.

    Pure Pydantic model, not persisted. Generated on-demand by the signal
    extractors and either discarded, surfaced for approval, or materialized
    into a Reminder. ``rule`` is None for suggestions supplied by a caller
    rather than produced by an extractor.
    """

    title: str
    message: str = ""
    due_date: UTCDateTime | None = None
    priority: ReminderPriority = ReminderPriority.MEDIUM
    reminder_type: ReminderType = ReminderType.CUSTOM
    rule: SuggestionRule | None = None
    client_id: str | None = None
    invoice_id: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)

    def require_valid(self) -> None:
        """Raise InvalidSuggestionError if the suggestion cannot be materialized."""
        if not self.title.strip():
            raise InvalidSuggestionError("missing title", title=self.title)
        if self.due_date is None:
            raise InvalidSuggestionError("missing due_date", title=self.title)
