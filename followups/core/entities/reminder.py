"""Reminder entity for follow-up and payment tracking."""

from enum import Enum

from pydantic import BaseModel, Field

from followups.core.entities.common import UTCDateTime, utcnow


class ReminderStatus(str, Enum):
    """Lifecycle status of a reminder."""

    PENDING = "pending"
    COMPLETED = "completed"
    SNOOZED = "snoozed"
    CANCELLED = "cancelled"

    # Some callers use "active" for reminders that have not fired yet
    ACTIVE = "pending"


class ReminderPriority(str, Enum):
    """Priority level, most urgent first."""

    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ReminderType(str, Enum):
    """What the reminder is about."""

    FOLLOW_UP = "follow_up"
    PAYMENT = "payment"
    PROJECT_DEADLINE = "project_deadline"
    CUSTOM = "custom"


class Reminder(BaseModel):
    """
    Reminder entity for tracking follow-ups and payment chases.

    Optionally linked to a client and, for payment reminders, to the
    invoice that triggered it.
    """

    id: str | None = None
    user_id: str
    client_id: str | None = None
    invoice_id: str | None = None
    title: str
    message: str = ""
    due_date: UTCDateTime
    status: ReminderStatus = ReminderStatus.PENDING
    priority: ReminderPriority = ReminderPriority.MEDIUM
    reminder_type: ReminderType = ReminderType.CUSTOM
    ai_suggested: bool = False
    completed_at: UTCDateTime | None = None
    created_at: UTCDateTime = Field(default_factory=utcnow)
    updated_at: UTCDateTime = Field(default_factory=utcnow)

    @property
    def is_open(self) -> bool:
        """Pending or snoozed, i.e. not yet resolved."""
        return self.status in (ReminderStatus.PENDING, ReminderStatus.SNOOZED)
