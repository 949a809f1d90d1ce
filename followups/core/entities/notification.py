"""Notification entity emitted as a side effect of materialization."""

from enum import Enum

from pydantic import BaseModel, Field

from followups.core.entities.common import UTCDateTime, utcnow


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    REMINDER = "reminder"


class RelatedEntityType(str, Enum):
    CLIENT = "client"
    REMINDER = "reminder"
    INVOICE = "invoice"


class Notification(BaseModel):
    """
    User-facing notification.

    Written by the engine, never read back by it.
    """

    id: str | None = None
    user_id: str
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    is_read: bool = False
    related_id: str | None = None
    related_type: RelatedEntityType | None = None
    created_at: UTCDateTime = Field(default_factory=utcnow)
