"""Core domain entities."""

from followups.core.entities.client import Client, ClientStatus
from followups.core.entities.invoice import (
    OUTSTANDING_STATUSES,
    Invoice,
    InvoiceStatus,
)
from followups.core.entities.notification import (
    Notification,
    NotificationType,
    RelatedEntityType,
)
from followups.core.entities.policy import SuggestionPolicy
from followups.core.entities.reminder import (
    Reminder,
    ReminderPriority,
    ReminderStatus,
    ReminderType,
)
from followups.core.entities.suggestion import Suggestion, SuggestionRule

__all__ = [
    # Client entities
    "Client",
    "ClientStatus",
    # Invoice entities
    "Invoice",
    "InvoiceStatus",
    "OUTSTANDING_STATUSES",
    # Reminder entities
    "Reminder",
    "ReminderPriority",
    "ReminderStatus",
    "ReminderType",
    # Suggestion entities
    "Suggestion",
    "SuggestionRule",
    "SuggestionPolicy",
    # Notification entities
    "Notification",
    "NotificationType",
    "RelatedEntityType",
]
