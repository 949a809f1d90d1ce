"""Core interfaces (ports) for dependency injection."""

from followups.core.interfaces.clock import IClock
from followups.core.interfaces.storage import (
    IClientStore,
    IInvoiceStore,
    INotificationStore,
    IReminderStore,
)

__all__ = [
    # Time
    "IClock",
    # Storage interfaces
    "IClientStore",
    "IInvoiceStore",
    "IReminderStore",
    "INotificationStore",
]
