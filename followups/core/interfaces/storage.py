"""
Abstract interfaces for storage providers.

Defines the read and write contracts the suggestion engine needs from the
client, invoice, reminder and notification stores. Implementations own
retry and timeout policy.
"""

from abc import ABC, abstractmethod

from followups.core.entities.client import Client
from followups.core.entities.invoice import Invoice
from followups.core.entities.notification import Notification
from followups.core.entities.reminder import Reminder


class IClientStore(ABC):
    """Abstract interface for client storage."""

    @abstractmethod
    async def list_clients(self, user_id: str) -> list[Client]:
        """List all clients of a user, in any status and any order."""
        pass


class IInvoiceStore(ABC):
    """Abstract interface for invoice storage."""

    @abstractmethod
    async def list_invoices(self, user_id: str) -> list[Invoice]:
        """List all invoices of a user."""
        pass


class IReminderStore(ABC):
    """Abstract interface for reminder storage."""

    @abstractmethod
    async def list_reminders(self, user_id: str) -> list[Reminder]:
        """List all reminders of a user, including resolved ones."""
        pass

    @abstractmethod
    async def create(self, reminder: Reminder) -> Reminder:
        """Persist a new reminder and return it with its ID."""
        pass


class INotificationStore(ABC):
    """Abstract interface for notification storage."""

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        """Persist a new notification and return it with its ID."""
        pass
