"""SQLite storage implementations."""

from followups.infrastructure.storage.sqlite.client_store import SQLiteClientStore
from followups.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from followups.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore
from followups.infrastructure.storage.sqlite.notification_store import (
    SQLiteNotificationStore,
)
from followups.infrastructure.storage.sqlite.reminder_store import SQLiteReminderStore

# Singleton instances
_client_store: SQLiteClientStore | None = None
_invoice_store: SQLiteInvoiceStore | None = None
_reminder_store: SQLiteReminderStore | None = None
_notification_store: SQLiteNotificationStore | None = None


async def get_client_store() -> SQLiteClientStore:
    """Get singleton client store instance."""
    global _client_store
    if _client_store is None:
        _client_store = SQLiteClientStore()
    return _client_store


async def get_invoice_store() -> SQLiteInvoiceStore:
    """Get singleton invoice store instance."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = SQLiteInvoiceStore()
    return _invoice_store


async def get_reminder_store() -> SQLiteReminderStore:
    """Get singleton reminder store instance."""
    global _reminder_store
    if _reminder_store is None:
        _reminder_store = SQLiteReminderStore()
    return _reminder_store


async def get_notification_store() -> SQLiteNotificationStore:
    """Get singleton notification store instance."""
    global _notification_store
    if _notification_store is None:
        _notification_store = SQLiteNotificationStore()
    return _notification_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteClientStore",
    "SQLiteInvoiceStore",
    "SQLiteReminderStore",
    "SQLiteNotificationStore",
    # Factory functions
    "get_client_store",
    "get_invoice_store",
    "get_reminder_store",
    "get_notification_store",
]
