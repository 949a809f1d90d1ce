"""Fixtures for use case tests."""

from unittest.mock import AsyncMock

import pytest

from followups.application.locks import UserLockRegistry
from followups.core.entities.notification import Notification
from followups.core.entities.reminder import Reminder
from followups.infrastructure.clock import FixedClock


@pytest.fixture
def clock(now) -> FixedClock:
    return FixedClock(now)


@pytest.fixture
def lock_registry() -> UserLockRegistry:
    return UserLockRegistry()


@pytest.fixture
def reminder_store():
    """Reminder store double that assigns sequential IDs on create."""
    store = AsyncMock()
    store.list_reminders.return_value = []
    counter = iter(range(1, 1000))

    def _create(reminder: Reminder) -> Reminder:
        return reminder.model_copy(update={"id": f"rem-{next(counter)}"})

    store.create.side_effect = _create
    return store


@pytest.fixture
def notification_store():
    store = AsyncMock()
    counter = iter(range(1, 1000))

    def _create(notification: Notification) -> Notification:
        return notification.model_copy(update={"id": f"note-{next(counter)}"})

    store.create.side_effect = _create
    return store


@pytest.fixture
def client_store():
    store = AsyncMock()
    store.list_clients.return_value = []
    return store


@pytest.fixture
def invoice_store():
    store = AsyncMock()
    store.list_invoices.return_value = []
    return store
