"""Pytest configuration and fixtures."""

from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from followups.config import reset_settings
from followups.core.entities import (
    Client,
    ClientStatus,
    Invoice,
    InvoiceStatus,
    Reminder,
    ReminderPriority,
    ReminderStatus,
    ReminderType,
)

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=UTC)
USER_ID = "user-1"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Point storage at a temp dir and rebuild settings for every test."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant."""
    return NOW


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def make_client(now: datetime) -> Callable[..., Client]:
    """Build a client; ``days_since_contact=None`` leaves last_contact unset."""

    def _make(
        name: str = "Acme",
        *,
        client_id: str | None = None,
        days_since_contact: float | None = None,
        created_days_ago: float = 90,
        status: ClientStatus = ClientStatus.ACTIVE,
    ) -> Client:
        return Client(
            id=client_id or f"client-{name.lower().replace(' ', '-')}",
            user_id=USER_ID,
            name=name,
            status=status,
            last_contact=(
                now - timedelta(days=days_since_contact)
                if days_since_contact is not None
                else None
            ),
            created_at=now - timedelta(days=created_days_ago),
        )

    return _make


@pytest.fixture
def make_invoice(now: datetime) -> Callable[..., Invoice]:
    """Build an invoice due ``due_in_days`` from now (negative is overdue)."""

    def _make(
        due_in_days: float,
        *,
        invoice_id: str = "inv-1",
        client_id: str | None = "client-acme",
        status: InvoiceStatus = InvoiceStatus.UNPAID,
        title: str = "Website redesign",
    ) -> Invoice:
        return Invoice(
            id=invoice_id,
            user_id=USER_ID,
            client_id=client_id,
            title=title,
            amount="1200.00",
            due_date=now + timedelta(days=due_in_days),
            status=status,
        )

    return _make


@pytest.fixture
def make_reminder(now: datetime) -> Callable[..., Reminder]:
    """Build an existing reminder created ``created_days_ago`` before now."""

    def _make(
        reminder_type: ReminderType = ReminderType.PAYMENT,
        *,
        client_id: str | None = "client-acme",
        invoice_id: str | None = None,
        created_days_ago: float = 1,
        status: ReminderStatus = ReminderStatus.PENDING,
    ) -> Reminder:
        created = now - timedelta(days=created_days_ago)
        return Reminder(
            id=f"rem-{reminder_type.value}-{created_days_ago}",
            user_id=USER_ID,
            client_id=client_id,
            invoice_id=invoice_id,
            title="Existing reminder",
            due_date=created + timedelta(days=1),
            status=status,
            priority=ReminderPriority.HIGH,
            reminder_type=reminder_type,
            created_at=created,
            updated_at=created,
        )

    return _make
