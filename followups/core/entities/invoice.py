"""Invoice entity, read-only to the suggestion engine."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from followups.core.entities.common import UTCDateTime, utcnow


class InvoiceStatus(str, Enum):
    """Billing status of an invoice."""

    DRAFT = "draft"
    SENT = "sent"
    PENDING = "pending"
    UNPAID = "unpaid"
    PAID = "paid"
    CANCELLED = "cancelled"


OUTSTANDING_STATUSES = frozenset({InvoiceStatus.UNPAID, InvoiceStatus.PENDING})


class Invoice(BaseModel):
    """An invoice issued by the user, optionally tied to a client."""

    id: str
    user_id: str
    client_id: str | None = None
    title: str = ""
    amount: Decimal = Decimal("0")
    currency: str = "USD"
    due_date: UTCDateTime
    status: InvoiceStatus = InvoiceStatus.DRAFT
    created_at: UTCDateTime = Field(default_factory=utcnow)

    @property
    def is_outstanding(self) -> bool:
        """Whether payment is still expected."""
        return self.status in OUTSTANDING_STATUSES

    @property
    def label(self) -> str:
        return self.title or self.id
