"""Client entity, read-only to the suggestion engine."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from followups.core.entities.common import UTCDateTime, utcnow


class ClientStatus(str, Enum):
    """Lifecycle status of a client."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class Client(BaseModel):
    """
    A freelancer's client.

    Owned by a single user and mutated elsewhere; the suggestion engine
    only reads it to detect stale relationships.
    """

    id: str
    user_id: str
    name: str
    email: str | None = None
    company: str | None = None
    status: ClientStatus = ClientStatus.ACTIVE
    last_contact: UTCDateTime | None = None
    created_at: UTCDateTime = Field(default_factory=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == ClientStatus.ACTIVE

    @property
    def contact_reference(self) -> datetime:
        """Last known contact, falling back to creation time."""
        return self.last_contact or self.created_at
