"""Column conversion helpers shared by the SQLite stores."""

import uuid
from datetime import datetime

from followups.core.entities.common import as_utc


def new_id() -> str:
    return uuid.uuid4().hex


def format_timestamp(value: datetime | None) -> str | None:
    """Serialize as ISO-8601 in UTC so string order matches time order."""
    if value is None:
        return None
    return as_utc(value).isoformat()


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return as_utc(datetime.fromisoformat(value))
    except (ValueError, TypeError):
        return None
