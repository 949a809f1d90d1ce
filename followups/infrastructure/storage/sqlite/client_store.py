"""
SQLite implementation of client storage.

The suggestion engine only lists clients; ``create`` and ``get`` exist so
the database can be seeded and inspected.
"""

import aiosqlite

from followups.config import get_logger
from followups.core.entities.client import Client, ClientStatus
from followups.core.entities.common import utcnow
from followups.core.exceptions import DatabaseError
from followups.core.interfaces.storage import IClientStore
from followups.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from followups.infrastructure.storage.sqlite.rows import (
    format_timestamp,
    new_id,
    parse_timestamp,
)

logger = get_logger(__name__)


class SQLiteClientStore(IClientStore):
    """SQLite implementation of client storage."""

    async def create(self, client: Client) -> Client:
        """Insert a client, keeping its ID if one is set."""
        client_id = client.id or new_id()
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO clients (
                        id, user_id, name, email, company,
                        status, last_contact, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        client_id,
                        client.user_id,
                        client.name,
                        client.email,
                        client.company,
                        client.status.value,
                        format_timestamp(client.last_contact),
                        format_timestamp(client.created_at),
                    ),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("create_client", str(e)) from e

        client.id = client_id
        logger.info("client_created", client_id=client_id, user_id=client.user_id)
        return client

    async def get(self, client_id: str) -> Client | None:
        """Get client by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM clients WHERE id = ?", (client_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def list_clients(self, user_id: str) -> list[Client]:
        """List all clients of a user, oldest first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM clients WHERE user_id = ? ORDER BY created_at ASC",
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Client:
        """Convert a database row to a Client entity."""
        return Client(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            email=row["email"],
            company=row["company"],
            status=ClientStatus(row["status"]),
            last_contact=parse_timestamp(row["last_contact"]),
            created_at=parse_timestamp(row["created_at"]) or utcnow(),
        )
