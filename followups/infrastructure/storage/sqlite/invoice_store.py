"""SQLite implementation of invoice storage."""

from decimal import Decimal, InvalidOperation

import aiosqlite

from followups.config import get_logger
from followups.core.entities.common import utcnow
from followups.core.entities.invoice import Invoice, InvoiceStatus
from followups.core.exceptions import DatabaseError
from followups.core.interfaces.storage import IInvoiceStore
from followups.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from followups.infrastructure.storage.sqlite.rows import (
    format_timestamp,
    new_id,
    parse_timestamp,
)

logger = get_logger(__name__)


class SQLiteInvoiceStore(IInvoiceStore):
    """SQLite implementation of invoice storage."""

    async def create(self, invoice: Invoice) -> Invoice:
        """Insert an invoice, keeping its ID if one is set."""
        invoice_id = invoice.id or new_id()
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO invoices (
                        id, user_id, client_id, title, amount,
                        currency, due_date, status, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        invoice_id,
                        invoice.user_id,
                        invoice.client_id,
                        invoice.title,
                        str(invoice.amount),
                        invoice.currency,
                        format_timestamp(invoice.due_date),
                        invoice.status.value,
                        format_timestamp(invoice.created_at),
                    ),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("create_invoice", str(e)) from e

        invoice.id = invoice_id
        logger.info("invoice_created", invoice_id=invoice_id, user_id=invoice.user_id)
        return invoice

    async def get(self, invoice_id: str) -> Invoice | None:
        """Get invoice by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM invoices WHERE id = ?", (invoice_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def list_invoices(self, user_id: str) -> list[Invoice]:
        """List all invoices of a user by due date."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM invoices WHERE user_id = ? ORDER BY due_date ASC",
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Invoice:
        """Convert a database row to an Invoice entity."""
        try:
            amount = Decimal(row["amount"])
        except (InvalidOperation, TypeError):
            amount = Decimal("0")

        return Invoice(
            id=row["id"],
            user_id=row["user_id"],
            client_id=row["client_id"],
            title=row["title"] or "",
            amount=amount,
            currency=row["currency"],
            due_date=parse_timestamp(row["due_date"]) or utcnow(),
            status=InvoiceStatus(row["status"]),
            created_at=parse_timestamp(row["created_at"]) or utcnow(),
        )
