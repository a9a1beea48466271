import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

import asyncpg  # type: ignore[import-untyped]

from app.invoicing.domain.entities.customer import Customer
from app.invoicing.domain.entities.invoice import (
    InvoiceChanges,
    InvoiceEditView,
    InvoiceListItem,
    NewInvoice,
)
from app.invoicing.domain.errors import InvoicePersistenceError
from app.shared.infrastructure.persistence.postgres.errors import DATABASE_ERRORS

logger = logging.getLogger(__name__)

_FILTER_CLAUSE = (
    "FROM invoices "
    "JOIN customers ON invoices.customer_id = customers.id "
    "WHERE customers.name ILIKE $1 "
    "OR customers.email ILIKE $1 "
    "OR invoices.amount::text ILIKE $1 "
    "OR invoices.date::text ILIKE $1 "
    "OR invoices.status ILIKE $1"
)


class InvoiceRepositoryAsyncpg:
    def __init__(self, db_pool: asyncpg.Pool) -> None:
        self._db_pool = db_pool

    @asynccontextmanager
    async def _connection(self, failure_message: str) -> AsyncIterator[asyncpg.Connection]:
        try:
            async with self._db_pool.acquire() as connection:
                yield connection
        except DATABASE_ERRORS as exc:
            logger.warning(
                "invoice_store_failed operation=%r error_type=%s",
                failure_message,
                type(exc).__name__,
            )
            raise InvoicePersistenceError(failure_message) from exc

    async def create(self, invoice: NewInvoice) -> str:
        async with self._connection("Failed to create invoice.") as connection:
            invoice_id = await connection.fetchval(
                "INSERT INTO invoices (customer_id, amount, status, date) "
                "VALUES ($1, $2, $3, $4) RETURNING id",
                invoice.customer_id,
                invoice.amount_in_cents,
                invoice.status,
                date.fromisoformat(invoice.date),
            )
        return str(invoice_id)

    async def update(self, invoice_id: str, changes: InvoiceChanges) -> None:
        async with self._connection("Failed to update invoice.") as connection:
            await connection.execute(
                "UPDATE invoices SET customer_id = $1, amount = $2, status = $3 "
                "WHERE id = $4",
                changes.customer_id,
                changes.amount_in_cents,
                changes.status,
                invoice_id,
            )

    async def delete(self, invoice_id: str) -> None:
        async with self._connection("Failed to delete invoice.") as connection:
            await connection.execute("DELETE FROM invoices WHERE id = $1", invoice_id)

    async def fetch_filtered(self, query: str, limit: int, offset: int) -> list[InvoiceListItem]:
        async with self._connection("Failed to fetch invoices.") as connection:
            rows = await connection.fetch(
                "SELECT invoices.id, invoices.customer_id, invoices.amount, invoices.date, "
                "invoices.status, customers.name, customers.email, customers.image_url "
                f"{_FILTER_CLAUSE} "
                "ORDER BY invoices.date DESC "
                "LIMIT $2 OFFSET $3",
                f"%{query}%",
                limit,
                offset,
            )
        return [InvoiceListItem.from_record(row) for row in rows]

    async def count_filtered(self, query: str) -> int:
        async with self._connection("Failed to fetch total number of invoices.") as connection:
            count = await connection.fetchval(f"SELECT COUNT(*) {_FILTER_CLAUSE}", f"%{query}%")
        return int(count)

    async def fetch_by_id(self, invoice_id: str) -> InvoiceEditView | None:
        async with self._connection("Failed to fetch invoice.") as connection:
            row = await connection.fetchrow(
                "SELECT id, customer_id, amount, status FROM invoices WHERE id = $1",
                invoice_id,
            )
        if row is None:
            return None
        return InvoiceEditView.from_record(row)

    async def fetch_customers(self) -> list[Customer]:
        async with self._connection("Failed to fetch all customers.") as connection:
            rows = await connection.fetch("SELECT id, name FROM customers ORDER BY name ASC")
        return [Customer.from_record(row) for row in rows]

    async def count_customers(self) -> int:
        async with self._connection("Failed to fetch card data.") as connection:
            count = await connection.fetchval("SELECT COUNT(*) FROM customers")
        return int(count)

    async def fetch_amounts_with_status(self) -> list[tuple[int, str]]:
        async with self._connection("Failed to fetch card data.") as connection:
            rows = await connection.fetch("SELECT amount, status FROM invoices")
        return [(int(row["amount"]), row["status"]) for row in rows]
