from typing import Protocol

from app.invoicing.domain.entities.customer import Customer
from app.invoicing.domain.entities.invoice import (
    InvoiceChanges,
    InvoiceEditView,
    InvoiceListItem,
    NewInvoice,
)


class InvoiceRepositoryPort(Protocol):
    async def create(self, invoice: NewInvoice) -> str: ...

    async def update(self, invoice_id: str, changes: InvoiceChanges) -> None: ...

    async def delete(self, invoice_id: str) -> None: ...

    async def fetch_filtered(self, query: str, limit: int, offset: int) -> list[InvoiceListItem]: ...

    async def count_filtered(self, query: str) -> int: ...

    async def fetch_by_id(self, invoice_id: str) -> InvoiceEditView | None: ...

    async def fetch_customers(self) -> list[Customer]: ...

    async def count_customers(self) -> int: ...

    async def fetch_amounts_with_status(self) -> list[tuple[int, str]]: ...
