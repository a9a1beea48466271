from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal, Mapping

InvoiceStatus = Literal["pending", "paid"]
INVOICE_STATUSES: tuple[str, ...] = ("pending", "paid")


def format_currency(amount_in_cents: int) -> str:
    return f"${amount_in_cents / 100:,.2f}"


def _iso_date(value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True, slots=True)
class NewInvoice:
    customer_id: str
    amount_in_cents: int
    status: InvoiceStatus
    date: str


@dataclass(frozen=True, slots=True)
class InvoiceChanges:
    customer_id: str
    amount_in_cents: int
    status: InvoiceStatus


@dataclass(frozen=True, slots=True)
class InvoiceListItem:
    id: str
    customer_id: str
    name: str
    email: str
    image_url: str | None
    amount: int
    date: str
    status: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "InvoiceListItem":
        return cls(
            id=str(record["id"]),
            customer_id=str(record["customer_id"]),
            name=record["name"],
            email=record["email"],
            image_url=record["image_url"],
            amount=int(record["amount"]),
            date=_iso_date(record["date"]),
            status=record["status"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "name": self.name,
            "email": self.email,
            "imageUrl": self.image_url,
            "amount": self.amount,
            "formattedAmount": format_currency(self.amount),
            "date": self.date,
            "status": self.status,
        }


@dataclass(frozen=True, slots=True)
class InvoiceEditView:
    """An invoice as the edit form shows it: amount back in dollars."""

    id: str
    customer_id: str
    amount: Decimal
    status: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "InvoiceEditView":
        return cls(
            id=str(record["id"]),
            customer_id=str(record["customer_id"]),
            amount=Decimal(int(record["amount"])) / 100,
            status=record["status"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "amount": float(self.amount),
            "status": self.status,
        }


@dataclass(frozen=True, slots=True)
class DashboardCards:
    number_of_invoices: int
    number_of_customers: int
    total_paid_invoices: str
    total_pending_invoices: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "numberOfInvoices": self.number_of_invoices,
            "numberOfCustomers": self.number_of_customers,
            "totalPaidInvoices": self.total_paid_invoices,
            "totalPendingInvoices": self.total_pending_invoices,
        }
