from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.invoicing.domain.entities.invoice import InvoiceStatus

# One user-facing message per form field, whatever rule the value broke.
FIELD_MESSAGES: dict[str, str] = {
    "customerId": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
}
FORM_FIELDS: tuple[str, ...] = tuple(FIELD_MESSAGES)

# invoices.amount is a Postgres INT holding cents.
MAX_AMOUNT_IN_CENTS = 2_147_483_647
MAX_AMOUNT = Decimal(MAX_AMOUNT_IN_CENTS).scaleb(-2)


def _to_cents(amount: Decimal) -> int:
    return int((amount * 100).to_integral_value(rounding=ROUND_HALF_UP))


class InvoiceForm(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    customer_id: str = Field(alias="customerId", min_length=1)
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    status: InvoiceStatus

    @field_validator("amount")
    @classmethod
    def check_at_least_one_cent(cls, amount: Decimal) -> Decimal:
        if _to_cents(amount) < 1:
            raise ValueError("amount rounds to zero cents")
        return amount

    @property
    def amount_in_cents(self) -> int:
        return _to_cents(self.amount)


@dataclass(frozen=True, slots=True)
class InvoiceFormParseResult:
    data: InvoiceForm | None = None
    field_errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.data is not None


@dataclass(frozen=True, slots=True)
class InvoiceFormState:
    """What an invoice action hands back to the form that submitted it."""

    message: str | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message}
        if self.errors:
            payload["errors"] = {name: list(messages) for name, messages in self.errors.items()}
        return payload


def parse_invoice_form(form: Mapping[str, Any]) -> InvoiceFormParseResult:
    """Validate the submitted invoice fields without raising."""
    raw_fields = {name: form.get(name) for name in FORM_FIELDS}
    try:
        return InvoiceFormParseResult(data=InvoiceForm.model_validate(raw_fields))
    except ValidationError as exc:
        return InvoiceFormParseResult(field_errors=_field_errors(exc))


def _field_errors(exc: ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = error.get("loc") or ("",)
        field_name = str(location[0])
        message = FIELD_MESSAGES.get(field_name, error["msg"])
        messages = errors.setdefault(field_name, [])
        if message not in messages:
            messages.append(message)
    return errors
