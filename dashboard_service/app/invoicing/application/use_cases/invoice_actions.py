import logging
from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any, Mapping

from opentelemetry import trace

from app.invoicing.application.ports.invoice_repository_port import InvoiceRepositoryPort
from app.invoicing.application.ports.path_revalidator_port import PathRevalidatorPort
from app.invoicing.domain.entities.invoice import InvoiceChanges, NewInvoice
from app.invoicing.domain.entities.invoice_form import InvoiceFormState, parse_invoice_form
from app.invoicing.domain.errors import InvoicePersistenceError
from app.shared.domain.navigation import redirect

INVOICES_PATH = "/dashboard/invoices"
DELETED_INVOICE_MESSAGE = "Deleted Invoice."

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _utc_today() -> date:
    return datetime.now(UTC).date()


class InvoiceActions:
    """Create, update and delete invoices submitted from the dashboard forms.

    Create and update leave through ``Redirect`` to the invoices listing on
    success; every expected failure comes back as an ``InvoiceFormState``.
    """

    def __init__(
        self,
        invoice_repository: InvoiceRepositoryPort,
        path_revalidator: PathRevalidatorPort,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self._invoice_repository = invoice_repository
        self._path_revalidator = path_revalidator
        self._today = today

    async def create_invoice(
        self,
        prev_state: InvoiceFormState | None,
        form: Mapping[str, Any],
    ) -> InvoiceFormState:
        with tracer.start_as_current_span("invoice_actions.create_invoice"):
            parsed = parse_invoice_form(form)
            if parsed.data is None:
                return InvoiceFormState(
                    errors=parsed.field_errors,
                    message="Missing Fields. Failed to Create Invoice.",
                )

            new_invoice = NewInvoice(
                customer_id=parsed.data.customer_id,
                amount_in_cents=parsed.data.amount_in_cents,
                status=parsed.data.status,
                date=self._today().isoformat(),
            )
            try:
                invoice_id = await self._invoice_repository.create(new_invoice)
            except InvoicePersistenceError:
                logger.exception(
                    "invoice_create_failed customer_id=%s", new_invoice.customer_id
                )
                return InvoiceFormState(message="Database Error: Failed to Create Invoice.")
            logger.info(
                "invoice_created invoice_id=%s amount=%s status=%s",
                invoice_id,
                new_invoice.amount_in_cents,
                new_invoice.status,
            )

        self._path_revalidator.revalidate_path(INVOICES_PATH)
        redirect(INVOICES_PATH)

    async def update_invoice(
        self,
        invoice_id: str,
        prev_state: InvoiceFormState | None,
        form: Mapping[str, Any],
    ) -> InvoiceFormState:
        with tracer.start_as_current_span("invoice_actions.update_invoice"):
            parsed = parse_invoice_form(form)
            if parsed.data is None:
                return InvoiceFormState(
                    errors=parsed.field_errors,
                    message="Missing Fields. Failed to Update Invoice.",
                )

            changes = InvoiceChanges(
                customer_id=parsed.data.customer_id,
                amount_in_cents=parsed.data.amount_in_cents,
                status=parsed.data.status,
            )
            try:
                await self._invoice_repository.update(invoice_id, changes)
            except InvoicePersistenceError:
                logger.exception("invoice_update_failed invoice_id=%s", invoice_id)
                return InvoiceFormState(message="Database Error: Failed to Update Invoice.")
            logger.info("invoice_updated invoice_id=%s", invoice_id)

        self._path_revalidator.revalidate_path(INVOICES_PATH)
        redirect(INVOICES_PATH)

    async def delete_invoice(self, invoice_id: str) -> InvoiceFormState:
        with tracer.start_as_current_span("invoice_actions.delete_invoice"):
            try:
                await self._invoice_repository.delete(invoice_id)
            except InvoicePersistenceError:
                logger.exception("invoice_delete_failed invoice_id=%s", invoice_id)
                return InvoiceFormState(message="Database Error: Failed to Delete Invoice.")
            logger.info("invoice_deleted invoice_id=%s", invoice_id)

        self._path_revalidator.revalidate_path(INVOICES_PATH)
        return InvoiceFormState(message=DELETED_INVOICE_MESSAGE)
