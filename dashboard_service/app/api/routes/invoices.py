import asyncio
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from app.api.dependencies import (
    get_invoice_actions,
    get_invoice_queries,
    require_user,
    see_other,
)
from app.invoicing.application.use_cases.invoice_actions import (
    DELETED_INVOICE_MESSAGE,
    InvoiceActions,
)
from app.invoicing.application.use_cases.invoice_queries import InvoiceQueries
from app.invoicing.domain.entities.invoice_form import InvoiceFormState
from app.shared.domain.navigation import Redirect

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(require_user)])


def _state_response(state: InvoiceFormState) -> JSONResponse:
    status_code = 422 if state.errors else 500
    return JSONResponse(state.to_dict(), status_code=status_code)


@router.get("")
async def dashboard(queries: InvoiceQueries = Depends(get_invoice_queries)) -> dict[str, Any]:
    cards = await queries.fetch_card_data()
    return cards.to_dict()


@router.get("/invoices")
async def list_invoices(
    query: str = "",
    page: int = 1,
    queries: InvoiceQueries = Depends(get_invoice_queries),
) -> dict[str, Any]:
    page = max(page, 1)
    invoices, total_pages = await asyncio.gather(
        queries.fetch_filtered_invoices(query, page),
        queries.fetch_invoices_pages(query),
    )
    return {
        "query": query,
        "page": page,
        "totalPages": total_pages,
        "invoices": [invoice.to_dict() for invoice in invoices],
    }


@router.get("/invoices/create")
async def create_invoice_form(
    queries: InvoiceQueries = Depends(get_invoice_queries),
) -> dict[str, Any]:
    customers = await queries.fetch_customers()
    return {"customers": [customer.to_dict() for customer in customers]}


@router.post("/invoices/create")
async def create_invoice(
    request: Request,
    actions: InvoiceActions = Depends(get_invoice_actions),
) -> Response:
    form = await request.form()
    try:
        state = await actions.create_invoice(None, form)
    except Redirect as exc:
        return see_other(exc.location)
    return _state_response(state)


@router.get("/invoices/{invoice_id}/edit")
async def edit_invoice_form(
    invoice_id: str,
    queries: InvoiceQueries = Depends(get_invoice_queries),
) -> dict[str, Any]:
    invoice, customers = await asyncio.gather(
        queries.fetch_invoice_by_id(invoice_id),
        queries.fetch_customers(),
    )
    if invoice is None:
        raise HTTPException(status_code=404, detail="Could not find the requested invoice.")
    return {
        "invoice": invoice.to_dict(),
        "customers": [customer.to_dict() for customer in customers],
    }


@router.post("/invoices/{invoice_id}/edit")
async def update_invoice(
    invoice_id: str,
    request: Request,
    actions: InvoiceActions = Depends(get_invoice_actions),
) -> Response:
    form = await request.form()
    try:
        state = await actions.update_invoice(invoice_id, None, form)
    except Redirect as exc:
        return see_other(exc.location)
    return _state_response(state)


@router.post("/invoices/{invoice_id}/delete")
async def delete_invoice(
    invoice_id: str,
    actions: InvoiceActions = Depends(get_invoice_actions),
) -> JSONResponse:
    state = await actions.delete_invoice(invoice_id)
    if state.message == DELETED_INVOICE_MESSAGE:
        return JSONResponse(state.to_dict())
    return _state_response(state)
