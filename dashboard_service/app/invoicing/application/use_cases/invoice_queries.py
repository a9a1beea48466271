import asyncio
import math

from opentelemetry import trace

from app.invoicing.application.ports.invoice_repository_port import InvoiceRepositoryPort
from app.invoicing.application.use_cases.invoice_actions import INVOICES_PATH
from app.invoicing.domain.entities.customer import Customer
from app.invoicing.domain.entities.invoice import (
    DashboardCards,
    InvoiceEditView,
    InvoiceListItem,
)
from app.invoicing.infrastructure.reporting.polars_cards import summarize_dashboard_cards
from app.shared.infrastructure.cache.path_cache import PathCache

tracer = trace.get_tracer(__name__)


class InvoiceQueries:
    _DEFAULT_ITEMS_PER_PAGE = 6

    def __init__(
        self,
        invoice_repository: InvoiceRepositoryPort,
        path_cache: PathCache,
        items_per_page: int = _DEFAULT_ITEMS_PER_PAGE,
    ) -> None:
        self._invoice_repository = invoice_repository
        self._path_cache = path_cache
        self._items_per_page = max(items_per_page, 1)

    async def fetch_filtered_invoices(
        self, query: str = "", current_page: int = 1
    ) -> list[InvoiceListItem]:
        page = max(current_page, 1)
        offset = (page - 1) * self._items_per_page
        return await self._path_cache.get_or_load(
            INVOICES_PATH,
            ("filtered", query, page),
            lambda: self._invoice_repository.fetch_filtered(
                query, self._items_per_page, offset
            ),
        )

    async def fetch_invoices_pages(self, query: str = "") -> int:
        async def load() -> int:
            count = await self._invoice_repository.count_filtered(query)
            return math.ceil(count / self._items_per_page)

        return await self._path_cache.get_or_load(INVOICES_PATH, ("pages", query), load)

    async def fetch_invoice_by_id(self, invoice_id: str) -> InvoiceEditView | None:
        return await self._invoice_repository.fetch_by_id(invoice_id)

    async def fetch_customers(self) -> list[Customer]:
        return await self._invoice_repository.fetch_customers()

    async def fetch_card_data(self) -> DashboardCards:
        amounts_with_status, number_of_customers = await asyncio.gather(
            self._invoice_repository.fetch_amounts_with_status(),
            self._invoice_repository.count_customers(),
        )
        with tracer.start_as_current_span("invoice_queries.polars_cards"):
            return await asyncio.to_thread(
                summarize_dashboard_cards, amounts_with_status, number_of_customers
            )
