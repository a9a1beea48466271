import logging
from time import perf_counter

import polars as pl

from app.invoicing.domain.entities.invoice import DashboardCards, format_currency

AMOUNT_SCHEMA = {"amount": pl.Int64, "status": pl.Utf8}
logger = logging.getLogger(__name__)


def summarize_dashboard_cards(
    amounts_with_status: list[tuple[int, str]],
    number_of_customers: int,
) -> DashboardCards:
    started_at = perf_counter()
    df = pl.DataFrame(amounts_with_status, schema=AMOUNT_SCHEMA, orient="row")
    totals = df.group_by("status").agg(pl.col("amount").sum().alias("total"))
    total_by_status = {status: int(total or 0) for status, total in totals.rows()}

    cards = DashboardCards(
        number_of_invoices=df.height,
        number_of_customers=number_of_customers,
        total_paid_invoices=format_currency(total_by_status.get("paid", 0)),
        total_pending_invoices=format_currency(total_by_status.get("pending", 0)),
    )
    elapsed_ms = (perf_counter() - started_at) * 1000
    logger.info(
        "dashboard_cards_summarized invoices=%s statuses=%s elapsed_ms=%.2f",
        df.height,
        len(total_by_status),
        elapsed_ms,
    )
    return cards
