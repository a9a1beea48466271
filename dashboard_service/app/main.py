import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import asyncpg  # type: ignore[import-untyped]
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.asyncpg import AsyncPGInstrumentor
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.middleware.sessions import SessionMiddleware
import strawberry
from strawberry.fastapi import GraphQLRouter
from strawberry.permission import BasePermission

from app.api.dependencies import LoginRequired, see_other
from app.api.routes import auth as auth_routes
from app.api.routes import invoices as invoice_routes
from app.auth.application.ports.account_repository_port import AccountRepositoryPort
from app.auth.application.use_cases.authenticate import AuthenticateUseCase
from app.auth.application.use_cases.credential_verifier import CredentialVerifier
from app.auth.infrastructure.persistence.postgres.account_repository_asyncpg import (
    AccountRepositoryAsyncpg,
)
from app.auth.infrastructure.session.session_auth import CredentialsProvider, SessionAuth
from app.core.config import settings
from app.invoicing.application.ports.invoice_repository_port import InvoiceRepositoryPort
from app.invoicing.application.use_cases.invoice_actions import InvoiceActions
from app.invoicing.application.use_cases.invoice_queries import InvoiceQueries
from app.invoicing.domain.entities.invoice import InvoiceListItem
from app.invoicing.domain.errors import InvoicePersistenceError
from app.invoicing.infrastructure.persistence.postgres.invoice_repository_asyncpg import (
    InvoiceRepositoryAsyncpg,
)
from app.shared.infrastructure.cache.path_cache import PathCache
from app.shared.infrastructure.logging.structured_logger import configure_json_logging
from app.shared.infrastructure.pubsub.broadcaster import PathRevalidationBroadcaster


def _connection_from_context(context: dict[str, Any]) -> Any:
    return context.get("ws") or context.get("request")


class IsAuthenticated(BasePermission):
    message = "User is not authenticated"

    def has_permission(self, source: Any, info: strawberry.Info, **kwargs: Any) -> bool:
        connection = _connection_from_context(info.context)
        session_auth: SessionAuth = connection.app.state.session_auth
        return session_auth.auth(connection.session) is not None


@strawberry.type
class InvoiceType:
    id: str
    customer_id: str
    name: str
    email: str
    image_url: str | None
    amount: int
    date: str
    status: str


def _invoice_to_type(invoice: InvoiceListItem) -> InvoiceType:
    return InvoiceType(
        id=invoice.id,
        customer_id=invoice.customer_id,
        name=invoice.name,
        email=invoice.email,
        image_url=invoice.image_url,
        amount=invoice.amount,
        date=invoice.date,
        status=invoice.status,
    )


@strawberry.type
class Query:
    @strawberry.field(permission_classes=[IsAuthenticated])
    async def invoices(
        self,
        info: strawberry.Info,
        query: str = "",
        page: int = 1,
    ) -> list[InvoiceType]:
        queries: InvoiceQueries = info.context["request"].app.state.invoice_queries
        invoices = await queries.fetch_filtered_invoices(query, page)
        return [_invoice_to_type(invoice) for invoice in invoices]


@strawberry.type
class Subscription:
    @strawberry.subscription(permission_classes=[IsAuthenticated])
    async def path_revalidated(self, info: strawberry.Info) -> AsyncGenerator[str, None]:
        connection = _connection_from_context(info.context)
        broadcaster: PathRevalidationBroadcaster = connection.app.state.revalidation_broadcaster
        async for path in broadcaster.subscribe():
            yield path


def wire_services(
    app: FastAPI,
    account_repository: AccountRepositoryPort,
    invoice_repository: InvoiceRepositoryPort,
) -> None:
    broadcaster = PathRevalidationBroadcaster()
    path_cache = PathCache(broadcaster, max_entries=settings.path_cache_max_entries)
    session_auth = SessionAuth(
        providers=[CredentialsProvider(CredentialVerifier(account_repository))]
    )
    app.state.revalidation_broadcaster = broadcaster
    app.state.path_cache = path_cache
    app.state.session_auth = session_auth
    app.state.authenticate = AuthenticateUseCase(session_auth)
    app.state.invoice_actions = InvoiceActions(
        invoice_repository=invoice_repository, path_revalidator=path_cache
    )
    app.state.invoice_queries = InvoiceQueries(
        invoice_repository=invoice_repository,
        path_cache=path_cache,
        items_per_page=settings.invoices_per_page,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_json_logging(settings.log_level)
    if not settings.auth_secret:
        raise RuntimeError("Missing required environment variable: AUTH_SECRET")

    tracer_provider: TracerProvider | None = None
    asyncpg_instrumentor = AsyncPGInstrumentor()
    if settings.otel_enabled:
        tracer_provider = TracerProvider(
            resource=Resource.create({SERVICE_NAME: settings.otel_service_name})
        )
        tracer_provider.add_span_processor(
            BatchSpanProcessor(
                OTLPSpanExporter(
                    endpoint=settings.otel_exporter_endpoint,
                    insecure=True,
                )
            )
        )
        trace.set_tracer_provider(tracer_provider)
        asyncpg_instrumentor.instrument()

    app.state.db_pool = await asyncpg.create_pool(settings.database_url)
    wire_services(
        app,
        account_repository=AccountRepositoryAsyncpg(db_pool=app.state.db_pool),
        invoice_repository=InvoiceRepositoryAsyncpg(db_pool=app.state.db_pool),
    )

    try:
        yield
    finally:
        await app.state.db_pool.close()
        if tracer_provider is not None:
            asyncpg_instrumentor.uninstrument()
            tracer_provider.shutdown()


app = FastAPI(title="Invoice Dashboard", lifespan=lifespan)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.auth_secret or secrets.token_urlsafe(32),
    session_cookie="dashboard_session",
    max_age=settings.session_max_age_seconds,
    same_site="lax",
)
FastAPIInstrumentor.instrument_app(app)
Instrumentator().instrument(app).expose(app)
schema = strawberry.Schema(query=Query, subscription=Subscription)
app.include_router(GraphQLRouter(schema), prefix="/graphql")
app.include_router(auth_routes.router)
app.include_router(invoice_routes.router)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired) -> Response:
    return see_other(exc.location)


@app.exception_handler(InvoicePersistenceError)
async def invoice_persistence_error_handler(
    request: Request, exc: InvoicePersistenceError
) -> JSONResponse:
    return JSONResponse({"message": exc.message}, status_code=500)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
