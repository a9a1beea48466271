from fastapi import Request
from fastapi.responses import RedirectResponse

from app.auth.application.use_cases.authenticate import AuthenticateUseCase
from app.auth.domain.entities.account import SessionUser
from app.auth.infrastructure.session.session_auth import SessionAuth
from app.invoicing.application.use_cases.invoice_actions import InvoiceActions
from app.invoicing.application.use_cases.invoice_queries import InvoiceQueries


class LoginRequired(Exception):
    def __init__(self, location: str) -> None:
        super().__init__(location)
        self.location = location


def see_other(location: str) -> RedirectResponse:
    return RedirectResponse(url=location, status_code=303)


def get_session_auth(request: Request) -> SessionAuth:
    return request.app.state.session_auth


def get_authenticate(request: Request) -> AuthenticateUseCase:
    return request.app.state.authenticate


def get_invoice_actions(request: Request) -> InvoiceActions:
    return request.app.state.invoice_actions


def get_invoice_queries(request: Request) -> InvoiceQueries:
    return request.app.state.invoice_queries


def require_user(request: Request) -> SessionUser:
    session_auth = get_session_auth(request)
    location = session_auth.authorized(request.url.path, request.session)
    user = session_auth.auth(request.session)
    if location is not None or user is None:
        raise LoginRequired(location or "/login")
    return user
