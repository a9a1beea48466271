import logging
from typing import Any, Mapping, MutableMapping, NoReturn, Protocol
from urllib.parse import quote

from app.auth.application.use_cases.credential_verifier import CredentialVerifier
from app.auth.domain.entities.account import Account, SessionUser
from app.auth.domain.errors import CallbackRouteError, CredentialsSignin, InvalidProvider
from app.shared.domain.navigation import is_local_path, redirect

SESSION_USER_KEY = "user"
PROTECTED_PATH_PREFIX = "/dashboard"
logger = logging.getLogger(__name__)


class AuthProvider(Protocol):
    id: str

    async def authorize(self, credentials: Mapping[str, Any]) -> Account | None: ...


class CredentialsProvider:
    id = "credentials"

    def __init__(self, verifier: CredentialVerifier) -> None:
        self._verifier = verifier

    async def authorize(self, credentials: Mapping[str, Any]) -> Account | None:
        return await self._verifier.authorize(credentials)


class SessionAuth:
    """Establishes and reads the signed-cookie session.

    ``session`` is the request's session mapping (Starlette's
    ``request.session``); this class owns its ``user`` entry.
    """

    def __init__(
        self,
        providers: list[AuthProvider],
        sign_in_page: str = "/login",
        default_redirect: str = "/dashboard",
    ) -> None:
        self._providers = {provider.id: provider for provider in providers}
        self._sign_in_page = sign_in_page
        self._default_redirect = default_redirect

    async def sign_in(
        self,
        provider_id: str,
        form: Mapping[str, Any],
        session: MutableMapping[str, Any],
    ) -> NoReturn:
        provider = self._providers.get(provider_id)
        if provider is None:
            raise InvalidProvider(f"Unknown sign-in provider: {provider_id}")

        try:
            account = await provider.authorize(form)
        except Exception as exc:
            logger.exception("sign_in_provider_failed provider=%s", provider_id)
            raise CallbackRouteError(str(exc)) from exc

        if account is None:
            raise CredentialsSignin()

        session[SESSION_USER_KEY] = SessionUser.from_account(account).to_session()
        logger.info("sign_in_succeeded user_id=%s", account.id)

        redirect_to = form.get("redirectTo")
        redirect(redirect_to if is_local_path(redirect_to) else self._default_redirect)

    def auth(self, session: Mapping[str, Any]) -> SessionUser | None:
        return SessionUser.from_session(session.get(SESSION_USER_KEY))

    def sign_out(self, session: MutableMapping[str, Any], redirect_to: str = "/") -> NoReturn:
        session.clear()
        redirect(redirect_to)

    def authorized(self, path: str, session: Mapping[str, Any]) -> str | None:
        """Return where to send the request instead, or None to let it through."""
        is_logged_in = self.auth(session) is not None
        if path == PROTECTED_PATH_PREFIX or path.startswith(PROTECTED_PATH_PREFIX + "/"):
            if is_logged_in:
                return None
            return f"{self._sign_in_page}?callbackUrl={quote(path, safe='/')}"
        if is_logged_in and path == self._sign_in_page:
            return self._default_redirect
        return None
