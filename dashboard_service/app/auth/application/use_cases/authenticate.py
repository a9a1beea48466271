import logging
from typing import Any, Mapping, MutableMapping

from app.auth.application.ports.session_establisher_port import SessionEstablisherPort
from app.auth.domain.errors import AuthError, CredentialsSignin

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials."
GENERIC_FAILURE_MESSAGE = "Something went wrong."
CREDENTIALS_PROVIDER_ID = "credentials"

logger = logging.getLogger(__name__)


class AuthenticateUseCase:
    def __init__(self, session_establisher: SessionEstablisherPort) -> None:
        self._session_establisher = session_establisher

    async def execute(
        self,
        form: Mapping[str, Any],
        session: MutableMapping[str, Any],
    ) -> str | None:
        """Sign in with the credentials provider.

        Returns the message to show on the login form. On success the
        session establisher raises ``Redirect`` and nothing is returned.
        """
        try:
            await self._session_establisher.sign_in(CREDENTIALS_PROVIDER_ID, form, session)
        except AuthError as exc:
            if exc.kind == CredentialsSignin.kind:
                return INVALID_CREDENTIALS_MESSAGE
            logger.warning("sign_in_failed kind=%s error=%s", exc.kind, str(exc))
            return GENERIC_FAILURE_MESSAGE
        return None
