import asyncio
import logging
from collections.abc import Callable
from typing import Any, Mapping

from opentelemetry import trace

from app.auth.application.ports.account_repository_port import AccountRepositoryPort
from app.auth.domain.entities.account import Account
from app.auth.domain.entities.credentials import Credentials
from app.auth.infrastructure.security.passwords import password_matches

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class CredentialVerifier:
    """Checks a submitted email/password pair against the stored bcrypt hash.

    Malformed input, an unknown email and a wrong password all yield ``None``.
    Store failures are not folded into that result: the repository raises
    ``AccountLookupError`` and it propagates to the caller.
    """

    def __init__(
        self,
        account_repository: AccountRepositoryPort,
        password_checker: Callable[[str, str], bool] = password_matches,
    ) -> None:
        self._account_repository = account_repository
        self._password_checker = password_checker

    async def authorize(self, credentials: Mapping[str, Any]) -> Account | None:
        parsed = Credentials.safe_parse(credentials)
        if parsed is None:
            logger.info("invalid_credentials reason=malformed")
            return None

        with tracer.start_as_current_span("credential_verifier.lookup"):
            account = await self._account_repository.get_by_email(parsed.email)
        if account is None:
            logger.info("invalid_credentials reason=unknown_account")
            return None

        passwords_match = await asyncio.to_thread(
            self._password_checker, parsed.password, account.password_hash
        )
        if passwords_match:
            return account

        logger.info("invalid_credentials reason=password_mismatch")
        return None
