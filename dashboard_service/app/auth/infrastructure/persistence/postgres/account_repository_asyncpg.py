import logging

import asyncpg  # type: ignore[import-untyped]

from app.auth.domain.entities.account import Account
from app.auth.domain.errors import AccountLookupError
from app.shared.infrastructure.persistence.postgres.errors import DATABASE_ERRORS

logger = logging.getLogger(__name__)


class AccountRepositoryAsyncpg:
    def __init__(self, db_pool: asyncpg.Pool) -> None:
        self._db_pool = db_pool

    async def get_by_email(self, email: str) -> Account | None:
        try:
            async with self._db_pool.acquire() as connection:
                row = await connection.fetchrow(
                    "SELECT id, name, email, password FROM users WHERE email = $1",
                    email,
                )
        except DATABASE_ERRORS as exc:
            logger.exception("account_lookup_failed")
            raise AccountLookupError() from exc

        if row is None:
            return None
        return Account.from_record(row)
