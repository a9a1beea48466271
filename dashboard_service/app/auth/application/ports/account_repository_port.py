from typing import Protocol

from app.auth.domain.entities.account import Account


class AccountRepositoryPort(Protocol):
    async def get_by_email(self, email: str) -> Account | None: ...
