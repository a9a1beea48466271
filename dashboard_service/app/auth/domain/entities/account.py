from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class Account:
    id: str
    name: str
    email: str
    password_hash: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Account":
        return cls(
            id=str(record["id"]),
            name=str(record["name"]),
            email=str(record["email"]),
            password_hash=str(record["password"]),
        )


@dataclass(frozen=True, slots=True)
class SessionUser:
    """The part of an Account stored in the signed session cookie."""

    id: str
    name: str
    email: str

    @classmethod
    def from_account(cls, account: Account) -> "SessionUser":
        return cls(id=account.id, name=account.name, email=account.email)

    @classmethod
    def from_session(cls, payload: Any) -> "SessionUser | None":
        if not isinstance(payload, dict):
            return None
        try:
            return cls(
                id=str(payload["id"]),
                name=str(payload["name"]),
                email=str(payload["email"]),
            )
        except KeyError:
            return None

    def to_session(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "email": self.email}
