from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
MIN_PASSWORD_LENGTH = 6


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @classmethod
    def safe_parse(cls, payload: Mapping[str, Any]) -> "Credentials | None":
        try:
            return cls.model_validate(
                {"email": payload.get("email"), "password": payload.get("password")}
            )
        except ValidationError:
            return None
