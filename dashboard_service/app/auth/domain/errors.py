class AuthError(Exception):
    """Base class of sign-in failures, classified by ``kind``."""

    kind = "AuthError"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.kind)


class CredentialsSignin(AuthError):
    kind = "CredentialsSignin"


class CallbackRouteError(AuthError):
    kind = "CallbackRouteError"


class InvalidProvider(AuthError):
    kind = "InvalidProvider"


class AccountLookupError(Exception):
    def __init__(self, message: str = "Failed to fetch user.") -> None:
        super().__init__(message)
