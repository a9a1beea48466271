import unittest
from typing import Any, Mapping, MutableMapping

from app.auth.application.use_cases.authenticate import AuthenticateUseCase
from app.auth.application.use_cases.credential_verifier import CredentialVerifier
from app.auth.domain.entities.account import Account
from app.auth.domain.errors import AccountLookupError, AuthError, InvalidProvider
from app.auth.infrastructure.security.passwords import hash_password
from app.auth.infrastructure.session.session_auth import (
    SESSION_USER_KEY,
    CredentialsProvider,
    SessionAuth,
)
from app.shared.domain.navigation import Redirect


class _FakeAccountRepository:
    def __init__(self, accounts: list[Account], fail: bool = False) -> None:
        self.accounts = {account.email: account for account in accounts}
        self.fail = fail

    async def get_by_email(self, email: str) -> Account | None:
        if self.fail:
            raise AccountLookupError()
        return self.accounts.get(email)


class _RaisingEstablisher:
    def __init__(self, error: BaseException) -> None:
        self.error = error

    async def sign_in(
        self,
        provider_id: str,
        form: Mapping[str, Any],
        session: MutableMapping[str, Any],
    ) -> None:
        raise self.error


class _AccountLockedError(AuthError):
    kind = "AccountLocked"


_ACCOUNT = Account(
    id="410544b2-4001-4271-9855-fec4b6a6442a",
    name="User",
    email="user@nextmail.com",
    password_hash=hash_password("123456", rounds=4),
)


def _session_auth(fail: bool = False) -> SessionAuth:
    repository = _FakeAccountRepository([_ACCOUNT], fail=fail)
    return SessionAuth(providers=[CredentialsProvider(CredentialVerifier(repository))])


class TestAuthenticate(unittest.IsolatedAsyncioTestCase):
    async def test_invalid_credentials_message(self) -> None:
        session: dict[str, Any] = {}

        message = await AuthenticateUseCase(_session_auth()).execute(
            {"email": "user@nextmail.com", "password": "wrong-password"}, session
        )

        self.assertEqual(message, "Invalid credentials.")
        self.assertEqual(session, {})

    async def test_short_password_is_invalid_credentials(self) -> None:
        session: dict[str, Any] = {}

        message = await AuthenticateUseCase(_session_auth()).execute(
            {"email": "user@nextmail.com", "password": "123"}, session
        )

        self.assertEqual(message, "Invalid credentials.")
        self.assertEqual(session, {})

    async def test_backend_failure_is_something_went_wrong(self) -> None:
        session: dict[str, Any] = {}

        with self.assertLogs("app.auth.infrastructure.session.session_auth", "ERROR"):
            message = await AuthenticateUseCase(_session_auth(fail=True)).execute(
                {"email": "user@nextmail.com", "password": "123456"}, session
            )

        self.assertEqual(message, "Something went wrong.")
        self.assertEqual(session, {})

    async def test_other_auth_error_kind_is_something_went_wrong(self) -> None:
        message = await AuthenticateUseCase(_RaisingEstablisher(_AccountLockedError())).execute(
            {}, {}
        )

        self.assertEqual(message, "Something went wrong.")

    async def test_non_auth_errors_propagate(self) -> None:
        use_case = AuthenticateUseCase(_RaisingEstablisher(RuntimeError("boom")))

        with self.assertRaises(RuntimeError):
            await use_case.execute({}, {})

    async def test_success_establishes_session_and_redirects(self) -> None:
        session: dict[str, Any] = {}

        with self.assertRaises(Redirect) as raised:
            await AuthenticateUseCase(_session_auth()).execute(
                {"email": "user@nextmail.com", "password": "123456"}, session
            )

        self.assertEqual(raised.exception.location, "/dashboard")
        self.assertEqual(
            session[SESSION_USER_KEY],
            {"id": _ACCOUNT.id, "name": "User", "email": "user@nextmail.com"},
        )


class TestSessionAuth(unittest.IsolatedAsyncioTestCase):
    async def test_local_redirect_target_is_honoured(self) -> None:
        with self.assertRaises(Redirect) as raised:
            await _session_auth().sign_in(
                "credentials",
                {
                    "email": "user@nextmail.com",
                    "password": "123456",
                    "redirectTo": "/dashboard/invoices",
                },
                {},
            )

        self.assertEqual(raised.exception.location, "/dashboard/invoices")

    async def test_external_redirect_target_is_replaced(self) -> None:
        for target in ("https://evil.example/", "//evil.example/"):
            with self.subTest(target=target):
                with self.assertRaises(Redirect) as raised:
                    await _session_auth().sign_in(
                        "credentials",
                        {"email": "user@nextmail.com", "password": "123456", "redirectTo": target},
                        {},
                    )

                self.assertEqual(raised.exception.location, "/dashboard")

    async def test_unknown_provider_is_classified(self) -> None:
        with self.assertRaises(InvalidProvider) as raised:
            await _session_auth().sign_in("github", {}, {})

        self.assertEqual(raised.exception.kind, "InvalidProvider")

    def test_sign_out_clears_session_and_redirects_home(self) -> None:
        session: dict[str, Any] = {SESSION_USER_KEY: {"id": "1", "name": "U", "email": "u@x.io"}}

        with self.assertRaises(Redirect) as raised:
            _session_auth().sign_out(session)

        self.assertEqual(raised.exception.location, "/")
        self.assertEqual(session, {})

    def test_authorized_guards_dashboard_paths(self) -> None:
        session_auth = _session_auth()
        signed_in = {SESSION_USER_KEY: {"id": "1", "name": "U", "email": "u@x.io"}}

        self.assertEqual(
            session_auth.authorized("/dashboard/invoices", {}),
            "/login?callbackUrl=/dashboard/invoices",
        )
        self.assertIsNone(session_auth.authorized("/dashboard/invoices", signed_in))
        self.assertIsNone(session_auth.authorized("/", {}))
        self.assertIsNone(session_auth.authorized("/dashboardx", {}))
        self.assertEqual(session_auth.authorized("/login", signed_in), "/dashboard")
        self.assertIsNone(session_auth.authorized("/login", {}))


if __name__ == "__main__":
    unittest.main()
