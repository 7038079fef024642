# shopdash/auth/session.py

"""Signed-in identity, threaded explicitly into the data-access services."""

import hmac
import logging
from dataclasses import dataclass

from shopdash.config.settings import Settings

logger = logging.getLogger("shopdash.auth")


@dataclass(frozen=True)
class Identity:
    """The authenticated user as seen by the dashboard."""

    user_id: str
    name: str = ""
    email: str = ""


class CredentialsProvider:
    """Email/password check against the configured accounts.

    Stands in for the external credential provider: credentials go in,
    an :class:`Identity` (or nothing) comes out.
    """

    def __init__(
        self, accounts: list[dict[str, str]] | None = None,
    ) -> None:
        self.accounts = (
            Settings.ACCOUNTS if accounts is None else accounts
        )

    def authorize(self, email: str, password: str) -> Identity | None:
        """Return the matching identity, or ``None`` for bad credentials."""
        email = email.strip().lower()
        for account in self.accounts:
            if account.get("email", "").lower() != email:
                continue
            if hmac.compare_digest(
                account.get("password", "").encode("utf-8"),
                password.encode("utf-8"),
            ):
                return Identity(
                    user_id=account["id"],
                    name=account.get("name", ""),
                    email=account.get("email", ""),
                )
        logger.info("Rejected sign-in for %s", email or "<empty>")
        return None


class SessionStore:
    """Holds the current identity for the lifetime of the app."""

    def __init__(self, identity: Identity | None = None) -> None:
        self._identity = identity

    @property
    def current(self) -> Identity | None:
        return self._identity

    @property
    def user_id(self) -> str | None:
        return self._identity.user_id if self._identity else None

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def sign_in(self, identity: Identity) -> None:
        self._identity = identity
        logger.info("Signed in as %s", identity.user_id)

    def sign_out(self) -> None:
        if self._identity is not None:
            logger.info("Signed out %s", self._identity.user_id)
        self._identity = None

    def auth_headers(self) -> dict[str, str]:
        """Identity header for the remote API, empty when signed out."""
        if self._identity is None:
            return {}
        return {Settings.USER_HEADER: self._identity.user_id}
