"""Authentication: who is signed in, and change notification.

Two backends share the :class:`AuthService` surface:

- :class:`LocalAuthService` keeps accounts in the local ``users`` table
  with salted PBKDF2 password hashes.
- :class:`SupabaseAuthService` delegates to the hosted auth API.

Every sign-in, sign-up and sign-out emits ``principal_changed``; the
timer engine and the history view re-read the principal from it.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
import uuid
from dataclasses import dataclass

from PyQt6.QtCore import QObject, pyqtSignal
from sqlalchemy.exc import IntegrityError

from .database.db import get_session
from .database.models import User
from .errors import AuthError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
PBKDF2_ITERATIONS = 200_000


@dataclass(frozen=True)
class Principal:
    id: str
    email: str


def _check_credentials(email: str, password: str) -> str:
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise AuthError("Please enter a valid email address.")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise AuthError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )
    return email


def hash_password(password: str, *, iterations: int = PBKDF2_ITERATIONS) -> str:
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations)
    return f"pbkdf2_sha256${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), bytes.fromhex(salt_hex), int(iterations),
    )
    return hmac.compare_digest(digest.hex(), digest_hex)


class AuthService(QObject):
    """Base class; subclasses implement the credential checks.

    Signals
    -------
    principal_changed(principal: Principal | None)
        Emitted whenever the signed-in user changes.
    """

    principal_changed = pyqtSignal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._principal: Principal | None = None

    @property
    def current_user(self) -> Principal | None:
        return self._principal

    @property
    def is_authenticated(self) -> bool:
        return self._principal is not None

    def sign_in(self, email: str, password: str) -> Principal:
        raise NotImplementedError

    def sign_up(self, email: str, password: str) -> Principal | None:
        raise NotImplementedError

    def sign_out(self) -> None:
        self._set_principal(None)

    def _set_principal(self, principal: Principal | None) -> None:
        if principal == self._principal:
            return
        self._principal = principal
        if principal is None:
            logger.info("Signed out")
        else:
            logger.info("Signed in as %s", principal.email)
        self.principal_changed.emit(principal)


class LocalAuthService(AuthService):
    """Accounts stored in the local database."""

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        iterations: int = PBKDF2_ITERATIONS,
    ) -> None:
        super().__init__(parent)
        self._iterations = iterations

    def sign_up(self, email: str, password: str) -> Principal:
        email = _check_credentials(email, password)
        user_id = str(uuid.uuid4())
        try:
            with get_session() as db:
                if db.query(User).filter(User.email == email).first() is not None:
                    raise AuthError("An account with this email already exists.")
                db.add(User(
                    id=user_id,
                    email=email,
                    password_hash=hash_password(password, iterations=self._iterations),
                ))
        except IntegrityError as exc:
            raise AuthError("An account with this email already exists.") from exc

        principal = Principal(id=user_id, email=email)
        self._set_principal(principal)
        return principal

    def sign_in(self, email: str, password: str) -> Principal:
        email = _check_credentials(email, password)
        with get_session() as db:
            user = db.query(User).filter(User.email == email).first()
            if user is None or not verify_password(password, user.password_hash):
                raise AuthError("Invalid email or password.")
            principal = Principal(id=user.id, email=user.email)
        self._set_principal(principal)
        return principal


class SupabaseAuthService(AuthService):
    """Hosted auth.  The client keeps the access/refresh tokens itself."""

    def __init__(self, client, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._client = client

    def restore(self) -> Principal | None:
        """Pick up a session the client already holds (e.g. after restart)."""
        try:
            session = self._client.auth.get_session()
        except Exception as exc:
            logger.warning("Could not restore auth session: %s", exc)
            return None
        user = getattr(session, "user", None) if session else None
        if user is not None:
            self._set_principal(Principal(id=str(user.id), email=user.email or ""))
        return self._principal

    def sign_in(self, email: str, password: str) -> Principal:
        email = _check_credentials(email, password)
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as exc:
            logger.warning("Sign-in failed for %s: %s", email, exc)
            raise AuthError(str(exc) or "Invalid email or password.") from exc
        if response.user is None:
            raise AuthError("Invalid email or password.")
        principal = Principal(id=str(response.user.id), email=response.user.email or email)
        self._set_principal(principal)
        return principal

    def sign_up(self, email: str, password: str) -> Principal | None:
        """Create the account.

        Returns None when the project requires email confirmation before
        the first sign-in (no session is issued in that case).
        """
        email = _check_credentials(email, password)
        try:
            response = self._client.auth.sign_up({"email": email, "password": password})
        except Exception as exc:
            logger.warning("Sign-up failed for %s: %s", email, exc)
            raise AuthError(str(exc) or "Could not create the account.") from exc
        if response.user is None or response.session is None:
            return None
        principal = Principal(id=str(response.user.id), email=response.user.email or email)
        self._set_principal(principal)
        return principal

    def sign_out(self) -> None:
        try:
            self._client.auth.sign_out()
        except Exception as exc:
            logger.warning("Remote sign-out failed: %s", exc)
        super().sign_out()
