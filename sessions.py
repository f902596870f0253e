"""
Session authority

Opaque bearer tokens for the single configured admin. Sessions live in
process memory only: they end on logout or when the process stops.
"""

import logging
import secrets
import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from passlib.context import CryptContext
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as SchemaError

from errors import AuthError, ValidationError
from schemas import Identity, Session

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
email_adapter = TypeAdapter(EmailStr)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


def normalize_email(email: str) -> Optional[str]:
    """Email in the same form `EmailStr` settings hold it, or None if invalid."""
    try:
        return email_adapter.validate_python(email)
    except SchemaError:
        return None


class SessionAuthority:
    def __init__(self, admin_email: str, password_hash: str):
        self.admin_email = normalize_email(admin_email) or admin_email
        self._password_hash = password_hash
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "SessionAuthority":
        password_hash = settings.ADMIN_PASSWORD_HASH or hash_password(settings.ADMIN_PASSWORD)
        return cls(settings.ADMIN_EMAIL, password_hash)

    def login(self, email: Optional[str], password: Optional[str]) -> Session:
        if not email or not password:
            raise ValidationError("Email and password are required.")
        password_ok = verify_password(password, self._password_hash)
        if normalize_email(email) != self.admin_email or not password_ok:
            logger.warning("Rejected login for %s", email)
            raise AuthError("Invalid email or password.")

        session = Session(
            token=create_token(),
            identity=Identity(email=self.admin_email),
            issued_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._sessions[session.token] = session
        logger.info("Admin %s logged in", email)
        return session

    def validate(self, token: Optional[str]) -> Optional[Session]:
        if not token:
            return None
        with self._lock:
            return self._sessions.get(token)

    def logout(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            session = self._sessions.pop(token, None)
        if session is not None:
            logger.info("Admin %s logged out", session.identity.email)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
