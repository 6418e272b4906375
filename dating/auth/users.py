from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Protocol

import bcrypt
from supabase import AuthError, Client

from ..errors import StoreFailure

logger = logging.getLogger(__name__)


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountStore(Protocol):
    def register(self, email: str, password: str) -> dict[str, Any] | None:
        """Create an account. Returns ``{id, email}`` or ``None`` if the email is taken."""
        ...

    def authenticate(self, email: str, password: str) -> dict[str, Any] | None:
        """Verify credentials. Returns ``{id, email}`` or ``None``."""
        ...


class InMemoryAccountStore:
    """Process-local accounts; used with the in-memory profile store."""

    def __init__(self) -> None:
        self._users: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def register(self, email: str, password: str) -> dict[str, Any] | None:
        key = _normalize_email(email)
        with self._lock:
            if key in self._users:
                return None
            record = {
                "id": str(uuid.uuid4()),
                "password_hash": _hash_password(password),
            }
            self._users[key] = record
        return {"id": record["id"], "email": key}

    def authenticate(self, email: str, password: str) -> dict[str, Any] | None:
        key = _normalize_email(email)
        record = self._users.get(key)
        if record and _verify_password(password, record["password_hash"]):
            return {"id": record["id"], "email": key}
        return None


class SupabaseAccountStore:
    """Accounts in Supabase Auth, so user ids survive restarts and key the stored rows."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def register(self, email: str, password: str) -> dict[str, Any] | None:
        key = _normalize_email(email)
        try:
            response = self._client.auth.sign_up({"email": key, "password": password})
        except AuthError as exc:
            if _is_client_error(exc):
                logger.info("Sign-up rejected for %s: %s", key, exc.message)
                return None
            raise StoreFailure(f"Supabase sign-up failed: {exc.message}") from exc
        except Exception as exc:
            raise StoreFailure("Supabase sign-up failed") from exc

        user = response.user
        # An existing, unconfirmed address comes back as a user without identities
        if user is None or user.identities == []:
            return None
        return {"id": str(user.id), "email": user.email or key}

    def authenticate(self, email: str, password: str) -> dict[str, Any] | None:
        key = _normalize_email(email)
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": key, "password": password},
            )
        except AuthError as exc:
            if _is_client_error(exc):
                return None
            raise StoreFailure(f"Supabase sign-in failed: {exc.message}") from exc
        except Exception as exc:
            raise StoreFailure("Supabase sign-in failed") from exc

        user = response.user
        if user is None:
            return None
        return {"id": str(user.id), "email": user.email or key}


def _is_client_error(exc: AuthError) -> bool:
    status = getattr(exc, "status", None)
    return status is not None and 400 <= status < 500
