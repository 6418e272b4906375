from __future__ import annotations

from ..auth.users import AccountStore, InMemoryAccountStore, SupabaseAccountStore
from ..config import DEFAULT_APP_CONFIG, AppConfig
from .base import ProfileStore, SwipeStore
from .memory import InMemoryProfileStore, InMemorySwipeStore

_account_store: AccountStore | None = None
_profile_store: ProfileStore | None = None
_swipe_store: SwipeStore | None = None


def _build(config: AppConfig) -> tuple[AccountStore, ProfileStore, SwipeStore]:
    """Accounts always live in the same backend as the rows keyed by their ids."""
    if config.store_backend == "memory":
        return InMemoryAccountStore(), InMemoryProfileStore(), InMemorySwipeStore()
    if config.store_backend == "supabase":
        from .supabase_store import SupabaseProfileStore, SupabaseSwipeStore, make_client

        client = make_client()
        return (
            SupabaseAccountStore(client),
            SupabaseProfileStore(client),
            SupabaseSwipeStore(client),
        )
    raise ValueError(f"Unknown store backend: {config.store_backend!r}")


def _ensure(config: AppConfig = DEFAULT_APP_CONFIG) -> None:
    global _account_store, _profile_store, _swipe_store
    if _profile_store is None or _swipe_store is None or _account_store is None:
        _account_store, _profile_store, _swipe_store = _build(config)


def get_account_store() -> AccountStore:
    _ensure()
    return _account_store


def get_profile_store() -> ProfileStore:
    """Return the process-wide profile store, creating it on first call."""
    _ensure()
    return _profile_store


def get_swipe_store() -> SwipeStore:
    _ensure()
    return _swipe_store


def reset_stores() -> None:
    """Drop the current stores; the next call builds fresh ones."""
    global _account_store, _profile_store, _swipe_store
    _account_store = None
    _profile_store = None
    _swipe_store = None
