from __future__ import annotations

from ..errors import ProfileNotFoundError
from ..store.base import ProfileStore
from .models import Profile, ProfileCreate, ProfileUpdate

# Fields that may be cleared with an explicit null
_NULLABLE_FIELDS = {"bio", "location"}


def setup_profile(user_id: str, body: ProfileCreate, store: ProfileStore) -> Profile:
    """Create the profile of *user_id*. Raises ``ProfileExistsError`` on repeat."""
    profile = Profile(id=user_id, **body.model_dump())
    return store.create_profile(profile)


def get_own_profile(user_id: str, store: ProfileStore) -> Profile:
    profile = store.get_profile(user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)
    return profile


def update_own_profile(user_id: str, body: ProfileUpdate, store: ProfileStore) -> Profile:
    changes = {
        key: value
        for key, value in body.model_dump(exclude_unset=True).items()
        if value is not None or key in _NULLABLE_FIELDS
    }
    if not changes:
        return get_own_profile(user_id, store)
    return store.update_profile(user_id, changes)
