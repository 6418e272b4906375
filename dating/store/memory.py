from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from ..errors import DuplicateSwipeError, ProfileExistsError, ProfileNotFoundError
from ..matching.models import Match, SwipeEvent, SwipeOutcome
from ..profiles.models import Profile
from .base import CandidateFilter

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryProfileStore:
    """Profiles kept in insertion order; candidate queries return that order."""

    def __init__(self) -> None:
        self._profiles: dict[str, Profile] = {}
        self._lock = threading.Lock()

    def get_profile(self, user_id: str) -> Profile | None:
        return self._profiles.get(user_id)

    def get_profiles(self, user_ids: Iterable[str]) -> list[Profile]:
        return [self._profiles[uid] for uid in user_ids if uid in self._profiles]

    def list_candidate_profiles(
        self, candidate_filter: CandidateFilter, limit: int,
    ) -> list[Profile]:
        result: list[Profile] = []
        for profile in list(self._profiles.values()):
            if len(result) >= limit:
                break
            if candidate_filter.accepts(profile):
                result.append(profile)
        return result

    def create_profile(self, profile: Profile) -> Profile:
        with self._lock:
            if profile.id in self._profiles:
                raise ProfileExistsError(profile.id)
            stored = profile.model_copy(
                update={"created_at": profile.created_at or _now()},
            )
            self._profiles[profile.id] = stored
        return stored

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> Profile:
        with self._lock:
            current = self._profiles.get(user_id)
            if current is None:
                raise ProfileNotFoundError(user_id)
            # Merged record goes through full validation again
            updated = Profile.model_validate({**current.model_dump(), **changes, "id": user_id})
            self._profiles[user_id] = updated
        return updated


class InMemorySwipeStore:
    """Append-only swipe ledger with lock-guarded match creation."""

    def __init__(self) -> None:
        self._swipes: dict[tuple[str, str], SwipeEvent] = {}
        self._matches: dict[frozenset[str], Match] = {}
        self._lock = threading.Lock()

    def list_swiped_ids(self, user_id: str) -> set[str]:
        with self._lock:
            return {swiped for swiper, swiped in self._swipes if swiper == user_id}

    def record_swipe(self, swiper_id: str, swiped_id: str, liked: bool) -> SwipeOutcome:
        with self._lock:
            key = (swiper_id, swiped_id)
            if key in self._swipes:
                raise DuplicateSwipeError(swiper_id, swiped_id)
            event = SwipeEvent(
                swiper_id=swiper_id, swiped_id=swiped_id, liked=liked, created_at=_now(),
            )
            self._swipes[key] = event

            pair = frozenset(key)
            match = self._matches.get(pair)
            reverse = self._swipes.get((swiped_id, swiper_id))
            if match is None and liked and reverse is not None and reverse.liked:
                match = Match(
                    id=str(uuid.uuid4()),
                    user1_id=swiped_id,
                    user2_id=swiper_id,
                    created_at=event.created_at,
                )
                self._matches[pair] = match
                logger.info("Match %s created between %s and %s", match.id, swiped_id, swiper_id)
        return SwipeOutcome(swipe=event, match=match)

    def list_matches(self, user_id: str) -> list[Match]:
        with self._lock:
            mine = [m for m in self._matches.values() if m.involves(user_id)]
        # Later insertions win timestamp ties
        return sorted(reversed(mine), key=lambda m: m.created_at, reverse=True)
