"""Contracts for the external profile and swipe stores.

The discovery engine only talks to these protocols, so it can run against
the in-memory store in tests and against Supabase in production.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol, runtime_checkable

from ..matching.models import Match, SwipeOutcome
from ..profiles.models import Profile


@dataclass(frozen=True)
class CandidateFilter:
    exclude_id: str
    gender: str | None = None
    exclude_ids: frozenset[str] = field(default_factory=frozenset)

    def accepts(self, profile: Profile) -> bool:
        if profile.id == self.exclude_id or profile.id in self.exclude_ids:
            return False
        return self.gender is None or profile.gender.value == self.gender


@runtime_checkable
class ProfileStore(Protocol):
    def get_profile(self, user_id: str) -> Profile | None:
        """Return the profile with its hobbies and traits, or ``None``."""
        ...

    def get_profiles(self, user_ids: Iterable[str]) -> list[Profile]:
        ...

    def list_candidate_profiles(
        self, candidate_filter: CandidateFilter, limit: int,
    ) -> list[Profile]:
        """Return at most *limit* profiles passing *candidate_filter*, in storage order."""
        ...

    def create_profile(self, profile: Profile) -> Profile:
        ...

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> Profile:
        ...


@runtime_checkable
class SwipeStore(Protocol):
    def list_swiped_ids(self, user_id: str) -> set[str]:
        ...

    def record_swipe(self, swiper_id: str, swiped_id: str, liked: bool) -> SwipeOutcome:
        """Insert a swipe and, atomically, create the match if it is reciprocal.

        Raises ``DuplicateSwipeError`` if *swiper_id* already swiped on
        *swiped_id*.
        """
        ...

    def list_matches(self, user_id: str) -> list[Match]:
        """Matches involving *user_id*, newest first."""
        ...
