from __future__ import annotations

import logging

from ..errors import InvalidSwipeError, ProfileNotFoundError
from ..store.base import ProfileStore, SwipeStore
from .models import MatchOut, SwipeOutcome

logger = logging.getLogger(__name__)


def record_swipe(
    swiper_id: str,
    swiped_id: str,
    liked: bool,
    profiles: ProfileStore,
    swipes: SwipeStore,
) -> SwipeOutcome:
    """Record a like/dislike and report whether it completed a match.

    Reciprocity detection and match creation belong to the swipe store;
    this only validates both parties and forwards the event.
    """
    if swiper_id == swiped_id:
        raise InvalidSwipeError("Cannot swipe on your own profile")
    if profiles.get_profile(swiper_id) is None:
        raise ProfileNotFoundError(swiper_id)
    if profiles.get_profile(swiped_id) is None:
        raise ProfileNotFoundError(swiped_id)

    outcome = swipes.record_swipe(swiper_id, swiped_id, liked)
    logger.debug(
        "Swipe %s -> %s liked=%s match=%s",
        swiper_id, swiped_id, liked, outcome.match is not None,
    )
    return outcome


def list_matches(
    user_id: str,
    profiles: ProfileStore,
    swipes: SwipeStore,
) -> list[MatchOut]:
    """Matches of *user_id*, newest first, each with the other user's profile."""
    matches = swipes.list_matches(user_id)
    if not matches:
        return []

    others = profiles.get_profiles([m.other(user_id) for m in matches])
    by_id = {p.id: p for p in others}
    return [
        MatchOut(
            match_id=m.id,
            matched_at=m.created_at,
            profile=by_id.get(m.other(user_id)),
        )
        for m in matches
    ]
