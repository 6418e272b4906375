from __future__ import annotations

import logging

from ..config import DEFAULT_APP_CONFIG
from ..errors import ProfileNotFoundError
from ..profiles.models import LookingFor
from ..store.base import CandidateFilter, ProfileStore, SwipeStore
from .models import ScoredProfile
from .scoring import score

logger = logging.getLogger(__name__)

CANDIDATE_POOL_LIMIT = DEFAULT_APP_CONFIG.candidate_pool_limit


def discover(
    requester_id: str,
    profiles: ProfileStore,
    swipes: SwipeStore,
    limit: int = CANDIDATE_POOL_LIMIT,
) -> list[ScoredProfile]:
    """Return unseen candidates for *requester_id*, best match first.

    The *limit* is applied by the store before scoring, so the result ranks
    the first *limit* eligible profiles in storage order rather than the
    best *limit* of the whole population. Equal scores keep storage order.

    Raises ``ProfileNotFoundError`` when the requester has not set up a
    profile yet.
    """
    requester = profiles.get_profile(requester_id)
    if requester is None:
        raise ProfileNotFoundError(requester_id)

    swiped_ids = swipes.list_swiped_ids(requester_id)
    gender = None
    if requester.looking_for != LookingFor.everyone:
        gender = requester.looking_for.value

    candidate_filter = CandidateFilter(
        exclude_id=requester_id,
        gender=gender,
        exclude_ids=frozenset(swiped_ids),
    )
    pool = profiles.list_candidate_profiles(candidate_filter, limit)

    scored: list[ScoredProfile] = []
    for candidate in pool:
        if not candidate_filter.accepts(candidate):
            logger.warning(
                "Store returned ineligible candidate %s for %s; skipping",
                candidate.id, requester_id,
            )
            continue
        scored.append(ScoredProfile(
            **candidate.model_dump(),
            compatibility_score=score(requester, candidate),
        ))

    # list.sort is stable: ties keep the order the store returned them in
    scored.sort(key=lambda p: p.compatibility_score, reverse=True)
    return scored
