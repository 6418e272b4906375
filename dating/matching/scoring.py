from __future__ import annotations

import math
from typing import Iterable, Mapping

from ..profiles.models import Profile

HOBBY_POINTS = 10
HOBBY_CAP = 50
TRAIT_MAX_SIMILARITY = 5
TRAIT_SCALE = 10


def hobby_score(hobbies_a: Iterable[str], hobbies_b: Iterable[str]) -> int:
    """10 points per shared hobby (case-insensitive), capped at 50."""
    shared = {h.lower() for h in hobbies_a} & {h.lower() for h in hobbies_b}
    return min(len(shared) * HOBBY_POINTS, HOBBY_CAP)


def trait_score(traits_a: Mapping[str, int], traits_b: Mapping[str, int]) -> float:
    """Average per-trait similarity over traits both vectors define, times 10.

    Similarity for one trait is ``5 - |a - b|``. There is no separate cap:
    the 1-5 value range bounds the result at 50.
    """
    total = 0
    matched = 0
    for name, value in traits_a.items():
        if name in traits_b:
            total += TRAIT_MAX_SIMILARITY - abs(value - traits_b[name])
            matched += 1
    if matched == 0:
        return 0.0
    return (total / matched) * TRAIT_SCALE


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score(requester: Profile, candidate: Profile) -> int:
    """Compatibility of *candidate* for *requester*, an integer in 0-100."""
    raw = hobby_score(requester.hobby_set(), candidate.hobby_set()) + trait_score(
        requester.traits, candidate.traits,
    )
    return _round_half_up(raw)
