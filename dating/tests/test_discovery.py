from __future__ import annotations

import pytest

from dating.errors import ProfileNotFoundError
from dating.matching.discovery import discover
from dating.matching.scoring import score
from dating.profiles.models import Profile
from dating.store.memory import InMemoryProfileStore, InMemorySwipeStore


def _profile(uid: str, gender="female", looking_for="everyone", hobbies=(), traits=None) -> Profile:
    return Profile(
        id=uid,
        display_name=uid.title(),
        age=30,
        gender=gender,
        looking_for=looking_for,
        hobbies=list(hobbies),
        traits=traits or {},
    )


def _stores(*profiles: Profile):
    profile_store = InMemoryProfileStore()
    for p in profiles:
        profile_store.create_profile(p)
    return profile_store, InMemorySwipeStore()


def test_discover_ranks_by_compatibility():
    requester = _profile("me", gender="male", hobbies=["hiking", "music"], traits={"creative": 3})
    low = _profile("low", hobbies=["chess"], traits={"creative": 5})
    high = _profile("high", hobbies=["hiking", "music"], traits={"creative": 3})
    mid = _profile("mid", hobbies=["hiking"], traits={"creative": 4})
    profiles, swipes = _stores(requester, low, high, mid)

    result = discover("me", profiles, swipes)

    assert [p.id for p in result] == ["high", "mid", "low"]
    scores = [p.compatibility_score for p in result]
    assert scores == sorted(scores, reverse=True)
    assert result[0].compatibility_score == score(requester, high)


def test_discover_never_returns_requester():
    profiles, swipes = _stores(_profile("me"), _profile("other"))
    result = discover("me", profiles, swipes)
    assert "me" not in [p.id for p in result]


def test_discover_excludes_swiped_profiles_regardless_of_outcome():
    profiles, swipes = _stores(_profile("me"), _profile("liked"), _profile("passed"), _profile("new"))
    swipes.record_swipe("me", "liked", True)
    swipes.record_swipe("me", "passed", False)

    result = discover("me", profiles, swipes)

    assert [p.id for p in result] == ["new"]


def test_discover_keeps_profiles_that_swiped_on_requester():
    profiles, swipes = _stores(_profile("me"), _profile("fan"))
    swipes.record_swipe("fan", "me", True)
    assert [p.id for p in discover("me", profiles, swipes)] == ["fan"]


def test_discover_filters_by_gender_preference():
    profiles, swipes = _stores(
        _profile("me", gender="male", looking_for="female"),
        _profile("f1", gender="female"),
        _profile("m1", gender="male"),
        _profile("o1", gender="other"),
    )
    result = discover("me", profiles, swipes)
    assert [p.id for p in result] == ["f1"]
    assert all(p.gender.value == "female" for p in result)


def test_discover_everyone_applies_no_gender_filter():
    profiles, swipes = _stores(
        _profile("me", looking_for="everyone"),
        _profile("f1", gender="female"),
        _profile("m1", gender="male"),
        _profile("o1", gender="other"),
    )
    assert {p.id for p in discover("me", profiles, swipes)} == {"f1", "m1", "o1"}


def test_discover_ties_keep_storage_order():
    profiles, swipes = _stores(
        _profile("me", hobbies=["music"]),
        _profile("first", hobbies=["music"]),
        _profile("zero"),
        _profile("second", hobbies=["Music"]),
    )
    result = discover("me", profiles, swipes)
    assert [p.id for p in result] == ["first", "second", "zero"]


def test_discover_truncates_pool_before_scoring():
    profiles, swipes = _stores(
        _profile("me", hobbies=["music"]),
        _profile("a"),
        _profile("b"),
        _profile("best", hobbies=["music"]),
    )
    result = discover("me", profiles, swipes, limit=2)
    assert [p.id for p in result] == ["a", "b"]


def test_discover_empty_pool_returns_empty_list():
    profiles, swipes = _stores(_profile("me", looking_for="male"), _profile("f1", gender="female"))
    assert discover("me", profiles, swipes) == []


def test_discover_missing_requester_profile_raises_not_found():
    profiles, swipes = _stores(_profile("someone"))
    with pytest.raises(ProfileNotFoundError) as info:
        discover("ghost", profiles, swipes)
    assert info.value.user_id == "ghost"


def test_discover_serializes_score_as_camel_case():
    profiles, swipes = _stores(_profile("me"), _profile("other"))
    payload = discover("me", profiles, swipes)[0].model_dump(by_alias=True)
    assert "compatibilityScore" in payload
    assert payload["id"] == "other"


class _LeakyProfileStore(InMemoryProfileStore):
    """Ignores the candidate filter, like a misconfigured remote query."""

    def list_candidate_profiles(self, candidate_filter, limit):
        return list(self._profiles.values())[:limit]


def test_discover_drops_ineligible_profiles_from_store():
    profiles = _LeakyProfileStore()
    for p in (
        _profile("me", looking_for="female"),
        _profile("seen", gender="female"),
        _profile("wrong", gender="male"),
        _profile("ok", gender="female"),
    ):
        profiles.create_profile(p)
    swipes = InMemorySwipeStore()
    swipes.record_swipe("me", "seen", False)

    assert [p.id for p in discover("me", profiles, swipes)] == ["ok"]
