from __future__ import annotations

import pytest
from pydantic import ValidationError

from dating.errors import ProfileExistsError, ProfileNotFoundError
from dating.profiles.models import Profile, ProfileCreate, ProfileUpdate, normalize_hobbies
from dating.profiles.service import get_own_profile, setup_profile, update_own_profile
from dating.store.memory import InMemoryProfileStore

VALID = {
    "display_name": "Alex",
    "age": 29,
    "gender": "female",
    "looking_for": "male",
    "hobbies": ["Hiking", "music"],
    "traits": {"creative": 4, "humorous": 2},
}


def test_normalize_hobbies_strips_and_dedupes():
    assert normalize_hobbies([" Hiking ", "hiking", "", "Music", "  "]) == ["Hiking", "Music"]
    assert normalize_hobbies(None) == []


def test_profile_missing_collections_become_empty():
    p = Profile(id="u1", display_name="A", age=18, gender="male", looking_for="everyone",
                hobbies=None, traits=None)
    assert p.hobbies == []
    assert p.traits == {}


def test_profile_rejects_underage():
    with pytest.raises(ValidationError):
        Profile(id="u1", display_name="A", age=17, gender="male", looking_for="female")


def test_profile_rejects_out_of_range_trait():
    with pytest.raises(ValidationError):
        Profile(id="u1", display_name="A", age=20, gender="male", looking_for="female",
                traits={"creative": 6})


def test_profile_hobby_set_is_lowercase():
    p = Profile(id="u1", display_name="A", age=20, gender="male", looking_for="female",
                hobbies=["Hiking", "MUSIC"])
    assert p.hobby_set() == frozenset({"hiking", "music"})


def test_profile_create_rejects_unknown_trait():
    with pytest.raises(ValidationError):
        ProfileCreate(**{**VALID, "traits": {"grumpy": 3}})


def test_profile_create_rejects_bad_enum():
    with pytest.raises(ValidationError):
        ProfileCreate(**{**VALID, "looking_for": "robots"})


def test_setup_profile_and_read_back():
    store = InMemoryProfileStore()
    created = setup_profile("u1", ProfileCreate(**VALID), store)
    assert created.id == "u1"
    assert created.created_at is not None
    assert get_own_profile("u1", store) == created


def test_setup_profile_twice_is_rejected():
    store = InMemoryProfileStore()
    setup_profile("u1", ProfileCreate(**VALID), store)
    with pytest.raises(ProfileExistsError):
        setup_profile("u1", ProfileCreate(**VALID), store)


def test_get_own_profile_missing():
    with pytest.raises(ProfileNotFoundError):
        get_own_profile("nobody", InMemoryProfileStore())


def test_update_replaces_collections_and_keeps_other_fields():
    store = InMemoryProfileStore()
    setup_profile("u1", ProfileCreate(**VALID), store)

    updated = update_own_profile(
        "u1", ProfileUpdate(hobbies=["Chess"], traits={"empathetic": 5}, bio="hi"), store,
    )

    assert updated.hobbies == ["Chess"]
    assert updated.traits == {"empathetic": 5}
    assert updated.bio == "hi"
    assert updated.display_name == "Alex"
    assert updated.age == 29


def test_update_ignores_null_for_required_fields():
    store = InMemoryProfileStore()
    setup_profile("u1", ProfileCreate(**{**VALID, "bio": "old"}), store)

    updated = update_own_profile(
        "u1", ProfileUpdate.model_validate({"display_name": None, "bio": None}), store,
    )

    assert updated.display_name == "Alex"
    assert updated.bio is None


def test_update_missing_profile():
    with pytest.raises(ProfileNotFoundError):
        update_own_profile("nobody", ProfileUpdate(age=40), InMemoryProfileStore())
