from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, Field, field_validator

TRAIT_NAMES: tuple[str, ...] = (
    "extroverted",
    "adventurous",
    "creative",
    "humorous",
    "empathetic",
)
TRAIT_MIN = 1
TRAIT_MAX = 5
TRAIT_DISPLAY_DEFAULT = 3

HOBBY_SUGGESTIONS: list[str] = [
    "Sports",
    "Travel",
    "Cooking",
    "Reading",
    "Gaming",
    "Music",
    "Art",
    "Photography",
    "Hiking",
    "Yoga",
    "Dancing",
    "Movies",
]


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class LookingFor(str, Enum):
    male = "male"
    female = "female"
    everyone = "everyone"


def normalize_hobbies(values: Iterable[Any] | None) -> list[str]:
    """Strip tags, drop blanks and collapse case-insensitive duplicates.

    The first spelling of a tag wins, so ``["Hiking", "hiking"]`` keeps
    ``"Hiking"``.
    """
    if not values:
        return []
    seen: set[str] = set()
    result: list[str] = []
    for raw in values:
        tag = str(raw).strip()
        key = tag.lower()
        if tag and key not in seen:
            seen.add(key)
            result.append(tag)
    return result


def _check_trait_values(traits: dict[str, int]) -> dict[str, int]:
    for name, value in traits.items():
        if not TRAIT_MIN <= value <= TRAIT_MAX:
            raise ValueError(
                f"trait {name!r} must be between {TRAIT_MIN} and {TRAIT_MAX}, got {value}"
            )
    return traits


def _check_trait_names(traits: dict[str, int]) -> dict[str, int]:
    unknown = sorted(set(traits) - set(TRAIT_NAMES))
    if unknown:
        raise ValueError(f"unknown traits: {', '.join(unknown)}")
    return traits


class Profile(BaseModel):
    """A user's dating profile with its hobby tags and trait vector."""

    id: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., ge=18)
    bio: str | None = None
    gender: Gender
    looking_for: LookingFor
    location: str | None = None
    hobbies: list[str] = Field(default_factory=list)
    traits: dict[str, int] = Field(default_factory=dict)
    created_at: datetime | None = None

    @field_validator("hobbies", mode="before")
    @classmethod
    def _clean_hobbies(cls, value: Any) -> list[str]:
        return normalize_hobbies(value)

    @field_validator("traits", mode="before")
    @classmethod
    def _none_traits(cls, value: Any) -> Any:
        return value or {}

    @field_validator("traits")
    @classmethod
    def _valid_traits(cls, value: dict[str, int]) -> dict[str, int]:
        return _check_trait_values(value)

    def hobby_set(self) -> frozenset[str]:
        return frozenset(h.lower() for h in self.hobbies)


class ProfileCreate(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., ge=18, le=120)
    bio: str | None = Field(default=None, max_length=500)
    gender: Gender
    looking_for: LookingFor
    location: str | None = Field(default=None, max_length=100)
    hobbies: list[str] = Field(default_factory=list)
    traits: dict[str, int] = Field(default_factory=dict)

    @field_validator("hobbies", mode="before")
    @classmethod
    def _clean_hobbies(cls, value: Any) -> list[str]:
        return normalize_hobbies(value)

    @field_validator("traits")
    @classmethod
    def _valid_traits(cls, value: dict[str, int]) -> dict[str, int]:
        return _check_trait_values(_check_trait_names(value))


class ProfileUpdate(BaseModel):
    """Partial update; ``hobbies`` and ``traits`` replace the stored values."""

    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    age: int | None = Field(default=None, ge=18, le=120)
    bio: str | None = Field(default=None, max_length=500)
    gender: Gender | None = None
    looking_for: LookingFor | None = None
    location: str | None = Field(default=None, max_length=100)
    hobbies: list[str] | None = None
    traits: dict[str, int] | None = None

    @field_validator("hobbies", mode="before")
    @classmethod
    def _clean_hobbies(cls, value: Any) -> list[str] | None:
        return None if value is None else normalize_hobbies(value)

    @field_validator("traits")
    @classmethod
    def _valid_traits(cls, value: dict[str, int] | None) -> dict[str, int] | None:
        if value is None:
            return None
        return _check_trait_values(_check_trait_names(value))
