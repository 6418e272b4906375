from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..profiles.models import Profile


class ScoredProfile(Profile):
    model_config = ConfigDict(populate_by_name=True)

    compatibility_score: int = Field(..., ge=0, le=100, alias="compatibilityScore")


class DiscoverResponse(BaseModel):
    profiles: list[ScoredProfile]


class SwipeEvent(BaseModel):
    swiper_id: str
    swiped_id: str
    liked: bool
    created_at: datetime


class Match(BaseModel):
    id: str
    user1_id: str
    user2_id: str
    created_at: datetime

    def involves(self, user_id: str) -> bool:
        return user_id in (self.user1_id, self.user2_id)

    def other(self, user_id: str) -> str:
        """Return the participant that is not *user_id*."""
        return self.user2_id if self.user1_id == user_id else self.user1_id


class SwipeOutcome(BaseModel):
    swipe: SwipeEvent
    match: Match | None = None


class SwipeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    swiped_id: str = Field(..., min_length=1, alias="swipedId")
    liked: bool


class SwipeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    match: bool
    match_id: str | None = Field(default=None, alias="matchId")


class MatchOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    match_id: str = Field(..., alias="matchId")
    matched_at: datetime = Field(..., alias="matchedAt")
    profile: Profile | None = None


class MatchesResponse(BaseModel):
    matches: list[MatchOut]
