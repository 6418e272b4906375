"""Profile and swipe stores backed by Supabase (PostgREST).

Expected tables: ``profiles``, ``hobbies(user_id, hobby)``,
``personality_traits(user_id, trait, value)`` (unique on ``(user_id, hobby)`` and
``(user_id, trait)`` respectively),
``swipes(swiper_id, swiped_id, liked)`` with a unique constraint on
``(swiper_id, swiped_id)``, and ``matches(id, user1_id, user2_id, created_at)``
populated by a database trigger when a like is reciprocated.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import Client, ClientOptions, create_client

from ..errors import DuplicateSwipeError, ProfileExistsError, ProfileNotFoundError, StoreFailure
from ..matching.models import Match, SwipeEvent, SwipeOutcome
from ..profiles.models import Profile
from .base import CandidateFilter
from .config import DEFAULT_SUPABASE_CONFIG, SupabaseConfig

logger = logging.getLogger(__name__)

PROFILE_SELECT = "*, hobbies(*), personality_traits(*)"
_PROFILE_COLUMNS = ("display_name", "age", "bio", "gender", "looking_for", "location")
_UNIQUE_VIOLATION = "23505"


def make_client(config: SupabaseConfig = DEFAULT_SUPABASE_CONFIG) -> Client:
    if not config.url or not config.service_key:
        raise StoreFailure("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
    return create_client(
        config.url,
        config.service_key,
        options=ClientOptions(postgrest_client_timeout=config.timeout),
    )


def _execute(query: Any, action: str) -> list[dict[str, Any]]:
    try:
        response = query.execute()
    except APIError as exc:
        raise StoreFailure(f"Supabase {action} failed: {exc.message}") from exc
    except Exception as exc:
        raise StoreFailure(f"Supabase {action} failed") from exc
    data = response.data if response is not None else None
    if data is None:
        return []
    return data if isinstance(data, list) else [data]


def _row_to_profile(row: dict[str, Any]) -> Profile:
    fields = {k: v for k, v in row.items() if k not in ("hobbies", "personality_traits")}
    fields["hobbies"] = [h.get("hobby", "") for h in row.get("hobbies") or []]
    fields["traits"] = {
        t["trait"]: t["value"]
        for t in row.get("personality_traits") or []
        if t.get("trait") and t.get("value") is not None
    }
    try:
        return Profile.model_validate(fields)
    except ValidationError as exc:
        raise StoreFailure(f"Malformed profile row {row.get('id')!r}") from exc


def _row_to_match(row: dict[str, Any]) -> Match:
    try:
        return Match.model_validate({**row, "id": str(row.get("id", ""))})
    except ValidationError as exc:
        raise StoreFailure(f"Malformed match row {row.get('id')!r}") from exc


def _profile_columns(values: dict[str, Any]) -> dict[str, Any]:
    columns: dict[str, Any] = {}
    for key in _PROFILE_COLUMNS:
        if key in values:
            value = values[key]
            columns[key] = getattr(value, "value", value)
    return columns


class SupabaseProfileStore:
    def __init__(self, client: Client) -> None:
        self._client = client

    def get_profile(self, user_id: str) -> Profile | None:
        rows = _execute(
            self._client.table("profiles").select(PROFILE_SELECT).eq("id", user_id).limit(1),
            "profile lookup",
        )
        return _row_to_profile(rows[0]) if rows else None

    def get_profiles(self, user_ids: Iterable[str]) -> list[Profile]:
        ids = list(user_ids)
        if not ids:
            return []
        rows = _execute(
            self._client.table("profiles").select(PROFILE_SELECT).in_("id", ids),
            "profile batch lookup",
        )
        return [_row_to_profile(r) for r in rows]

    def list_candidate_profiles(
        self, candidate_filter: CandidateFilter, limit: int,
    ) -> list[Profile]:
        query = (
            self._client.table("profiles")
            .select(PROFILE_SELECT)
            .neq("id", candidate_filter.exclude_id)
        )
        if candidate_filter.gender is not None:
            query = query.eq("gender", candidate_filter.gender)
        if candidate_filter.exclude_ids:
            query = query.not_.in_("id", sorted(candidate_filter.exclude_ids))
        rows = _execute(query.limit(limit), "candidate query")
        return [_row_to_profile(r) for r in rows]

    def create_profile(self, profile: Profile) -> Profile:
        row = {"id": profile.id, **_profile_columns(profile.model_dump())}
        try:
            self._client.table("profiles").insert(row).execute()
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise ProfileExistsError(profile.id) from exc
            raise StoreFailure(f"Supabase profile insert failed: {exc.message}") from exc
        except Exception as exc:
            raise StoreFailure("Supabase profile insert failed") from exc
        try:
            self._upsert_hobbies(profile.id, profile.hobbies)
            self._upsert_traits(profile.id, profile.traits)
        except StoreFailure:
            # No half-created profile may block a retry with 409
            self._remove_profile(profile.id)
            raise
        return self._require(profile.id)

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> Profile:
        """Apply *changes*; ``hobbies``/``traits`` replace the stored sets.

        New rows are upserted before stale ones are deleted, so a failed
        write leaves the previous rows in place.
        """
        self._require(user_id)
        columns = _profile_columns(changes)
        if columns:
            _execute(
                self._client.table("profiles").update(columns).eq("id", user_id),
                "profile update",
            )
        if "hobbies" in changes:
            self._upsert_hobbies(user_id, changes["hobbies"])
            self._prune("hobbies", "hobby", user_id, changes["hobbies"])
        if "traits" in changes:
            self._upsert_traits(user_id, changes["traits"])
            self._prune("personality_traits", "trait", user_id, list(changes["traits"]))
        return self._require(user_id)

    def _require(self, user_id: str) -> Profile:
        profile = self.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    def _upsert_hobbies(self, user_id: str, hobbies: list[str]) -> None:
        if hobbies:
            _execute(
                self._client.table("hobbies").upsert(
                    [{"user_id": user_id, "hobby": h} for h in hobbies],
                    on_conflict="user_id,hobby",
                ),
                "hobby upsert",
            )

    def _upsert_traits(self, user_id: str, traits: dict[str, int]) -> None:
        if traits:
            _execute(
                self._client.table("personality_traits").upsert(
                    [{"user_id": user_id, "trait": t, "value": v} for t, v in traits.items()],
                    on_conflict="user_id,trait",
                ),
                "trait upsert",
            )

    def _prune(self, table: str, column: str, user_id: str, keep: list[str]) -> None:
        """Delete the rows of *user_id* in *table* whose *column* is not in *keep*."""
        query = self._client.table(table).delete().eq("user_id", user_id)
        if keep:
            query = query.not_.in_(column, keep)
        _execute(query, f"{table} cleanup")

    def _remove_profile(self, user_id: str) -> None:
        for table, column in (
            ("hobbies", "user_id"),
            ("personality_traits", "user_id"),
            ("profiles", "id"),
        ):
            try:
                _execute(self._client.table(table).delete().eq(column, user_id), "profile rollback")
            except StoreFailure:
                logger.warning("Could not roll back %s rows of %s", table, user_id, exc_info=True)


class SupabaseSwipeStore:
    """Swipe ledger whose match rows are created by the ``swipes`` trigger."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def list_swiped_ids(self, user_id: str) -> set[str]:
        rows = _execute(
            self._client.table("swipes").select("swiped_id").eq("swiper_id", user_id),
            "swipe history",
        )
        return {str(r["swiped_id"]) for r in rows}

    def record_swipe(self, swiper_id: str, swiped_id: str, liked: bool) -> SwipeOutcome:
        try:
            response = (
                self._client.table("swipes")
                .insert({"swiper_id": swiper_id, "swiped_id": swiped_id, "liked": liked})
                .execute()
            )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise DuplicateSwipeError(swiper_id, swiped_id) from exc
            raise StoreFailure(f"Supabase swipe insert failed: {exc.message}") from exc
        except Exception as exc:
            raise StoreFailure("Supabase swipe insert failed") from exc

        rows = response.data or []
        created_at = rows[0].get("created_at") if rows else None
        event = SwipeEvent(
            swiper_id=swiper_id,
            swiped_id=swiped_id,
            liked=liked,
            created_at=created_at or datetime.now(timezone.utc),
        )

        match = self._find_match(swiper_id, swiped_id) if liked else None
        if match is not None:
            logger.info("Match %s between %s and %s", match.id, swiper_id, swiped_id)
        return SwipeOutcome(swipe=event, match=match)

    def list_matches(self, user_id: str) -> list[Match]:
        rows = _execute(
            self._client.table("matches")
            .select("*")
            .or_(f"user1_id.eq.{user_id},user2_id.eq.{user_id}")
            .order("created_at", desc=True),
            "match list",
        )
        return [_row_to_match(r) for r in rows]

    def _find_match(self, a: str, b: str) -> Match | None:
        rows = _execute(
            self._client.table("matches")
            .select("*")
            .or_(f"and(user1_id.eq.{a},user2_id.eq.{b}),and(user1_id.eq.{b},user2_id.eq.{a})")
            .limit(1),
            "match lookup",
        )
        return _row_to_match(rows[0]) if rows else None
