from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_user
from .auth.models import LoginRequest, SignupRequest
from .auth.users import AccountStore
from .config import DEFAULT_APP_CONFIG
from .errors import (
    DuplicateSwipeError,
    InvalidSwipeError,
    ProfileExistsError,
    ProfileNotFoundError,
    StoreFailure,
)
from .matching.discovery import discover
from .matching.models import DiscoverResponse, MatchesResponse, SwipeRequest, SwipeResponse
from .matching.swipes import list_matches, record_swipe
from .profiles.models import (
    HOBBY_SUGGESTIONS,
    TRAIT_DISPLAY_DEFAULT,
    TRAIT_NAMES,
    Gender,
    LookingFor,
    Profile,
    ProfileCreate,
    ProfileUpdate,
)
from .profiles.service import get_own_profile, setup_profile, update_own_profile
from .store.backends import get_account_store, get_profile_store, get_swipe_store
from .store.base import ProfileStore, SwipeStore

logger = logging.getLogger(__name__)

app = FastAPI(title="Dating API", version="1.0.0")
app.add_middleware(SessionMiddleware, secret_key=DEFAULT_APP_CONFIG.session_secret)


@app.exception_handler(StoreFailure)
def store_failure_handler(request: Request, exc: StoreFailure) -> JSONResponse:
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return {
        "traits": list(TRAIT_NAMES),
        "trait_default": TRAIT_DISPLAY_DEFAULT,
        "hobby_suggestions": HOBBY_SUGGESTIONS,
        "genders": [g.value for g in Gender],
        "looking_for": [lf.value for lf in LookingFor],
    }


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/signup")
def signup(
    body: SignupRequest,
    request: Request,
    accounts: AccountStore = Depends(get_account_store),
) -> dict:
    user = accounts.register(body.email, body.password)
    if not user:
        raise HTTPException(status_code=409, detail="Email already registered")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/login")
def login(
    body: LoginRequest,
    request: Request,
    accounts: AccountStore = Depends(get_account_store),
) -> dict:
    user = accounts.authenticate(body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Profile endpoints ────────────────────────────────────────────────────


@app.post("/profile", response_model=Profile)
def create_profile(
    body: ProfileCreate,
    user: dict = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
) -> Profile:
    try:
        return setup_profile(user["id"], body, profiles)
    except ProfileExistsError:
        raise HTTPException(status_code=409, detail="Profile already set up")


@app.get("/profile", response_model=Profile)
def read_profile(
    user: dict = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
) -> Profile:
    try:
        return get_own_profile(user["id"], profiles)
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")


@app.put("/profile", response_model=Profile)
def edit_profile(
    body: ProfileUpdate,
    user: dict = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
) -> Profile:
    try:
        return update_own_profile(user["id"], body, profiles)
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")


# ── Discovery / swipes / matches ─────────────────────────────────────────


@app.get("/discover", response_model=DiscoverResponse)
def discover_profiles(
    user: dict = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
    swipes: SwipeStore = Depends(get_swipe_store),
) -> DiscoverResponse:
    try:
        ranked = discover(user["id"], profiles, swipes)
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")
    return DiscoverResponse(profiles=ranked)


@app.post("/swipe", response_model=SwipeResponse)
def swipe(
    body: SwipeRequest,
    user: dict = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
    swipes: SwipeStore = Depends(get_swipe_store),
) -> SwipeResponse:
    try:
        outcome = record_swipe(user["id"], body.swiped_id, body.liked, profiles, swipes)
    except InvalidSwipeError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ProfileNotFoundError as exc:
        detail = "Profile not found" if exc.user_id == user["id"] else "Swiped profile not found"
        raise HTTPException(status_code=404, detail=detail)
    except DuplicateSwipeError:
        raise HTTPException(status_code=409, detail="Already swiped on this profile")

    if outcome.match is None:
        return SwipeResponse(match=False)
    return SwipeResponse(match=True, match_id=outcome.match.id)


@app.get("/matches", response_model=MatchesResponse)
def matches(
    user: dict = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
    swipes: SwipeStore = Depends(get_swipe_store),
) -> MatchesResponse:
    return MatchesResponse(matches=list_matches(user["id"], profiles, swipes))
