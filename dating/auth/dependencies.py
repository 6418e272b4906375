from __future__ import annotations

from fastapi import HTTPException, Request


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in."""
    user = request.session.get("user")
    if not user or not user.get("id"):
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
