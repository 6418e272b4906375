from __future__ import annotations

from pydantic import BaseModel, Field

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class SignupRequest(BaseModel):
    email: str = Field(..., pattern=_EMAIL_PATTERN, max_length=254)
    password: str = Field(..., min_length=6, max_length=72)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
