"""Authentication schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Login result; the token itself travels in the cookie."""

    success: bool
    message: str
    role: str = Field(default="")
    operator_code: Optional[str] = None
    home_url: str = Field(default="/panel/leaderboard")


class TokenPayload(BaseModel):
    """Decoded JWT claims."""

    user_id: int
    role: str
