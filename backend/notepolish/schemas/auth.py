"""
NotePolish Backend - Authentication Schemas
=============================================

Bodies and replies of the /api/auth routes. Request fields are optional so
that a missing field produces the service's "All fields are required." 400
rather than a 422.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(BaseModel):
    """A user as shown to clients. Never carries the password hash."""

    id: uuid.UUID
    name: str
    email: str


class TokenResponse(BaseModel):
    token: str = Field(description="Bearer token for protected routes")
    user: UserPublic


class MeResponse(BaseModel):
    user: UserPublic
