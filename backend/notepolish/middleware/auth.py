"""
NotePolish Backend - Bearer Token Dependency
==============================================

What:  FastAPI dependency that resolves `Authorization: Bearer <token>` to the
       caller's user id.
Who:   Declared by every protected route (beautify, summarize, save, notes, me).

Responses:
    no / non-bearer header → 401 "No token provided."
    bad or expired token   → 401 "Invalid or expired token."
"""

import uuid
from typing import Annotated, Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notepolish.exceptions import AuthenticationError
from notepolish.services.auth_service import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Security(bearer_scheme)],
) -> uuid.UUID:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided.")
    return decode_access_token(credentials.credentials)


# Type alias for dependency injection
CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]
