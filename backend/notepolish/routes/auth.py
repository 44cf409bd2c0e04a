"""
NotePolish Backend - Authentication Route Handlers
====================================================

    POST /api/auth/register  {name, email, password} → 201 {token, user}
    POST /api/auth/login     {email, password}       → 200 {token, user}
    GET  /api/auth/me        (bearer)                → 200 {user}
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notepolish.database import get_db_session
from notepolish.middleware.auth import CurrentUserId
from notepolish.schemas.auth import LoginRequest, MeResponse, RegisterRequest, TokenResponse
from notepolish.schemas.note import ErrorResponse
from notepolish.services.auth_service import auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=TokenResponse,
    responses={400: {"description": "Missing fields or email taken", "model": ErrorResponse}},
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await auth_service.register(db, name=body.name, email=body.email, password=body.password)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={400: {"description": "Invalid credentials", "model": ErrorResponse}},
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await auth_service.login(db, email=body.email, password=body.password)


@router.get(
    "/me",
    response_model=MeResponse,
    responses={
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
)
async def get_me(
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db_session),
) -> MeResponse:
    return await auth_service.get_me(db, user_id)
