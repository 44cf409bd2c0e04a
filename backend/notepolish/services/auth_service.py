"""
NotePolish Backend - Authentication Service
=============================================

What:  Registration, login, current-user lookup, and bearer-token handling.
How:   bcrypt for password hashing (run in a worker thread so the event loop
       is not blocked), PyJWT for signed tokens carrying `userId` and `exp`.
Who:   Called by routes/auth.py; decode_access_token() is also used by the
       get_current_user_id dependency in middleware/auth.py.

Token Format:
    HS256 JWT, payload {"userId": "<uuid>", "exp": now + jwt_expire_days}
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from notepolish.config import settings
from notepolish.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from notepolish.models.user import User
from notepolish.schemas.auth import MeResponse, TokenResponse, UserPublic

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."

# bcrypt only reads the first 72 bytes; bcrypt>=5 rejects longer input.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    ).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash
        return False


def create_access_token(user_id: uuid.UUID, now: Optional[datetime] = None) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = {
        "userId": str(user_id),
        "exp": issued + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> uuid.UUID:
    """
    Verify a bearer token and return the user id it carries.

    Raises:
        AuthenticationError: bad signature, expired, or no usable userId claim
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return uuid.UUID(str(payload["userId"]))
    except (jwt.PyJWTError, KeyError, ValueError):
        raise AuthenticationError("Invalid or expired token.")


def _public(user: User) -> UserPublic:
    return UserPublic(id=user.id, name=user.name, email=user.email)


class AuthService:
    """Stateless; every method receives the request's database session."""

    async def _find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def register(
        self,
        db: AsyncSession,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> TokenResponse:
        """
        Create an account and return a token for it.

        Raises:
            ValidationError: a field is missing, the password exceeds 72 bytes,
                             or the email is taken
            DatabaseError: the insert failed for another reason
        """
        if not name or not email or not password:
            raise ValidationError(message="All fields are required.")
        name = name.strip()
        email = email.strip().lower()
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                message=f"Password must be at most {MAX_PASSWORD_BYTES} bytes.",
                field="password",
            )

        if await self._find_by_email(db, email) is not None:
            raise ValidationError(message="Email already registered.", field="email")

        password_hash = await run_in_threadpool(hash_password, password)
        user = User(id=uuid.uuid4(), name=name, email=email, password_hash=password_hash)
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            # Concurrent registration won the unique constraint
            raise ValidationError(message="Email already registered.", field="email")
        except Exception as e:
            logger.error("Failed to create user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Registration failed. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("User registered: %s", user.id)
        return TokenResponse(token=create_access_token(user.id), user=_public(user))

    async def login(
        self,
        db: AsyncSession,
        email: Optional[str],
        password: Optional[str],
    ) -> TokenResponse:
        """
        Raises:
            ValidationError: missing field, unknown email, or wrong password
                             (the last two share one message)
        """
        if not email or not password:
            raise ValidationError(message="All fields are required.")

        user = await self._find_by_email(db, email.strip().lower())
        if user is None:
            raise ValidationError(message=INVALID_CREDENTIALS)
        if not await run_in_threadpool(verify_password, password, user.password_hash):
            raise ValidationError(message=INVALID_CREDENTIALS)

        logger.info("User logged in: %s", user.id)
        return TokenResponse(token=create_access_token(user.id), user=_public(user))

    async def get_me(self, db: AsyncSession, user_id: uuid.UUID) -> MeResponse:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError(resource="user", message="User not found.")
        return MeResponse(user=_public(user))


auth_service = AuthService()
