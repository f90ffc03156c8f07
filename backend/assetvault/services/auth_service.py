"""
AssetVault Backend — Authentication Service
=============================================

What:  Registration, login, and bearer-token verification.
Why:   Every /api/v1 route is gated on `authenticate(token)`; /register and
       /login are the only ways to obtain a token.
How:   Three collaborators composed by `AuthService`:
         - UserStore:     users table access (async SQLAlchemy)
         - pwd_context:   passlib CryptContext (salted pbkdf2_sha256 hashes)
         - TokenService:  PyJWT issue/verify with bound issuer and audience

Token Claims:
    sub       user id (identity is re-resolved on every request)
    username  informational only
    iss, aud  bound at issue time; verification requires an exact match
    iat, exp  issue time and expiry (settings.jwt_expires_in)

Failure Modes:
    register:     ValidationError, UsernameConflictError
    login:        ValidationError, InvalidCredentialsError
    authenticate: UnauthenticatedError (expired, malformed, bad signature,
                  wrong iss/aud, or user no longer exists)
"""

import logging
import time
import uuid
from typing import Any, Dict, Optional, Tuple

import jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from assetvault.config import Settings
from assetvault.exceptions import (
    InvalidCredentialsError,
    StoreError,
    UnauthenticatedError,
    UsernameConflictError,
)
from assetvault.models.user import User
from assetvault.schemas.auth import LoginRequest, RegisterRequest
from assetvault.services.validation import validate_payload

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except (ValueError, TypeError):
        # Unrecognized or corrupted hash string
        logger.warning("Stored password hash could not be verified")
        return False


# ══════════════════════════════════════════════════════════════════════════
# Token Service
# ══════════════════════════════════════════════════════════════════════════

class TokenService:
    """
    Issues and verifies signed bearer tokens.

    One instance per application (stored on app.state); it only holds
    immutable configuration, so sharing it between requests is safe.
    """

    REQUIRED_CLAIMS = ["exp", "iat", "iss", "aud", "sub"]

    def __init__(
        self,
        secret: str,
        issuer: str,
        audience: str,
        algorithm: str = "HS256",
        expires_in: int = 43_200,
    ):
        self.secret = secret
        self.issuer = issuer
        self.audience = audience
        self.algorithm = algorithm
        self.expires_in = expires_in

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            algorithm=settings.jwt_algorithm,
            expires_in=settings.jwt_expires_in,
        )

    def issue(self, user: User, now: Optional[int] = None) -> str:
        issued_at = int(time.time()) if now is None else now
        payload = {
            "sub": user.id,
            "username": user.username,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and verify a token.

        Raises:
            UnauthenticatedError: expired, malformed, bad signature, or wrong iss/aud
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"require": self.REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise UnauthenticatedError(message="Token expired") from e
        except jwt.InvalidTokenError as e:
            raise UnauthenticatedError(
                message="Invalid token",
                context={"reason": type(e).__name__},
            ) from e


# ══════════════════════════════════════════════════════════════════════════
# User Store
# ══════════════════════════════════════════════════════════════════════════

class UserStore:
    """Users table access. Same error-wrapping rules as AssetStore."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_username(self, username: str) -> Optional[User]:
        return await self._find_one(select(User).where(User.username == username))

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return await self._find_one(select(User).where(User.id == user_id))

    async def _find_one(self, query) -> Optional[User]:
        try:
            result = await self.session.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user: %s", str(e))
            raise StoreError(context={"error_type": type(e).__name__}) from e

    async def insert(self, user: User) -> User:
        try:
            self.session.add(user)
            await self.session.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration; get_db_session
            # rolls the request's transaction back
            raise UsernameConflictError(user.username) from e
        except SQLAlchemyError as e:
            logger.error("Database error inserting user: %s", str(e))
            raise StoreError(context={"error_type": type(e).__name__}) from e
        return user


# ══════════════════════════════════════════════════════════════════════════
# Auth Service
# ══════════════════════════════════════════════════════════════════════════

class AuthService:
    """Facade used by the auth routes and the bearer-token dependency."""

    def __init__(self, users: UserStore, tokens: TokenService):
        self.users = users
        self.tokens = tokens

    async def register(self, payload: Any) -> User:
        """
        Create an account from a {username, password} body.

        The plaintext password is hashed before it leaves this method and is
        never stored or logged.
        """
        data = validate_payload(RegisterRequest, payload)

        if await self.users.find_by_username(data.username) is not None:
            raise UsernameConflictError(data.username)

        user = User(
            id=str(uuid.uuid4()),
            username=data.username,
            password_hash=hash_password(data.password),
        )
        await self.users.insert(user)
        logger.info("User registered: %s", user.id)
        return user

    async def login(self, payload: Any) -> Tuple[User, str]:
        """Verify credentials and issue a token."""
        data = validate_payload(LoginRequest, payload)

        user = await self.users.find_by_username(data.username)
        if user is None:
            # Burn comparable time so response latency doesn't reveal usernames
            pwd_context.dummy_verify()
            raise InvalidCredentialsError()
        if not verify_password(data.password, user.password_hash):
            raise InvalidCredentialsError(context={"user_id": user.id})

        token = self.tokens.issue(user)
        logger.info("User logged in: %s", user.id)
        return user, token

    async def authenticate(self, token: str) -> User:
        """Resolve a bearer token to the user it was issued for."""
        claims = self.tokens.verify(token)
        user = await self.users.find_by_id(claims["sub"])
        if user is None:
            raise UnauthenticatedError(message="Invalid user", context={"sub": claims["sub"]})
        return user
