"""
AssetVault Backend — FastAPI Dependencies
===========================================

What:  Builds the per-request service objects and enforces bearer auth.
Why:   Route handlers receive ready-made services instead of reaching for
       global state; tests can override any of these with
       `app.dependency_overrides`.

Dependency graph (per request):
    get_db_session ──┬── get_asset_service ── AssetService(AssetStore(session))
                     └── get_auth_service  ── AuthService(UserStore(session), app.state.token_service)
                                                └── get_current_user (bearer token → User)
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from assetvault.database import get_db_session
from assetvault.exceptions import UnauthenticatedError
from assetvault.models.user import User
from assetvault.services.asset_service import AssetService, AssetStore
from assetvault.services.auth_service import AuthService, UserStore

# auto_error=False: a missing header reaches get_current_user, which raises
# UnauthenticatedError so the response uses the standard error body and 401
bearer_scheme = HTTPBearer(auto_error=False)


async def get_asset_service(
    session: AsyncSession = Depends(get_db_session),
) -> AssetService:
    return AssetService(AssetStore(session))


async def get_auth_service(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> AuthService:
    return AuthService(UserStore(session), request.app.state.token_service)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the bearer token to a User or reject the request.

    Raises:
        UnauthenticatedError: header missing, not a Bearer scheme, or token invalid
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError(message="Missing bearer token")

    user = await auth_service.authenticate(credentials.credentials)
    request.state.user_id = user.id
    return user
