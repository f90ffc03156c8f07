"""
AssetVault Backend — Auth Route Handlers
==========================================

What:  Handles POST /register and POST /login.
Why:   Issues the bearer tokens that gate every /api/v1 route.
How:   Hands the raw JSON body to AuthService, which validates it against
       the auth schemas so violations use the same 400 shape as asset bodies.
Who:   Called by API clients before any asset request.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from assetvault.dependencies import get_auth_service
from assetvault.schemas.auth import LoginResponse, RegisterResponse
from assetvault.schemas.common import ErrorResponse
from assetvault.services.auth_service import AuthService

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(tags=["Auth"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
    responses={
        400: {"description": "Invalid body or username taken", "model": ErrorResponse},
    },
    summary="Create a user account",
)
async def register(
    payload: Any = Body(..., examples=[{"username": "designer01", "password": "s3cretpass"}]),
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """
    Register a username/password pair.

    Validation:
        username: 8 to 20 characters
        password: at least 8 characters (stored as a salted hash only)
    """
    user = await auth_service.register(payload)
    return RegisterResponse(id=user.id, username=user.username)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Invalid body or credentials", "model": ErrorResponse},
    },
    summary="Exchange credentials for a bearer token",
)
async def login(
    payload: Any = Body(...),
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    user, token = await auth_service.login(payload)
    return LoginResponse(id=user.id, username=user.username, token=token)
