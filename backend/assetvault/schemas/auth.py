"""
AssetVault Backend — Auth Request/Response Schemas
====================================================

What:  Bodies for POST /register and POST /login and their responses.
Why:   Username length (8–20) and password length (8+) are declared here and
       enforced through the validation service, same as asset bodies.

Security:
    No response model has a password field, so a hash can never be
    serialized back to a client by accident.
"""

from pydantic import BaseModel, Field, StrictStr


class RegisterRequest(BaseModel):
    username: StrictStr = Field(min_length=8, max_length=20)
    password: StrictStr = Field(min_length=8)


class LoginRequest(BaseModel):
    username: StrictStr
    password: StrictStr


class UserPublic(BaseModel):
    """User fields that are safe to return (everything but the password)."""

    id: str
    username: str


class RegisterResponse(UserPublic):
    message: str = Field(default="You may now login")


class LoginResponse(UserPublic):
    token: str = Field(description="Signed bearer token for /api/v1 routes")
