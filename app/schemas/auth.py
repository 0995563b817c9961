"""Pydantic schemas for authentication endpoints."""

from pydantic import BaseModel, Field

from app.models.user import UserRole


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1, max_length=72)
    role: UserRole | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class GoogleLoginRequest(BaseModel):
    token: str


class GoogleCallbackRequest(BaseModel):
    code: str
    state: str | None = None


class GoogleUrlResponse(BaseModel):
    url: str
    state: str


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    verified: bool
    profile_picture: str | None = None

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
    message: str


class MeResponse(BaseModel):
    user: UserResponse


class VerifyUserResponse(BaseModel):
    message: str
    user: UserResponse


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str = Field(min_length=1, max_length=72)
