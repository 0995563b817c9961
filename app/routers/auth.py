"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user, require_roles
from app.errors import UserNotFoundError
from app.models.user import User, UserRole
from app.rate_limit import limiter
from app.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    GoogleCallbackRequest,
    GoogleLoginRequest,
    GoogleUrlResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    ResetPasswordRequest,
    UserResponse,
    VerifyUserResponse,
)
from app.services.auth import encode_state, get_auth_service
from app.services.google import get_google_service
from app.services.jwt import get_jwt_service

logger = logging.getLogger("tourism_api")

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def _auth_response(user: User, message: str) -> AuthResponse:
    token = get_jwt_service().create_token(user_id=user.id, role=user.role)
    return AuthResponse(user=UserResponse.model_validate(user), token=token, message=message)


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit("5/minute")
def register(request: Request, body: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Register a new user account."""
    user = get_auth_service().register(db, body.name, body.email, body.password, body.role)
    return _auth_response(user, "User registered successfully")


@router.post("/login", response_model=AuthResponse)
@limiter.limit("10/minute")
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Authenticate and receive a JWT token."""
    user = get_auth_service().authenticate(db, body.email, body.password)
    return _auth_response(user, "Login successful")


@router.post("/google-login", response_model=AuthResponse)
@limiter.limit("10/minute")
def google_login(request: Request, body: GoogleLoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Sign in with a Google ID token obtained by the frontend."""
    profile = get_google_service().verify_id_token(body.token)
    user = get_auth_service().login_with_google(db, profile)
    return _auth_response(user, "Google login successful")


@router.get("/google/url", response_model=GoogleUrlResponse)
def google_url(role: UserRole = UserRole.USER) -> GoogleUrlResponse:
    """Get the Google consent URL for the redirect sign-in flow."""
    state = encode_state(role.value)
    return GoogleUrlResponse(url=get_google_service().get_authorization_url(state), state=state)


@router.post("/google/callback", response_model=AuthResponse)
@limiter.limit("10/minute")
def google_callback(request: Request, body: GoogleCallbackRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Finish the redirect sign-in flow with the authorization code Google returned."""
    profile = get_google_service().exchange_code(body.code)
    user = get_auth_service().login_with_google_callback(db, profile, body.state)
    return _auth_response(user, "Google login successful")


@router.get("/me", response_model=MeResponse)
def me(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)) -> MeResponse:
    """Return the authenticated user's profile."""
    record = get_auth_service().get_user(db, user.user_id)
    if not record:
        raise UserNotFoundError(status_code=404)
    return MeResponse(user=UserResponse.model_validate(record))


@router.put("/verify/{user_id}", response_model=VerifyUserResponse)
def verify_user(
    user_id: int,
    admin: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db),
) -> VerifyUserResponse:
    """Verify a user account (admin only)."""
    user = get_auth_service().verify_user(db, user_id)
    logger.info("Admin %s verified user %s", admin.user_id, user.id)
    return VerifyUserResponse(message="User verified successfully", user=UserResponse.model_validate(user))


@router.post("/logout")
def logout() -> dict:
    """Tokens are stateless; the client discards its copy."""
    return {"message": "Logged out successfully", "clear_token": True}


@router.post("/forgot-password")
@limiter.limit("3/minute")
def forgot_password(request: Request, body: ForgotPasswordRequest, db: Session = Depends(get_db)) -> dict:
    """Request a password reset. Logs reset link to server console."""
    token = get_auth_service().request_password_reset(db, body.email)

    if token:
        base_url = str(request.base_url).rstrip("/")
        logger.info("PASSWORD RESET: %s/reset-password?token=%s", base_url, token)

    return {"message": "If an account exists with that email, a reset link has been generated."}


@router.post("/reset-password", response_model=AuthResponse)
@limiter.limit("5/minute")
def reset_password(request: Request, body: ResetPasswordRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Reset password using a valid token. Returns JWT for auto-login."""
    user = get_auth_service().reset_password(db, body.token, body.new_password)
    return _auth_response(user, "Password reset successful")
