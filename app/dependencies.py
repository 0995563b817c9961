"""Authentication and authorization dependencies for FastAPI routes."""

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import ForbiddenError, MissingTokenError, NotAuthenticatedError, UserNotFoundError
from app.models.user import User
from app.services.jwt import get_jwt_service


@dataclass
class CurrentUser:
    """Authenticated user context. Never carries the password hash."""

    user_id: int
    name: str
    email: str
    role: str
    verified: bool
    profile_picture: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "CurrentUser":
        return cls(
            user_id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            verified=user.verified,
            profile_picture=user.profile_picture,
        )


def extract_bearer_token(request: Request) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> CurrentUser:
    """Verify the bearer token and load the user it names.

    The user is re-read on every request, so a token for a deleted account
    stops working even though the token itself is still valid.
    """
    token = extract_bearer_token(request)
    if not token:
        raise MissingTokenError()

    claims = get_jwt_service().decode_token(token)

    user = db.query(User).filter(User.id == claims.user_id).first()
    if not user:
        raise UserNotFoundError()

    current = CurrentUser.from_user(user)
    request.state.user = current
    return current


def authorize(user: CurrentUser | None, allowed_roles: tuple[str, ...]) -> CurrentUser:
    """Check that an authenticated user holds one of the allowed roles."""
    if user is None:
        raise NotAuthenticatedError()
    if user.role not in allowed_roles:
        raise ForbiddenError()
    return user


def require_roles(*roles: str) -> Callable[..., CurrentUser]:
    """Build a dependency that authenticates the request and enforces role membership."""
    allowed = tuple(str(getattr(r, "value", r)) for r in roles)

    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        return authorize(user, allowed)

    return dependency
