"""JWT Token Service."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.config import get_settings
from app.errors import ExpiredTokenError, InvalidTokenError

ACCESS_TOKEN = "access"
RESET_TOKEN = "password_reset"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TokenClaims:
    """Verified contents of a bearer token."""

    user_id: int
    role: str
    token_type: str
    claims: dict[str, Any] = field(default_factory=dict)


class JWTService:
    """Creates and verifies signed, time-limited bearer tokens.

    The signing secret is handed in by the caller; the service never reads it
    from the environment itself.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(days=30),
        reset_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret_key:
            raise ValueError("A signing secret is required")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.reset_ttl = reset_ttl
        self.clock = clock

    def create_token(
        self,
        user_id: int,
        role: str,
        expires_delta: timedelta | None = None,
        token_type: str = ACCESS_TOKEN,
        extra_claims: dict[str, Any] | None = None,
    ) -> str:
        """Create a JWT token for the given user."""
        issued_at = self.clock()
        expire = issued_at + (expires_delta if expires_delta is not None else self.access_ttl)
        payload = {
            **(extra_claims or {}),
            "sub": str(user_id),
            "role": role,
            "type": token_type,
            "iat": issued_at,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def create_reset_token(self, user_id: int, role: str, fingerprint: str) -> str:
        """Create a short-lived password reset token bound to the current password."""
        return self.create_token(
            user_id,
            role,
            expires_delta=self.reset_ttl,
            token_type=RESET_TOKEN,
            extra_claims={"fp": fingerprint},
        )

    def decode_token(self, token: str, expected_type: str = ACCESS_TOKEN) -> TokenClaims:
        """Decode and validate a JWT token.

        Raises ExpiredTokenError once the service clock reaches the embedded
        expiry and InvalidTokenError for anything else that does not check out.
        """
        try:
            payload = jwt.decode(
                token, self.secret_key, algorithms=[self.algorithm], options={"verify_exp": False}
            )
        except JWTError:
            raise InvalidTokenError() from None

        expires_at = payload.get("exp")
        if not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
            raise InvalidTokenError("Token missing expiry")
        # A token is dead from the second of its expiry onwards
        if self.clock().timestamp() >= expires_at:
            raise ExpiredTokenError()

        if payload.get("type") != expected_type:
            raise InvalidTokenError("Wrong token type")

        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError("Token missing subject") from None

        return TokenClaims(
            user_id=user_id,
            role=payload.get("role", ""),
            token_type=payload["type"],
            claims=payload,
        )

    def is_token_valid(self, token: str) -> bool:
        """Check if an access token is valid."""
        try:
            self.decode_token(token)
        except (InvalidTokenError, ExpiredTokenError):
            return False
        return True


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        settings = get_settings()
        if not settings.JWT_SECRET_KEY:
            raise RuntimeError("JWT_SECRET_KEY is not set")
        _jwt_service = JWTService(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            access_ttl=timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
            reset_ttl=timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
        )
    return _jwt_service
