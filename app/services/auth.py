"""Authentication service.

Resolves local credentials or a Google identity to exactly one ``User`` row,
creating the row when the identity is new.
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
from datetime import datetime

import bcrypt
from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotVerifiedError,
    UserNotFoundError,
    ValidationFailedError,
)
from app.models.user import AuthType, User, UserRole
from app.services.google import ProviderProfile
from app.services.jwt import RESET_TOKEN, get_jwt_service

logger = logging.getLogger("tourism_api")

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValidationFailedError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
    rounds = get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def is_password_hash(value: str) -> bool:
    return value.startswith(BCRYPT_PREFIXES)


def check_password(password: str, stored: str | None) -> bool:
    """Compare a password against a stored bcrypt hash or legacy plaintext value."""
    if not stored:
        return False
    if not is_password_hash(stored):
        return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        # bcrypt refuses inputs longer than 72 bytes and malformed hashes
        return False


def password_fingerprint(user: User) -> str:
    """Short digest of the current password hash, used to single-use reset tokens."""
    return hashlib.sha256((user.password_hash or "").encode("utf-8")).hexdigest()[:16]


def encode_state(role: str) -> str:
    """Encode the requested role as an opaque OAuth state parameter."""
    return base64.urlsafe_b64encode(json.dumps({"role": role}).encode("utf-8")).decode("ascii")


def decode_state(state: str | None) -> UserRole:
    """Decode a redirect-flow state parameter into a role.

    The state comes back from the browser and is untrusted: anything that is
    not valid base64 JSON naming a known role falls back to ``user``.
    """
    if not state:
        return UserRole.USER
    try:
        padded = state + "=" * (-len(state) % 4)
        decoded = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
        return UserRole(decoded["role"])
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as e:
        logger.warning("Failed to decode role state %r: %s", state, e)
        return UserRole.USER


class AuthService:
    """Handles user registration, login and federated identity resolution."""

    def register(
        self, db: Session, name: str, email: str, password: str, role: UserRole | str | None = None
    ) -> User:
        """Register a new local user. Only the plain ``user`` role is verified on signup."""
        email = email.strip()
        role = UserRole(role) if role else UserRole.USER

        existing = db.query(User).filter(User.email == email).first()
        if existing:
            raise DuplicateEmailError()

        user = User(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
            role=role.value,
            auth_type=AuthType.LOCAL.value,
            verified=role is UserRole.USER,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info("Registered user %s with role %s", user.id, user.role)
        return user

    def authenticate(self, db: Session, email: str, password: str) -> User:
        """Authenticate a user by email and password."""
        user = db.query(User).filter(User.email == email.strip()).first()
        if not user or not check_password(password, user.password_hash):
            logger.info("Failed login for %s", email)
            raise InvalidCredentialsError()

        if not user.verified:
            raise NotVerifiedError()

        if not is_password_hash(user.password_hash) and len(password.encode("utf-8")) <= BCRYPT_MAX_BYTES:
            user.password_hash = hash_password(password)
            logger.info("Migrated plaintext password for user %s", user.id)

        user.last_login_at = datetime.utcnow()
        db.commit()
        db.refresh(user)
        return user

    def login_with_google(self, db: Session, profile: ProviderProfile) -> User:
        """Resolve a verified Google ID token to a user.

        The Google account id wins over the email when they point at
        different rows.
        """
        user = db.query(User).filter(User.google_id == profile.federated_id).first()
        if user is None:
            user = db.query(User).filter(User.email == profile.email).first()

        if user is None:
            user = User(
                name=profile.name,
                email=profile.email,
                google_id=profile.federated_id,
                profile_picture=profile.picture_url,
                auth_type=AuthType.GOOGLE.value,
                verified=True,
                role=UserRole.USER.value,
            )
            db.add(user)
            logger.info("Created user for Google account %s", profile.federated_id)
        elif not user.google_id:
            user.google_id = profile.federated_id
            user.verified = True
            user.profile_picture = profile.picture_url
            logger.info("Linked Google account to user %s", user.id)

        user.last_login_at = datetime.utcnow()
        db.commit()
        db.refresh(user)
        return user

    def login_with_google_callback(self, db: Session, profile: ProviderProfile, state: str | None) -> User:
        """Resolve a redirect-flow Google profile to a user, matching on email first.

        A profile whose Google account is already linked to a row under a
        different email resolves to that row instead of creating a second one.
        """
        user = db.query(User).filter(User.email == profile.email).first()
        if user is None:
            user = db.query(User).filter(User.google_id == profile.federated_id).first()
            if user is not None:
                logger.warning(
                    "Google account %s is linked to user %s under another email", profile.federated_id, user.id
                )

        if user is None:
            role = decode_state(state)
            user = User(
                name=profile.name,
                email=profile.email,
                google_id=profile.federated_id,
                profile_picture=profile.picture_url,
                auth_type=AuthType.GOOGLE.value,
                verified=True,
                role=role.value,
            )
            db.add(user)
            logger.info("Created user for Google account %s with role %s", profile.federated_id, role.value)

        user.last_login_at = datetime.utcnow()
        db.commit()
        db.refresh(user)
        return user

    def get_user(self, db: Session, user_id: int) -> User | None:
        return db.query(User).filter(User.id == user_id).first()

    def verify_user(self, db: Session, user_id: int) -> User:
        """Mark a user as verified (admin action)."""
        user = self.get_user(db, user_id)
        if not user:
            raise UserNotFoundError(status_code=404)

        user.verified = True
        db.commit()
        db.refresh(user)
        logger.info("Verified user %s", user.id)
        return user

    def request_password_reset(self, db: Session, email: str) -> str | None:
        """Issue a one-hour password reset token for the given email.

        Returns the token if user exists, None otherwise.
        Caller should not reveal whether the user was found.
        """
        user = db.query(User).filter(User.email == email.strip()).first()
        if not user:
            return None

        return get_jwt_service().create_reset_token(user.id, user.role, password_fingerprint(user))

    def reset_password(self, db: Session, token: str, new_password: str) -> User:
        """Reset a user's password using a valid reset token."""
        claims = get_jwt_service().decode_token(token, expected_type=RESET_TOKEN)

        user = self.get_user(db, claims.user_id)
        if not user:
            raise InvalidTokenError("Invalid or expired reset link")

        # The fingerprint changes with the password, so a used link stops working
        if not hmac.compare_digest(str(claims.claims.get("fp", "")), password_fingerprint(user)):
            raise InvalidTokenError("Invalid or expired reset link")

        if not user.verified:
            raise NotVerifiedError()

        user.password_hash = hash_password(new_password)
        user.last_login_at = datetime.utcnow()
        db.commit()
        db.refresh(user)
        return user


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
