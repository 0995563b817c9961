"""User model."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from app.database import Base


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"
    CAR_OWNER = "car_owner"


class AuthType(str, enum.Enum):
    LOCAL = "local"
    GOOGLE = "google"


class User(Base):
    """Application user, local or Google-backed."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    email = Column(String(256), unique=True, nullable=False, index=True)
    # bcrypt hash; legacy rows may still hold a plaintext value until next login
    password_hash = Column(String(256), nullable=True)
    role = Column(String(32), nullable=False, default=UserRole.USER.value)
    auth_type = Column(String(32), nullable=False, default=AuthType.LOCAL.value)
    google_id = Column(String(256), unique=True, nullable=True, index=True)
    verified = Column(Boolean, nullable=False, default=False)
    profile_picture = Column(String(1024), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    last_login_at = Column(DateTime, nullable=True)
