import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Integer,
    String,
    UniqueConstraint,
)
from app.database.db import Base


class AuthProvider(str, enum.Enum):
    GOOGLE = "google"
    FACEBOOK = "facebook"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(50), nullable=False)
    # argon2 digest, null for accounts created through an OAuth provider
    password = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False)
    business_name = Column(String(255), nullable=False)
    subdomain = Column(String(63), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    preferred_language = Column(String(10), default="th", nullable=True)
    auth_provider = Column(
        Enum(AuthProvider, name="auth_provider", values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    provider_id = Column(String(255), nullable=True)
    display_name = Column(String(255), nullable=True)
    photo_url = Column(String(1024), nullable=True)

    # lower-cased in Python, SQLite lower() only folds ASCII
    username_key = Column(String(50), unique=True, index=True, nullable=False)
    email_key = Column(String(255), unique=True, index=True, nullable=False)
    subdomain_key = Column(String(63), unique=True, index=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("auth_provider", "provider_id", name="uq_users_provider_identity"),
        CheckConstraint(
            "(auth_provider IS NULL AND provider_id IS NULL) OR "
            "(auth_provider IS NOT NULL AND provider_id IS NOT NULL)",
            name="ck_users_provider_pair",
        ),
    )


def fold(value: str) -> str:
    return value.lower()
