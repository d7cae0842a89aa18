import enum
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, JSON, Text
from .base import Base


class UserRole(enum.Enum):
    USER = 'user'
    STORE_OWNER = 'store_owner'
    ADMIN = 'admin'


class User(Base):
    __tablename__ = 'users'
    id = Column(Integer, primary_key=True, index=True)
    auth_user_id = Column(String(64), unique=True, index=True, nullable=False)
    email = Column(String(320), nullable=True)
    name = Column(Text, nullable=True)
    role = Column(
        Enum(UserRole, values_callable=lambda roles: [r.value for r in roles], name='user_role'),
        default=UserRole.USER,
        nullable=False
    )
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    last_signed_in = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)


class Profile(Base):
    __tablename__ = 'profiles'
    id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True)
    full_name = Column(Text, nullable=False)
    avatar_url = Column(Text, nullable=True)
    phone = Column(String(20), nullable=True)
    location = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
