from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from automarket.models.user import UserRole


class User(BaseModel):
    id: int
    auth_user_id: str
    email: str | None
    name: str | None
    role: UserRole
    created_at: datetime
    last_signed_in: datetime

    model_config = ConfigDict(from_attributes=True)


class Location(BaseModel):
    city: str | None = None
    state: str | None = None
    zip: str | None = None


class ProfileCreate(BaseModel):
    full_name: str = Field(min_length=3)
    phone: str | None = Field(default=None, max_length=20)
    avatar_url: str | None = None
    location: Location | None = None


class ProfileUpdate(BaseModel):
    full_name: str | None = Field(default=None, min_length=3)
    phone: str | None = Field(default=None, max_length=20)
    avatar_url: str | None = None
    location: Location | None = None


class Profile(BaseModel):
    id: int
    full_name: str
    phone: str | None
    avatar_url: str | None
    location: Location | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=3)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class AuthSession(BaseModel):
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
    user_id: str | None = None
