from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from automarket.schemas.user import Location


class StoreCreate(BaseModel):
    name: str = Field(min_length=3)
    slug: str = Field(min_length=3, max_length=255, pattern=r'^[a-z0-9-]+$')
    document: str = Field(min_length=14, max_length=18)
    logo_url: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    email: str | None = Field(default=None, max_length=320)
    location: Location | None = None


class StoreUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=3)
    slug: str | None = Field(default=None, min_length=3, max_length=255, pattern=r'^[a-z0-9-]+$')
    document: str | None = Field(default=None, min_length=14, max_length=18)
    logo_url: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    email: str | None = Field(default=None, max_length=320)
    location: Location | None = None


class Store(BaseModel):
    id: int
    owner_id: int
    name: str
    slug: str
    logo_url: str | None
    document: str
    is_verified: bool
    phone: str | None
    email: str | None
    location: Location | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OwnedStore(Store):
    api_key: str
