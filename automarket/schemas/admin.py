from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from automarket.models.car import CarStatus
from automarket.models.user import UserRole


class ModerateCar(BaseModel):
    status: CarStatus
    reason: str | None = Field(default=None, max_length=1000)


class RoleUpdate(BaseModel):
    role: UserRole
    reason: str | None = Field(default=None, max_length=1000)


class BanUser(BaseModel):
    reason: str = Field(min_length=1, max_length=1000)


class BanResult(BaseModel):
    user_id: int
    banned_cars: int


class StoreVerification(BaseModel):
    verified: bool


class ModerationLog(BaseModel):
    id: int
    admin_id: int
    target_type: str
    target_id: int
    action: str
    reason: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DashboardStats(BaseModel):
    total_users: int
    total_cars: int
    active_cars: int
    total_stores: int
    total_transactions: int
