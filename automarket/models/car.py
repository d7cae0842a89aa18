import enum
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, Index, JSON, Numeric, Text
from .base import Base


class Transmission(enum.Enum):
    MANUAL = 'MANUAL'
    AUTOMATIC = 'AUTOMATIC'
    CVT = 'CVT'


class Fuel(enum.Enum):
    FLEX = 'FLEX'
    GASOLINE = 'GASOLINE'
    DIESEL = 'DIESEL'
    ELECTRIC = 'ELECTRIC'
    HYBRID = 'HYBRID'


class CarStatus(enum.Enum):
    DRAFT = 'DRAFT'
    ACTIVE = 'ACTIVE'
    SOLD = 'SOLD'
    BANNED = 'BANNED'


class Car(Base):
    __tablename__ = 'cars'
    id = Column(Integer, primary_key=True, index=True)
    seller_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    store_id = Column(Integer, ForeignKey('stores.id'), nullable=True, index=True)
    brand = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    version = Column(String(100), nullable=False)
    year_fab = Column(Integer, nullable=False)
    year_model = Column(Integer, nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=False, index=True)
    mileage = Column(Integer, nullable=False)
    transmission = Column(Enum(Transmission, name='transmission'), nullable=False)
    fuel = Column(Enum(Fuel, name='fuel'), nullable=False)
    color = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    features = Column(JSON, nullable=True)
    status = Column(Enum(CarStatus, name='car_status'), default=CarStatus.DRAFT, nullable=False, index=True)
    # seller id while a quota-limited seller holds this listing ACTIVE, else NULL
    active_slot = Column(Integer, unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    __table_args__ = (
        Index('brand_model_idx', 'brand', 'model'),
    )
