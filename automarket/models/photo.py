from datetime import datetime, timezone
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, JSON
from .base import Base


class CarPhoto(Base):
    __tablename__ = 'car_photos'
    id = Column(Integer, primary_key=True, index=True)
    car_id = Column(Integer, ForeignKey('cars.id', ondelete='CASCADE'), nullable=False, index=True)
    urls = Column(JSON, nullable=False)
    order_index = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    __table_args__ = (
        Index('car_photo_order_idx', 'car_id', 'order_index'),
    )
