from sqlalchemy import Column, ForeignKey, Integer, Date
from .base import Base


class CarView(Base):
    __tablename__ = 'car_views'
    id = Column(Integer, primary_key=True, index=True)
    car_id = Column(Integer, ForeignKey('cars.id', ondelete='CASCADE'), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=True)
    viewed_at = Column(Date, nullable=False, index=True)
