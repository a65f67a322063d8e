"""Pharmacy model"""
import uuid

from sqlalchemy import Column, String, Numeric, Boolean, DateTime
from sqlalchemy.sql import func

from stocmed.core.database import Base


class Pharmacy(Base):
    __tablename__ = "pharmacies"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # One pharmacy per owning account
    user_id = Column(String(36), unique=True, nullable=False, index=True)
    pharmacy_name = Column(String(255), nullable=False)
    license_number = Column(String(100), nullable=False)
    address = Column(String, nullable=False)
    city = Column(String(100), nullable=True, index=True)
    state = Column(String(100), nullable=True, index=True)
    phone = Column(String(30), nullable=False)
    latitude = Column(Numeric(10, 7))
    longitude = Column(Numeric(10, 7))
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    logo_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
