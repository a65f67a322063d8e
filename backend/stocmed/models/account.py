"""Account model (profile metadata for an authenticated user)"""
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func

from stocmed.core.database import Base


class Account(Base):
    __tablename__ = "accounts"

    # Issued by the auth provider
    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True)
    role = Column(String(20), nullable=False, default="patient")  # 'patient' or 'pharmacy'

    # Cached reference to the owned pharmacy. May be stale, so no foreign key.
    pharmacy_id = Column(String(36), nullable=True)

    # Signup-time pharmacy details awaiting promotion into a pharmacies row
    # Structure: { pharmacy_name, license_number, address, city, state, phone }
    pending_pharmacy_profile = Column(JSON(none_as_null=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
