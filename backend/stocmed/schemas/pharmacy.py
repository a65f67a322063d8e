"""Pharmacy schemas"""
from datetime import datetime
from typing import Optional
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

REQUIRED_PROFILE_FIELDS = ("pharmacy_name", "license_number", "address", "phone")


class PharmacyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    pharmacy_name: str
    license_number: str
    address: str
    city: Optional[str] = None
    state: Optional[str] = None
    phone: str
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    is_active: bool
    is_verified: bool
    logo_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PharmacyUpdate(BaseModel):
    """Owner edits to their pharmacy. Omitted fields are left unchanged."""
    pharmacy_name: Optional[str] = Field(None, max_length=255)
    license_number: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)

    @field_validator("pharmacy_name", "license_number", "address", "city", "state", "phone")
    @classmethod
    def _strip(cls, v):
        if v is None:
            return v
        return v.strip() or None

    @model_validator(mode="after")
    def _check_fields(self):
        for name in REQUIRED_PROFILE_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be blank")

        # Coordinates are set or cleared as a pair
        sent = {"latitude", "longitude"} & self.model_fields_set
        if sent and (len(sent) == 1 or (self.latitude is None) != (self.longitude is None)):
            raise ValueError("latitude and longitude must be supplied together")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
