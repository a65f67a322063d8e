"""Drug search request/response schemas"""
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from stocmed.services.catalog import PharmacyListing, RankedOffer


class PharmacySummary(BaseModel):
    """Pharmacy fields shown next to an offer"""
    id: str
    pharmacy_name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    phone: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_verified: bool = False
    logo_url: Optional[str] = None

    @classmethod
    def from_listing(cls, listing: PharmacyListing) -> "PharmacySummary":
        return cls(
            id=listing.id,
            pharmacy_name=listing.name,
            address=listing.address,
            city=listing.city,
            state=listing.state,
            phone=listing.phone,
            latitude=listing.latitude,
            longitude=listing.longitude,
            is_verified=listing.is_verified,
            logo_url=listing.logo_url,
        )


class RankedOfferResponse(BaseModel):
    """One medication at one pharmacy, with display price band and distance"""
    id: str
    name: str
    generic_name: Optional[str] = None
    brand_name: Optional[str] = None
    category: Optional[str] = None
    dosage_form: Optional[str] = None
    strength: Optional[str] = None
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    expiry_date: Optional[date] = None
    requires_prescription: bool = False

    # Pricing
    price: Optional[float] = None
    price_range_min: Optional[float] = Field(None, description="Band floor, rounded to the nearest 10")
    price_range_max: Optional[float] = Field(None, description="Band ceiling, rounded to the nearest 10")

    # Availability
    quantity_in_stock: int
    low_stock_threshold: int
    stock_status: Literal['in_stock', 'low_stock', 'out_of_stock']

    distance_km: Optional[float] = Field(None, description="Null when either side has no coordinates")
    updated_at: Optional[datetime] = None

    pharmacy: PharmacySummary

    @classmethod
    def from_ranked(cls, ranked: RankedOffer) -> "RankedOfferResponse":
        offer = ranked.offer
        return cls(
            id=offer.id,
            name=offer.name,
            generic_name=offer.generic_name,
            brand_name=offer.brand_name,
            category=offer.category,
            dosage_form=offer.dosage_form,
            strength=offer.strength,
            description=offer.description,
            manufacturer=offer.manufacturer,
            expiry_date=offer.expiry_date,
            requires_prescription=offer.requires_prescription,
            price=float(offer.price) if offer.price is not None else None,
            price_range_min=ranked.price_range_min,
            price_range_max=ranked.price_range_max,
            quantity_in_stock=offer.quantity_in_stock,
            low_stock_threshold=offer.low_stock_threshold,
            stock_status=offer.stock_status,
            distance_km=ranked.distance_km,
            updated_at=offer.updated_at,
            pharmacy=PharmacySummary.from_listing(offer.pharmacy),
        )


class SearchFilters(BaseModel):
    """Filters echoed back to the client"""
    location: Optional[str] = None
    category: Optional[str] = None
    in_stock_only: bool = False
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class SearchResponse(BaseModel):
    offers: List[RankedOfferResponse]
    count: int
    query: str
    filters: SearchFilters
