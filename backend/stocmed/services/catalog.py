"""Catalog reads - typed drug offers joined with their pharmacy"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stocmed.core.config import settings
from stocmed.core.errors import UpstreamUnavailable
from stocmed.models.drug import Drug
from stocmed.models.pharmacy import Pharmacy
from stocmed.services.geo import is_usable_coordinate

logger = logging.getLogger(__name__)

OUT_OF_STOCK = "out_of_stock"
LOW_STOCK = "low_stock"
IN_STOCK = "in_stock"


def stock_status(quantity: int, threshold: int) -> str:
    """Derive stock status. 0 is out, up to and including threshold is low."""
    if quantity <= 0:
        return OUT_OF_STOCK
    if quantity <= threshold:
        return LOW_STOCK
    return IN_STOCK


@dataclass
class PharmacyListing:
    """The pharmacy side of an offer, as patients see it"""
    id: str
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    phone: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_active: bool = True
    is_verified: bool = False
    logo_url: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return is_usable_coordinate(self.latitude, self.longitude)


@dataclass
class DrugOffer:
    """A medication listed by one pharmacy"""
    id: str
    name: str
    pharmacy: Optional[PharmacyListing]
    price: Optional[Decimal]
    quantity_in_stock: int = 0
    low_stock_threshold: int = 10
    generic_name: Optional[str] = None
    brand_name: Optional[str] = None
    category: Optional[str] = None
    dosage_form: Optional[str] = None
    strength: Optional[str] = None
    description: Optional[str] = None
    requires_prescription: bool = False
    manufacturer: Optional[str] = None
    expiry_date: Optional[date] = None
    updated_at: Optional[datetime] = None

    @property
    def stock_status(self) -> str:
        return stock_status(self.quantity_in_stock, self.low_stock_threshold)


@dataclass
class SearchQuery:
    """One patient search. Not persisted."""
    term: str
    location: Optional[str] = None
    category: Optional[str] = None
    in_stock_only: bool = False
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return is_usable_coordinate(self.latitude, self.longitude)


@dataclass
class RankedOffer:
    """An offer enriched for display"""
    offer: DrugOffer
    price_range_min: Optional[float] = None
    price_range_max: Optional[float] = None
    distance_km: Optional[float] = None


@dataclass
class SearchResult:
    offers: List[RankedOffer] = field(default_factory=list)
    count: int = 0


def _optional_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def listing_from_row(pharmacy: Pharmacy) -> PharmacyListing:
    latitude = _optional_float(pharmacy.latitude)
    longitude = _optional_float(pharmacy.longitude)
    # Half a coordinate pair is as good as none
    if not is_usable_coordinate(latitude, longitude):
        latitude = longitude = None

    return PharmacyListing(
        id=pharmacy.id,
        name=pharmacy.pharmacy_name,
        address=pharmacy.address,
        city=pharmacy.city,
        state=pharmacy.state,
        phone=pharmacy.phone,
        latitude=latitude,
        longitude=longitude,
        is_active=bool(pharmacy.is_active),
        is_verified=bool(pharmacy.is_verified),
        logo_url=pharmacy.logo_url,
    )


def offer_from_row(drug: Drug, pharmacy: Optional[Pharmacy]) -> DrugOffer:
    threshold = drug.low_stock_threshold
    if threshold is None:
        threshold = settings.DEFAULT_LOW_STOCK_THRESHOLD

    return DrugOffer(
        id=drug.id,
        name=drug.name,
        pharmacy=listing_from_row(pharmacy) if pharmacy is not None else None,
        price=drug.price,
        quantity_in_stock=max(drug.quantity_in_stock or 0, 0),
        low_stock_threshold=threshold,
        generic_name=drug.generic_name,
        brand_name=drug.brand_name,
        category=drug.category,
        dosage_form=drug.dosage_form,
        strength=drug.strength,
        description=drug.description,
        requires_prescription=bool(drug.requires_prescription),
        manufacturer=drug.manufacturer,
        expiry_date=drug.expiry_date,
        updated_at=drug.updated_at,
    )


class DrugStore:
    """
    Read access to drugs joined with their pharmacy.

    Cheap filters (text, active pharmacy, category, stock) are pushed into SQL.
    Store failures surface as UpstreamUnavailable, never as an empty result.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search_offers(
        self,
        term: str,
        category: Optional[str] = None,
        in_stock_only: bool = False,
    ) -> List[DrugOffer]:
        """Active-pharmacy offers whose name, generic or brand name contains term."""
        query = (
            select(Drug, Pharmacy)
            .join(Pharmacy, Drug.pharmacy_id == Pharmacy.id)
            .where(
                Pharmacy.is_active == True,  # noqa: E712
                or_(
                    Drug.name.icontains(term, autoescape=True),
                    Drug.generic_name.icontains(term, autoescape=True),
                    Drug.brand_name.icontains(term, autoescape=True),
                ),
            )
        )

        if category:
            query = query.where(Drug.category == category)

        if in_stock_only:
            query = query.where(Drug.quantity_in_stock > 0)

        query = query.order_by(Drug.updated_at.desc(), Drug.id.desc())

        try:
            result = await self.db.execute(query)
            rows = result.all()
        except SQLAlchemyError as exc:
            logger.error("Drug search failed for term %r", term, exc_info=True)
            raise UpstreamUnavailable("Drug search is temporarily unavailable.") from exc

        return [offer_from_row(drug, pharmacy) for drug, pharmacy in rows]

    async def get_offer(self, drug_id: str) -> Optional[DrugOffer]:
        """Single offer by id, regardless of the pharmacy's active flag."""
        query = (
            select(Drug, Pharmacy)
            .outerjoin(Pharmacy, Drug.pharmacy_id == Pharmacy.id)
            .where(Drug.id == drug_id)
        )
        try:
            result = await self.db.execute(query)
            row = result.first()
        except SQLAlchemyError as exc:
            logger.error("Drug lookup failed for %s", drug_id, exc_info=True)
            raise UpstreamUnavailable("Drug lookup is temporarily unavailable.") from exc

        if row is None:
            return None
        drug, pharmacy = row
        return offer_from_row(drug, pharmacy)
