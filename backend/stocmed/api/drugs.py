"""Drug endpoints - medication search and offer detail"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from stocmed.core.config import settings
from stocmed.core.database import get_db
from stocmed.core.limiter import limiter
from stocmed.schemas.drug import RankedOfferResponse, SearchFilters, SearchResponse
from stocmed.services.catalog import DrugStore, SearchQuery
from stocmed.services.search_service import SearchService

router = APIRouter()


def get_search_service(db: AsyncSession = Depends(get_db)) -> SearchService:
    return SearchService(DrugStore(db))


@router.get("/search", response_model=SearchResponse)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
async def search_drugs(
    request: Request,
    q: Optional[str] = Query(None, description="Medication name, generic name or brand"),
    location: Optional[str] = Query(None, description="City or state substring"),
    category: Optional[str] = Query(None, description="Exact category"),
    in_stock_only: bool = Query(False),
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Caller latitude"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Caller longitude"),
    service: SearchService = Depends(get_search_service),
):
    """
    Search medications across active pharmacies.

    With lat/lng the nearest pharmacies come first; without them results are
    most recently updated first. A blank q is a 400, an unreachable store a 503.
    """
    query = SearchService.normalize(
        SearchQuery(
            term=q or "",
            location=location,
            category=category,
            in_stock_only=in_stock_only,
            latitude=lat,
            longitude=lng,
        )
    )
    result = await service.search(query)

    return SearchResponse(
        offers=[RankedOfferResponse.from_ranked(r) for r in result.offers],
        count=result.count,
        query=query.term,
        filters=SearchFilters(
            location=query.location,
            category=query.category,
            in_stock_only=query.in_stock_only,
            latitude=lat,
            longitude=lng,
        ),
    )


@router.get("/{drug_id}", response_model=RankedOfferResponse)
async def get_drug(
    drug_id: str,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    service: SearchService = Depends(get_search_service),
):
    """Get one medication offer. Offers of inactive pharmacies are not found."""
    ranked = await service.get_offer(drug_id, latitude=lat, longitude=lng)
    return RankedOfferResponse.from_ranked(ranked)
