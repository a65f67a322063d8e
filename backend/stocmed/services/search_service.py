"""Search Service - medication discovery across active pharmacies"""
import logging
from dataclasses import replace
from typing import Optional

from stocmed.core.errors import InvalidArgument, NotFound
from stocmed.services.catalog import DrugStore, RankedOffer, SearchQuery, SearchResult
from stocmed.services.ranking import OfferRanker

logger = logging.getLogger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class SearchService:
    """
    Runs a patient search: store query, then ranking.

    Text, category and stock filters go to the store since SQL does them
    cheaply. Location matching, geo enrichment and ordering stay here so they
    behave the same whatever database sits behind DrugStore.

    The service does not retry. A store failure propagates as
    UpstreamUnavailable and the caller decides whether to try again.
    """

    def __init__(self, store: DrugStore, ranker: Optional[OfferRanker] = None):
        self.store = store
        self.ranker = ranker or OfferRanker()

    @staticmethod
    def normalize(query: SearchQuery) -> SearchQuery:
        """Trim the query and reject a blank term."""
        term = (query.term or "").strip()
        if not term:
            raise InvalidArgument("Search query is required")

        return replace(
            query,
            term=term,
            location=_blank_to_none(query.location),
            category=_blank_to_none(query.category),
            in_stock_only=bool(query.in_stock_only),
        )

    async def search(self, query: SearchQuery) -> SearchResult:
        query = self.normalize(query)

        offers = await self.store.search_offers(
            query.term,
            category=query.category,
            in_stock_only=query.in_stock_only,
        )
        result = self.ranker.rank(offers, query)

        logger.debug(
            "Search %r: %d store rows, %d ranked (location=%r, geo=%s)",
            query.term,
            len(offers),
            result.count,
            query.location,
            query.has_coordinates,
        )
        return result

    async def get_offer(
        self,
        drug_id: str,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> RankedOffer:
        """One offer with its price band; hidden when its pharmacy is inactive."""
        if not drug_id or not drug_id.strip():
            raise InvalidArgument("Drug ID is required")

        offer = await self.store.get_offer(drug_id.strip())
        if offer is None or offer.pharmacy is None or not offer.pharmacy.is_active:
            raise NotFound("Drug not found", code="drug_not_found")

        context = SearchQuery(term=offer.name, latitude=latitude, longitude=longitude)
        return self.ranker.enrich(offer, context)
