"""Offer Ranker - filter, enrich and order drug offers for one search"""
import math
from typing import Iterable, List, Optional

from stocmed.services.catalog import DrugOffer, RankedOffer, SearchQuery, SearchResult
from stocmed.services.geo import haversine_km
from stocmed.services.pricing import price_band


class OfferRanker:
    """
    Turns store results into the ordered list patients see.

    Pipeline (order matters):
    1. Visibility - offers from inactive pharmacies never leave this class,
       even though the store already filters them.
    2. Text match is trusted from the store and not re-applied.
    3. Category - exact, case-sensitive.
    4. Stock - quantity > 0 when in_stock_only is set.
    5. Location - substring of pharmacy city or state, case-insensitive.
    6. Enrichment - price band and, when both sides have coordinates, distance.
    7. Ordering - nearest first when the caller sent coordinates, unknown
       distances last, ties keep store order. Without coordinates the store
       order (most recently updated first) is kept as is.

    Pure and synchronous: no I/O, no side effects.
    """

    def rank(self, offers: Iterable[DrugOffer], query: SearchQuery) -> SearchResult:
        location = (query.location or "").strip().lower() or None

        ranked: List[RankedOffer] = []
        for offer in offers:
            if not self._is_visible(offer):
                continue
            if query.category and offer.category != query.category:
                continue
            if query.in_stock_only and offer.quantity_in_stock <= 0:
                continue
            if location and not self._matches_location(offer, location):
                continue
            ranked.append(self.enrich(offer, query))

        if query.has_coordinates:
            # list.sort is stable, so equal distances keep store order
            ranked.sort(key=_distance_sort_key)

        return SearchResult(offers=ranked, count=len(ranked))

    @staticmethod
    def _is_visible(offer: DrugOffer) -> bool:
        return offer.pharmacy is not None and offer.pharmacy.is_active

    @staticmethod
    def _matches_location(offer: DrugOffer, location: str) -> bool:
        pharmacy = offer.pharmacy
        city = (pharmacy.city or "").lower()
        state = (pharmacy.state or "").lower()
        return (bool(city) and location in city) or (bool(state) and location in state)

    def enrich(self, offer: DrugOffer, query: Optional[SearchQuery] = None) -> RankedOffer:
        """Price band and distance for one offer, no filtering."""
        price_min, price_max = price_band(offer.price)

        distance = None
        pharmacy = offer.pharmacy
        if query is not None and query.has_coordinates and pharmacy is not None and pharmacy.has_coordinates:
            distance = haversine_km(
                float(query.latitude),
                float(query.longitude),
                pharmacy.latitude,
                pharmacy.longitude,
            )

        return RankedOffer(
            offer=offer,
            price_range_min=price_min,
            price_range_max=price_max,
            distance_km=distance,
        )


def _distance_sort_key(ranked: RankedOffer) -> float:
    distance = ranked.distance_km
    if distance is None or not math.isfinite(distance):
        return math.inf
    return distance
