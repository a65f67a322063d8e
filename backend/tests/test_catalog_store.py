"""Tests for DrugStore against an in-memory SQLite database."""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from stocmed.core.errors import UpstreamUnavailable
from stocmed.services.catalog import DrugStore, LOW_STOCK


class BrokenSession:
    """Session whose every query fails like a dropped connection."""

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    async def rollback(self):
        return None


class TestSearchOffers:
    async def test_matches_name_generic_and_brand_case_insensitively(self, db, add_pharmacy, add_drug) -> None:
        pharmacy = await add_pharmacy()
        by_name = await add_drug(pharmacy, name="PARACETAMOL 500mg", generic_name=None, brand_name=None)
        by_generic = await add_drug(pharmacy, name="Tylenol", generic_name="Paracetamol", brand_name=None)
        by_brand = await add_drug(pharmacy, name="Fever tabs", generic_name=None, brand_name="paracetamol plus")
        await add_drug(pharmacy, name="Amoxicillin", generic_name="Amoxicillin", brand_name="Amoxil")

        offers = await DrugStore(db).search_offers("Paracetamol")

        assert {o.id for o in offers} == {by_name.id, by_generic.id, by_brand.id}

    async def test_inactive_pharmacies_excluded(self, db, add_pharmacy, add_drug) -> None:
        active = await add_pharmacy()
        inactive = await add_pharmacy(is_active=False)
        shown = await add_drug(active)
        await add_drug(inactive)

        offers = await DrugStore(db).search_offers("paracetamol")

        assert [o.id for o in offers] == [shown.id]

    async def test_most_recently_updated_first(self, db, add_pharmacy, add_drug) -> None:
        pharmacy = await add_pharmacy()
        older = await add_drug(pharmacy, updated_at=datetime(2026, 1, 1, 9, 0))
        newest = await add_drug(pharmacy, updated_at=datetime(2026, 1, 3, 9, 0))
        newer = await add_drug(pharmacy, updated_at=datetime(2026, 1, 2, 9, 0))

        offers = await DrugStore(db).search_offers("paracetamol")

        assert [o.id for o in offers] == [newest.id, newer.id, older.id]

    async def test_category_and_stock_filters(self, db, add_pharmacy, add_drug) -> None:
        pharmacy = await add_pharmacy()
        wanted = await add_drug(pharmacy, category="Pain Relief", quantity_in_stock=5)
        await add_drug(pharmacy, category="Pain Relief", quantity_in_stock=0)
        await add_drug(pharmacy, category="pain relief", quantity_in_stock=5)

        offers = await DrugStore(db).search_offers("paracetamol", category="Pain Relief", in_stock_only=True)

        assert [o.id for o in offers] == [wanted.id]

    @pytest.mark.parametrize("term", ["%", "_", "100%"])
    async def test_like_wildcards_are_literal(self, db, add_pharmacy, add_drug, term) -> None:
        pharmacy = await add_pharmacy()
        await add_drug(pharmacy, name="Paracetamol")

        assert await DrugStore(db).search_offers(term) == []

    async def test_rows_are_normalized(self, db, add_pharmacy, add_drug) -> None:
        pharmacy = await add_pharmacy(latitude=Decimal("6.53"), longitude=None)
        await add_drug(pharmacy, low_stock_threshold=None, quantity_in_stock=7, price=Decimal("750.50"))

        [offer] = await DrugStore(db).search_offers("paracetamol")

        assert offer.low_stock_threshold == 10
        assert offer.stock_status == LOW_STOCK
        assert offer.price == Decimal("750.50")
        assert offer.pharmacy.latitude is None
        assert offer.pharmacy.longitude is None
        assert offer.pharmacy.name == pharmacy.pharmacy_name

    async def test_coordinates_become_floats(self, db, add_pharmacy, add_drug) -> None:
        pharmacy = await add_pharmacy(latitude=Decimal("6.5300000"), longitude=Decimal("3.3800000"))
        await add_drug(pharmacy)

        [offer] = await DrugStore(db).search_offers("paracetamol")

        assert offer.pharmacy.latitude == pytest.approx(6.53)
        assert offer.pharmacy.has_coordinates

    async def test_store_failure_raises_upstream_unavailable(self) -> None:
        with pytest.raises(UpstreamUnavailable):
            await DrugStore(BrokenSession()).search_offers("paracetamol")


class TestGetOffer:
    async def test_returns_offer_with_pharmacy(self, db, add_pharmacy, add_drug) -> None:
        pharmacy = await add_pharmacy(is_active=False)
        drug = await add_drug(pharmacy)

        offer = await DrugStore(db).get_offer(drug.id)

        assert offer.id == drug.id
        assert offer.pharmacy.id == pharmacy.id
        assert offer.pharmacy.is_active is False

    async def test_unknown_id(self, db) -> None:
        assert await DrugStore(db).get_offer("missing") is None

    async def test_store_failure(self) -> None:
        with pytest.raises(UpstreamUnavailable):
            await DrugStore(BrokenSession()).get_offer("anything")
