"""Tests for PharmacyStore writes and the owner update payload."""

from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from stocmed.core.errors import UpstreamUnavailable
from stocmed.models.pharmacy import Pharmacy
from stocmed.schemas.pharmacy import PharmacyUpdate
from stocmed.services.pharmacy_store import PharmacyStore


async def reload_pharmacy(session_factory, pharmacy_id: str) -> Pharmacy:
    async with session_factory() as session:
        result = await session.execute(select(Pharmacy).where(Pharmacy.id == pharmacy_id))
        return result.scalar_one()


class TestUpdatePharmacy:
    async def test_applies_changes(self, db, session_factory, add_pharmacy) -> None:
        pharmacy = await add_pharmacy()

        updated = await PharmacyStore(db).update_pharmacy(
            pharmacy, {"latitude": Decimal("6.5"), "longitude": Decimal("3.3"), "city": "Yaba"}
        )

        assert updated.city == "Yaba"
        stored = await reload_pharmacy(session_factory, pharmacy.id)
        assert stored.latitude == Decimal("6.5")
        assert stored.longitude == Decimal("3.3")
        assert stored.address == pharmacy.address

    async def test_failed_commit_is_upstream_unavailable(
        self, session_factory, add_pharmacy, failing_session
    ) -> None:
        pharmacy = await add_pharmacy(city="Ikeja")

        with pytest.raises(UpstreamUnavailable):
            await PharmacyStore(failing_session("commit")).update_pharmacy(pharmacy, {"city": "Yaba"})

        assert (await reload_pharmacy(session_factory, pharmacy.id)).city == "Ikeja"


class TestPharmacyUpdatePayload:
    def test_only_sent_fields_are_changes(self) -> None:
        assert PharmacyUpdate(city=" Yaba ").changes() == {"city": "Yaba"}

    def test_coordinates_can_be_cleared_together(self) -> None:
        assert PharmacyUpdate(latitude=None, longitude=None).changes() == {"latitude": None, "longitude": None}

    def test_blank_optional_field_is_cleared(self) -> None:
        assert PharmacyUpdate(state="  ").changes() == {"state": None}

    @pytest.mark.parametrize(
        "payload",
        [
            {"latitude": 6.5},
            {"longitude": 3.3},
            {"latitude": None, "longitude": 3.3},
            {"latitude": -90.5, "longitude": 3.3},
            {"latitude": 6.5, "longitude": 180.5},
            {"address": ""},
            {"phone": None},
        ],
    )
    def test_rejected(self, payload) -> None:
        with pytest.raises(ValidationError):
            PharmacyUpdate(**payload)
