"""Shared fixtures: in-memory database and domain object builders."""

from datetime import datetime, timedelta
from decimal import Decimal
from itertools import count

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import stocmed.models  # noqa: F401
from stocmed.core.database import Base
from stocmed.models.account import Account
from stocmed.models.drug import Drug
from stocmed.models.pharmacy import Pharmacy
from stocmed.services.catalog import DrugOffer, PharmacyListing

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def listing():
    """Build a PharmacyListing with sensible defaults."""
    ids = count(1)

    def _listing(**overrides) -> PharmacyListing:
        n = next(ids)
        values = {
            "id": f"ph-{n}",
            "name": f"Pharmacy {n}",
            "address": f"{n} Allen Avenue",
            "city": "Ikeja",
            "state": "Lagos",
            "phone": "+2348000000000",
            "latitude": None,
            "longitude": None,
            "is_active": True,
        }
        values.update(overrides)
        return PharmacyListing(**values)

    return _listing


@pytest.fixture
def offer(listing):
    """Build a DrugOffer; pass pharmacy=... or pharmacy fields via pharmacy_kwargs."""
    ids = count(1)

    def _offer(pharmacy=None, pharmacy_kwargs=None, **overrides) -> DrugOffer:
        n = next(ids)
        values = {
            "id": f"drug-{n}",
            "name": "Paracetamol 500mg",
            "pharmacy": pharmacy if pharmacy is not None else listing(**(pharmacy_kwargs or {})),
            "price": Decimal("500"),
            "quantity_in_stock": 50,
            "low_stock_threshold": 10,
            "category": "Pain Relief",
        }
        values.update(overrides)
        return DrugOffer(**values)

    return _offer


@pytest.fixture
def add_pharmacy(db):
    """Insert a Pharmacy row."""
    ids = count(1)

    async def _add(**overrides) -> Pharmacy:
        n = next(ids)
        values = {
            "id": f"pharmacy-{n}",
            "user_id": f"owner-{n}",
            "pharmacy_name": f"Pharmacy {n}",
            "license_number": f"PCN-{n:04d}",
            "address": f"{n} Allen Avenue",
            "city": "Ikeja",
            "state": "Lagos",
            "phone": "+2348000000000",
        }
        values.update(overrides)
        pharmacy = Pharmacy(**values)
        db.add(pharmacy)
        await db.commit()
        return pharmacy

    return _add


@pytest.fixture
def add_drug(db):
    """Insert a Drug row; each one is updated a minute before the previous."""
    ids = count(1)

    async def _add(pharmacy: Pharmacy, **overrides) -> Drug:
        n = next(ids)
        values = {
            "id": f"drug-{n}",
            "pharmacy_id": pharmacy.id,
            "name": "Paracetamol 500mg",
            "generic_name": "Paracetamol",
            "brand_name": "Panadol",
            "category": "Pain Relief",
            "dosage_form": "Tablet",
            "price": Decimal("500"),
            "quantity_in_stock": 50,
            "updated_at": BASE_TIME - timedelta(minutes=n),
        }
        values.update(overrides)
        drug = Drug(**values)
        db.add(drug)
        await db.commit()
        return drug

    return _add


@pytest.fixture
def add_account(db):
    async def _add(account_id: str, **overrides) -> Account:
        values = {"id": account_id, "email": f"{account_id}@example.com", "role": "pharmacy"}
        values.update(overrides)
        account = Account(**values)
        db.add(account)
        await db.commit()
        return account

    return _add


class FailingSession:
    """Wraps a session so one of its methods fails like a dropped connection."""

    def __init__(self, session, failing: str):
        self._session = session
        self._failing = failing

    def __getattr__(self, name):
        if name == self._failing:
            return self._fail
        return getattr(self._session, name)

    async def _fail(self, *args, **kwargs):
        raise OperationalError(self._failing, {}, Exception("disk I/O error"))


@pytest.fixture
def failing_session(db):
    def _wrap(method: str) -> FailingSession:
        return FailingSession(db, method)

    return _wrap
