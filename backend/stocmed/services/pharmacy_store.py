"""Pharmacy Store - point reads and writes for pharmacies and their owners"""
import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stocmed.core.errors import PharmacyConflict, UpstreamUnavailable
from stocmed.models.account import Account
from stocmed.models.pharmacy import Pharmacy

logger = logging.getLogger(__name__)


class PharmacyStore:
    """
    Storage calls used by PharmacyReconciler.

    Every failure is rolled back and raised; nothing here turns an error into
    "no pharmacy".
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_account(self, account_id: str) -> Optional[Account]:
        return await self._scalar(
            select(Account).where(Account.id == account_id),
            "account lookup",
        )

    async def get_pharmacy(self, pharmacy_id: str) -> Optional[Pharmacy]:
        return await self._scalar(
            select(Pharmacy).where(Pharmacy.id == pharmacy_id),
            "pharmacy lookup by id",
        )

    async def find_by_owner(self, account_id: str) -> Optional[Pharmacy]:
        """Pharmacy owned by the account; the oldest one if legacy duplicates exist."""
        return await self._scalar(
            select(Pharmacy)
            .where(Pharmacy.user_id == account_id)
            .order_by(Pharmacy.created_at.asc(), Pharmacy.id.asc())
            .limit(1),
            "pharmacy lookup by owner",
        )

    async def link_account(self, account_id: str, pharmacy_id: str) -> None:
        """Point the account at its pharmacy and drop any pending profile."""
        try:
            await self.db.execute(self._link_statement(account_id, pharmacy_id))
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Linking account %s to pharmacy %s failed", account_id, pharmacy_id, exc_info=True)
            raise UpstreamUnavailable("Account store is temporarily unavailable.") from exc

    async def create_from_profile(self, account_id: str, profile) -> Pharmacy:
        """
        Insert the pharmacy and link the account in one transaction.

        The pending profile is only cleared if the insert commits. A unique
        violation on user_id raises PharmacyConflict so the caller can reread.
        """
        pharmacy = Pharmacy(
            user_id=account_id,
            pharmacy_name=profile.pharmacy_name,
            license_number=profile.license_number,
            address=profile.address,
            city=profile.city,
            state=profile.state,
            phone=profile.phone,
        )
        self.db.add(pharmacy)

        try:
            await self.db.flush()
            await self.db.execute(self._link_statement(account_id, pharmacy.id))
            await self.db.commit()
            await self.db.refresh(pharmacy)
        except IntegrityError as exc:
            await self.db.rollback()
            raise PharmacyConflict(f"Pharmacy for account {account_id} already exists.") from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Creating pharmacy for account %s failed", account_id, exc_info=True)
            raise UpstreamUnavailable("Pharmacy store is temporarily unavailable.") from exc

        return pharmacy

    async def update_pharmacy(self, pharmacy: Pharmacy, changes: dict) -> Pharmacy:
        """Apply owner edits and return the refreshed row."""
        pharmacy_id = pharmacy.id
        for field, value in changes.items():
            setattr(pharmacy, field, value)

        try:
            await self.db.commit()
            await self.db.refresh(pharmacy)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Updating pharmacy %s failed", pharmacy_id, exc_info=True)
            raise UpstreamUnavailable("Pharmacy store is temporarily unavailable.") from exc

        logger.info("Pharmacy %s updated (%s)", pharmacy_id, ", ".join(sorted(changes)))
        return pharmacy

    @staticmethod
    def _link_statement(account_id: str, pharmacy_id: str):
        return (
            update(Account)
            .where(Account.id == account_id)
            .values(pharmacy_id=pharmacy_id, pending_pharmacy_profile=None)
        )

    async def _scalar(self, query, action: str):
        try:
            result = await self.db.execute(query)
            return result.scalars().first()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Pharmacy store %s failed", action, exc_info=True)
            raise UpstreamUnavailable("Pharmacy store is temporarily unavailable.") from exc
