"""Pharmacy Reconciler - resolve (and lazily create) an account's pharmacy"""
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from stocmed.core.errors import PharmacyConflict, UpstreamUnavailable
from stocmed.models.account import Account
from stocmed.models.pharmacy import Pharmacy
from stocmed.services.pharmacy_store import PharmacyStore

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "pharmacy_name",
    "license_number",
    "address",
    "city",
    "state",
    "phone",
)


@dataclass(frozen=True)
class PendingPharmacyProfile:
    """Pharmacy details captured at signup, before a pharmacies row exists"""
    pharmacy_name: str
    license_number: str
    address: str
    city: str
    state: str
    phone: str

    @classmethod
    def from_metadata(cls, data: Optional[Mapping[str, Any]]) -> Optional["PendingPharmacyProfile"]:
        """Complete profile, or None when any field is missing or blank."""
        if not isinstance(data, Mapping):
            return None

        values = {}
        for name in PROFILE_FIELDS:
            value = data.get(name)
            if value is None:
                return None
            value = str(value).strip()
            if not value:
                return None
            values[name] = value
        return cls(**values)


class PharmacyReconciler:
    """
    Finds the pharmacy for an account, creating it from the pending signup
    profile the first time it is needed.

    Resolution order, each step returning on success:
    1. The account's cached pharmacy_id. A stale id falls through.
    2. Lookup by owner. Repairs the cached id for next time.
    3. No usable pending profile: None. Expected for patient accounts.
    4. Create from the pending profile; the account is relinked and the
       profile cleared in the same commit.

    Two first-time requests can both reach step 4. The unique owner
    constraint rejects the second insert, which then rereads step 2.
    """

    def __init__(self, store: PharmacyStore):
        self.store = store

    async def resolve(self, account: Account) -> Optional[Pharmacy]:
        # Read everything up front, a rollback expires the ORM instance
        account_id = account.id
        cached_id = account.pharmacy_id
        pending = account.pending_pharmacy_profile

        if cached_id:
            pharmacy = await self.store.get_pharmacy(cached_id)
            if pharmacy is not None:
                return pharmacy
            logger.info("Account %s has stale pharmacy reference %s", account_id, cached_id)

        pharmacy = await self._find_by_owner(account_id, cached_id, pending is not None)
        if pharmacy is not None:
            return pharmacy

        profile = PendingPharmacyProfile.from_metadata(pending)
        if profile is None:
            return None

        try:
            pharmacy = await self.store.create_from_profile(account_id, profile)
        except PharmacyConflict:
            logger.info("Pharmacy for account %s created concurrently, rereading", account_id)
            pharmacy = await self._find_by_owner(account_id, None, True)
            if pharmacy is None:
                raise UpstreamUnavailable("Pharmacy store returned an inconsistent result.")
            return pharmacy

        logger.info("Created pharmacy %s for account %s from pending profile", pharmacy.id, account_id)
        return pharmacy

    async def _find_by_owner(
        self,
        account_id: str,
        cached_id: Optional[str],
        has_pending: bool,
    ) -> Optional[Pharmacy]:
        pharmacy = await self.store.find_by_owner(account_id)
        if pharmacy is None:
            return None

        pharmacy_id = pharmacy.id
        if cached_id != pharmacy_id or has_pending:
            try:
                await self.store.link_account(account_id, pharmacy_id)
            except UpstreamUnavailable:
                # The pharmacy itself is good; the fast path heals next time
                logger.warning("Could not repair pharmacy reference for account %s", account_id)
                # The rollback expired the instance, load it again
                return await self.store.get_pharmacy(pharmacy_id)
        return pharmacy
