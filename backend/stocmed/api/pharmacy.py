"""Pharmacy owner endpoints"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stocmed.api.deps import get_current_account
from stocmed.core.database import get_db
from stocmed.core.errors import NotFound
from stocmed.models.account import Account
from stocmed.models.pharmacy import Pharmacy
from stocmed.schemas.pharmacy import PharmacyResponse, PharmacyUpdate
from stocmed.services.pharmacy_reconciler import PharmacyReconciler
from stocmed.services.pharmacy_store import PharmacyStore

router = APIRouter()


async def _resolve_or_404(store: PharmacyStore, account: Account) -> Pharmacy:
    pharmacy = await PharmacyReconciler(store).resolve(account)
    if pharmacy is None:
        raise NotFound("No pharmacy is set up for this account.", code="pharmacy_not_provisioned")
    return pharmacy


@router.get("/me", response_model=PharmacyResponse)
async def get_my_pharmacy(
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the caller's pharmacy, creating it from the signup profile on first use.

    404 `pharmacy_not_provisioned` when the account has no pharmacy and no
    complete pending profile; 503 when the store cannot be reached.
    """
    pharmacy = await _resolve_or_404(PharmacyStore(db), account)
    return PharmacyResponse.model_validate(pharmacy)


@router.patch("/me", response_model=PharmacyResponse)
async def update_my_pharmacy(
    payload: PharmacyUpdate,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    """
    Update the caller's pharmacy details and location.

    Latitude and longitude are set or cleared together. The pharmacy is
    resolved the same way as GET, so a pending profile is promoted first.
    """
    store = PharmacyStore(db)
    pharmacy = await _resolve_or_404(store, account)
    pharmacy = await store.update_pharmacy(pharmacy, payload.changes())
    return PharmacyResponse.model_validate(pharmacy)
