"""Request dependencies: the calling account.

Authentication itself happens upstream; the gateway forwards the
authenticated account id in the X-Account-Id header.
"""
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from stocmed.core.database import get_db
from stocmed.core.errors import Unauthenticated
from stocmed.models.account import Account
from stocmed.services.pharmacy_store import PharmacyStore


async def get_current_account(
    x_account_id: Optional[str] = Header(None, alias="X-Account-Id"),
    db: AsyncSession = Depends(get_db),
) -> Account:
    """Load the caller's account or fail with 401."""
    account_id = (x_account_id or "").strip()
    if not account_id:
        raise Unauthenticated("Not authenticated")

    account = await PharmacyStore(db).get_account(account_id)
    if account is None:
        raise Unauthenticated("Unknown account")
    return account
