from stocmed.models.account import Account
from stocmed.models.pharmacy import Pharmacy
from stocmed.models.drug import Drug

__all__ = [
    "Account",
    "Pharmacy",
    "Drug",
]
