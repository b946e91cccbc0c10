from redseal.models.location import Country, Region
from redseal.models.trade import TradeSpecialization
from redseal.models.user import User
from redseal.models.waitlist import UserType, WaitlistEntry, WaitlistStatus

__all__ = [
    "Country",
    "Region",
    "TradeSpecialization",
    "User",
    "UserType",
    "WaitlistEntry",
    "WaitlistStatus",
]
