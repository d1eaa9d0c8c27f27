from .retailers import Retailer
from .vendors import Vendor
from .sourcers import SourcerAccount
from .payout_jobs import PayoutJob
from .uids import ClaimedUid
from .orders import Order

__all__ = [
    "Retailer",
    "Vendor",
    "SourcerAccount",
    "PayoutJob",
    "ClaimedUid",
    "Order",
]
