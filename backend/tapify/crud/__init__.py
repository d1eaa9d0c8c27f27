from .retailers import create_retailer, get_retailer, get_retailer_for_user, list_payout_eligible_retailers
from .vendors import create_vendor, get_vendor, save_vendor_commission
from .sourcers import create_sourcer
from .payout_jobs import (
    create_payout_job,
    get_payout_job,
    list_payout_jobs,
    list_payout_jobs_for_retailer,
    list_pending_job_ids_for_retailer,
)
from .uids import create_uid, list_claimed_uids
from .orders import create_order, list_recent_orders
