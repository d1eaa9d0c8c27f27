from __future__ import annotations

from sqlalchemy.orm import Session

from tapify.core.commission import CommissionSplit, derive_split, is_valid_split, split_for_vendor
from tapify.core.errors import CommissionValidationError, VendorNotFoundError
from tapify.core.logging import get_structured_logger
from tapify.crud.vendors import get_vendor, save_vendor_commission
from tapify.models.vendors import Vendor


logger = get_structured_logger("tapify.commission")


def update_vendor_commission(
    db: Session,
    *,
    vendor_id: int,
    retailer_percent=None,
    sourcer_percent=None,
    tapify_percent=None,
    actor_id: str | None = None,
) -> tuple[Vendor, CommissionSplit]:
    """Validate and persist a vendor's commission split.

    This is the only writer of the four commission fields. Validation
    happens before the vendor is even loaded, so a rejected split never
    touches the row.
    """
    try:
        split = derive_split(retailer_percent, sourcer_percent, tapify_percent)
    except CommissionValidationError as exc:
        logger.info(
            "commission.rejected",
            extra={"vendor_id": vendor_id, "actor_id": actor_id, "error_code": exc.code, **exc.details},
        )
        raise

    vendor = get_vendor(db, vendor_id=vendor_id)
    if vendor is None:
        raise VendorNotFoundError(vendor_id)

    vendor = save_vendor_commission(db, vendor=vendor, split=split)
    logger.info(
        "commission.updated",
        extra={"vendor_id": vendor.id, "actor_id": actor_id, **split.as_dict()},
    )
    return vendor, split


def read_vendor_commission(db: Session, *, vendor_id: int) -> tuple[Vendor, CommissionSplit, bool]:
    vendor = get_vendor(db, vendor_id=vendor_id)
    if vendor is None:
        raise VendorNotFoundError(vendor_id)
    split = split_for_vendor(vendor)
    return vendor, split, is_valid_split(
        split.retailer_percent,
        split.sourcer_percent,
        split.tapify_percent,
        split.vendor_percent,
    )
