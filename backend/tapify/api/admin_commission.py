from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tapify.api.dependencies import Actor, require_admin
from tapify.core.commission import CommissionSplit
from tapify.core.db import get_db
from tapify.core.vendor_commission import read_vendor_commission, update_vendor_commission
from tapify.schemas.commission import (
    CommissionRead,
    CommissionUpdateResponse,
    CommissionVendorRead,
    VendorCommissionUpdate,
)


router = APIRouter(prefix="/admin", tags=["admin", "commission"])


def _vendor_read(vendor, split: CommissionSplit) -> CommissionVendorRead:
    return CommissionVendorRead(
        id=vendor.id,
        name=vendor.name,
        retailer_percent=split.retailer_percent,
        sourcer_percent=split.sourcer_percent,
        tapify_percent=split.tapify_percent,
        vendor_percent=split.vendor_percent,
    )


@router.post("/update-vendor-commission", response_model=CommissionUpdateResponse)
def update_commission(
    payload: VendorCommissionUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin()),
):
    vendor, split = update_vendor_commission(
        db,
        vendor_id=payload.vendor_id,
        retailer_percent=payload.retailer_percent,
        sourcer_percent=payload.sourcer_percent,
        tapify_percent=payload.tapify_percent,
        actor_id=actor.user_id,
    )
    return CommissionUpdateResponse(vendor=_vendor_read(vendor, split), breakdown=split.breakdown())


@router.get("/vendors/{vendor_id}/commission", response_model=CommissionRead)
def read_commission(
    vendor_id: int,
    db: Session = Depends(get_db),
    _actor: Actor = Depends(require_admin()),
):
    vendor, split, is_valid = read_vendor_commission(db, vendor_id=vendor_id)
    return CommissionRead(
        vendor_id=vendor.id,
        retailer_percent=split.retailer_percent,
        sourcer_percent=split.sourcer_percent,
        tapify_percent=split.tapify_percent,
        vendor_percent=split.vendor_percent,
        total=split.total,
        is_valid=is_valid,
        breakdown=split.breakdown(),
    )
