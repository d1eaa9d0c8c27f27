from __future__ import annotations

from sqlalchemy.orm import Session

from tapify.core.commission import CommissionSplit, validate_split_total
from tapify.models.vendors import Vendor


def create_vendor(db: Session, *, name: str, email: str | None = None) -> Vendor:
    vendor = Vendor(name=name, email=email)
    db.add(vendor)
    db.commit()
    db.refresh(vendor)
    return vendor


def get_vendor(db: Session, *, vendor_id: int) -> Vendor | None:
    return db.query(Vendor).filter(Vendor.id == vendor_id).first()


def save_vendor_commission(db: Session, *, vendor: Vendor, split: CommissionSplit) -> Vendor:
    """Write all four split fields in one commit."""
    validate_split_total(split)
    vendor.retailer_commission_percent = split.retailer_percent
    vendor.sourcer_commission_percent = split.sourcer_percent
    vendor.tapify_commission_percent = split.tapify_percent
    vendor.vendor_commission_percent = split.vendor_percent
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(vendor)
    return vendor
