from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from tapify.core.commission import CommissionSplit
from tapify.crud.orders import create_order
from tapify.crud.payout_jobs import create_payout_job
from tapify.crud.retailers import create_retailer
from tapify.crud.sourcers import create_sourcer
from tapify.crud.uids import create_uid
from tapify.crud.vendors import create_vendor, save_vendor_commission
from tapify.models.orders import Order
from tapify.models.payout_jobs import PayoutJob
from tapify.models.retailers import Retailer
from tapify.models.sourcers import SourcerAccount
from tapify.models.uids import ClaimedUid
from tapify.models.vendors import Vendor


def get_or_create_retailer(db: Session, name: str, **fields) -> Retailer:
    retailer = db.query(Retailer).filter(Retailer.name == name).first()
    if retailer:
        return retailer
    return create_retailer(db, name=name, **fields)


def get_or_create_vendor(db: Session, name: str, split: CommissionSplit | None = None, **fields) -> Vendor:
    vendor = db.query(Vendor).filter(Vendor.name == name).first()
    if vendor is None:
        vendor = create_vendor(db, name=name, **fields)
    if split is not None:
        vendor = save_vendor_commission(db, vendor=vendor, split=split)
    return vendor


def get_or_create_sourcer(db: Session, name: str, email: str | None = None) -> SourcerAccount:
    sourcer = db.query(SourcerAccount).filter(SourcerAccount.name == name).first()
    if sourcer:
        return sourcer
    return create_sourcer(db, name=name, email=email)


def get_or_create_uid(db: Session, uid: str, retailer: Retailer, **fields) -> ClaimedUid:
    existing = db.query(ClaimedUid).filter(ClaimedUid.uid == uid).first()
    if existing:
        return existing
    return create_uid(db, uid=uid, retailer_id=retailer.id, **fields)


def get_or_create_payout_job(
    db: Session,
    *,
    order_id: str,
    vendor: Vendor,
    retailer: Retailer,
    created_at: datetime | None = None,
    **fields,
) -> PayoutJob:
    job = db.query(PayoutJob).filter(PayoutJob.order_id == order_id).first()
    if job:
        return job
    return create_payout_job(
        db,
        vendor_id=vendor.id,
        retailer_id=retailer.id,
        order_id=order_id,
        created_at=created_at,
        **fields,
    )


def get_or_create_order(db: Session, shopify_order_id: str, retailer: Retailer, **fields) -> Order:
    order = db.query(Order).filter(Order.shopify_order_id == shopify_order_id).first()
    if order:
        return order
    return create_order(db, shopify_order_id=shopify_order_id, retailer_id=retailer.id, **fields)
