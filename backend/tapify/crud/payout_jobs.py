from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from tapify.models.payout_jobs import PAYOUT_STATUS_PENDING, PAYOUT_STATUSES, PayoutJob


def create_payout_job(
    db: Session,
    *,
    vendor_id: int,
    retailer_id: int,
    retailer_cut,
    total_amount,
    status: str = PAYOUT_STATUS_PENDING,
    sourcer_id: int | None = None,
    sourcer_cut=None,
    vendor_cut=None,
    source_uid: str | None = None,
    order_id: str | None = None,
    date_paid: datetime | None = None,
    created_at: datetime | None = None,
) -> PayoutJob:
    if status not in PAYOUT_STATUSES:
        raise ValueError(f"Unknown payout status: {status}")
    job = PayoutJob(
        vendor_id=vendor_id,
        retailer_id=retailer_id,
        sourcer_id=sourcer_id,
        status=status,
        total_amount=total_amount,
        retailer_cut=retailer_cut,
        sourcer_cut=sourcer_cut,
        vendor_cut=vendor_cut,
        source_uid=source_uid,
        order_id=order_id,
        date_paid=date_paid,
    )
    if created_at is not None:
        job.created_at = created_at
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def get_payout_job(db: Session, *, job_id: int) -> PayoutJob | None:
    return db.query(PayoutJob).filter(PayoutJob.id == job_id).first()


def list_payout_jobs(db: Session, *, status: str | None = None) -> list[PayoutJob]:
    """All payout jobs, newest first; restricted to one status when given."""
    query = db.query(PayoutJob)
    if status is not None:
        query = query.filter(PayoutJob.status == status)
    return query.order_by(PayoutJob.created_at.desc(), PayoutJob.id.desc()).all()


def list_payout_jobs_for_retailer(db: Session, *, retailer_id: int) -> list[PayoutJob]:
    return (
        db.query(PayoutJob)
        .filter(PayoutJob.retailer_id == retailer_id)
        .order_by(PayoutJob.created_at.desc(), PayoutJob.id.desc())
        .all()
    )


def list_pending_job_ids_for_retailer(db: Session, *, retailer_id: int) -> list[int]:
    rows = (
        db.query(PayoutJob.id)
        .filter(PayoutJob.retailer_id == retailer_id, PayoutJob.status == PAYOUT_STATUS_PENDING)
        .order_by(PayoutJob.created_at.asc(), PayoutJob.id.asc())
        .all()
    )
    return [row[0] for row in rows]
