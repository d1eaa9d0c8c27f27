from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tapify.api.admin_payouts import _job_read
from tapify.api.dependencies import Actor, get_current_actor
from tapify.core.db import get_db
from tapify.core.errors import RetailerNotFoundError
from tapify.core.ledger import summarize_retailer
from tapify.crud.retailers import get_retailer_for_user
from tapify.schemas.payouts import (
    EarningsCountsRead,
    EarningsRead,
    RetailerEarningsResponse,
    RetailerSummaryRead,
)


router = APIRouter(tags=["retailers"])


@router.get("/retailer-earnings", response_model=RetailerEarningsResponse)
def get_retailer_earnings(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    retailer = get_retailer_for_user(db, user_id=actor.user_id, email=actor.email)
    if retailer is None:
        raise RetailerNotFoundError()
    jobs, summary = summarize_retailer(db, retailer_id=retailer.id)
    return RetailerEarningsResponse(
        retailer=RetailerSummaryRead(id=retailer.id, name=retailer.name, email=retailer.email),
        earnings=EarningsRead(
            pending=float(summary.pending_earnings),
            paid=float(summary.paid_earnings),
            total=float(summary.total_earnings),
            pending_display=summary.pending_display,
            paid_display=summary.paid_display,
            total_display=summary.total_display,
        ),
        payouts=[_job_read(job) for job in jobs],
        counts=EarningsCountsRead(
            pending=summary.pending_count,
            paid=summary.paid_count,
            total=len(jobs),
        ),
    )
