from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tapify.api.dependencies import Actor, require_admin
from tapify.core.db import get_db
from tapify.core.payouts import trigger_payout
from tapify.schemas.payouts import PayoutTriggerRequest, PayoutTriggerResponse


router = APIRouter(tags=["payouts"])


@router.post("/payout", response_model=PayoutTriggerResponse)
def trigger_single_payout(
    payload: PayoutTriggerRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin()),
):
    # Errors carry their own status code; see the handler in tapify.main.
    receipt = trigger_payout(db, payload.payout_job_id, actor_id=actor.user_id)
    return PayoutTriggerResponse(payout_job_id=payload.payout_job_id, receipt=receipt)
