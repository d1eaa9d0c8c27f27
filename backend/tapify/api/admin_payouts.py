from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tapify.api.dependencies import Actor, require_admin
from tapify.core.db import get_db
from tapify.core.errors import RetailerNotFoundError
from tapify.core.ledger import DEFAULT_STATUS_FILTER, LedgerSummary, aggregate
from tapify.core.payouts import BatchTriggerResult, trigger_all
from tapify.crud.payout_jobs import list_pending_job_ids_for_retailer
from tapify.crud.retailers import get_retailer
from tapify.schemas.payouts import (
    ClaimedUidRead,
    LedgerSummaryRead,
    LedgerTotalsRead,
    OrderRead,
    PayoutBatchRequest,
    PayoutBatchResponse,
    PayoutFailureRead,
    PayoutJobRead,
    RetailerLedgerEntryRead,
    RetailerPayoutsResponse,
    RetailerRead,
)


router = APIRouter(prefix="/admin", tags=["admin", "payouts"])


def _retailer_read(retailer) -> RetailerRead:
    return RetailerRead(
        id=retailer.id,
        name=retailer.name,
        email=retailer.email,
        location=retailer.location,
        converted=bool(retailer.converted),
        onboarding_completed=bool(retailer.onboarding_completed),
    )


def _job_read(job) -> PayoutJobRead:
    return PayoutJobRead(
        id=job.id,
        vendor_id=job.vendor_id,
        retailer_id=job.retailer_id,
        sourcer_id=job.sourcer_id,
        status=job.status,
        total_amount=float(job.total_amount or 0),
        retailer_cut=float(job.retailer_cut or 0),
        source_uid=job.source_uid,
        order_id=job.order_id,
        created_at=job.created_at,
        date_paid=job.date_paid,
    )


def _summary_read(summary: LedgerSummary) -> LedgerSummaryRead:
    return LedgerSummaryRead(
        pending_earnings=float(summary.pending_earnings),
        paid_earnings=float(summary.paid_earnings),
        total_earnings=float(summary.total_earnings),
        pending_count=summary.pending_count,
        paid_count=summary.paid_count,
        total_orders=summary.total_orders,
        uid_count=summary.uid_count,
        pending_display=summary.pending_display,
        paid_display=summary.paid_display,
        total_display=summary.total_display,
    )


def _batch_response(result: BatchTriggerResult) -> PayoutBatchResponse:
    return PayoutBatchResponse(
        success=result.success,
        succeeded=result.succeeded,
        failed=[
            PayoutFailureRead(
                payout_job_id=failure.payout_job_id,
                code=failure.code,
                error=failure.error,
                unknown_outcome=failure.unknown_outcome,
                retryable=failure.retryable,
            )
            for failure in result.failed
        ],
        receipts=result.receipts,
    )


@router.get("/retailer-payouts", response_model=RetailerPayoutsResponse)
def get_retailer_payouts(
    status: Optional[str] = Query(DEFAULT_STATUS_FILTER),
    db: Session = Depends(get_db),
    _actor: Actor = Depends(require_admin()),
):
    ledger = aggregate(db, status)
    return RetailerPayoutsResponse(
        status_filter=ledger.status_filter,
        retailers=[
            RetailerLedgerEntryRead(
                retailer=_retailer_read(entry.retailer),
                uids=[
                    ClaimedUidRead(
                        uid=uid.uid,
                        retailer_id=uid.retailer_id,
                        is_claimed=bool(uid.is_claimed),
                        registered_at=uid.registered_at,
                        affiliate_url=uid.affiliate_url,
                    )
                    for uid in entry.uids
                ],
                payouts=[_job_read(job) for job in entry.payouts],
                orders=[
                    OrderRead(
                        id=order.id,
                        shopify_order_id=order.shopify_order_id,
                        retailer_id=order.retailer_id,
                        total=float(order.total or 0),
                        processed_at=order.processed_at,
                        product_name=order.product_name,
                        source_uid=order.source_uid,
                    )
                    for order in entry.orders
                ],
                summary=_summary_read(entry.summary),
            )
            for entry in ledger.retailers
        ],
        totals=LedgerTotalsRead(
            total_retailers=ledger.totals.total_retailers,
            total_pending=float(ledger.totals.total_pending),
            total_paid=float(ledger.totals.total_paid),
            total_payouts=ledger.totals.total_payouts,
        ),
    )


@router.post("/payouts/batch", response_model=PayoutBatchResponse)
def trigger_payout_batch(
    payload: PayoutBatchRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin()),
):
    result = trigger_all(db, payload.payout_job_ids, actor_id=actor.user_id)
    return _batch_response(result)


@router.post("/retailers/{retailer_id}/pay-all", response_model=PayoutBatchResponse)
def pay_all_for_retailer(
    retailer_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin()),
):
    if get_retailer(db, retailer_id=retailer_id) is None:
        raise RetailerNotFoundError(retailer_id)
    job_ids = list_pending_job_ids_for_retailer(db, retailer_id=retailer_id)
    result = trigger_all(db, job_ids, actor_id=actor.user_id)
    return _batch_response(result)
