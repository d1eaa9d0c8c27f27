from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PayoutTriggerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payout_job_id: int = Field(..., alias="payoutJobId")


class PayoutBatchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payout_job_ids: list[int] = Field(..., alias="payoutJobIds")


class PayoutTriggerResponse(BaseModel):
    success: bool = True
    payout_job_id: int
    receipt: dict[str, Any]


class PayoutFailureRead(BaseModel):
    payout_job_id: int
    code: str
    error: str
    unknown_outcome: bool = False
    retryable: bool = True


class PayoutBatchResponse(BaseModel):
    success: bool
    succeeded: list[int]
    failed: list[PayoutFailureRead]
    receipts: dict[int, dict[str, Any]]


class RetailerRead(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    location: Optional[str] = None
    converted: bool
    onboarding_completed: bool


class PayoutJobRead(BaseModel):
    id: int
    vendor_id: Optional[int] = None
    retailer_id: Optional[int] = None
    sourcer_id: Optional[int] = None
    status: str
    total_amount: float
    retailer_cut: float
    source_uid: Optional[str] = None
    order_id: Optional[str] = None
    created_at: Optional[datetime] = None
    date_paid: Optional[datetime] = None


class ClaimedUidRead(BaseModel):
    uid: str
    retailer_id: Optional[int] = None
    is_claimed: bool
    registered_at: Optional[datetime] = None
    affiliate_url: Optional[str] = None


class OrderRead(BaseModel):
    id: int
    shopify_order_id: Optional[str] = None
    retailer_id: Optional[int] = None
    total: Optional[float] = None
    processed_at: Optional[datetime] = None
    product_name: Optional[str] = None
    source_uid: Optional[str] = None


class LedgerSummaryRead(BaseModel):
    pending_earnings: float
    paid_earnings: float
    total_earnings: float
    pending_count: int
    paid_count: int
    total_orders: int
    uid_count: int
    pending_display: str
    paid_display: str
    total_display: str


class RetailerLedgerEntryRead(BaseModel):
    retailer: RetailerRead
    uids: list[ClaimedUidRead]
    payouts: list[PayoutJobRead]
    orders: list[OrderRead]
    summary: LedgerSummaryRead


class LedgerTotalsRead(BaseModel):
    total_retailers: int
    total_pending: float
    total_paid: float
    total_payouts: int


class RetailerPayoutsResponse(BaseModel):
    success: bool = True
    status_filter: str
    retailers: list[RetailerLedgerEntryRead]
    totals: LedgerTotalsRead


class RetailerSummaryRead(BaseModel):
    id: int
    name: str
    email: Optional[str] = None


class EarningsRead(BaseModel):
    pending: float
    paid: float
    total: float
    pending_display: str
    paid_display: str
    total_display: str


class EarningsCountsRead(BaseModel):
    pending: int
    paid: int
    total: int


class RetailerEarningsResponse(BaseModel):
    success: bool = True
    retailer: RetailerSummaryRead
    earnings: EarningsRead
    payouts: list[PayoutJobRead]
    counts: EarningsCountsRead
