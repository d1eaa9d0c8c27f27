from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)

from tapify.core.db import Base
from tapify.models.mixins import TimestampMixin


PAYOUT_STATUS_PENDING = "pending"
PAYOUT_STATUS_PAID = "paid"
PAYOUT_STATUS_FAILED = "failed"
PAYOUT_STATUS_PRIORITY_DISPLAY = "priority_display"

PAYOUT_STATUSES = {
    PAYOUT_STATUS_PENDING,
    PAYOUT_STATUS_PAID,
    PAYOUT_STATUS_FAILED,
    PAYOUT_STATUS_PRIORITY_DISPLAY,
}


class PayoutJob(TimestampMixin, Base):
    __tablename__ = "payout_jobs"
    __table_args__ = (
        Index("ix_payout_jobs_status", "status"),
        Index("ix_payout_jobs_retailer_status", "retailer_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id", ondelete="RESTRICT"), nullable=False)
    # No FK: stray jobs may reference retailers that never finished onboarding.
    retailer_id = Column(Integer, nullable=False)
    sourcer_id = Column(Integer, ForeignKey("sourcer_accounts.id", ondelete="SET NULL"), nullable=True)
    status = Column(String, nullable=False, default=PAYOUT_STATUS_PENDING)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    retailer_cut = Column(Numeric(10, 2), nullable=False, default=0)
    sourcer_cut = Column(Numeric(10, 2), nullable=True)
    vendor_cut = Column(Numeric(10, 2), nullable=True)
    source_uid = Column(String, nullable=True)
    order_id = Column(String, nullable=True)
    date_paid = Column(DateTime, nullable=True)
    transfer_ids = Column(JSON, nullable=True)
