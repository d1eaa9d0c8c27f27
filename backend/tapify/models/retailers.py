from sqlalchemy import Boolean, Column, Index, Integer, String, false

from tapify.core.db import Base
from tapify.models.mixins import TimestampMixin


class Retailer(TimestampMixin, Base):
    __tablename__ = "retailers"
    __table_args__ = (
        Index("ix_retailers_payout_eligible", "converted", "onboarding_completed"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True, index=True)
    location = Column(String, nullable=True)
    converted = Column(Boolean, nullable=False, default=False, server_default=false())
    onboarding_completed = Column(Boolean, nullable=False, default=False, server_default=false())
    created_by_user_id = Column(String, nullable=True, index=True)
