from sqlalchemy import Boolean, Column, DateTime, Integer, String, false

from tapify.core.db import Base


class ClaimedUid(Base):
    """One physical display unit. Claimed units are bound to a retailer."""

    __tablename__ = "uids"

    uid = Column(String, primary_key=True)
    retailer_id = Column(Integer, nullable=True, index=True)
    is_claimed = Column(Boolean, nullable=False, default=False, server_default=false())
    registered_at = Column(DateTime, nullable=True)
    affiliate_url = Column(String, nullable=True)
