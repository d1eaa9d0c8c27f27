from sqlalchemy import Column, Integer, String

from tapify.core.db import Base
from tapify.models.mixins import TimestampMixin


class Vendor(TimestampMixin, Base):
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    # Written together by crud.vendors.save_vendor_commission only.
    retailer_commission_percent = Column(Integer, nullable=True)
    sourcer_commission_percent = Column(Integer, nullable=True)
    tapify_commission_percent = Column(Integer, nullable=True)
    vendor_commission_percent = Column(Integer, nullable=True)
