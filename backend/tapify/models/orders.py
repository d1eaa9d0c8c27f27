from sqlalchemy import Column, DateTime, Integer, Numeric, String

from tapify.core.db import Base
from tapify.core.time import utcnow


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    shopify_order_id = Column(String, nullable=True)
    retailer_id = Column(Integer, nullable=True, index=True)
    total = Column(Numeric(10, 2), nullable=False, default=0)
    processed_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    product_name = Column(String, nullable=True)
    source_uid = Column(String, nullable=True)
