from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from tapify.models.orders import Order


def create_order(
    db: Session,
    *,
    retailer_id: int | None,
    total,
    processed_at: datetime | None = None,
    shopify_order_id: str | None = None,
    product_name: str | None = None,
    source_uid: str | None = None,
) -> Order:
    order = Order(
        retailer_id=retailer_id,
        total=total,
        shopify_order_id=shopify_order_id,
        product_name=product_name,
        source_uid=source_uid,
    )
    if processed_at is not None:
        order.processed_at = processed_at
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def list_recent_orders(db: Session, *, limit: int) -> list[Order]:
    return (
        db.query(Order)
        .order_by(Order.processed_at.desc(), Order.id.desc())
        .limit(limit)
        .all()
    )
