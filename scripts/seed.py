"""
Deterministic seed script for dev/demo environments.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta
from decimal import Decimal

from tapify.core.commission import derive_split
from tapify.core.db import Base, SessionLocal, engine
from tapify.models.payout_jobs import PAYOUT_STATUS_PAID, PAYOUT_STATUS_PENDING, PAYOUT_STATUS_PRIORITY_DISPLAY
from tapify.seed.utils import (
    get_or_create_order,
    get_or_create_payout_job,
    get_or_create_retailer,
    get_or_create_sourcer,
    get_or_create_uid,
    get_or_create_vendor,
)

import tapify.models  # noqa: F401


def ensure_not_production():
    env = os.getenv("ENV", "").lower()
    allow_prod = os.getenv("ALLOW_SEED_PROD", "0").lower() in {"1", "true", "yes"}
    if env == "production" and not allow_prod:
        print("Refusing to seed in production. Set ALLOW_SEED_PROD=1 to override.", file=sys.stderr)
        sys.exit(1)


def seed():
    ensure_not_production()
    Base.metadata.create_all(bind=engine)
    base_time = datetime(2024, 1, 1, 12, 0, 0)

    with SessionLocal() as db:
        # Vendors: one configured, one left on the default split
        maple = get_or_create_vendor(db, "Maple Goods", split=derive_split(25, 10, 10))
        harbor = get_or_create_vendor(db, "Harbor Supply")

        scout = get_or_create_sourcer(db, "Scout Co", email="scout@example.com")

        # Retailers; Dormant Deli never finished onboarding
        corner = get_or_create_retailer(db, "Corner Cafe", email="owner@cornercafe.example", location="Austin, TX")
        bloom = get_or_create_retailer(db, "Bloom Florist", email="hello@bloom.example", location="Denver, CO")
        dormant = get_or_create_retailer(db, "Dormant Deli", onboarding_completed=False)

        get_or_create_uid(db, "UID-CORNER-1", corner, registered_at=base_time)
        get_or_create_uid(db, "UID-CORNER-2", corner, registered_at=base_time)
        get_or_create_uid(db, "UID-BLOOM-1", bloom, registered_at=base_time)
        get_or_create_uid(db, "UID-DORMANT-1", dormant, is_claimed=False)

        jobs = [
            ("SEED-1001", maple, corner, PAYOUT_STATUS_PENDING, "50.00", "12.50"),
            ("SEED-1002", maple, corner, PAYOUT_STATUS_PENDING, "100.00", "25.00"),
            ("SEED-1003", harbor, corner, PAYOUT_STATUS_PAID, "40.00", "8.00"),
            ("SEED-1004", harbor, bloom, PAYOUT_STATUS_PAID, "75.00", "15.00"),
            ("SEED-1005", maple, bloom, PAYOUT_STATUS_PRIORITY_DISPLAY, "20.00", "0.00"),
        ]
        for index, (order_id, vendor, retailer, status, total, cut) in enumerate(jobs):
            created_at = base_time + timedelta(hours=index)
            get_or_create_payout_job(
                db,
                order_id=order_id,
                vendor=vendor,
                retailer=retailer,
                sourcer_id=scout.id,
                status=status,
                total_amount=Decimal(total),
                retailer_cut=Decimal(cut),
                date_paid=created_at if status == PAYOUT_STATUS_PAID else None,
                created_at=created_at,
            )
            get_or_create_order(
                db,
                order_id,
                retailer,
                total=Decimal(total),
                processed_at=created_at,
                product_name=f"{vendor.name} sampler",
            )

    print("Seed complete.")


if __name__ == "__main__":
    seed()
