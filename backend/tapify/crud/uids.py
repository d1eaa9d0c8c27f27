from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from tapify.models.uids import ClaimedUid


def create_uid(
    db: Session,
    *,
    uid: str,
    retailer_id: int | None,
    is_claimed: bool = True,
    registered_at: datetime | None = None,
    affiliate_url: str | None = None,
) -> ClaimedUid:
    row = ClaimedUid(
        uid=uid,
        retailer_id=retailer_id,
        is_claimed=is_claimed,
        registered_at=registered_at,
        affiliate_url=affiliate_url,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def list_claimed_uids(db: Session) -> list[ClaimedUid]:
    return (
        db.query(ClaimedUid)
        .filter(ClaimedUid.is_claimed.is_(True))
        .order_by(ClaimedUid.registered_at.desc(), ClaimedUid.uid.asc())
        .all()
    )
