from __future__ import annotations

from sqlalchemy.orm import Session

from tapify.models.retailers import Retailer


def create_retailer(
    db: Session,
    *,
    name: str,
    email: str | None = None,
    location: str | None = None,
    converted: bool = True,
    onboarding_completed: bool = True,
    created_by_user_id: str | None = None,
) -> Retailer:
    retailer = Retailer(
        name=name,
        email=email,
        location=location,
        converted=converted,
        onboarding_completed=onboarding_completed,
        created_by_user_id=created_by_user_id,
    )
    db.add(retailer)
    db.commit()
    db.refresh(retailer)
    return retailer


def get_retailer(db: Session, *, retailer_id: int) -> Retailer | None:
    return db.query(Retailer).filter(Retailer.id == retailer_id).first()


def list_payout_eligible_retailers(db: Session) -> list[Retailer]:
    """Retailers that converted and finished onboarding, name ascending."""
    return (
        db.query(Retailer)
        .filter(Retailer.converted.is_(True), Retailer.onboarding_completed.is_(True))
        .order_by(Retailer.name.asc(), Retailer.id.asc())
        .all()
    )


def get_retailer_for_user(db: Session, *, user_id: str | None, email: str | None) -> Retailer | None:
    if user_id:
        retailer = (
            db.query(Retailer)
            .filter(Retailer.created_by_user_id == str(user_id))
            .order_by(Retailer.id.asc())
            .first()
        )
        if retailer:
            return retailer
    if email:
        return (
            db.query(Retailer)
            .filter(Retailer.email == email)
            .order_by(Retailer.id.asc())
            .first()
        )
    return None
