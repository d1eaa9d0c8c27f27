from __future__ import annotations

from sqlalchemy.orm import Session

from tapify.models.sourcers import SourcerAccount


def create_sourcer(db: Session, *, name: str, email: str | None = None) -> SourcerAccount:
    sourcer = SourcerAccount(name=name, email=email)
    db.add(sourcer)
    db.commit()
    db.refresh(sourcer)
    return sourcer
