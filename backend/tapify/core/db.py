# Database wiring: one engine, one session factory, one declarative base.
# Request handlers get a session through the get_db dependency.

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from tapify.core.config import settings


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=not settings.DATABASE_URL.startswith("sqlite"),
    future=True,
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

Base = declarative_base()


def get_db():
    # Resolve the factory at call time so tests can swap SessionLocal.
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def supports_concurrent_sessions(bind) -> bool:
    """Whether sibling sessions on ``bind`` see the same data.

    Every connection to an in-memory SQLite database is its own empty
    database, so work there has to stay on the caller's session.
    """
    url = getattr(bind, "url", None)
    if url is None:
        return False
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return False
    return True
