"""Database session factory and configuration.

Provides database connectivity and session management. The default target is
a local SQLite file (one embedded store per installation); any SQLAlchemy URL
works through ``DATABASE_URL``.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import get_settings
from .models import Base, User
from .auth.password import hash_password
from .domain.users.roles import UserRole

logger = logging.getLogger(__name__)

DATABASE_URL = get_settings().DATABASE_URL


def build_engine(database_url: str) -> Engine:
    """Create an engine with settings appropriate for the backend."""
    engine_kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": False,
    }

    if database_url.startswith("sqlite"):
        # Sessions are handed across FastAPI's threadpool
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10

    return create_engine(database_url, **engine_kwargs)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


@contextmanager
def get_db_session(bind: Optional[Engine] = None) -> Generator[Session, None, None]:
    """Context manager for database sessions.

    Usage:
        with get_db_session() as session:
            session.query(User).all()

    Automatically commits on success, rolls back on exception.
    """
    session = Session(bind=bind) if bind is not None else SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI endpoints.

    Usage:
        @app.get("/files")
        def list_files(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def seed_bootstrap_admin(session: Session) -> Optional[User]:
    """Create the bootstrap administrator if the email is not taken yet.

    Returns:
        The created user, or None when the account already existed
    """
    settings = get_settings()
    email = settings.BOOTSTRAP_ADMIN_EMAIL.lower()

    existing = session.query(User).filter(User.email == email).first()
    if existing:
        return None

    admin = User(
        name=settings.BOOTSTRAP_ADMIN_NAME,
        phone=settings.BOOTSTRAP_ADMIN_PHONE,
        email=email,
        role=UserRole.ADMIN.value,
        password_hash=hash_password(settings.BOOTSTRAP_ADMIN_PASSWORD),
        must_change_password=False,
        active=True,
    )
    session.add(admin)
    session.flush()
    logger.info(f"Bootstrap admin created: {email}", extra={"user_id": admin.id})
    return admin


def init_db(bind: Optional[Engine] = None) -> None:
    """Create tables and seed the bootstrap admin. Safe to call repeatedly."""
    target = bind or engine
    Base.metadata.create_all(bind=target)

    with get_db_session(bind=target) as session:
        seed_bootstrap_admin(session)
