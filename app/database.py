from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session


def create_db_engine(database_url: str, pool_size: int = 10, max_overflow: int = 20, echo: bool = False) -> Engine:
    """
    Build the SQLAlchemy engine.

    Called once from the application lifespan; the engine is disposed on shutdown.
    """
    if database_url.startswith("sqlite"):
        # SQLite-specific settings (pool sizing does not apply)
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=pool_size,
        max_overflow=max_overflow,
        echo=echo,  # Log SQL queries in debug mode
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create session factory bound to an engine"""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Yields a session from the factory stored on app.state at startup and
    ensures it's closed after use. Closing rolls back anything uncommitted.

    Usage:
        @app.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
