from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import logging

logger = logging.getLogger(__name__)

# Records only live as long as the process
DATABASE_URL = "sqlite://"

Base = declarative_base()


# ------------------------------------------------------------------------------
# DATABASE ENGINE & SESSION
# ------------------------------------------------------------------------------
def create_session_factory(database_url: str = DATABASE_URL) -> sessionmaker:
    """
    Create a fresh engine with its tables and return a session factory bound to it.

    The in-memory SQLite database belongs to a single connection, so the pool
    hands that same connection to every session.
    """
    try:
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    except Exception as e:
        logger.error(f"❌ Failed to create SQLAlchemy engine: {e}")
        raise

    from app import models  # ensure models are registered on Base
    Base.metadata.create_all(bind=engine)
    logger.debug("Database tables created")

    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
