# products_api/db.py

"""
Database configuration, session management and startup lifecycle.
"""
import logging
import os
import time

from sqlalchemy import MetaData, create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import registry, sessionmaker

logger = logging.getLogger(__name__)

# Read DB settings from environment variables, with defaults for local/dev
POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_DB = os.getenv("POSTGRES_DB", "postgres")
POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")

# A full connection string wins over the individual Postgres settings
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "postgresql://"
    f"{POSTGRES_USER}:{POSTGRES_PASSWORD}@"
    f"{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

# Startup connection policy
DB_CONNECT_MAX_RETRIES = int(os.getenv("DB_CONNECT_MAX_RETRIES", "5"))
DB_CONNECT_RETRY_DELAY = float(os.getenv("DB_CONNECT_RETRY_DELAY", "2"))
DB_FAIL_FAST = os.getenv("DB_FAIL_FAST", "true").lower() in ("1", "true", "yes")

# SQLite connections are handed between the event loop and the threadpool
connect_args = (
    {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
)

# pool_pre_ping=True helps maintain healthy connections in a pool
engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)

# autocommit=False ensures transactions must be committed explicitly.
# autoflush=False means changes aren't flushed to DB until commit or explicit flush.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Table definitions live in this metadata; record classes are mapped onto them
metadata = MetaData()
mapper_registry = registry(metadata=metadata)


class DatabaseUnavailableError(RuntimeError):
    """Raised when the database stays unreachable after every startup attempt."""


def get_db():
    """
    Dependency to provide a new database session for FastAPI endpoints.
    A session is created for each request and automatically closed after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def connect_db(
    max_retries: int = DB_CONNECT_MAX_RETRIES,
    retry_delay: float = DB_CONNECT_RETRY_DELAY,
    fail_fast: bool = DB_FAIL_FAST,
) -> bool:
    """
    Verifies the database is reachable and creates missing tables.

    Failed attempts are retried with exponential backoff. When every attempt
    fails, raises `DatabaseUnavailableError` if `fail_fast` is set, otherwise
    logs the failure and returns False so the service keeps running.
    """
    delay = retry_delay
    for attempt in range(1, max_retries + 1):
        try:
            logger.info(
                f"Attempting to connect to the database and create tables (attempt {attempt}/{max_retries})..."
            )
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            metadata.create_all(bind=engine)
            logger.info("Successfully connected to the database and ensured tables exist.")
            return True
        except OperationalError as e:
            logger.warning(f"Failed to connect to the database: {e}")
            if attempt < max_retries:
                logger.info(f"Retrying in {delay} seconds...")
                time.sleep(delay)
                delay *= 2

    if fail_fast:
        logger.critical(
            f"Failed to connect to the database after {max_retries} attempts. Exiting application."
        )
        raise DatabaseUnavailableError(
            f"Database unreachable after {max_retries} attempts"
        )
    logger.error(
        f"Database connection error after {max_retries} attempts. "
        "Continuing without a database; requests touching persistence will fail."
    )
    return False
