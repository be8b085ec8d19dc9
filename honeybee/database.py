# HONEYBEE/backend/honeybee/database.py

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from honeybee.config import DATABASE_URL, DEBUG
import logging

logger = logging.getLogger(__name__)


def build_engine(url: str):
    """Creates an engine; SQLite needs cross-thread access for FastAPI's threadpool"""
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=DEBUG
        )
    return create_engine(
        url,
        pool_size=5,  # Permanent connections
        max_overflow=10,  # Temporary extra connections
        pool_pre_ping=True,  # Checks the connection is alive before use
        echo=DEBUG
    )


try:
    engine = build_engine(DATABASE_URL)
    logger.info("✅ Database engine created")
except Exception as e:
    logger.error(f"❌ Could not create database engine: {e}")
    raise

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

Base = declarative_base()


def get_db():
    """
    FastAPI dependency yielding a database session.
    Use in routes with: db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    """Session factory for work that opens its own sessions (parallel dashboard fetches)"""
    return SessionLocal


def create_tables():
    """Creates every table declared in the models"""
    # Models must be imported so their tables are registered on Base.metadata
    from honeybee.models import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Tables created/verified")


def drop_tables():
    """Drops every table (USE WITH CARE)"""
    Base.metadata.drop_all(bind=engine)
    logger.warning("⚠️ All tables dropped")


def check_connection():
    """Checks that the database answers"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"❌ Database connection error: {e}")
        return False
