from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import logging

from replydesk.core.settings import settings

logger = logging.getLogger("replydesk.database")

Base = declarative_base()


def build_engine(database_url: str | None = None, echo: bool | None = None) -> Engine:
    """Create an engine for ``database_url`` (defaults to settings.database_url).

    In-memory SQLite gets a StaticPool so every session shares one database;
    otherwise each connection would see its own empty store.
    """
    url = database_url or settings.database_url
    echo = settings.sql_debug if echo is None else echo
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:", "sqlite+pysqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)
    else:
        engine = create_engine(url, echo=echo, pool_pre_ping=True)
    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def check_database_health(engine: Engine) -> dict:
    """Check if database is accessible."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.error(f"Database health check: FAILED - {str(e)}")
        return {"status": "unhealthy", "database": f"error: {str(e)}"}
