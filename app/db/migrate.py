"""
Alembic migration runner used at startup when RUN_MIGRATIONS is set.
"""
import logging
import os

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text

logger = logging.getLogger(__name__)

ADVISORY_LOCK_ID = 48151623
ALEMBIC_INI_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "alembic.ini")


def build_alembic_config(database_url: str) -> Config:
    alembic_cfg = Config(ALEMBIC_INI_PATH)
    alembic_cfg.attributes["database_url"] = database_url
    # Keep the app's logging handlers in place
    alembic_cfg.attributes["configure_logger"] = False
    return alembic_cfg


def run_migrations(database_url: str = None):
    """
    Upgrade the schema to the head revision.

    On PostgreSQL an advisory lock keeps concurrent instances from migrating
    at the same time.
    """
    from app.core import config as app_config

    database_url = database_url or app_config.DATABASE_URL
    if not database_url:
        raise ValueError("DATABASE_URL is not set")

    logger.info("RUN_MIGRATIONS=1 -> running alembic upgrade head")
    alembic_cfg = build_alembic_config(database_url)

    engine = create_engine(database_url, pool_pre_ping=True)
    lock_conn = None
    is_postgres = database_url.startswith("postgresql")

    try:
        if is_postgres:
            lock_conn = engine.connect()
            lock_conn.execute(text(f"SELECT pg_advisory_lock({ADVISORY_LOCK_ID})"))
            lock_conn.commit()
            logger.info("Migration lock acquired")

        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations complete")
    except Exception:
        logger.exception("Migration failed")
        raise
    finally:
        if lock_conn is not None:
            lock_conn.execute(text(f"SELECT pg_advisory_unlock({ADVISORY_LOCK_ID})"))
            lock_conn.commit()
            lock_conn.close()
        engine.dispose()
