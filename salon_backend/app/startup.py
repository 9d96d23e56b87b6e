# salon_backend/app/startup.py

"""
Application startup checks and initialization.
"""

import logging
import sys

import sqlalchemy as sa
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from salon_backend.core.config import get_settings
from salon_backend.core.database import Base, engine

logger = logging.getLogger(__name__)

REQUIRED_TABLES = [
    "staff_members",
    "appointments",
    "performance_tiers",
    "staff_bonuses",
    "payroll_settings",
    "payroll_records",
]


def configure_logging():
    """Configure application logging"""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_tables():
    """Create any missing tables for the registered models"""
    # Model modules register themselves on Base.metadata when imported
    from salon_backend.modules.appointments import models as appointment_models  # noqa: F401
    from salon_backend.modules.payroll import models as payroll_models  # noqa: F401
    from salon_backend.modules.staff import models as staff_models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def check_database_connection() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        logger.info("Database connection successful")
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}")
        return False


def missing_tables():
    existing = set(sa.inspect(engine).get_table_names())
    return [table for table in REQUIRED_TABLES if table not in existing]


def run_startup_checks() -> bool:
    """Run startup checks, exiting in production when the database is unusable"""
    settings = get_settings()
    logger.info(f"Starting salon payroll engine ({settings.environment})")

    if not check_database_connection():
        if settings.is_production:
            logger.error("Cannot start in production without a database")
            sys.exit(1)
        logger.warning("Starting in development mode despite database errors")
        return False

    if settings.create_tables_on_startup:
        create_tables()

    missing = missing_tables()
    if missing:
        logger.warning(f"Missing database tables: {', '.join(missing)}")
        return False

    logger.info("All startup checks passed")
    return True
