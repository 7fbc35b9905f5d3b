#!/usr/bin/env python3
"""
Initialize the task store schema directly using SQLModel.

This script creates the tasks, labels and task_labels tables in the database
configured through the environment (or ``.env``).
"""

import logging
import sys

from taskstore.core.config import Settings, get_settings
from taskstore.core.logging_config import setup_logging
from taskstore.domain.shared.exceptions import DatabaseConnectionError
from taskstore.infrastructure.database.connection_pool import DatabaseConnectionPool
from taskstore.infrastructure.database.schema import create_schema

logger = logging.getLogger(__name__)


def create_database_schema(settings: Settings) -> bool:
    """Create all task store tables."""
    try:
        pool = DatabaseConnectionPool(settings.SQLALCHEMY_DATABASE_URI, echo=True)
    except DatabaseConnectionError as e:
        logger.error(f"Failed to create database schema: {e}")
        return False

    logger.info(f"Initializing database schema on {pool.masked_url}")
    try:
        pool.probe()
        create_schema(pool.engine)
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}")
        return False
    finally:
        pool.dispose()

    logger.info("Database schema created successfully")
    return True


def main() -> int:
    settings = get_settings()
    setup_logging(settings)
    return 0 if create_database_schema(settings) else 1


if __name__ == "__main__":
    sys.exit(main())
