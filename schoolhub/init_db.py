#!/usr/bin/env python3
"""
Database initialization script.
Run this to create all database tables: ``python -m schoolhub.init_db``.
"""

import logging
import os
import sys

from sqlmodel import text

from schoolhub.configs import settings
from schoolhub.configs.database import engine, init_db

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    """Initialize the database schema."""
    logger.info("Initializing database schema")
    logger.info(f"Environment file: {os.getenv('ENV_FILE', 'Not set')}")
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.info("Database connection successful")

        init_db()
        logger.info("Database schema created successfully")
    except Exception as e:
        logger.exception(f"Error initializing database ({type(e).__name__}): {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
