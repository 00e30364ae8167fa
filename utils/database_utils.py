"""
==================================================
Database connectivity utilities for SecureDB.
==================================================

Engine construction and a health check, kept apart from the data-access
layer so the gateway only ever deals with an open Connection.

Example:
    >>> from core.config import DatabaseConfig
    >>> from utils.database_utils import create_sqlalchemy_engine, check_database_available
    >>>
    >>> engine = create_sqlalchemy_engine(DatabaseConfig(database='shop'))
    >>> if check_database_available(engine):
    ...     print("Database ready")
"""

import logging
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import DatabaseConfig, config

logger = logging.getLogger(__name__)


def create_sqlalchemy_engine(
    db_config: Optional[DatabaseConfig] = None,
    echo: bool = False
) -> Engine:
    """
    Create a SQLAlchemy engine for the given settings.

    Args:
        db_config: Connection settings (defaults to the environment config)
        echo: Enable SQLAlchemy statement logging

    Returns:
        SQLAlchemy Engine

    Raises:
        ConfigurationError: If no database name is configured

    Example:
        >>> engine = create_sqlalchemy_engine(DatabaseConfig(url='sqlite://'))
    """
    db_config = db_config or config.db
    url = db_config.get_connection_url()
    logger.debug(f"Creating engine for {url!r}")

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True  # Verify connections before using
    )


def check_database_available(engine: Engine) -> bool:
    """
    Check whether the database behind engine answers a trivial query.

    Args:
        engine: SQLAlchemy engine to probe

    Returns:
        True if 'SELECT 1' succeeds, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.debug(f"Database not available: {e}")
        return False
