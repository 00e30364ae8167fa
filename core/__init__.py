"""
=====================================
Core infrastructure package for SecureDB.
=====================================

Configuration, logging and the exception hierarchy shared by the SQL
compilers and the data-access layer.

Modules:
    config: Configuration management from environment variables
    logger: Logging setup and helpers
    exceptions: SecureDBError and its subclasses

Example:
    >>> from core.config import DatabaseConfig
    >>> from core.logger import setup_logging
    >>>
    >>> setup_logging(log_level='DEBUG')
    >>> db_config = DatabaseConfig(database='shop')
"""

__version__ = "0.1.0"
__all__ = ['get_logger', 'setup_logging', 'config', 'Config', 'DatabaseConfig']

from core.config import Config, DatabaseConfig, config
from core.logger import get_logger, setup_logging
