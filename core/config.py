"""
=====================================
Configuration management for SecureDB.
=====================================

Loads database settings from environment variables (.env file) and exposes
them through a Config object. The data-access layer never reads this module
on its own: callers hand a DatabaseConfig to SecureDB.connect() explicitly,
so independent instances (and tests) can each use their own settings.

Environment variables:
    SECUREDB_URL: Full SQLAlchemy URL, overrides every other setting
    SECUREDB_DRIVER: SQLAlchemy driver name (default 'mysql+pymysql')
    SECUREDB_HOST: Server hostname (default 'localhost')
    SECUREDB_PORT: Server port (default 3306)
    SECUREDB_USER: Username (default 'root')
    SECUREDB_PASSWORD: Password (default empty)
    SECUREDB_DATABASE: Database name (required)
    SECUREDB_CHARSET: Connection charset (default 'utf8mb4')
    SECUREDB_LOG_LEVEL: Logging level for the demo entry point (default 'INFO')

Example:
    >>> from core.config import config
    >>>
    >>> url = config.get_connection_url()
    >>> print(f"Host: {config.db_host}, Port: {config.db_port}")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from sqlalchemy.engine import URL, make_url

from core.exceptions import ConfigurationError

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


@dataclass
class DatabaseConfig:
    """Database connection settings.

    Attributes:
        database: Database name (required unless url is set)
        host: Server hostname or IP address
        port: Server port number
        user: Database username
        password: Database password
        driver: SQLAlchemy drivername, e.g. 'mysql+pymysql'
        charset: Connection character set
        url: Optional full SQLAlchemy URL that overrides the fields above
    """

    database: str = ''
    host: str = 'localhost'
    port: int = 3306
    user: str = 'root'
    password: str = ''
    driver: str = 'mysql+pymysql'
    charset: Optional[str] = 'utf8mb4'
    url: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'DatabaseConfig':
        """Build settings from SECUREDB_* environment variables."""
        charset = os.getenv('SECUREDB_CHARSET', 'utf8mb4')
        return cls(
            database=os.getenv('SECUREDB_DATABASE', ''),
            host=os.getenv('SECUREDB_HOST', 'localhost'),
            port=int(os.getenv('SECUREDB_PORT', '3306')),
            user=os.getenv('SECUREDB_USER', 'root'),
            password=os.getenv('SECUREDB_PASSWORD', ''),
            driver=os.getenv('SECUREDB_DRIVER', 'mysql+pymysql'),
            charset=charset or None,
            url=os.getenv('SECUREDB_URL') or None
        )

    def get_connection_url(self) -> Union[URL, str]:
        """Get a SQLAlchemy URL for these settings.

        Returns:
            SQLAlchemy URL object (or the override URL as given)

        Raises:
            ConfigurationError: If no database name is configured
        """
        if self.url:
            return make_url(self.url)

        if not self.database:
            raise ConfigurationError("Database name not specified.")

        query = {'charset': self.charset} if self.charset else {}
        return URL.create(
            drivername=self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
            query=query
        )


class Config:
    """Centralized configuration manager.

    Attributes:
        db: DatabaseConfig loaded from the environment
        log_level: Logging level name used by the demo entry point

    Example:
        >>> config = Config()
        >>> url = config.get_connection_url()
    """

    def __init__(self):
        self.db = DatabaseConfig.from_env()
        self.log_level = os.getenv('SECUREDB_LOG_LEVEL', 'INFO')

    @property
    def db_host(self) -> str:
        """Get database server hostname."""
        return self.db.host

    @property
    def db_port(self) -> int:
        """Get database server port number."""
        return self.db.port

    @property
    def db_user(self) -> str:
        """Get database username."""
        return self.db.user

    @property
    def db_name(self) -> str:
        """Get database name."""
        return self.db.database

    def get_connection_url(self) -> Union[URL, str]:
        """Get the SQLAlchemy URL for the configured database."""
        return self.db.get_connection_url()


# Global configuration instance
config = Config()
