"""
==========================
Utility Functions Package.
==========================

Engine construction and connectivity checks used by SecureDB.connect().

Modules:
    database_utils: SQLAlchemy engine creation and health checks
"""

__version__ = "0.1.0"
__all__ = [
    'create_sqlalchemy_engine',
    'check_database_available'
]

from .database_utils import check_database_available, create_sqlalchemy_engine
