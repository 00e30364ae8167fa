"""
=====================================
SecureDB data-access package.
=====================================

Parameterized, identifier-validated SQL over a single SQLAlchemy connection.

Modules:
    secure_db: SecureDB fluent facade (entry points, modifiers, terminals)
    batch_insert: Transactional chunked multi-row INSERT
    gateway: ConnectionGateway over a SQLAlchemy Connection
    state: BuilderState and the Operation tag
    results: QueryResult and ResultKind for raw queries

Example:
    >>> from core.config import DatabaseConfig
    >>> from securedb import SecureDB
    >>>
    >>> db = SecureDB.connect(DatabaseConfig(database='shop'))
    >>> new_id = db.insert('users', {'name': 'Ada', 'email': 'ada@example.com'})
    >>> db.from_('users').where({'id': new_id}).get()
"""

__version__ = "0.1.0"
__all__ = [
    'SecureDB', 'BatchInserter', 'ConnectionGateway', 'StatementHandle',
    'BuilderState', 'Operation', 'QueryResult', 'ResultKind'
]

from securedb.batch_insert import BatchInserter
from securedb.gateway import ConnectionGateway, StatementHandle
from securedb.results import QueryResult, ResultKind
from securedb.secure_db import SecureDB
from securedb.state import BuilderState, Operation
