"""
Shared fixtures for securedb/ tests.

Key fixtures:
- engine: in-memory SQLite engine (SQLite accepts backtick identifiers and '?' markers)
- gateway: RecordingGateway on that engine with an empty 'users' table
- db: SecureDB wired to the recording gateway
- count_users: helper returning the current row count of 'users'
"""

import pytest
from sqlalchemy import create_engine

from securedb.gateway import ConnectionGateway
from securedb.secure_db import SecureDB

USERS_DDL = (
    "CREATE TABLE users ("
    " id INTEGER PRIMARY KEY AUTOINCREMENT,"
    " name TEXT NOT NULL,"
    " email TEXT UNIQUE,"
    " status TEXT DEFAULT 'active'"
    ")"
)


class RecordingGateway(ConnectionGateway):
    """ConnectionGateway that remembers every statement it was asked to run.

    Each entry is (sql, params, in_transaction) captured before execution.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.executed = []

    def prepare_and_execute(self, sql, params=None):
        self.executed.append((sql, params, self.in_transaction))
        return super().prepare_and_execute(sql, params)

    def statements_starting_with(self, keyword):
        return [entry for entry in self.executed if entry[0].lstrip().upper().startswith(keyword)]

    def clear(self):
        self.executed.clear()


@pytest.fixture
def engine():
    engine = create_engine('sqlite://')
    yield engine
    engine.dispose()


@pytest.fixture
def gateway(engine):
    gateway = RecordingGateway(engine.connect())
    gateway.prepare_and_execute(USERS_DDL)
    gateway.clear()
    yield gateway
    gateway.close()


@pytest.fixture
def db(gateway):
    return SecureDB(gateway)


@pytest.fixture
def count_users(gateway):
    def count():
        handle = gateway.prepare_and_execute("SELECT COUNT(*) AS n FROM users")
        return handle.fetch_all()[0]['n']
    return count


@pytest.fixture
def seeded_db(db, gateway):
    """SecureDB with users id=1..5 already inserted."""
    for i in range(1, 6):
        db.insert('users', {'name': f'user{i}', 'email': f'user{i}@example.com'})
    gateway.clear()
    return db
