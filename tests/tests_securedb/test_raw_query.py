"""
=====================================================
Pytest suite for the SecureDB raw SQL pass-through
=====================================================

Sections:
---------
1. Unit tests - QueryResult and keyword mapping
2. Integration tests - query() / q() / select() result shapes
3. Smoke tests - connect(), context manager, connection helpers

Available markers:
------------------
unit, integration, smoke, edge_case

How to Execute:
---------------
All tests:          pytest tests/tests_securedb/test_raw_query.py -v
"""

import pytest
from sqlalchemy.engine import Connection

from core.config import DatabaseConfig
from core.exceptions import ConfigurationError, DriverError
from securedb.results import QueryResult, ResultKind, result_kind_for
from securedb.secure_db import SecureDB

# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
@pytest.mark.parametrize("keyword, kind", [
    ('SELECT', ResultKind.ROW_SET),
    ('INSERT', ResultKind.GENERATED_ID),
    ('UPDATE', ResultKind.AFFECTED_COUNT),
    ('DELETE', ResultKind.AFFECTED_COUNT),
    ('CREATE', ResultKind.ACK),
    ('WITH', ResultKind.ACK),
    ('', ResultKind.ACK),
])
def test_result_kind_for_keyword(keyword, kind):
    assert result_kind_for(keyword) is kind


@pytest.mark.unit
def test_query_result_rows_only_for_row_sets():
    assert QueryResult(ResultKind.ROW_SET, [{'n': 1}]).rows == [{'n': 1}]
    assert QueryResult(ResultKind.AFFECTED_COUNT, 3).rows == []


# ======================
# 2. INTEGRATION TESTS
# ======================

@pytest.mark.integration
def test_query_select_returns_row_set(seeded_db):
    result = seeded_db.query("SELECT id FROM users WHERE email = :email", {'email': 'user2@example.com'})

    assert result == QueryResult(ResultKind.ROW_SET, [{'id': 2}])


@pytest.mark.integration
def test_query_insert_returns_generated_id(seeded_db):
    result = seeded_db.query("INSERT INTO users (name) VALUES (:name)", {'name': 'new'})

    assert result.kind is ResultKind.GENERATED_ID
    assert result.value == 6


@pytest.mark.integration
def test_query_update_and_delete_return_counts(seeded_db):
    updated = seeded_db.query("UPDATE users SET status = 'gone' WHERE id > :id", {'id': 3})
    deleted = seeded_db.query("DELETE FROM users WHERE status = 'gone'")

    assert updated == QueryResult(ResultKind.AFFECTED_COUNT, 2)
    assert deleted == QueryResult(ResultKind.AFFECTED_COUNT, 2)


@pytest.mark.integration
def test_query_other_statements_acknowledge(db):
    result = db.query("CREATE TABLE audit (id INTEGER)")

    assert result == QueryResult(ResultKind.ACK, True)


@pytest.mark.integration
def test_query_skips_leading_comments(seeded_db):
    result = seeded_db.q("/* dashboard */\n-- count\nSELECT COUNT(*) AS n FROM users")

    assert result.kind is ResultKind.ROW_SET
    assert result.rows == [{'n': 5}]


@pytest.mark.integration
def test_select_returns_plain_rows(seeded_db):
    rows = seeded_db.select("SELECT id, name FROM users WHERE id <= :max ORDER BY id", {'max': 2})

    assert rows == [{'id': 1, 'name': 'user1'}, {'id': 2, 'name': 'user2'}]


@pytest.mark.edge_case
def test_query_without_params_keeps_colon_literals(seeded_db):
    """Colon-word text inside a literal is data, not a bind marker."""
    rows = seeded_db.query("SELECT id FROM users WHERE name <> 'a :b' ORDER BY id").rows
    new_id = seeded_db.query("INSERT INTO users (name) VALUES ('12:30 :standup')").value

    assert [row['id'] for row in rows] == [1, 2, 3, 4, 5]
    assert seeded_db.select(f"SELECT name FROM users WHERE id = {new_id}") == [{'name': '12:30 :standup'}]


@pytest.mark.edge_case
def test_query_with_params_honours_escaped_colons(seeded_db):
    result = seeded_db.query(
        r"UPDATE users SET status = 'due 10 \:id' WHERE id = :id", {'id': 1}
    )

    assert result == QueryResult(ResultKind.AFFECTED_COUNT, 1)
    assert seeded_db.select("SELECT status FROM users WHERE id = 1") == [{'status': 'due 10 :id'}]


@pytest.mark.edge_case
def test_query_failure_raises_driver_error(db):
    with pytest.raises(DriverError):
        db.query("SELECT * FROM does_not_exist")


# =================
# 3. SMOKE TESTS
# =================

@pytest.mark.smoke
def test_escape_and_get_connection(db):
    assert db.escape("it's") == "'it''s'"
    assert isinstance(db.get_connection(), Connection)


@pytest.mark.smoke
def test_connect_from_url_and_context_manager():
    """
    Test that connect() builds its own engine from a URL override and that
    leaving the with-block closes the connection.
    """
    with SecureDB.connect(DatabaseConfig(url='sqlite://')) as db:
        db.query("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
        assert db.insert('t', {'name': 'a'}) == 1
        connection = db.get_connection()

    assert connection.closed


@pytest.mark.smoke
def test_connect_without_database_name_fails():
    with pytest.raises(ConfigurationError):
        SecureDB.connect(DatabaseConfig(database=''))
