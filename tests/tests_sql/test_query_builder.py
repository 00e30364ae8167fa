"""
=====================================================
Comprehensive pytest suite for sql/query_builder.py
=====================================================

Sections:
---------
1. Unit tests - select_builder clauses
2. Unit tests - detect_query_type heuristic
3. Edge case tests - directions, limits, identifiers

Available markers:
------------------
unit, edge_case

How to Execute:
---------------
All tests:          pytest tests/tests_sql/test_query_builder.py -v
"""

import pytest

from core.exceptions import InvalidArgument, InvalidDirection, InvalidIdentifier
from sql.query_builder import detect_query_type, normalize_direction, select_builder, validate_limit

# =============================
# 1. UNIT TESTS - select_builder
# =============================

@pytest.mark.unit
def test_select_defaults_to_star():
    stmt = select_builder('users')

    assert stmt.sql == "SELECT * FROM `users`"
    assert stmt.params == {}


@pytest.mark.unit
def test_select_with_all_clauses():
    """
    Test the full clause order: columns, FROM, WHERE, ORDER BY, LIMIT.
    """
    stmt = select_builder(
        'users',
        columns=['id', 'name'],
        where={'status': 'active'},
        order_by=('id', 'desc'),
        limit=10
    )

    assert stmt.sql == (
        "SELECT `id`, `name` FROM `users` WHERE `status` = :status "
        "ORDER BY `id` DESC LIMIT 10"
    )
    assert stmt.params == {'status': 'active'}


@pytest.mark.unit
def test_select_star_passes_through_column_list():
    stmt = select_builder('users', columns=['*'])

    assert stmt.sql == "SELECT * FROM `users`"


@pytest.mark.unit
@pytest.mark.parametrize("limit", [0, None])
def test_select_zero_or_missing_limit_omits_clause(limit):
    stmt = select_builder('users', limit=limit)

    assert "LIMIT" not in stmt.sql


# ================================
# 2. UNIT TESTS - detect_query_type
# ================================

@pytest.mark.unit
@pytest.mark.parametrize("sql, expected", [
    ("SELECT * FROM users", "SELECT"),
    ("  select id from users", "SELECT"),
    ("\n\tInsert into users (name) values (:n)", "INSERT"),
    ("/* report */ SELECT 1", "SELECT"),
    ("-- comment line\nUPDATE users SET a = 1", "UPDATE"),
    ("/* a */\n-- b\n/* c */ DELETE FROM users", "DELETE"),
    ("CREATE TABLE t (id INT)", "CREATE"),
    ("WITH x AS (SELECT 1) SELECT * FROM x", "WITH"),
    ("", ""),
    ("   ", ""),
])
def test_detect_query_type(sql, expected):
    assert detect_query_type(sql) == expected


# ===================
# 3. EDGE CASE TESTS
# ===================

@pytest.mark.edge_case
@pytest.mark.parametrize("direction", ["asc", "Desc", "DESC"])
def test_normalize_direction_accepts_any_case(direction):
    assert normalize_direction(direction) == direction.upper()


@pytest.mark.edge_case
@pytest.mark.parametrize("direction", ["", "UP", "DESC; DROP TABLE users", None])
def test_normalize_direction_rejects_other_values(direction):
    with pytest.raises(InvalidDirection):
        normalize_direction(direction)


@pytest.mark.edge_case
@pytest.mark.parametrize("limit", [-1, 1.5, "10", True])
def test_validate_limit_rejects_non_negative_integers_only(limit):
    with pytest.raises(InvalidArgument):
        validate_limit(limit)


@pytest.mark.edge_case
def test_select_rejects_bad_columns_and_order_column():
    with pytest.raises(InvalidIdentifier):
        select_builder('users', columns=['id, password'])
    with pytest.raises(InvalidIdentifier):
        select_builder('users', order_by=('id DESC, (SELECT 1)', 'ASC'))
