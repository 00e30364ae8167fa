"""
============================
SQL Query Builder Utilities.
============================

SELECT construction and the raw-query keyword heuristic.

Query Builders:
- select_builder: Build SELECT statements with columns, conditions, ORDER BY and LIMIT
- normalize_direction: Validate and upper-case an ORDER BY direction
- validate_limit: Validate a LIMIT value

Raw Query Helpers:
- detect_query_type: Leading SQL keyword of a caller-supplied statement

Usage:
    from sql.query_builder import select_builder

    stmt = select_builder(
        table='users',
        columns=['id', 'name'],
        where={'status': 'active'},
        order_by=('id', 'DESC'),
        limit=10
    )
    # SELECT `id`, `name` FROM `users` WHERE `status` = :status
    #   ORDER BY `id` DESC LIMIT 10
"""

import re
from typing import Any, Mapping, Optional, Sequence, Tuple

from core.exceptions import InvalidArgument, InvalidDirection
from sql.conditions import condition_builder
from sql.identifiers import quote_identifier, validate_column_name, validate_table_name
from sql.statement import CompiledStatement

ORDER_DIRECTIONS = ('ASC', 'DESC')

_LEADING_BLOCK_COMMENT = re.compile(r'^/\*.*?\*/', re.DOTALL)
_LEADING_LINE_COMMENT = re.compile(r'^--[^\n]*')


def normalize_direction(direction: str) -> str:
    """
    Validate an ORDER BY direction.

    Args:
        direction: 'ASC' or 'DESC' in any letter case

    Returns:
        Upper-cased direction

    Raises:
        InvalidDirection: For anything other than ASC or DESC
    """
    normalized = direction.upper() if isinstance(direction, str) else direction
    if normalized not in ORDER_DIRECTIONS:
        raise InvalidDirection(f"Invalid order direction: {direction!r}. Use ASC or DESC.")
    return normalized


def validate_limit(limit: Any) -> int:
    """Return limit if it is a non-negative int, else raise InvalidArgument."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise InvalidArgument(f"Invalid limit: {limit!r}. LIMIT must be a non-negative integer.")
    return limit


def select_builder(
    table: str,
    columns: Optional[Sequence[str]] = None,
    where: Optional[Mapping[str, Any]] = None,
    order_by: Optional[Tuple[str, str]] = None,
    limit: Optional[int] = None
) -> CompiledStatement:
    """
    Build a SELECT statement.

    Args:
        table: Table name (optionally schema.table)
        columns: Columns to select; empty or None selects '*'. A literal '*'
            entry is passed through, every other entry is validated.
        where: Optional equality conditions, bound without a prefix
        order_by: Optional (column, direction) pair
        limit: Optional row limit; 0 or None omits the clause

    Returns:
        CompiledStatement with named parameters

    Raises:
        InvalidIdentifier: If the table or a column name is invalid
        InvalidDirection: If the ORDER BY direction is not ASC/DESC
        InvalidArgument: If limit is negative or not an integer
    """
    table = validate_table_name(table)

    if columns:
        column_clause = ", ".join(
            '*' if col == '*' else quote_identifier(validate_column_name(col))
            for col in columns
        )
    else:
        column_clause = '*'

    sql = f"SELECT {column_clause} FROM {quote_identifier(table)}"
    params = {}

    if where:
        predicate, params = condition_builder(where)
        sql += f" WHERE {predicate}"

    if order_by:
        order_column, direction = order_by
        order_column = validate_column_name(order_column)
        sql += f" ORDER BY {quote_identifier(order_column)} {normalize_direction(direction)}"

    if limit is not None and validate_limit(limit) > 0:
        sql += f" LIMIT {limit}"

    return CompiledStatement(sql, params)


def detect_query_type(sql: str) -> str:
    """
    Get the leading keyword of a SQL statement.

    Leading whitespace and any run of leading /* */ or -- comments are
    skipped; the first whitespace-delimited token is returned upper-cased.
    This is a heuristic, not a parser: 'WITH ... SELECT' reports 'WITH'.

    Args:
        sql: Caller-supplied SQL text

    Returns:
        Upper-cased first token, or '' for an empty statement
    """
    text = sql.lstrip()
    while True:
        stripped = _LEADING_BLOCK_COMMENT.sub('', text, count=1)
        stripped = _LEADING_LINE_COMMENT.sub('', stripped, count=1).lstrip()
        if stripped == text:
            break
        text = stripped

    tokens = text.split(None, 1)
    return tokens[0].upper() if tokens else ''
