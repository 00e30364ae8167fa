"""
=====================================
Identifier validation and quoting.
=====================================

Table and column names cannot be passed as bind parameters, so every name
that ends up inside SQL text goes through this module first. It is the only
injection barrier for identifiers.

Functions:
- validate_table_name: Accept 'table' or 'schema.table'
- validate_column_name: Accept a single bare column name
- quote_identifier: Wrap each dot-separated part in backticks

Usage:
    from sql.identifiers import validate_table_name, quote_identifier

    table = validate_table_name('`users`')   # -> 'users'
    quote_identifier('shop.orders')          # -> '`shop`.`orders`'
"""

import re

from core.exceptions import InvalidIdentifier

TABLE_NAME_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$')
COLUMN_NAME_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

QUOTE_CHAR = '`'


def _strip_quotes(name: str) -> str:
    if len(name) >= 2 and name[0] == QUOTE_CHAR and name[-1] == QUOTE_CHAR:
        return name[1:-1]
    return name


def validate_table_name(table: str) -> str:
    """
    Validate a table name, optionally qualified as schema.table.

    Args:
        table: Table name, optionally wrapped in backticks

    Returns:
        The table name with surrounding backticks removed

    Raises:
        InvalidIdentifier: If the name does not match the allowed grammar
    """
    if not isinstance(table, str):
        raise InvalidIdentifier(f"Invalid table name: {table!r}. Table names must be strings.")

    name = _strip_quotes(table)
    # fullmatch so a trailing newline cannot slip past '$'
    if not TABLE_NAME_PATTERN.fullmatch(name):
        raise InvalidIdentifier(
            f"Invalid table name: '{name}'. Table names can only contain letters, "
            f"numbers, and underscores."
        )
    return name


def validate_column_name(column: str) -> str:
    """
    Validate a column name.

    Args:
        column: Column name, optionally wrapped in backticks

    Returns:
        The column name with surrounding backticks removed

    Raises:
        InvalidIdentifier: If the name does not match the allowed grammar
    """
    if not isinstance(column, str):
        raise InvalidIdentifier(f"Invalid column name: {column!r}. Column names must be strings.")

    name = _strip_quotes(column)
    if not COLUMN_NAME_PATTERN.fullmatch(name):
        raise InvalidIdentifier(
            f"Invalid column name: '{name}'. Column names can only contain letters, "
            f"numbers, and underscores."
        )
    return name


def quote_identifier(name: str) -> str:
    """
    Quote an already validated identifier with backticks.

    Each part of a dotted name is quoted on its own so 'shop.orders'
    becomes `shop`.`orders` rather than a single identifier.
    """
    return '.'.join(f"{QUOTE_CHAR}{part}{QUOTE_CHAR}" for part in name.split('.'))
