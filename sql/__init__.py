"""
=====================================
SQL compilation package for SecureDB.
=====================================

Pure functions that turn table names, column/value maps and condition maps
into parameterized SQL. Nothing in this package touches a connection.

The package is organized by statement kind:
    - identifiers.py: Table/column name validation and backtick quoting
    - conditions.py: Equality WHERE predicates with bind parameters
    - statement.py: CompiledStatement value object
    - dml.py: INSERT/UPDATE/DELETE builders (including multi-row INSERT)
    - query_builder.py: SELECT builder and raw-query keyword detection

Example:
    >>> from sql.dml import delete_builder
    >>> from sql.query_builder import select_builder
    >>>
    >>> stmt = select_builder('users', ['*'], order_by=('id', 'desc'), limit=2)
    >>> stmt.sql
    'SELECT * FROM `users` ORDER BY `id` DESC LIMIT 2'
"""

__version__ = "0.1.0"
__all__ = [
    # Identifiers
    'validate_table_name', 'validate_column_name', 'quote_identifier',
    # Conditions
    'condition_builder',
    # Statements
    'CompiledStatement',
    'insert_builder', 'multi_row_insert_builder', 'update_builder', 'delete_builder',
    'select_builder', 'detect_query_type',
]

from .conditions import condition_builder
from .dml import delete_builder, insert_builder, multi_row_insert_builder, update_builder
from .identifiers import quote_identifier, validate_column_name, validate_table_name
from .query_builder import detect_query_type, select_builder
from .statement import CompiledStatement
