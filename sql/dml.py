"""
===========================================
Data Manipulation Language (DML) builders.
===========================================

Builders for the INSERT, UPDATE and DELETE statements issued by SecureDB.
Every builder validates the identifiers it interpolates and returns a
CompiledStatement; values are always bound, never inlined.

Functions:
- insert_builder: Single-row INSERT with named parameters
- multi_row_insert_builder: Multi-row INSERT with positional parameters
- update_builder: UPDATE ... SET ... WHERE with 'where_' prefixed conditions
- delete_builder: DELETE ... WHERE, refusing an empty condition set

Usage:
    from sql.dml import insert_builder, update_builder

    stmt = insert_builder('users', {'name': 'Ada', 'email': 'ada@example.com'})
    # stmt.sql: INSERT INTO `users` (`name`, `email`) VALUES (:name, :email)

    stmt = update_builder('users', {'name': 'Grace'}, {'id': 1})
    # stmt.sql: UPDATE `users` SET `name` = :name WHERE `id` = :where_id
"""

from typing import Any, Dict, List, Mapping, Sequence

from core.exceptions import InvalidArgument, MissingRequiredInput
from sql.conditions import condition_builder
from sql.identifiers import quote_identifier, validate_column_name, validate_table_name
from sql.statement import CompiledStatement

WHERE_PARAM_PREFIX = 'where_'


def _validated_columns(columns: Sequence[str]) -> List[str]:
    return [validate_column_name(column) for column in columns]


def insert_builder(table: str, data: Mapping[str, Any]) -> CompiledStatement:
    """
    Build a single-row INSERT statement.

    Args:
        table: Target table name
        data: Ordered mapping of column name to value

    Returns:
        CompiledStatement with one named parameter per column

    Raises:
        InvalidIdentifier: If the table or a column name is invalid
        MissingRequiredInput: If data is empty
    """
    table = validate_table_name(table)
    if not data:
        raise MissingRequiredInput("No data provided for insert.")

    columns = _validated_columns(list(data.keys()))
    column_list = ", ".join(quote_identifier(col) for col in columns)
    placeholder_list = ", ".join(f":{col}" for col in columns)

    sql = f"INSERT INTO {quote_identifier(table)} ({column_list}) VALUES ({placeholder_list})"
    params = dict(zip(columns, data.values()))
    return CompiledStatement(sql, params)


def multi_row_insert_builder(
    table: str,
    columns: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
    marker: str = '?'
) -> CompiledStatement:
    """
    Build one INSERT statement covering several rows.

    Rows are expected to have been shape-checked against columns already;
    values are taken in column order and flattened row-major.

    Args:
        table: Target table name
        columns: Canonical column order
        rows: Rows to insert
        marker: Positional parameter marker of the driver ('?' or '%s')

    Returns:
        CompiledStatement with a flat tuple of positional parameters
    """
    table = validate_table_name(table)
    names = _validated_columns(columns)
    if not names or not rows:
        raise MissingRequiredInput("Multi-row insert needs at least one column and one row.")

    column_list = ", ".join(quote_identifier(col) for col in names)
    row_placeholders = "(" + ", ".join([marker] * len(names)) + ")"
    all_placeholders = ", ".join([row_placeholders] * len(rows))

    sql = f"INSERT INTO {quote_identifier(table)} ({column_list}) VALUES {all_placeholders}"

    # Look values up by the keys as given, which may still carry backticks
    values: List[Any] = []
    for row in rows:
        values.extend(row[col] for col in columns)

    return CompiledStatement(sql, tuple(values))


def update_builder(
    table: str,
    data: Mapping[str, Any],
    where: Mapping[str, Any]
) -> CompiledStatement:
    """
    Build an UPDATE statement scoped by equality conditions.

    SET values bind under the column name; condition values bind under
    'where_<column>' so a column may appear on both sides.

    Args:
        table: Target table name
        data: Ordered mapping of column name to new value
        where: Ordered mapping of column name to required value

    Returns:
        CompiledStatement with named parameters

    Raises:
        InvalidIdentifier: If the table or a column name is invalid
        MissingRequiredInput: If data is empty
        EmptyConditions: If where is empty
        InvalidArgument: If a SET column collides with a prefixed condition name
    """
    table = validate_table_name(table)
    if not data:
        raise MissingRequiredInput("No data provided for update.")

    predicate, where_params = condition_builder(where, WHERE_PARAM_PREFIX)

    columns = _validated_columns(list(data.keys()))
    set_clause = ", ".join(f"{quote_identifier(col)} = :{col}" for col in columns)
    params: Dict[str, Any] = dict(zip(columns, data.values()))

    collisions = sorted(set(params) & set(where_params))
    if collisions:
        raise InvalidArgument(
            f"Update column(s) {', '.join(collisions)} collide with condition parameter names."
        )
    params.update(where_params)

    sql = f"UPDATE {quote_identifier(table)} SET {set_clause} WHERE {predicate}"
    return CompiledStatement(sql, params)


def delete_builder(table: str, where: Mapping[str, Any]) -> CompiledStatement:
    """
    Build a DELETE statement scoped by equality conditions.

    Args:
        table: Target table name
        where: Ordered mapping of column name to required value

    Returns:
        CompiledStatement with named parameters

    Raises:
        InvalidIdentifier: If the table or a column name is invalid
        EmptyConditions: If where is empty (unscoped deletes are refused)
    """
    table = validate_table_name(table)
    predicate, params = condition_builder(where)
    sql = f"DELETE FROM {quote_identifier(table)} WHERE {predicate}"
    return CompiledStatement(sql, params)
