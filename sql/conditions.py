"""
=====================================
WHERE condition compilation.
=====================================

Turns an ordered mapping of column -> value into a parameterized equality
predicate and the matching bind parameters.

Only equality joined with AND is supported. There is no OR, range or IN.

Usage:
    from sql.conditions import condition_builder

    predicate, params = condition_builder({'id': 7, 'status': 'active'}, 'where_')
    # predicate: "`id` = :where_id AND `status` = :where_status"
    # params:    {'where_id': 7, 'where_status': 'active'}
"""

from typing import Any, Dict, Mapping, Tuple

from core.exceptions import EmptyConditions
from sql.identifiers import quote_identifier, validate_column_name


def condition_builder(
    conditions: Mapping[str, Any],
    param_prefix: str = ''
) -> Tuple[str, Dict[str, Any]]:
    """
    Build an AND-joined equality predicate from a condition mapping.

    Args:
        conditions: Ordered mapping of column name to value
        param_prefix: String prepended to every bind parameter name

    Returns:
        Tuple of (predicate text without the WHERE keyword, bind parameters)

    Raises:
        EmptyConditions: If conditions is empty
        InvalidIdentifier: If a column name is invalid
    """
    if not conditions:
        raise EmptyConditions(
            "No WHERE conditions specified. Use where({'column': 'value'}) first."
        )

    clauses = []
    params: Dict[str, Any] = {}

    for column, value in conditions.items():
        column = validate_column_name(column)
        param_name = f"{param_prefix}{column}"
        clauses.append(f"{quote_identifier(column)} = :{param_name}")
        params[param_name] = value

    return " AND ".join(clauses), params
