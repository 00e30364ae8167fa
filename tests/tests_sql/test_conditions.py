"""
=====================================================
Pytest suite for sql/conditions.py
=====================================================

Test Coverage:
--------------
- condition_builder: predicate order, prefixes, parameter map, empty input

How to Execute:
---------------
All tests:          pytest tests/tests_sql/test_conditions.py -v
"""

from collections import OrderedDict

import pytest

from core.exceptions import EmptyConditions, InvalidIdentifier, MissingRequiredInput
from sql.conditions import condition_builder


@pytest.mark.unit
def test_single_condition_without_prefix():
    predicate, params = condition_builder({'id': 5})

    assert predicate == "`id` = :id"
    assert params == {'id': 5}


@pytest.mark.unit
def test_conditions_keep_input_order_and_prefix():
    """
    Test that every key yields one equality clause, AND-joined in input order,
    with each value stored under its prefixed parameter name.
    """
    conditions = OrderedDict([('status', 'active'), ('id', 3), ('role', None)])

    predicate, params = condition_builder(conditions, 'where_')

    assert predicate == "`status` = :where_status AND `id` = :where_id AND `role` = :where_role"
    assert params == {'where_status': 'active', 'where_id': 3, 'where_role': None}
    assert predicate.count(" AND ") == len(conditions) - 1


@pytest.mark.unit
def test_backticked_keys_are_stripped_in_parameter_names():
    predicate, params = condition_builder({'`id`': 1})

    assert predicate == "`id` = :id"
    assert params == {'id': 1}


@pytest.mark.edge_case
def test_empty_conditions_are_refused():
    """An empty mapping is an error, never an unconditioned predicate."""
    with pytest.raises(EmptyConditions):
        condition_builder({})


@pytest.mark.edge_case
def test_empty_conditions_is_a_missing_input_error():
    with pytest.raises(MissingRequiredInput):
        condition_builder({}, 'where_')


@pytest.mark.edge_case
def test_invalid_condition_column_is_rejected():
    with pytest.raises(InvalidIdentifier):
        condition_builder({'id = 1 OR 1': 1})
