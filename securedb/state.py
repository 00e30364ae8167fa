"""
=====================================
Fluent builder state.
=====================================

BuilderState is the accumulated intent of one fluent chain. The Operation
tag says which chain is pending; Operation.NONE means the builder is idle.

Invariant: operation is Operation.NONE exactly when table is empty.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from securedb.batch_insert import DEFAULT_BATCH_SIZE


class Operation(Enum):
    """Pending fluent operation kinds."""

    NONE = 'none'
    SELECT = 'select'
    INSERT = 'insert'
    INSERT_MULTIPLE = 'insert_multiple'
    UPDATE = 'update'
    DELETE = 'delete'

    @property
    def entry_call(self) -> str:
        """Name of the SecureDB method that starts this operation."""
        return _ENTRY_CALLS[self]

    @property
    def terminal_call(self) -> str:
        """Name of the SecureDB method that finishes this operation."""
        return _TERMINAL_CALLS[self]


_ENTRY_CALLS = {
    Operation.NONE: 'from_',
    Operation.SELECT: 'from_',
    Operation.INSERT: 'insert',
    Operation.INSERT_MULTIPLE: 'insert_multiple',
    Operation.UPDATE: 'update',
    Operation.DELETE: 'delete',
}

_TERMINAL_CALLS = {
    Operation.NONE: 'get',
    Operation.SELECT: 'get',
    Operation.INSERT: 'row',
    Operation.INSERT_MULTIPLE: 'rows',
    Operation.UPDATE: 'change',
    Operation.DELETE: 'execute_delete',
}


@dataclass
class BuilderState:
    """Accumulated intent of a fluent chain.

    Attributes:
        table: Validated table name, '' when idle
        operation: Pending operation kind
        where: Equality conditions in call order
        columns: SELECT column list ('*' when empty)
        order_by: Optional (column, direction) for SELECT
        limit: Optional row limit for SELECT
        batch_size: Chunk size for INSERT_MULTIPLE
    """

    table: str = ''
    operation: Operation = Operation.NONE
    where: Dict[str, Any] = field(default_factory=OrderedDict)
    columns: List[str] = field(default_factory=list)
    order_by: Optional[Tuple[str, str]] = None
    limit: Optional[int] = None
    batch_size: int = DEFAULT_BATCH_SIZE

    @classmethod
    def pending(cls, operation: Operation, table: str, **kwargs) -> 'BuilderState':
        return cls(table=table, operation=operation, **kwargs)

    @property
    def is_idle(self) -> bool:
        return self.operation is Operation.NONE
