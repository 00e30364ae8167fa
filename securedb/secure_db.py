"""
=====================================
SecureDB fluent data-access facade.
=====================================

SecureDB turns table names and column/value maps into parameterized SQL and
returns plain Python results. Every entry point works in two modes:

One-shot mode (data supplied, runs immediately, builder state untouched):
    >>> user_id = db.insert('users', {'name': 'Ada'})
    >>> db.update('users', {'name': 'Grace'}, {'id': user_id})
    1
    >>> db.delete('users', {'id': user_id})
    1

Fluent mode (data omitted, returns the builder):
    >>> db.from_('users', ['id', 'name']).where({'status': 'active'}) \\
    ...     .order_by('id', 'DESC').limit(2).get()
    >>> db.insert('users').row({'name': 'Ada'})
    >>> db.insert_multiple('users').batch(500).rows(list_of_dicts)
    >>> db.update('users').where({'id': 1}).change({'name': 'Grace'})
    >>> db.delete('users').where({'id': 1})          # where() runs the DELETE

Fluent chains are a small state machine:

    idle --entry call--> pending(op) --modifiers--> pending(op) --terminal--> idle

Entry calls: from_, insert, insert_multiple, update, delete
Modifiers:   where, order_by, limit, batch
Terminals:   get, row, rows, change, execute_delete, execute

Terminal calls always leave the builder idle, including when they fail.
Calling delete(...).where(...) runs the DELETE straight away, while UPDATE
needs an explicit change() after where(). The asymmetry is kept on purpose
because callers depend on it, but it is a wart.

A raw pass-through is available for anything the builders do not cover:
    >>> result = db.query("SELECT COUNT(*) AS n FROM users")
    >>> result.kind, result.value
    (<ResultKind.ROW_SET: 'row_set'>, [{'n': 3}])
"""

import logging
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from sqlalchemy.engine import Connection

from core.config import DatabaseConfig
from core.exceptions import (
    EmptyConditions,
    InvalidArgument,
    InvalidOperationState,
    MissingRequiredInput,
    NoOperationPending,
    NoTableSpecified,
)
from securedb.batch_insert import DEFAULT_BATCH_SIZE, BatchInserter
from securedb.gateway import ConnectionGateway, StatementHandle
from securedb.results import QueryResult, ResultKind, result_kind_for
from securedb.state import BuilderState, Operation
from sql.dml import delete_builder, insert_builder, update_builder
from sql.identifiers import validate_column_name, validate_table_name
from sql.query_builder import detect_query_type, normalize_direction, select_builder, validate_limit
from sql.statement import CompiledStatement
from utils.database_utils import create_sqlalchemy_engine

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _validate_batch_size(size: Any) -> int:
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise InvalidArgument(f"Invalid batch size: {size!r}. Use a positive integer.")
    return size


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise InvalidArgument(f"{what} must be a mapping of column name to value.")
    return value


class SecureDB:
    """Fluent, injection-safe access to one database connection.

    One instance holds one fluent chain at a time. Interleaving chains on the
    same instance (for example from several threads) is not supported; use
    one instance per logical operation or request.

    Attributes:
        gateway: ConnectionGateway all statements go through
        state: Current BuilderState (idle between chains)

    Example:
        >>> from core.config import DatabaseConfig
        >>> with SecureDB.connect(DatabaseConfig(database='shop')) as db:
        ...     rows = db.from_('users').order_by('id', 'desc').limit(2).get()
    """

    def __init__(self, gateway: ConnectionGateway):
        self.gateway = gateway
        self._batch_inserter = BatchInserter(gateway)
        self._state = BuilderState()

    @classmethod
    def connect(cls, db_config: Optional[DatabaseConfig] = None, echo: bool = False) -> 'SecureDB':
        """Create an engine for db_config and open a dedicated connection.

        Args:
            db_config: Connection settings (defaults to the environment config)
            echo: Enable SQLAlchemy statement logging

        Raises:
            ConfigurationError: If no database name is configured
            DriverError: If the connection cannot be opened
        """
        engine = create_sqlalchemy_engine(db_config, echo=echo)
        return cls(ConnectionGateway.from_engine(engine, dispose_engine=True))

    @property
    def state(self) -> BuilderState:
        return self._state

    def __enter__(self) -> 'SecureDB':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        self._reset()
        self.gateway.close()

    def get_connection(self) -> Connection:
        return self.gateway.connection

    def escape(self, value: str) -> str:
        """Quote value as a string literal for the active dialect."""
        return self.gateway.quote(value)

    # ==================
    # Raw SQL pass-through
    # ==================

    def select(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Row]:
        """Run a caller-written SELECT and return its rows."""
        return self.gateway.prepare_and_execute(sql, params).fetch_all()

    def query(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> QueryResult:
        """
        Run caller-written SQL and shape the result by its leading keyword.

        Without params the SQL is sent verbatim. With params, values are
        bound to ':name' markers, and any other colon followed by a word
        (for example inside a string literal) must be escaped as '\\:'.
        Identifiers in it are not validated, so the caller owns its safety.
        The result shape is guessed from the first keyword, see
        securedb.results for the mapping and its limits.

        Args:
            sql: SQL text
            params: Bind values for ':name' markers

        Returns:
            QueryResult tagged ROW_SET, GENERATED_ID, AFFECTED_COUNT or ACK

        Raises:
            DriverError: If the statement fails
        """
        handle = self.gateway.prepare_and_execute(sql, params)
        kind = result_kind_for(detect_query_type(sql))

        if kind is ResultKind.ROW_SET:
            return QueryResult(kind, handle.fetch_all())
        if kind is ResultKind.GENERATED_ID:
            return QueryResult(kind, self.gateway.last_insert_id())
        if kind is ResultKind.AFFECTED_COUNT:
            return QueryResult(kind, handle.affected_count())
        return QueryResult(kind, True)

    def q(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> QueryResult:
        """Shorthand for query()."""
        return self.query(sql, params)

    # ==================
    # Entry points
    # ==================

    def from_(self, table: str, columns: Optional[Sequence[str]] = None) -> 'SecureDB':
        """Start a fluent SELECT on table, optionally restricted to columns (a list or one name)."""
        self._reset()
        if isinstance(columns, str):
            columns = [columns]
        columns = list(columns or [])
        for column in columns:
            if column != '*':
                validate_column_name(column)
        return self._begin(Operation.SELECT, table, columns=columns)

    def insert(self, table: str, data: Optional[Mapping[str, Any]] = None) -> Union[int, 'SecureDB']:
        """
        Insert one row now, or start a fluent INSERT when data is omitted.

        Args:
            table: Target table
            data: Column/value mapping; None starts the fluent chain

        Returns:
            Generated id (one-shot) or self (fluent)
        """
        if data is None:
            return self._begin(Operation.INSERT, table)
        return self._insert_now(table, data)

    def insert_multiple(
        self,
        table: str,
        rows: Optional[Sequence[Mapping[str, Any]]] = None,
        batch_size: int = DEFAULT_BATCH_SIZE
    ) -> Union[int, 'SecureDB']:
        """
        Bulk insert rows now, or start a fluent bulk INSERT when rows is omitted.

        Args:
            table: Target table
            rows: Rows sharing the same ordered keys; None starts the fluent chain
            batch_size: Maximum rows per INSERT statement

        Returns:
            Rows inserted (one-shot) or self (fluent)
        """
        if rows is None:
            _validate_batch_size(batch_size)
            return self._begin(Operation.INSERT_MULTIPLE, table, batch_size=batch_size)
        return self._batch_inserter.insert_batches(table, rows, batch_size)

    def update(
        self,
        table: str,
        data: Optional[Mapping[str, Any]] = None,
        where: Optional[Mapping[str, Any]] = None
    ) -> Union[int, 'SecureDB']:
        """
        Update rows now, or start a fluent UPDATE when data and where are omitted.

        A one-shot update needs both data and where; an update without
        conditions is refused rather than applied to the whole table.

        Returns:
            Affected row count (one-shot) or self (fluent)

        Raises:
            EmptyConditions: If data is given without conditions
            MissingRequiredInput: If conditions are given without data
        """
        if data is None and where is None:
            return self._begin(Operation.UPDATE, table)
        statement = update_builder(
            table,
            _require_mapping(data or {}, "Update data"),
            _require_mapping(where or {}, "Update conditions")
        )
        return self._execute(statement).affected_count()

    def delete(self, table: str, where: Optional[Mapping[str, Any]] = None) -> Union[int, 'SecureDB']:
        """
        Delete rows now, or start a fluent DELETE when where is omitted.

        delete('users', {}) is refused with EmptyConditions and sends nothing.

        Returns:
            Affected row count (one-shot) or self (fluent)
        """
        if where is None:
            return self._begin(Operation.DELETE, table)
        statement = delete_builder(table, _require_mapping(where, "Delete conditions"))
        return self._execute(statement).affected_count()

    # ==================
    # Modifiers
    # ==================

    def where(self, conditions: Mapping[str, Any]) -> Union['SecureDB', int]:
        """
        Set the equality conditions of the pending SELECT, UPDATE or DELETE.

        Replaces any conditions set before. On a pending DELETE this also
        runs the DELETE and returns the affected row count.

        Raises:
            NoOperationPending: If no chain has been started
            InvalidOperationState: If the pending operation is an INSERT
        """
        state = self._state
        if state.is_idle:
            raise NoOperationPending(
                "No operation pending. Use from_(), update() or delete() before where()."
            )
        if state.operation in (Operation.INSERT, Operation.INSERT_MULTIPLE):
            raise InvalidOperationState("where() cannot be used with INSERT operations.")

        conditions = _require_mapping(conditions, "Conditions")

        if state.operation is Operation.DELETE:
            state.where = OrderedDict(conditions)
            return self.execute_delete()

        for column in conditions:
            validate_column_name(column)
        state.where = OrderedDict(conditions)
        return self

    def order_by(self, column: str, direction: str = 'ASC') -> 'SecureDB':
        """Order the pending SELECT by column, ASC or DESC (any case)."""
        self._require_select('order_by')
        column = validate_column_name(column)
        direction = normalize_direction(direction)
        self._state.order_by = (column, direction)
        return self

    def limit(self, count: int) -> 'SecureDB':
        """Limit the pending SELECT to count rows; 0 means no limit."""
        self._require_select('limit')
        self._state.limit = validate_limit(count)
        return self

    def batch(self, size: int) -> 'SecureDB':
        """Set the chunk size of the pending bulk INSERT."""
        if self._state.is_idle:
            raise NoOperationPending("No operation pending. Use insert_multiple() before batch().")
        self._state.batch_size = _validate_batch_size(size)
        return self

    # ==================
    # Terminals
    # ==================

    def get(self) -> List[Row]:
        """Run the pending SELECT and return its rows."""
        state = self._take_state(Operation.SELECT)
        statement = select_builder(
            state.table,
            columns=state.columns,
            where=state.where,
            order_by=state.order_by,
            limit=state.limit
        )
        return self._execute(statement).fetch_all()

    def row(self, data: Mapping[str, Any]) -> int:
        """Insert data into the pending INSERT table and return the generated id."""
        state = self._take_state(Operation.INSERT)
        return self._insert_now(state.table, data)

    def rows(self, rows: Sequence[Mapping[str, Any]]) -> int:
        """Bulk insert rows into the pending INSERT table and return the count inserted."""
        state = self._take_state(Operation.INSERT_MULTIPLE)
        return self._batch_inserter.insert_batches(state.table, rows, state.batch_size)

    def change(self, data: Mapping[str, Any]) -> int:
        """Apply data to the rows matched by the pending UPDATE's conditions."""
        state = self._take_state(Operation.UPDATE)
        if not state.where:
            raise EmptyConditions(
                "No WHERE conditions specified. Use where({'column': 'value'}) before change()."
            )
        statement = update_builder(state.table, _require_mapping(data or {}, "Update data"), state.where)
        return self._execute(statement).affected_count()

    def execute_delete(self) -> int:
        """Run the pending DELETE and return the affected row count."""
        state = self._take_state(Operation.DELETE)
        statement = delete_builder(state.table, state.where)
        return self._execute(statement).affected_count()

    def execute(self) -> int:
        """
        Run the pending operation if it can run without further input.

        Only DELETE qualifies. Other pending operations raise
        MissingRequiredInput naming the terminal to call instead and stay
        pending so that terminal can still be called.

        Raises:
            NoOperationPending: If the builder is idle
            MissingRequiredInput: For pending SELECT, INSERT or UPDATE
        """
        operation = self._state.operation
        if operation is Operation.NONE:
            raise NoOperationPending("No operation specified or operation not executable via execute().")
        if operation is Operation.DELETE:
            return self.execute_delete()
        raise MissingRequiredInput(
            f"Cannot execute {operation.name.replace('_', ' ')} via execute(). "
            f"Use {operation.terminal_call}() instead."
        )

    # ==================
    # Internals
    # ==================

    def _reset(self) -> None:
        self._state = BuilderState()

    def _begin(self, operation: Operation, table: str, **kwargs) -> 'SecureDB':
        self._reset()
        self._state = BuilderState.pending(operation, validate_table_name(table), **kwargs)
        logger.debug(f"Started {operation.name} on {self._state.table}")
        return self

    def _take_state(self, operation: Operation) -> BuilderState:
        # The builder is idle from here on, whatever happens next
        state = self._state
        self._reset()

        if state.is_idle:
            raise NoTableSpecified(
                f"No table specified. Use {operation.entry_call}('table_name') first."
            )
        if state.operation is not operation:
            raise InvalidOperationState(
                f"{operation.terminal_call}() can only be used with {operation.name} operations, "
                f"but {state.operation.name} is pending. Use {state.operation.terminal_call}() instead."
            )
        return state

    def _require_select(self, method: str) -> None:
        if self._state.operation is not Operation.SELECT:
            raise InvalidOperationState(f"{method}() can only be used with SELECT operations.")

    def _insert_now(self, table: str, data: Mapping[str, Any]) -> int:
        statement = insert_builder(table, _require_mapping(data or {}, "Insert data"))
        self._execute(statement)
        return self.gateway.last_insert_id()

    def _execute(self, statement: CompiledStatement) -> StatementHandle:
        return self.gateway.prepare_and_execute(statement.sql, statement.params)
