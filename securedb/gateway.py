"""
=====================================
Connection gateway over SQLAlchemy.
=====================================

The gateway is the only place where SecureDB touches the database. It owns
one SQLAlchemy Connection and exposes the small contract the rest of the
package relies on:

- prepare_and_execute(sql, params) -> StatementHandle
- handle.fetch_all() / handle.affected_count()
- last_insert_id()
- begin_transaction() / commit() / rollback() / transaction()
- quote(value)

Named parameters (a mapping) go through sqlalchemy.text() with ':name'
markers; a literal colon followed by a word must then be written as '\\:'.
Positional parameters (a sequence) go straight to the driver via
exec_driver_sql(), using the driver's own marker (see positional_marker).
Statements without parameters are handed to the driver untouched.

Outside an explicit transaction every statement is committed as soon as it
has run, and rolled back if it fails. Inside a transaction the caller decides.

The gateway is not thread-safe: one gateway serves one logical conversation.

Example:
    >>> from sqlalchemy import create_engine
    >>> gateway = ConnectionGateway.from_engine(create_engine('sqlite://'))
    >>> gateway.prepare_and_execute("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
    >>> handle = gateway.prepare_and_execute("INSERT INTO t (name) VALUES (:name)", {'name': 'a'})
    >>> gateway.last_insert_id()
    1
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from sqlalchemy import String, literal, text
from sqlalchemy.engine import Connection, CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import DriverError

logger = logging.getLogger(__name__)

_POSITIONAL_MARKERS = {
    'qmark': '?',
    'format': '%s',
    'pyformat': '%s',
}


class StatementHandle:
    """Result of one executed statement, materialized before commit.

    Attributes:
        rows: Fetched rows as plain dicts (empty for non-row statements)
        rowcount: Driver-reported affected-row count (-1 when unknown)
        last_row_id: Driver-reported generated id (0 when none), None for row sets
    """

    def __init__(self, rows: List[Dict[str, Any]], rowcount: int, last_row_id: Optional[int] = None):
        self.rows = rows
        self.rowcount = rowcount
        self.last_row_id = last_row_id

    @classmethod
    def from_result(cls, result: CursorResult) -> 'StatementHandle':
        if result.returns_rows:
            rows = [dict(row) for row in result.mappings()]
            return cls(rows, result.rowcount)
        return cls([], result.rowcount, result.lastrowid or 0)

    def fetch_all(self) -> List[Dict[str, Any]]:
        return list(self.rows)

    def affected_count(self) -> int:
        return self.rowcount if self.rowcount and self.rowcount > 0 else 0


class ConnectionGateway:
    """Thin wrapper around one SQLAlchemy Connection.

    Attributes:
        connection: The underlying SQLAlchemy Connection
        in_transaction: True while an explicit transaction is open
        positional_marker: Positional bind marker of the active driver

    Example:
        >>> gateway = ConnectionGateway.from_engine(engine, dispose_engine=True)
        >>> with gateway.transaction():
        ...     gateway.prepare_and_execute("INSERT INTO t (id) VALUES (?)", (1,))
        >>> gateway.close()
    """

    def __init__(self, connection: Connection, engine: Optional[Engine] = None):
        """Wrap an open connection.

        Args:
            connection: Open SQLAlchemy Connection
            engine: Engine to dispose on close(), when the gateway owns it
        """
        self._connection = connection
        self._engine = engine
        self._transaction = None
        self._last_insert_id = 0

    @classmethod
    def from_engine(cls, engine: Engine, dispose_engine: bool = False) -> 'ConnectionGateway':
        """Open a connection on engine and wrap it.

        Raises:
            DriverError: If the connection cannot be opened
        """
        try:
            connection = engine.connect()
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Connection failed: {e}")
            raise DriverError(f"DB Connection failed: {e}") from e
        return cls(connection, engine if dispose_engine else None)

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    @property
    def positional_marker(self) -> str:
        paramstyle = self._connection.dialect.paramstyle
        try:
            return _POSITIONAL_MARKERS[paramstyle]
        except KeyError:
            raise DriverError(
                f"Positional parameters are not supported for paramstyle '{paramstyle}'."
            ) from None

    def _ensure_open(self) -> None:
        if self._connection.closed:
            raise DriverError("Database connection is closed.")
        if self._connection.invalidated:
            raise DriverError("Database connection is no longer valid.")

    def prepare_and_execute(
        self,
        sql: str,
        params: Optional[Union[Mapping[str, Any], Sequence[Any]]] = None
    ) -> StatementHandle:
        """
        Execute one statement and materialize its result.

        Args:
            sql: SQL text with ':name' markers (mapping params) or the
                driver's positional marker (sequence params)
            params: Bind values; None or a mapping for named, a sequence for positional

        Returns:
            StatementHandle with fetched rows, row count and last row id

        Raises:
            DriverError: If the connection is closed or the driver fails
        """
        self._ensure_open()
        logger.debug(f"Executing SQL: {sql}")

        try:
            if not params:
                result = self._connection.exec_driver_sql(
                    sql, execution_options={'no_parameters': True}
                )
            elif isinstance(params, Mapping):
                result = self._connection.execute(text(sql), dict(params))
            else:
                result = self._connection.exec_driver_sql(sql, tuple(params))
            handle = StatementHandle.from_result(result)

            if self._transaction is None:
                self._connection.commit()
        except SQLAlchemyError as e:
            if self._transaction is None:
                self._connection.rollback()
            logger.error(f"SQL Error: {e}")
            raise DriverError(f"SQL Error: {e}") from e

        # Every non-row statement replaces the id, with 0 when none was generated
        if handle.last_row_id is not None:
            self._last_insert_id = int(handle.last_row_id)
        return handle

    def last_insert_id(self) -> int:
        """Get the id generated by the most recent write on this gateway (0 if it generated none)."""
        return self._last_insert_id

    def begin_transaction(self) -> None:
        """Open an explicit transaction.

        Raises:
            DriverError: If a transaction is already open or BEGIN fails
        """
        self._ensure_open()
        if self._transaction is not None:
            raise DriverError("A transaction is already active on this connection.")
        try:
            self._transaction = self._connection.begin()
        except SQLAlchemyError as e:
            raise DriverError(f"Could not begin transaction: {e}") from e
        logger.debug("Transaction started")

    def commit(self) -> None:
        """Commit the explicit transaction."""
        transaction = self._take_transaction()
        try:
            transaction.commit()
        except SQLAlchemyError as e:
            raise DriverError(f"Commit failed: {e}") from e
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        """Roll back the explicit transaction."""
        transaction = self._take_transaction()
        try:
            transaction.rollback()
        except SQLAlchemyError as e:
            raise DriverError(f"Rollback failed: {e}") from e
        logger.debug("Transaction rolled back")

    def _take_transaction(self):
        if self._transaction is None:
            raise DriverError("No active transaction.")
        transaction, self._transaction = self._transaction, None
        return transaction

    @contextmanager
    def transaction(self) -> Iterator['ConnectionGateway']:
        """Run a block inside one transaction; roll back if it raises."""
        self.begin_transaction()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        self.commit()

    def quote(self, value: str) -> str:
        """Render value as a quoted string literal for the active dialect."""
        expression = literal(value, String())
        compiled = expression.compile(
            dialect=self._connection.dialect,
            compile_kwargs={'literal_binds': True}
        )
        return str(compiled)

    def ping(self) -> None:
        """Check that the connection still answers.

        Raises:
            DriverError: If the connection is closed or 'SELECT 1' fails
        """
        try:
            self.prepare_and_execute("SELECT 1")
        except DriverError as e:
            raise DriverError(f"Database connection is no longer valid: {e}") from e

    def close(self) -> None:
        """Roll back any open transaction and release the connection."""
        if self._transaction is not None:
            self.rollback()
        if not self._connection.closed:
            self._connection.close()
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
