"""
=====================================
Batched multi-row INSERT executor.
=====================================

Splits a row set into bounded chunks, compiles one multi-row INSERT per
chunk and runs every chunk inside a single transaction.

Chunking only bounds statement size; it is not a unit of atomicity. Either
every row of the call is committed or none is.

Example:
    >>> inserter = BatchInserter(gateway)
    >>> inserter.insert_batches('users', [{'name': 'a'}, {'name': 'b'}], batch_size=1000)
    2
"""

import logging
from typing import Any, Iterator, List, Mapping, Sequence

from core.exceptions import (
    BulkInsertFailed,
    EmptyBatch,
    InconsistentRowShape,
    InvalidArgument,
    SecureDBError,
)
from securedb.gateway import ConnectionGateway
from sql.dml import multi_row_insert_builder
from sql.identifiers import validate_column_name, validate_table_name

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000


def chunked(rows: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    """Yield consecutive slices of rows holding at most size items."""
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


class BatchInserter:
    """Transactional bulk insert over a ConnectionGateway.

    Attributes:
        gateway: Gateway used for the transaction and every chunk
    """

    def __init__(self, gateway: ConnectionGateway):
        self.gateway = gateway

    def insert_batches(
        self,
        table: str,
        rows: Sequence[Mapping[str, Any]],
        batch_size: int = DEFAULT_BATCH_SIZE
    ) -> int:
        """
        Insert rows in chunks of at most batch_size inside one transaction.

        The first row's keys fix the column order. Each chunk is checked
        against it as the chunk is reached, so chunks before a bad row have
        already been sent when the mismatch is found; the rollback undoes them.

        Args:
            table: Target table name
            rows: Rows to insert, all with the same keys in the same order
            batch_size: Maximum rows per INSERT statement

        Returns:
            Total number of rows inserted

        Raises:
            EmptyBatch: If rows is empty
            InvalidArgument: If batch_size is not a positive integer
            InvalidIdentifier: If the table or a column name is invalid
            BulkInsertFailed: If a chunk fails its shape check or execution;
                the transaction has been rolled back and the original error
                is available as __cause__
        """
        if not rows:
            raise EmptyBatch("No rows provided for bulk insert.")
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
            raise InvalidArgument(f"Invalid batch size: {batch_size!r}. Use a positive integer.")

        table = validate_table_name(table)
        first_row = rows[0]
        if not isinstance(first_row, Mapping) or not first_row:
            raise InconsistentRowShape("Bulk insert rows must be non-empty mappings of column to value.")
        columns = list(first_row.keys())
        for column in columns:
            validate_column_name(column)

        marker = self.gateway.positional_marker
        total_inserted = 0
        chunk_count = 0

        logger.info(f"Bulk inserting {len(rows)} rows into {table} (batch size {batch_size})")

        try:
            with self.gateway.transaction():
                for chunk in chunked(rows, batch_size):
                    self._check_shape(chunk, columns)
                    statement = multi_row_insert_builder(table, columns, chunk, marker)
                    handle = self.gateway.prepare_and_execute(statement.sql, statement.params)
                    total_inserted += handle.affected_count()
                    chunk_count += 1
                    logger.debug(f"Chunk {chunk_count}: {len(chunk)} rows sent")
        except SecureDBError as e:
            logger.error(f"❌ Bulk insert into {table} rolled back: {e}")
            raise BulkInsertFailed(f"Bulk insert failed: {e}", cause=e) from e

        logger.info(f"✅ Inserted {total_inserted} rows into {table} in {chunk_count} statement(s)")
        return total_inserted

    @staticmethod
    def _check_shape(chunk: Sequence[Mapping[str, Any]], columns: List[str]) -> None:
        for row in chunk:
            if not isinstance(row, Mapping) or list(row.keys()) != columns:
                raise InconsistentRowShape("All rows must have the same keys in the same order.")
