"""Batched, all-or-nothing loading of a CSV source into one table."""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Mapping

from moviedb.ingestion.batching import DEFAULT_BATCH_SIZE, Batch, BatchAccumulator
from moviedb.ingestion.errors import (
    BatchInsertError,
    CommitError,
    LoadError,
    LoaderStateError,
)
from moviedb.ingestion.headers import require_headers
from moviedb.ingestion.reader import RowSkipped, TolerantRecordReader
from moviedb.ingestion.schema import TABLES, TableSpec, ensure_schema, get_table_spec
from moviedb.ingestion.sources import open_source
from moviedb.service import DatabaseService

logger = logging.getLogger(__name__)


class LoadState(Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class LoadResult:
    """Outcome of loading one source into one table."""

    table: str
    source: str
    rows_read: int = 0
    rows_skipped: int = 0
    rows_inserted: int = 0
    batches: int = 0
    committed: bool = False
    error: str | None = None
    skipped: list[RowSkipped] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def status(self) -> str:
        return "ok" if self.committed else "failed"


class TransactionalLoader:
    """Inserts batches into one table inside a single transaction.

    Usage::

        loader = TransactionalLoader(service, MOVIES)
        with loader.begin():
            loader.insert_batch(batch)
            ...

    Leaving the block normally commits once. Any exception rolls back
    every batch inserted so far.
    """

    def __init__(self, service: DatabaseService, spec: TableSpec):
        self._service = service
        self.spec = spec
        self.state = LoadState.NOT_STARTED
        self.rows_inserted = 0
        self.batches = 0
        self._insert_prefix = f"INSERT INTO {spec.name} ({', '.join(spec.columns)}) VALUES "

    @contextmanager
    def begin(self) -> Iterator["TransactionalLoader"]:
        if self.state is not LoadState.NOT_STARTED:
            raise LoaderStateError(
                f"Load of {self.spec.name} already {self.state.value}", self.spec.name
            )
        self.state = LoadState.IN_PROGRESS
        committing = False
        try:
            with self._service.transaction():
                yield self
                committing = True
        except BaseException as e:
            self.state = LoadState.ROLLED_BACK
            logger.error(
                "Rolled back load of %s after %d batches: %r", self.spec.name, self.batches, e
            )
            if committing and isinstance(e, Exception):
                raise CommitError(f"Commit of {self.spec.name} failed: {e}", self.spec.name) from e
            raise
        self.state = LoadState.COMMITTED
        logger.info("Committed %d rows into %s", self.rows_inserted, self.spec.name)

    def insert_batch(self, batch: Batch) -> int:
        """Execute one multi-row INSERT for ``batch``; returns its row count."""
        if self.state is not LoadState.IN_PROGRESS:
            raise LoaderStateError(
                f"Cannot insert into {self.spec.name}: load is {self.state.value}",
                self.spec.name,
            )
        if not batch.rows:
            return 0
        try:
            self._service.execute(self._insert_prefix + batch.values_clause, batch.params())
        except Exception as e:
            raise BatchInsertError(
                f"Insert into {self.spec.name} failed for rows "
                f"{batch.first_row}-{batch.last_row}: {e}",
                self.spec.name,
                batch.first_row,
                batch.last_row,
            ) from e
        self.rows_inserted += len(batch)
        self.batches += 1
        logger.debug(
            "Batch %d: inserted rows %d-%d into %s (total: %d)",
            self.batches,
            batch.first_row,
            batch.last_row,
            self.spec.name,
            self.rows_inserted,
        )
        return len(batch)


def _load_into(
    service: DatabaseService,
    spec: TableSpec,
    result: LoadResult,
    batch_size: int,
    lenient: bool,
    encoding: str,
) -> None:
    start = time.monotonic()
    reader: TolerantRecordReader | None = None
    loader = TransactionalLoader(service, spec)
    try:
        with open_source(result.source, table=spec.name) as lines:
            reader = TolerantRecordReader(
                lines, spec.column_count, lenient=lenient, encoding=encoding, table=spec.name
            )
            require_headers(spec.name, reader.read_header())

            accumulator = BatchAccumulator(service.row_template(spec.column_count), batch_size)
            with loader.begin():
                for item in reader:
                    if isinstance(item, RowSkipped):
                        result.skipped.append(item)
                        continue
                    accumulator.offer(item.row_number, spec.to_row(item.fields))
                    batch = accumulator.flush_if_full()
                    if batch is not None:
                        loader.insert_batch(batch)
                batch = accumulator.flush_remainder()
                if batch is not None:
                    loader.insert_batch(batch)
    finally:
        if reader is not None:
            result.rows_read = reader.records_read
            result.rows_skipped = reader.records_skipped
        result.batches = loader.batches
        result.committed = loader.state is LoadState.COMMITTED
        result.rows_inserted = loader.rows_inserted if result.committed else 0
        result.duration_seconds = time.monotonic() - start

    logger.info(
        "Loaded %s from %s: %d rows read, %d skipped, %d inserted in %d batches (%.2fs)",
        spec.name,
        result.source,
        result.rows_read,
        result.rows_skipped,
        result.rows_inserted,
        result.batches,
        result.duration_seconds,
    )


def load_table(
    service: DatabaseService,
    table: str,
    source: str | Path,
    batch_size: int = DEFAULT_BATCH_SIZE,
    lenient: bool = True,
    encoding: str = "utf-8",
) -> LoadResult:
    """Load a CSV source into ``table`` in one transaction.

    The table must already exist (see ``ensure_schema``). Rows that cannot be
    decoded are skipped and reported in the result. Any other failure raises
    a LoadError subclass and leaves the table untouched.
    """
    spec = get_table_spec(table)
    result = LoadResult(table=spec.name, source=str(source))
    _load_into(service, spec, result, batch_size, lenient, encoding)
    return result


def load_all(
    service: DatabaseService,
    sources: Mapping[str, str | Path],
    batch_size: int = DEFAULT_BATCH_SIZE,
    lenient: bool = True,
    encoding: str = "utf-8",
) -> list[LoadResult]:
    """Create the schema and load each table in dependency order.

    Stops at the first failed table; its result carries the error and the
    remaining tables are not attempted.
    """
    for table in sources:
        get_table_spec(table)
    ensure_schema(service)

    results = []
    for table, spec in TABLES.items():
        if table not in sources:
            continue
        result = LoadResult(table=spec.name, source=str(sources[table]))
        results.append(result)
        try:
            _load_into(service, spec, result, batch_size, lenient, encoding)
        except LoadError as e:
            result.error = str(e)
            logger.error("Load of %s failed: %s", table, e)
            break
    return results
