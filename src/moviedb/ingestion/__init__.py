"""CSV ingestion: tolerant reading, header checks, batched transactional loads."""

from moviedb.ingestion.batching import DEFAULT_BATCH_SIZE, Batch, BatchAccumulator
from moviedb.ingestion.errors import (
    BatchInsertError,
    CommitError,
    LoadError,
    LoaderStateError,
    SchemaMismatchError,
    SourceUnavailableError,
    UnknownTableError,
)
from moviedb.ingestion.headers import require_headers, validate_headers
from moviedb.ingestion.loader import (
    LoadResult,
    LoadState,
    TransactionalLoader,
    load_all,
    load_table,
)
from moviedb.ingestion.reader import Record, RowSkipped, TolerantRecordReader
from moviedb.ingestion.schema import (
    MOVIES,
    MOVIES_GENRES,
    TableSpec,
    ensure_schema,
    get_table_spec,
)
from moviedb.ingestion.sources import open_source

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "Batch",
    "BatchAccumulator",
    "BatchInsertError",
    "CommitError",
    "LoadError",
    "LoaderStateError",
    "SchemaMismatchError",
    "SourceUnavailableError",
    "UnknownTableError",
    "require_headers",
    "validate_headers",
    "LoadResult",
    "LoadState",
    "TransactionalLoader",
    "load_all",
    "load_table",
    "Record",
    "RowSkipped",
    "TolerantRecordReader",
    "MOVIES",
    "MOVIES_GENRES",
    "TableSpec",
    "ensure_schema",
    "get_table_spec",
    "open_source",
]
