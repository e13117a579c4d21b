"""Streaming CSV reader that skips undecodable rows instead of failing."""

import csv
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from moviedb.ingestion.errors import SchemaMismatchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Record:
    """A decoded data row. ``row_number`` is 1-based, the header being row 1."""

    row_number: int
    fields: list[str]


@dataclass(frozen=True)
class RowSkipped:
    """A data row that could not be decoded and will not be loaded."""

    row_number: int
    reason: str


class TolerantRecordReader:
    """Lazy, single-pass reader over raw CSV byte lines.

    The first record is the header and is only available through
    ``read_header()``. Iterating yields a ``Record`` or ``RowSkipped`` per
    data row; the iterator ending is the end of the stream.

    In lenient mode unescaped quotes inside fields are accepted. In strict
    mode such rows are reported as skipped.
    """

    def __init__(
        self,
        lines: Iterable[bytes],
        expected_columns: int,
        lenient: bool = True,
        encoding: str = "utf-8",
        table: str | None = None,
    ):
        self._expected_columns = expected_columns
        self._encoding = encoding
        self._table = table
        # Decode errors hit while the csv parser assembles the current record.
        self._decode_errors: list[UnicodeDecodeError] = []
        self._csv = csv.reader(self._decode(lines), strict=not lenient)
        self._row_number = 0
        self._header: list[str] | None = None
        self.records_read = 0
        self.records_skipped = 0

    def _decode(self, lines: Iterable[bytes]) -> Iterator[str]:
        for line in lines:
            try:
                yield line.decode(self._encoding)
            except UnicodeDecodeError as e:
                self._decode_errors.append(e)
                yield line.decode(self._encoding, errors="replace")

    def _next_record(self) -> list[str]:
        self._decode_errors.clear()
        return next(self._csv)

    def read_header(self) -> list[str]:
        if self._header is not None:
            return self._header
        try:
            header = self._next_record()
        except StopIteration:
            header = None
        except csv.Error as e:
            raise SchemaMismatchError(f"Unreadable CSV header: {e}", self._table) from e
        if header is None:
            raise SchemaMismatchError("Missing CSV header", self._table)
        if self._decode_errors:
            raise SchemaMismatchError(
                f"Undecodable CSV header: {self._decode_errors[0]}", self._table
            )
        self._row_number = 1
        self._header = header
        return header

    def _skip(self, reason: str) -> RowSkipped:
        self.records_read += 1
        self.records_skipped += 1
        logger.warning("Skipping problematic row %d: %s", self._row_number, reason)
        return RowSkipped(self._row_number, reason)

    def __iter__(self) -> Iterator[Record | RowSkipped]:
        self.read_header()
        while True:
            try:
                fields = self._next_record()
            except StopIteration:
                return
            except csv.Error as e:
                self._row_number += 1
                yield self._skip(f"parse error: {e}")
                continue

            if not fields:
                continue
            self._row_number += 1
            if self._decode_errors:
                yield self._skip(f"{self._encoding} decode error: {self._decode_errors[0]}")
                continue
            if len(fields) != self._expected_columns:
                yield self._skip(
                    f"wrong number of fields: expected {self._expected_columns}, got {len(fields)}"
                )
                continue
            self.records_read += 1
            yield Record(self._row_number, fields)
