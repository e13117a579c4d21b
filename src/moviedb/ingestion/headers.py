"""Header line validation."""

from typing import Sequence

from moviedb.ingestion.errors import SchemaMismatchError
from moviedb.ingestion.schema import get_table_spec

BOM = "\ufeff"


def _normalize(headers: Sequence[str]) -> list[str]:
    headers = list(headers)
    if headers and headers[0].startswith(BOM):
        headers[0] = headers[0][len(BOM):]
    return headers


def validate_headers(table: str, headers: Sequence[str]) -> bool:
    """Return True if ``headers`` are exactly the table's columns, in order.

    Raises UnknownTableError for a table that is not a load target.
    """
    expected = list(get_table_spec(table).columns)
    return _normalize(headers) == expected


def require_headers(table: str, headers: Sequence[str]) -> None:
    """Raise SchemaMismatchError unless ``headers`` validate for ``table``."""
    if not validate_headers(table, headers):
        expected = list(get_table_spec(table).columns)
        raise SchemaMismatchError(
            f"Unexpected CSV headers for {table}: expected {expected}, got {list(headers)}",
            table,
            expected=expected,
            observed=list(headers),
        )
