"""Abstract DatabaseService interface."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator

from moviedb.types import Params


class DatabaseService(ABC):
    """Storage-engine boundary used by the loader and the reports.

    Callers program against this ABC, never a concrete backend. All reads and
    writes happen inside a ``with service.transaction():`` block.
    """

    #: Positional placeholder understood by the backend's driver.
    placeholder = "?"

    @abstractmethod
    def connect(self) -> None:
        """Initialize the connection pool."""

    @abstractmethod
    def close(self) -> None:
        """Close all connections and release resources."""

    @abstractmethod
    def execute(self, sql: str, params: Params | None = None) -> list[dict[str, Any]]:
        """Execute a single SQL statement and return rows as dicts."""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Context manager: acquires a connection, commits on success, rolls back on error."""

    @abstractmethod
    def execute_ddl(self, sql: str) -> None:
        """Execute DDL statements (CREATE TABLE, CREATE INDEX, etc.)."""

    def row_template(self, column_count: int) -> str:
        """Placeholder group for one row, e.g. ``(?, ?, ?)``."""
        return "(" + ", ".join(self.placeholder for _ in range(column_count)) + ")"

