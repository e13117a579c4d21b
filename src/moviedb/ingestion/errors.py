"""Failures that end a table load."""


class LoadError(Exception):
    """Base class for fatal load failures; ``table`` names the target table."""

    def __init__(self, message: str, table: str | None = None):
        super().__init__(message)
        self.table = table


class UnknownTableError(LoadError, ValueError):
    """The table name is not one of the known target tables."""


class SourceUnavailableError(LoadError):
    """The CSV source could not be opened."""


class SchemaMismatchError(LoadError):
    """The source's header line does not match the table's columns."""

    def __init__(
        self,
        message: str,
        table: str | None = None,
        expected: list[str] | None = None,
        observed: list[str] | None = None,
    ):
        super().__init__(message, table)
        self.expected = expected or []
        self.observed = observed or []


class BatchInsertError(LoadError):
    """The storage engine rejected a batch; the whole load was rolled back."""

    def __init__(self, message: str, table: str, first_row: int, last_row: int):
        super().__init__(message, table)
        self.first_row = first_row
        self.last_row = last_row


class CommitError(LoadError):
    """The final commit was rejected; the load was rolled back."""


class LoaderStateError(LoadError):
    """A loader operation was called in the wrong state."""
