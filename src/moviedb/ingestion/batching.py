"""Grouping rows into bounded batches for multi-row inserts."""

from dataclasses import dataclass, field

DEFAULT_BATCH_SIZE = 100


@dataclass
class Batch:
    """Rows for one multi-row INSERT plus its matching VALUES clause."""

    rows: list[tuple] = field(default_factory=list)
    row_numbers: list[int] = field(default_factory=list)
    values_clause: str = ""

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def first_row(self) -> int:
        return self.row_numbers[0]

    @property
    def last_row(self) -> int:
        return self.row_numbers[-1]

    def params(self) -> list:
        """Row-major flattening: row0.col0, row0.col1, ..., row1.col0, ..."""
        return [value for row in self.rows for value in row]


class BatchAccumulator:
    """Collects rows and hands them out in batches of at most ``capacity``.

    ``row_template`` is the placeholder group for one row, e.g. ``(?, ?)``;
    the VALUES clause grows by one group per offered row.
    """

    def __init__(self, row_template: str, capacity: int = DEFAULT_BATCH_SIZE):
        if capacity < 1:
            raise ValueError(f"Batch capacity must be at least 1, got {capacity}")
        self._row_template = row_template
        self.capacity = capacity
        self._batch = Batch()

    def __len__(self) -> int:
        return len(self._batch)

    def offer(self, row_number: int, row: tuple) -> None:
        if len(self._batch) >= self.capacity:
            raise OverflowError("Batch is full; call flush_if_full() before offering more rows")
        batch = self._batch
        batch.values_clause = (
            f"{batch.values_clause}, {self._row_template}" if batch.rows else self._row_template
        )
        batch.rows.append(row)
        batch.row_numbers.append(row_number)

    def _take(self) -> Batch:
        batch, self._batch = self._batch, Batch()
        return batch

    def flush_if_full(self) -> Batch | None:
        if len(self._batch) >= self.capacity:
            return self._take()
        return None

    def flush_remainder(self) -> Batch | None:
        if self._batch.rows:
            return self._take()
        return None
