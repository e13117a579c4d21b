"""Tests for the batch accumulator."""

import pytest

from moviedb.ingestion import BatchAccumulator


def feed(accumulator, count):
    batches = []
    for n in range(1, count + 1):
        accumulator.offer(n + 1, (str(n), f"genre{n}"))
        batch = accumulator.flush_if_full()
        if batch is not None:
            batches.append(batch)
    remainder = accumulator.flush_remainder()
    return batches, remainder


class TestBatchAccumulator:
    def test_fewer_rows_than_capacity_gives_one_remainder(self):
        batches, remainder = feed(BatchAccumulator("(?, ?)", capacity=100), 7)
        assert batches == []
        assert len(remainder) == 7
        assert [row[0] for row in remainder.rows] == [str(n) for n in range(1, 8)]
        assert (remainder.first_row, remainder.last_row) == (2, 8)

    def test_exact_multiple_has_no_remainder(self):
        batches, remainder = feed(BatchAccumulator("(?, ?)", capacity=10), 30)
        assert len(batches) == 3
        assert all(len(b) == 10 for b in batches)
        assert remainder is None

    def test_full_batches_plus_remainder(self):
        batches, remainder = feed(BatchAccumulator("(?, ?)", capacity=100), 250)
        assert [len(b) for b in batches] == [100, 100]
        assert len(remainder) == 50
        assert (batches[1].first_row, batches[1].last_row) == (102, 201)

    def test_values_clause_tracks_batch_length(self):
        accumulator = BatchAccumulator("(?, ?)", capacity=3)
        accumulator.offer(2, ("1", "a"))
        accumulator.offer(3, ("2", "b"))
        batch = accumulator.flush_remainder()
        assert batch.values_clause == "(?, ?), (?, ?)"
        assert batch.params() == ["1", "a", "2", "b"]

    def test_buffer_resets_after_flush(self):
        accumulator = BatchAccumulator("(?)", capacity=2)
        accumulator.offer(2, ("1",))
        accumulator.offer(3, ("2",))
        first = accumulator.flush_if_full()
        assert len(first) == 2
        assert len(accumulator) == 0
        accumulator.offer(4, ("3",))
        second = accumulator.flush_remainder()
        assert second.values_clause == "(?)"
        assert second.rows == [("3",)]
        assert first.rows == [("1",), ("2",)]

    def test_never_emits_empty_batch(self):
        accumulator = BatchAccumulator("(?)", capacity=5)
        assert accumulator.flush_if_full() is None
        assert accumulator.flush_remainder() is None

    def test_offer_past_capacity(self):
        accumulator = BatchAccumulator("(?)", capacity=1)
        accumulator.offer(2, ("1",))
        with pytest.raises(OverflowError):
            accumulator.offer(3, ("2",))

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_invalid_capacity(self, capacity):
        with pytest.raises(ValueError):
            BatchAccumulator("(?)", capacity=capacity)
