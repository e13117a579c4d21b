"""Shared test fixtures."""

import csv
from pathlib import Path

import pytest

from moviedb import create_service
from moviedb.ingestion import ensure_schema

MOVIES_HEADER = ["id", "name", "year", "rank"]
GENRES_HEADER = ["movie_id", "genre"]


@pytest.fixture
def db_service(tmp_path):
    """Provide a fresh SQLite DatabaseService for each test."""
    db_path = tmp_path / "test.db"
    service = create_service(f"sqlite:///{db_path}")
    service.connect()
    yield service
    service.close()


@pytest.fixture
def movies_schema(db_service):
    """db_service with the movies and movies_genres tables created."""
    ensure_schema(db_service)
    return db_service


@pytest.fixture
def write_csv(tmp_path):
    """Write header + rows to a CSV file and return its path."""

    def _write(name: str, header: list[str], rows: list[list]) -> Path:
        path = tmp_path / name
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(header)
            writer.writerows(rows)
        return path

    return _write


def movie_rows(count: int, start: int = 1) -> list[list[str]]:
    return [
        [str(i), f"Movie {i}", str(1950 + i % 70), f"{(i % 10) + 0.5}"]
        for i in range(start, start + count)
    ]


def count_rows(service, table: str) -> int:
    with service.transaction():
        rows = service.execute(f"SELECT COUNT(*) AS cnt FROM {table}")
    return rows[0]["cnt"]
