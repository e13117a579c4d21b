"""Tests for the genre reports."""

import pytest
from conftest import GENRES_HEADER, MOVIES_HEADER

from moviedb.ingestion import load_all
from moviedb.reports import genre_count_report, genre_rating_report


@pytest.fixture
def loaded(db_service, write_csv):
    movies = write_csv(
        "movies.csv",
        MOVIES_HEADER,
        [
            ["1", "Alien", "1979", "8.5"],
            ["2", "Heat", "1995", "8.0"],
            ["3", "Up", "2009", "7.0"],
            ["4", "Unrated", "2010", ""],
        ],
    )
    genres = write_csv(
        "genres.csv",
        GENRES_HEADER,
        [
            ["1", "Horror"],
            ["1", "Sci-Fi"],
            ["2", "Crime"],
            ["3", "Comedy"],
            ["4", "Comedy"],
            ["2", "Drama"],
            ["3", "Drama"],
        ],
    )
    results = load_all(db_service, {"movies": movies, "movies_genres": genres})
    assert all(r.committed for r in results)
    return db_service


class TestGenreRatingReport:
    def test_orders_by_average_and_ignores_unrated(self, loaded):
        rows = genre_rating_report(loaded)
        assert {r["genre"] for r in rows[:2]} == {"Horror", "Sci-Fi"}
        averages = [r["average_rank"] for r in rows]
        assert averages == sorted(averages, reverse=True)
        comedy = next(r for r in rows if r["genre"] == "Comedy")
        assert comedy["movie_count"] == 1
        assert comedy["average_rank"] == pytest.approx(7.0)
        drama = next(r for r in rows if r["genre"] == "Drama")
        assert drama["average_rank"] == pytest.approx(7.5)

    def test_limit(self, loaded):
        assert len(genre_rating_report(loaded, limit=2)) == 2


class TestGenreCountReport:
    def test_counts_all_movies(self, loaded):
        rows = genre_count_report(loaded)
        counts = {r["genre"]: r["movie_count"] for r in rows}
        assert counts == {"Horror": 1, "Sci-Fi": 1, "Crime": 1, "Comedy": 2, "Drama": 2}
        assert rows[0]["movie_count"] == 2

    def test_limit(self, loaded):
        assert len(genre_count_report(loaded, limit=3)) == 3
