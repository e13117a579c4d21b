"""Read-only genre reports over the loaded tables."""

from moviedb.service import DatabaseService
from moviedb.types import Row

GENRE_RATING_SQL = """
SELECT g.genre AS genre,
       AVG(m.rank) AS average_rank,
       COUNT(*) AS movie_count
FROM movies_genres g
JOIN movies m ON m.id = g.movie_id
WHERE m.rank IS NOT NULL
GROUP BY g.genre
ORDER BY average_rank DESC
LIMIT {limit}
"""

GENRE_COUNT_SQL = """
SELECT genre, COUNT(*) AS movie_count
FROM movies_genres
GROUP BY genre
ORDER BY movie_count DESC
LIMIT {limit}
"""


def genre_rating_report(service: DatabaseService, limit: int = 20) -> list[Row]:
    """Average rank and rated-movie count per genre, best first."""
    with service.transaction():
        return service.execute(GENRE_RATING_SQL.format(limit=int(limit)))


def genre_count_report(service: DatabaseService, limit: int = 20) -> list[Row]:
    """Movie count per genre, most common first."""
    with service.transaction():
        return service.execute(GENRE_COUNT_SQL.format(limit=int(limit)))
