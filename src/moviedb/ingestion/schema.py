"""Movie table schemas."""

from dataclasses import dataclass, field

from moviedb.ingestion.errors import UnknownTableError
from moviedb.service import DatabaseService

MOVIES_DDL = """
CREATE TABLE IF NOT EXISTS movies (
    id      INTEGER PRIMARY KEY,
    name    TEXT    NOT NULL,
    year    INTEGER NOT NULL,
    rank    REAL
);
"""

MOVIES_GENRES_DDL = """
CREATE TABLE IF NOT EXISTS movies_genres (
    movie_id  INTEGER NOT NULL,
    genre     TEXT    NOT NULL,
    FOREIGN KEY (movie_id) REFERENCES movies(id)
);
"""


@dataclass(frozen=True)
class TableSpec:
    """Name, ordered columns and DDL of a load target."""

    name: str
    columns: tuple[str, ...]
    ddl: str
    nullable: frozenset[str] = field(default_factory=frozenset)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def to_row(self, fields: list[str]) -> tuple:
        """Bind raw fields, turning empty nullable fields into NULL."""
        return tuple(
            None if value == "" and column in self.nullable else value
            for column, value in zip(self.columns, fields)
        )


MOVIES = TableSpec(
    name="movies",
    columns=("id", "name", "year", "rank"),
    ddl=MOVIES_DDL,
    nullable=frozenset({"rank"}),
)

MOVIES_GENRES = TableSpec(
    name="movies_genres",
    columns=("movie_id", "genre"),
    ddl=MOVIES_GENRES_DDL,
)

# Load order: movies_genres references movies.
TABLES = {spec.name: spec for spec in (MOVIES, MOVIES_GENRES)}


def get_table_spec(table: str) -> TableSpec:
    try:
        return TABLES[table]
    except KeyError:
        raise UnknownTableError(f"Unknown table: {table!r}", table) from None


def ensure_schema(service: DatabaseService) -> None:
    """Create the movies and movies_genres tables if they don't exist."""
    for spec in TABLES.values():
        service.execute_ddl(spec.ddl)
