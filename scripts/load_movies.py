"""CLI entry point for loading the IMDb movie CSVs and printing genre reports.

Usage:
    python -m scripts.load_movies [--movies PATH_OR_URL] [--genres PATH_OR_URL]
                                  [--db-url sqlite:///movies.db] [--batch-size 100]
                                  [--strict-quotes] [--enforce-foreign-keys]

Without --db-url the database lives in a temporary directory that is removed
when the command exits.
"""

import argparse
import logging
import sys
import tempfile
from contextlib import ExitStack
from pathlib import Path

from moviedb import create_service
from moviedb.ingestion import DEFAULT_BATCH_SIZE, LoadResult, load_all
from moviedb.reports import genre_count_report, genre_rating_report

logger = logging.getLogger(__name__)

DEFAULT_MOVIES_CSV = "001-IMDb/IMDB-movies.csv"
DEFAULT_GENRES_CSV = "001-IMDb/IMDB-movies_genres.csv"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Load IMDb movie CSVs into a database")
    parser.add_argument("--movies", default=DEFAULT_MOVIES_CSV, help="movies CSV path or URL")
    parser.add_argument("--genres", default=DEFAULT_GENRES_CSV, help="movies_genres CSV path or URL")
    parser.add_argument(
        "--db-url",
        help="Database URL (sqlite:/// or postgresql://). Defaults to a temporary SQLite file.",
    )
    parser.add_argument(
        "--batch-size", type=int, default=DEFAULT_BATCH_SIZE, help="Rows per INSERT statement"
    )
    parser.add_argument(
        "--strict-quotes", action="store_true", help="Skip rows with unescaped quotes"
    )
    parser.add_argument("--encoding", default="utf-8", help="Encoding of the CSV sources")
    parser.add_argument(
        "--enforce-foreign-keys",
        action="store_true",
        help="Reject genre rows whose movie is missing (SQLite only)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every batch")
    return parser


def log_summary(results: list[LoadResult]) -> None:
    for r in results:
        logger.info(
            "%-14s read=%d skipped=%d inserted=%d status=%s",
            r.table,
            r.rows_read,
            r.rows_skipped,
            r.rows_inserted,
            r.status,
        )
        if r.error:
            logger.error("%s: %s", r.table, r.error)


def log_reports(service) -> None:
    logger.info("Top genres by average rank:")
    for row in genre_rating_report(service):
        logger.info(
            "  %-12s %.2f (%d movies)", row["genre"], row["average_rank"], row["movie_count"]
        )
    logger.info("Top genres by movie count:")
    for row in genre_count_report(service):
        logger.info("  %-12s %d", row["genre"], row["movie_count"])


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if args.batch_size < 1:
        logger.error("--batch-size must be at least 1")
        return 2

    with ExitStack() as stack:
        db_url = args.db_url
        if db_url is None:
            tmp_dir = stack.enter_context(tempfile.TemporaryDirectory(prefix="moviedb-"))
            db_url = f"sqlite:///{Path(tmp_dir) / 'moviedb.db'}"
            logger.info("Using temporary database %s", db_url)

        service = create_service(db_url, foreign_keys=args.enforce_foreign_keys)
        service.connect()
        stack.callback(service.close)

        results = load_all(
            service,
            {"movies": args.movies, "movies_genres": args.genres},
            batch_size=args.batch_size,
            lenient=not args.strict_quotes,
            encoding=args.encoding,
        )
        log_summary(results)

        if len(results) < 2 or not all(r.committed for r in results):
            logger.error("Load failed; skipping reports.")
            return 1

        log_reports(service)
        logger.info("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
