"""Opening CSV sources from the filesystem or over HTTP."""

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import requests

from moviedb.ingestion.errors import SourceUnavailableError

logger = logging.getLogger(__name__)

HTTP_SCHEMES = ("http://", "https://")


def is_remote(location: str | Path) -> bool:
    return str(location).startswith(HTTP_SCHEMES)


def _is_transient(error: requests.RequestException) -> bool:
    """Connection failures, timeouts and 5xx responses are worth retrying."""
    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        return True
    response = getattr(error, "response", None)
    return (
        isinstance(error, requests.HTTPError)
        and response is not None
        and response.status_code >= 500
    )


def _get_with_retry(
    url: str, timeout: float, max_retries: int, base_delay: float
) -> requests.Response:
    for attempt in range(max_retries):
        try:
            resp = requests.get(url, stream=True, timeout=timeout)
            resp.raise_for_status()
            return resp
        except requests.RequestException as e:
            if attempt < max_retries - 1 and _is_transient(e):
                delay = base_delay * (2**attempt)
                logger.warning(
                    "Attempt %d to fetch %s failed: %s. Retrying in %.1fs...",
                    attempt + 1,
                    url,
                    e,
                    delay,
                )
                time.sleep(delay)
            else:
                raise
    raise ValueError("max_retries must be at least 1")


def _remote_lines(resp: requests.Response, url: str, table: str | None) -> Iterator[bytes]:
    # iter_lines drops terminators; the csv parser needs them back.
    try:
        for line in resp.iter_lines():
            yield line + b"\n"
    except requests.RequestException as e:
        raise SourceUnavailableError(f"Lost connection to {url}: {e}", table) from e


@contextmanager
def open_source(
    location: str | Path,
    table: str | None = None,
    timeout: float = 30,
    max_retries: int = 3,
    base_delay: float = 1.0,
) -> Iterator[Iterator[bytes]]:
    """Yield the raw byte lines of a CSV file path or http(s) URL.

    Raises SourceUnavailableError if the source cannot be opened.
    """
    if is_remote(location):
        try:
            resp = _get_with_retry(str(location), timeout, max_retries, base_delay)
        except requests.RequestException as e:
            raise SourceUnavailableError(f"Cannot fetch {location}: {e}", table) from e
        try:
            yield _remote_lines(resp, str(location), table)
        finally:
            resp.close()
        return

    try:
        f = open(location, "rb")
    except OSError as e:
        raise SourceUnavailableError(f"Cannot open {location}: {e}", table) from e
    with f:
        yield iter(f)
