# anydata/core/fetch/errors.py
"""
Typed errors + utilities for resource resolution, retrieval and unwrapping.

Exports
-------
- AnyDataError, NoFetcherMatchError, NotFetchedError, FetchError,
  NetworkError, AuthError, CorruptArchiveError, MemberNotFoundError,
  UnknownCompressionError, CacheDegradedError
- FETCHER_ERRORS
- classify_fetch_error(exc)
- fetch_error_guard()
"""

from __future__ import annotations

import ftplib
import socket
from collections.abc import Iterator
from contextlib import contextmanager

import requests

# =========================
# Exception types
# =========================


class AnyDataError(RuntimeError):
    """Base class for every failure raised by anydata."""


class NoFetcherMatchError(AnyDataError):
    """No registered fetcher detected the resource string."""


class NotFetchedError(AnyDataError):
    """A reader was requested before a successful fetch()."""


class FetchError(AnyDataError):
    """Retrieval of a base resource failed."""


class NetworkError(FetchError):
    """HTTP/FTP transport failure, or an HTTP status >= 400."""


class AuthError(NetworkError):
    """Credentials were rejected (HTTP 401/403, FTP login refused)."""


class CorruptArchiveError(FetchError):
    """The fetched payload could not be read as the expected zip/tar container or gzip/bzip2 stream."""


class MemberNotFoundError(AnyDataError):
    """The requested member does not exist in the archive."""


class UnknownCompressionError(AnyDataError):
    """A tarball wrapper has no recorded compression kind at read time."""


class CacheDegradedError(AnyDataError):
    """A cache read/write failed. Logged by the cache store, never raised to callers."""


# Selector tuple for grouped exception handling
FETCHER_ERRORS = (
    NoFetcherMatchError,
    NotFetchedError,
    FetchError,
    MemberNotFoundError,
    UnknownCompressionError,
)

_FTP_AUTH_CODES = ("530", "532")

# =========================
# Classification helpers
# =========================


def classify_fetch_error(exc: BaseException) -> AnyDataError:
    """
    Map arbitrary exceptions raised while fetching to a typed AnyDataError subclass.

    Heuristics:
      - requests HTTPError with 401/403 → AuthError
      - requests.* errors → NetworkError
      - ftplib error_perm 530/532 → AuthError
      - other ftplib errors, socket/EOF errors → NetworkError
      - FileNotFoundError / other OSError → FetchError
      - Any AnyDataError subclass → passed through
      - Fallback → FetchError
    """
    if isinstance(exc, AnyDataError):
        return exc

    if isinstance(exc, requests.HTTPError):
        status = getattr(exc.response, "status_code", None)
        if status in (401, 403):
            return AuthError(str(exc))
        return NetworkError(str(exc))
    if isinstance(exc, requests.RequestException):
        return NetworkError(str(exc))

    if isinstance(exc, ftplib.error_perm) and str(exc).startswith(_FTP_AUTH_CODES):
        return AuthError(f"FTP login rejected: {exc}")
    if isinstance(exc, ftplib.Error):
        return NetworkError(f"FTP error: {exc}")

    if isinstance(exc, FileNotFoundError):
        return FetchError(f"File not found: {exc.filename or exc}")
    if isinstance(exc, (ConnectionError, TimeoutError, EOFError, socket.gaierror)):
        return NetworkError(f"{type(exc).__name__}: {exc}")
    if isinstance(exc, OSError):
        return FetchError(f"{type(exc).__name__}: {exc}")

    return FetchError(f"{type(exc).__name__}: {exc}")


@contextmanager
def fetch_error_guard() -> Iterator[None]:
    """Context manager to normalize unexpected exceptions from fetcher internals."""
    try:
        yield
    except FETCHER_ERRORS:
        raise
    except Exception as exc:  # noqa: BLE001
        raise classify_fetch_error(exc) from exc


__all__ = [
    "AnyDataError",
    "NoFetcherMatchError",
    "NotFetchedError",
    "FetchError",
    "NetworkError",
    "AuthError",
    "CorruptArchiveError",
    "MemberNotFoundError",
    "UnknownCompressionError",
    "CacheDegradedError",
    "FETCHER_ERRORS",
    "classify_fetch_error",
    "fetch_error_guard",
]
