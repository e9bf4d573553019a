# anydata/core/fetch/__init__.py
from .base import CachedFetcher, Fetcher, Wrapper
from .cache import CacheStore, _sha256
from .errors import (
    FETCHER_ERRORS,
    AnyDataError,
    AuthError,
    CacheDegradedError,
    CorruptArchiveError,
    FetchError,
    MemberNotFoundError,
    NetworkError,
    NoFetcherMatchError,
    NotFetchedError,
    UnknownCompressionError,
    classify_fetch_error,
    fetch_error_guard,
)
from .ftp import FtpFetcher
from .http import HttpFetcher
from .local import LocalFetcher

__all__ = [
    "Fetcher",
    "Wrapper",
    "CachedFetcher",
    "CacheStore",
    "LocalFetcher",
    "HttpFetcher",
    "FtpFetcher",
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
    "_sha256",
]
