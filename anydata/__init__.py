# anydata/__init__.py
"""
anydata: transparently fetch, cache, decompress and unpack data files.

Resource strings may be local paths, file://, http(s):// or ftp:// URLs, with
an optional `#member` naming a file inside a .zip or .tar(.gz/.bz2) archive:

    ftp://ftp.ncbi.nih.gov/gene/DATA/gene2go.gz
    ftp://ftp.ncbi.nih.gov/pub/taxonomy/taxdump.tar.gz#names.dmp

Typical use:

    fetcher = anydata.resolve(resource)
    fetcher.fetch(resource)
    for line in fetcher.get_reader():
        ...
"""

from anydata.core.fetch import (
    AnyDataError,
    AuthError,
    CacheStore,
    CorruptArchiveError,
    Fetcher,
    FetchError,
    FtpFetcher,
    HttpFetcher,
    LocalFetcher,
    MemberNotFoundError,
    NetworkError,
    NoFetcherMatchError,
    NotFetchedError,
    UnknownCompressionError,
    Wrapper,
)
from anydata.core.locator import parse_locator
from anydata.core.registry import (
    FetchContext,
    default_context,
    get_fetcher,
    init_cache,
    open_resource,
    register_fetcher,
    register_wrapper,
    resolve,
    set_default_context,
)
from anydata.core.wrap import Bzip2Wrapper, GzipWrapper, TarballWrapper, ZipWrapper
from anydata.schemas.models import CacheEntry, FetchPolicy, Locator

__all__ = [
    "FetchContext",
    "FetchPolicy",
    "Locator",
    "CacheEntry",
    "CacheStore",
    "Fetcher",
    "Wrapper",
    "LocalFetcher",
    "HttpFetcher",
    "FtpFetcher",
    "GzipWrapper",
    "Bzip2Wrapper",
    "ZipWrapper",
    "TarballWrapper",
    "parse_locator",
    "resolve",
    "get_fetcher",
    "open_resource",
    "register_fetcher",
    "register_wrapper",
    "init_cache",
    "default_context",
    "set_default_context",
    "AnyDataError",
    "NoFetcherMatchError",
    "NotFetchedError",
    "FetchError",
    "NetworkError",
    "AuthError",
    "CorruptArchiveError",
    "MemberNotFoundError",
    "UnknownCompressionError",
]
