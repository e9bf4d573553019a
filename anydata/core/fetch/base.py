# anydata/core/fetch/base.py
"""
Contracts for fetchers and wrappers.

- `Fetcher`: retrieves a base resource (`fetch`) and hands out a readable byte
  stream for it (`get_reader`). `detect` decides from the raw resource string
  whether this fetcher can handle it.
- `Wrapper`: decides from the parsed (path, member) pair whether it applies
  (`detect_wrap`) and returns a new Fetcher that owns and transforms the one
  it wraps (`wrap`).

Registered instances act as prototypes. Resolution never hands a registered
fetcher to a caller; it hands out `spawn()`ed copies, and wrappers always build
a fresh wrapped fetcher.
"""

from __future__ import annotations

import copy
import io
import logging
from abc import ABC, abstractmethod
from typing import BinaryIO
from urllib.parse import urlsplit, urlunsplit

from anydata.schemas.models import FetchPolicy

from .cache import CacheStore
from .errors import NotFetchedError, fetch_error_guard

logger = logging.getLogger(__name__)


class Fetcher(ABC):
    """Interface for retrieving a resource as a byte stream."""

    @abstractmethod
    def detect(self, resource: str) -> bool:
        """Return True if this fetcher can retrieve the given resource string."""

    @abstractmethod
    def fetch(self, resource: str) -> None:
        """Retrieve the resource, filling this instance's handle/buffer. Raises FetchError subclasses."""

    @abstractmethod
    def get_reader(self) -> BinaryIO:
        """Return a readable binary stream. Raises NotFetchedError before a successful fetch()."""

    def _reset(self) -> None:
        """Drop any per-resource state. Overridden by stateful fetchers."""

    def spawn(self) -> Fetcher:
        """Return an unfetched copy sharing this instance's configuration."""
        clone = copy.copy(self)
        clone._reset()
        return clone

    def close(self) -> None:
        """Release any resources held for the fetched payload."""

    def __enter__(self) -> Fetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _not_fetched(self) -> NotFetchedError:
        return NotFetchedError(f"Reading failed - did you fetch()? ({self})")


class Wrapper(ABC):
    """Interface for decorating a fetcher with decompression/extraction."""

    @abstractmethod
    def detect_wrap(self, pathname: str, partname: str) -> bool:
        """Return True if `pathname` (and optional archive member `partname`) suits this wrapper."""

    @abstractmethod
    def wrap(self, fetcher: Fetcher, partname: str, *, pathname: str | None = None) -> Fetcher:
        """Return a new Fetcher that exclusively owns `fetcher` and transforms its stream."""


class CachedFetcher(Fetcher):
    """
    Shared cache-first flow for network fetchers.

    `fetch` consults the cache store for the base resource, and only on a miss
    calls `_download`, buffering the full payload in memory and storing it back.
    """

    def __init__(self, *, cache: CacheStore | None = None, policy: FetchPolicy | None = None) -> None:
        self._policy = policy or FetchPolicy()
        self._cache = cache if cache is not None else CacheStore(self._policy.cache_dir, self._policy.max_age_days)
        self._data: bytes | None = None
        self._from_cache = False

    def _reset(self) -> None:
        self._data = None
        self._from_cache = False

    @property
    def from_cache(self) -> bool:
        """True when the current payload was served from the cache store."""
        return self._from_cache

    @abstractmethod
    def _download(self, resource: str) -> bytes:
        """Retrieve the full payload over the network."""

    def fetch(self, resource: str) -> None:
        cached = self._cache.get(resource)
        if cached is not None:
            self._data = cached
            self._from_cache = True
            return

        logger.debug("%s: retrieving %s", self, redact(resource))
        with fetch_error_guard():
            data = self._download(resource)
        self._data = data
        self._from_cache = False
        self._cache.put(resource, data)

    def get_reader(self) -> BinaryIO:
        if self._data is None:
            raise self._not_fetched()
        return io.BytesIO(self._data)

    def close(self) -> None:
        self._data = None


def redact(resource: str) -> str:
    """Drop the password from URL userinfo for log output."""
    try:
        parts = urlsplit(resource)
    except ValueError:
        return resource
    if parts.password is None:
        return resource
    host = parts.netloc.rsplit("@", 1)[-1]
    return urlunsplit(parts._replace(netloc=f"{parts.username}:***@{host}"))


__all__ = ["Fetcher", "Wrapper", "CachedFetcher", "redact"]
