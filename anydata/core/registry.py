# anydata/core/registry.py
"""
Fetcher/wrapper registries and the resolution entry point.

A FetchContext is an explicit handle bundling one FetchPolicy, one CacheStore
and the two ordered registries. Resolution:

  1. the FIRST registered fetcher whose detect(resource) is true is selected
     (an unfetched copy of it is handed out);
  2. the resource is parsed into (path, member);
  3. EVERY registered wrapper whose detect_wrap(path, member) is true wraps the
     current fetcher, in registration order, cumulatively.

No network or disk I/O happens during resolution; it starts when the caller
invokes fetch() on the returned fetcher.

Module-level helpers (`resolve`, `register_fetcher`, `init_cache`, ...) operate
on a lazily built process-default context for callers that do not pass one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import BinaryIO, cast

from anydata.core.fetch.base import Fetcher, Wrapper
from anydata.core.fetch.cache import CacheStore
from anydata.core.fetch.errors import NoFetcherMatchError
from anydata.core.fetch.ftp import FtpFetcher
from anydata.core.fetch.http import HttpFetcher
from anydata.core.fetch.local import LocalFetcher
from anydata.core.locator import parse_locator
from anydata.core.wrap.archive import TarballWrapper, ZipWrapper
from anydata.core.wrap.compress import Bzip2Wrapper, GzipWrapper
from anydata.schemas.models import FetchPolicy

logger = logging.getLogger(__name__)


class _OwnedReader:
    """Readable stream that closes the fetcher which produced it when closed."""

    def __init__(self, reader: BinaryIO, fetcher: Fetcher) -> None:
        self._reader = reader
        self._fetcher = fetcher

    def __getattr__(self, name: str):
        return getattr(self._reader, name)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._reader)

    def __enter__(self) -> _OwnedReader:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        try:
            self._reader.close()
        finally:
            self._fetcher.close()


class FetchContext:
    """Explicit registries + cache for one process (or one test)."""

    def __init__(
        self,
        policy: FetchPolicy | None = None,
        *,
        cache: CacheStore | None = None,
        fetchers: Iterable[Fetcher] = (),
        wrappers: Iterable[Wrapper] = (),
    ) -> None:
        self.policy = policy or FetchPolicy()
        self.cache = cache if cache is not None else CacheStore(self.policy.cache_dir, self.policy.max_age_days)
        self._fetchers: list[Fetcher] = list(fetchers)
        self._wrappers: list[Wrapper] = list(wrappers)

    @classmethod
    def with_defaults(cls, policy: FetchPolicy | None = None, *, cache: CacheStore | None = None) -> FetchContext:
        """Context with the built-in fetchers and wrappers registered."""
        ctx = cls(policy, cache=cache)
        ctx.register_fetcher(LocalFetcher())
        ctx.register_fetcher(HttpFetcher(cache=ctx.cache, policy=ctx.policy))
        ctx.register_fetcher(FtpFetcher(cache=ctx.cache, policy=ctx.policy))

        ctx.register_wrapper(Bzip2Wrapper())
        ctx.register_wrapper(GzipWrapper())
        ctx.register_wrapper(ZipWrapper())
        ctx.register_wrapper(TarballWrapper())
        return ctx

    # -------------------------
    # Registration
    # -------------------------

    def register_fetcher(self, fetcher: Fetcher) -> None:
        """Append `fetcher` to the ordered fetcher registry."""
        self._fetchers.append(fetcher)

    def register_wrapper(self, wrapper: Wrapper) -> None:
        """Append `wrapper` to the ordered wrapper registry."""
        self._wrappers.append(wrapper)

    @property
    def fetchers(self) -> tuple[Fetcher, ...]:
        return tuple(self._fetchers)

    @property
    def wrappers(self) -> tuple[Wrapper, ...]:
        return tuple(self._wrappers)

    def init_cache(self, cache_dir: Path | str, max_age_days: int) -> None:
        self.cache.init(cache_dir, max_age_days)

    # -------------------------
    # Resolution
    # -------------------------

    def resolve(self, resource: str) -> Fetcher:
        """Return a (possibly wrapped) unfetched Fetcher for `resource`."""
        selected: Fetcher | None = None
        for f in self._fetchers:
            if f.detect(resource):
                selected = f
                break
        if selected is None:
            raise NoFetcherMatchError(f"No defined fetchers match '{resource}'")

        current = selected.spawn()
        logger.debug("Selected %s for %s", current, resource)

        loc = parse_locator(resource)
        for w in self._wrappers:
            if w.detect_wrap(loc.path, loc.member):
                current = w.wrap(current, loc.member, pathname=loc.path)
                logger.debug("Wrapped as %s", current)
        return current

    get_fetcher = resolve

    def open(self, resource: str) -> BinaryIO:
        """
        Resolve, fetch and return the final readable stream for `resource`.

        Closing the returned stream also closes the fetcher chain behind it.
        """
        fetcher = self.resolve(resource)
        try:
            fetcher.fetch(resource)
            reader = fetcher.get_reader()
        except Exception:
            fetcher.close()
            raise
        return cast(BinaryIO, _OwnedReader(reader, fetcher))

    def read_bytes(self, resource: str) -> bytes:
        with self.resolve(resource) as fetcher:
            fetcher.fetch(resource)
            return fetcher.get_reader().read()


# =========================
# Process-default context
# =========================

_DEFAULT: FetchContext | None = None


def default_context() -> FetchContext:
    """The process-wide context, built from FetchPolicy.from_env() on first use."""
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = FetchContext.with_defaults(FetchPolicy.from_env())
    return _DEFAULT


def set_default_context(ctx: FetchContext | None) -> None:
    """Replace (or with None, drop) the process-wide context."""
    global _DEFAULT
    _DEFAULT = ctx


def register_fetcher(fetcher: Fetcher) -> None:
    default_context().register_fetcher(fetcher)


def register_wrapper(wrapper: Wrapper) -> None:
    default_context().register_wrapper(wrapper)


def init_cache(cache_dir: Path | str, max_age_days: int) -> None:
    """Initialize the default context's cache from `cache_dir`/cacheinfo.json."""
    default_context().init_cache(cache_dir, max_age_days)


def resolve(resource: str, ctx: FetchContext | None = None) -> Fetcher:
    return (ctx or default_context()).resolve(resource)


get_fetcher = resolve


def open_resource(resource: str, ctx: FetchContext | None = None) -> BinaryIO:
    return (ctx or default_context()).open(resource)


__all__ = [
    "FetchContext",
    "default_context",
    "set_default_context",
    "register_fetcher",
    "register_wrapper",
    "init_cache",
    "resolve",
    "get_fetcher",
    "open_resource",
]
