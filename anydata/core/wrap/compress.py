# anydata/core/wrap/compress.py
"""
Single-stage decompression wrappers for non-archive payloads (.gz, .bz2/.bzip2).

Decompression is streaming. The first block is decoded when the reader is
created, so a payload that is not gzip/bzip2 data at all raises
CorruptArchiveError from get_reader(). Damage further into the stream
(truncation, a bad trailing CRC) can only be seen while reading and surfaces
from read() as the stdlib OSError/EOFError.
"""

from __future__ import annotations

import bz2
import gzip
import zlib
from typing import BinaryIO, cast

from anydata.core.fetch.base import Fetcher, Wrapper
from anydata.core.fetch.errors import CorruptArchiveError

from .base import WrappedFetcher

_GZIP_SUFFIXES = (".gz",)
_BZIP2_SUFFIXES = (".bz2", ".bzip2")


def _checked(stream: gzip.GzipFile | bz2.BZ2File, label: str) -> BinaryIO:
    try:
        stream.peek(1)
    except (OSError, EOFError, zlib.error) as e:
        stream.close()
        raise CorruptArchiveError(f"Reading {label} stream failed: {e}") from e
    return cast(BinaryIO, stream)


class GzipFetcher(WrappedFetcher):
    def __str__(self) -> str:
        return f"gzip'd {self._inner}"

    def get_reader(self) -> BinaryIO:
        return _checked(gzip.GzipFile(fileobj=self._inner_reader(), mode="rb"), "gzip")


class Bzip2Fetcher(WrappedFetcher):
    def __str__(self) -> str:
        return f"bzip2'd {self._inner}"

    def get_reader(self) -> BinaryIO:
        return _checked(bz2.BZ2File(self._inner_reader(), mode="rb"), "bzip2")


class GzipWrapper(Wrapper):
    """Matches `<path>.gz` with no archive member."""

    def __str__(self) -> str:
        return "gzip decompression"

    def detect_wrap(self, pathname: str, partname: str) -> bool:
        return partname == "" and pathname.endswith(_GZIP_SUFFIXES)

    def wrap(self, fetcher: Fetcher, partname: str, *, pathname: str | None = None) -> Fetcher:
        return GzipFetcher(fetcher)


class Bzip2Wrapper(Wrapper):
    """Matches `<path>.bz2` / `<path>.bzip2` with no archive member."""

    def __str__(self) -> str:
        return "bzip2 decompression"

    def detect_wrap(self, pathname: str, partname: str) -> bool:
        return partname == "" and pathname.endswith(_BZIP2_SUFFIXES)

    def wrap(self, fetcher: Fetcher, partname: str, *, pathname: str | None = None) -> Fetcher:
        return Bzip2Fetcher(fetcher)


__all__ = ["GzipWrapper", "Bzip2Wrapper", "GzipFetcher", "Bzip2Fetcher"]
