# anydata/core/wrap/archive.py
"""
Member extraction from .zip and (optionally compressed) .tar archives.

Both wrappers are lazy about missing members: detection and wrapping succeed
whatever the archive holds, and MemberNotFoundError surfaces only when
get_reader() is called.

- Zip needs random access to its trailing central directory, so the inner
  stream is read fully into memory before the member is looked up.
- Tarballs are scanned sequentially in stream order; the returned reader is
  bounded to the matching entry and nothing past it is read.
"""

from __future__ import annotations

import io
import logging
import tarfile
import zipfile
import zlib
from typing import BinaryIO, cast

from anydata.core.fetch.base import Fetcher, Wrapper
from anydata.core.fetch.errors import CorruptArchiveError, MemberNotFoundError, UnknownCompressionError
from anydata.schemas.models import CompressionKind

from .base import WrappedFetcher

logger = logging.getLogger(__name__)

# Longest suffixes first so ".tar.gz" never degrades to a plain ".gz" match.
_TAR_SUFFIXES: tuple[tuple[str, CompressionKind], ...] = (
    (".tar.bzip2", "bzip2"),
    (".tar.bz2", "bzip2"),
    (".tbz2", "bzip2"),
    (".tar.gz", "gzip"),
    (".tgz", "gzip"),
    (".tar", "none"),
)

_TAR_STREAM_MODES: dict[CompressionKind, str] = {
    "none": "r|",
    "gzip": "r|gz",
    "bzip2": "r|bz2",
}


def tar_compression(pathname: str) -> CompressionKind | None:
    """Compression kind implied by a tarball suffix, or None if `pathname` is not a tarball."""
    for suffix, kind in _TAR_SUFFIXES:
        if pathname.endswith(suffix):
            return kind
    return None


# -------------------------
# Zip
# -------------------------


class ZipMemberFetcher(WrappedFetcher):
    def __str__(self) -> str:
        return f"{self._member} from zip {self._inner}"

    def get_reader(self) -> BinaryIO:
        data = self._inner_reader().read()
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as zf:
                for info in zf.infolist():
                    if info.filename == self._member:
                        return io.BytesIO(zf.read(info))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError) as e:
            # NotImplementedError: unsupported compression method. RuntimeError: encrypted member.
            raise CorruptArchiveError(f"Reading '{self._member}' from .zip failed: {e}") from e

        raise MemberNotFoundError(f"Reading '{self._member}' from .zip failed: no such member")


class ZipWrapper(Wrapper):
    """Matches `<path>.zip#member`."""

    def __str__(self) -> str:
        return "zip member extraction"

    def detect_wrap(self, pathname: str, partname: str) -> bool:
        return partname != "" and pathname.endswith(".zip")

    def wrap(self, fetcher: Fetcher, partname: str, *, pathname: str | None = None) -> Fetcher:
        return ZipMemberFetcher(fetcher, partname)


# -------------------------
# Tarball
# -------------------------


class TarMemberFetcher(WrappedFetcher):
    def __init__(self, inner: Fetcher, member: str, compression: CompressionKind | None) -> None:
        super().__init__(inner, member)
        self._compression = compression

    @property
    def compression(self) -> CompressionKind | None:
        return self._compression

    def __str__(self) -> str:
        return f"{self._member} from tarball {self._inner}"

    def get_reader(self) -> BinaryIO:
        if self._compression is None:
            raise UnknownCompressionError(f"unknown tarball compression for '{self._member}'")

        mode = _TAR_STREAM_MODES[self._compression]
        try:
            tf = tarfile.open(fileobj=self._inner_reader(), mode=mode)
            for info in tf:
                if info.name != self._member:
                    continue
                # directories, (sym)links and devices have no readable body in stream mode
                if not info.isfile():
                    raise MemberNotFoundError(f"Reading '{self._member}' from .tar failed: not a regular file")
                return cast(BinaryIO, tf.extractfile(info))
        except (tarfile.TarError, EOFError, OSError) as e:
            raise CorruptArchiveError(f"Reading '{self._member}' from .tar failed: {e}") from e

        raise MemberNotFoundError(f"Reading '{self._member}' from .tar failed: no such member")


class TarballWrapper(Wrapper):
    """
    Matches `<path>.tar#member`, `.tar.gz`/`.tgz` and `.tar.bz2`/`.tbz2`/`.tar.bzip2`,
    recording which decompression applies before entries are scanned.
    """

    def __str__(self) -> str:
        return "tarball member extraction"

    def detect_wrap(self, pathname: str, partname: str) -> bool:
        if partname == "":
            return False
        return tar_compression(pathname) is not None

    def wrap(self, fetcher: Fetcher, partname: str, *, pathname: str | None = None) -> Fetcher:
        kind = tar_compression(pathname) if pathname is not None else None
        if kind is None:
            logger.debug("tarball wrap of %s without a recognised suffix (%r)", fetcher, pathname)
        return TarMemberFetcher(fetcher, partname, kind)


__all__ = [
    "ZipWrapper",
    "TarballWrapper",
    "ZipMemberFetcher",
    "TarMemberFetcher",
    "tar_compression",
]
