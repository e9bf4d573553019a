# anydata/core/fetch/local.py
from __future__ import annotations

from pathlib import Path
from typing import BinaryIO
from urllib.parse import unquote, urlsplit

from anydata.core.locator import strip_fragment

from .base import Fetcher
from .errors import fetch_error_guard


def _local_path(resource: str) -> Path:
    """Filesystem path for a bare path or file:// URL (fragment dropped)."""
    try:
        parts = urlsplit(resource)
    except ValueError:
        return Path(strip_fragment(resource))
    if parts.scheme == "file":
        return Path(unquote(parts.path))
    return Path(strip_fragment(resource))


class LocalFetcher(Fetcher):
    """Opens bare filesystem paths and file:// URLs directly. Never cached."""

    def __init__(self) -> None:
        self._fh: BinaryIO | None = None
        self._path: Path | None = None

    def __str__(self) -> str:
        return "Local File"

    def _reset(self) -> None:
        self._fh = None
        self._path = None

    def detect(self, resource: str) -> bool:
        try:
            scheme = urlsplit(resource).scheme
        except ValueError:
            return "://" not in resource
        # single letters are Windows drive prefixes ("C:\data\x.gz")
        return scheme in ("", "file") or len(scheme) == 1

    def fetch(self, resource: str) -> None:
        path = _local_path(resource)
        with fetch_error_guard():
            fh = path.open("rb")
        self.close()
        self._fh = fh
        self._path = path

    def get_reader(self) -> BinaryIO:
        if self._fh is None:
            raise self._not_fetched()
        self._fh.seek(0)
        return self._fh

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
