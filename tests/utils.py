# tests/utils.py
"""
Single source of truth for test payloads, archive builders and transport fakes.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

import bz2
import gzip
import io
import tarfile
import zipfile
from collections.abc import Callable, Mapping
from pathlib import Path

# -----------------------------
# Global defaults (edit once)
# -----------------------------

NAMES_DMP = (
    b"1\t|\troot\t|\t\t|\tscientific name\t|\n"
    b"2\t|\tBacteria\t|\tBacteria <prokaryote>\t|\tscientific name\t|\n"
    b"2\t|\teubacteria\t|\t\t|\tgenbank common name\t|\n"
    b"6\t|\tAzorhizobium\t|\t\t|\tscientific name\t|\n"
)
NODES_DMP = b"1\t|\t1\t|\tno rank\t|\n2\t|\t131567\t|\tsuperkingdom\t|\n"
PLAIN_TEXT = b"alpha\nbeta\ngamma\n"

DEFAULT_MEMBERS: dict[str, bytes] = {
    "names.dmp": NAMES_DMP,
    "nodes.dmp": NODES_DMP,
}


# -----------------------------
# Payload builders
# -----------------------------


def gzip_bytes(data: bytes) -> bytes:
    return gzip.compress(data)


def bz2_bytes(data: bytes) -> bytes:
    return bz2.compress(data)


def zip_bytes(members: Mapping[str, bytes] | None = None) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in (members or DEFAULT_MEMBERS).items():
            zf.writestr(name, data)
    return buf.getvalue()


def tar_bytes(members: Mapping[str, bytes] | None = None, *, compression: str = "none") -> bytes:
    """Build a tarball in memory. compression: "none" | "gzip" | "bzip2"."""
    mode = {"none": "w", "gzip": "w:gz", "bzip2": "w:bz2"}[compression]
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode=mode) as tf:
        for name, data in (members or DEFAULT_MEMBERS).items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def write_file(base_dir: Path, name: str, data: bytes) -> Path:
    path = base_dir / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


# -----------------------------
# HTTP fake (requests API subset)
# -----------------------------


class FakeResponse:
    def __init__(self, *, status: int = 200, body: bytes = b"", headers: dict[str, str] | None = None):
        self.status_code = status
        self.content = body
        self.headers = headers or {}
        self.closed = False

    def close(self) -> None:  # requests API compat
        self.closed = True


class FakeHttp:
    """
    Stand-in for `requests.get`: serves bodies from a URL -> (status, bytes) table
    and records every call so tests can count network round trips.
    """

    def __init__(self, routes: Mapping[str, bytes | tuple[int, bytes]] | None = None) -> None:
        self.routes: dict[str, tuple[int, bytes]] = {}
        for url, value in (routes or {}).items():
            self.add(url, value)
        self.calls: list[dict] = []

    def add(self, url: str, value: bytes | tuple[int, bytes]) -> None:
        self.routes[url] = value if isinstance(value, tuple) else (200, value)

    def __call__(self, url: str, **kwargs) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        status, body = self.routes.get(url, (404, b"not found"))
        return FakeResponse(status=status, body=body)


# -----------------------------
# FTP fake (ftplib.FTP API subset)
# -----------------------------


class FakeFtpServer:
    """Files + accepted logins shared by every FakeFtp connection created for it."""

    def __init__(self, files: Mapping[str, bytes] | None = None, *, logins: Mapping[str, str] | None = None) -> None:
        self.files = dict(files or {})
        self.logins = dict(logins or {"anonymous": "anonymous"})
        self.connections: list[FakeFtp] = []

    def factory(self) -> Callable[..., FakeFtp]:
        def _make(*args, **kwargs) -> FakeFtp:
            conn = FakeFtp(self, **kwargs)
            self.connections.append(conn)
            return conn

        return _make


class FakeFtp:
    def __init__(self, server: FakeFtpServer, timeout: float | None = None) -> None:
        import ftplib

        self._ftplib = ftplib
        self.server = server
        self.timeout = timeout
        self.address: tuple[str, int] | None = None
        self.user: str | None = None
        self.commands: list[str] = []
        self.quit_called = False
        self.closed = False

    def __enter__(self) -> FakeFtp:
        return self

    def __exit__(self, *exc_info) -> None:
        if self.address is not None:
            self.quit()
        self.closed = True

    def connect(self, host: str, port: int) -> str:
        self.address = (host, port)
        return "220 welcome"

    def login(self, user: str, passwd: str) -> str:
        if self.server.logins.get(user) != passwd:
            raise self._ftplib.error_perm("530 Login incorrect.")
        self.user = user
        return "230 ok"

    def retrbinary(self, cmd: str, callback: Callable[[bytes], object]) -> str:
        self.commands.append(cmd)
        path = cmd.split(" ", 1)[1]
        if path not in self.server.files:
            raise self._ftplib.error_perm(f"550 {path}: No such file")
        data = self.server.files[path]
        for i in range(0, len(data), 7):
            callback(data[i : i + 7])
        return "226 done"

    def quit(self) -> str:
        self.quit_called = True
        return "221 bye"
