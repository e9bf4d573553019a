# anydata/core/fetch/ftp.py
"""
FTP fetcher. Logs in anonymously unless the URL embeds credentials; the
connection is always closed, including after a failed login or transfer.
"""

from __future__ import annotations

import io
from ftplib import FTP
from urllib.parse import unquote, urlsplit

from .base import CachedFetcher


class FtpFetcher(CachedFetcher):
    """Fetcher for ftp:// URLs."""

    def __str__(self) -> str:
        return "FTP Download"

    def detect(self, resource: str) -> bool:
        return resource.startswith("ftp://")

    def _credentials(self, username: str | None, password: str | None) -> tuple[str, str]:
        if username is None:
            return self._policy.ftp_anonymous_user, self._policy.ftp_anonymous_password
        if password is None:
            return unquote(username), self._policy.ftp_anonymous_password
        return unquote(username), unquote(password)

    def _download(self, resource: str) -> bytes:
        parts = urlsplit(resource)
        host = parts.hostname or ""
        port = parts.port or self._policy.ftp_default_port
        user, passwd = self._credentials(parts.username, parts.password)

        buf = io.BytesIO()
        ftp = FTP(timeout=self._policy.timeout_s) if self._policy.timeout_s else FTP()
        with ftp:
            ftp.connect(host, port)
            ftp.login(user, passwd)
            ftp.retrbinary(f"RETR {unquote(parts.path)}", buf.write)
        return buf.getvalue()


__all__ = ["FtpFetcher"]
