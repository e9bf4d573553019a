# anydata/core/fetch/http.py
"""
HTTP(S) fetcher. Downloads are stored in the cache store keyed by the base
resource. Credentials embedded in the URL are sent as HTTP Basic Auth.
"""

from __future__ import annotations

from urllib.parse import unquote, urlsplit, urlunsplit

import requests
from requests.auth import HTTPBasicAuth

from .base import CachedFetcher
from .errors import AuthError, NetworkError

_AUTH_STATUSES = (401, 403)


def _split_credentials(resource: str) -> tuple[str, HTTPBasicAuth | None]:
    """Return (url without userinfo/fragment, basic auth or None)."""
    parts = urlsplit(resource)
    host = parts.netloc.rsplit("@", 1)[-1]
    url = urlunsplit((parts.scheme, host, parts.path, parts.query, ""))
    if parts.username is None:
        return url, None
    return url, HTTPBasicAuth(unquote(parts.username), unquote(parts.password or ""))


class HttpFetcher(CachedFetcher):
    """Fetcher for http:// and https:// URLs."""

    def __str__(self) -> str:
        return "HTTP(S) Download"

    def detect(self, resource: str) -> bool:
        return resource.startswith(("http://", "https://"))

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self._policy.user_agent, "Accept": "*/*"}

    def _download(self, resource: str) -> bytes:
        url, auth = _split_credentials(resource)
        resp = requests.get(url, headers=self._headers(), auth=auth, timeout=self._policy.timeout_s)
        try:
            if resp.status_code in _AUTH_STATUSES:
                raise AuthError(f"HTTP {resp.status_code} for {url}")
            if resp.status_code >= 400:
                raise NetworkError(f"HTTP {resp.status_code} for {url}")
            return resp.content
        finally:
            resp.close()


__all__ = ["HttpFetcher"]
