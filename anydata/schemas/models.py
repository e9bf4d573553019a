# anydata/schemas/models.py

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =========================
# Configuration
# =========================

_ENV_CACHE_DIR = "ANYDATA_CACHE_DIR"
_ENV_CACHE_DAYS = "ANYDATA_CACHE_DAYS"
_ENV_TIMEOUT = "ANYDATA_TIMEOUT"
_ENV_USER_AGENT = "ANYDATA_USER_AGENT"


class FetchPolicy(BaseModel):
    """
    Fetch/cache policy shared by every fetcher bound to one FetchContext.

    Governs where downloaded payloads are cached, how long a cached copy stays
    valid, and the transport knobs used for HTTP(S) and FTP retrieval.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    cache_dir: Path = Field(
        default=Path("cache"),
        description="Directory holding cacheinfo.json and one payload file per cached base resource.",
    )
    max_age_days: int = Field(
        7,
        description="Cached copies older than this many days are treated as absent. Never less than 1.",
    )
    timeout_s: float | None = Field(
        None,
        gt=0,
        description="Transport timeout in seconds. None leaves the transport's own default in place.",
    )
    user_agent: str = Field(
        "anydata/0.1 (+cached-fetch)",
        description="User-Agent string used in HTTP requests.",
    )
    ftp_default_port: int = Field(21, ge=1, le=65535, description="Port used when an ftp:// URL names none.")
    ftp_anonymous_user: str = Field("anonymous", description="FTP login used when the URL embeds no credentials.")
    ftp_anonymous_password: str = Field("anonymous", description="FTP password used with the anonymous login.")

    @field_validator("max_age_days", mode="before")
    @classmethod
    def _at_least_one_day(cls, v: object) -> int:
        days = int(v)  # type: ignore[arg-type]
        return max(days, 1)

    @classmethod
    def from_env(cls, **overrides: object) -> FetchPolicy:
        """Build a policy from ANYDATA_* environment variables; explicit overrides win."""
        values: dict[str, object] = {}

        cache_dir = os.getenv(_ENV_CACHE_DIR, "").strip()
        if cache_dir:
            values["cache_dir"] = Path(cache_dir)

        days = os.getenv(_ENV_CACHE_DAYS, "").strip()
        if days:
            try:
                values["max_age_days"] = int(days)
            except ValueError:
                pass

        timeout = os.getenv(_ENV_TIMEOUT, "").strip()
        if timeout:
            try:
                t = float(timeout)
                if t > 0:
                    values["timeout_s"] = t
            except ValueError:
                pass

        ua = os.getenv(_ENV_USER_AGENT, "").strip()
        if ua:
            values["user_agent"] = ua

        values.update(overrides)
        return cls(**values)


# =========================
# Locators
# =========================


class Locator(BaseModel):
    """
    A parsed resource string.

    - `base` is the resource with any `#member` fragment stripped (scheme + host + path,
      or a bare filesystem path). It is the cache key.
    - `path` is what suffix detection runs on: the URL path component when the resource
      parses as a URL, otherwise the fragment-stripped string.
    - `member` names a file inside an archive ("" when absent).
    """

    model_config = ConfigDict(frozen=True)

    resource: str
    base: str
    path: str
    member: str = ""


# =========================
# Cache
# =========================


class CacheEntry(BaseModel):
    """One row of cacheinfo.json."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    local_name: str = Field(..., alias="local_path", description="Payload file name inside the cache directory.")
    fetch_timestamp: datetime = Field(..., description="When the payload was stored (timezone-aware UTC).")


# =========================
# Wrappers
# =========================

# Inner compression applied to a tarball before entries are scanned.
CompressionKind = Literal["none", "gzip", "bzip2"]


__all__ = [
    "FetchPolicy",
    "Locator",
    "CacheEntry",
    "CompressionKind",
]
