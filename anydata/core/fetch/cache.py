# anydata/core/fetch/cache.py
"""
Content-addressed on-disk cache for fetched payloads.

Layout (under cache_dir/):
  - cacheinfo.json   mapping base resource -> {"local_path", "fetch_timestamp"}
  - <sha256(base)>   one payload file per cached base resource

The cache is best-effort: read and write failures are logged and swallowed,
never raised to the fetchers that use it.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import datetime, timedelta, timezone
from hashlib import sha256 as _sha256lib
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from anydata.core.locator import strip_fragment
from anydata.schemas.models import CacheEntry

from .errors import CacheDegradedError

logger = logging.getLogger(__name__)

INDEX_NAME = "cacheinfo.json"
DEFAULT_CACHE_DIR = Path("cache")
DEFAULT_MAX_AGE_DAYS = 7

_INDEX_ADAPTER = TypeAdapter(dict[str, CacheEntry])


def _sha256(data: bytes | str) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8", errors="ignore")
    return _sha256lib(data).hexdigest()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(ts: datetime) -> datetime:
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def _write_atomic(path: Path, data: bytes) -> None:
    with tempfile.NamedTemporaryFile(prefix="dl_", suffix=".part", delete=False, dir=str(path.parent)) as tf:
        tmp_path = Path(tf.name)
        tf.write(data)
    try:
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


class CacheStore:
    """
    Disk-backed index of fetched base resources.

    Keys are base resources (the locator with its `#member` fragment stripped), so
    every member requested from one archive shares a single cached payload.

    The store initializes itself lazily with `cache_dir` and `max_age_days` the
    first time `get`/`put` is called, unless `init()` was called explicitly.
    """

    def __init__(self, cache_dir: Path | str = DEFAULT_CACHE_DIR, max_age_days: int = DEFAULT_MAX_AGE_DAYS) -> None:
        self._cache_dir = Path(cache_dir)
        self._max_age = timedelta(days=max(int(max_age_days), 1))
        self._entries: dict[str, CacheEntry] | None = None

    # -------------------------
    # Lifecycle
    # -------------------------

    def init(self, cache_dir: Path | str, max_age_days: int) -> None:
        """
        (Re)initialize from `cache_dir`/cacheinfo.json. Creates the directory if missing.
        An unreadable or corrupt index starts an empty cache; this never raises.
        """
        self._cache_dir = Path(cache_dir)
        self._max_age = timedelta(days=max(int(max_age_days), 1))
        self._entries = self._load_index()

    def _load_index(self) -> dict[str, CacheEntry]:
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("%s", CacheDegradedError(f"cannot create cache dir {self._cache_dir}: {e}"))
            return {}

        index = self.index_path
        if not index.exists():
            return {}
        try:
            return _INDEX_ADAPTER.validate_json(index.read_bytes())
        except (OSError, ValidationError, ValueError) as e:
            logger.warning("%s", CacheDegradedError(f"ignoring unreadable cache index {index}: {e}"))
            return {}

    def _ensure_init(self) -> dict[str, CacheEntry]:
        if self._entries is None:
            self._entries = self._load_index()
        return self._entries

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def index_path(self) -> Path:
        return self._cache_dir / INDEX_NAME

    @property
    def max_age(self) -> timedelta:
        return self._max_age

    @property
    def max_age_days(self) -> int:
        return self._max_age.days

    @property
    def initialized(self) -> bool:
        return self._entries is not None

    def entries(self) -> dict[str, CacheEntry]:
        """Snapshot of the in-memory index."""
        return dict(self._ensure_init())

    def __len__(self) -> int:
        return len(self._ensure_init())

    def __contains__(self, resource: object) -> bool:
        return isinstance(resource, str) and strip_fragment(resource) in self._ensure_init()

    # -------------------------
    # Lookups
    # -------------------------

    def local_name(self, resource: str) -> str:
        """Deterministic payload file name for the base of `resource`."""
        return _sha256(strip_fragment(resource))

    def is_stale(self, entry: CacheEntry, now: datetime | None = None) -> bool:
        age = (now or _utcnow()) - _as_utc(entry.fetch_timestamp)
        return age > self._max_age

    def get(self, resource: str) -> bytes | None:
        """
        Return the cached payload for the base of `resource`, or None when there is
        no entry, the entry is older than the max age, or the payload cannot be read.
        Stale entries are left in place.
        """
        entries = self._ensure_init()
        key = strip_fragment(resource)
        entry = entries.get(key)
        if entry is None:
            return None

        now = _utcnow()
        if self.is_stale(entry, now):
            age_h = int((now - _as_utc(entry.fetch_timestamp)).total_seconds() // 3600)
            logger.info("Cached copy of %s is too old (%dh)", key, age_h)
            return None

        try:
            data = (self._cache_dir / entry.local_name).read_bytes()
        except OSError as e:
            logger.warning("%s", CacheDegradedError(f"cannot read cached payload for {key}: {e}"))
            return None

        logger.debug("Cache hit for %s", key)
        return data

    # -------------------------
    # Writes
    # -------------------------

    def put(self, resource: str, data: bytes) -> None:
        """
        Store `data` for the base of `resource` and persist the whole index immediately.
        Failures are logged and ignored.
        """
        entries = self._ensure_init()
        key = strip_fragment(resource)
        name = self.local_name(key)

        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            _write_atomic(self._cache_dir / name, data)
        except OSError as e:
            logger.warning("%s", CacheDegradedError(f"cannot write cached payload for {key}: {e}"))
            return

        entries[key] = CacheEntry(local_name=name, fetch_timestamp=_utcnow())
        self._save_index(entries)

    def _save_index(self, entries: dict[str, CacheEntry]) -> None:
        try:
            doc = _INDEX_ADAPTER.dump_json(entries, by_alias=True)
            _write_atomic(self.index_path, doc)
        except (OSError, ValueError) as e:
            logger.warning("%s", CacheDegradedError(f"cannot write cache index {self.index_path}: {e}"))


__all__ = [
    "CacheStore",
    "INDEX_NAME",
    "DEFAULT_CACHE_DIR",
    "DEFAULT_MAX_AGE_DAYS",
    "_sha256",
]
