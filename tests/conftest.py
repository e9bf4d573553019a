# tests/conftest.py
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from anydata.core.fetch.cache import CacheStore
from anydata.core.registry import FetchContext, set_default_context
from anydata.schemas.models import FetchPolicy
from tests.utils import FakeFtpServer, FakeHttp


# -------- Isolation: never leak a process-default context between tests --------
@pytest.fixture(autouse=True)
def _reset_default_context():
    set_default_context(None)
    yield
    set_default_context(None)


# -------- Policy / cache / context --------
@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def policy(cache_dir: Path) -> FetchPolicy:
    return FetchPolicy(cache_dir=cache_dir, max_age_days=7, user_agent="UnitTest/0.1")


@pytest.fixture
def cache(policy: FetchPolicy) -> CacheStore:
    store = CacheStore(policy.cache_dir, policy.max_age_days)
    store.init(policy.cache_dir, policy.max_age_days)
    return store


@pytest.fixture
def ctx(policy: FetchPolicy, cache: CacheStore) -> FetchContext:
    """Context with the built-in registries bound to a tmp cache."""
    return FetchContext.with_defaults(policy, cache=cache)


# -------- Transport fakes --------
@pytest.fixture
def fake_http(monkeypatch) -> FakeHttp:
    """
    Replace requests.get inside the HTTP fetcher.

    Usage:
        fake_http.add("http://host/a.gz", gzip_bytes(b"..."))
        ...
        assert len(fake_http.calls) == 1
    """
    fake = FakeHttp()
    monkeypatch.setattr("anydata.core.fetch.http.requests.get", fake)
    return fake


@pytest.fixture
def ftp_server(monkeypatch) -> FakeFtpServer:
    """Replace ftplib.FTP inside the FTP fetcher with an in-memory server."""
    server = FakeFtpServer()
    monkeypatch.setattr("anydata.core.fetch.ftp.FTP", server.factory())
    return server


@pytest.fixture
def debug_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="anydata")
    return caplog
