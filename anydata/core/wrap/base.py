# anydata/core/wrap/base.py
"""
Shared delegation for wrapped fetchers.

A WrappedFetcher exclusively owns one inner Fetcher. `fetch` and `close` pass
straight through; subclasses only transform the inner stream in `get_reader`.
Chains of wrappers form a singly-linked decorator stack.
"""

from __future__ import annotations

from typing import BinaryIO

from anydata.core.fetch.base import Fetcher


class WrappedFetcher(Fetcher):
    def __init__(self, inner: Fetcher, member: str = "") -> None:
        self._inner = inner
        self._member = member

    @property
    def inner(self) -> Fetcher:
        return self._inner

    @property
    def member(self) -> str:
        return self._member

    def detect(self, resource: str) -> bool:
        # wrapped fetchers are produced by resolution, never selected by it
        return False

    def fetch(self, resource: str) -> None:
        self._inner.fetch(resource)

    def _inner_reader(self) -> BinaryIO:
        return self._inner.get_reader()

    def close(self) -> None:
        self._inner.close()

    def chain(self) -> list[Fetcher]:
        """This fetcher followed by every fetcher it wraps, outermost first."""
        out: list[Fetcher] = [self]
        node: Fetcher = self._inner
        while isinstance(node, WrappedFetcher):
            out.append(node)
            node = node.inner
        out.append(node)
        return out


__all__ = ["WrappedFetcher"]
