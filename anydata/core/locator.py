# anydata/core/locator.py
"""
Split resource strings into (base, path, member).

URL syntax is preferred: when the string parses as a URL its path component is
used for suffix detection and its fragment names the archive member. Strings
that do not parse fall back to a plain split on the first '#'.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from anydata.schemas.models import Locator


def strip_fragment(resource: str) -> str:
    """Return `resource` without its `#member` part. Works on URLs and bare paths alike."""
    return resource.split("#", 1)[0]


def parse_locator(resource: str) -> Locator:
    """
    Parse `resource` into a Locator. Never raises; malformed input degrades to
    "whole string is the path, no member".
    """
    base = strip_fragment(resource)
    try:
        parts = urlsplit(resource)
    except ValueError:
        # e.g. unbalanced IPv6 brackets in the netloc
        if "#" in resource:
            main, member = resource.split("#", 1)
            return Locator(resource=resource, base=main, path=main, member=member)
        return Locator(resource=resource, base=resource, path=resource, member="")

    return Locator(resource=resource, base=base, path=parts.path, member=parts.fragment)


__all__ = ["parse_locator", "strip_fragment"]
