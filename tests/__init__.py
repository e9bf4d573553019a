# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import tar_bytes, zip_bytes, FakeHttp
"""

from .utils import FakeFtpServer, FakeHttp, bz2_bytes, gzip_bytes, tar_bytes, zip_bytes

__all__ = ["tar_bytes", "zip_bytes", "gzip_bytes", "bz2_bytes", "FakeHttp", "FakeFtpServer"]
