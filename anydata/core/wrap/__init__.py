# anydata/core/wrap/__init__.py
from .archive import TarballWrapper, TarMemberFetcher, ZipMemberFetcher, ZipWrapper, tar_compression
from .base import WrappedFetcher
from .compress import Bzip2Fetcher, Bzip2Wrapper, GzipFetcher, GzipWrapper

__all__ = [
    "WrappedFetcher",
    "GzipWrapper",
    "Bzip2Wrapper",
    "ZipWrapper",
    "TarballWrapper",
    "GzipFetcher",
    "Bzip2Fetcher",
    "ZipMemberFetcher",
    "TarMemberFetcher",
    "tar_compression",
]
