"""Plugin artifact management for aptgen.

This module handles downloading, caching and resolving the artifacts the
annotation processors run with.
"""

from .cache import Cache
from .downloader import ArtifactDownloader, ArtifactResolver, ChecksumError, DownloadError

__all__ = [
    "Cache",
    "ArtifactDownloader",
    "ArtifactResolver",
    "DownloadError",
    "ChecksumError",
]
