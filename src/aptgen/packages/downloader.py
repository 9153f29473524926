"""Artifact downloader with progress tracking and checksum verification.

This module downloads plugin artifacts (processor jars) from URLs and
resolves configured artifact locations to files on disk.
"""

import hashlib
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests
from tqdm import tqdm

from ..project.model import Artifact
from .cache import Cache

logger = logging.getLogger(__name__)


class DownloadError(Exception):
    """Raised when download fails."""

    pass


class ChecksumError(Exception):
    """Raised when checksum verification fails."""

    pass


class ArtifactDownloader:
    """Downloads artifacts with progress tracking."""

    def __init__(self, chunk_size: int = 8192):
        """Initialize downloader.

        Args:
            chunk_size: Size of chunks for downloading and hashing
        """
        self.chunk_size = chunk_size

    def download(
        self,
        url: str,
        dest_path: Path,
        checksum: Optional[str] = None,
        show_progress: bool = True,
    ) -> Path:
        """Download a file from a URL.

        Args:
            url: URL to download from
            dest_path: Destination file path
            checksum: Optional SHA256 checksum for verification
            show_progress: Whether to show progress bar

        Returns:
            Path to the downloaded file

        Raises:
            DownloadError: If download fails
            ChecksumError: If checksum verification fails
        """
        dest_path = Path(dest_path)
        dest_path.parent.mkdir(parents=True, exist_ok=True)

        # Use temporary file during download
        temp_file = dest_path.with_suffix(dest_path.suffix + ".tmp")

        try:
            response = requests.get(url, stream=True, timeout=30)
            response.raise_for_status()

            total_size = int(response.headers.get("content-length", 0))

            progress_bar = None
            if show_progress and total_size > 0:
                progress_bar = tqdm(
                    total=total_size,
                    unit="B",
                    unit_scale=True,
                    unit_divisor=1024,
                    desc=f"Downloading {dest_path.name}",
                )

            sha256 = hashlib.sha256() if checksum else None

            with open(temp_file, "wb") as f:
                for chunk in response.iter_content(chunk_size=self.chunk_size):
                    if chunk:
                        f.write(chunk)
                        if progress_bar:
                            progress_bar.update(len(chunk))
                        if sha256:
                            sha256.update(chunk)

            if progress_bar:
                progress_bar.close()

            if checksum and sha256:
                actual_checksum = sha256.hexdigest()
                if actual_checksum.lower() != checksum.lower():
                    temp_file.unlink()
                    raise ChecksumError(
                        f"Checksum mismatch for {url}\n"
                        + f"Expected: {checksum}\n"
                        + f"Got: {actual_checksum}"
                    )

            temp_file.replace(dest_path)
            return dest_path

        except requests.RequestException as e:
            if temp_file.exists():
                temp_file.unlink()
            raise DownloadError(f"Failed to download {url}: {e}") from e

        except Exception:
            if temp_file.exists():
                temp_file.unlink()
            raise


class ArtifactResolver:
    """Resolves plugin artifact locations to files.

    Locations are either local paths (relative to the project directory) or
    http(s) URLs. URLs are downloaded once into the cache. A location may
    carry a SHA256 checksum after a '#sha256=' fragment.

    Example usage:
        resolver = ArtifactResolver(Cache(project_dir))
        artifact = resolver.resolve("https://repo.example.org/processor-1.0.jar")
        print(artifact.file)
    """

    def __init__(
        self,
        cache: Cache,
        downloader: Optional[ArtifactDownloader] = None,
        show_progress: bool = True,
    ):
        """Initialize resolver.

        Args:
            cache: Cache providing the artifact directory
            downloader: Downloader for URL artifacts
            show_progress: Whether to show download progress
        """
        self.cache = cache
        self.downloader = downloader or ArtifactDownloader()
        self.show_progress = show_progress

    @staticmethod
    def is_url(location: str) -> bool:
        return urlparse(location).scheme in ("http", "https")

    def resolve(self, location: str) -> Artifact:
        """Resolve an artifact location.

        Args:
            location: Local path or URL

        Returns:
            Artifact whose file is None if a local path does not exist

        Raises:
            DownloadError: If a URL artifact cannot be downloaded
            ChecksumError: If a downloaded artifact fails verification
        """
        if self.is_url(location):
            return Artifact(location=location, file=self._resolve_url(location))

        path = Path(location)
        if not path.is_absolute():
            path = self.cache.project_dir / path

        if not path.exists():
            logger.warning(f"Plugin artifact not found, skipping: {location}")
            return Artifact(location=location, file=None)

        return Artifact(location=location, file=path.resolve())

    def _resolve_url(self, location: str) -> Path:
        url, _, fragment = location.partition("#")
        checksum = None
        if fragment.startswith("sha256="):
            checksum = fragment[len("sha256="):]

        filename = Path(urlparse(url).path).name or "artifact.jar"
        artifact_path = self.cache.get_artifact_path(url, filename)

        if self.cache.is_artifact_cached(url, filename):
            logger.debug(f"Using cached {filename}")
            return artifact_path

        self.cache.ensure_directories()
        logger.info(f"Downloading plugin artifact {url}")
        return self.downloader.download(url, artifact_path, checksum, self.show_progress)
