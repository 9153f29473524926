"""Cache management for aptgen.

This module provides the directory layout for downloaded plugin artifacts,
incremental build state and logs.

Cache Structure:
    .aptgen/
    ├── cache/
    │   └── artifacts/
    │       └── {url_hash}/         # SHA256 hash of artifact URL
    │           └── {filename}      # Downloaded jar
    ├── build/
    │   └── state.json              # Incremental build fingerprints
    └── aptgen.log                  # Rotating log file

Using the URL hash keeps artifacts with the same file name from different
sources apart.
"""

import hashlib
import os
import shutil
from pathlib import Path
from typing import Optional


class Cache:
    """Manages the aptgen cache directory structure.

    The cache can be located in the project directory (.aptgen/) or in a
    global location specified by the APTGEN_CACHE_DIR environment variable.
    Build state and logs always stay in the project directory.
    """

    def __init__(self, project_dir: Optional[Path] = None):
        """Initialize cache manager.

        Args:
            project_dir: Project directory. If None, uses current directory.
        """
        if project_dir is None:
            project_dir = Path.cwd()

        self.project_dir = Path(project_dir).resolve()
        self.aptgen_dir = self.project_dir / ".aptgen"

        # Check for environment variable override
        cache_env = os.environ.get("APTGEN_CACHE_DIR")
        if cache_env:
            self.cache_root = Path(cache_env).resolve()
        else:
            self.cache_root = self.aptgen_dir / "cache"

        self.build_root = self.aptgen_dir / "build"

    @staticmethod
    def hash_url(url: str) -> str:
        """Generate a SHA256 hash of a URL for cache directory naming.

        Args:
            url: The artifact URL to hash

        Returns:
            First 16 characters of SHA256 hash (sufficient for uniqueness)
        """
        return hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]

    @property
    def artifacts_dir(self) -> Path:
        """Directory for downloaded plugin artifacts."""
        return self.cache_root / "artifacts"

    @property
    def state_file(self) -> Path:
        """Incremental build state file."""
        return self.build_root / "state.json"

    @property
    def log_file(self) -> Path:
        """Log file for CLI runs."""
        return self.aptgen_dir / "aptgen.log"

    def get_artifact_path(self, url: str, filename: str) -> Path:
        """Get path where a downloaded artifact is stored.

        Args:
            url: Artifact URL
            filename: File name of the artifact (e.g., 'processor-1.0.jar')

        Returns:
            Path to the cached artifact
        """
        return self.artifacts_dir / self.hash_url(url) / filename

    def is_artifact_cached(self, url: str, filename: str) -> bool:
        """Check if an artifact is already downloaded."""
        return self.get_artifact_path(url, filename).exists()

    def ensure_directories(self) -> None:
        """Create cache and build directories if they don't exist."""
        for directory in [self.artifacts_dir, self.build_root]:
            directory.mkdir(parents=True, exist_ok=True)

    def clean_build(self) -> None:
        """Remove the incremental build state."""
        if self.build_root.exists():
            shutil.rmtree(self.build_root)
