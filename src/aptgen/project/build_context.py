"""Build contexts and change-aware directory scanners.

A build context hands out scanners for a base directory. The default
context reports every file matching the include patterns; the incremental
context only reports files that changed since the last committed build.

Include patterns use Ant-style syntax:
    **   matches zero or more whole path segments
    *    matches any characters inside a single segment
    ?    matches exactly one character inside a segment

Incremental state file layout (JSON):
    {
        "version": 2,
        "keys": {"/abs/src/main/java": "<settings digest>"},
        "files": {
            "/abs/path/Foo.java": {"size": 120, "mtime_ns": ..., "sha256": "..."}
        }
    }
"""

import hashlib
import json
import logging
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Pattern, Sequence, Set

logger = logging.getLogger(__name__)

STATE_VERSION = 2


def compile_include_pattern(pattern: str) -> Pattern[str]:
    """Translate an Ant-style include pattern into a regular expression.

    Args:
        pattern: Pattern such as "com/example/**/*.java"

    Returns:
        Compiled regex matching relative POSIX paths

    Example:
        >>> bool(compile_include_pattern("a/**/*.java").fullmatch("a/b/C.java"))
        True
    """
    segments = pattern.replace("\\", "/").strip("/").split("/")
    regex = ""
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == "**":
            regex += ".*" if last else "(?:[^/]+/)*"
            continue

        for char in segment:
            if char == "*":
                regex += "[^/]*"
            elif char == "?":
                regex += "[^/]"
            else:
                regex += re.escape(char)
        if not last:
            regex += "/"
    return re.compile(regex)


class DirectoryScanner:
    """Scans a base directory for files matching include patterns.

    Example usage:
        scanner = DirectoryScanner(Path("src/main/java"))
        scanner.set_includes(["**/*.java"])
        scanner.scan()
        for relative in scanner.get_included_files():
            print(relative)
    """

    def __init__(self, basedir: Path):
        """Initialize scanner.

        Args:
            basedir: Directory to scan
        """
        self.basedir = Path(basedir)
        self.includes: List[str] = ["**"]
        self._included_files: List[str] = []

    def set_includes(self, includes: Sequence[str]) -> None:
        """Replace the include patterns.

        Args:
            includes: Ant-style patterns relative to the base directory
        """
        self.includes = list(includes)

    def scan(self) -> None:
        """Walk the base directory and collect the included files."""
        matchers = [compile_include_pattern(include) for include in self.includes]
        included = []

        if not self.basedir.is_dir():
            logger.debug(f"Scan base directory does not exist: {self.basedir}")
            self._included_files = []
            return

        for root, dirs, files in os.walk(self.basedir):
            dirs.sort()
            for name in sorted(files):
                relative = (Path(root) / name).relative_to(self.basedir).as_posix()
                if any(matcher.fullmatch(relative) for matcher in matchers):
                    if self._accept(relative):
                        included.append(relative)

        self._included_files = included

    def _accept(self, relative: str) -> bool:
        """Decide whether a matching file is reported.

        Args:
            relative: Path relative to the base directory

        Returns:
            True to report the file
        """
        return True

    def get_included_files(self) -> List[str]:
        """Get the files found by the last scan.

        Returns:
            Relative POSIX paths, sorted
        """
        return list(self._included_files)

    def get_basedir(self) -> Path:
        """Get the scan base directory."""
        return self.basedir


class IBuildContext(ABC):
    """Interface for build contexts."""

    @abstractmethod
    def new_scanner(self, basedir: Path) -> DirectoryScanner:
        """Create a scanner for a base directory.

        Args:
            basedir: Directory to scan

        Returns:
            Scanner bound to the directory
        """
        pass

    @abstractmethod
    def refresh(self, path: Path) -> None:
        """Notify the context that files under a path changed.

        Args:
            path: Directory or file that changed
        """
        pass

    @abstractmethod
    def is_incremental(self) -> bool:
        """Check whether scanners only report changed files."""
        pass

    def set_build_key(self, basedir: Path, key: str, output_missing: bool = False) -> None:
        """Record the settings the next scan of a base directory is made for.

        Incremental contexts report every file under basedir when the key
        differs from the committed one or the output is missing.

        Args:
            basedir: Directory the next scanner is created for
            key: Digest of the settings that shape the generated output
            output_missing: True if the generated output directory is gone
        """
        pass


class DefaultBuildContext(IBuildContext):
    """Full build context: every matching file is reported."""

    def __init__(self):
        self.refreshed: List[Path] = []

    def new_scanner(self, basedir: Path) -> DirectoryScanner:
        return DirectoryScanner(basedir)

    def refresh(self, path: Path) -> None:
        logger.debug(f"Refreshed {path}")
        self.refreshed.append(Path(path))

    def is_incremental(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "DefaultBuildContext()"


class FileFingerprint:
    """Size, modification time and content hash of a source file."""

    def __init__(self, size: int, mtime_ns: int, sha256: str):
        self.size = size
        self.mtime_ns = mtime_ns
        self.sha256 = sha256

    @classmethod
    def of(cls, path: Path) -> "FileFingerprint":
        """Fingerprint a file on disk.

        Args:
            path: File to fingerprint

        Returns:
            FileFingerprint for the current file contents
        """
        stat = path.stat()
        digest = hashlib.sha256()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                digest.update(chunk)
        return cls(stat.st_size, stat.st_mtime_ns, digest.hexdigest())

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "FileFingerprint":
        return cls(int(data["size"]), int(data["mtime_ns"]), str(data["sha256"]))

    def to_dict(self) -> Dict[str, object]:
        return {"size": self.size, "mtime_ns": self.mtime_ns, "sha256": self.sha256}

    def same_content(self, other: "FileFingerprint") -> bool:
        return self.size == other.size and self.sha256 == other.sha256


class IncrementalScanner(DirectoryScanner):
    """Scanner that only reports files changed since the last commit.

    A stale scanner reports every matching file, but still records their
    fingerprints.
    """

    def __init__(self, basedir: Path, context: "IncrementalBuildContext", stale: bool = False):
        super().__init__(basedir)
        self.context = context
        self.stale = stale

    def _accept(self, relative: str) -> bool:
        path = (self.basedir / relative).resolve()
        changed = self.context.has_changed(path)
        return changed or self.stale


class IncrementalBuildContext(IBuildContext):
    """Build context that tracks file fingerprints between builds.

    Scanners record the fingerprint of every file they report; commit()
    persists them so the next build skips unchanged files. Callers commit
    only after a successful run, so failed files are reported again.

    Each scanned base directory also keeps the build key it was last
    committed with. A different key, or a missing output directory, makes
    the next scan of that directory report every file.
    """

    def __init__(self, state_file: Path):
        """Initialize incremental context.

        Args:
            state_file: JSON file holding the committed fingerprints
        """
        self.state_file = Path(state_file)
        self.refreshed: List[Path] = []
        self._committed: Dict[str, FileFingerprint] = {}
        self._committed_keys: Dict[str, str] = {}
        self._load_state()
        self._pending: Dict[str, FileFingerprint] = {}
        self._pending_keys: Dict[str, str] = {}
        self._stale: Set[str] = set()

    def _load_state(self) -> None:
        """Load committed fingerprints and build keys, ignoring unreadable state."""
        if not self.state_file.exists():
            return

        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
            if data.get("version") != STATE_VERSION:
                logger.info(f"Ignoring build state with unknown version: {self.state_file}")
                return
            files = {
                path: FileFingerprint.from_dict(entry)
                for path, entry in data.get("files", {}).items()
            }
            keys = {str(basedir): str(key) for basedir, key in data.get("keys", {}).items()}
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to load build state {self.state_file}: {e}")
            return

        self._committed = files
        self._committed_keys = keys

    @staticmethod
    def _basedir_key(basedir: Path) -> str:
        return str(Path(basedir).resolve())

    def set_build_key(self, basedir: Path, key: str, output_missing: bool = False) -> None:
        name = self._basedir_key(basedir)
        self._pending_keys[name] = key

        if output_missing:
            logger.info(f"Generated output is missing, processing all sources in {basedir}")
            self._stale.add(name)
        elif self._committed_keys.get(name) != key:
            if name in self._committed_keys:
                logger.info(f"Processor settings changed, processing all sources in {basedir}")
            self._stale.add(name)
        else:
            self._stale.discard(name)

    def has_changed(self, path: Path) -> bool:
        """Check whether a file differs from its committed fingerprint.

        The file is only hashed when its size or modification time differ
        from the committed fingerprint.

        Args:
            path: Absolute file path

        Returns:
            True if the file is new or its content changed
        """
        name = str(path)
        previous = self._committed.get(name)

        stat = path.stat()
        if (
            previous is not None
            and previous.mtime_ns == stat.st_mtime_ns
            and previous.size == stat.st_size
        ):
            self._pending[name] = previous
            return False

        current = FileFingerprint.of(path)
        self._pending[name] = current
        if previous is None:
            return True
        return not previous.same_content(current)

    def new_scanner(self, basedir: Path) -> DirectoryScanner:
        stale = self._basedir_key(basedir) in self._stale
        return IncrementalScanner(basedir, self, stale=stale)

    def refresh(self, path: Path) -> None:
        logger.debug(f"Refreshed {path}")
        self.refreshed.append(Path(path))

    def is_incremental(self) -> bool:
        return True

    def commit(self) -> None:
        """Persist the fingerprints and build keys recorded since the last commit."""
        self._committed.update(self._pending)
        self._committed_keys.update(self._pending_keys)
        self._pending = {}
        self._pending_keys = {}
        self._stale = set()

        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "version": STATE_VERSION,
            "keys": dict(sorted(self._committed_keys.items())),
            "files": {path: fp.to_dict() for path, fp in sorted(self._committed.items())},
        }
        temp_file = self.state_file.with_suffix(self.state_file.suffix + ".tmp")
        temp_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        temp_file.replace(self.state_file)
        logger.debug(f"Committed build state for {len(self._committed)} files")

    def __repr__(self) -> str:
        return f"IncrementalBuildContext(state_file={self.state_file!r})"


def create_build_context(state_file: Optional[Path], incremental: bool = True) -> IBuildContext:
    """Create the build context for a run.

    Args:
        state_file: Incremental state file (ignored for full builds)
        incremental: Whether to skip unchanged files

    Returns:
        IncrementalBuildContext or DefaultBuildContext
    """
    if incremental and state_file is not None:
        return IncrementalBuildContext(state_file)
    return DefaultBuildContext()
