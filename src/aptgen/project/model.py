"""Project model for annotation processing runs.

This module defines the view of the host project that the annotation
processors need:
- Listing classpath elements for the compile or test scope
- Registering generated source roots
- Describing plugin artifacts (processor jars) that join the classpath
"""

import glob
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

COMPILE_SCOPE = "compile"
TEST_SCOPE = "test"


class DependencyResolutionError(Exception):
    """Raised when classpath elements cannot be resolved."""

    pass


@dataclass
class Artifact:
    """A plugin artifact that is appended to the processing classpath.

    Attributes:
        location: Location as configured (local path or URL)
        file: Resolved file on disk, or None if it is not available
    """

    location: str
    file: Optional[Path] = None


class IProjectModel(ABC):
    """Interface for the host project model.

    The annotation processors query it for classpath elements and mutate it
    to register the generated source directory.
    """

    @abstractmethod
    def get_classpath_elements(self, scope: str) -> List[str]:
        """Get the ordered classpath elements for a scope.

        Args:
            scope: Either "compile" or "test"

        Returns:
            Ordered list of path strings

        Raises:
            DependencyResolutionError: If an element cannot be resolved
        """
        pass

    @abstractmethod
    def add_compile_source_root(self, path: str) -> None:
        """Register an additional main source root.

        Args:
            path: Absolute path of the source root
        """
        pass

    @abstractmethod
    def add_test_compile_source_root(self, path: str) -> None:
        """Register an additional test source root.

        Args:
            path: Absolute path of the source root
        """
        pass


class ProjectModel(IProjectModel):
    """Project model backed by the classpath entries of aptgen.ini.

    Classpath entries are paths or glob patterns relative to the project
    directory. Glob patterns expand in sorted order and may match nothing;
    plain entries must exist on disk.

    Example usage:
        project = ProjectModel(
            project_dir=Path("."),
            classpath=["lib/*.jar", "target/classes"],
            test_classpath=["lib/test/*.jar"],
        )
        elements = project.get_classpath_elements("compile")
    """

    def __init__(
        self,
        project_dir: Path,
        classpath: Optional[Sequence[str]] = None,
        test_classpath: Optional[Sequence[str]] = None,
        compile_source_roots: Optional[Sequence[str]] = None,
        test_compile_source_roots: Optional[Sequence[str]] = None,
    ):
        """Initialize project model.

        Args:
            project_dir: Project root directory
            classpath: Compile scope classpath entries
            test_classpath: Test-only classpath entries
            compile_source_roots: Initial main source roots
            test_compile_source_roots: Initial test source roots
        """
        self.project_dir = Path(project_dir).resolve()
        self.classpath = list(classpath or [])
        self.test_classpath = list(test_classpath or [])
        self.compile_source_roots: List[str] = list(compile_source_roots or [])
        self.test_compile_source_roots: List[str] = list(test_compile_source_roots or [])

    def get_classpath_elements(self, scope: str) -> List[str]:
        if scope == COMPILE_SCOPE:
            entries = self.classpath
        elif scope == TEST_SCOPE:
            entries = self.test_classpath + self.classpath
        else:
            raise ValueError(f"Unknown classpath scope: {scope}")

        elements: List[str] = []
        for entry in entries:
            for element in self._resolve_entry(entry):
                if element not in elements:
                    elements.append(element)
        return elements

    def _resolve_entry(self, entry: str) -> List[str]:
        """Resolve one classpath entry to absolute path strings.

        Args:
            entry: Path or glob pattern, relative to the project directory

        Returns:
            List of absolute path strings

        Raises:
            DependencyResolutionError: If a plain entry does not exist
        """
        path = Path(entry)
        if not path.is_absolute():
            path = self.project_dir / path

        if glob.has_magic(entry):
            return sorted(str(Path(match).resolve()) for match in glob.glob(str(path)))

        if not path.exists():
            raise DependencyResolutionError(
                f"Classpath element could not be resolved: {entry} ({path})"
            )
        return [str(path.resolve())]

    def add_compile_source_root(self, path: str) -> None:
        if path not in self.compile_source_roots:
            self.compile_source_roots.append(path)
            logger.debug(f"Added compile source root: {path}")

    def add_test_compile_source_root(self, path: str) -> None:
        if path not in self.test_compile_source_roots:
            self.test_compile_source_roots.append(path)
            logger.debug(f"Added test compile source root: {path}")
