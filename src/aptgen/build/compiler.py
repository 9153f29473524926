"""Abstract base classes for the Java compiler boundary.

This module defines the narrow interface the annotation processors use to
talk to a compiler, so the file selection and option assembly can be tested
without a JDK.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, TextIO


class CompilationError(Exception):
    """Base exception for compilation errors."""
    pass


class IFileManager(ABC):
    """Interface for compiler file managers."""

    @abstractmethod
    def get_java_file_objects_from_files(self, files: Iterable[Path]) -> List[Path]:
        """Convert source files into compilation units.

        Args:
            files: Source files to compile

        Returns:
            Compilation units accepted by get_task()

        Raises:
            CompilationError: If a file cannot be used
        """
        pass


class ICompilationTask(ABC):
    """Interface for a prepared compilation task."""

    @abstractmethod
    def call(self) -> bool:
        """Run the task.

        Returns:
            True if the compiler reported success
        """
        pass


class ICompiler(ABC):
    """Interface for Java compilers.

    This interface mirrors the batch compile-task API:
    - get_standard_file_manager() for turning files into compilation units
    - get_task() for preparing a run with options and a diagnostic sink
    """

    @abstractmethod
    def get_standard_file_manager(self) -> IFileManager:
        """Get a file manager for this compiler."""
        pass

    @abstractmethod
    def get_task(
        self,
        out: Optional[TextIO],
        file_manager: IFileManager,
        options: List[str],
        compilation_units: List[Path]
    ) -> ICompilationTask:
        """Prepare a compilation task.

        Args:
            out: Writer for diagnostics, or None to stream them to the console
            file_manager: File manager that produced the compilation units
            options: Compiler arguments
            compilation_units: Units returned by the file manager

        Returns:
            Task ready to be called
        """
        pass
