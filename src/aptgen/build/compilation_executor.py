"""Java Compilation Executor.

This module runs javac via subprocess and locates the system compiler.

Design:
    - Looks up javac in $JAVA_HOME/bin first, then on PATH
    - Writes the source list to an argument file (avoids command line
      length limits)
    - Streams diagnostics to the console or captures them into a writer
"""

import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from .compiler import CompilationError, ICompilationTask, ICompiler, IFileManager

logger = logging.getLogger(__name__)


class StandardFileManager(IFileManager):
    """File manager that maps source files to absolute paths."""

    def get_java_file_objects_from_files(self, files: Iterable[Path]) -> List[Path]:
        units = []
        for source_path in files:
            source_path = Path(source_path)
            if not source_path.exists():
                raise CompilationError(f"Source file not found: {source_path}")
            units.append(source_path.resolve())
        return sorted(units)


class JavacCompilationTask(ICompilationTask):
    """A single javac invocation."""

    def __init__(
        self,
        javac_path: Path,
        options: List[str],
        compilation_units: List[Path],
        out: Optional[TextIO] = None
    ):
        """Initialize compilation task.

        Args:
            javac_path: Path to javac executable
            options: Compiler arguments
            compilation_units: Source files to process
            out: Writer for captured diagnostics, or None to stream them
        """
        self.javac_path = javac_path
        self.options = list(options)
        self.compilation_units = list(compilation_units)
        self.out = out

    def call(self) -> bool:
        with tempfile.TemporaryDirectory(prefix="aptgen-") as temp_dir:
            response_file = self._write_response_file(Path(temp_dir))

            cmd = [str(self.javac_path)]
            cmd.extend(self.options)
            cmd.append(f"@{response_file}")

            logger.debug(f"Running {' '.join(cmd)}")

            try:
                if self.out is None:
                    result = subprocess.run(cmd)
                else:
                    result = subprocess.run(
                        cmd,
                        stdout=subprocess.PIPE,
                        stderr=subprocess.STDOUT,
                        text=True,
                    )
                    if result.stdout:
                        self.out.write(result.stdout)
            except OSError as e:
                raise CompilationError(f"Failed to run {self.javac_path}: {e}") from e

        return result.returncode == 0

    def _write_response_file(self, directory: Path) -> Path:
        """Write the source files to a javac argument file.

        Args:
            directory: Directory for the argument file

        Returns:
            Path to generated argument file
        """
        response_file = directory / "sources.txt"
        lines = []
        for unit in self.compilation_units:
            escaped = str(unit).replace("\\", "\\\\").replace('"', '\\"')
            lines.append(f'"{escaped}"')

        with open(response_file, "w", encoding="utf-8") as f:
            f.write("\n".join(lines))

        return response_file


class JavacCompiler(ICompiler):
    """Compiler backed by a javac executable."""

    def __init__(self, javac_path: Path):
        """Initialize compiler.

        Args:
            javac_path: Path to javac executable

        Raises:
            CompilationError: If javac does not exist
        """
        self.javac_path = Path(javac_path)
        if not self.javac_path.exists():
            raise CompilationError(f"javac not found: {self.javac_path}")

    def get_standard_file_manager(self) -> IFileManager:
        return StandardFileManager()

    def get_task(
        self,
        out: Optional[TextIO],
        file_manager: IFileManager,
        options: List[str],
        compilation_units: List[Path]
    ) -> ICompilationTask:
        return JavacCompilationTask(self.javac_path, options, compilation_units, out)

    def __repr__(self) -> str:
        return f"JavacCompiler({str(self.javac_path)!r})"


class JavaCompilerProvider:
    """Locates the system Java compiler."""

    @staticmethod
    def find_javac() -> Optional[Path]:
        """Find the javac executable.

        Searches:
        1. $JAVA_HOME/bin/javac (javac.exe on Windows)
        2. javac on PATH

        Returns:
            Path to javac, or None if not found
        """
        java_home = os.environ.get("JAVA_HOME")
        if java_home:
            for ext in [".exe", ""]:
                candidate = Path(java_home) / "bin" / f"javac{ext}"
                if candidate.is_file():
                    return candidate

        found = shutil.which("javac")
        return Path(found) if found else None

    @classmethod
    def get_system_java_compiler(cls) -> Optional[ICompiler]:
        """Get the system Java compiler.

        Returns:
            JavacCompiler, or None if no JDK is available
        """
        javac = cls.find_javac()
        if javac is None:
            return None
        return JavacCompiler(javac)
