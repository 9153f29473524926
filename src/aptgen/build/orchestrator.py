"""
Annotation processing orchestration for aptgen.

This module coordinates one annotation processing run over a source root:
- Output directory preparation
- Processor configuration and compiler lookup
- Incremental source file selection
- Classpath and compiler option assembly
- The processing-only javac run
- Registration of the generated source root with the project
"""

import hashlib
import io
import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Set

from ..config.processor_config import ProcessorSettings
from ..project.build_context import IBuildContext
from ..project.model import Artifact, IProjectModel
from .classpath_builder import ClasspathBuilder
from .compilation_executor import JavaCompilerProvider
from .compiler import ICompiler
from .errors import CompilerNotFoundError, ProcessorExecutionError
from .option_builder import OptionAssembler, build_processor
from .source_scanner import SourceScanner

logger = logging.getLogger(__name__)

CompilerProvider = Callable[[], Optional[ICompiler]]


@dataclass
class ProcessResult:
    """Result of an annotation processing run."""

    success: bool
    files: List[Path] = field(default_factory=list)
    output_directory: Optional[Path] = None
    diagnostics: str = ""
    skipped: bool = False
    build_time: float = 0.0


class AbstractAnnotationProcessor(ABC):
    """
    Runs annotation processors over the sources of a project.

    Subclasses choose the source and output directories and whether the
    run is for test sources. Everything else is shared:
    1. Create the output directory
    2. Validate the processor configuration
    3. Locate the Java compiler
    4. Select the source files (skipping unchanged ones when incremental)
    5. Build classpath and compiler options
    6. Run javac with -proc:only
    7. Register the output directory as a source root and refresh it

    Example usage:
        processor = AnnotationProcessor(
            project=project,
            build_context=build_context,
            settings=ProcessorSettings(processor="com.example.EntityProcessor"),
            source_directory=Path("src/main/java"),
            output_directory=Path("target/generated-sources/java"),
        )
        result = processor.execute()
        if not result.success:
            print(result.diagnostics)
    """

    def __init__(
        self,
        project: IProjectModel,
        build_context: IBuildContext,
        settings: ProcessorSettings,
        plugin_artifacts: Optional[Sequence[Artifact]] = None,
        compiler_provider: Optional[CompilerProvider] = None,
    ):
        """
        Initialize annotation processor.

        Args:
            project: Project model for classpath and source root registration
            build_context: Build context for scanning and refresh notification
            settings: Processor settings
            plugin_artifacts: Tool artifacts appended to the classpath
            compiler_provider: Returns the compiler, or None if unavailable
                (defaults to the system javac)
        """
        self.project = project
        self.build_context = build_context
        self.settings = settings
        self.plugin_artifacts = list(plugin_artifacts or [])
        self.compiler_provider = compiler_provider or JavaCompilerProvider.get_system_java_compiler

    @abstractmethod
    def get_source_directory(self) -> Path:
        """Get the source root to scan."""
        pass

    @abstractmethod
    def get_output_directory(self) -> Optional[Path]:
        """Get the directory for generated sources, if any."""
        pass

    def is_for_test(self) -> bool:
        """Check whether this run processes test sources."""
        return False

    def build_compile_classpath(self) -> Optional[str]:
        """Build the classpath for the configured scope."""
        return ClasspathBuilder(
            self.project, self.plugin_artifacts, for_test=self.is_for_test()
        ).build()

    def build_compiler_options(self, processor: str, classpath: Optional[str]) -> List[str]:
        """
        Build the compiler arguments.

        Args:
            processor: Value for -processor
            classpath: Classpath string, or None

        Returns:
            List of compiler arguments
        """
        assembler = OptionAssembler(
            processor=processor,
            source_directory=self.get_source_directory(),
            output_directory=self.get_output_directory(),
            source_encoding=self.settings.source_encoding,
            options=self.settings.options,
            compiler_options=self.settings.compiler_options,
            show_warnings=self.settings.show_warnings,
        )
        return assembler.build_args(classpath)

    def build_key(self, processor: str) -> str:
        """
        Digest the settings that shape the generated sources.

        Args:
            processor: Resolved -processor value

        Returns:
            SHA256 hex digest; it changes whenever the generated output may change
        """
        output_directory = self.get_output_directory()
        settings = {
            "processor": processor,
            "options": self.settings.options,
            "compiler_options": self.settings.compiler_options,
            "includes": self.settings.includes,
            "source_encoding": self.settings.source_encoding,
            "output_directory": str(output_directory.resolve()) if output_directory else None,
            "for_test": self.is_for_test(),
        }
        encoded = json.dumps(settings, sort_keys=True).encode("utf-8")
        return hashlib.sha256(encoded).hexdigest()

    def filter_files(self, source_directory: Path) -> Set[Path]:
        """
        Select the files to process.

        Args:
            source_directory: Source root to scan

        Returns:
            Absolute source paths; empty when there is nothing to process
        """
        scanner = SourceScanner(self.build_context, self.settings.includes)
        return scanner.filter_files(source_directory)

    def execute(self) -> ProcessResult:
        """
        Execute the annotation processing run.

        Returns:
            ProcessResult; success is False when javac reported errors

        Raises:
            ProcessorExecutionError: If the run cannot be performed
        """
        start_time = time.time()
        output_directory = self.get_output_directory()
        output_missing = output_directory is not None and not output_directory.is_dir()

        logger.debug(f"Using build context: {self.build_context!r}")

        try:
            if output_missing:
                output_directory.mkdir(parents=True, exist_ok=True)

            processor = build_processor(self.settings.processor, self.settings.processors)

            compiler = self.compiler_provider()
            if compiler is None:
                raise CompilerNotFoundError(
                    "You need to run the build with a JDK (javac not found). "
                    + "Set JAVA_HOME to a JDK installation or put javac on the PATH."
                )

            self.build_context.set_build_key(
                self.get_source_directory(), self.build_key(processor), output_missing
            )
            files = self.filter_files(self.get_source_directory())
            if not files:
                logger.debug("There are no sources to generate classes from (skipping)")
                return ProcessResult(
                    success=True,
                    output_directory=output_directory,
                    skipped=True,
                    build_time=time.time() - start_time,
                )

            file_manager = compiler.get_standard_file_manager()
            compilation_units = file_manager.get_java_file_objects_from_files(files)

            classpath = self.build_compile_classpath()
            compiler_options = self.build_compiler_options(processor, classpath)

            out = io.StringIO() if self.settings.log_only_on_error else None
            task = compiler.get_task(out, file_manager, compiler_options, compilation_units)
            success = task.call()

            diagnostics = out.getvalue() if out is not None else ""
            if not success and self.settings.log_only_on_error:
                logger.error(diagnostics)

            if output_directory is not None:
                self._register_output_directory(output_directory)

            return ProcessResult(
                success=success,
                files=sorted(files),
                output_directory=output_directory,
                diagnostics=diagnostics,
                build_time=time.time() - start_time,
            )

        except ProcessorExecutionError:
            logger.error("execute error", exc_info=True)
            raise
        except Exception as e:
            logger.error("execute error", exc_info=True)
            raise ProcessorExecutionError(str(e)) from e

    def _register_output_directory(self, output_directory: Path) -> None:
        """Register the output directory with the project and refresh it."""
        path = str(output_directory.resolve())
        if self.is_for_test():
            self.project.add_test_compile_source_root(path)
        else:
            self.project.add_compile_source_root(path)

        self.build_context.refresh(output_directory)
