"""Main and test annotation processor runs."""

from pathlib import Path
from typing import Optional, Sequence

from ..config.processor_config import ProcessorSettings
from ..project.build_context import IBuildContext
from ..project.model import Artifact, IProjectModel
from .orchestrator import AbstractAnnotationProcessor, CompilerProvider


class AnnotationProcessor(AbstractAnnotationProcessor):
    """Runs annotation processors over the main sources."""

    def __init__(
        self,
        project: IProjectModel,
        build_context: IBuildContext,
        settings: ProcessorSettings,
        source_directory: Path,
        output_directory: Optional[Path] = None,
        plugin_artifacts: Optional[Sequence[Artifact]] = None,
        compiler_provider: Optional[CompilerProvider] = None,
    ):
        super().__init__(project, build_context, settings, plugin_artifacts, compiler_provider)
        self.source_directory = Path(source_directory)
        self.output_directory = Path(output_directory) if output_directory is not None else None

    def get_source_directory(self) -> Path:
        return self.source_directory

    def get_output_directory(self) -> Optional[Path]:
        return self.output_directory


class TestAnnotationProcessor(AbstractAnnotationProcessor):
    """Runs annotation processors over the test sources.

    Generated sources go to test_output_directory, or to output_directory
    when no test output directory is configured.
    """

    __test__ = False

    def __init__(
        self,
        project: IProjectModel,
        build_context: IBuildContext,
        settings: ProcessorSettings,
        source_directory: Path,
        output_directory: Optional[Path] = None,
        test_output_directory: Optional[Path] = None,
        plugin_artifacts: Optional[Sequence[Artifact]] = None,
        compiler_provider: Optional[CompilerProvider] = None,
    ):
        super().__init__(project, build_context, settings, plugin_artifacts, compiler_provider)
        self.source_directory = Path(source_directory)
        self.output_directory = Path(output_directory) if output_directory is not None else None
        self.test_output_directory = (
            Path(test_output_directory) if test_output_directory is not None else None
        )

    def get_source_directory(self) -> Path:
        return self.source_directory

    def get_output_directory(self) -> Optional[Path]:
        if self.test_output_directory is not None:
            return self.test_output_directory
        return self.output_directory

    def is_for_test(self) -> bool:
        return True
