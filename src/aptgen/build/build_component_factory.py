"""
Build component factory for aptgen.

This module wires an annotation processor run from an aptgen.ini
configuration: project model, plugin artifacts and the main or test
processor variant.
"""

from typing import List, Optional

from ..config.ini_parser import ProjectConfig
from ..packages.downloader import ArtifactResolver
from ..project.build_context import IBuildContext
from ..project.model import Artifact, ProjectModel
from .orchestrator import AbstractAnnotationProcessor, CompilerProvider
from .processors import AnnotationProcessor, TestAnnotationProcessor


class BuildComponentFactory:
    """
    Factory for creating annotation processor runs with proper configurations.

    Example usage:
        config = ProjectConfig.from_project_dir(project_dir)
        cache = Cache(project_dir)
        processor = BuildComponentFactory.create_processor(
            config=config,
            build_context=IncrementalBuildContext(cache.state_file),
            resolver=ArtifactResolver(cache),
            for_test=False,
        )
        result = processor.execute()
    """

    @staticmethod
    def create_project_model(config: ProjectConfig) -> ProjectModel:
        """
        Create the project model from configuration.

        Args:
            config: Parsed aptgen.ini

        Returns:
            ProjectModel with the configured source roots and classpath
        """
        layout = config.get_source_layout()
        return ProjectModel(
            project_dir=config.project_dir,
            classpath=config.get_classpath(),
            test_classpath=config.get_test_classpath(),
            compile_source_roots=[str(layout.source_directory)],
            test_compile_source_roots=[str(layout.test_source_directory)],
        )

    @staticmethod
    def resolve_plugin_artifacts(config: ProjectConfig, resolver: ArtifactResolver) -> List[Artifact]:
        """
        Resolve configured plugin artifacts to files.

        Args:
            config: Parsed aptgen.ini
            resolver: Resolver for local and URL artifacts

        Returns:
            List of artifacts in configuration order
        """
        return [resolver.resolve(location) for location in config.get_plugin_artifacts()]

    @classmethod
    def create_processor(
        cls,
        config: ProjectConfig,
        build_context: IBuildContext,
        resolver: ArtifactResolver,
        for_test: bool = False,
        project: Optional[ProjectModel] = None,
        compiler_provider: Optional[CompilerProvider] = None,
    ) -> AbstractAnnotationProcessor:
        """
        Create a main or test annotation processor run.

        Args:
            config: Parsed aptgen.ini
            build_context: Build context for the run
            resolver: Resolver for plugin artifacts
            for_test: Create the test-source variant
            project: Project model to use (created from config if None)
            compiler_provider: Compiler lookup override

        Returns:
            Configured annotation processor
        """
        if project is None:
            project = cls.create_project_model(config)

        layout = config.get_source_layout()
        settings = config.get_processor_settings()
        artifacts = cls.resolve_plugin_artifacts(config, resolver)

        if for_test:
            return TestAnnotationProcessor(
                project=project,
                build_context=build_context,
                settings=settings,
                source_directory=layout.test_source_directory,
                output_directory=layout.output_directory,
                test_output_directory=layout.test_output_directory,
                plugin_artifacts=artifacts,
                compiler_provider=compiler_provider,
            )

        return AnnotationProcessor(
            project=project,
            build_context=build_context,
            settings=settings,
            source_directory=layout.source_directory,
            output_directory=layout.output_directory,
            plugin_artifacts=artifacts,
            compiler_provider=compiler_provider,
        )
