"""Host project collaborators: project model and build contexts."""

from .build_context import (
    DefaultBuildContext,
    DirectoryScanner,
    IBuildContext,
    IncrementalBuildContext,
    compile_include_pattern,
    create_build_context,
)
from .model import (
    COMPILE_SCOPE,
    TEST_SCOPE,
    Artifact,
    DependencyResolutionError,
    IProjectModel,
    ProjectModel,
)

__all__ = [
    "Artifact",
    "COMPILE_SCOPE",
    "TEST_SCOPE",
    "DependencyResolutionError",
    "IProjectModel",
    "ProjectModel",
    "IBuildContext",
    "DefaultBuildContext",
    "IncrementalBuildContext",
    "DirectoryScanner",
    "compile_include_pattern",
    "create_build_context",
]
