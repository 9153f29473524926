"""Compile classpath resolution for annotation processing."""

import logging
import os
from typing import List, Optional, Sequence

from ..project.model import (
    COMPILE_SCOPE,
    TEST_SCOPE,
    Artifact,
    DependencyResolutionError,
    IProjectModel,
)

logger = logging.getLogger(__name__)


class ClasspathBuilder:
    """Builds the classpath string passed to the compiler.

    The project elements come first, in the order the project model lists
    them, followed by the plugin artifacts.
    """

    def __init__(
        self,
        project: IProjectModel,
        plugin_artifacts: Optional[Sequence[Artifact]] = None,
        for_test: bool = False,
    ):
        """Initialize classpath builder.

        Args:
            project: Project model to query
            plugin_artifacts: Processor jars and other tool artifacts
            for_test: Use the test scope instead of the compile scope
        """
        self.project = project
        self.plugin_artifacts = list(plugin_artifacts or [])
        self.for_test = for_test

    def build(self) -> Optional[str]:
        """Build the classpath string.

        Returns:
            Elements joined with os.pathsep, or None if there are no
            elements or the project elements could not be resolved
        """
        scope = TEST_SCOPE if self.for_test else COMPILE_SCOPE
        try:
            path_elements: List[str] = list(self.project.get_classpath_elements(scope))
        except DependencyResolutionError as e:
            # Compilation fails later with a clearer missing-class diagnostic
            logger.warning(f"Failed to resolve {scope} classpath elements: {e}", exc_info=True)
            return None

        for artifact in self.plugin_artifacts:
            if artifact.file is not None:
                path_elements.append(os.path.abspath(artifact.file))

        if not path_elements:
            return None

        return os.pathsep.join(path_elements)
