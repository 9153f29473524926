"""
Source file discovery for annotation processing.

This module handles:
- Translating package-style include filters into path patterns
- Scanning the source root through the build context's scanner
- Skipping unchanged files when the build context is incremental
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set

from ..project.build_context import IBuildContext

logger = logging.getLogger(__name__)

JAVA_FILE_FILTER = "/*.java"
ALL_JAVA_FILES_FILTER = ["**" + JAVA_FILE_FILTER]


def package_filter_to_pattern(package_filter: str) -> str:
    """Translate a package filter into an include pattern.

    Args:
        package_filter: Dotted package pattern (e.g., "com.example.**.bo.**")

    Returns:
        Path pattern (e.g., "com/example/**/bo/**/*.java")
    """
    return package_filter.replace(".", "/") + JAVA_FILE_FILTER


class SourceScanner:
    """
    Selects the source files an annotation processing run works on.

    The scanner:
    1. Asks the build context for a scanner over the source root
    2. Includes every .java file, or only the files under the include filters
    3. Returns absolute paths of the files the scanner reports

    With an incremental build context the scanner only reports changed
    files, so a run with no source changes yields an empty set.
    """

    def __init__(
        self,
        build_context: IBuildContext,
        includes: Optional[Iterable[str]] = None
    ):
        """
        Initialize source scanner.

        Args:
            build_context: Build context that creates directory scanners
            includes: Package filters such as "com.example.**.bo.**";
                empty means all sources
        """
        self.build_context = build_context
        self.includes: List[str] = []
        for include in includes or []:
            if include not in self.includes:
                self.includes.append(include)

    def include_patterns(self) -> List[str]:
        """
        Get the include patterns passed to the directory scanner.

        Returns:
            Path patterns derived from the include filters, or the
            all-sources pattern if there are no filters
        """
        if not self.includes:
            return list(ALL_JAVA_FILES_FILTER)
        return [package_filter_to_pattern(include) for include in self.includes]

    def filter_files(self, source_directory: Path) -> Set[Path]:
        """
        Filter files for annotation processing.

        Args:
            source_directory: Source root in which files are located

        Returns:
            Absolute paths of the files to process; empty when there is
            nothing to process
        """
        scanner = self.build_context.new_scanner(Path(source_directory))
        scanner.set_includes(self.include_patterns())
        scanner.scan()

        included_files = scanner.get_included_files()
        if not included_files:
            # No relevant sources to generate from
            return set()

        basedir = scanner.get_basedir().resolve()
        files = {basedir / included_file for included_file in included_files}
        logger.debug(f"Found {len(files)} source files in {basedir}")
        return files
