"""
aptgen.ini configuration parser.

This module provides functionality to parse aptgen.ini files and extract the
project layout, classpath and annotation processor settings.
"""

import configparser
from pathlib import Path
from typing import Dict, List, Optional

from .processor_config import ProcessorSettings, SourceLayout

CONFIG_FILE_NAME = "aptgen.ini"

DEFAULT_SOURCE_DIRECTORY = "src/main/java"
DEFAULT_TEST_SOURCE_DIRECTORY = "src/test/java"


class ProjectConfigError(Exception):
    """Exception raised for aptgen.ini configuration errors."""

    pass


class ProjectConfig:
    """
    Parser for aptgen.ini configuration files.

    Example aptgen.ini:
        [project]
        source_directory = src/main/java
        classpath =
            lib/*.jar

        [apt]
        processor = com.example.EntityProcessor
        output_directory = target/generated-sources/java

        [apt:options]
        querydsl.entityAccessors = true

    Usage:
        config = ProjectConfig(Path("aptgen.ini"))
        settings = config.get_processor_settings()
        layout = config.get_source_layout()
    """

    PROJECT_SECTION = "project"
    APT_SECTION = "apt"
    OPTIONS_SECTION = "apt:options"
    COMPILER_OPTIONS_SECTION = "apt:compiler_options"

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with an aptgen.ini file.

        Args:
            ini_path: Path to the aptgen.ini file

        Raises:
            ProjectConfigError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = Path(ini_path)
        self.project_dir = self.ini_path.resolve().parent

        if not self.ini_path.exists():
            raise ProjectConfigError(f"Configuration file not found: {ini_path}")

        self.config = configparser.ConfigParser(
            allow_no_value=True,
            delimiters=("=",),
            interpolation=None,
        )
        # Option names are case-sensitive and may contain ":" (e.g. Xlint:all);
        # values may contain "$" (nested class names such as Outer$Processor)
        self.config.optionxform = str  # type: ignore[assignment]

        try:
            self.config.read(self.ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise ProjectConfigError(f"Failed to parse {ini_path}: {e}") from e

        if self.APT_SECTION not in self.config:
            raise ProjectConfigError(f"Missing [{self.APT_SECTION}] section in {ini_path}")

    @classmethod
    def from_project_dir(cls, project_dir: Path) -> "ProjectConfig":
        """Load aptgen.ini from a project directory."""
        return cls(Path(project_dir) / CONFIG_FILE_NAME)

    def _get(self, section: str, key: str) -> Optional[str]:
        """Get a stripped value, or None when missing or empty."""
        if section not in self.config:
            return None
        value = self.config[section].get(key)
        if value is None:
            return None
        value = value.strip()
        return value or None

    def _get_bool(self, section: str, key: str, default: bool) -> bool:
        if section not in self.config or key not in self.config[section]:
            return default
        try:
            return self.config[section].getboolean(key)
        except ValueError as e:
            raise ProjectConfigError(f"Invalid boolean for {key} in [{section}]: {e}") from e

    def _get_list(self, section: str, key: str) -> List[str]:
        """
        Parse a list value separated by newlines and commas.

        Example:
            For includes =
                com.example.**.bo.**
                com.example.dto.**
            Returns: ['com.example.**.bo.**', 'com.example.dto.**']
        """
        raw = self._get(section, key)
        if not raw:
            return []

        items = []
        for line in raw.split("\n"):
            for item in line.split(","):
                item = item.strip()
                if item:
                    items.append(item)
        return items

    def _resolve_path(self, value: str) -> Path:
        path = Path(value)
        if not path.is_absolute():
            path = self.project_dir / path
        return path

    def _get_path(self, section: str, key: str) -> Optional[Path]:
        value = self._get(section, key)
        if value is None:
            return None
        return self._resolve_path(value)

    def _get_required_path(self, section: str, key: str, default: str) -> Path:
        """Get a path value, falling back to default when missing or empty."""
        return self._resolve_path(self._get(section, key) or default)

    def _get_mapping(self, section: str) -> Dict[str, Optional[str]]:
        if section not in self.config:
            return {}
        mapping: Dict[str, Optional[str]] = {}
        for key in self.config[section]:
            value = self.config[section][key]
            mapping[key] = value.strip() if value is not None else None
        return mapping

    def get_source_layout(self) -> SourceLayout:
        """
        Get the source and output directories.

        Returns:
            SourceLayout with paths resolved against the project directory
        """
        source_directory = self._get_required_path(
            self.PROJECT_SECTION, "source_directory", DEFAULT_SOURCE_DIRECTORY
        )
        test_source_directory = self._get_required_path(
            self.PROJECT_SECTION, "test_source_directory", DEFAULT_TEST_SOURCE_DIRECTORY
        )
        return SourceLayout(
            source_directory=source_directory,
            test_source_directory=test_source_directory,
            output_directory=self._get_path(self.APT_SECTION, "output_directory"),
            test_output_directory=self._get_path(self.APT_SECTION, "test_output_directory"),
        )

    def get_processor_settings(self) -> ProcessorSettings:
        """
        Get the annotation processor settings.

        Returns:
            ProcessorSettings from the [apt] and option sections

        Example:
            For processors = a.B, c.D
            Returns settings with processors ['a.B', 'c.D']
        """
        processors = self._get_list(self.APT_SECTION, "processors")
        options = {
            key: value if value is not None else ""
            for key, value in self._get_mapping(self.OPTIONS_SECTION).items()
        }
        return ProcessorSettings(
            processor=self._get(self.APT_SECTION, "processor"),
            processors=processors or None,
            source_encoding=self._get(self.PROJECT_SECTION, "source_encoding"),
            options=options,
            compiler_options=self._get_mapping(self.COMPILER_OPTIONS_SECTION),
            includes=self._get_list(self.APT_SECTION, "includes"),
            show_warnings=self._get_bool(self.APT_SECTION, "show_warnings", False),
            log_only_on_error=self._get_bool(self.APT_SECTION, "log_only_on_error", False),
        )

    def get_classpath(self) -> List[str]:
        """Get the compile classpath entries."""
        return self._get_list(self.PROJECT_SECTION, "classpath")

    def get_test_classpath(self) -> List[str]:
        """Get the test-only classpath entries."""
        return self._get_list(self.PROJECT_SECTION, "test_classpath")

    def get_plugin_artifacts(self) -> List[str]:
        """Get the plugin artifact locations (paths or URLs)."""
        return self._get_list(self.APT_SECTION, "plugin_artifacts")
