"""Configuration parsing modules for aptgen."""

from .ini_parser import CONFIG_FILE_NAME, ProjectConfig, ProjectConfigError
from .processor_config import ProcessorSettings, SourceLayout

__all__ = [
    "CONFIG_FILE_NAME",
    "ProjectConfig",
    "ProjectConfigError",
    "ProcessorSettings",
    "SourceLayout",
]
