"""Annotation processor settings."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass
class ProcessorSettings:
    """Settings shared by the main and test annotation processor runs."""

    processor: Optional[str] = None
    processors: Optional[List[str]] = None
    source_encoding: Optional[str] = None
    options: Dict[str, str] = field(default_factory=dict)
    compiler_options: Dict[str, Optional[str]] = field(default_factory=dict)
    includes: List[str] = field(default_factory=list)
    show_warnings: bool = False
    log_only_on_error: bool = False


@dataclass
class SourceLayout:
    """Source and output directories of a project."""

    source_directory: Path
    test_source_directory: Path
    output_directory: Optional[Path] = None
    test_output_directory: Optional[Path] = None
