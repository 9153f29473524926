"""Compiler Option Builder.

This module assembles the javac command-line options for an annotation
processing run.

Design:
    - CompilerOptions is an ordered key/value builder; a later put for an
      existing key replaces the value and keeps the key's position
    - Keys are stored without the leading dash, values may be None for
      flag-only options
    - OptionAssembler adds defaults, then derived options, then the user's
      raw compiler options, in that order

Resulting order:
    -cp, -encoding, -proc:only, -processor, -A<key>=<value>..., -s,
    -nowarn, -sourcepath, then user compiler options
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .errors import ProcessorConfigurationError

logger = logging.getLogger(__name__)


class CompilerOptions:
    """Ordered compiler option map with last-write-wins semantics.

    Example:
        >>> options = CompilerOptions()
        >>> options.put("proc:only")
        >>> options.put("s", "generated")
        >>> options.put("-s", "other")
        >>> options.to_args()
        ['-proc:only', '-s', 'other']
    """

    def __init__(self):
        self._options: Dict[str, Optional[str]] = {}

    @staticmethod
    def normalize_key(key: str) -> str:
        """Strip leading dashes so "-nowarn" and "nowarn" are one key."""
        return key.strip().lstrip("-")

    def put(self, key: str, value: Optional[str] = None) -> None:
        """Set an option.

        Args:
            key: Option name without the leading dash
            value: Option value, or None for a flag-only option
        """
        self._options[self.normalize_key(key)] = value

    def put_all(self, options: Mapping[str, Optional[str]]) -> None:
        """Set several options in mapping order."""
        for key, value in options.items():
            self.put(key, value)

    def get(self, key: str) -> Optional[str]:
        return self._options.get(self.normalize_key(key))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.normalize_key(key) in self._options

    def __len__(self) -> int:
        return len(self._options)

    def __iter__(self) -> Iterator[str]:
        return iter(self._options)

    def items(self) -> List[Tuple[str, Optional[str]]]:
        return list(self._options.items())

    def to_args(self) -> List[str]:
        """Convert the options to compiler arguments.

        Returns:
            Flag tokens, each followed by its value when the value is not blank
        """
        args: List[str] = []
        for key, value in self._options.items():
            args.append(f"-{key}")
            if value is not None and value.strip():
                args.append(value)
        return args


def build_processor(
    processor: Optional[str] = None,
    processors: Optional[Sequence[str]] = None,
) -> str:
    """Resolve the -processor value.

    Args:
        processor: Single processor class name
        processors: List of processor class names (takes precedence)

    Returns:
        Comma-joined processor class names

    Raises:
        ProcessorConfigurationError: If neither is configured
    """
    if processors is not None:
        return ",".join(processors)
    if processor is not None:
        return processor

    error = "Either processor or processors need to be given"
    logger.error(error)
    raise ProcessorConfigurationError(error)


class OptionAssembler:
    """Assembles javac options for a processing-only run.

    Example usage:
        assembler = OptionAssembler(
            processor="com.example.EntityProcessor",
            source_directory=Path("src/main/java"),
            output_directory=Path("target/generated-sources/java"),
            source_encoding="UTF-8",
        )
        args = assembler.build_args(classpath="/libs/a.jar")
    """

    def __init__(
        self,
        processor: str,
        source_directory: Path,
        output_directory: Optional[Path] = None,
        source_encoding: Optional[str] = None,
        options: Optional[Mapping[str, str]] = None,
        compiler_options: Optional[Mapping[str, Optional[str]]] = None,
        show_warnings: bool = False,
    ):
        """Initialize option assembler.

        Args:
            processor: Value for -processor (comma-joined class names)
            source_directory: Source root, emitted as canonical -sourcepath
            output_directory: Directory for generated sources (-s)
            source_encoding: Source file encoding (-encoding)
            options: Annotation processor options, emitted as -Akey=value
            compiler_options: Raw compiler options that override everything else
            show_warnings: Keep compiler warnings (omit -nowarn)
        """
        self.processor = processor
        self.source_directory = Path(source_directory)
        self.output_directory = Path(output_directory) if output_directory is not None else None
        self.source_encoding = source_encoding
        self.options = dict(options or {})
        self.compiler_options = dict(compiler_options or {})
        self.show_warnings = show_warnings

    def build_options(self, classpath: Optional[str]) -> CompilerOptions:
        """Build the ordered option map.

        Args:
            classpath: Classpath string, or None to omit -cp

        Returns:
            CompilerOptions with user overrides applied last
        """
        compiler_opts = CompilerOptions()

        # Default options
        if classpath is not None:
            compiler_opts.put("cp", classpath)

        if self.source_encoding is not None:
            compiler_opts.put("encoding", self.source_encoding)

        compiler_opts.put("proc:only")
        compiler_opts.put("processor", self.processor)

        for key, value in self.options.items():
            compiler_opts.put(f"A{key}={value}")

        if self.output_directory is not None:
            compiler_opts.put("s", str(self.output_directory))

        if not self.show_warnings:
            compiler_opts.put("nowarn")

        compiler_opts.put("sourcepath", str(self.source_directory.resolve()))

        # User options override default options
        compiler_opts.put_all(self.compiler_options)

        return compiler_opts

    def build_args(self, classpath: Optional[str]) -> List[str]:
        """Build the final compiler argument list.

        Args:
            classpath: Classpath string, or None to omit -cp

        Returns:
            List of compiler arguments
        """
        return self.build_options(classpath).to_args()
