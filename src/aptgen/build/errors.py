"""Exceptions raised by annotation processor runs."""


class ProcessorExecutionError(Exception):
    """Build-fatal error raised when an annotation processor run fails."""

    pass


class ProcessorConfigurationError(ProcessorExecutionError):
    """Raised when the processor configuration is invalid."""

    pass


class CompilerNotFoundError(ProcessorExecutionError):
    """Raised when no Java compiler is available."""

    pass
