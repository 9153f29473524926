"""
Build system components for aptgen.

This module provides the annotation processing implementation including:
- Source file selection (incremental, include filters)
- Classpath and compiler option assembly
- javac invocation in processing-only mode
- Orchestration of main and test runs
"""

from .build_component_factory import BuildComponentFactory
from .classpath_builder import ClasspathBuilder
from .compilation_executor import JavacCompiler, JavaCompilerProvider, StandardFileManager
from .compiler import CompilationError, ICompilationTask, ICompiler, IFileManager
from .errors import CompilerNotFoundError, ProcessorConfigurationError, ProcessorExecutionError
from .option_builder import CompilerOptions, OptionAssembler, build_processor
from .orchestrator import AbstractAnnotationProcessor, ProcessResult
from .processors import AnnotationProcessor, TestAnnotationProcessor
from .source_scanner import SourceScanner, package_filter_to_pattern

__all__ = [
    "AbstractAnnotationProcessor",
    "AnnotationProcessor",
    "TestAnnotationProcessor",
    "ProcessResult",
    "ProcessorExecutionError",
    "ProcessorConfigurationError",
    "CompilerNotFoundError",
    "BuildComponentFactory",
    "ClasspathBuilder",
    "CompilerOptions",
    "OptionAssembler",
    "build_processor",
    "SourceScanner",
    "package_filter_to_pattern",
    "ICompiler",
    "ICompilationTask",
    "IFileManager",
    "CompilationError",
    "JavacCompiler",
    "JavaCompilerProvider",
    "StandardFileManager",
]
