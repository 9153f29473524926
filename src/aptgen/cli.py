"""
Command-line interface for aptgen.

This module provides the `aptgen` CLI tool for running annotation processors
over the main or test sources of a Java project.
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

from aptgen import __version__
from aptgen.build import BuildComponentFactory, ProcessorExecutionError
from aptgen.cli_utils import ErrorFormatter, PathValidator, setup_logging
from aptgen.config import ProjectConfig, ProjectConfigError
from aptgen.packages import ArtifactResolver, Cache, ChecksumError, DownloadError
from aptgen.project import IncrementalBuildContext, create_build_context


@dataclass
class ProcessArgs:
    """Arguments for the process and test-process commands."""

    project_dir: Path
    for_test: bool = False
    full: bool = False
    verbose: bool = False


@dataclass
class CleanArgs:
    """Arguments for the clean command."""

    project_dir: Path
    verbose: bool = False


def process_command(args: ProcessArgs) -> None:
    """Run annotation processors over the project sources.

    Examples:
        aptgen process                 # Process main sources (incremental)
        aptgen process path/to/project
        aptgen process --full          # Process all sources
        aptgen test-process            # Process test sources
    """
    cache = Cache(args.project_dir)
    setup_logging(verbose=args.verbose, log_file=cache.log_file)

    label = "test sources" if args.for_test else "sources"

    try:
        config = ProjectConfig.from_project_dir(args.project_dir)
        build_context = create_build_context(cache.state_file, incremental=not args.full)
        processor = BuildComponentFactory.create_processor(
            config=config,
            build_context=build_context,
            resolver=ArtifactResolver(cache),
            for_test=args.for_test,
        )

        if args.verbose:
            print(f"Processing {label} in {processor.get_source_directory()}")
            print()

        result = processor.execute()

        if not result.success:
            ErrorFormatter.print_error(
                "Annotation processing failed!",
                f"javac reported errors for {len(result.files)} {label}",
            )
            sys.exit(1)

        if isinstance(build_context, IncrementalBuildContext):
            build_context.commit()

        if result.skipped:
            ErrorFormatter.print_success(f"No changed {label} to process")
        else:
            ErrorFormatter.print_success(f"Processed {len(result.files)} {label}")
            if result.output_directory is not None:
                print(f"Generated sources: {result.output_directory}")
            print(f"Time: {result.build_time:.2f}s")
        sys.exit(0)

    except ProjectConfigError as e:
        ErrorFormatter.print_error("Configuration error", str(e))
        sys.exit(1)
    except ProcessorExecutionError as e:
        ErrorFormatter.print_error("Annotation processing failed!", str(e))
        sys.exit(1)
    except (DownloadError, ChecksumError) as e:
        ErrorFormatter.print_error("Plugin artifact download failed", str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def clean_command(args: CleanArgs) -> None:
    """Remove the incremental build state so the next run processes everything."""
    cache = Cache(args.project_dir)
    cache.clean_build()
    ErrorFormatter.print_success(f"Removed build state in {cache.build_root}")
    sys.exit(0)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )


def main() -> None:
    """aptgen - annotation processing runner for Java projects."""
    parser = argparse.ArgumentParser(
        prog="aptgen",
        description="aptgen - run Java annotation processors for code generation",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"aptgen {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    for name, help_text in [
        ("process", "Run annotation processors over the main sources"),
        ("test-process", "Run annotation processors over the test sources"),
    ]:
        process_parser = subparsers.add_parser(name, help=help_text)
        _add_common_arguments(process_parser)
        process_parser.add_argument(
            "--full",
            action="store_true",
            help="Process all sources, not only the ones changed since the last run",
        )

    clean_parser = subparsers.add_parser(
        "clean",
        help="Remove incremental build state",
    )
    _add_common_arguments(clean_parser)

    parsed_args = parser.parse_args()

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    PathValidator.validate_project_dir(parsed_args.project_dir)

    if parsed_args.command in ("process", "test-process"):
        process_command(
            ProcessArgs(
                project_dir=parsed_args.project_dir,
                for_test=parsed_args.command == "test-process",
                full=parsed_args.full,
                verbose=parsed_args.verbose,
            )
        )
    elif parsed_args.command == "clean":
        clean_command(
            CleanArgs(
                project_dir=parsed_args.project_dir,
                verbose=parsed_args.verbose,
            )
        )


if __name__ == "__main__":
    main()
