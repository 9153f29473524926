"""Tests for the aptgen command line."""

import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from aptgen.build.compilation_executor import JavaCompilerProvider, StandardFileManager
from aptgen.build.compiler import ICompilationTask, ICompiler
from aptgen.build.errors import CompilerNotFoundError
from aptgen.build.orchestrator import ProcessResult
from aptgen.cli import main
from aptgen.packages.downloader import DownloadError

MINIMAL_INI = """
[apt]
processor = com.example.EntityProcessor
output_directory = target/generated-sources/java
"""


@pytest.fixture(autouse=True)
def reset_aptgen_logger():
    """Drop handlers installed by the CLI so later tests don't log to closed streams."""
    yield
    logger = logging.getLogger("aptgen")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def project_dir(tmp_path):
    """Create a project with an aptgen.ini and one source file."""
    (tmp_path / "aptgen.ini").write_text(MINIMAL_INI)
    source = tmp_path / "src" / "main" / "java" / "com" / "example"
    source.mkdir(parents=True)
    (source / "Customer.java").write_text("class Customer {}")
    return tmp_path


def run_cli(monkeypatch, *args):
    """Run main() with arguments and return the exit code."""
    monkeypatch.setattr(sys, "argv", ["aptgen", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    return exc_info.value.code


class TestCLIProcess:
    """Tests for the 'aptgen process' and 'aptgen test-process' commands."""

    @pytest.fixture
    def mock_processor(self):
        """Mock the factory so no compiler is needed."""
        with patch("aptgen.cli.BuildComponentFactory") as mock_factory:
            processor = MagicMock()
            processor.get_source_directory.return_value = Path("src/main/java")
            mock_factory.create_processor.return_value = processor
            yield mock_factory, processor

    def test_process_success(self, mock_processor, project_dir, monkeypatch, capsys):
        mock_factory, processor = mock_processor
        processor.execute.return_value = ProcessResult(
            success=True,
            files=[project_dir / "Customer.java"],
            output_directory=project_dir / "target" / "generated-sources" / "java",
            build_time=1.5,
        )

        code = run_cli(monkeypatch, "process", str(project_dir))

        assert code == 0
        out = capsys.readouterr().out
        assert "Processed 1 sources" in out
        assert "generated-sources" in out
        assert mock_factory.create_processor.call_args.kwargs["for_test"] is False

    def test_test_process_uses_test_variant(self, mock_processor, project_dir, monkeypatch, capsys):
        mock_factory, processor = mock_processor
        processor.execute.return_value = ProcessResult(success=True, files=[Path("A.java")])

        code = run_cli(monkeypatch, "test-process", str(project_dir))

        assert code == 0
        assert mock_factory.create_processor.call_args.kwargs["for_test"] is True
        assert "Processed 1 test sources" in capsys.readouterr().out

    def test_nothing_to_process(self, mock_processor, project_dir, monkeypatch, capsys):
        _, processor = mock_processor
        processor.execute.return_value = ProcessResult(success=True, skipped=True)

        assert run_cli(monkeypatch, "process", str(project_dir)) == 0
        assert "No changed sources to process" in capsys.readouterr().out

    def test_compile_failure_exit_code(self, mock_processor, project_dir, monkeypatch, capsys):
        """Test a failed javac run exits with 1."""
        _, processor = mock_processor
        processor.execute.return_value = ProcessResult(success=False, files=[Path("A.java")])

        assert run_cli(monkeypatch, "process", str(project_dir)) == 1
        assert "Annotation processing failed" in capsys.readouterr().out

    def test_execution_error_exit_code(self, mock_processor, project_dir, monkeypatch, capsys):
        _, processor = mock_processor
        processor.execute.side_effect = CompilerNotFoundError("You need to run the build with a JDK")

        assert run_cli(monkeypatch, "process", str(project_dir)) == 1
        assert "JDK" in capsys.readouterr().out

    def test_keyboard_interrupt(self, mock_processor, project_dir, monkeypatch):
        _, processor = mock_processor
        processor.execute.side_effect = KeyboardInterrupt()

        assert run_cli(monkeypatch, "process", str(project_dir)) == 130

    def test_unexpected_error(self, mock_processor, project_dir, monkeypatch, capsys):
        _, processor = mock_processor
        processor.execute.side_effect = RuntimeError("kaboom")

        assert run_cli(monkeypatch, "process", str(project_dir)) == 1
        assert "RuntimeError: kaboom" in capsys.readouterr().out

    def test_download_error(self, mock_processor, project_dir, monkeypatch, capsys):
        mock_factory, _ = mock_processor
        mock_factory.create_processor.side_effect = DownloadError("Failed to download https://x.org/p.jar")

        assert run_cli(monkeypatch, "process", str(project_dir)) == 1
        assert "Plugin artifact download failed" in capsys.readouterr().out

    def test_missing_config(self, tmp_path, monkeypatch, capsys):
        """Test a directory without aptgen.ini is a configuration error."""
        assert run_cli(monkeypatch, "process", str(tmp_path)) == 1
        assert "Configuration error" in capsys.readouterr().out

    def test_invalid_project_dir(self, tmp_path, monkeypatch):
        assert run_cli(monkeypatch, "process", str(tmp_path / "missing")) == 2

    def test_project_dir_is_file(self, tmp_path, monkeypatch):
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("")

        assert run_cli(monkeypatch, "process", str(not_a_dir)) == 2

    def test_log_file_written(self, mock_processor, project_dir, monkeypatch):
        _, processor = mock_processor
        processor.execute.return_value = ProcessResult(success=True, skipped=True)

        run_cli(monkeypatch, "process", str(project_dir))

        assert (project_dir / ".aptgen" / "aptgen.log").exists()


class FakeTask(ICompilationTask):
    def __init__(self, compiler):
        self.compiler = compiler

    def call(self) -> bool:
        self.compiler.calls += 1
        return self.compiler.success


class FakeCompiler(ICompiler):
    def __init__(self, success=True):
        self.success = success
        self.calls = 0

    def get_standard_file_manager(self):
        return StandardFileManager()

    def get_task(self, out, file_manager, options, compilation_units):
        return FakeTask(self)


class TestCLIIncremental:
    """Tests for incremental state handling across CLI runs."""

    @pytest.fixture
    def compiler(self, monkeypatch):
        compiler = FakeCompiler()
        monkeypatch.setattr(
            JavaCompilerProvider, "get_system_java_compiler", classmethod(lambda cls: compiler)
        )
        return compiler

    def test_second_run_is_noop(self, compiler, project_dir, monkeypatch, capsys):
        assert run_cli(monkeypatch, "process", str(project_dir)) == 0
        assert run_cli(monkeypatch, "process", str(project_dir)) == 0

        assert compiler.calls == 1
        assert "No changed sources to process" in capsys.readouterr().out
        assert (project_dir / ".aptgen" / "build" / "state.json").exists()

    def test_failed_run_is_not_committed(self, compiler, project_dir, monkeypatch):
        """Test files are processed again after a failed run."""
        compiler.success = False
        assert run_cli(monkeypatch, "process", str(project_dir)) == 1

        compiler.success = True
        assert run_cli(monkeypatch, "process", str(project_dir)) == 0

        assert compiler.calls == 2

    def test_full_processes_everything(self, compiler, project_dir, monkeypatch):
        assert run_cli(monkeypatch, "process", str(project_dir)) == 0
        assert run_cli(monkeypatch, "process", "--full", str(project_dir)) == 0

        assert compiler.calls == 2

    def test_clean_removes_state(self, compiler, project_dir, monkeypatch, capsys):
        assert run_cli(monkeypatch, "process", str(project_dir)) == 0

        assert run_cli(monkeypatch, "clean", str(project_dir)) == 0
        assert not (project_dir / ".aptgen" / "build").exists()

        assert run_cli(monkeypatch, "process", str(project_dir)) == 0
        assert compiler.calls == 2


class TestCLIMain:
    def test_no_command_prints_help(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["aptgen"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        assert "usage: aptgen" in capsys.readouterr().out

    def test_version(self, monkeypatch, capsys):
        from aptgen import __version__

        assert run_cli(monkeypatch, "--version") == 0
        assert __version__ in capsys.readouterr().out
