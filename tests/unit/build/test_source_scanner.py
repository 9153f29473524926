"""Tests for incremental source file selection."""

from pathlib import Path

import pytest

from aptgen.build.source_scanner import SourceScanner, package_filter_to_pattern
from aptgen.project.build_context import DefaultBuildContext, IncrementalBuildContext


def write_sources(root: Path, *relative_paths: str) -> None:
    for relative in relative_paths:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// {relative}\n")


class TestPackageFilterToPattern:
    """Test translation of package filters."""

    def test_simple_package(self):
        assert package_filter_to_pattern("com.example") == "com/example/*.java"

    def test_wildcard_package(self):
        """Test the documented example filter."""
        assert package_filter_to_pattern("com.mypackage.**.bo.**") == "com/mypackage/**/bo/**/*.java"


class TestSourceScanner:
    """Test source file scanning."""

    @pytest.fixture
    def source_dir(self, tmp_path):
        """Create a source tree with a few packages."""
        source = tmp_path / "src" / "main" / "java"
        write_sources(
            source,
            "com/example/App.java",
            "com/example/domain/bo/Customer.java",
            "com/example/domain/bo/impl/CustomerImpl.java",
            "com/example/web/bo/Form.java",
            "com/example/web/Controller.java",
            "com/other/bo/Other.java",
            "com/example/domain/bo/notes.txt",
        )
        return source

    def test_include_patterns_default(self):
        """Test default pattern includes every Java file."""
        scanner = SourceScanner(DefaultBuildContext())
        assert scanner.include_patterns() == ["**/*.java"]

    def test_include_patterns_from_filters(self):
        scanner = SourceScanner(DefaultBuildContext(), ["com.a.**", "com.b.**.bo.**"])
        assert scanner.include_patterns() == ["com/a/**/*.java", "com/b/**/bo/**/*.java"]

    def test_duplicate_filters_collapse(self):
        scanner = SourceScanner(DefaultBuildContext(), ["com.a.**", "com.a.**"])
        assert scanner.include_patterns() == ["com/a/**/*.java"]

    def test_all_java_files(self, source_dir):
        """Test no filter selects every .java file."""
        files = SourceScanner(DefaultBuildContext()).filter_files(source_dir)

        assert len(files) == 6
        assert all(f.suffix == ".java" for f in files)
        assert all(f.is_absolute() for f in files)

    def test_files_are_under_source_root(self, source_dir):
        """Test the working set is a subset of the source root."""
        files = SourceScanner(DefaultBuildContext()).filter_files(source_dir)

        root = source_dir.resolve()
        for f in files:
            assert root in f.parents

    def test_filter_matches_any_depth(self, source_dir):
        """Test a filter matches files at any depth under the package."""
        scanner = SourceScanner(DefaultBuildContext(), ["com.example.**.bo.**"])

        files = scanner.filter_files(source_dir)

        names = sorted(f.name for f in files)
        assert names == ["Customer.java", "CustomerImpl.java", "Form.java"]

    def test_filter_excludes_other_packages(self, source_dir):
        scanner = SourceScanner(DefaultBuildContext(), ["com.other.**"])

        files = scanner.filter_files(source_dir)

        assert [f.name for f in files] == ["Other.java"]

    def test_filter_without_wildcard_is_one_package(self, source_dir):
        """Test a plain package filter does not descend into subpackages."""
        scanner = SourceScanner(DefaultBuildContext(), ["com.example.web"])

        files = scanner.filter_files(source_dir)

        assert [f.name for f in files] == ["Controller.java"]

    def test_empty_source_directory(self, tmp_path):
        """Test an empty source root yields an empty set."""
        empty = tmp_path / "empty"
        empty.mkdir()

        assert SourceScanner(DefaultBuildContext()).filter_files(empty) == set()

    def test_missing_source_directory(self, tmp_path):
        """Test a missing source root yields an empty set."""
        assert SourceScanner(DefaultBuildContext()).filter_files(tmp_path / "nope") == set()

    def test_no_match_yields_empty_set(self, source_dir):
        scanner = SourceScanner(DefaultBuildContext(), ["org.nothing.**"])
        assert scanner.filter_files(source_dir) == set()

    def test_incremental_second_run_is_empty(self, source_dir, tmp_path):
        """Test a second incremental run with no changes finds nothing."""
        context = IncrementalBuildContext(tmp_path / "state.json")
        scanner = SourceScanner(context)

        first = scanner.filter_files(source_dir)
        context.commit()
        second = scanner.filter_files(source_dir)

        assert len(first) == 6
        assert second == set()

    def test_incremental_reports_changed_file(self, source_dir, tmp_path):
        """Test only the modified file is reported after a change."""
        context = IncrementalBuildContext(tmp_path / "state.json")
        scanner = SourceScanner(context)
        scanner.filter_files(source_dir)
        context.commit()

        changed = source_dir / "com" / "example" / "App.java"
        changed.write_text("// changed content, longer than before\n")

        files = scanner.filter_files(source_dir)

        assert files == {changed.resolve()}
