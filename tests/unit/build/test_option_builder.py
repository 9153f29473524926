"""Tests for compiler option assembly."""

from pathlib import Path

import pytest

from aptgen.build.errors import ProcessorConfigurationError, ProcessorExecutionError
from aptgen.build.option_builder import CompilerOptions, OptionAssembler, build_processor


class TestCompilerOptions:
    """Test the ordered option builder."""

    def test_empty(self):
        """Test that an empty builder emits no arguments."""
        assert CompilerOptions().to_args() == []

    def test_flag_only_option(self):
        """Test options without a value emit a single token."""
        options = CompilerOptions()
        options.put("proc:only")
        options.put("nowarn", None)

        assert options.to_args() == ["-proc:only", "-nowarn"]

    def test_value_is_separate_token(self):
        """Test flag and value are emitted as two tokens."""
        options = CompilerOptions()
        options.put("encoding", "UTF-8")

        assert options.to_args() == ["-encoding", "UTF-8"]

    def test_blank_value_is_omitted(self):
        """Test blank values emit only the flag."""
        options = CompilerOptions()
        options.put("implicit", "   ")
        options.put("Xlint", "")

        assert options.to_args() == ["-implicit", "-Xlint"]

    def test_later_put_overwrites_and_keeps_position(self):
        """Test last-write-wins keeps the original insertion position."""
        options = CompilerOptions()
        options.put("cp", "a.jar")
        options.put("proc:only")
        options.put("cp", "b.jar")

        assert options.to_args() == ["-cp", "b.jar", "-proc:only"]
        assert len(options) == 2

    def test_dashed_key_is_same_key(self):
        """Test "-nowarn" and "nowarn" resolve to one entry."""
        options = CompilerOptions()
        options.put("nowarn")
        options.put("-nowarn", None)

        assert options.to_args() == ["-nowarn"]
        assert "-nowarn" in options
        assert "nowarn" in options

    def test_put_all_keeps_mapping_order(self):
        """Test put_all applies entries in mapping order."""
        options = CompilerOptions()
        options.put_all({"b": "1", "a": None})

        assert list(options) == ["b", "a"]
        assert options.get("b") == "1"
        assert options.get("-a") is None


class TestBuildProcessor:
    """Test processor name resolution."""

    def test_single_processor(self):
        assert build_processor(processor="com.example.A") == "com.example.A"

    def test_processors_are_comma_joined(self):
        """Test that a processor list wins and is comma-joined."""
        result = build_processor(
            processor="com.example.Ignored",
            processors=["com.example.A", "com.example.B"],
        )
        assert result == "com.example.A,com.example.B"

    def test_missing_processor(self, caplog):
        """Test configuration error when no processor is configured."""
        with pytest.raises(ProcessorConfigurationError, match="Either processor or processors"):
            build_processor()

        assert "Either processor or processors need to be given" in caplog.text

    def test_configuration_error_is_execution_error(self):
        """Test the configuration error is build-fatal."""
        assert issubclass(ProcessorConfigurationError, ProcessorExecutionError)


class TestOptionAssembler:
    """Test option assembly order and precedence."""

    @pytest.fixture
    def source_dir(self, tmp_path):
        source = tmp_path / "src" / "main" / "java"
        source.mkdir(parents=True)
        return source

    @pytest.fixture
    def output_dir(self, tmp_path):
        return tmp_path / "target" / "generated-sources" / "java"

    def test_full_option_order(self, source_dir, output_dir):
        """Test every assembled option appears in the documented order."""
        assembler = OptionAssembler(
            processor="com.example.EntityProcessor",
            source_directory=source_dir,
            output_directory=output_dir,
            source_encoding="UTF-8",
            options={"querydsl.prefix": "Q", "debug": "true"},
            show_warnings=False,
        )

        args = assembler.build_args(classpath="/a.jar:/b.jar")

        assert args == [
            "-cp", "/a.jar:/b.jar",
            "-encoding", "UTF-8",
            "-proc:only",
            "-processor", "com.example.EntityProcessor",
            "-Aquerydsl.prefix=Q",
            "-Adebug=true",
            "-s", str(output_dir),
            "-nowarn",
            "-sourcepath", str(source_dir.resolve()),
        ]

    def test_no_classpath_omits_cp(self, source_dir):
        """Test that an absent classpath suppresses -cp entirely."""
        assembler = OptionAssembler(processor="p.P", source_directory=source_dir)

        args = assembler.build_args(classpath=None)

        assert "-cp" not in args
        assert args[0] == "-proc:only"

    def test_no_encoding_omits_encoding(self, source_dir):
        assembler = OptionAssembler(processor="p.P", source_directory=source_dir)
        assert "-encoding" not in assembler.build_args(classpath=None)

    def test_no_output_directory_omits_s(self, source_dir):
        assembler = OptionAssembler(processor="p.P", source_directory=source_dir)
        assert "-s" not in assembler.build_args(classpath=None)

    def test_show_warnings_false_adds_nowarn(self, source_dir):
        """Test warnings disabled emits the suppression flag."""
        assembler = OptionAssembler(
            processor="p.P", source_directory=source_dir, show_warnings=False
        )
        assert "-nowarn" in assembler.build_args(classpath=None)

    def test_show_warnings_true_omits_nowarn(self, source_dir):
        """Test warnings enabled does not emit the suppression flag."""
        assembler = OptionAssembler(
            processor="p.P", source_directory=source_dir, show_warnings=True
        )
        assert "-nowarn" not in assembler.build_args(classpath=None)

    def test_sourcepath_is_canonical(self, tmp_path, source_dir):
        """Test -sourcepath uses the canonical absolute path."""
        relative = source_dir / ".." / "java"
        assembler = OptionAssembler(processor="p.P", source_directory=relative)

        args = assembler.build_args(classpath=None)

        assert args[args.index("-sourcepath") + 1] == str(source_dir.resolve())

    def test_user_options_override_defaults(self, source_dir, output_dir):
        """Test user compiler options win for keys assembled by default."""
        assembler = OptionAssembler(
            processor="p.P",
            source_directory=source_dir,
            output_directory=output_dir,
            compiler_options={"s": "/custom/out", "processor": "q.Q", "-encoding": "latin1"},
            source_encoding="UTF-8",
        )

        options = assembler.build_options(classpath="/a.jar")

        assert options.get("s") == "/custom/out"
        assert options.get("processor") == "q.Q"
        assert options.get("encoding") == "latin1"
        args = options.to_args()
        assert args.count("-s") == 1
        assert args.count("-encoding") == 1
        assert "UTF-8" not in args

    def test_user_options_are_appended_last(self, source_dir):
        """Test new user keys come after the assembled options."""
        assembler = OptionAssembler(
            processor="p.P",
            source_directory=source_dir,
            compiler_options={"implicit": "class", "Xlint": None},
        )

        args = assembler.build_args(classpath=None)

        assert args[-3:] == ["-implicit", "class", "-Xlint"]
        assert args.index("-sourcepath") < args.index("-implicit")

    def test_user_option_can_blank_a_value(self, source_dir):
        """Test overriding a key with no value leaves only the flag."""
        assembler = OptionAssembler(
            processor="p.P",
            source_directory=source_dir,
            compiler_options={"processor": None},
        )

        args = assembler.build_args(classpath=None)

        assert "-processor" in args
        assert "p.P" not in args

    @pytest.mark.parametrize("key", ["cp", "encoding", "processor", "s", "sourcepath"])
    def test_override_wins_for_every_assembled_key(self, source_dir, output_dir, key):
        """Test last-write-wins for each assembled key."""
        assembler = OptionAssembler(
            processor="p.P",
            source_directory=source_dir,
            output_directory=output_dir,
            source_encoding="UTF-8",
            compiler_options={key: "override"},
        )

        args = assembler.build_args(classpath="/a.jar")

        assert args[args.index(f"-{key}") + 1] == "override"
        assert args.count(f"-{key}") == 1
