"""
Tests for the m6502run command-line tool.
"""

import pytest
from click.testing import CliRunner

from m6502.cli.errors import ExitCode
from m6502.cli.m6502run import format_dump, main


@pytest.fixture
def image(tmp_path):
    """LDA #$42 / STA $10."""
    path = tmp_path / "prog.bin"
    path.write_bytes(bytes([0xA9, 0x42, 0x85, 0x10]))
    return path


@pytest.fixture
def runner(monkeypatch):
    for var in ("M6502_ENTRY", "M6502_LOAD_ADDRESS", "M6502_TRACE"):
        monkeypatch.delenv(var, raising=False)
    return CliRunner()


class TestM6502Run:
    """Test the m6502run CLI."""

    def test_cli_help(self, runner):
        """Test CLI help output."""
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Run a raw 6502 binary IMAGE" in result.output

    def test_cli_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_cli_run(self, runner, image):
        """Test running an image and printing registers."""
        result = runner.invoke(main, [
            str(image), "-a", "0x0200", "-e", "0x0200", "-c", "5",
        ])

        assert result.exit_code == ExitCode.SUCCESS
        assert "Cycles: 5 (requested 5)" in result.output
        assert "PC=$0204" in result.output
        assert "A=$42" in result.output
        assert "SP=$FF" in result.output

    def test_cli_dump(self, runner, image):
        result = runner.invoke(main, [
            str(image), "--address", "$0200", "--entry", "$0200",
            "--cycles", "5", "--dump", "0x0010:1",
        ])

        assert result.exit_code == 0
        assert "$0010: 42" in result.output

    def test_cli_env_defaults(self, runner, image):
        """Addresses can come from the environment."""
        result = runner.invoke(
            main, [str(image), "-c", "5"],
            env={"M6502_ENTRY": "0x0300", "M6502_LOAD_ADDRESS": "0x0300"},
        )

        assert result.exit_code == 0
        assert "PC=$0304" in result.output

    def test_cli_options_override_env(self, runner, image):
        result = runner.invoke(
            main, [str(image), "-a", "0x0200", "-e", "0x0200", "-c", "2"],
            env={"M6502_ENTRY": "0x0300", "M6502_LOAD_ADDRESS": "0x0300"},
        )

        assert result.exit_code == 0
        assert "PC=$0202" in result.output

    def test_cli_unknown_opcode(self, runner, tmp_path):
        """Test decode failure exit code and message."""
        path = tmp_path / "bad.bin"
        path.write_bytes(bytes([0x02]))

        result = runner.invoke(main, [str(path), "-a", "0x0200", "-e", "0x0200"])

        assert result.exit_code == ExitCode.EMULATION_ERROR
        assert "unknown opcode $02 at $0200" in result.output

    def test_cli_empty_image(self, runner, tmp_path):
        path = tmp_path / "empty.bin"
        path.write_bytes(b"")

        result = runner.invoke(main, [str(path)])

        assert result.exit_code == ExitCode.EMULATION_ERROR
        assert "empty" in result.output

    @pytest.mark.parametrize("args", [
        ["-a", "zz"],
        ["-e", "0x10000"],
        ["--dump", "0x0010"],
        ["--dump", "0x0010:x"],
    ])
    def test_cli_bad_arguments(self, runner, image, args):
        result = runner.invoke(main, [str(image), *args])

        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_cli_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.bin")])

        assert result.exit_code == ExitCode.INVALID_ARGS


class TestFormatDump:
    """Test hex dump formatting."""

    def test_single_line(self):
        lines = format_dump(b"AB\x00", 0x0010)
        assert len(lines) == 1
        assert lines[0].startswith("$0010: 41 42 00")
        assert lines[0].endswith("AB.")

    def test_multiple_lines(self):
        lines = format_dump(bytes(range(20)), 0x0200)
        assert len(lines) == 2
        assert lines[1].startswith("$0210: 10 11 12 13")

    def test_empty(self):
        assert format_dump(b"", 0) == []
