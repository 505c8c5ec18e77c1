# =============================================================================
# test_cli.py - Command-Line Interface Tests
# =============================================================================
# Tests for the sicasm command: arguments, output files and exit codes.
# =============================================================================

import pytest
from click.testing import CliRunner

from sicasm.cli.sicasm import main

SCENARIO = """\
PROG START 1000
-    LDA   FIVE
-    STA   ALPHA
FIVE WORD  5
ALPHA RESW 1
-    END   PROG
"""


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("SICASM_STRICT", raising=False)
    monkeypatch.delenv("SICASM_MAX_TEXT_BYTES", raising=False)
    return CliRunner()


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "prog.asm"
    path.write_text(SCENARIO)
    return path


class TestCLIBasics:
    """Test help, version and default output."""

    def test_cli_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "two-pass algorithm" in result.output

    def test_cli_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_prints_object_program(self, runner, source):
        result = runner.invoke(main, [str(source)])
        assert result.exit_code == 0
        assert "H^ PROG^ 001000^ 00000C" in result.output
        assert "T^ 001000^ 001006^ 0C1009^ 000005^" in result.output
        assert "E^ 001000" in result.output

    def test_missing_input_file(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.asm")])
        assert result.exit_code == 2


class TestCLIOutputs:
    """Test the output file options."""

    def test_all_outputs(self, runner, source, tmp_path):
        obj = tmp_path / "prog.obj"
        lst = tmp_path / "prog.lst"
        sym = tmp_path / "prog.sym"
        result = runner.invoke(main, [str(source), "-o", str(obj), "-l", str(lst), "-s", str(sym)])

        assert result.exit_code == 0
        assert obj.read_text().splitlines()[0] == "H^ PROG^ 001000^ 00000C"
        assert lst.read_text().splitlines()[-1] == "100C\t-\tEND\tPROG"
        assert sym.read_text() == "FIVE\t1006\nALPHA\t1009\n"
        assert "H^" not in result.output

    def test_custom_opcode_table(self, runner, source, tmp_path):
        optab = tmp_path / "optab.txt"
        optab.write_text("LDA 00\nSTA 0C\n")
        result = runner.invoke(main, [str(source), "-t", str(optab)])
        assert result.exit_code == 0
        assert "T^ 001000^ 001006^ 0C1009^ 000005^" in result.output

    def test_max_text_bytes(self, runner, source):
        result = runner.invoke(main, [str(source), "--max-text-bytes", "6"])
        assert result.exit_code == 0
        assert "T^ 001006^ 000005^" in result.output

    def test_max_text_bytes_too_small(self, runner, source):
        result = runner.invoke(main, [str(source), "--max-text-bytes", "2"])
        assert result.exit_code == 2

    def test_verbose(self, runner, source):
        result = runner.invoke(main, ["-v", str(source)])
        assert result.exit_code == 0
        assert "Assembly complete: 12 bytes at 1000" in result.output


class TestCLIErrors:
    """Test exit codes for translation failures."""

    def test_bad_source(self, runner, tmp_path):
        path = tmp_path / "bad.asm"
        path.write_text("P START 0\nFIVE WROD 5\n- END P\n")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == 1
        assert "unknown directive" in result.output

    def test_bad_opcode_table(self, runner, source, tmp_path):
        optab = tmp_path / "optab.txt"
        optab.write_text("LDA\n")
        result = runner.invoke(main, [str(source), "-t", str(optab)])
        assert result.exit_code == 1

    def test_undecodable_source(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("SICASM_ENCODING", "utf-8")
        path = tmp_path / "prog.asm"
        path.write_bytes(b"P START 0\nX BYTE C'\xff'\n- END P\n")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == 2
        assert "I/O error" in result.output
        assert "utf-8" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_strict_undefined_symbol(self, runner, tmp_path):
        path = tmp_path / "prog.asm"
        path.write_text("P START 0\n- LDA NOPE\n- END P\n")

        lenient = runner.invoke(main, [str(path)])
        assert lenient.exit_code == 0
        assert "T^ 000000^ 000000^" in lenient.output

        strict = runner.invoke(main, ["--strict", str(path)])
        assert strict.exit_code == 1
        assert "undefined symbol 'NOPE'" in strict.output
