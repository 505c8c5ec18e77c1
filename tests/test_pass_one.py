# =============================================================================
# test_pass_one.py - Pass One Tests
# =============================================================================
# Tests for address assignment and symbol table construction.
#
# Test coverage includes:
#   - START handling and the location counter
#   - Directive sizes (WORD, BYTE, RESW, RESB)
#   - The END record and program length
#   - Duplicate label policy
#   - Structural and numeric failures
# =============================================================================

import pytest

from sicasm.assembler.optab import OpcodeTable
from sicasm.assembler.pass_one import PassOne, run_pass_one
from sicasm.assembler.symbols import SymbolTable
from sicasm.config import AssemblerConfig
from sicasm.errors import AssemblySyntaxError, DuplicateSymbolError, ErrorKind

OPTAB = OpcodeTable({"LDA": 0x00, "STA": 0x0C, "RSUB": 0x4C})

SCENARIO = """\
PROG START 1000
-    LDA   FIVE
-    STA   ALPHA
FIVE WORD  5
ALPHA RESW 1
-    END   PROG
"""


def pass_one(source: str, **config):
    """Run pass one over source text, returning the PassResult."""
    return run_pass_one(source.splitlines(), OPTAB, AssemblerConfig(**config), "test.asm")


def program_of(source: str, **config):
    result = pass_one(source, **config)
    assert result.ok, result.failure
    return result.value.program, result.value.symbols


# =============================================================================
# Address Assignment
# =============================================================================

class TestScenario:
    """The reference program from the assembler's documentation."""

    def test_symbol_table(self):
        _, symbols = program_of(SCENARIO)
        assert symbols.as_dict() == {"FIVE": 0x1006, "ALPHA": 0x1009}

    def test_start_and_length(self):
        program, _ = program_of(SCENARIO)
        assert program.start_address == 0x1000
        assert program.program_length == 0x0C
        assert program.end_address == 0x100C
        assert program.program_name == "PROG"

    def test_record_addresses(self):
        program, _ = program_of(SCENARIO)
        assert [(r.address, r.mnemonic) for r in program] == [
            (0x1000, "LDA"),
            (0x1003, "STA"),
            (0x1006, "WORD"),
            (0x1009, "RESW"),
        ]

    def test_start_record(self):
        program, _ = program_of(SCENARIO)
        assert program.start.address == 0x1000
        assert program.start.label == "PROG"
        assert program.start.operand == "1000"

    def test_end_record_is_out_of_band(self):
        """The END line sits at the final location counter, not in records."""
        program, _ = program_of(SCENARIO)
        assert program.end.address == 0x100C
        assert program.end.mnemonic == "END"
        assert program.end.operand == "PROG"
        assert program.end not in program.records
        assert len(program) == 4

    def test_symbol_table_is_frozen(self):
        _, symbols = program_of(SCENARIO)
        assert symbols.frozen
        with pytest.raises(RuntimeError):
            symbols.define("LATE", 0x2000)


class TestDirectiveSizes:
    """Each statement advances the location counter by its size."""

    @pytest.mark.parametrize("statement, size", [
        ("- LDA FIVE", 3),
        ("- RSUB", 3),
        ("X WORD 5", 3),
        ("X WORD -1", 3),
        ("X BYTE C'EOF'", 3),
        ("X BYTE X'F1'", 1),
        ("X BYTE X'F1F2F3F4'", 4),
        ("X RESW 4", 12),
        ("X RESB 4096", 4096),
        ("X RESB 0", 0),
    ])
    def test_statement_size(self, statement, size):
        program, _ = program_of(f"P START 0\n{statement}\n- END P\n")
        assert program.program_length == size

    def test_length_is_sum_of_sizes(self):
        source = """\
COPY  START 2000
FIRST STL   RETADR
-     LDA   LENGTH
EOF   BYTE  C'EOF'
INPUT BYTE  X'F1'
THREE WORD  3
BUF   RESB  10
RETADR RESW 2
-     END   FIRST
"""
        optab = OpcodeTable({"STL": 0x14, "LDA": 0x00})
        result = run_pass_one(source.splitlines(), optab)
        program, symbols = result.value.program, result.value.symbols
        assert program.program_length == 3 + 3 + 3 + 1 + 3 + 10 + 6
        assert program.end_address == program.start_address + program.program_length
        assert symbols.as_dict() == {
            "FIRST": 0x2000,
            "EOF": 0x2006,
            "INPUT": 0x2009,
            "THREE": 0x200A,
            "BUF": 0x200D,
            "RETADR": 0x2017,
        }

    def test_mnemonics_are_case_insensitive(self):
        program, _ = program_of("P START 0\n- lda FIVE\nFIVE word 5\n- end P\n")
        assert program.program_length == 6


class TestProgramShape:
    """START, END, comments and trailing lines."""

    def test_no_start_assembles_at_zero(self):
        program, symbols = program_of("- LDA FIVE\nFIVE WORD 5\n- END\n")
        assert program.start is None
        assert program.program_name is None
        assert program.start_address == 0
        assert program.program_length == 6
        assert symbols.as_dict() == {"FIVE": 3}

    def test_start_label_is_not_a_symbol(self):
        _, symbols = program_of(SCENARIO)
        assert "PROG" not in symbols

    def test_empty_program(self):
        program, symbols = program_of("P START 100\n- END P\n")
        assert len(program) == 0
        assert program.program_length == 0
        assert program.end.address == 0x100
        assert len(symbols) == 0

    def test_end_after_reserve_does_not_collide(self):
        """A trailing zero-size statement keeps its own record."""
        program, _ = program_of("P START 0\n- RSUB\nX RESB 0\n- END P\n")
        assert program.records[-1].address == 3
        assert program.records[-1].mnemonic == "RESB"
        assert program.end.address == 3

    def test_comments_and_blank_lines(self):
        source = ". header\nP START 0\n\n. body\n- RSUB\n- END P\n"
        program, _ = program_of(source)
        assert len(program) == 1

    def test_lines_after_end_are_ignored(self):
        source = SCENARIO + "this line has far too many fields\n"
        program, _ = program_of(source)
        assert program.program_length == 0x0C

    def test_pass_one_instance(self):
        output = PassOne(OPTAB).run(SCENARIO.splitlines())
        assert isinstance(output.symbols, SymbolTable)
        assert output.program.program_length == 0x0C


# =============================================================================
# Duplicate Labels
# =============================================================================

class TestDuplicateLabels:
    """The first definition of a label wins."""

    SOURCE = "P START 0\nA WORD 1\nA WORD 2\n- LDA A\n- END P\n"

    def test_first_definition_wins(self):
        _, symbols = program_of(self.SOURCE)
        assert symbols.resolve("A").address == 0
        assert len(symbols) == 1

    def test_redefinition_recorded(self):
        _, symbols = program_of(self.SOURCE)
        (redefined,) = symbols.redefinitions
        assert redefined.name == "A"
        assert redefined.address == 3
        assert redefined.location.line == 3

    def test_redefinition_logged(self, caplog):
        with caplog.at_level("WARNING"):
            program_of(self.SOURCE)
        assert "already defined" in caplog.text

    def test_strict_mode_fails(self):
        result = pass_one(self.SOURCE, strict_symbols=True)
        assert not result.ok
        assert result.failure.kind == ErrorKind.DUPLICATE_SYMBOL
        assert "test.asm:3" in result.failure.message
        with pytest.raises(DuplicateSymbolError):
            result.unwrap()

    def test_labels_are_case_sensitive(self):
        _, symbols = program_of("P START 0\nA WORD 1\na WORD 2\n- END P\n")
        assert symbols.as_dict() == {"A": 0, "a": 3}


# =============================================================================
# Failures
# =============================================================================

class TestFailures:
    """Errors abort the run and publish no partial output."""

    def assert_fails(self, source, kind):
        result = pass_one(source)
        assert not result.ok
        assert result.value is None
        assert result.failure.kind == kind
        return result.failure

    def test_missing_end(self):
        failure = self.assert_fails("P START 0\n- RSUB\n", ErrorKind.MISSING_END)
        assert "test.asm:2" in failure.message

    def test_empty_source(self):
        self.assert_fails("", ErrorKind.MISSING_END)
        self.assert_fails(". only a comment\n", ErrorKind.MISSING_END)

    def test_start_address_not_hex(self):
        self.assert_fails("P START 10G0\n- END P\n", ErrorKind.BAD_NUMBER)

    def test_start_address_too_large(self):
        self.assert_fails("P START 10000\n- END P\n", ErrorKind.ADDRESS_RANGE)

    @pytest.mark.parametrize("statement", ["X RESW ten", "X RESB -1", "X RESW 1.5"])
    def test_reserve_count_not_decimal(self, statement):
        self.assert_fails(f"P START 0\n{statement}\n- END P\n", ErrorKind.BAD_NUMBER)

    @pytest.mark.parametrize("value", ["five", "0x10", "16777216", "-8388609"])
    def test_bad_word_value(self, value):
        self.assert_fails(f"P START 0\nX WORD {value}\n- END P\n", ErrorKind.BAD_NUMBER)

    def test_unknown_directive(self):
        failure = self.assert_fails("P START 0\nFIVE WROD 5\n- END P\n", ErrorKind.UNKNOWN_DIRECTIVE)
        assert "WROD" in failure.message
        assert "FIVE WROD 5" in failure.message

    def test_bad_byte_literal(self):
        self.assert_fails("P START 0\nX BYTE X'F'\n- END P\n", ErrorKind.BAD_LITERAL)

    def test_malformed_line(self):
        self.assert_fails("P START 0\nRSUB\n- END P\n", ErrorKind.MALFORMED_LINE)

    def test_start_not_first(self):
        failure = self.assert_fails(
            "- RSUB\nP START 1000\n- END P\n",
            ErrorKind.MALFORMED_LINE,
        )
        assert "START must be the first statement" in failure.message

    def test_program_past_end_of_memory(self):
        self.assert_fails("P START FFFF\n- RSUB\n- RSUB\n- END P\n", ErrorKind.ADDRESS_RANGE)

    def test_program_ending_at_top_of_memory(self):
        """The last byte may occupy address FFFF."""
        program, _ = program_of("P START FFFD\n- RSUB\n- END P\n")
        assert program.end_address == 0x10000

    def test_pass_one_raises_directly(self):
        with pytest.raises(AssemblySyntaxError):
            PassOne(OPTAB).run(["P START 0", "- RSUB"])
