"""
SIC Opcode Table
================

This module defines the opcode table (OPTAB): the mapping from instruction
mnemonic to its one-byte machine opcode. Every SIC instruction uses the same
3-byte format, so the opcode byte is the only per-mnemonic information the
assembler needs:

    +--------+-+---------------+
    | opcode |x|    address    |
    +--------+-+---------------+
      8 bits  1     15 bits

Opcode Table File Format
------------------------
One entry per line, mnemonic and two hex digits separated by whitespace:

    LDA   00
    STA   0C
    RSUB  4C

Blank lines and lines starting with '.' or '#' are ignored. Any other line
that does not have exactly two fields, or whose opcode is not two hex
digits, is a fatal error. A mnemonic listed twice keeps its last opcode.

Reference
---------
- Leland L. Beck, System Software, Appendix A (SIC instruction set)
"""

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
import logging
import re

from sicasm.errors import (
    ErrorKind,
    Failure,
    OpcodeTableError,
    PassResult,
    SourceLocation,
)

logger = logging.getLogger(__name__)

_OPCODE_RE = re.compile(r"^[0-9A-Fa-f]{2}$")
_COMMENT_PREFIXES = (".", "#")


# =============================================================================
# Built-in SIC Instruction Set
# =============================================================================

SIC_OPCODES: dict[str, int] = {
    # Arithmetic
    "ADD": 0x18,
    "SUB": 0x1C,
    "MUL": 0x20,
    "DIV": 0x24,
    "COMP": 0x28,
    "TIX": 0x2C,

    # Logical
    "AND": 0x40,
    "OR": 0x44,

    # Jumps and subroutines
    "JEQ": 0x30,
    "JGT": 0x34,
    "JLT": 0x38,
    "J": 0x3C,
    "JSUB": 0x48,
    "RSUB": 0x4C,

    # Loads and stores
    "LDA": 0x00,
    "LDX": 0x04,
    "LDL": 0x08,
    "STA": 0x0C,
    "STX": 0x10,
    "STL": 0x14,
    "LDCH": 0x50,
    "STCH": 0x54,
    "STSW": 0xE8,

    # Device I/O
    "TD": 0xE0,
    "RD": 0xD8,
    "WD": 0xDC,
}


# =============================================================================
# Opcode Table
# =============================================================================

class OpcodeTable(Mapping[str, int]):
    """
    Read-only mapping from mnemonic to opcode byte.

    Lookups are case-insensitive; mnemonics are stored upper-cased.
    """

    def __init__(self, entries: Mapping[str, int] | None = None):
        table = {name.upper(): value for name, value in (entries or {}).items()}
        for name, value in table.items():
            if not 0 <= value <= 0xFF:
                raise ValueError(f"opcode for '{name}' out of range: {value:#x}")
        self._table = MappingProxyType(table)

    def __getitem__(self, mnemonic: str) -> int:
        return self._table[mnemonic.upper()]

    def __contains__(self, mnemonic: object) -> bool:
        return isinstance(mnemonic, str) and mnemonic.upper() in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"OpcodeTable({len(self)} mnemonics)"

    def hex(self, mnemonic: str) -> str:
        """Return the opcode as two upper-case hex digits."""
        return f"{self[mnemonic]:02X}"

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def default(cls) -> "OpcodeTable":
        """Return the built-in SIC instruction set."""
        return cls(SIC_OPCODES)

    @classmethod
    def from_lines(cls, lines: Iterable[str], filename: str = "<optab>") -> "OpcodeTable":
        """
        Parse opcode table lines.

        Args:
            lines: Text lines in the opcode table file format
            filename: Name used in error messages

        Returns:
            The loaded OpcodeTable

        Raises:
            OpcodeTableError: On a line with the wrong field count or a bad opcode
        """
        table: dict[str, int] = {}

        for line_no, line in enumerate(lines, start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith(_COMMENT_PREFIXES):
                continue

            location = SourceLocation(filename, line_no)
            fields = stripped.split()

            if len(fields) != 2:
                raise OpcodeTableError(
                    f"expected 'MNEMONIC OPCODE', found {len(fields)} field(s)",
                    location=location,
                    source_line=line,
                )

            mnemonic, opcode = fields
            if not _OPCODE_RE.match(opcode):
                raise OpcodeTableError(
                    f"opcode '{opcode}' for '{mnemonic}' is not two hex digits",
                    location=location,
                    source_line=line,
                    kind=ErrorKind.BAD_NUMBER,
                )

            mnemonic = mnemonic.upper()
            if mnemonic in table:
                logger.debug(f"{location}: '{mnemonic}' redefined as {opcode.upper()}")
            table[mnemonic] = int(opcode, 16)

        logger.debug(f"Loaded {len(table)} opcodes from {filename}")
        return cls(table)

    @classmethod
    def from_file(cls, path: str | Path, encoding: str = "latin-1") -> "OpcodeTable":
        """
        Load an opcode table file.

        Raises:
            OpcodeTableError: If the file is malformed
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid text in the encoding
        """
        path = Path(path)
        text = path.read_text(encoding=encoding)
        return cls.from_lines(text.splitlines(), str(path))


def load_opcode_table(path: str | Path | None = None, encoding: str = "latin-1") -> PassResult[OpcodeTable]:
    """
    Load an opcode table, reporting failure as a value.

    Args:
        path: Opcode table file, or None for the built-in SIC table
        encoding: File text encoding

    Returns:
        PassResult holding the OpcodeTable, or an IO_ERROR (file cannot be
        read or decoded), MALFORMED_LINE or BAD_NUMBER failure
    """
    if path is None:
        return PassResult.success(OpcodeTable.default())

    try:
        return PassResult.success(OpcodeTable.from_file(path, encoding))
    except OpcodeTableError as e:
        return PassResult.failed(Failure.from_error(e))
    except (OSError, UnicodeDecodeError) as e:
        return PassResult.failed(Failure.from_read_error(e, path))
