"""
SIC Assembler Directives
========================

Storage sizes and operand parsing shared by both passes.

Directive Reference
-------------------
START hex     Program name (label) and load address. First line only.
END   [sym]   End of source. Lines after END are not translated.
WORD  n       One 3-byte word initialized to decimal n.
BYTE  lit     Character (C'..') or hex (X'..') constant.
RESW  n       Reserve n uninitialized words (3n bytes).
RESB  n       Reserve n uninitialized bytes.

Every instruction found in the opcode table occupies 3 bytes.
"""

import re

from sicasm.assembler.literals import parse_byte_literal
from sicasm.assembler.optab import OpcodeTable
from sicasm.assembler.source import SourceLine
from sicasm.errors import DirectiveError, ErrorKind

INSTRUCTION_SIZE = 3
WORD_SIZE = 3

# 16-bit address field; the location counter may reach MEMORY_SIZE only
# as the address just past the last byte.
MAX_ADDRESS = 0xFFFF
MEMORY_SIZE = MAX_ADDRESS + 1

# 24-bit word range, negative values in two's complement
WORD_MIN = -(1 << 23)
WORD_MAX = (1 << 24) - 1

START = "START"
END = "END"
WORD = "WORD"
BYTE = "BYTE"
RESW = "RESW"
RESB = "RESB"

STORAGE_DIRECTIVES = frozenset({WORD, BYTE, RESW, RESB})
RESERVE_DIRECTIVES = frozenset({RESW, RESB})

_HEX_RE = re.compile(r"^[0-9A-Fa-f]+$")
_DECIMAL_RE = re.compile(r"^[0-9]+$")
_SIGNED_DECIMAL_RE = re.compile(r"^[+-]?[0-9]+$")


def _number_error(line: SourceLine, message: str) -> DirectiveError:
    return DirectiveError(
        message,
        location=line.location,
        source_line=line.text,
        kind=ErrorKind.BAD_NUMBER,
    )


def parse_start_address(line: SourceLine) -> int:
    """Parse the hexadecimal START operand."""
    if not _HEX_RE.match(line.operand):
        raise _number_error(line, f"START address '{line.operand}' is not a hex number")
    address = int(line.operand, 16)
    if address > MAX_ADDRESS:
        raise DirectiveError(
            f"START address {address:X} exceeds {MAX_ADDRESS:04X}",
            location=line.location,
            source_line=line.text,
            kind=ErrorKind.ADDRESS_RANGE,
        )
    return address


def parse_count(line: SourceLine) -> int:
    """Parse the non-negative decimal operand of RESW/RESB."""
    operand = line.operand
    if not _DECIMAL_RE.match(operand):
        raise _number_error(line, f"{line.mnemonic} count '{operand}' is not a decimal number")
    return int(operand)


def parse_word_value(line: SourceLine) -> int:
    """
    Parse the decimal WORD operand.

    Returns:
        The 24-bit encoded value (negative numbers in two's complement)
    """
    if not _SIGNED_DECIMAL_RE.match(line.operand):
        raise _number_error(line, f"WORD value '{line.operand}' is not a decimal number")
    value = int(line.operand)
    if not WORD_MIN <= value <= WORD_MAX:
        raise _number_error(line, f"WORD value {value} does not fit in 24 bits")
    return value & WORD_MAX


def statement_size(line: SourceLine, optab: OpcodeTable, encoding: str = "latin-1") -> int:
    """
    Return the number of bytes a statement occupies.

    Raises:
        DirectiveError: For unknown mnemonics and bad numeric operands
        LiteralError: For malformed BYTE literals
    """
    mnemonic = line.mnemonic

    if mnemonic in optab:
        return INSTRUCTION_SIZE
    if mnemonic == WORD:
        parse_word_value(line)
        return WORD_SIZE
    if mnemonic == BYTE:
        return parse_byte_literal(line.operand, line.location, line.text, encoding).size
    if mnemonic == RESW:
        return WORD_SIZE * parse_count(line)
    if mnemonic == RESB:
        return parse_count(line)

    raise DirectiveError(
        f"unknown mnemonic or directive '{line.mnemonic}'",
        location=line.location,
        source_line=line.text,
        hint="expected an instruction from the opcode table or one of BYTE, WORD, RESB, RESW",
    )
