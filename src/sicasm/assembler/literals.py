"""
BYTE Literal Parsing
====================

The BYTE directive takes a quoted literal in one of two forms:

    C'EOF'    character literal: one byte per character (E=45 O=4F F=46)
    X'F1'     hex literal: the digits are the encoded bytes, two per byte

Both forms are parsed into a ByteLiteral, which knows its kind, its body
text, its encoded size, and its encoding as upper-case hex digits. Pass one
uses the size, pass two uses the encoding, so both always agree.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import string

from sicasm.errors import LiteralError, SourceLocation


class LiteralKind(Enum):
    """BYTE literal type prefixes."""
    CHAR = "C"
    HEX = "X"


@dataclass(frozen=True)
class ByteLiteral:
    """
    A parsed BYTE literal.

    Attributes:
        kind: CHAR or HEX
        body: Text between the quotes
        data: The encoded bytes
    """
    kind: LiteralKind
    body: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def hex(self) -> str:
        """Return the encoding as upper-case hex digits."""
        return self.data.hex().upper()

    def __str__(self) -> str:
        return f"{self.kind.value}'{self.body}'"


def parse_byte_literal(
    operand: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
    encoding: str = "latin-1",
) -> ByteLiteral:
    """
    Parse a BYTE operand.

    Args:
        operand: Operand text, e.g. "C'EOF'" or "X'F1'"
        location: Source location for error messages
        source_line: Raw source line for error messages
        encoding: Character set used for C'...' literals

    Returns:
        The parsed ByteLiteral

    Raises:
        LiteralError: If the operand is not a well-formed C or X literal
    """
    def fail(message: str, hint: Optional[str] = None) -> LiteralError:
        return LiteralError(message, location=location, hint=hint, source_line=source_line)

    if len(operand) < 3 or operand[1] != "'" or not operand.endswith("'"):
        raise fail(
            f"malformed BYTE operand '{operand}'",
            hint="expected C'characters' or X'hexdigits'",
        )

    prefix = operand[0].upper()
    body = operand[2:-1]

    if "'" in body:
        raise fail(f"unexpected quote inside BYTE literal {operand}")

    if not body:
        raise fail(f"empty BYTE literal {operand}")

    if prefix == LiteralKind.CHAR.value:
        try:
            data = body.encode(encoding)
        except UnicodeEncodeError:
            raise fail(f"character literal {operand} cannot be encoded as {encoding}") from None
        return ByteLiteral(LiteralKind.CHAR, body, data)

    if prefix == LiteralKind.HEX.value:
        if any(ch not in string.hexdigits for ch in body):
            raise fail(f"invalid hex digit in BYTE literal {operand}")
        if len(body) % 2:
            raise fail(
                f"hex literal {operand} has an odd number of digits",
                hint=f"pad with a leading zero: X'0{body}'",
            )
        return ByteLiteral(LiteralKind.HEX, body, bytes.fromhex(body))

    raise fail(
        f"unknown BYTE literal type '{operand[0]}'",
        hint="use C for characters or X for hex digits",
    )
