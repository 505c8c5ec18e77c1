"""
SIC Object Record Definitions
=============================

This module defines the records of an assembled object program. An object
program is one Header record, zero or more Text records, and one End
record, in that order.

Record Formats
--------------
Each record renders to one line of the object listing, with fields
separated by "^ ":

**Header**:
    H^ <name>^ <start, 6 hex>^ <length, 6 hex>
    H^ PROG^ 001000^ 00000C

**Text** (each encoded instruction/word/byte constant is its own field):
    T^ <start, 6 hex>^ <code>^ <code>^ ...
    T^ 001000^ 001006^ 0C1009^ 000005^

**End**:
    E^ <first executable address, 6 hex>
    E^ 001000

A text record never carries more than 30 bytes (60 hex characters) of
object code.
"""

from dataclasses import dataclass
from typing import Optional, Union

FIELD_SEPARATOR = "^ "


# =============================================================================
# Header Record
# =============================================================================

@dataclass(frozen=True)
class HeaderRecord:
    """
    Program identification record.

    Attributes:
        name: Program name from the START label, or None
        start: Load address
        length: Program length in bytes
    """
    name: Optional[str]
    start: int
    length: int

    record_type = "H"

    def render(self) -> str:
        return FIELD_SEPARATOR.join([
            self.record_type,
            self.name or "",
            f"{self.start:06X}",
            f"{self.length:06X}",
        ])


# =============================================================================
# Text Record
# =============================================================================

@dataclass(frozen=True)
class TextRecord:
    """
    A contiguous run of object code.

    Attributes:
        start: Address of the first byte
        chunks: Encoded statements, as upper-case hex strings, in address order
    """
    start: int
    chunks: tuple[str, ...]

    record_type = "T"

    @property
    def length(self) -> int:
        """Payload length in bytes."""
        return sum(len(chunk) for chunk in self.chunks) // 2

    @property
    def data(self) -> bytes:
        return bytes.fromhex("".join(self.chunks))

    @property
    def end(self) -> int:
        """Address just past the last byte."""
        return self.start + self.length

    def render(self) -> str:
        fields = [self.record_type, f"{self.start:06X}", *self.chunks]
        return FIELD_SEPARATOR.join(fields) + FIELD_SEPARATOR


# =============================================================================
# End Record
# =============================================================================

@dataclass(frozen=True)
class EndRecord:
    """
    End of object program.

    Attributes:
        start: Address at which execution begins
    """
    start: int

    record_type = "E"

    def render(self) -> str:
        return f"{self.record_type}{FIELD_SEPARATOR}{self.start:06X}"


ObjectRecord = Union[HeaderRecord, TextRecord, EndRecord]
