"""
SIC Source Line Tokenizer
=========================

Splits assembly source into SourceLine records. The source format has one
statement per line, with whitespace-separated fields:

    <label-or-"-">  <mnemonic-or-directive>  [<operand>]

Examples:
    PROG   START  1000
    -      LDA    FIVE
    BUFFER RESB   4096
    EOF    BYTE   C'END OF FILE'
    -      RSUB

The operand is optional. It may only contain whitespace inside a quoted
BYTE literal. Blank lines and lines whose first non-blank character is the
comment prefix ('.' by default) are skipped entirely.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Optional
import re

from sicasm.errors import AssemblySyntaxError, SourceLocation

# A quoted operand: optional type prefix, then a single quoted body
_QUOTED_OPERAND_RE = re.compile(r"^[^\s']*'[^']*'$")


@dataclass(frozen=True)
class SourceLine:
    """
    One parsed statement of the source program.

    Attributes:
        label: Label defined by this line, or None
        mnemonic: Instruction mnemonic or directive, upper-cased
        operand: Operand text, "" when absent
        location: Where the line came from
        text: The raw line, for error messages
    """
    label: Optional[str]
    mnemonic: str
    operand: str
    location: SourceLocation
    text: str = ""

    @property
    def has_label(self) -> bool:
        return self.label is not None


def parse_line(text: str, location: SourceLocation, no_label_token: str = "-") -> SourceLine:
    """
    Parse one non-blank, non-comment source line.

    Raises:
        AssemblySyntaxError: If the line has fewer than two fields, or an
            operand with whitespace outside of quotes
    """
    fields = text.split(None, 2)

    if len(fields) < 2:
        raise AssemblySyntaxError(
            "expected '<label> <mnemonic> [operand]'",
            location=location,
            source_line=text,
            hint=f"use '{no_label_token}' in the label field for unlabelled lines",
        )

    label, mnemonic = fields[0], fields[1]
    operand = fields[2].strip() if len(fields) == 3 else ""

    if operand and any(ch.isspace() for ch in operand):
        if not _QUOTED_OPERAND_RE.match(operand):
            raise AssemblySyntaxError(
                f"unexpected text after operand in '{operand}'",
                location=location,
                source_line=text,
            )

    return SourceLine(
        label=None if label == no_label_token else label,
        mnemonic=mnemonic.upper(),
        operand=operand,
        location=location,
        text=text,
    )


def iter_source_lines(
    lines: Iterable[str],
    filename: str = "<input>",
    no_label_token: str = "-",
    comment_prefix: str = ".",
) -> Iterator[SourceLine]:
    """
    Tokenize source lines lazily, skipping blank and comment lines.

    Line numbers in the resulting locations count every physical line,
    including the skipped ones.
    """
    for line_no, raw in enumerate(lines, start=1):
        text = raw.rstrip("\r\n")
        stripped = text.strip()
        if not stripped or (comment_prefix and stripped.startswith(comment_prefix)):
            continue
        yield parse_line(stripped, SourceLocation(filename, line_no), no_label_token)
