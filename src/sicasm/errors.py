"""
SIC Assembler Error Hierarchy
=============================

This module defines the exception hierarchy for the SIC assembler, plus the
tagged failure values that the assembly passes hand back instead of raising.

Exception Hierarchy
-------------------
SicAsmError (base)
└── AssemblerError (carries an ErrorKind)
    ├── AssemblySyntaxError - malformed source line, missing END
    ├── DirectiveError - unknown mnemonic/directive, bad numeric operand
    ├── LiteralError - malformed BYTE literal
    ├── UndefinedSymbolError - reference to an undefined label (strict mode)
    ├── DuplicateSymbolError - label defined more than once (strict mode)
    └── OpcodeTableError - malformed opcode table file

Pass Results
------------
Each pass returns a PassResult: either a value or a Failure. A Failure is a
plain frozen record (kind, message, location) that keeps the exception it
was built from, and ``Failure.to_exception()`` hands that exception back.
This keeps the pipeline free of exception-driven control flow while still
letting callers that prefer exceptions use them.

Error messages follow this format:
    filename:line: error: description
        source_line_text
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar


# =============================================================================
# Base Exception Class
# =============================================================================

class SicAsmError(Exception):
    """
    Base exception for all SIC assembler errors.

    Callers can catch every assembler-related error with a single clause:

        try:
            assembler.assemble_file("prog.asm")
        except SicAsmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Error Kinds
# =============================================================================

class ErrorKind(Enum):
    """Classification of translation failures."""
    IO_ERROR = "I/O error"
    MALFORMED_LINE = "malformed line"
    MISSING_END = "missing END"
    UNKNOWN_DIRECTIVE = "unknown directive"
    BAD_NUMBER = "bad number"
    BAD_LITERAL = "bad literal"
    DUPLICATE_SYMBOL = "duplicate symbol"
    UNDEFINED_SYMBOL = "undefined symbol"
    ADDRESS_RANGE = "address out of range"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A line in an input file, for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(SicAsmError):
    """
    Base exception for all translation errors.

    Attributes:
        message: The error description
        kind: The ErrorKind classifying this failure
        location: Where in the input the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The raw input text at the error location (optional)
    """

    default_kind = ErrorKind.MALFORMED_LINE

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
    ):
        self.message = message
        self.kind = kind or self.default_kind
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.asm:4: error: unknown directive 'WROD'
                FIVE WROD 5
            hint: expected an instruction or one of BYTE, WORD, RESB, RESW
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None:
            parts.append(f"    {self.source_line.rstrip()}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Structural error in the assembly source.

    Examples:
        - Wrong number of fields on a line
        - Source ends without an END directive
        - Unbalanced quotes in an operand
    """
    default_kind = ErrorKind.MALFORMED_LINE


class DirectiveError(AssemblerError):
    """
    Error in a mnemonic, directive or its numeric operand.

    Raised for unknown mnemonics, non-hex START addresses, non-decimal
    RESW/RESB/WORD operands, and addresses beyond the 16-bit range.
    """
    default_kind = ErrorKind.UNKNOWN_DIRECTIVE


class LiteralError(AssemblerError):
    """Malformed BYTE literal (e.g. X'F', Q'AB', C'')."""
    default_kind = ErrorKind.BAD_LITERAL


class UndefinedSymbolError(AssemblerError):
    """
    Reference to an undefined symbol.

    Only raised when strict symbol checking is enabled; otherwise
    undefined operands resolve to address 0.
    """
    default_kind = ErrorKind.UNDEFINED_SYMBOL

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        hint = None
        if self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateSymbolError(AssemblerError):
    """
    Label defined more than once.

    Only raised when strict symbol checking is enabled; otherwise the
    first definition wins and later ones are recorded as redefinitions.
    """
    default_kind = ErrorKind.DUPLICATE_SYMBOL

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class OpcodeTableError(AssemblerError):
    """Malformed line in an opcode table file."""
    default_kind = ErrorKind.MALFORMED_LINE


# =============================================================================
# Tagged Pass Results
# =============================================================================

@dataclass(frozen=True)
class Failure:
    """
    A translation failure, as returned by a pass.

    Attributes:
        kind: What went wrong
        message: Human-readable, fully formatted description
        error: The originating exception, kept for callers that re-raise
        location: Input location, if known
    """
    kind: ErrorKind
    message: str
    error: Exception
    location: Optional[SourceLocation] = None

    @classmethod
    def from_error(cls, error: AssemblerError) -> "Failure":
        return cls(error.kind, str(error), error, error.location)

    @classmethod
    def from_read_error(cls, error: OSError | UnicodeDecodeError, path: Any) -> "Failure":
        """
        An IO_ERROR failure for a file that could not be opened or decoded.
        """
        if isinstance(error, UnicodeDecodeError):
            reason = (
                f"not valid {error.encoding} text "
                f"(byte {error.object[error.start]:#04x} at offset {error.start})"
            )
        else:
            reason = error.strerror or str(error)
        return cls(ErrorKind.IO_ERROR, f"error: cannot read '{path}': {reason}", error)

    def to_exception(self) -> Exception:
        """Return the exception this failure was built from."""
        return self.error

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


T = TypeVar("T")


@dataclass(frozen=True)
class PassResult(Generic[T]):
    """
    Outcome of one assembly pass: a value on success, a Failure otherwise.

    Exactly one of ``value`` and ``failure`` is set.
    """
    value: Optional[T] = None
    failure: Optional[Failure] = None

    @classmethod
    def success(cls, value: T) -> "PassResult[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, failure: Failure) -> "PassResult[T]":
        return cls(failure=failure)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> T:
        """Return the value, raising the failure's exception if there is none."""
        if self.failure is not None:
            raise self.failure.to_exception()
        return self.value
