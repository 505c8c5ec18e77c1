"""
Pass 1: Address Assignment
==========================

Pass one scans the source once and:
- Reads the START line (if any) to set the load address
- Assigns an address to every statement via the location counter
- Records each label in the symbol table
- Stops at END and computes the program length

The output is an IntermediateProgram (the address-annotated statements)
plus the SymbolTable. Pass two consumes both.

Location Counter
----------------
The location counter starts at the START address (or 0 without START) and
only moves forward:

    instruction   +3
    WORD          +3
    BYTE lit      +encoded size of lit (C'EOF' -> 3, X'F1' -> 1)
    RESW n        +3n
    RESB n        +n

The END line is kept out of band as ``IntermediateProgram.end`` at the final
location counter. It never shares the address-ordered record sequence with
real statements, so a trailing zero-size directive cannot collide with it.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional
import logging

from sicasm.assembler import directives
from sicasm.assembler.optab import OpcodeTable
from sicasm.assembler.source import SourceLine, iter_source_lines
from sicasm.assembler.symbols import SymbolTable
from sicasm.config import AssemblerConfig
from sicasm.errors import (
    AssemblerError,
    AssemblySyntaxError,
    DirectiveError,
    ErrorKind,
    Failure,
    PassResult,
    SourceLocation,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Intermediate Program
# =============================================================================

@dataclass(frozen=True)
class IntermediateRecord:
    """A source statement and the address assigned to it."""
    address: int
    line: SourceLine

    @property
    def label(self) -> Optional[str]:
        return self.line.label

    @property
    def mnemonic(self) -> str:
        return self.line.mnemonic

    @property
    def operand(self) -> str:
        return self.line.operand


@dataclass(frozen=True)
class IntermediateProgram:
    """
    Address-annotated program produced by pass one.

    Attributes:
        records: Statements between START and END, in source (and address) order
        start: The START statement, or None if the program has none
        end: The END statement at the final location counter
        start_address: Load address from START (0 without START)
        program_length: Final location counter minus start address
    """
    records: tuple[IntermediateRecord, ...]
    start: Optional[IntermediateRecord]
    end: IntermediateRecord
    start_address: int
    program_length: int

    @property
    def program_name(self) -> Optional[str]:
        return self.start.label if self.start else None

    @property
    def end_address(self) -> int:
        """The final location counter."""
        return self.start_address + self.program_length

    def __iter__(self):
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class PassOneOutput:
    """Both products of pass one."""
    program: IntermediateProgram
    symbols: SymbolTable


# =============================================================================
# Pass One Engine
# =============================================================================

class PassOne:
    """
    First pass of the assembler.

    A PassOne instance handles a single translation; create a new one for
    each run.
    """

    def __init__(self, optab: OpcodeTable, config: Optional[AssemblerConfig] = None):
        self._optab = optab
        self._config = config or AssemblerConfig()
        self._symbols = SymbolTable(strict=self._config.strict_symbols)
        self._records: list[IntermediateRecord] = []
        self._start: Optional[IntermediateRecord] = None
        self._start_address = 0
        self._locctr = 0
        self._last_location: Optional[SourceLocation] = None

    def run(self, lines: Iterable[str], filename: str = "<input>") -> PassOneOutput:
        """
        Assign addresses to the source program.

        Args:
            lines: Source text lines
            filename: Name used in error locations

        Returns:
            The intermediate program and the symbol table

        Raises:
            AssemblerError: On the first structural or numeric error
        """
        statements = iter_source_lines(
            lines,
            filename,
            no_label_token=self._config.no_label_token,
            comment_prefix=self._config.comment_prefix,
        )

        first = next(statements, None)
        if first is None:
            raise AssemblySyntaxError(
                "source contains no statements",
                location=SourceLocation(filename, 1),
                kind=ErrorKind.MISSING_END,
            )

        pending: Optional[SourceLine] = first
        if first.mnemonic == directives.START:
            self._start_address = directives.parse_start_address(first)
            self._locctr = self._start_address
            self._start = IntermediateRecord(self._locctr, first)
            pending = None
            logger.debug(f"Program '{first.label}' starts at {self._start_address:04X}")
        else:
            logger.debug("No START directive, assembling at 0000")

        end_line = self._scan(pending, statements)
        if end_line is None:
            raise AssemblySyntaxError(
                "source ends without an END directive",
                location=self._last_location or first.location,
                kind=ErrorKind.MISSING_END,
                hint="terminate the program with '- END <entry>'",
            )

        program = IntermediateProgram(
            records=tuple(self._records),
            start=self._start,
            end=IntermediateRecord(self._locctr, end_line),
            start_address=self._start_address,
            program_length=self._locctr - self._start_address,
        )

        logger.debug(
            f"Pass 1 complete: {len(program.records)} statements, "
            f"{len(self._symbols)} symbols, length {program.program_length:04X}"
        )
        return PassOneOutput(program, self._symbols.freeze())

    def _scan(self, first: Optional[SourceLine], statements) -> Optional[SourceLine]:
        """Process statements up to END. Returns the END line, or None."""
        if first is not None:
            if first.mnemonic == directives.END:
                return first
            self._process(first)

        for line in statements:
            if line.mnemonic == directives.END:
                return line
            self._process(line)

        return None

    def _process(self, line: SourceLine) -> None:
        """Record one statement, define its label and advance the location counter."""
        if line.mnemonic == directives.START:
            raise AssemblySyntaxError(
                "START must be the first statement",
                location=line.location,
                source_line=line.text,
            )

        if self._locctr > directives.MAX_ADDRESS:
            raise DirectiveError(
                f"statement address {self._locctr:X} exceeds {directives.MAX_ADDRESS:04X}",
                location=line.location,
                source_line=line.text,
                kind=ErrorKind.ADDRESS_RANGE,
            )

        self._last_location = line.location
        self._records.append(IntermediateRecord(self._locctr, line))

        if line.has_label:
            self._symbols.define(line.label, self._locctr, line.location, line.text)

        self._locctr += directives.statement_size(line, self._optab, self._config.encoding)

        if self._locctr > directives.MEMORY_SIZE:
            raise DirectiveError(
                f"program extends past address {directives.MAX_ADDRESS:04X}",
                location=line.location,
                source_line=line.text,
                kind=ErrorKind.ADDRESS_RANGE,
            )


def run_pass_one(
    lines: Iterable[str],
    optab: OpcodeTable,
    config: Optional[AssemblerConfig] = None,
    filename: str = "<input>",
) -> PassResult[PassOneOutput]:
    """
    Run pass one, reporting the first error as a Failure.

    No partial symbol table or intermediate program is returned on failure.
    """
    try:
        return PassResult.success(PassOne(optab, config).run(lines, filename))
    except AssemblerError as e:
        logger.debug(f"Pass 1 failed: {e.kind}")
        return PassResult.failed(Failure.from_error(e))
