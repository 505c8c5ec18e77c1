"""
Pass 2: Object Code Generation
==============================

Pass two walks the intermediate program produced by pass one and emits the
object program: a Header record, Text records, and an End record.

Encoding
--------
- Instruction: opcode byte + 16-bit operand address (6 hex digits).
  ``SYM,X`` sets the index bit (8000). An empty operand encodes 0000.
- WORD n: n as a 24-bit value (6 hex digits).
- BYTE C'..' / X'..': the literal's encoded bytes.
- RESW / RESB: no object code; the current text record is closed so the
  next code starts a new record at its own address.

Text records are filled up to ``AssemblerConfig.max_text_bytes`` (30 bytes).
If the next encoding does not fit, the current record is closed first.
An encoding longer than a whole record (a long BYTE literal) is split over
as many records as needed.

Undefined Symbols
-----------------
An operand naming an undefined symbol resolves to address 0. Every lookup
is kept in ``ObjectProgram.resolutions`` with its ``defaulted`` flag. With
``strict_symbols`` enabled an undefined symbol is an error instead.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Optional
import logging

from sicasm.assembler import directives
from sicasm.assembler.literals import parse_byte_literal
from sicasm.assembler.optab import OpcodeTable
from sicasm.assembler.pass_one import IntermediateProgram, IntermediateRecord
from sicasm.assembler.records import EndRecord, HeaderRecord, ObjectRecord, TextRecord
from sicasm.assembler.symbols import Resolution, SymbolTable
from sicasm.config import AssemblerConfig
from sicasm.errors import (
    AssemblerError,
    DirectiveError,
    ErrorKind,
    Failure,
    PassResult,
    UndefinedSymbolError,
)

logger = logging.getLogger(__name__)

INDEX_BIT = 0x8000
INDEX_SUFFIX = ",X"


# =============================================================================
# Object Program
# =============================================================================

@dataclass(frozen=True)
class ObjectProgram:
    """
    The output of pass two.

    Attributes:
        header: Program name, start address and length
        texts: Text records in address order
        end: Entry point record
        resolutions: Every operand symbol lookup, in statement order
    """
    header: HeaderRecord
    texts: tuple[TextRecord, ...]
    end: EndRecord
    resolutions: tuple[Resolution, ...] = ()

    @property
    def records(self) -> tuple[ObjectRecord, ...]:
        """All records: header, texts, end."""
        return (self.header, *self.texts, self.end)

    def __iter__(self) -> Iterator[ObjectRecord]:
        return iter(self.records)

    @property
    def defaulted(self) -> tuple[Resolution, ...]:
        """Lookups of undefined symbols that were resolved to 0."""
        return tuple(r for r in self.resolutions if r.defaulted)

    def render(self) -> list[str]:
        return [record.render() for record in self.records]


# =============================================================================
# Text Record Accumulator
# =============================================================================

class TextRecordBuilder:
    """
    Accumulates encoded statements into size-limited text records.
    """

    def __init__(self, max_bytes: int):
        self._max_bytes = max_bytes
        self._start = 0
        self._chunks: list[str] = []
        self._size = 0
        self._records: list[TextRecord] = []

    def append(self, address: int, chunk: str) -> None:
        """
        Add the encoding of the statement at ``address``.

        Args:
            address: Address of the statement's first byte
            chunk: Encoded bytes as hex digits
        """
        size = len(chunk) // 2

        if size > self._max_bytes:
            self.flush()
            step = self._max_bytes * 2
            for offset in range(0, len(chunk), step):
                self._chunks = [chunk[offset:offset + step]]
                self._start = address + offset // 2
                self._size = len(self._chunks[0]) // 2
                self.flush()
            return

        if self._chunks and self._size + size > self._max_bytes:
            self.flush()

        if not self._chunks:
            self._start = address
        self._chunks.append(chunk)
        self._size += size

    def flush(self) -> None:
        """Close the current record, if it holds any code."""
        if self._chunks:
            self._records.append(TextRecord(self._start, tuple(self._chunks)))
            logger.debug(f"Text record at {self._start:06X}, {self._size} bytes")
        self._chunks = []
        self._size = 0

    @property
    def records(self) -> tuple[TextRecord, ...]:
        return tuple(self._records)


# =============================================================================
# Pass Two Engine
# =============================================================================

class PassTwo:
    """
    Second pass of the assembler.

    A PassTwo instance handles a single translation; create a new one for
    each run.
    """

    def __init__(
        self,
        optab: OpcodeTable,
        symbols: SymbolTable,
        config: Optional[AssemblerConfig] = None,
    ):
        self._optab = optab
        self._symbols = symbols
        self._config = config or AssemblerConfig()
        self._resolutions: list[Resolution] = []

    def run(self, program: IntermediateProgram) -> ObjectProgram:
        """
        Generate the object program.

        Raises:
            AssemblerError: On unknown mnemonics, bad operands, or undefined
                symbols in strict mode
        """
        header = HeaderRecord(program.program_name, program.start_address, program.program_length)
        texts = TextRecordBuilder(self._config.max_text_bytes)

        for record in program.records:
            mnemonic = record.mnemonic

            if mnemonic in directives.RESERVE_DIRECTIVES:
                texts.flush()
                continue

            texts.append(record.address, self._encode(record))

        texts.flush()

        result = ObjectProgram(
            header=header,
            texts=texts.records,
            end=EndRecord(program.start_address),
            resolutions=tuple(self._resolutions),
        )
        logger.debug(
            f"Pass 2 complete: {len(result.texts)} text records, "
            f"{len(result.defaulted)} undefined symbol reference(s)"
        )
        return result

    def _encode(self, record: IntermediateRecord) -> str:
        """Return the object code of one statement as hex digits."""
        line = record.line
        mnemonic = line.mnemonic

        if mnemonic in self._optab:
            address = self._operand_address(record)
            return f"{self._optab[mnemonic]:02X}{address:04X}"

        if mnemonic == directives.WORD:
            return f"{directives.parse_word_value(line):06X}"

        if mnemonic == directives.BYTE:
            literal = parse_byte_literal(line.operand, line.location, line.text, self._config.encoding)
            return literal.hex()

        raise DirectiveError(
            f"unknown mnemonic or directive '{line.mnemonic}'",
            location=line.location,
            source_line=line.text,
        )

    def _operand_address(self, record: IntermediateRecord) -> int:
        """Resolve an instruction operand to its 16-bit address field."""
        line = record.line
        operand = line.operand
        if not operand:
            return 0

        indexed = operand.upper().endswith(INDEX_SUFFIX)
        name = operand[:-len(INDEX_SUFFIX)] if indexed else operand

        resolution = self._symbols.resolve(name)
        self._resolutions.append(resolution)

        if resolution.defaulted:
            if self._config.strict_symbols:
                raise UndefinedSymbolError(
                    name,
                    location=line.location,
                    source_line=line.text,
                    similar_symbols=self._symbols.find_similar(name),
                )
            logger.debug(f"{line.location}: undefined symbol '{name}' resolved to 0000")

        if not indexed:
            return resolution.address

        if resolution.address & INDEX_BIT:
            raise DirectiveError(
                f"indexed operand '{name}' at {resolution.address:04X} is beyond the 15-bit address range",
                location=line.location,
                source_line=line.text,
                kind=ErrorKind.ADDRESS_RANGE,
            )
        return resolution.address | INDEX_BIT


def run_pass_two(
    program: IntermediateProgram,
    symbols: SymbolTable,
    optab: OpcodeTable,
    config: Optional[AssemblerConfig] = None,
) -> PassResult[ObjectProgram]:
    """Run pass two, reporting the first error as a Failure."""
    try:
        return PassResult.success(PassTwo(optab, symbols, config).run(program))
    except AssemblerError as e:
        logger.debug(f"Pass 2 failed: {e.kind}")
        return PassResult.failed(Failure.from_error(e))
