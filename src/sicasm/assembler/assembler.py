"""
SIC Assembler - Main Interface
==============================

This module provides the Assembler class, the primary interface for
translating SIC assembly source. It loads the opcode table and runs the two
passes, then publishes the three translation products together:

- the symbol table (pass one)
- the intermediate program (pass one)
- the object program (pass two)

Example Usage
-------------
>>> from sicasm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> result = asm.assemble_string('''
... PROG  START 1000
... -     LDA   FIVE
... -     STA   ALPHA
... FIVE  WORD  5
... ALPHA RESW  1
... -     END   PROG
... ''')
>>> print("\\n".join(result.object_listing()))
H^ PROG^ 001000^ 00000C
T^ 001000^ 001006^ 0C1009^ 000005^
E^ 001000

Two Calling Styles
------------------
- ``translate_*`` methods never raise for translation errors. They return
  an AssemblyResult whose ``failure`` describes the first error, and whose
  output fields are all None in that case.
- ``assemble_*`` methods raise the failure as an exception (AssemblerError
  or OSError) and return the successful AssemblyResult otherwise.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from sicasm.assembler.listing import (
    intermediate_listing,
    join_lines,
    object_listing,
    symbol_listing,
)
from sicasm.assembler.optab import OpcodeTable, load_opcode_table
from sicasm.assembler.pass_one import IntermediateProgram, run_pass_one
from sicasm.assembler.pass_two import ObjectProgram, run_pass_two
from sicasm.assembler.symbols import SymbolTable
from sicasm.config import AssemblerConfig
from sicasm.errors import Failure

logger = logging.getLogger(__name__)


# =============================================================================
# Assembly Result
# =============================================================================

@dataclass(frozen=True)
class AssemblyResult:
    """
    Outcome of one translation run.

    On success ``failure`` is None and the three products are set; on
    failure only ``failure`` is set.
    """
    failure: Optional[Failure] = None
    program: Optional[IntermediateProgram] = None
    symbols: Optional[SymbolTable] = None
    object_program: Optional[ObjectProgram] = None
    no_label_token: str = "-"

    @classmethod
    def failed(cls, failure: Failure) -> "AssemblyResult":
        return cls(failure=failure)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def raise_for_failure(self) -> "AssemblyResult":
        """Raise the failure's exception, or return self on success."""
        if self.failure is not None:
            raise self.failure.to_exception()
        return self

    # =========================================================================
    # Listings
    # =========================================================================

    def symbol_listing(self) -> list[str]:
        self.raise_for_failure()
        return symbol_listing(self.symbols)

    def intermediate_listing(self) -> list[str]:
        self.raise_for_failure()
        return intermediate_listing(self.program, self.no_label_token)

    def object_listing(self) -> list[str]:
        self.raise_for_failure()
        return object_listing(self.object_program)


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Two-pass SIC assembler.

    Each translation creates fresh pass state, so one Assembler can be
    reused for any number of runs; identical inputs give identical results.

    Attributes:
        optab: The opcode table in use
        config: Assembler settings
    """

    def __init__(self, optab: Optional[OpcodeTable] = None, config: Optional[AssemblerConfig] = None):
        """
        Initialize the assembler.

        Args:
            optab: Opcode table (default: the built-in SIC instruction set)
            config: Settings (default: AssemblerConfig())
        """
        self.optab = optab if optab is not None else OpcodeTable.default()
        self.config = config or AssemblerConfig()
        self._result: Optional[AssemblyResult] = None

    @classmethod
    def from_optab_file(cls, path: str | Path, config: Optional[AssemblerConfig] = None) -> "Assembler":
        """
        Create an assembler using an opcode table file.

        Raises:
            OpcodeTableError: If the table is malformed
            OSError: If the file cannot be read
        """
        config = config or AssemblerConfig()
        return cls(load_opcode_table(path, config.encoding).unwrap(), config)

    # =========================================================================
    # Translation (failures returned as values)
    # =========================================================================

    def translate_lines(
        self,
        lines: Iterable[str],
        filename: str = "<input>",
        optab: Optional[OpcodeTable] = None,
    ) -> AssemblyResult:
        """
        Translate source lines.

        Args:
            lines: Source text lines
            filename: Name used in error locations
            optab: Opcode table for this run only (default: self.optab)

        Returns:
            AssemblyResult with either all three products or a failure
        """
        optab = optab if optab is not None else self.optab
        logger.debug(f"Assembling {filename} with {len(optab)} opcodes")

        first = run_pass_one(lines, optab, self.config, filename)
        if not first.ok:
            return self._finish(AssemblyResult.failed(first.failure))

        program, symbols = first.value.program, first.value.symbols
        second = run_pass_two(program, symbols, optab, self.config)
        if not second.ok:
            return self._finish(AssemblyResult.failed(second.failure))

        return self._finish(AssemblyResult(
            program=program,
            symbols=symbols,
            object_program=second.value,
            no_label_token=self.config.no_label_token,
        ))

    def translate_string(
        self,
        source: str,
        filename: str = "<input>",
        optab: Optional[OpcodeTable] = None,
    ) -> AssemblyResult:
        """Translate source code held in a string."""
        return self.translate_lines(source.splitlines(), filename, optab)

    def translate_file(self, filepath: str | Path, optab: Optional[OpcodeTable] = None) -> AssemblyResult:
        """
        Translate a source file.

        A file that cannot be read, or is not valid text in the configured
        encoding, gives an IO_ERROR failure.
        """
        filepath = Path(filepath)
        try:
            source = filepath.read_text(encoding=self.config.encoding)
        except (OSError, UnicodeDecodeError) as e:
            return self._finish(AssemblyResult.failed(Failure.from_read_error(e, filepath)))
        return self.translate_string(source, str(filepath), optab)

    def translate_files(
        self,
        source_path: str | Path,
        optab_path: Optional[str | Path] = None,
    ) -> AssemblyResult:
        """
        Load an opcode table file (if given), then translate a source file.

        The loaded table is used for this run only; ``self.optab`` is left
        unchanged.
        """
        optab = None
        if optab_path is not None:
            loaded = load_opcode_table(optab_path, self.config.encoding)
            if not loaded.ok:
                return self._finish(AssemblyResult.failed(loaded.failure))
            optab = loaded.value
        return self.translate_file(source_path, optab)

    # =========================================================================
    # Assembly (failures raised)
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> AssemblyResult:
        """
        Assemble source code from a string.

        Raises:
            AssemblerError: If assembly fails
        """
        return self.translate_string(source, filename).raise_for_failure()

    def assemble_file(self, filepath: str | Path) -> AssemblyResult:
        """
        Assemble a source file.

        Raises:
            AssemblerError: If assembly fails
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid text in the encoding
        """
        return self.translate_file(filepath).raise_for_failure()

    def _finish(self, result: AssemblyResult) -> AssemblyResult:
        self._result = result
        if result.ok:
            header = result.object_program.header
            logger.info(
                f"Assembled {header.name or '<unnamed>'}: "
                f"{header.length} bytes at {header.start:04X}, {len(result.symbols)} symbols"
            )
        else:
            logger.debug(f"Assembly failed: {result.failure.kind}")
        return result

    # =========================================================================
    # Output Methods
    # =========================================================================

    @property
    def result(self) -> AssemblyResult:
        """The last translation result."""
        if self._result is None:
            raise RuntimeError("nothing has been assembled yet")
        return self._result

    def get_symbols(self) -> dict[str, int]:
        """Return the last symbol table as a name -> address dictionary."""
        return self.result.raise_for_failure().symbols.as_dict()

    def write_object(self, filepath: str | Path) -> None:
        """Write the object listing (H/T/E records)."""
        self._write(filepath, self.result.object_listing())

    def write_listing(self, filepath: str | Path) -> None:
        """Write the intermediate listing (address, label, mnemonic, operand)."""
        self._write(filepath, self.result.intermediate_listing())

    def write_symbols(self, filepath: str | Path) -> None:
        """Write the symbol listing."""
        self._write(filepath, self.result.symbol_listing())

    def _write(self, filepath: str | Path, lines: list[str]) -> None:
        Path(filepath).write_text(join_lines(lines), encoding=self.config.encoding)
        logger.debug(f"Wrote {len(lines)} lines to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, optab: Optional[OpcodeTable] = None, filename: str = "<input>") -> AssemblyResult:
    """
    Convenience function to assemble source code.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler(optab).assemble_string(source, filename)


def assemble_file(filepath: str | Path, optab_path: Optional[str | Path] = None) -> AssemblyResult:
    """
    Convenience function to assemble a source file.

    Raises:
        AssemblerError: If assembly fails
        OSError: If a file cannot be read
    """
    return Assembler().translate_files(filepath, optab_path).raise_for_failure()
