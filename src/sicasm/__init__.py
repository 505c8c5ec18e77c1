"""
sicasm - Two-Pass Assembler for the SIC Machine
===============================================

This package assembles programs for SIC, the Simplified Instructional
Computer: a 24-bit word machine with a single 3-byte instruction format.

Main Components
---------------
- **assembler**: opcode table loader, pass one, pass two and the Assembler
  facade that runs them
- **cli**: the ``sicasm`` command-line tool
- **config**: assembler settings (record limits, symbol policies)
- **errors**: exception hierarchy and tagged failure results

Quick Start
-----------
Assemble a program:
    >>> from sicasm import Assembler
    >>> asm = Assembler()
    >>> result = asm.assemble_file("prog.asm")
    >>> for line in result.object_listing():
    ...     print(line)

Use a custom opcode table:
    >>> asm = Assembler.from_optab_file("optab.txt")

Or use the command-line tool:
    $ sicasm prog.asm -t optab.txt -o prog.obj -l prog.lst -s prog.sym

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from sicasm.assembler import (
    Assembler,
    AssemblyResult,
    OpcodeTable,
    SymbolTable,
    IntermediateProgram,
    ObjectProgram,
    HeaderRecord,
    TextRecord,
    EndRecord,
    assemble,
    assemble_file,
)
from sicasm.config import AssemblerConfig
from sicasm.errors import (
    SicAsmError,
    AssemblerError,
    AssemblySyntaxError,
    DirectiveError,
    LiteralError,
    UndefinedSymbolError,
    DuplicateSymbolError,
    OpcodeTableError,
    ErrorKind,
    Failure,
    PassResult,
    SourceLocation,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "AssemblyResult",
    "OpcodeTable",
    "SymbolTable",
    "IntermediateProgram",
    "ObjectProgram",
    "HeaderRecord",
    "TextRecord",
    "EndRecord",
    "assemble",
    "assemble_file",
    # Configuration
    "AssemblerConfig",
    # Errors
    "SicAsmError",
    "AssemblerError",
    "AssemblySyntaxError",
    "DirectiveError",
    "LiteralError",
    "UndefinedSymbolError",
    "DuplicateSymbolError",
    "OpcodeTableError",
    "ErrorKind",
    "Failure",
    "PassResult",
    "SourceLocation",
]
