"""
SIC Two-Pass Assembler
======================

This package translates SIC assembly source into an object program made of
Header, Text and End records.

Main Components
---------------
- **OpcodeTable**: Mnemonic -> opcode mapping, loaded from a file or built in
- **PassOne**: Assigns addresses, builds the symbol table
- **PassTwo**: Encodes statements into size-limited text records
- **Assembler**: Runs both passes and publishes the results

Assembly Process
----------------
1. **Opcode table**: loaded once, read-only afterwards
2. **Pass 1**: START/END handling, location counter, symbol table,
   program length
3. **Pass 2**: header, instruction/WORD/BYTE encoding, text record
   splitting at RESW/RESB and at the 30-byte limit, end record

Example Usage
-------------
>>> from sicasm.assembler import Assembler, OpcodeTable
>>> optab = OpcodeTable({"LDA": 0x00, "STA": 0x0C})
>>> result = Assembler(optab).assemble_string(source)
>>> result.symbols.as_dict()
{'FIVE': 4102, 'ALPHA': 4105}
"""

from sicasm.assembler.assembler import Assembler, AssemblyResult, assemble, assemble_file
from sicasm.assembler.literals import ByteLiteral, LiteralKind, parse_byte_literal
from sicasm.assembler.optab import SIC_OPCODES, OpcodeTable, load_opcode_table
from sicasm.assembler.pass_one import (
    IntermediateProgram,
    IntermediateRecord,
    PassOne,
    PassOneOutput,
    run_pass_one,
)
from sicasm.assembler.pass_two import ObjectProgram, PassTwo, TextRecordBuilder, run_pass_two
from sicasm.assembler.records import EndRecord, HeaderRecord, ObjectRecord, TextRecord
from sicasm.assembler.source import SourceLine, iter_source_lines, parse_line
from sicasm.assembler.symbols import Resolution, Symbol, SymbolTable

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    # Opcode table
    "OpcodeTable",
    "SIC_OPCODES",
    "load_opcode_table",
    # Source
    "SourceLine",
    "parse_line",
    "iter_source_lines",
    # Literals
    "ByteLiteral",
    "LiteralKind",
    "parse_byte_literal",
    # Symbols
    "Symbol",
    "SymbolTable",
    "Resolution",
    # Pass 1
    "PassOne",
    "PassOneOutput",
    "IntermediateProgram",
    "IntermediateRecord",
    "run_pass_one",
    # Pass 2
    "PassTwo",
    "ObjectProgram",
    "TextRecordBuilder",
    "run_pass_two",
    # Records
    "HeaderRecord",
    "TextRecord",
    "EndRecord",
    "ObjectRecord",
]
