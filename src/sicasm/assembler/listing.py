"""
Assembly Listings
=================

Text renderings of the three translation products:

Symbol listing (one line per label, definition order):
    FIVE    1006
    ALPHA   1009

Intermediate listing (START first, END last):
    1000    PROG    START   1000
    1000    -       LDA     FIVE
    ...
    100C    -       END     PROG

Object listing (header, text records, end):
    H^ PROG^ 001000^ 00000C
    T^ 001000^ 001006^ 0C1009^ 000005^
    E^ 001000
"""

from sicasm.assembler.pass_one import IntermediateProgram, IntermediateRecord
from sicasm.assembler.pass_two import ObjectProgram
from sicasm.assembler.symbols import SymbolTable


def symbol_listing(symbols: SymbolTable) -> list[str]:
    """Render the symbol table, one ``name<TAB>addr`` line per label."""
    return [f"{sym.name}\t{sym.address:04X}" for sym in symbols]


def _intermediate_line(record: IntermediateRecord, no_label_token: str) -> str:
    label = record.label if record.label is not None else no_label_token
    return f"{record.address:04X}\t{label}\t{record.mnemonic}\t{record.operand}"


def intermediate_listing(program: IntermediateProgram, no_label_token: str = "-") -> list[str]:
    """Render the intermediate program, including the START and END lines."""
    records = []
    if program.start is not None:
        records.append(program.start)
    records.extend(program.records)
    records.append(program.end)
    return [_intermediate_line(record, no_label_token) for record in records]


def object_listing(object_program: ObjectProgram) -> list[str]:
    """Render the object program, one line per record."""
    return object_program.render()


def join_lines(lines: list[str]) -> str:
    """Join listing lines into file text with a trailing newline."""
    return "".join(f"{line}\n" for line in lines)
