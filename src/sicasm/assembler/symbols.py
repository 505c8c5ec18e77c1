"""
SIC Symbol Table
================

The symbol table (SYMTAB) maps each label to the address of the line that
defines it. It is built during pass one and read during pass two.

Symbols are kept as an ordered sequence (definition order) plus a separate
name index, so listings never depend on dict iteration order.

Symbol Policies
---------------
Two silent defaults are made explicit here rather than left to chance:

- **Duplicate definitions**: the first definition wins. Later definitions
  are recorded in ``redefinitions`` (and logged) but do not change the
  address. In strict mode they raise DuplicateSymbolError instead.

- **Undefined references**: ``resolve()`` returns a Resolution. An unknown
  name resolves to address 0 with ``defaulted=True``. In strict mode pass
  two turns a defaulted resolution into an UndefinedSymbolError.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Optional
import logging

from sicasm.errors import DuplicateSymbolError, SourceLocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Symbol:
    """
    A label definition.

    Attributes:
        name: Label text (case-sensitive)
        address: Absolute address of the defining line
        location: Where the label was defined
    """
    name: str
    address: int
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Resolution:
    """
    Result of looking up an operand symbol.

    Attributes:
        name: The symbol that was looked up
        address: Its address, or 0 when undefined
        defaulted: True if the symbol was undefined and 0 was substituted
    """
    name: str
    address: int
    defaulted: bool = False

    @property
    def resolved(self) -> bool:
        return not self.defaulted


class SymbolTable:
    """
    Ordered label -> address table with a first-definition-wins policy.
    """

    def __init__(self, strict: bool = False):
        """
        Initialize an empty symbol table.

        Args:
            strict: Raise DuplicateSymbolError on redefinition instead of
                    keeping the first definition
        """
        self._strict = strict
        self._symbols: list[Symbol] = []
        self._index: dict[str, Symbol] = {}
        self._redefinitions: list[Symbol] = []
        self._frozen = False

    # =========================================================================
    # Definition
    # =========================================================================

    def define(
        self,
        name: str,
        address: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> bool:
        """
        Define a label.

        Returns:
            True if the label was added, False if it was already defined
            (the original address is kept)

        Raises:
            DuplicateSymbolError: On redefinition in strict mode
        """
        if self._frozen:
            raise RuntimeError("symbol table is frozen")

        existing = self._index.get(name)
        symbol = Symbol(name, address, location)

        if existing is not None:
            if self._strict:
                raise DuplicateSymbolError(
                    name,
                    location=location,
                    original_location=existing.location,
                    source_line=source_line,
                )
            logger.warning(
                f"{location or '<input>'}: label '{name}' already defined at "
                f"{existing.address:04X}, keeping first definition"
            )
            self._redefinitions.append(symbol)
            return False

        self._symbols.append(symbol)
        self._index[name] = symbol
        return True

    def freeze(self) -> "SymbolTable":
        """Make the table read-only. Returns self."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # =========================================================================
    # Lookup
    # =========================================================================

    def resolve(self, name: str) -> Resolution:
        """Look up a symbol, defaulting undefined names to address 0."""
        symbol = self._index.get(name)
        if symbol is None:
            return Resolution(name, 0, defaulted=True)
        return Resolution(name, symbol.address)

    def get(self, name: str) -> Optional[Symbol]:
        return self._index.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols)

    @property
    def symbols(self) -> tuple[Symbol, ...]:
        """All symbols in definition order."""
        return tuple(self._symbols)

    @property
    def redefinitions(self) -> tuple[Symbol, ...]:
        """Ignored later definitions of already-defined labels."""
        return tuple(self._redefinitions)

    def as_dict(self) -> dict[str, int]:
        """Return a name -> address dictionary in definition order."""
        return {sym.name: sym.address for sym in self._symbols}

    def find_similar(self, name: str, limit: int = 3) -> list[str]:
        """
        Find symbols with similar names for error hints.

        Uses a simple edit distance heuristic.
        """
        name_lower = name.lower()
        similar = []

        for sym in self._symbols:
            sym_lower = sym.name.lower()
            if (
                sym_lower == name_lower or
                abs(len(sym.name) - len(name)) <= 1 and
                _edit_distance(name_lower, sym_lower) <= 2
            ):
                similar.append(sym.name)

        return similar[:limit]

    def __repr__(self) -> str:
        return f"SymbolTable({len(self)} symbols)"


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min((
                    distances[j],
                    distances[j + 1],
                    new_distances[-1]
                )))
        distances = new_distances

    return distances[-1]
