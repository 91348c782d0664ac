"""
Assembly Context
================

Everything an expression needs to evaluate: the symbol table, the
location counter and the source line being assembled. The code
generator builds one SymbolTable per run and hands an AssemblyContext
to every evaluate() call, so no state is shared between runs.

Local Symbols
-------------
Local labels (``dH``) are not stored in the main table, because the
same name is defined many times. Instead each definition is recorded
with its source line. A reference is resolved relative to the line
that contains it:

    dB  ->  the last dH defined on a line before it
    dF  ->  the first dH defined on a line after it
"""

import bisect
from dataclasses import dataclass, field
from typing import Optional

from mixal.errors import (
    DuplicateSymbolError,
    InvalidSymbolError,
    SourceLocation,
    UndefinedSymbolError,
)
from mixal.machine.word import MachineWord
from mixal.assembler.symbols import Symbol, similar_names


# =============================================================================
# Symbol Table
# =============================================================================

@dataclass
class SymbolDefinition:
    """
    A defined symbol.

    Attributes:
        name: Symbol name
        value: The symbol's value
        location: Where it was defined (None for predefined symbols)
        predefined: True for symbols supplied by the caller
    """
    name: str
    value: MachineWord
    location: Optional[SourceLocation] = None
    predefined: bool = False


@dataclass
class _LocalDefinition:
    line: int
    value: Optional[MachineWord]


class SymbolTable:
    """
    Map from symbol names to values for one assembly run.

    Each ordinary symbol is defined at most once. Local symbols keep
    every definition, ordered by line.
    """

    def __init__(self):
        self._symbols: dict[str, SymbolDefinition] = {}
        self._locals: dict[str, list[_LocalDefinition]] = {}

    @classmethod
    def from_dict(cls, values: dict[str, int]) -> "SymbolTable":
        """
        Build a table of predefined symbols.

        Raises:
            InvalidSymbolError: If a name is not a valid symbol
        """
        table = cls()
        for name, value in values.items():
            table.define(Symbol.parse(name), MachineWord.from_int(value), predefined=True)
        return table

    # =========================================================================
    # Definitions
    # =========================================================================

    def define(
        self,
        symbol: Symbol,
        value: MachineWord,
        location: Optional[SourceLocation] = None,
        predefined: bool = False,
    ) -> SymbolDefinition:
        """
        Define an ordinary symbol.

        Raises:
            DuplicateSymbolError: If the symbol is already defined
        """
        existing = self._symbols.get(symbol.name)
        if existing is not None:
            raise DuplicateSymbolError(
                symbol.name,
                location=location,
                original_location=existing.location,
            )
        definition = SymbolDefinition(symbol.name, value, location, predefined)
        self._symbols[symbol.name] = definition
        return definition

    def define_local(self, digit: str, line: int, value: Optional[MachineWord]) -> None:
        """
        Record a dH definition on the given line.

        A value of None marks a definition whose EQU is still deferred;
        defining the same line again later fills it in.
        """
        definitions = self._locals.setdefault(digit, [])
        for definition in definitions:
            if definition.line == line and definition.value is None:
                definition.value = value
                return
        lines = [d.line for d in definitions]
        definitions.insert(bisect.bisect_right(lines, line), _LocalDefinition(line, value))

    # =========================================================================
    # Lookup
    # =========================================================================

    def get(self, name: str) -> Optional[MachineWord]:
        definition = self._symbols.get(name)
        return definition.value if definition is not None else None

    def local_before(self, digit: str, line: int) -> Optional[MachineWord]:
        """
        Value of the last dH defined before line, or None.

        Raises:
            UndefinedSymbolError: That dH is a deferred EQU
        """
        result = None
        for definition in self._locals.get(digit, []):
            if definition.line >= line:
                break
            result = definition
        return self._local_value(result, f"{digit}B")

    def local_after(self, digit: str, line: int) -> Optional[MachineWord]:
        """
        Value of the first dH defined after line, or None.

        Raises:
            UndefinedSymbolError: That dH is a deferred EQU
        """
        for definition in self._locals.get(digit, []):
            if definition.line > line:
                return self._local_value(definition, f"{digit}F")
        return None

    @staticmethod
    def _local_value(definition: Optional[_LocalDefinition], name: str) -> Optional[MachineWord]:
        if definition is None:
            return None
        if definition.value is None:
            raise UndefinedSymbolError(name)
        return definition.value

    def similar(self, name: str) -> list[str]:
        """Defined names that look like name, for did-you-mean hints."""
        return similar_names(name, self._symbols)

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def to_dict(self) -> dict[str, int]:
        """Return {name: signed value} for every ordinary symbol."""
        return {name: d.value.value for name, d in self._symbols.items()}


# =============================================================================
# Evaluation Context
# =============================================================================

@dataclass
class AssemblyContext:
    """
    State passed to every evaluation.

    Attributes:
        symbols: The run's symbol table
        location: Current value of the location counter (*)
        line: Source line number, used to resolve dB and dF
    """
    symbols: SymbolTable = field(default_factory=SymbolTable)
    location: int = 0
    line: int = 0

    def lookup(self, symbol: Symbol) -> MachineWord:
        """
        Return the value of a symbol as seen from the current line.

        Raises:
            UndefinedSymbolError: The symbol has no value (yet)
            InvalidSymbolError: A dH label used as an operand
        """
        digit = symbol.local_digit
        if digit is not None:
            if symbol.is_backward_reference:
                value = self.symbols.local_before(digit, self.line)
            elif symbol.is_forward_reference:
                value = self.symbols.local_after(digit, self.line)
            else:
                raise InvalidSymbolError(
                    f"local label '{symbol}' cannot be used as an operand",
                    hint=f"refer to it as '{digit}B' or '{digit}F'",
                )
            if value is None:
                raise UndefinedSymbolError(symbol.name)
            return value

        value = self.symbols.get(symbol.name)
        if value is None:
            raise UndefinedSymbolError(symbol.name)
        return value
