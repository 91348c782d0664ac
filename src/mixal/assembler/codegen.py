"""
MIXAL Code Generator
====================

This module turns parsed statements into MIX words. It implements the
classic two-pass process, with forward references patched after the
first pass rather than re-scanning the source.

Pass 1 (Layout)
---------------
- Walk the statements in order with a location counter starting at 0
- Define each LOC symbol (ordinary symbols once, dH labels per line)
- Evaluate EQU right away, or defer it if it names an undefined symbol
- Move the location counter for ORIG (no forward references allowed)
- Assemble instructions, CON and ALF; an instruction or CON that
  names an undefined symbol leaves a placeholder word and a
  PendingPatch
- Give every literal constant ``=W=`` a fresh slot, and allocate the
  slots after the last word when END is reached

Pass 2 (Resolution)
-------------------
1. Retry deferred EQUs until no more can be resolved
2. Fill the literal slots
3. Re-assemble every pending patch
4. Evaluate the entry point from END

Anything still undefined becomes one UnresolvedSymbolError per symbol,
listing every line that used it.

Output
------
An AssemblyResult: the assembled words in emission order (literal slots
last), the entry point and the symbol table.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from mixal.errors import (
    AssemblerError,
    AssemblyFailedError,
    DirectiveError,
    ErrorCollector,
    LocationRangeError,
    MissingEndError,
    SourceLocation,
    TooManyErrors,
    UndefinedSymbolError,
    UnresolvedSymbolError,
)
from mixal.machine.word import MachineWord, MEMORY_SIZE
from mixal.assembler.context import AssemblyContext, SymbolTable
from mixal.assembler.parser import (
    AlfDirective,
    Directive,
    Instruction,
    Statement,
)
from mixal.assembler.wval import LiteralConstant

logger = logging.getLogger(__name__)


# =============================================================================
# Output Records
# =============================================================================

@dataclass(frozen=True)
class AssembledWord:
    """
    One word of output.

    Attributes:
        address: Memory location (0-3999)
        word: The assembled word
        location: Source line that produced it (for a literal slot, the
            line that used the literal)
    """
    address: int
    word: MachineWord
    location: Optional[SourceLocation] = None


@dataclass
class AssemblyResult:
    """
    The output of a successful assembly run.

    Attributes:
        words: Assembled words in emission order, literal slots last
        entry_point: Start address from the END line
        symbols: Every ordinary symbol and its signed value
        warnings: Non-fatal diagnostics
    """
    words: list[AssembledWord]
    entry_point: int
    symbols: dict[str, int]
    warnings: list[str] = field(default_factory=list)

    def memory(self) -> dict[int, MachineWord]:
        """Map of address to word; later words win."""
        return {w.address: w.word for w in self.words}


# =============================================================================
# Pass 1 Bookkeeping
# =============================================================================

@dataclass
class PendingPatch:
    """
    A word that could not be assembled in pass 1.

    Attributes:
        location: Memory location of the word
        statement: Statement to re-assemble
        symbol: The undefined symbol that caused the deferral (None when
            the statement was deferred for its literal constant)
        word_index: Position of the placeholder in the output list
    """
    location: int
    statement: Statement
    symbol: Optional[str]
    word_index: int


@dataclass
class LiteralSlot:
    """A word reserved for one occurrence of a literal constant."""
    literal: LiteralConstant
    statement: Statement
    address: Optional[int] = None
    word_index: Optional[int] = None


@dataclass
class DeferredEqu:
    """An EQU whose value names a symbol that was not yet defined."""
    statement: Statement
    location: int
    symbol: str


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates MIX words from parsed statements.

    Every generate() call builds fresh state, so one generator can be
    reused for many programs.

    Usage:
        codegen = CodeGenerator()
        result = codegen.generate(statements)
        for w in result.words:
            print(w.address, w.word)
    """

    def __init__(self, predefined: Optional[dict[str, int]] = None):
        """
        Initialize the code generator.

        Args:
            predefined: Symbols (name -> value) visible to every program
        """
        self._predefined = dict(predefined or {})
        self._reset(ErrorCollector())

    def _reset(self, errors: ErrorCollector) -> None:
        self._errors = errors
        self._symbols = SymbolTable.from_dict(self._predefined)
        self._location = 0
        self._words: list[AssembledWord] = []
        self._patches: list[PendingPatch] = []
        self._literals: list[LiteralSlot] = []
        self._literal_by_statement: dict[int, LiteralSlot] = {}
        self._deferred: list[DeferredEqu] = []
        self._unresolved: dict[str, list[Statement]] = {}
        self._end: Optional[Statement] = None
        self._end_location = 0
        self._entry_point = 0

    # =========================================================================
    # Public Interface
    # =========================================================================

    def generate(
        self,
        statements: list[Statement],
        errors: Optional[ErrorCollector] = None,
    ) -> AssemblyResult:
        """
        Assemble a program.

        Args:
            statements: Parsed statements in source order
            errors: Collector to add errors to (a fresh one if omitted)

        Returns:
            The assembled program

        Raises:
            AssemblyFailedError: If any error was collected
        """
        self._reset(errors if errors is not None else ErrorCollector())

        try:
            logger.debug("Pass 1: %d statements", len(statements))
            self._pass1(statements)

            if not self._errors.has_errors():
                logger.debug(
                    "Pass 2: %d deferred EQU, %d patches, %d literals",
                    len(self._deferred), len(self._patches), len(self._literals),
                )
                self._pass2()
        except TooManyErrors:
            pass

        if self._errors.has_errors():
            raise AssemblyFailedError(self._errors)

        return AssemblyResult(
            words=list(self._words),
            entry_point=self._entry_point,
            symbols=self._symbols.to_dict(),
            warnings=list(self._errors.warnings),
        )

    # =========================================================================
    # Pass 1: Layout
    # =========================================================================

    def _pass1(self, statements: list[Statement]) -> None:
        for stmt in statements:
            try:
                self._pass1_statement(stmt)
            except AssemblerError as e:
                self._errors.add(e.at(stmt.location, stmt.source_line))
            if self._end is not None:
                break

        if self._end is None:
            location = statements[-1].location if statements else None
            self._errors.add(MissingEndError("program has no END statement", location))

    def _pass1_statement(self, stmt: Statement) -> None:
        """Process a single statement in pass 1."""
        op = stmt.operation

        if isinstance(op, Directive) and op.name == "EQU":
            self._pass1_equ(stmt, op)

        elif isinstance(op, Directive) and op.name == "ORIG":
            self._define_label(stmt, self._location)
            self._location = self._evaluate_orig(stmt, op)

        elif isinstance(op, Directive) and op.name == "END":
            self._pass1_end(stmt)

        else:
            self._define_label(stmt, self._location)
            self._emit(stmt)

    def _define_label(self, stmt: Statement, value: int) -> None:
        """
        Define the statement's LOC symbol, if it has one.

        A bad label is collected here rather than raised, so the statement
        still takes its word and later addresses stay put.
        """
        try:
            self._define_symbol(stmt, MachineWord.from_int(value))
        except AssemblerError as e:
            self._errors.add(e.at(stmt.location, stmt.source_line))

    def _define_symbol(self, stmt: Statement, value: MachineWord) -> None:
        label = stmt.label
        if label is None:
            return
        if label.is_local_definition:
            self._symbols.define_local(label.local_digit, stmt.location.line, value)
        else:
            self._symbols.define(label, value, stmt.location)

    def _context(self, stmt: Statement, location: Optional[int] = None) -> AssemblyContext:
        if location is None:
            location = self._location
        return AssemblyContext(self._symbols, location, stmt.location.line)

    def _pass1_equ(self, stmt: Statement, op: Directive) -> None:
        if stmt.label is None:
            return
        try:
            value = op.evaluate(self._context(stmt))
        except UndefinedSymbolError as e:
            logger.debug("Deferring EQU for %s (needs %s)", stmt.label, e.symbol)
            self._deferred.append(DeferredEqu(stmt, self._location, e.symbol))
            if stmt.label.is_local_definition:
                self._symbols.define_local(stmt.label.local_digit, stmt.location.line, None)
            return
        self._define_symbol(stmt, value)

    def _evaluate_orig(self, stmt: Statement, op: Directive) -> int:
        try:
            return op.evaluate(self._context(stmt)).value
        except UndefinedSymbolError as e:
            raise DirectiveError(
                f"ORIG cannot refer to '{e.symbol}' before it is defined"
            ) from e

    def _emit(self, stmt: Statement) -> None:
        """Assemble an instruction, CON or ALF at the location counter."""
        location = self._location
        if not 0 <= location < MEMORY_SIZE:
            raise LocationRangeError(location)

        word = MachineWord.zero()
        op = stmt.operation
        literal = stmt.literal

        if literal is not None:
            slot = LiteralSlot(literal, stmt)
            self._literals.append(slot)
            self._literal_by_statement[id(stmt)] = slot
            self._add_patch(location, stmt, None)
        elif isinstance(op, AlfDirective):
            word = op.assemble()
        else:
            try:
                word = self._assemble(stmt, self._context(stmt, location))
            except UndefinedSymbolError as e:
                self._add_patch(location, stmt, e.symbol)

        self._words.append(AssembledWord(location, word, stmt.location))
        self._location += 1

    def _add_patch(self, location: int, stmt: Statement, symbol: Optional[str]) -> None:
        self._patches.append(PendingPatch(location, stmt, symbol, len(self._words)))

    def _assemble(
        self,
        stmt: Statement,
        context: AssemblyContext,
        literal_address: Optional[int] = None,
    ) -> MachineWord:
        op = stmt.operation
        if isinstance(op, Instruction):
            return op.assemble(context, literal_address)
        if isinstance(op, AlfDirective):
            return op.assemble()
        return op.evaluate(context, literal_address)

    def _pass1_end(self, stmt: Statement) -> None:
        """Allocate the literal slots, then define END's label after them."""
        self._end = stmt
        self._end_location = self._location

        for slot in self._literals:
            if not 0 <= self._location < MEMORY_SIZE:
                raise LocationRangeError(self._location)
            slot.address = self._location
            slot.word_index = len(self._words)
            self._words.append(AssembledWord(self._location, MachineWord.zero(), slot.statement.location))
            self._location += 1

        logger.debug("END: %d literal slots at %d", len(self._literals), self._end_location)
        self._define_label(stmt, self._location)

    # =========================================================================
    # Pass 2: Resolution
    # =========================================================================

    def _pass2(self) -> None:
        self._resolve_deferred_equs()
        self._fill_literals()
        self._apply_patches()
        self._resolve_entry_point()
        self._report_unresolved()

    def _resolve_deferred_equs(self) -> None:
        """Retry deferred EQUs until a round makes no progress."""
        pending = list(self._deferred)
        rounds = 0
        while pending:
            rounds += 1
            remaining = []
            for deferred in pending:
                stmt = deferred.statement
                try:
                    value = stmt.operation.evaluate(self._context(stmt, deferred.location))
                except UndefinedSymbolError as e:
                    deferred.symbol = e.symbol
                    remaining.append(deferred)
                    continue
                except AssemblerError as e:
                    self._errors.add(e.at(stmt.location, stmt.source_line))
                    continue
                try:
                    self._define_symbol(stmt, value)
                except AssemblerError as e:
                    self._errors.add(e.at(stmt.location, stmt.source_line))
            if len(remaining) == len(pending):
                break
            pending = remaining

        logger.debug("Resolved deferred EQUs in %d rounds, %d left", rounds, len(pending))
        for deferred in pending:
            self._record_unresolved(deferred.symbol, deferred.statement)

    def _fill_literals(self) -> None:
        for slot in self._literals:
            stmt = slot.statement
            try:
                value = slot.literal.wvalue.evaluate(self._context(stmt, slot.address))
            except UndefinedSymbolError as e:
                self._record_unresolved(e.symbol, stmt)
                continue
            except AssemblerError as e:
                self._errors.add(e.at(stmt.location, stmt.source_line))
                continue
            self._words[slot.word_index] = AssembledWord(slot.address, value, stmt.location)

    def _apply_patches(self) -> None:
        for patch in self._patches:
            stmt = patch.statement
            slot = self._literal_by_statement.get(id(stmt))
            literal_address = slot.address if slot is not None else None
            try:
                word = self._assemble(stmt, self._context(stmt, patch.location), literal_address)
            except UndefinedSymbolError as e:
                self._record_unresolved(e.symbol, stmt)
                continue
            except AssemblerError as e:
                self._errors.add(e.at(stmt.location, stmt.source_line))
                continue
            self._words[patch.word_index] = AssembledWord(patch.location, word, stmt.location)

    def _resolve_entry_point(self) -> None:
        stmt = self._end
        try:
            entry = stmt.operation.evaluate(self._context(stmt, self._end_location)).value
            if not 0 <= entry < MEMORY_SIZE:
                raise LocationRangeError(entry)
            self._entry_point = entry
        except UndefinedSymbolError as e:
            self._record_unresolved(e.symbol, stmt)
        except AssemblerError as e:
            self._errors.add(e.at(stmt.location, stmt.source_line))

    def _record_unresolved(self, symbol: str, stmt: Statement) -> None:
        self._unresolved.setdefault(symbol, []).append(stmt)

    def _report_unresolved(self) -> None:
        for symbol, uses in self._unresolved.items():
            self._errors.add(UnresolvedSymbolError(
                symbol,
                [stmt.location for stmt in uses],
                source_line=uses[0].source_line,
                similar_symbols=self._symbols.similar(symbol),
            ))
