"""
MIXAL Error Hierarchy
=====================

This module defines the exception hierarchy for the MIXAL assembler.
All exceptions inherit from MixError, allowing callers to catch all
assembler-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
MixError (base)
└── AssemblerError
    ├── AssemblySyntaxError - malformed source text
    │   ├── InvalidSymbolError - bad symbol (length, alphabet, no letter)
    │   ├── InvalidNumberError - bad numeric literal
    │   │   └── NumberTooLongError - more than 10 digits
    │   ├── MalformedExpressionError - expression cannot be parsed
    │   ├── InvalidOperandError - known mnemonic with a bad operand
    │   ├── InvalidCharacterDataError - bad ALF character data
    │   ├── MissingOperationError - LOC field without an OP field
    │   ├── MissingEndError - program has no END line
    │   └── UnrecognizedMnemonicError - unknown OP field
    ├── UndefinedSymbolError - symbol not (yet) defined; recoverable
    ├── UnresolvedSymbolError - symbol never defined anywhere; terminal
    ├── DuplicateSymbolError - symbol defined more than once
    ├── DirectiveError - pseudo-operation used incorrectly
    ├── LocationRangeError - location counter outside memory
    ├── ExpressionError - evaluation failures
    │   ├── DivisionByZeroError
    │   ├── InvalidFieldRangeError
    │   └── WordOverflowError
    ├── TooManyErrors - error limit reached
    └── AssemblyFailedError - the run failed, carries every error

Design Philosophy
-----------------
Parsers deep inside the assembler (symbols, expressions, fields) do not
know which source line they are working on. They raise errors without a
location, and the statement parser or code generator attaches one with
AssemblerError.at() before the error is collected.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
            ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class MixError(Exception):
    """
    Base exception for all MIXAL errors.

        try:
            Assembler().assemble_file("primes.mixal")
        except MixError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        if self.column > 0:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(MixError):
    """
    Base exception for all assembler errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def at(
        self,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ) -> "AssemblerError":
        """
        Attach a source location to an error raised without one.

        Errors that already carry a location keep it, so the innermost
        (most precise) location wins; the source text is filled in when
        it belongs to that location. Returns self.
        """
        if self.location is None:
            self.location = location
        if self.source_line is None and self.location == location:
            self.source_line = source_line
        self.args = (self._format_message(),)
        return self

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            primes.mixal:12:22: error: undefined symbol 'PRIMES'
                       ST2  PRIMES+L,1
                            ^
            hint: did you mean 'PRIME'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Malformed MIXAL source text.

    Always attributable to a single source line. The assembler keeps
    going after a syntax error so that every bad line is reported in
    one run.
    """
    pass


class InvalidSymbolError(AssemblySyntaxError):
    """
    Invalid symbol.

    Symbols are 1-10 characters from A-Z and 0-9 and contain at least
    one letter. Lower-case letters are not part of the MIX alphabet.
    """
    pass


class InvalidNumberError(AssemblySyntaxError):
    """A numeric literal that is not a plain string of decimal digits."""
    pass


class NumberTooLongError(InvalidNumberError):
    """A numeric literal with more than 10 digits."""
    pass


class MalformedExpressionError(AssemblySyntaxError):
    """
    An expression that does not follow the MIXAL grammar.

    Examples:
        - empty operand ("3+", "")
        - two binary operators in a row ("2*-3")
        - parentheses outside a field specifier
    """
    pass


class InvalidOperandError(AssemblySyntaxError):
    """A recognized mnemonic whose operand cannot be parsed."""
    pass


class InvalidCharacterDataError(AssemblySyntaxError):
    """
    Invalid ALF character data.

    ALF takes one or two leading blanks followed by exactly five
    characters from the MIX alphabet.
    """
    pass


class MissingOperationError(AssemblySyntaxError):
    """A LOC field with no OP field after it."""
    pass


class MissingEndError(AssemblySyntaxError):
    """The program ran out of lines before an END statement."""
    pass


class UnrecognizedMnemonicError(AssemblySyntaxError):
    """
    OP field is neither a pseudo-operation nor an instruction mnemonic.

    A hint lists similarly spelled mnemonics when any exist.
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_mnemonics: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.similar_mnemonics = similar_mnemonics or []

        hint = None
        if self.similar_mnemonics:
            suggestions = ", ".join(f"'{m}'" for m in self.similar_mnemonics[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unrecognized operation '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UndefinedSymbolError(AssemblerError):
    """
    Reference to a symbol that has no value yet.

    During pass 1 this is expected for forward references: the code
    generator catches it and records a pending patch instead of failing.
    It only becomes fatal (as UnresolvedSymbolError) when the symbol is
    still undefined after pass 2.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnresolvedSymbolError(AssemblerError):
    """
    A symbol used but never defined anywhere in the program.

    Reported once per symbol, listing every place it was used. The
    assembler suggests similarly-named symbols to help catch typos.
    """

    def __init__(
        self,
        symbol: str,
        use_sites: list[SourceLocation],
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.use_sites = list(use_sites)
        self.similar_symbols = similar_symbols or []

        hints = []
        if self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hints.append(f"did you mean {suggestions}?")
        if len(self.use_sites) > 1:
            sites = ", ".join(str(site) for site in self.use_sites)
            hints.append(f"used at {sites}")

        super().__init__(
            f"symbol '{symbol}' is never defined",
            location=self.use_sites[0] if self.use_sites else None,
            hint="; ".join(hints) or None,
            source_line=source_line,
        )


class DuplicateSymbolError(AssemblerError):
    """
    Symbol defined multiple times.

    Includes the original definition location when available.
    """

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


class DirectiveError(AssemblerError):
    """
    Error in a pseudo-operation.

    Examples:
        - ORIG with a future reference
        - ORIG with a literal constant
    """
    pass


class LocationRangeError(AssemblerError):
    """A word assembled outside the 4000-word MIX memory."""

    def __init__(
        self,
        address: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.address = address
        super().__init__(
            f"location {address} is outside MIX memory (0-3999)",
            location=location,
            source_line=source_line,
        )


class ExpressionError(AssemblerError):
    """
    Error evaluating an expression or packing its value.
    """
    pass


class DivisionByZeroError(ExpressionError):
    """Division (/ or //) by zero."""
    pass


class InvalidFieldRangeError(ExpressionError):
    """
    Field specification outside its allowed range.

    W-value fields must satisfy 0 <= L <= R <= 5; instruction fields
    must fit in a single byte (0-63).
    """
    pass


class WordOverflowError(ExpressionError):
    """
    A value that does not fit the part of the word it is packed into.

    Examples:
        - a number above 64**5 - 1
        - an address magnitude of 4096 or more
        - an index outside 0-63
    """
    pass


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The assembler uses this to continue processing after encountering
    an error, collecting all errors before reporting them together.

    Example:
        collector = ErrorCollector(max_errors=100)

        try:
            for line in lines:
                try:
                    process(line)
                except AssemblerError as e:
                    collector.add(e)
        except TooManyErrors:
            pass

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before raising TooManyErrors
        """
        self.errors: list[AssemblerError] = []
        self.warnings: list[str] = []
        self.max_errors = max_errors

    def add(self, error: AssemblerError) -> None:
        """
        Add an error to the collection.

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"too many errors ({self.max_errors}), stopping")

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def warning_count(self) -> int:
        """Return the number of collected warnings."""
        return len(self.warnings)

    def report(self) -> str:
        """Format all errors and warnings for display."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  {warning}")

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"\n{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors and warnings."""
        self.errors.clear()
        self.warnings.clear()


class TooManyErrors(AssemblerError):
    """
    Raised when too many errors have been encountered.

    Stops the assembler from flooding the user with follow-on errors
    when there are fundamental problems with the source.
    """

    def __init__(self, message: str = "too many errors"):
        super().__init__(message)


class AssemblyFailedError(AssemblerError):
    """
    The assembly run failed.

    Carries every collected error so callers can inspect them
    individually; str() gives the full formatted report.

    Attributes:
        errors: The collected AssemblerError instances, in report order
        warnings: Collected warning messages
    """

    def __init__(self, collector: ErrorCollector):
        self.errors = list(collector.errors)
        self.warnings = list(collector.warnings)
        count = collector.error_count()
        word = "error" if count == 1 else "errors"
        super().__init__(
            f"assembly failed with {count} {word}:\n\n{collector.report()}"
        )
