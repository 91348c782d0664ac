"""
MIXAL Assembler - Main Interface
================================

This module provides the Assembler class, the primary interface for
assembling MIXAL programs. It runs the statement parser and the
two-pass code generator and keeps the last result for the output
helpers.

Example Usage
-------------
>>> from mixal.assembler import Assembler
>>>
>>> asm = Assembler()
>>> result = asm.assemble_string('''
... START   STA  2000
...         JMP  START
...         END  START
... ''')
>>> result.entry_point
0
>>> print(asm.format_words())
0000 + 31 16 00 05 24
0001 + 00 00 00 00 39
END  0000

Command-Line Usage
------------------
    $ mixasm primes.mixal -o primes.mix -s primes.sym

Options:
    -o, --output FILE      Output word dump (default: stdout)
    -s, --symbols FILE     Write the symbol table
    -D, --define SYM=VAL   Pre-define a symbol
    --max-errors N         Stop after N errors
    -v, --verbose          Debug logging
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from mixal.errors import (
    AssemblyFailedError,
    ErrorCollector,
    TooManyErrors,
)
from mixal.machine.word import MachineWord
from mixal.assembler.symbols import Symbol
from mixal.assembler.parser import Parser
from mixal.assembler.codegen import AssembledWord, AssemblyResult, CodeGenerator

logger = logging.getLogger(__name__)


class Assembler:
    """
    Main MIXAL assembler class.

    Configuration comes from the constructor; each assemble_* call is an
    independent run.

    Attributes:
        max_errors: Errors to collect before giving up
    """

    def __init__(self, defines: Optional[dict[str, int]] = None, max_errors: int = 100):
        """
        Initialize the assembler.

        Args:
            defines: Predefined symbols, name -> value
            max_errors: Errors to collect before stopping

        Raises:
            InvalidSymbolError: A define name is not a valid symbol
            WordOverflowError: A define value does not fit in a word
        """
        self.max_errors = max_errors
        self._defines: dict[str, int] = {}
        self._result: Optional[AssemblyResult] = None
        self._errors = ErrorCollector(max_errors)
        for name, value in (defines or {}).items():
            self.define_symbol(name, value)

    def define_symbol(self, name: str, value: int) -> None:
        """
        Pre-define a symbol (like -D on the command line).

        Raises:
            InvalidSymbolError: name is not a valid symbol
            WordOverflowError: value does not fit in a MIX word
        """
        Symbol.parse(name)
        MachineWord.from_int(value)
        self._defines[name] = value

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_lines(self, lines: Iterable[str], filename: str = "<input>") -> AssemblyResult:
        """
        Assemble a sequence of source lines.

        Args:
            lines: Source lines, with or without line endings
            filename: Name used in error messages

        Returns:
            The assembled program

        Raises:
            AssemblyFailedError: If any error occurred; carries them all
        """
        self._result = None
        self._errors = ErrorCollector(self.max_errors)

        try:
            statements = Parser(filename, self._errors).parse(lines)
        except TooManyErrors:
            raise AssemblyFailedError(self._errors) from None

        if self._errors.has_errors():
            raise AssemblyFailedError(self._errors)

        codegen = CodeGenerator(self._defines)
        self._result = codegen.generate(statements, self._errors)
        logger.debug(
            "Assembled %d words from %s, entry point %04d",
            len(self._result.words), filename, self._result.entry_point,
        )
        return self._result

    def assemble_string(self, source: str, filename: str = "<input>") -> AssemblyResult:
        """Assemble source text."""
        return self.assemble_lines(source.splitlines(), filename)

    def assemble_file(self, filepath: str | Path) -> AssemblyResult:
        """
        Assemble a source file.

        Raises:
            AssemblyFailedError: If assembly fails
            FileNotFoundError: If the source file does not exist
        """
        filepath = Path(filepath)
        logger.debug("Assembling %s", filepath)
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Results
    # =========================================================================

    def _require_result(self) -> AssemblyResult:
        if self._result is None:
            raise RuntimeError("no successful assembly yet")
        return self._result

    def get_words(self) -> list[AssembledWord]:
        """Assembled words of the last run, in emission order."""
        return list(self._require_result().words)

    def get_symbols(self) -> dict[str, int]:
        """Symbol table of the last run, name -> signed value."""
        return dict(self._require_result().symbols)

    def get_entry_point(self) -> int:
        return self._require_result().entry_point

    def get_warnings(self) -> list[str]:
        return list(self._errors.warnings)

    def format_words(self) -> str:
        """
        Format the last run as a word dump.

        One ``LLLL s bb bb bb bb bb`` line per word, followed by
        ``END  LLLL`` with the entry point.
        """
        result = self._require_result()
        lines = [f"{w.address:04d} {w.word}" for w in result.words]
        lines.append(f"END  {result.entry_point:04d}")
        return "\n".join(lines)

    def write_words(self, filepath: str | Path) -> None:
        """Write the word dump to a file."""
        Path(filepath).write_text(self.format_words() + "\n")
        logger.debug("Wrote words to %s", filepath)

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name value (one per line, sorted by name)
        """
        symbols = self._require_result().symbols
        with open(filepath, "w") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by mixasm\n")
            for name, value in sorted(symbols.items()):
                f.write(f"{name:<10} {value}\n")
        logger.debug("Wrote symbols to %s", filepath)

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        return self._errors.has_errors()

    def get_error_report(self) -> str:
        return self._errors.report()


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> AssemblyResult:
    """
    Convenience function to assemble source text.

    Raises:
        AssemblyFailedError: If assembly fails
    """
    return Assembler().assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> AssemblyResult:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblyFailedError: If assembly fails
    """
    return Assembler().assemble_file(filepath)
