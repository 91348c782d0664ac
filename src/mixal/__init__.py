"""
MIXAL - Assembler for Knuth's MIX Computer
==========================================

This package assembles programs written in MIXAL, the assembly language
of MIX, the hypothetical computer from *The Art of Computer Programming*
(Volume 1, section 1.3).

MIX is a word machine: 4000 words of memory, each a sign and five
bytes. An instruction word holds an address, an index register, a field
specification and an operation code.

Main Components
---------------
- **assembler**: MIXAL assembler (mixasm)
    Converts MIXAL source files to a dump of (location, word) pairs

- **machine**: MIX definitions
    Words, the character set and the opcode table

Quick Start
-----------
Assemble a program:
    >>> from mixal import Assembler
    >>> asm = Assembler()
    >>> result = asm.assemble_file("primes.mixal")
    >>> asm.write_words("primes.mix")

Or use the command-line tool:
    $ mixasm primes.mixal -o primes.mix -s primes.sym

Reference Documentation
-----------------------
- Knuth, The Art of Computer Programming, Vol. 1, section 1.3.1 (MIX)
  and 1.3.2 (the MIX assembly language)
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from mixal.assembler import Assembler, AssemblyResult, assemble, assemble_file
from mixal.machine import MachineWord, Sign
from mixal.errors import (
    MixError,
    AssemblerError,
    AssemblySyntaxError,
    AssemblyFailedError,
    UndefinedSymbolError,
    UnresolvedSymbolError,
    DuplicateSymbolError,
    ExpressionError,
    SourceLocation,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    # Machine
    "MachineWord",
    "Sign",
    # Errors
    "MixError",
    "AssemblerError",
    "AssemblySyntaxError",
    "AssemblyFailedError",
    "UndefinedSymbolError",
    "UnresolvedSymbolError",
    "DuplicateSymbolError",
    "ExpressionError",
    "SourceLocation",
]
