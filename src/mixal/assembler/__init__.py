"""
MIXAL Assembler
===============

This package assembles MIXAL, the assembly language of Knuth's MIX
computer, into MIX machine words.

Main Components
---------------
- **Assembler**: Front end that runs the whole pipeline
- **Parser**: Splits source lines into statements (LOC, OP, operand)
- **Expression**: MIXAL expressions, strictly left to right
- **WValue**: Word values for EQU, ORIG, CON and END
- **CodeGenerator**: Two-pass layout and forward-reference resolution

Assembly Process
----------------
1. **Parsing**: each line becomes a Statement holding an Instruction,
   a Directive (EQU, ORIG, CON, END) or an AlfDirective
2. **Pass 1**: locations are assigned, symbols defined, words packed
   where possible; the rest are recorded as pending patches
3. **Pass 2**: deferred EQUs, literal constants, pending patches and
   the entry point are resolved

Example Usage
-------------
>>> from mixal.assembler import Assembler
>>> asm = Assembler()
>>> result = asm.assemble_file("primes.mixal")
>>> asm.write_words("primes.mix")

Supported Features
------------------
- Full MIX instruction set, including the floating-point and binary
  extensions
- EQU, ORIG, CON, ALF and END
- Forward references, resolved after the first pass
- Local symbols (dH, dB, dF)
- Literal constants (=W=)
- Symbol table output
"""

from mixal.assembler.assembler import Assembler, assemble, assemble_file
from mixal.assembler.symbols import Symbol, Number
from mixal.assembler.operators import UnaryOperator, BinaryOperator
from mixal.assembler.expressions import Expression, ExprNodeType, parse_expression
from mixal.assembler.fields import Field, find_field_or_default
from mixal.assembler.wval import WValue, WValueComponent, LiteralConstant
from mixal.assembler.context import AssemblyContext, SymbolTable
from mixal.assembler.parser import (
    Address,
    AlfDirective,
    Directive,
    Instruction,
    Parser,
    Statement,
    parse_line,
    parse_source,
)
from mixal.assembler.codegen import (
    AssembledWord,
    AssemblyResult,
    CodeGenerator,
    PendingPatch,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Atoms
    "Symbol",
    "Number",
    # Expressions
    "UnaryOperator",
    "BinaryOperator",
    "Expression",
    "ExprNodeType",
    "parse_expression",
    "Field",
    "find_field_or_default",
    "WValue",
    "WValueComponent",
    "LiteralConstant",
    # Context
    "AssemblyContext",
    "SymbolTable",
    # Parser
    "Address",
    "AlfDirective",
    "Directive",
    "Instruction",
    "Parser",
    "Statement",
    "parse_line",
    "parse_source",
    # Code generator
    "AssembledWord",
    "AssemblyResult",
    "CodeGenerator",
    "PendingPatch",
]
