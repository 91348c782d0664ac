"""
MIXAL Expressions
=================

This module parses and evaluates MIXAL expressions, the arithmetic that
appears in addresses, index and field parts, and W-values.

Grammar
-------
An expression is one of:

- ``*``, the current location counter
- a symbol (``START``, ``2B``)
- a number (``1000``)
- a unary operation: ``+E`` or ``-E``
- a binary operation: ``E op A`` where A is an atomic expression

There are no parentheses and no precedence. Operators are applied
strictly left to right:

    -1+5*20/6   =   ((((-1)+5)*20)/6)   =   13

The parser realizes left-to-right grouping by splitting at the
RIGHTMOST binary operator: everything to its left is the left operand
(parsed recursively), and the atom to its right is the right operand.
Operators are only searched for in the interior of the text, so a
leading sign stays unary and ``***`` parses as ``(*)*(*)``.

Parse order for a piece of text:

1. ``*`` alone is the location counter
2. a rightmost interior binary operator splits the text
3. a leading ``+`` or ``-`` is a unary operator
4. all digits is a number
5. anything else must be a valid symbol

Evaluation
----------
Evaluation needs an AssemblyContext (location counter and symbol
lookup) and produces a MachineWord, so negative zero survives: ``-0``
evaluates to a word with a minus sign and zero magnitude.

Forward References
------------------
A symbol that has no value yet raises UndefinedSymbolError. The code
generator treats that as "try again in pass 2" rather than as a failure.

Example Usage
-------------
>>> expr = Expression.parse("-1+5*20/6")
>>> str(expr)
'-1+5*20/6'
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Union, TYPE_CHECKING

from mixal.errors import AssemblySyntaxError, MalformedExpressionError
from mixal.machine.word import MachineWord
from mixal.assembler.symbols import Symbol, Number
from mixal.assembler.operators import UnaryOperator, BinaryOperator

if TYPE_CHECKING:
    from mixal.assembler.context import AssemblyContext


# =============================================================================
# Expression AST Nodes
# =============================================================================

class ExprNodeType(Enum):
    """Types of expression AST nodes."""
    ASTERISK = auto()    # Location counter (*)
    SYMBOL = auto()      # Symbol reference
    NUMBER = auto()      # Literal number
    UNARY_OP = auto()    # Unary operation (-a)
    BINARY_OP = auto()   # Binary operation (a + b)


@dataclass(frozen=True)
class Expression:
    """
    AST node for a MIXAL expression.

    Each node has a type and carries data appropriate to that type. For
    UNARY_OP the operand is stored in ``left``.
    """
    node_type: ExprNodeType
    value: Union[Symbol, Number, None] = None                  # SYMBOL/NUMBER
    operator: Union[UnaryOperator, BinaryOperator, None] = None  # UNARY_OP/BINARY_OP
    left: Optional["Expression"] = None
    right: Optional["Expression"] = None

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def asterisk(cls) -> "Expression":
        return cls(ExprNodeType.ASTERISK)

    @classmethod
    def symbol(cls, name: Union[str, Symbol]) -> "Expression":
        if isinstance(name, str):
            name = Symbol.parse(name)
        return cls(ExprNodeType.SYMBOL, value=name)

    @classmethod
    def number(cls, value: Union[int, Number]) -> "Expression":
        if isinstance(value, int):
            value = Number(value)
        return cls(ExprNodeType.NUMBER, value=value)

    @classmethod
    def unary(cls, operator: UnaryOperator, operand: "Expression") -> "Expression":
        return cls(ExprNodeType.UNARY_OP, operator=operator, left=operand)

    @classmethod
    def binary(
        cls,
        operator: BinaryOperator,
        left: "Expression",
        right: "Expression",
    ) -> "Expression":
        return cls(ExprNodeType.BINARY_OP, operator=operator, left=left, right=right)

    # =========================================================================
    # Parsing
    # =========================================================================

    @classmethod
    def parse(cls, text: str) -> "Expression":
        """
        Parse expression text.

        Raises:
            MalformedExpressionError: If the text, or any part of it, is
                not a valid expression. The underlying symbol or number
                error is chained as __cause__.
        """
        try:
            return cls._parse(text)
        except MalformedExpressionError:
            raise
        except AssemblySyntaxError as e:
            raise MalformedExpressionError(
                f"malformed expression '{text}': {e.message}",
                hint=e.hint,
            ) from e

    @classmethod
    def _parse(cls, text: str) -> "Expression":
        if not text:
            raise MalformedExpressionError("empty expression")

        if text == "*":
            return cls.asterisk()

        split = BinaryOperator.find_rightmost_in(text)
        if split is not None:
            pos, op_text = split
            return cls.binary(
                BinaryOperator.parse(op_text),
                cls._parse(text[:pos]),
                cls._parse(text[pos + len(op_text):]),
            )

        if UnaryOperator.starts_with(text):
            return cls.unary(UnaryOperator.parse(text[0]), cls._parse(text[1:]))

        if text.isascii() and text.isdigit():
            return cls.number(Number.parse(text))

        return cls.symbol(Symbol.parse(text))

    # =========================================================================
    # Evaluation
    # =========================================================================

    def evaluate(self, context: "AssemblyContext") -> MachineWord:
        """
        Evaluate the expression.

        Raises:
            UndefinedSymbolError: A symbol has no value (yet)
            DivisionByZeroError: / or // by zero
            WordOverflowError: A number above 64**5 - 1
        """
        node_type = self.node_type

        if node_type == ExprNodeType.ASTERISK:
            return MachineWord.from_magnitude(context.location)

        if node_type == ExprNodeType.NUMBER:
            return self.value.evaluate()

        if node_type == ExprNodeType.SYMBOL:
            return context.lookup(self.value)

        if node_type == ExprNodeType.UNARY_OP:
            return self.operator.apply(self.left.evaluate(context))

        return self.operator.apply(
            self.left.evaluate(context),
            self.right.evaluate(context),
        )

    def symbols(self) -> Iterator[Symbol]:
        """Yield every symbol referenced by the expression, left to right."""
        if self.node_type == ExprNodeType.SYMBOL:
            yield self.value
        if self.left is not None:
            yield from self.left.symbols()
        if self.right is not None:
            yield from self.right.symbols()

    def __str__(self) -> str:
        """Canonical source text; parsing it gives back an equal tree."""
        if self.node_type == ExprNodeType.ASTERISK:
            return "*"
        if self.node_type in (ExprNodeType.SYMBOL, ExprNodeType.NUMBER):
            return str(self.value)
        if self.node_type == ExprNodeType.UNARY_OP:
            return f"{self.operator}{self.left}"
        return f"{self.left}{self.operator}{self.right}"


def parse_expression(text: str) -> Expression:
    """Convenience wrapper for Expression.parse()."""
    return Expression.parse(text)
