"""
MIXAL W-Values and Literal Constants
====================================

A W-value ("word value") describes a full MIX word. It is the operand
of EQU, ORIG, CON and END:

    W  ::=  E(F), E(F), ...

where each ``(F)`` is optional and defaults to (0:5). Evaluation starts
from +0 and stores each component's value into field F the way STA
does: the rightmost R-L+1 bytes of the value land in bytes L..R, and
the sign is copied only when L = 0. Components apply left to right, so
later ones overwrite earlier ones.

    CON  1(1:1),2(2:2),3(3:3)     ->  + 01 02 03 00 00
    CON  -1000(0:2),1(3:5)        ->  - 15 40 00 00 01

Literal Constants
-----------------
``=W=`` in an instruction's address part means "the address of a word
holding W". The assembler reserves a fresh word for each occurrence,
places all of them after the program when it reaches END, and uses
the reserved address as the operand:

    LDA  =100=        load the constant 100

The W between the equal signs is at most 9 characters long.
"""

from dataclasses import dataclass
from typing import ClassVar, Iterator, TYPE_CHECKING

from mixal.errors import InvalidOperandError, MalformedExpressionError
from mixal.machine.word import MachineWord
from mixal.assembler.expressions import Expression
from mixal.assembler.fields import Field, find_field_or_default, FULL_WORD
from mixal.assembler.symbols import Symbol

if TYPE_CHECKING:
    from mixal.assembler.context import AssemblyContext


@dataclass(frozen=True)
class WValueComponent:
    """One ``E(F)`` part of a W-value."""
    expression: Expression
    field: Field

    @classmethod
    def parse(cls, text: str) -> "WValueComponent":
        field, idx = find_field_or_default(text, FULL_WORD)
        if idx == 0:
            raise MalformedExpressionError(f"missing expression before field in '{text}'")
        return cls(Expression.parse(text[:idx]), field)

    def __str__(self) -> str:
        return f"{self.expression}{self.field}"


@dataclass(frozen=True)
class WValue:
    """A comma-separated sequence of W-value components."""
    components: tuple[WValueComponent, ...]

    @classmethod
    def parse(cls, text: str) -> "WValue":
        """
        Parse W-value text.

        Raises:
            MalformedExpressionError: If any component is malformed
        """
        if not text:
            raise MalformedExpressionError("empty W-value")
        return cls(tuple(WValueComponent.parse(part) for part in text.split(",")))

    def evaluate(self, context: "AssemblyContext") -> MachineWord:
        """
        Build the word this W-value describes.

        Raises:
            UndefinedSymbolError: A component refers to an undefined symbol
            InvalidFieldRangeError: A field is not a valid (L:R)
        """
        word = MachineWord.zero()
        for component in self.components:
            value = component.expression.evaluate(context)
            left, right = component.field.evaluate_range(context)
            word = value.store_into(word, left, right)
        return word

    def symbols(self) -> Iterator[Symbol]:
        """Yield every symbol the W-value refers to."""
        for component in self.components:
            yield from component.expression.symbols()
            yield from component.field.expression.symbols()

    def __str__(self) -> str:
        return ",".join(str(component) for component in self.components)


@dataclass(frozen=True)
class LiteralConstant:
    """A W-value written as ``=W=``, standing for the address of its value."""
    wvalue: WValue

    MAX_LENGTH: ClassVar[int] = 9

    @staticmethod
    def is_literal(text: str) -> bool:
        return text.startswith("=")

    @classmethod
    def parse(cls, text: str) -> "LiteralConstant":
        """
        Parse ``=W=``.

        Raises:
            InvalidOperandError: Missing '=' delimiters, or W empty or
                longer than 9 characters
            MalformedExpressionError: W itself is malformed
        """
        if not (len(text) >= 2 and text.startswith("=") and text.endswith("=")):
            raise InvalidOperandError(f"literal constant '{text}' must be written =W=")
        inner = text[1:-1]
        if not 1 <= len(inner) <= cls.MAX_LENGTH:
            raise InvalidOperandError(
                f"literal constant '{text}' must contain 1 to {cls.MAX_LENGTH} characters"
            )
        return cls(WValue.parse(inner))

    def __str__(self) -> str:
        return f"={self.wvalue}="
