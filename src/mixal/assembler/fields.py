"""
MIXAL Field Specifications
==========================

A field specification ``(E)`` follows an address or a W-value
component. E is an ordinary expression, usually written with the
colon operator: ``(1:4)`` evaluates to 8*1 + 4 = 12, the byte stored in
the F part of an instruction.

Two readings of the same byte:

- Instructions use the raw byte. Any value 0-63 is allowed, because F
  also selects variants (JG is F=6, an I/O unit number goes in F).
- W-values use it as a byte range: L = F // 8, R = F % 8, with
  0 <= L <= R <= 5. A lone ``(R)`` therefore means ``(0:R)``.

When the source omits the field, the mnemonic's default applies; for
W-values it is always (0:5).
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mixal.errors import InvalidFieldRangeError, MalformedExpressionError
from mixal.machine.word import BYTE_SIZE, BYTES_PER_WORD
from mixal.assembler.expressions import Expression

if TYPE_CHECKING:
    from mixal.assembler.context import AssemblyContext


FULL_WORD = "0:5"


@dataclass(frozen=True)
class Field:
    """A parsed field specification wrapping its expression."""
    expression: Expression

    @classmethod
    def parse(cls, text: str) -> "Field":
        """
        Parse ``(E)``.

        Raises:
            MalformedExpressionError: Missing parentheses, empty E, or a
                malformed E
        """
        if not (len(text) > 2 and text.startswith("(") and text.endswith(")")):
            raise MalformedExpressionError(f"invalid field specifier '{text}'")
        return cls(Expression.parse(text[1:-1]))

    @classmethod
    def from_default(cls, text: str) -> "Field":
        """Build a field from default text such as '0:5' (no parentheses)."""
        return cls(Expression.parse(text))

    def evaluate(self, context: "AssemblyContext") -> int:
        """
        Evaluate to the F byte.

        Raises:
            InvalidFieldRangeError: If the value is not in 0-63
        """
        value = self.expression.evaluate(context).value
        if not 0 <= value < BYTE_SIZE:
            raise InvalidFieldRangeError(
                f"field ({self.expression}) = {value} does not fit in a byte"
            )
        return value

    def evaluate_range(self, context: "AssemblyContext") -> tuple[int, int]:
        """
        Evaluate to the byte range (L, R).

        Raises:
            InvalidFieldRangeError: Unless 0 <= L <= R <= 5
        """
        value = self.expression.evaluate(context).value
        left, right = divmod(value, 8)
        if value < 0 or not 0 <= left <= right <= BYTES_PER_WORD:
            raise InvalidFieldRangeError(
                f"field ({self.expression}) is not a valid byte range (L:R)",
                hint="fields must satisfy 0 <= L <= R <= 5",
            )
        return left, right

    def __str__(self) -> str:
        return f"({self.expression})"


def find_field_or_default(text: str, default: str) -> tuple[Field, int]:
    """
    Split a field suffix off text.

    Looks for the first ``(`` and parses from there to the end as a
    field. Without one, returns the default field and len(text), as if
    the field had been found at the end.

    Returns:
        (field, index where the field starts)

    Example:
        >>> field, idx = find_field_or_default("3+4(1:1)", FULL_WORD)
        >>> idx, str(field)
        (3, '(1:1)')
    """
    idx = text.find("(")
    if idx < 0:
        return Field.from_default(default), len(text)
    return Field.parse(text[idx:]), idx
