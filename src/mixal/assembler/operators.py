"""
MIXAL Operators
===============

MIXAL expressions have two unary and six binary operators:

| Operator | Kind   | Meaning                                   |
|----------|--------|-------------------------------------------|
| +  -     | unary  | sign (only at the start of an expression) |
| +  -     | binary | addition, subtraction                     |
| *        | binary | multiplication                            |
| /        | binary | integer division (truncating)             |
| //       | binary | scaled division: (a * 64**5) / b          |
| :        | binary | field composition: 8a + b                 |

There is no precedence: every binary operator groups left to right, so
``1+2*3`` is ``(1+2)*3 = 9``. The parser realizes this by splitting an
expression at its rightmost binary operator; see find_rightmost_in().

Arithmetic follows the MIX registers: values carry a sign and a
magnitude, results that do not fit wrap modulo 64**5 (the overflow is
dropped), and a result of zero keeps the sign of the left operand.
"""

from enum import Enum
from typing import Optional

from mixal.errors import DivisionByZeroError, MalformedExpressionError
from mixal.machine.word import MachineWord, Sign, WORD_MODULUS


BINARY_OPERATOR_CHARS = frozenset("+-*/:")


# =============================================================================
# Unary Operators
# =============================================================================

class UnaryOperator(Enum):
    """Sign prefix of an expression."""
    PLUS = "+"
    MINUS = "-"

    @classmethod
    def parse(cls, text: str) -> "UnaryOperator":
        try:
            return cls(text)
        except ValueError:
            raise MalformedExpressionError(f"unrecognized unary operator '{text}'") from None

    @staticmethod
    def starts_with(text: str) -> bool:
        """Check if text begins with a unary operator."""
        return text[:1] in ("+", "-")

    def apply(self, operand: MachineWord) -> MachineWord:
        """Apply the operator. Minus flips the sign, so -0 is kept."""
        if self is UnaryOperator.MINUS:
            return operand.negate()
        return operand

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Binary Operators
# =============================================================================

def _from_signed(total: int, zero_sign: Sign) -> MachineWord:
    """Wrap a signed result into a word; a zero result takes zero_sign."""
    if total == 0:
        return MachineWord.zero(zero_sign)
    sign = Sign.NEGATIVE if total < 0 else Sign.POSITIVE
    return MachineWord.from_magnitude(abs(total) % WORD_MODULUS, sign)


def _product_sign(left: MachineWord, right: MachineWord) -> Sign:
    return Sign.NEGATIVE if left.sign is not right.sign else Sign.POSITIVE


class BinaryOperator(Enum):
    """Binary operator, valued by its source text."""
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    INT_DIVIDE = "/"
    SCALED_DIVIDE = "//"
    COLON = ":"

    @classmethod
    def parse(cls, text: str) -> "BinaryOperator":
        """
        Look up an operator by its text.

        Raises:
            MalformedExpressionError: If text is not a binary operator
        """
        try:
            return cls(text)
        except ValueError:
            raise MalformedExpressionError(f"unrecognized binary operator '{text}'") from None

    @staticmethod
    def find_rightmost_in(text: str) -> Optional[tuple[int, str]]:
        """
        Find the rightmost binary operator in the interior of text.

        The first and last characters are never operators: a leading
        sign is unary, and a trailing operator has no right operand
        (``*`` alone is the location counter). A ``/`` directly after
        another interior ``/`` is read as ``//``.

        Returns:
            (position, operator text), or None if there is no operator

        Examples:
            >>> BinaryOperator.find_rightmost_in("3*5+4")
            (3, '+')
            >>> BinaryOperator.find_rightmost_in("37//5")
            (2, '//')
            >>> BinaryOperator.find_rightmost_in("-3") is None
            True
        """
        for pos in range(len(text) - 2, 0, -1):
            char = text[pos]
            if char not in BINARY_OPERATOR_CHARS:
                continue
            if char == "/" and pos > 1 and text[pos - 1] == "/":
                return pos - 1, "//"
            return pos, char
        return None

    def apply(self, left: MachineWord, right: MachineWord) -> MachineWord:
        """
        Evaluate left <op> right.

        Raises:
            DivisionByZeroError: For / or // with a zero right operand
        """
        if self is BinaryOperator.PLUS:
            return _from_signed(left.value + right.value, left.sign)

        if self is BinaryOperator.MINUS:
            return _from_signed(left.value - right.value, left.sign)

        if self is BinaryOperator.MULTIPLY:
            magnitude = (left.magnitude * right.magnitude) % WORD_MODULUS
            return MachineWord.from_magnitude(magnitude, _product_sign(left, right))

        if self is BinaryOperator.INT_DIVIDE:
            if right.magnitude == 0:
                raise DivisionByZeroError(f"division by zero in '{left.value}/{right.value}'")
            magnitude = left.magnitude // right.magnitude
            return MachineWord.from_magnitude(magnitude, _product_sign(left, right))

        if self is BinaryOperator.SCALED_DIVIDE:
            if right.magnitude == 0:
                raise DivisionByZeroError(f"division by zero in '{left.value}//{right.value}'")
            magnitude = (left.magnitude * WORD_MODULUS // right.magnitude) % WORD_MODULUS
            return MachineWord.from_magnitude(magnitude, _product_sign(left, right))

        # COLON
        return _from_signed(8 * left.value + right.value, left.sign)

    def __str__(self) -> str:
        return self.value
