"""
MIXAL Symbols and Numbers
=========================

The two atoms of the MIXAL expression grammar.

Symbols
-------
A symbol is a string of one to ten letters and digits containing at
least one letter (TAOCP Vol. 1, p. 153). Only the upper-case letters
A-Z exist on MIX, so ``abc1`` is not a symbol.

    START   LOOP    5H    MAXIMCHARS    X1

Local Symbols
-------------
MIXAL has ten reusable local labels. ``dH`` (d a digit) may be used as a
LOC label any number of times. In an operand:

    dB   refers to the most recent dH on an earlier line ("backward")
    dF   refers to the next dH on a later line ("forward")

So a program can write ``2H`` in several places and jump to ``2B`` or
``2F`` without inventing a new name for each loop.

Numbers
-------
A number is an unsigned string of one to ten decimal digits. Signs are
unary operators in the expression grammar, not part of the number.
"""

from dataclasses import dataclass
from typing import ClassVar, Iterable, Optional

from mixal.errors import (
    InvalidSymbolError,
    InvalidNumberError,
    NumberTooLongError,
)
from mixal.machine.word import MachineWord


_LETTERS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
_DIGITS = frozenset("0123456789")
_SYMBOL_CHARS = _LETTERS | _DIGITS


# =============================================================================
# Symbols
# =============================================================================

@dataclass(frozen=True)
class Symbol:
    """
    A validated MIXAL symbol.

    Construct through Symbol.parse() so the name is checked; two symbols
    are equal when their names are.

    Attributes:
        name: The symbol text
    """
    name: str

    MAX_LENGTH: ClassVar[int] = 10

    @classmethod
    def parse(cls, text: str) -> "Symbol":
        """
        Validate text as a symbol.

        Raises:
            InvalidSymbolError: If text is empty, longer than 10
                characters, uses characters outside A-Z0-9 or has no
                letter
        """
        if not text:
            raise InvalidSymbolError("empty symbol")
        if len(text) > cls.MAX_LENGTH:
            raise InvalidSymbolError(
                f"symbol '{text}' is longer than {cls.MAX_LENGTH} characters"
            )
        bad = [char for char in text if char not in _SYMBOL_CHARS]
        if bad:
            hint = None
            if text.upper() != text and all(c.upper() in _SYMBOL_CHARS for c in text):
                hint = f"MIXAL is upper case: write '{text.upper()}'"
            raise InvalidSymbolError(
                f"invalid character '{bad[0]}' in symbol '{text}'",
                hint=hint,
            )
        if not any(char in _LETTERS for char in text):
            raise InvalidSymbolError(f"symbol '{text}' has no letter")
        return cls(text)

    # =========================================================================
    # Local Symbols
    # =========================================================================

    @property
    def local_digit(self) -> Optional[str]:
        """The digit of a local symbol (dH, dB, dF), or None."""
        if len(self.name) == 2 and self.name[0] in _DIGITS and self.name[1] in "HBF":
            return self.name[0]
        return None

    @property
    def is_local_definition(self) -> bool:
        return self.local_digit is not None and self.name[1] == "H"

    @property
    def is_backward_reference(self) -> bool:
        return self.local_digit is not None and self.name[1] == "B"

    @property
    def is_forward_reference(self) -> bool:
        return self.local_digit is not None and self.name[1] == "F"

    def __str__(self) -> str:
        return self.name


# =============================================================================
# Numbers
# =============================================================================

@dataclass(frozen=True)
class Number:
    """
    An unsigned decimal constant of at most 10 digits.

    Ten decimal digits can exceed the largest MIX word, so range is
    checked when the number is evaluated, not when it is parsed.
    """
    value: int

    MAX_DIGITS: ClassVar[int] = 10

    @classmethod
    def parse(cls, text: str) -> "Number":
        """
        Parse a digit string.

        Any 10 digits parse, including values above the largest MIX word
        such as 9999999999. Those fail later, with WordOverflowError, when
        the number is evaluated.

        Raises:
            NumberTooLongError: More than 10 characters
            InvalidNumberError: Empty, or not all ASCII digits
        """
        if len(text) > cls.MAX_DIGITS:
            raise NumberTooLongError(
                f"number '{text}' has more than {cls.MAX_DIGITS} digits"
            )
        if not text or not all(char in _DIGITS for char in text):
            raise InvalidNumberError(f"invalid number '{text}'")
        return cls(int(text))

    def evaluate(self) -> MachineWord:
        """
        Return the number as a positive MIX word.

        Raises:
            WordOverflowError: If the value is above 64**5 - 1
        """
        return MachineWord.from_magnitude(self.value)

    def __str__(self) -> str:
        return str(self.value)


# =============================================================================
# Name Suggestions
# =============================================================================

def edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min((
                    distances[j],
                    distances[j + 1],
                    new_distances[-1],
                )))
        distances = new_distances

    return distances[-1]


def similar_names(name: str, candidates: Iterable[str], limit: int = 3) -> list[str]:
    """
    Find names close to name, for did-you-mean hints.

    A candidate is similar when it differs in length by at most one and
    is within edit distance 2. Closest names come first.
    """
    similar = []
    for candidate in candidates:
        if candidate == name or abs(len(candidate) - len(name)) > 1:
            continue
        distance = edit_distance(name, candidate)
        if distance <= 2:
            similar.append((distance, candidate))
    return [candidate for _, candidate in sorted(similar)[:limit]]
