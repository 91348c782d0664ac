"""
MIX Character Codes
===================

MIX represents characters as byte values 0-55. The table below is the
character code chart from TAOCP Volume 1, section 1.3.1. Codes 10, 20
and 21 are the Greek letters delta, sigma and pi, which cannot be typed
in MIXAL source, so ALF accepts every character in the table except
those three.

```
 0 ' '   10 Δ    20 Σ    30 '0'   40 '.'   50 '<'
 1 'A'   11 'J'  21 Π    31 '1'   41 ','   51 '>'
 2 'B'   12 'K'  22 'S'  32 '2'   42 '('   52 '@'
 ...                              ...      55 "'"
```
"""

MIX_CHARACTERS = " ABCDEFGHIΔJKLMNOPQRΣΠSTUVWXYZ0123456789.,()+-*/=$<>@;:'"

# Characters that can appear in ALF character data
ALF_ALPHABET = frozenset(MIX_CHARACTERS) - {"Δ", "Σ", "Π"}

_CHAR_CODES = {char: code for code, char in enumerate(MIX_CHARACTERS)}


def is_mix_character(char: str) -> bool:
    """Check if char can appear in ALF character data."""
    return char in ALF_ALPHABET


def char_code(char: str) -> int:
    """
    Return the MIX code of a character.

    Raises:
        KeyError: If char is not a MIX character
    """
    return _CHAR_CODES[char]


def encode_text(text: str) -> tuple[int, ...]:
    """Encode a string of MIX characters as a tuple of codes."""
    return tuple(_CHAR_CODES[char] for char in text)
