"""
MIX Machine Words
=================

A MIX word is a sign plus five bytes. MIX is deliberately vague about
byte size (it may be binary or decimal); this implementation uses the
binary convention of 64 values per byte, so a word holds magnitudes up
to 64**5 - 1 = 1,073,741,823.

Word Layout
-----------
```
 0     1     2     3     4     5
+---+-----+-----+-----+-----+-----+
| ± |  b1 |  b2 |  b3 |  b4 |  b5 |
+---+-----+-----+-----+-----+-----+
```

Instruction words use the same layout:
```
| ± |    A (2 bytes) |  I  |  F  |  C  |
```
where A is the address, I the index register, F the field
specification and C the operation code.

Sign and magnitude are stored separately, so MIX has two zeros:
+0 and -0. MachineWord keeps the distinction, which matters for
``CON -0`` and for instructions such as ``ENTA -0``.

Field Specifications
--------------------
A field (L:R) names bytes L through R of a word, where byte 0 is the
sign. It is encoded in a single byte as 8*L + R. Storing a value into
a field follows the STA rule: the rightmost R-L+1 bytes of the value
replace bytes L..R of the target, and the sign is copied only when
L = 0.
"""

from dataclasses import dataclass
from enum import Enum

from mixal.errors import WordOverflowError


# =============================================================================
# Machine Constants
# =============================================================================

BYTE_SIZE = 64                             # Values per MIX byte
BYTES_PER_WORD = 5                         # Bytes after the sign
WORD_MODULUS = BYTE_SIZE ** BYTES_PER_WORD  # 64**5
MAX_MAGNITUDE = WORD_MODULUS - 1

MEMORY_SIZE = 4000                         # Addressable words (0-3999)
ADDRESS_LIMIT = BYTE_SIZE ** 2             # A field is two bytes


class Sign(Enum):
    """Sign of a MIX word."""
    POSITIVE = "+"
    NEGATIVE = "-"

    def __str__(self) -> str:
        return self.value

    def flipped(self) -> "Sign":
        """Return the opposite sign."""
        return Sign.NEGATIVE if self is Sign.POSITIVE else Sign.POSITIVE


@dataclass(frozen=True)
class MachineWord:
    """
    One MIX word: a sign and five bytes in [0, 63].

    MachineWord is both the assembler's output unit and the value type
    produced by expression evaluation.

    Attributes:
        sign: Sign of the word
        data: The five bytes, most significant first
    """
    sign: Sign
    data: tuple[int, int, int, int, int]

    def __post_init__(self):
        if len(self.data) != BYTES_PER_WORD:
            raise WordOverflowError(
                f"a MIX word has {BYTES_PER_WORD} bytes, got {len(self.data)}"
            )
        for byte in self.data:
            if not 0 <= byte < BYTE_SIZE:
                raise WordOverflowError(f"byte value {byte} outside 0-{BYTE_SIZE - 1}")

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def zero(cls, sign: Sign = Sign.POSITIVE) -> "MachineWord":
        """Return +0 (or -0)."""
        return cls(sign, (0, 0, 0, 0, 0))

    @classmethod
    def from_magnitude(cls, magnitude: int, sign: Sign = Sign.POSITIVE) -> "MachineWord":
        """
        Build a word from a sign and an unsigned magnitude.

        Raises:
            WordOverflowError: If magnitude does not fit in five bytes
        """
        if not 0 <= magnitude <= MAX_MAGNITUDE:
            raise WordOverflowError(
                f"value {magnitude} does not fit in a MIX word (max {MAX_MAGNITUDE})"
            )
        data = []
        for _ in range(BYTES_PER_WORD):
            magnitude, byte = divmod(magnitude, BYTE_SIZE)
            data.append(byte)
        return cls(sign, tuple(reversed(data)))

    @classmethod
    def from_int(cls, value: int) -> "MachineWord":
        """
        Build a word from a signed Python integer.

        Zero becomes +0; use zero(Sign.NEGATIVE) for -0.
        """
        sign = Sign.NEGATIVE if value < 0 else Sign.POSITIVE
        return cls.from_magnitude(abs(value), sign)

    @classmethod
    def from_bytes(cls, sign: Sign, *data: int) -> "MachineWord":
        """Build a word from its five bytes: from_bytes(Sign.POSITIVE, 1, 2, 3, 4, 5)."""
        return cls(sign, tuple(data))

    @classmethod
    def instruction(
        cls,
        address: "MachineWord",
        index: int,
        field: int,
        opcode: int,
    ) -> "MachineWord":
        """
        Pack an instruction word.

        The sign of the instruction is the sign of the address value.

        Args:
            address: Address value; magnitude must be below 4096
            index: Index register number (one byte)
            field: Field specification byte
            opcode: Operation code (one byte)

        Raises:
            WordOverflowError: If any part does not fit its bytes
        """
        if address.magnitude >= ADDRESS_LIMIT:
            raise WordOverflowError(
                f"address {address.value} does not fit in two bytes "
                f"(|A| must be below {ADDRESS_LIMIT})"
            )
        if not 0 <= index < BYTE_SIZE:
            raise WordOverflowError(f"index {index} does not fit in one byte")
        if not 0 <= field < BYTE_SIZE:
            raise WordOverflowError(f"field {field} does not fit in one byte")
        if not 0 <= opcode < BYTE_SIZE:
            raise WordOverflowError(f"operation code {opcode} does not fit in one byte")
        high, low = divmod(address.magnitude, BYTE_SIZE)
        return cls(address.sign, (high, low, index, field, opcode))

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def magnitude(self) -> int:
        """Unsigned value of the five bytes."""
        result = 0
        for byte in self.data:
            result = result * BYTE_SIZE + byte
        return result

    @property
    def value(self) -> int:
        """Signed integer value (-0 reads as 0)."""
        magnitude = self.magnitude
        return -magnitude if self.sign is Sign.NEGATIVE else magnitude

    @property
    def is_negative(self) -> bool:
        return self.sign is Sign.NEGATIVE

    def negate(self) -> "MachineWord":
        """Flip the sign, keeping the magnitude (so +0 becomes -0)."""
        return MachineWord(self.sign.flipped(), self.data)

    def store_into(self, target: "MachineWord", left: int, right: int) -> "MachineWord":
        """
        Store this word into field (left:right) of target, as STA does.

        Returns the updated copy of target.
        """
        sign = target.sign
        data = list(target.data)
        if left == 0:
            sign = self.sign
            left = 1
        if right >= left:
            count = right - left + 1
            data[left - 1:right] = self.data[BYTES_PER_WORD - count:]
        return MachineWord(sign, tuple(data))

    def __str__(self) -> str:
        """Format as '+ 01 02 03 04 05'."""
        return f"{self.sign} " + " ".join(f"{byte:02d}" for byte in self.data)
