# =============================================================================
# test_word.py - MIX Machine Word Unit Tests
# =============================================================================
# Tests for MachineWord, the sign-plus-five-bytes value used both as
# assembler output and as the result of expression evaluation.
#
# Test coverage includes:
#   - Construction from magnitudes, signed integers and bytes
#   - Negative zero
#   - STA-style partial-field stores
#   - Instruction packing
#   - The MIX character set used by ALF
# =============================================================================

import pytest

from mixal.errors import WordOverflowError
from mixal.machine import (
    MAX_MAGNITUDE,
    MachineWord,
    Sign,
    char_code,
    encode_text,
    is_mix_character,
)


# =============================================================================
# Construction Tests
# =============================================================================

class TestConstruction:
    """Test building words from integers and bytes."""

    def test_from_int_positive(self):
        word = MachineWord.from_int(2000)
        assert word.sign is Sign.POSITIVE
        assert word.data == (0, 0, 0, 31, 16)
        assert word.value == 2000

    def test_from_int_negative(self):
        word = MachineWord.from_int(-499)
        assert word.sign is Sign.NEGATIVE
        assert word.magnitude == 499
        assert word.value == -499

    def test_largest_magnitude(self):
        word = MachineWord.from_magnitude(MAX_MAGNITUDE)
        assert word.data == (63, 63, 63, 63, 63)

    def test_overflow_rejected(self):
        with pytest.raises(WordOverflowError):
            MachineWord.from_magnitude(MAX_MAGNITUDE + 1)

    def test_byte_out_of_range_rejected(self):
        with pytest.raises(WordOverflowError):
            MachineWord.from_bytes(Sign.POSITIVE, 0, 0, 0, 0, 64)

    def test_wrong_byte_count_rejected(self):
        with pytest.raises(WordOverflowError):
            MachineWord(Sign.POSITIVE, (1, 2, 3))

    def test_str_format(self):
        word = MachineWord.from_bytes(Sign.NEGATIVE, 1, 2, 3, 4, 5)
        assert str(word) == "- 01 02 03 04 05"


# =============================================================================
# Negative Zero Tests
# =============================================================================

class TestNegativeZero:
    """MIX has two zeros; the sign must survive."""

    def test_negate_zero(self):
        word = MachineWord.zero().negate()
        assert word.is_negative
        assert word.magnitude == 0
        assert word.value == 0

    def test_negative_zero_differs_from_positive_zero(self):
        assert MachineWord.zero(Sign.NEGATIVE) != MachineWord.zero()

    def test_from_int_zero_is_positive(self):
        assert MachineWord.from_int(0).sign is Sign.POSITIVE


# =============================================================================
# Field Store Tests
# =============================================================================

class TestStoreInto:
    """Test STA semantics for storing into a field (L:R)."""

    def test_full_word(self):
        value = MachineWord.from_int(-7)
        assert value.store_into(MachineWord.zero(), 0, 5) == value

    def test_single_byte_takes_rightmost_byte(self):
        value = MachineWord.from_int(1)
        result = value.store_into(MachineWord.zero(), 1, 1)
        assert result.data == (1, 0, 0, 0, 0)

    def test_sign_only_copied_when_left_is_zero(self):
        value = MachineWord.from_int(-1)
        result = value.store_into(MachineWord.zero(), 4, 5)
        assert result.sign is Sign.POSITIVE
        assert result.data == (0, 0, 0, 0, 1)

    def test_sign_field_alone(self):
        value = MachineWord.from_int(-1)
        result = value.store_into(MachineWord.from_int(5), 0, 0)
        assert result.sign is Sign.NEGATIVE
        assert result.magnitude == 5

    def test_two_bytes_with_sign(self):
        value = MachineWord.from_int(-1000)
        result = value.store_into(MachineWord.zero(), 0, 2)
        assert str(result) == "- 15 40 00 00 00"


# =============================================================================
# Instruction Packing Tests
# =============================================================================

class TestInstructionPacking:
    """Test the sign | A A | I | F | C layout."""

    def test_simple_instruction(self):
        word = MachineWord.instruction(MachineWord.from_int(2000), 0, 5, 24)
        assert str(word) == "+ 31 16 00 05 24"

    def test_negative_address(self):
        word = MachineWord.instruction(MachineWord.from_int(-50), 0, 2, 53)
        assert str(word) == "- 00 50 00 02 53"

    def test_negative_zero_address(self):
        word = MachineWord.instruction(MachineWord.zero(Sign.NEGATIVE), 0, 2, 48)
        assert word.sign is Sign.NEGATIVE

    def test_address_too_large(self):
        with pytest.raises(WordOverflowError):
            MachineWord.instruction(MachineWord.from_int(4096), 0, 5, 8)

    def test_largest_address(self):
        word = MachineWord.instruction(MachineWord.from_int(-4095), 0, 5, 8)
        assert word.data[:2] == (63, 63)

    def test_index_out_of_range(self):
        with pytest.raises(WordOverflowError):
            MachineWord.instruction(MachineWord.from_int(0), 64, 5, 8)

    def test_negative_index(self):
        with pytest.raises(WordOverflowError):
            MachineWord.instruction(MachineWord.from_int(0), -1, 5, 8)


# =============================================================================
# Character Set Tests
# =============================================================================

class TestCharset:
    """Test the MIX character codes."""

    def test_space_and_letters(self):
        assert char_code(" ") == 0
        assert char_code("A") == 1
        assert char_code("I") == 9
        assert char_code("J") == 11
        assert char_code("S") == 22

    def test_digits(self):
        assert char_code("0") == 30
        assert char_code("9") == 39

    def test_punctuation(self):
        assert char_code(".") == 40
        assert char_code("'") == 55

    def test_encode_text(self):
        assert encode_text("HELLO") == (8, 5, 13, 13, 16)

    def test_greek_letters_not_typeable(self):
        assert not is_mix_character("Δ")
        assert not is_mix_character("a")
        assert is_mix_character("=")
