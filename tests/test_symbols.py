# =============================================================================
# test_symbols.py - Symbol, Number and Operator Unit Tests
# =============================================================================
# Tests for the atoms of the MIXAL expression grammar.
#
# Test coverage includes:
#   - Symbol validation (length, alphabet, at least one letter)
#   - Local symbols (dH, dB, dF)
#   - Number validation
#   - Unary and binary operator lookup
#   - Rightmost binary operator scan
#   - Did-you-mean suggestions
# =============================================================================

import pytest

from mixal.errors import (
    InvalidNumberError,
    InvalidSymbolError,
    MalformedExpressionError,
    NumberTooLongError,
    WordOverflowError,
)
from mixal.assembler.symbols import Symbol, Number, edit_distance, similar_names
from mixal.assembler.operators import UnaryOperator, BinaryOperator


# =============================================================================
# Symbol Tests
# =============================================================================

class TestSymbol:
    """Test symbol validation."""

    @pytest.mark.parametrize("name", ["START", "5H", "MAXIMCHARS", "X1", "A"])
    def test_valid_symbols(self, name):
        assert Symbol.parse(name).name == name

    def test_empty(self):
        with pytest.raises(InvalidSymbolError):
            Symbol.parse("")

    def test_all_digits(self):
        with pytest.raises(InvalidSymbolError, match="no letter"):
            Symbol.parse("12345")

    def test_too_long(self):
        with pytest.raises(InvalidSymbolError, match="longer than 10"):
            Symbol.parse("AAAAAAAAAAA")

    def test_lower_case(self):
        with pytest.raises(InvalidSymbolError) as exc_info:
            Symbol.parse("abc1")
        assert exc_info.value.hint == "MIXAL is upper case: write 'ABC1'"

    def test_punctuation(self):
        with pytest.raises(InvalidSymbolError):
            Symbol.parse("A+B")

    def test_equality_by_name(self):
        assert Symbol.parse("LOOP") == Symbol.parse("LOOP")
        assert hash(Symbol.parse("LOOP")) == hash(Symbol.parse("LOOP"))
        assert Symbol.parse("LOOP") != Symbol.parse("LOOP2")


class TestLocalSymbols:
    """Test recognition of dH, dB and dF."""

    def test_definition(self):
        sym = Symbol.parse("2H")
        assert sym.local_digit == "2"
        assert sym.is_local_definition
        assert not sym.is_backward_reference

    def test_backward_reference(self):
        sym = Symbol.parse("4B")
        assert sym.is_backward_reference
        assert not sym.is_forward_reference

    def test_forward_reference(self):
        assert Symbol.parse("9F").is_forward_reference

    def test_ordinary_symbols_are_not_local(self):
        assert Symbol.parse("H2").local_digit is None
        assert Symbol.parse("22H").local_digit is None
        assert Symbol.parse("2X").local_digit is None


# =============================================================================
# Number Tests
# =============================================================================

class TestNumber:
    """Test number validation."""

    def test_valid(self):
        assert Number.parse("0").value == 0
        assert Number.parse("1000").value == 1000

    def test_ten_digits_allowed(self):
        assert Number.parse("1073741823").value == 1073741823

    def test_too_long(self):
        with pytest.raises(NumberTooLongError):
            Number.parse("12345678901")

    def test_not_digits(self):
        with pytest.raises(InvalidNumberError):
            Number.parse("12A")

    def test_sign_not_accepted(self):
        with pytest.raises(InvalidNumberError):
            Number.parse("-5")

    def test_empty(self):
        with pytest.raises(InvalidNumberError):
            Number.parse("")

    def test_evaluate_overflow(self):
        with pytest.raises(WordOverflowError):
            Number.parse("9999999999").evaluate()

    def test_evaluate(self):
        assert Number.parse("42").evaluate().value == 42


# =============================================================================
# Operator Tests
# =============================================================================

class TestOperators:
    """Test operator lookup and scanning."""

    def test_unary_starts_with(self):
        assert UnaryOperator.starts_with("+37")
        assert UnaryOperator.starts_with("-37")
        assert not UnaryOperator.starts_with("37")
        assert not UnaryOperator.starts_with("")

    def test_unary_parse(self):
        assert UnaryOperator.parse("-") is UnaryOperator.MINUS
        with pytest.raises(MalformedExpressionError):
            UnaryOperator.parse("*")

    def test_binary_parse(self):
        assert BinaryOperator.parse("//") is BinaryOperator.SCALED_DIVIDE
        assert BinaryOperator.parse(":") is BinaryOperator.COLON
        with pytest.raises(MalformedExpressionError):
            BinaryOperator.parse("%")

    @pytest.mark.parametrize("text, expected", [
        ("3+4", (1, "+")),
        ("3*5+4", (3, "+")),
        ("37+5/4", (4, "/")),
        ("37+5//4", (4, "//")),
        ("102456:9", (6, ":")),
        ("-3-4", (2, "-")),
        ("***", (1, "*")),
        ("3", None),
        ("-3", None),
        ("", None),
    ])
    def test_find_rightmost(self, text, expected):
        assert BinaryOperator.find_rightmost_in(text) == expected


# =============================================================================
# Suggestion Tests
# =============================================================================

class TestSimilarNames:
    """Test did-you-mean helpers."""

    def test_edit_distance(self):
        assert edit_distance("PRIME", "PRIME") == 0
        assert edit_distance("PRIME", "PRIMES") == 1
        assert edit_distance("LDA", "LDX") == 1

    def test_similar_names(self):
        assert similar_names("PRIMES", ["PRIME", "START", "BUF0"]) == ["PRIME"]

    def test_exact_match_excluded(self):
        assert similar_names("LDA", ["LDA"]) == []
