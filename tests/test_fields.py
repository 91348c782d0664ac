# =============================================================================
# test_fields.py - Field, Address and W-Value Unit Tests
# =============================================================================
# Tests for the operand forms that wrap expressions.
#
# Test coverage includes:
#   - Field specifications (E) as bytes and as (L:R) ranges
#   - Address parts [sign]A[,I][(F)], including literal bases
#   - W-values E(F),E(F),... with STA-style composition
#   - Literal constants =W=
#   - The opcode table
# =============================================================================

import pytest

from mixal.errors import (
    DirectiveError,
    InvalidFieldRangeError,
    InvalidOperandError,
    MalformedExpressionError,
)
from mixal.machine import (
    Sign,
    OPCODE_TABLE,
    get_instruction_info,
    is_pseudo_operation,
    is_valid_instruction,
)
from mixal.assembler.expressions import Expression
from mixal.assembler.fields import Field, find_field_or_default, FULL_WORD
from mixal.assembler.wval import WValue, LiteralConstant
from mixal.assembler.context import AssemblyContext, SymbolTable
from mixal.assembler.parser import Address, Instruction


# =============================================================================
# Helper Functions
# =============================================================================

def context(symbols: dict = None, location: int = 0) -> AssemblyContext:
    return AssemblyContext(SymbolTable.from_dict(symbols or {}), location)


def wvalue(text: str, symbols: dict = None):
    return WValue.parse(text).evaluate(context(symbols))


# =============================================================================
# Field Tests
# =============================================================================

class TestField:
    """Test field specifications."""

    def test_colon_form(self):
        field = Field.parse("(1:4)")
        assert field.evaluate(context()) == 12
        assert field.evaluate_range(context()) == (1, 4)

    def test_single_value_is_right_bound(self):
        assert Field.parse("(3)").evaluate_range(context()) == (0, 3)

    def test_default(self):
        assert Field.from_default(FULL_WORD).evaluate(context()) == 5

    def test_symbolic_field(self):
        assert Field.parse("(PRINTER)").evaluate(context({"PRINTER": 18})) == 18

    @pytest.mark.parametrize("text", ["", "(", "()", "1:4", "(1:4", "(()"])
    def test_malformed(self, text):
        with pytest.raises(MalformedExpressionError):
            Field.parse(text)

    def test_byte_out_of_range(self):
        with pytest.raises(InvalidFieldRangeError):
            Field.parse("(64)").evaluate(context())

    def test_range_left_after_right(self):
        with pytest.raises(InvalidFieldRangeError):
            Field.parse("(5:3)").evaluate_range(context())

    def test_range_past_byte_five(self):
        with pytest.raises(InvalidFieldRangeError):
            Field.parse("(6)").evaluate_range(context())

    def test_instruction_field_may_exceed_five(self):
        # JG and unit numbers use F as a plain byte
        assert Field.parse("(6)").evaluate(context()) == 6

    def test_str(self):
        assert str(Field.parse("(1:4)")) == "(1:4)"


class TestFindField:
    """Test splitting a field suffix off operand text."""

    def test_found(self):
        field, idx = find_field_or_default("3+4(1:1)", FULL_WORD)
        assert idx == 3
        assert field == Field.parse("(1:1)")

    def test_default_when_absent(self):
        field, idx = find_field_or_default("3+4", "2")
        assert idx == 3
        assert field == Field.from_default("2")


# =============================================================================
# Address Tests
# =============================================================================

class TestAddress:
    """Test the address part of an instruction."""

    def test_all_parts(self):
        address = Address.parse("2000,2(0:3)", FULL_WORD)
        assert address.sign is Sign.POSITIVE
        assert address.base == Expression.number(2000)
        assert address.index == Expression.number(2)
        assert address.field == Field.parse("(0:3)")

    def test_empty(self):
        address = Address.parse("", "2")
        assert address.base == Expression.number(0)
        assert address.index == Expression.number(0)
        assert address.field == Field.from_default("2")

    def test_leading_minus(self):
        address = Address.parse("-50", "2")
        assert address.sign is Sign.NEGATIVE
        assert address.evaluate(context()).value == -50

    def test_sign_applies_to_whole_base(self):
        assert Address.parse("-1+5", FULL_WORD).evaluate(context()).value == -6

    def test_minus_zero(self):
        word = Address.parse("-0", FULL_WORD).evaluate(context())
        assert word.sign is Sign.NEGATIVE

    def test_field_only(self):
        address = Address.parse("(1:3)", FULL_WORD)
        assert address.base == Expression.number(0)
        assert address.field == Field.parse("(1:3)")

    def test_index_only(self):
        assert Address.parse(",3", FULL_WORD).index == Expression.number(3)

    def test_literal_base(self):
        address = Address.parse("=5=,1(2)", FULL_WORD)
        assert address.literal == LiteralConstant.parse("=5=")
        assert address.index == Expression.number(1)
        assert address.field == Field.parse("(2)")
        assert address.evaluate(context(), literal_address=3100).value == 3100

    def test_literal_needs_slot_address(self):
        with pytest.raises(DirectiveError):
            Address.parse("=5=", FULL_WORD).evaluate(context())

    def test_junk_after_literal(self):
        with pytest.raises(InvalidOperandError):
            Address.parse("=5=X", FULL_WORD)

    def test_unterminated_literal(self):
        with pytest.raises(InvalidOperandError):
            Address.parse("=5", FULL_WORD)


# =============================================================================
# Instruction Tests
# =============================================================================

class TestInstruction:
    """Test instruction parsing and packing."""

    def test_unknown_mnemonic(self):
        assert Instruction.try_parse("FOO", "") is None

    def test_bad_operand(self):
        with pytest.raises(InvalidOperandError) as exc_info:
            Instruction.try_parse("LDA", "1+")
        assert isinstance(exc_info.value.__cause__, MalformedExpressionError)

    def test_default_field_applied(self):
        word = Instruction.try_parse("JG", "3000").assemble(context())
        assert str(word) == "+ 46 56 00 06 39"

    def test_explicit_field_overrides_default(self):
        word = Instruction.try_parse("LDA", "2000,2(0:3)").assemble(context())
        assert str(word) == "+ 31 16 02 03 08"

    def test_floating_point_default_field(self):
        word = Instruction.try_parse("FADD", "100").assemble(context())
        assert word.data[3:] == (6, 1)


# =============================================================================
# Opcode Table Tests
# =============================================================================

class TestOpcodeTable:
    """Spot checks of operation codes and default fields."""

    @pytest.mark.parametrize("mnemonic, opcode, default_field", [
        ("NOP", 0, "0:5"),
        ("LDA", 8, "0:5"),
        ("LDXN", 23, "0:5"),
        ("STJ", 32, "0:2"),
        ("IOC", 35, "0"),
        ("JG", 39, "6"),
        ("J5P", 45, "2"),
        ("JXE", 47, "6"),
        ("ENT5", 53, "2"),
        ("DEC4", 52, "1"),
        ("ENNX", 55, "3"),
        ("CMPX", 63, "0:5"),
        ("FCMP", 56, "6"),
        ("HLT", 5, "2"),
        ("MOVE", 7, "1"),
    ])
    def test_entry(self, mnemonic, opcode, default_field):
        info = get_instruction_info(mnemonic)
        assert info.opcode == opcode
        assert info.default_field == default_field

    def test_case_sensitive(self):
        assert get_instruction_info("lda") is None

    def test_every_opcode_fits_a_byte(self):
        assert all(0 <= info.opcode < 64 for info in OPCODE_TABLE.values())

    def test_pseudo_operations(self):
        assert is_pseudo_operation("ALF")
        assert not is_pseudo_operation("LDA")

    def test_valid_instructions(self):
        assert is_valid_instruction("JXE")
        assert not is_valid_instruction("ALF")
        assert not is_valid_instruction("jmp")


# =============================================================================
# W-Value Tests
# =============================================================================

class TestWValue:
    """Test W-value composition."""

    def test_single_expression(self):
        assert wvalue("BUF0+10", {"BUF0": 2000}).value == 2010

    def test_byte_fields(self):
        assert str(wvalue("1(1:1),2(2:2),3(3:3)")) == "+ 01 02 03 00 00"

    def test_sign_from_leftmost_field(self):
        assert str(wvalue("-1000(0:2),1(3:5)")) == "- 15 40 00 00 01"

    def test_later_components_overwrite(self):
        assert wvalue("5,7").value == 7

    def test_negative_value(self):
        word = wvalue("-499")
        assert word.sign is Sign.NEGATIVE
        assert word.magnitude == 499

    def test_empty(self):
        with pytest.raises(MalformedExpressionError):
            WValue.parse("")

    def test_field_without_expression(self):
        with pytest.raises(MalformedExpressionError):
            WValue.parse("(1:1)")

    def test_bad_field_range(self):
        with pytest.raises(InvalidFieldRangeError):
            wvalue("1(4:2)")

    def test_symbols(self):
        names = [s.name for s in WValue.parse("A(1:1),B(C)").symbols()]
        assert names == ["A", "B", "C"]

    def test_str(self):
        assert str(WValue.parse("1(1:1),2")) == "1(1:1),2(0:5)"


class TestLiteralConstant:
    """Test =W= parsing."""

    def test_parse(self):
        literal = LiteralConstant.parse("=1-L=")
        assert literal.wvalue == WValue.parse("1-L")
        assert str(literal) == "=1-L(0:5)="

    def test_nine_characters_allowed(self):
        LiteralConstant.parse("=123456789=")

    def test_too_long(self):
        with pytest.raises(InvalidOperandError):
            LiteralConstant.parse("=1234567890=")

    def test_empty(self):
        with pytest.raises(InvalidOperandError):
            LiteralConstant.parse("==")

    def test_missing_delimiter(self):
        with pytest.raises(InvalidOperandError):
            LiteralConstant.parse("=5")
