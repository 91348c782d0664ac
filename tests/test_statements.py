# =============================================================================
# test_statements.py - Statement Parser Unit Tests
# =============================================================================
# Tests for turning MIXAL source lines into statements.
#
# Test coverage includes:
#   - Splitting lines into LOC, OP and operand
#   - Comments, blank lines and remarks
#   - Instructions, directives and ALF
#   - Error reporting with source locations
#   - Lines after END
# =============================================================================

import pytest

from mixal.errors import (
    AssemblyFailedError,
    DirectiveError,
    ErrorCollector,
    InvalidCharacterDataError,
    InvalidOperandError,
    InvalidSymbolError,
    MissingOperationError,
    SourceLocation,
    UnrecognizedMnemonicError,
)
from mixal.assembler.parser import (
    AlfDirective,
    Directive,
    Instruction,
    Parser,
    is_comment,
    parse_line,
    parse_source,
    split_fields,
)
from mixal.assembler.wval import LiteralConstant


# =============================================================================
# Helper Functions
# =============================================================================

LOCATION = SourceLocation("test.mixal", 7)


def parse(text: str):
    return parse_line(text, LOCATION)


# =============================================================================
# Field Splitting Tests
# =============================================================================

class TestSplitFields:
    """Test splitting a line into LOC, OP and the rest."""

    def test_with_label(self):
        assert split_fields("START  LDA  2000  load") == ("START", "LDA", "  2000  load")

    def test_without_label(self):
        assert split_fields("       HLT") == (None, "HLT", "")

    def test_tab_separated(self):
        assert split_fields("LOOP\tJMP\tLOOP") == ("LOOP", "JMP", "\tLOOP")

    def test_label_only(self):
        assert split_fields("LONELY") == ("LONELY", "", "")

    def test_comments(self):
        assert is_comment("* a comment")
        assert is_comment("")
        assert is_comment("    \t")
        assert not is_comment("  * not a comment")


# =============================================================================
# Line Parsing Tests
# =============================================================================

class TestParseLine:
    """Test parsing of individual lines."""

    def test_comment_gives_nothing(self):
        assert parse("* EXAMPLE PROGRAM") is None
        assert parse("") is None

    def test_instruction(self):
        stmt = parse("START   LDA  2000,2(0:3)   load the thing")
        assert stmt.label.name == "START"
        assert isinstance(stmt.operation, Instruction)
        assert stmt.op_name == "LDA"
        assert stmt.location == LOCATION
        assert stmt.emits_word

    def test_instruction_without_operand(self):
        stmt = parse("        HLT")
        assert stmt.label is None
        assert stmt.op_name == "HLT"

    def test_line_ending_stripped(self):
        assert parse("        HLT\r\n").source_line == "        HLT"

    def test_equ(self):
        stmt = parse("BUF1    EQU  BUF0+25")
        assert isinstance(stmt.operation, Directive)
        assert stmt.op_name == "EQU"
        assert not stmt.emits_word

    def test_con_literal(self):
        stmt = parse("        CON  =5=")
        assert stmt.literal == LiteralConstant.parse("=5=")
        assert stmt.emits_word

    def test_instruction_literal(self):
        assert parse("        LD1  =1-L=").literal == LiteralConstant.parse("=1-L=")

    def test_local_label(self):
        assert parse("2H      INC1 1").label.is_local_definition

    @pytest.mark.parametrize("op", ["EQU", "ORIG", "END"])
    def test_literal_rejected(self, op):
        with pytest.raises(DirectiveError):
            parse(f"X       {op}  =5=")

    def test_missing_operation(self):
        with pytest.raises(MissingOperationError) as exc_info:
            parse("LONELY")
        assert exc_info.value.location == LOCATION

    def test_backward_reference_as_label(self):
        with pytest.raises(InvalidSymbolError) as exc_info:
            parse("2B      NOP")
        assert exc_info.value.hint == "local labels are written '2H'"

    def test_unknown_mnemonic(self):
        with pytest.raises(UnrecognizedMnemonicError) as exc_info:
            parse("        CHARR 100")
        assert exc_info.value.similar_mnemonics[0] == "CHAR"
        assert exc_info.value.location == LOCATION
        assert exc_info.value.source_line == "        CHARR 100"

    def test_lower_case_mnemonic(self):
        with pytest.raises(UnrecognizedMnemonicError):
            parse("        lda  100")

    def test_bad_operand(self):
        with pytest.raises(InvalidOperandError):
            parse("        LDA  1+")

    def test_error_message_has_location(self):
        with pytest.raises(UnrecognizedMnemonicError) as exc_info:
            parse("        LDQ  100")
        assert str(exc_info.value).startswith("test.mixal:7: error:")


# =============================================================================
# ALF Tests
# =============================================================================

class TestAlf:
    """Test ALF character data."""

    def test_two_blanks(self):
        assert parse("TITLE   ALF  FIRST").operation == AlfDirective("FIRST")

    def test_one_blank(self):
        assert parse("        ALF HELLO").operation == AlfDirective("HELLO")

    def test_leading_blank_in_data(self):
        assert parse("        ALF   FIVE").operation == AlfDirective(" FIVE")

    def test_embedded_blank(self):
        assert parse("        ALF  RED P").operation == AlfDirective("RED P")

    def test_remark_after_data(self):
        stmt = parse("        ALF  RIMES   Alphanumeric title")
        assert stmt.operation == AlfDirective("RIMES")

    def test_assemble(self):
        assert str(AlfDirective("FIRST").assemble()) == "+ 06 09 19 22 23"

    def test_blank_required(self):
        with pytest.raises(InvalidCharacterDataError):
            AlfDirective.parse("HELLO")

    def test_too_long(self):
        with pytest.raises(InvalidCharacterDataError):
            AlfDirective.parse("  HELLOO")

    def test_too_short(self):
        with pytest.raises(InvalidCharacterDataError):
            AlfDirective.parse("  HI")

    def test_lower_case(self):
        with pytest.raises(InvalidCharacterDataError):
            AlfDirective.parse("  hello")

    def test_no_literal(self):
        assert AlfDirective("HELLO").literal is None


# =============================================================================
# Parser Tests
# =============================================================================

class TestParser:
    """Test whole-file parsing."""

    def test_collects_every_error(self):
        errors = ErrorCollector()
        statements = Parser("bad.mixal", errors).parse([
            "        LDQ  1",
            "        NOP",
            "        LDA  1+",
            "        END  0",
        ])
        assert len(statements) == 2
        assert errors.error_count() == 2
        assert [e.location.line for e in errors.errors] == [1, 3]

    def test_stops_after_end(self):
        errors = ErrorCollector()
        statements = Parser("prog.mixal", errors).parse([
            "        NOP",
            "        END  0",
            "* trailing comment",
            "        LDQ  garbage",
            "        HLT",
        ])
        assert [s.op_name for s in statements] == ["NOP", "END"]
        assert not errors.has_errors()
        assert errors.warnings == ["prog.mixal:2: ignoring 2 lines after END"]

    def test_line_numbers_count_comments(self):
        statements = parse_source("* header\n\n        NOP\n        END  0\n")
        assert statements[0].location.line == 3

    def test_parse_source_raises(self):
        with pytest.raises(AssemblyFailedError) as exc_info:
            parse_source("        LDQ  1\n        END  0\n")
        assert isinstance(exc_info.value.errors[0], UnrecognizedMnemonicError)
