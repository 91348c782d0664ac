"""
MIXAL Statement Parser
======================

This module turns MIXAL source lines into Statement objects for the code
generator.

Line Format
-----------
Each line has up to four whitespace-separated fields:

    LOC     OP      OPERAND         remarks
    START   LDA     BUF0+5,1(1:3)   load the thing

- A line starting with ``*`` is a comment; blank lines are skipped.
- LOC is present if and only if the line does not start with whitespace.
- OP is a pseudo-operation (EQU, ORIG, CON, ALF, END) or an instruction
  mnemonic.
- OPERAND ends at the first whitespace. Everything after it is a remark.

ALF is the exception: its operand is character data that may contain
blanks, so it is taken verbatim from the text after ``ALF``.

Statement Types
---------------
1. **Instruction**: a MIX instruction with its Address part
   ```
           LDA  2000,2(0:3)
   ```

2. **Directive**: EQU, ORIG, CON or END with a W-value operand
   ```
   BUF1    EQU  BUF0+25
           CON  1(1:1),2(2:2)
   ```

3. **AlfDirective**: five characters of text
   ```
   TITLE   ALF  FIRST
   ```

Address Part
------------
The operand of an instruction is ``[sign]A[,I][(F)]``. The field is
located first (the first ``(``), then the index (a ``,`` before it),
and what remains is the base address. A base written ``=W=`` is a
literal constant; its index and field follow the closing ``=``.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from mixal.errors import (
    AssemblerError,
    AssemblyFailedError,
    AssemblySyntaxError,
    DirectiveError,
    ErrorCollector,
    InvalidCharacterDataError,
    InvalidOperandError,
    InvalidSymbolError,
    MissingOperationError,
    SourceLocation,
    UnrecognizedMnemonicError,
)
from mixal.machine.word import MachineWord, Sign
from mixal.machine.charset import ALF_ALPHABET, encode_text
from mixal.machine.opcodes import (
    InstructionInfo,
    MNEMONICS,
    PSEUDO_OPERATIONS,
    get_instruction_info,
)
from mixal.assembler.symbols import Symbol, similar_names
from mixal.assembler.expressions import Expression
from mixal.assembler.fields import Field, find_field_or_default
from mixal.assembler.wval import WValue, LiteralConstant
from mixal.assembler.context import AssemblyContext

logger = logging.getLogger(__name__)


# =============================================================================
# Address Part
# =============================================================================

@dataclass(frozen=True)
class Address:
    """
    The operand of a MIX instruction.

    Attributes:
        sign: Explicit leading sign (POSITIVE when omitted)
        base: Base address expression, or a literal constant
        index: Index register expression (0 when omitted)
        field: Field specification (the mnemonic's default when omitted)
    """
    sign: Sign
    base: Union[Expression, LiteralConstant]
    index: Expression
    field: Field

    @classmethod
    def parse(cls, text: str, default_field: str) -> "Address":
        """
        Parse ``[sign]base[,index][(field)]``.

        Raises:
            MalformedExpressionError: A part is not a valid expression
            InvalidOperandError: A malformed literal constant
        """
        sign = Sign.POSITIVE
        rest = text
        if rest.startswith("-"):
            sign, rest = Sign.NEGATIVE, rest[1:]
        elif rest.startswith("+"):
            rest = rest[1:]

        if LiteralConstant.is_literal(rest):
            close = rest.find("=", 1)
            if close < 0:
                raise InvalidOperandError(f"literal constant '{rest}' has no closing '='")
            base = LiteralConstant.parse(rest[:close + 1])
            rest = rest[close + 1:]
            field, field_pos = find_field_or_default(rest, default_field)
            before_field = rest[:field_pos]
            if before_field and not before_field.startswith(","):
                raise InvalidOperandError(
                    f"unexpected '{before_field}' after literal constant"
                )
            index = cls._parse_index(before_field[1:] if before_field else None)
            return cls(sign, base, index, field)

        field, field_pos = find_field_or_default(rest, default_field)
        comma = rest.find(",", 0, field_pos)
        if comma >= 0:
            index = cls._parse_index(rest[comma + 1:field_pos])
            base_text = rest[:comma]
        else:
            index = cls._parse_index(None)
            base_text = rest[:field_pos]

        base = Expression.parse(base_text) if base_text else Expression.number(0)
        return cls(sign, base, index, field)

    @staticmethod
    def _parse_index(text: Optional[str]) -> Expression:
        if text is None:
            return Expression.number(0)
        return Expression.parse(text)

    @property
    def literal(self) -> Optional[LiteralConstant]:
        return self.base if isinstance(self.base, LiteralConstant) else None

    def evaluate(
        self,
        context: AssemblyContext,
        literal_address: Optional[int] = None,
    ) -> MachineWord:
        """
        Evaluate the signed address value A.

        Args:
            context: Evaluation context
            literal_address: Address of the literal slot, when the base
                is a literal constant
        """
        if isinstance(self.base, LiteralConstant):
            if literal_address is None:
                raise DirectiveError("literal constant has no slot address yet")
            value = MachineWord.from_magnitude(literal_address)
        else:
            value = self.base.evaluate(context)
        if self.sign is Sign.NEGATIVE:
            value = value.negate()
        return value

    def __str__(self) -> str:
        sign = "-" if self.sign is Sign.NEGATIVE else ""
        return f"{sign}{self.base},{self.index}{self.field}"


# =============================================================================
# Operations
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    A MIX machine instruction.

    Attributes:
        mnemonic: The OP field as written
        info: Operation code and default field for the mnemonic
        address: The parsed operand
    """
    mnemonic: str
    info: InstructionInfo
    address: Address

    @classmethod
    def try_parse(cls, mnemonic: str, operand: str) -> Optional["Instruction"]:
        """
        Parse an instruction.

        Returns:
            The instruction, or None if mnemonic is not an instruction

        Raises:
            InvalidOperandError: The mnemonic is known but the operand is
                not a valid address part
        """
        info = get_instruction_info(mnemonic)
        if info is None:
            return None
        try:
            address = Address.parse(operand, info.default_field)
        except AssemblySyntaxError as e:
            raise InvalidOperandError(
                f"invalid operand '{operand}' for {mnemonic}: {e.message}",
                hint=e.hint,
            ) from e
        return cls(mnemonic, info, address)

    @property
    def literal(self) -> Optional[LiteralConstant]:
        return self.address.literal

    def assemble(
        self,
        context: AssemblyContext,
        literal_address: Optional[int] = None,
    ) -> MachineWord:
        """
        Pack the instruction word: sign, A (2 bytes), I, F, C.

        Raises:
            UndefinedSymbolError: The operand refers to an undefined symbol
            WordOverflowError: |A| >= 4096 or I outside 0-63
            InvalidFieldRangeError: F outside 0-63
        """
        address = self.address.evaluate(context, literal_address)
        index = self.address.index.evaluate(context).value
        field = self.address.field.evaluate(context)
        return MachineWord.instruction(address, index, field, self.info.opcode)


@dataclass(frozen=True)
class Directive:
    """
    EQU, ORIG, CON or END with its W-value operand.

    CON may also take a literal constant (``CON =5=``), which assembles
    the address of the literal's slot.
    """
    name: str
    operand: Union[WValue, LiteralConstant]

    # Pseudo-operations whose operand cannot be a literal constant
    NO_LITERALS = frozenset({"EQU", "ORIG", "END"})

    @classmethod
    def parse(cls, name: str, operand: str) -> "Directive":
        """
        Raises:
            MalformedExpressionError: Malformed W-value
            DirectiveError: A literal constant where none is allowed
        """
        if LiteralConstant.is_literal(operand):
            if name in cls.NO_LITERALS:
                raise DirectiveError(f"{name} cannot take a literal constant")
            return cls(name, LiteralConstant.parse(operand))
        return cls(name, WValue.parse(operand))

    @property
    def literal(self) -> Optional[LiteralConstant]:
        return self.operand if isinstance(self.operand, LiteralConstant) else None

    def evaluate(
        self,
        context: AssemblyContext,
        literal_address: Optional[int] = None,
    ) -> MachineWord:
        """Evaluate the operand (the slot address for a literal)."""
        if isinstance(self.operand, LiteralConstant):
            if literal_address is None:
                raise DirectiveError("literal constant has no slot address yet")
            return MachineWord.from_magnitude(literal_address)
        return self.operand.evaluate(context)


@dataclass(frozen=True)
class AlfDirective:
    """ALF: five MIX characters packed into one word."""
    characters: str

    @classmethod
    def parse(cls, data: str) -> "AlfDirective":
        """
        Parse ALF character data.

        The data is the text following ``ALF``: one or two blanks, then
        exactly five MIX characters. Anything after the five characters
        must be separated from them by a blank (a remark).

        Raises:
            InvalidCharacterDataError: Wrong blanks, length or characters
        """
        if data.startswith("  "):
            chars = data[2:]
        elif data.startswith(" "):
            chars = data[1:]
        else:
            raise InvalidCharacterDataError(
                "ALF character data must follow one or two blanks"
            )

        chars, remark = chars[:5], chars[5:]
        if len(chars) != 5 or (remark and not remark[0].isspace()):
            raise InvalidCharacterDataError(
                f"ALF takes exactly 5 characters, got '{chars + remark}'"
            )
        bad = [char for char in chars if char not in ALF_ALPHABET]
        if bad:
            raise InvalidCharacterDataError(
                f"'{bad[0]}' is not a MIX character",
                hint="ALF accepts A-Z, 0-9, blank and .,()+-*/=$<>@;:'",
            )
        return cls(chars)

    @property
    def literal(self) -> None:
        return None

    def assemble(self) -> MachineWord:
        return MachineWord.from_bytes(Sign.POSITIVE, *encode_text(self.characters))


Operation = Union[Instruction, Directive, AlfDirective]


# =============================================================================
# Statements
# =============================================================================

@dataclass
class Statement:
    """
    One parsed source line.

    Attributes:
        location: Source file and line
        source_line: The original text, for error messages
        label: The LOC symbol, if any
        operation: What the line does
    """
    location: SourceLocation
    source_line: str
    label: Optional[Symbol]
    operation: Operation

    @property
    def op_name(self) -> str:
        if isinstance(self.operation, Instruction):
            return self.operation.mnemonic
        if isinstance(self.operation, Directive):
            return self.operation.name
        return "ALF"

    @property
    def emits_word(self) -> bool:
        """True for statements that occupy a memory word."""
        return self.op_name not in ("EQU", "ORIG", "END")

    @property
    def literal(self) -> Optional[LiteralConstant]:
        return self.operation.literal


_WHITESPACE = re.compile(r"\s")


def split_fields(text: str) -> tuple[Optional[str], str, str]:
    """
    Split a line into (LOC, OP, rest).

    rest is everything after OP, untouched, so ALF can see its blanks.
    OP is empty for a LOC with nothing after it.
    """
    label = None
    body = text
    if not text[:1].isspace():
        match = _WHITESPACE.search(text)
        if match is None:
            return text, "", ""
        label, body = text[:match.start()], text[match.start():]

    body = body.lstrip()
    match = _WHITESPACE.search(body)
    if match is None:
        return label, body, ""
    return label, body[:match.start()], body[match.start():]


def is_comment(text: str) -> bool:
    """Blank lines and lines starting with '*' produce no statement."""
    return not text.strip() or text.startswith("*")


def parse_line(text: str, location: SourceLocation) -> Optional[Statement]:
    """
    Parse one source line.

    Returns:
        The statement, or None for comments and blank lines

    Raises:
        AssemblerError: Any syntax error, with location attached
    """
    text = text.rstrip("\r\n")
    if is_comment(text):
        return None

    label_text, op, rest = split_fields(text)

    try:
        label = None
        if label_text is not None:
            if not op:
                raise MissingOperationError(
                    f"LOC field '{label_text}' has no OP field after it"
                )
            label = Symbol.parse(label_text)
            if label.is_backward_reference or label.is_forward_reference:
                raise InvalidSymbolError(
                    f"'{label}' cannot be a label",
                    hint=f"local labels are written '{label.local_digit}H'",
                )

        if op == "ALF":
            operation = AlfDirective.parse(rest)
        else:
            operand = rest.split()[0] if rest.strip() else ""
            if op in PSEUDO_OPERATIONS:
                operation = Directive.parse(op, operand)
            else:
                operation = Instruction.try_parse(op, operand)
                if operation is None:
                    raise UnrecognizedMnemonicError(
                        op,
                        similar_mnemonics=similar_names(op, MNEMONICS | PSEUDO_OPERATIONS),
                    )
    except AssemblerError as e:
        e.at(location, text)
        raise

    return Statement(location, text, label, operation)


# =============================================================================
# Parser
# =============================================================================

class Parser:
    """
    Parses MIXAL source lines into statements.

    Errors are collected per line so that one run reports every bad
    line. Parsing stops at the END line; anything after it is ignored
    with a warning.

    Usage:
        errors = ErrorCollector()
        parser = Parser("primes.mixal", errors)
        statements = parser.parse(lines)
    """

    def __init__(self, filename: str = "<input>", errors: Optional[ErrorCollector] = None):
        self._filename = filename
        self._errors = errors if errors is not None else ErrorCollector()

    def parse(self, lines: Iterable[str]) -> list[Statement]:
        """
        Parse all lines.

        Returns:
            Statements in source order, up to and including END

        Raises:
            TooManyErrors: If the error limit is reached
        """
        statements: list[Statement] = []
        ignored = 0
        end_line = None

        for line_number, text in enumerate(lines, start=1):
            if end_line is not None:
                if not is_comment(text.rstrip("\r\n")):
                    ignored += 1
                continue

            location = SourceLocation(self._filename, line_number)
            try:
                stmt = parse_line(text, location)
            except AssemblerError as e:
                self._errors.add(e)
                stmt = None
            if stmt is not None:
                statements.append(stmt)

            if not is_comment(text) and split_fields(text.rstrip("\r\n"))[1] == "END":
                end_line = line_number

        if ignored:
            self._errors.add_warning(
                f"{self._filename}:{end_line}: ignoring {ignored} "
                f"line{'s' if ignored != 1 else ''} after END"
            )

        logger.debug("Parsed %d statements from %s", len(statements), self._filename)
        return statements


def parse_source(source: str, filename: str = "<input>") -> list[Statement]:
    """
    Convenience function to parse MIXAL source text.

    Raises:
        AssemblyFailedError: If any line has a syntax error
    """
    errors = ErrorCollector()
    statements = Parser(filename, errors).parse(source.splitlines())
    if errors.has_errors():
        raise AssemblyFailedError(errors)
    return statements
