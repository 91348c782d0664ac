"""
MIX Instruction Set Definition
==============================

This module defines the MIX instruction set: every MIXAL mnemonic with
its operation code (C) and default field specification (F).

Many MIX instructions share an operation code and are told apart by the
F field. JMP, JOV, JL and friends are all C=39 with F=0..9. For those
the default field is the distinguishing value. For memory-reference
instructions it is the full word, (0:5).

Default fields are stored as MIXAL expression text ("0:5", "6") so
the assembler parses them through the same Field machinery as a field
written in the source.

Register Families
-----------------
Several groups repeat the same pattern once per register:

| Group       | Registers       | C            | F             |
|-------------|-----------------|--------------|---------------|
| LDr / LDrN  | A, 1-6, X       | 8-15 / 16-23 | (0:5)         |
| STr         | A, 1-6, X       | 24-31        | (0:5)         |
| Jr...       | A, 1-6, X       | 40-47        | N Z P NN NZ NP|
| INCr...     | A, 1-6, X       | 48-55        | INC DEC ENT ENN |
| CMPr        | A, 1-6, X       | 56-63        | (0:5)         |

The floating-point (FADD, FLOT, FIX...) and binary (SLB, SRB, JAE, JAO,
JXE, JXO) extensions from later printings of TAOCP Volume 1 are
included.

Reference
---------
- Knuth, The Art of Computer Programming, Vol. 1, section 1.3.1
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Encoding information for one mnemonic.

    Attributes:
        opcode: Operation code byte C (0-63)
        default_field: Field expression used when the source omits (F)
    """
    opcode: int
    default_field: str

    def __repr__(self) -> str:
        return f"InstructionInfo(opcode={self.opcode}, default_field='{self.default_field}')"


# Register suffixes in operation-code order
_REGISTERS = ("A", "1", "2", "3", "4", "5", "6", "X")

# Conditional jump suffixes for C=40-47, in field order
_REGISTER_JUMPS = ("N", "Z", "P", "NN", "NZ", "NP")

# Address transfer operations for C=48-55, in field order
_ADDRESS_TRANSFERS = ("INC", "DEC", "ENT", "ENN")


def _register_family() -> dict[str, InstructionInfo]:
    """Build the per-register entries (LDr, LDrN, STr, Jr*, INCr..., CMPr)."""
    table: dict[str, InstructionInfo] = {}
    for offset, reg in enumerate(_REGISTERS):
        table[f"LD{reg}"] = InstructionInfo(8 + offset, "0:5")
        table[f"LD{reg}N"] = InstructionInfo(16 + offset, "0:5")
        table[f"ST{reg}"] = InstructionInfo(24 + offset, "0:5")
        table[f"CMP{reg}"] = InstructionInfo(56 + offset, "0:5")
        for field, condition in enumerate(_REGISTER_JUMPS):
            table[f"J{reg}{condition}"] = InstructionInfo(40 + offset, str(field))
        for field, operation in enumerate(_ADDRESS_TRANSFERS):
            table[f"{operation}{reg}"] = InstructionInfo(48 + offset, str(field))
    return table


# =============================================================================
# Opcode Table
# =============================================================================
# Key: mnemonic
# Value: InstructionInfo(opcode, default_field)
# =============================================================================

OPCODE_TABLE: dict[str, InstructionInfo] = {
    # =========================================================================
    # Arithmetic (C=0-4)
    # =========================================================================
    "NOP": InstructionInfo(0, "0:5"),
    "ADD": InstructionInfo(1, "0:5"),
    "FADD": InstructionInfo(1, "6"),
    "SUB": InstructionInfo(2, "0:5"),
    "FSUB": InstructionInfo(2, "6"),
    "MUL": InstructionInfo(3, "0:5"),
    "FMUL": InstructionInfo(3, "6"),
    "DIV": InstructionInfo(4, "0:5"),
    "FDIV": InstructionInfo(4, "6"),

    # =========================================================================
    # Special (C=5)
    # =========================================================================
    "NUM": InstructionInfo(5, "0"),
    "CHAR": InstructionInfo(5, "1"),
    "HLT": InstructionInfo(5, "2"),
    "FLOT": InstructionInfo(5, "6"),
    "FIX": InstructionInfo(5, "7"),

    # =========================================================================
    # Shifts (C=6) and MOVE (C=7)
    # =========================================================================
    "SLA": InstructionInfo(6, "0"),
    "SRA": InstructionInfo(6, "1"),
    "SLAX": InstructionInfo(6, "2"),
    "SRAX": InstructionInfo(6, "3"),
    "SLC": InstructionInfo(6, "4"),
    "SRC": InstructionInfo(6, "5"),
    "SLB": InstructionInfo(6, "6"),
    "SRB": InstructionInfo(6, "7"),
    "MOVE": InstructionInfo(7, "1"),

    # =========================================================================
    # STJ and STZ (C=32-33); STJ stores only the address bytes
    # =========================================================================
    "STJ": InstructionInfo(32, "0:2"),
    "STZ": InstructionInfo(33, "0:5"),

    # =========================================================================
    # Input/output (C=34-38); F is the unit number
    # =========================================================================
    "JBUS": InstructionInfo(34, "0"),
    "IOC": InstructionInfo(35, "0"),
    "IN": InstructionInfo(36, "0"),
    "OUT": InstructionInfo(37, "0"),
    "JRED": InstructionInfo(38, "0"),

    # =========================================================================
    # Jumps (C=39)
    # =========================================================================
    "JMP": InstructionInfo(39, "0"),
    "JSJ": InstructionInfo(39, "1"),
    "JOV": InstructionInfo(39, "2"),
    "JNOV": InstructionInfo(39, "3"),
    "JL": InstructionInfo(39, "4"),
    "JE": InstructionInfo(39, "5"),
    "JG": InstructionInfo(39, "6"),
    "JGE": InstructionInfo(39, "7"),
    "JNE": InstructionInfo(39, "8"),
    "JLE": InstructionInfo(39, "9"),

    # =========================================================================
    # Register families (LDr, LDrN, STr, Jr*, INCr/DECr/ENTr/ENNr, CMPr)
    # =========================================================================
    **_register_family(),

    # Binary-extension parity jumps for rA and rX
    "JAE": InstructionInfo(40, "6"),
    "JAO": InstructionInfo(40, "7"),
    "JXE": InstructionInfo(47, "6"),
    "JXO": InstructionInfo(47, "7"),

    # Floating-point comparison
    "FCMP": InstructionInfo(56, "6"),
}


# =============================================================================
# Instruction Set Reference Lists
# =============================================================================

MNEMONICS = frozenset(OPCODE_TABLE)

# Pseudo-operations handled by the assembler itself
PSEUDO_OPERATIONS = frozenset({"EQU", "ORIG", "CON", "ALF", "END"})


# =============================================================================
# Lookup Functions
# =============================================================================

def get_instruction_info(mnemonic: str) -> Optional[InstructionInfo]:
    """
    Look up instruction information by mnemonic.

    Mnemonics are case-sensitive: MIXAL source is upper case.

    Returns:
        InstructionInfo if found, None otherwise
    """
    return OPCODE_TABLE.get(mnemonic)


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is a MIX machine instruction."""
    return mnemonic in MNEMONICS


def is_pseudo_operation(mnemonic: str) -> bool:
    """Check if a mnemonic is a MIXAL pseudo-operation."""
    return mnemonic in PSEUDO_OPERATIONS
