"""
MIX Machine Package
===================

Definitions of the MIX computer shared by the assembler and its tests:

    word:     MachineWord, Sign and the memory/byte constants
    charset:  MIX character codes (for ALF)
    opcodes:  mnemonic -> (operation code, default field) table

Usage:
    from mixal.machine import MachineWord, Sign, OPCODE_TABLE
"""

from mixal.machine.word import (
    BYTE_SIZE,
    BYTES_PER_WORD,
    WORD_MODULUS,
    MAX_MAGNITUDE,
    MEMORY_SIZE,
    ADDRESS_LIMIT,
    Sign,
    MachineWord,
)
from mixal.machine.charset import (
    MIX_CHARACTERS,
    ALF_ALPHABET,
    is_mix_character,
    char_code,
    encode_text,
)
from mixal.machine.opcodes import (
    InstructionInfo,
    OPCODE_TABLE,
    MNEMONICS,
    PSEUDO_OPERATIONS,
    get_instruction_info,
    is_valid_instruction,
    is_pseudo_operation,
)

__all__ = [
    # Words
    "BYTE_SIZE",
    "BYTES_PER_WORD",
    "WORD_MODULUS",
    "MAX_MAGNITUDE",
    "MEMORY_SIZE",
    "ADDRESS_LIMIT",
    "Sign",
    "MachineWord",
    # Characters
    "MIX_CHARACTERS",
    "ALF_ALPHABET",
    "is_mix_character",
    "char_code",
    "encode_text",
    # Opcodes
    "InstructionInfo",
    "OPCODE_TABLE",
    "MNEMONICS",
    "PSEUDO_OPERATIONS",
    "get_instruction_info",
    "is_valid_instruction",
    "is_pseudo_operation",
]
