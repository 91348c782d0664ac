#!/usr/bin/env python3
"""
MIXAL Assembler Demo
====================

This script demonstrates how to use the mixal package to:
1. Assemble a MIXAL source file
2. Inspect the assembled words and the symbol table
3. Write the word dump and symbol file
4. Report assembly errors

Usage:
    pip install -e .
    python examples/assemble_primes.py
"""

from pathlib import Path

from mixal import Assembler, AssemblyFailedError


def main():
    here = Path(__file__).parent
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)

    # ==========================================================================
    # 1. Assemble Program P (table of primes, TAOCP 1.3.2)
    # ==========================================================================
    print("Assembling primes.mixal...")
    asm = Assembler()
    result = asm.assemble_file(here / "primes.mixal")

    print(f"  Words: {len(result.words)}")
    print(f"  Entry point: {result.entry_point:04d}")

    # ==========================================================================
    # 2. Inspect the output
    # ==========================================================================
    # Words come in emission order; literal constants are placed last
    print("\nFirst instructions:")
    for w in result.words[:5]:
        print(f"  {w.address:04d} {w.word}   line {w.location.line}")

    print("\nSymbols:")
    for name, value in sorted(result.symbols.items()):
        print(f"  {name:<10} {value}")

    # ==========================================================================
    # 3. Write the word dump and symbol table
    # ==========================================================================
    asm.write_words(output_dir / "primes.mix")
    asm.write_symbols(output_dir / "primes.sym")
    print(f"\nWrote {output_dir / 'primes.mix'} and {output_dir / 'primes.sym'}")

    # ==========================================================================
    # 4. Errors are collected and reported together
    # ==========================================================================
    broken = """\
START   LDA  BUFFER
        JMP  STRAT
        LDQ  5
        END  START
"""
    try:
        Assembler().assemble_string(broken, "broken.mixal")
    except AssemblyFailedError as e:
        print(f"\nbroken.mixal failed with {len(e.errors)} error(s):")
        print(e)


if __name__ == "__main__":
    main()
