"""
mixasm - MIXAL Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the MIXAL
assembler.

Usage Examples
--------------
Assemble and print the word dump:
    $ mixasm primes.mixal

With output file and symbol table:
    $ mixasm primes.mixal -o primes.mix -s primes.sym

With predefined symbols:
    $ mixasm -D PRINTER=18 -D BUF0=2000 program.mixal

Verbose mode (debug logging):
    $ mixasm -v primes.mixal

Output Format
-------------
One line per assembled word, then the entry point:

    3000 + 00 00 00 18 35
    3001 + 32 02 00 05 09
    ...
    END  3000
"""

import logging
from pathlib import Path
from typing import Optional

import click

from mixal import __version__
from mixal.assembler import Assembler
from mixal.cli.errors import handle_cli_exception
from mixal.errors import MixError


def parse_define(definition: str) -> tuple[str, int]:
    """
    Parse a -D argument: NAME=VALUE, or NAME alone for 1.

    Raises:
        click.BadParameter: If VALUE is not a decimal integer
    """
    if "=" not in definition:
        return definition.strip(), 1
    name, value_str = definition.split("=", 1)
    try:
        value = int(value_str.strip())
    except ValueError:
        raise click.BadParameter(
            f"invalid value in '{definition}' (expected NAME=VALUE)",
            param_hint="'-D'",
        ) from None
    return name.strip(), value


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output word dump (default: stdout)",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-D", "--define",
    multiple=True,
    help="Define symbol (format: NAME=VALUE)",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=100,
    show_default=True,
    help="Stop after this many errors",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="mixasm")
def main(
    input_file: Path,
    output: Optional[Path],
    symbols: Optional[Path],
    define: tuple[str, ...],
    max_errors: int,
    verbose: bool,
) -> None:
    """
    Assemble a MIXAL program.

    INPUT_FILE is the MIXAL source file to assemble.

    The assembler prints one line per word (location, sign and five
    bytes) followed by the entry point, or writes them to --output.

    \b
    Examples:
        mixasm primes.mixal                 # Print the words
        mixasm primes.mixal -o primes.mix   # Write them to a file
        mixasm -D PRINTER=18 prog.mixal     # Define symbol
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        asm = Assembler(max_errors=max_errors)
        for definition in define:
            name, value = parse_define(definition)
            try:
                asm.define_symbol(name, value)
            except MixError as e:
                raise click.BadParameter(str(e), param_hint="'-D'") from e

        if verbose:
            click.echo(f"Assembling {input_file}...", err=True)

        result = asm.assemble_file(input_file)

        for warning in result.warnings:
            click.echo(f"warning: {warning}", err=True)

        if output:
            asm.write_words(output)
            if verbose:
                click.echo(f"Wrote {len(result.words)} words to {output}", err=True)
        else:
            click.echo(asm.format_words())

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}", err=True)

        if verbose:
            click.echo(
                f"Assembly complete: {len(result.words)} words, "
                f"entry point {result.entry_point:04d}, "
                f"{len(result.symbols)} symbols",
                err=True,
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
