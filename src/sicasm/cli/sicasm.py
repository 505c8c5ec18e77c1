"""
sicasm - SIC Assembler Command-Line Interface
=============================================

This module implements the command-line interface for the two-pass SIC
assembler.

Usage Examples
--------------
Print the object program:
    $ sicasm prog.asm

With a custom opcode table:
    $ sicasm prog.asm -t optab.txt

Generate all output files:
    $ sicasm prog.asm -o prog.obj -l prog.lst -s prog.sym

Verbose mode:
    $ sicasm -v prog.asm
"""

from pathlib import Path
from typing import Optional
import logging

import click

from sicasm import __version__
from sicasm.assembler import Assembler
from sicasm.cli.errors import handle_cli_exception, handle_failure
from sicasm.config import AssemblerConfig

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-t", "--optab",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Opcode table file (default: built-in SIC instruction set)",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Object program file (default: print to stdout)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate intermediate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol table file",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Treat undefined and duplicate labels as errors",
)
@click.option(
    "--max-text-bytes",
    type=click.IntRange(min=3),
    default=None,
    help="Maximum object code bytes per text record (default: 30)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="sicasm")
def main(
    input_file: Path,
    optab: Optional[Path],
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    strict: bool,
    max_text_bytes: Optional[int],
    verbose: bool,
) -> None:
    """
    Assemble SIC source code with the two-pass algorithm.

    INPUT_FILE is the assembly source. Each line holds a label (or '-'),
    a mnemonic or directive, and an optional operand.

    \b
    Examples:
        sicasm prog.asm                  # Print object program
        sicasm prog.asm -o prog.obj      # Write object program
        sicasm prog.asm -t optab.txt     # Use a custom opcode table
        sicasm prog.asm -l prog.lst -s prog.sym
    """
    setup_logging(verbose)

    config = AssemblerConfig.from_env().with_overrides(
        strict_symbols=True if strict else None,
        max_text_bytes=max_text_bytes,
    )
    asm = Assembler(config=config)

    if verbose:
        click.echo(f"Assembling {input_file}...")
        click.echo(f"Opcode table: {optab or 'built-in SIC'}")
        if config.strict_symbols:
            click.echo("Strict symbol checking: enabled")

    result = asm.translate_files(input_file, optab)
    if not result.ok:
        handle_failure(result.failure)

    try:
        if output:
            asm.write_object(output)
            if verbose:
                click.echo(f"Wrote object program to {output}")
        else:
            for line in result.object_listing():
                click.echo(line)

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        for resolution in result.object_program.defaulted:
            logger.warning(f"undefined symbol '{resolution.name}' assembled as 0000")

        if verbose:
            header = result.object_program.header
            click.echo(f"Assembly complete: {header.length} bytes at {header.start:04X}")
            click.echo(f"Defined {len(result.symbols)} symbols")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
