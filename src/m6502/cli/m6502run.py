"""
m6502run - Run a 6502 Program Image
===================================

This module implements the command-line runner. It loads a raw binary
image into a fresh machine, executes it for a cycle budget and prints the
resulting registers, flags and (optionally) regions of memory.

Usage Examples
--------------
Run an image placed at $0200, starting there:
    $ m6502run prog.bin --address 0x0200 --entry 0x0200

Run for 10,000 cycles and trace every instruction:
    $ m6502run prog.bin --cycles 10000 --trace

Dump zero page after the run:
    $ m6502run prog.bin --dump 0x0000:256

Defaults for --address, --entry and tracing can also come from the
M6502_LOAD_ADDRESS, M6502_ENTRY and M6502_TRACE environment variables.
"""

import dataclasses
import logging
from pathlib import Path
from typing import Optional

import click

from m6502 import __version__
from m6502.cli.errors import handle_cli_exception
from m6502.config import MachineConfig, parse_address
from m6502.machine import Machine

logger = logging.getLogger(__name__)


# =============================================================================
# Option Parsing
# =============================================================================

def _address_option(ctx, param, value: Optional[str]) -> Optional[int]:
    """Click callback: parse a 16-bit address."""
    if value is None:
        return None
    try:
        return parse_address(value)
    except ValueError:
        raise click.BadParameter(f"invalid address '{value}'")


def _dump_option(ctx, param, values: tuple[str, ...]) -> list[tuple[int, int]]:
    """Click callback: parse START:LEN memory ranges."""
    ranges = []
    for value in values:
        start, sep, length = value.partition(":")
        try:
            if not sep:
                raise ValueError(value)
            ranges.append((parse_address(start), int(length, 0)))
        except ValueError:
            raise click.BadParameter(f"invalid range '{value}' (expected START:LEN)")
    return ranges


def format_dump(data: bytes, start: int) -> list[str]:
    """Format bytes as 16-per-line hex with an ASCII column."""
    lines = []
    for i in range(0, len(data), 16):
        chunk = data[i:i + 16]
        hex_str = " ".join(f"{b:02X}" for b in chunk)
        ascii_str = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append(f"${(start + i) & 0xFFFF:04X}: {hex_str:<48} {ascii_str}")
    return lines


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "image",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-a", "--address",
    callback=_address_option,
    help="Load address (hex with 0x or $ prefix, or decimal). Default: $0200",
)
@click.option(
    "-e", "--entry",
    callback=_address_option,
    help="Entry point (PC after reset). Default: $FFFC",
)
@click.option(
    "-c", "--cycles",
    type=int,
    default=1000,
    show_default=True,
    help="Cycle budget",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Log every executed instruction",
)
@click.option(
    "-d", "--dump",
    multiple=True,
    callback=_dump_option,
    help="Dump memory after the run, as START:LEN (repeatable)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="m6502run")
def main(
    image: Path,
    address: Optional[int],
    entry: Optional[int],
    cycles: int,
    trace: bool,
    dump: list[tuple[int, int]],
    verbose: bool,
) -> None:
    """
    Run a raw 6502 binary IMAGE for a number of cycles.

    The machine is reset (memory cleared, PC at the entry point), the image
    is loaded, and execution runs until the cycle budget is used up. The
    final register state is printed.

    Examples:

        m6502run prog.bin -a 0x0200 -e 0x0200 -c 50

        m6502run prog.bin --dump 0x0000:32
    """
    logging.basicConfig(
        level=logging.DEBUG if (verbose or trace) else logging.WARNING,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )

    config = MachineConfig.from_env()
    overrides = {}
    if address is not None:
        overrides["load_address"] = address
    if entry is not None:
        overrides["entry_point"] = entry
    if trace:
        overrides["trace"] = True
    config = dataclasses.replace(config, **overrides)

    try:
        machine = Machine(config)
        machine.reset()
        machine.load_file(image)
        used = machine.run(cycles)
    except Exception as e:
        handle_cli_exception(e, verbose)

    regs = machine.registers()
    click.echo(f"Cycles: {used} (requested {cycles})")
    click.echo(
        f"PC=${regs['PC']:04X} SP=${regs['SP']:02X} "
        f"A=${regs['A']:02X} X=${regs['X']:02X} Y=${regs['Y']:02X} "
        f"P=${regs['P']:02X} [{regs['flags']}]"
    )

    for start, length in dump:
        click.echo("")
        for line in format_dump(machine.memory.dump(start, length), start):
            click.echo(line)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
