"""
Machine Configuration
=====================

Configuration for a Machine (one CPU driving one Memory). Values can come
from:
- Default values (defined here)
- Environment variables (MachineConfig.from_env)
- Command-line options (the m6502run tool)

Addresses accept hex with a 0x or $ prefix, or plain decimal.
"""

from dataclasses import dataclass
import logging
import os

from m6502.cpu import DEFAULT_ENTRY

logger = logging.getLogger(__name__)


def parse_address(text: str) -> int:
    """
    Parse a 16-bit address.

    Accepts "0x1234", "$1234" or "4660".

    Raises:
        ValueError: If text is not a number or lies outside $0000-$FFFF
    """
    text = text.strip()
    if text.lower().startswith("0x"):
        value = int(text, 16)
    elif text.startswith("$"):
        value = int(text[1:], 16)
    else:
        value = int(text)

    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"address out of range: {text} (must be 0x0000-0xFFFF)")
    return value


@dataclass(frozen=True)
class MachineConfig:
    """
    Configuration for machine initialization.

    Attributes:
        entry_point: PC after reset (default $FFFC)
        load_address: Where program images are placed (default $0200)
        trace: Log every executed opcode at DEBUG level

    Example:
        >>> config = MachineConfig(entry_point=0x0200, load_address=0x0200)
    """
    entry_point: int = DEFAULT_ENTRY
    load_address: int = 0x0200
    trace: bool = False

    @classmethod
    def from_env(cls) -> "MachineConfig":
        """
        Create MachineConfig from environment variables.

        Environment variables (all optional):
            M6502_ENTRY: Entry point address
            M6502_LOAD_ADDRESS: Program load address
            M6502_TRACE: "1", "true", "yes" or "on" to enable tracing

        Invalid values are logged and ignored.
        """
        kwargs = {}

        for var, key in (("M6502_ENTRY", "entry_point"),
                         ("M6502_LOAD_ADDRESS", "load_address")):
            if raw := os.environ.get(var):
                try:
                    kwargs[key] = parse_address(raw)
                except ValueError:
                    logger.warning("Ignoring invalid %s=%r", var, raw)

        if trace := os.environ.get("M6502_TRACE"):
            kwargs["trace"] = trace.strip().lower() in ("1", "true", "yes", "on")

        return cls(**kwargs)
