"""
Shared fixtures for the 6502 test suite.
"""

import pytest

from m6502 import CPU, Memory


@pytest.fixture
def mem():
    """Fresh 64KB memory."""
    return Memory()


@pytest.fixture
def cpu(mem):
    """CPU reset with PC at $FFFC and memory cleared."""
    cpu = CPU()
    cpu.reset(mem)
    return cpu
