"""Textual dumps of machine state for debugging and tests."""

import numpy as np

from chipjax.state import EmulatorState
from chipjax.decode import lookup
from chipjax.constants import SCREEN_WIDTH, PROGRAM_START

PIXEL_OFF = "□"
PIXEL_ON = "■"


def memory_dump(state: EmulatorState, bytes_per_line: int = 16) -> str:
    """Hex dump of the whole memory, two hex digits per cell."""
    memory = np.asarray(state.memory, dtype=np.uint8)
    lines = []
    for start in range(0, len(memory), bytes_per_line):
        lines.append(" ".join(f"{cell:02X}" for cell in memory[start:start + bytes_per_line]))
    return "\n".join(lines)


def display_dump(state: EmulatorState, on: str = PIXEL_ON, off: str = PIXEL_OFF) -> str:
    """One glyph per pixel, a line per 64 cells."""
    display = np.asarray(state.display)
    lines = []
    for start in range(0, len(display), SCREEN_WIDTH):
        lines.append("".join(on if pixel else off for pixel in display[start:start + SCREEN_WIDTH]))
    return "\n".join(lines)


def disassemble(opcode: int) -> str:
    """Mnemonic of an opcode according to the instruction table."""
    return lookup(opcode).mnemonic


def disassemble_program(state: EmulatorState, length: int, start: int = PROGRAM_START) -> list[str]:
    """Listing of ``length`` bytes of memory read as consecutive opcodes."""
    memory = np.asarray(state.memory, dtype=np.uint8)
    listing = []
    for address in range(start, start + length - 1, 2):
        opcode = (int(memory[address]) << 8) | int(memory[address + 1])
        listing.append(f"{address:03X}: {opcode:04X}  {disassemble(opcode)}")
    return listing
