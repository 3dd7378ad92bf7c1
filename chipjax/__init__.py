"""CHIP-8 emulator package."""

from chipjax.state import (
    EmulatorState, StackState, create_state, set_key, set_keys, acknowledge_redraw, framebuffer, read_memory
)
from chipjax.emulator import execute, step, fetch, tick_timers, run_n_instruction, write_program, load_rom
from chipjax.decode import DecodedInstruction, Instruction, INSTRUCTION_TABLE, UNKNOWN_INDEX, decode, lookup
from chipjax.errors import EmulatorError, StackOverflowError, StackUnderflowError, MemoryAccessError
from chipjax.debug import memory_dump, display_dump, disassemble
from chipjax.machine import Chip8
from chipjax.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "set_key",
    "set_keys",
    "acknowledge_redraw",
    "framebuffer",
    "read_memory",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "run_n_instruction",
    "write_program",
    "load_rom",
    "DecodedInstruction",
    "Instruction",
    "INSTRUCTION_TABLE",
    "UNKNOWN_INDEX",
    "decode",
    "lookup",
    "EmulatorError",
    "StackOverflowError",
    "StackUnderflowError",
    "MemoryAccessError",
    "memory_dump",
    "display_dump",
    "disassemble",
    "Chip8",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
