"""Main CHIP-8 emulator execution engine."""

import jax
import jax.lax
import jax.numpy as jnp

from chipjax.state import EmulatorState
from chipjax.decode import decode, INSTRUCTION_TABLE
from chipjax.constants import PROGRAM_START, MAX_PROGRAM_SIZE
from chipjax.errors import checked, MemoryAccessError
from chipjax.instructions.system import no_op, execute_clear_screen, execute_return, execute_unknown
from chipjax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset
)
from chipjax.instructions.input import execute_skip_if_key, execute_skip_if_not_key, execute_wait_for_key
from chipjax.instructions import alu
from chipjax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random, check_memory_range
from chipjax.instructions.display import execute_display
from chipjax.instructions.misc import (
    execute_get_delay_timer, execute_set_delay_timer, execute_set_sound_timer, execute_add_to_index,
    execute_font_character, execute_bcd_conversion, execute_store_registers, execute_load_registers
)
from chipjax.logging import logger

HANDLERS = {
    "CLS": execute_clear_screen,
    "RET": execute_return,
    "SYS_ADDR": no_op,
    "JP_ADDR": execute_jump,
    "CALL_ADDR": execute_call,
    "SE_VX_BYTE": execute_skip_if_equal_immediate,
    "SNE_VX_BYTE": execute_skip_if_not_equal_immediate,
    "SE_VX_VY": execute_skip_if_equal_register,
    "LD_VX_BYTE": execute_set,
    "ADD_VX_BYTE": execute_add,
    "LD_VX_VY": alu.execute_alu_set,
    "OR_VX_VY": alu.execute_alu_or,
    "AND_VX_VY": alu.execute_alu_and,
    "XOR_VX_VY": alu.execute_alu_xor,
    "ADD_VX_VY": alu.execute_alu_add,
    "SUB_VX_VY": alu.execute_alu_sub_xy,
    "SHR_VX": alu.execute_alu_shift_right,
    "SUBN_VX_VY": alu.execute_alu_subn,
    "SHL_VX": alu.execute_alu_shift_left,
    "SNE_VX_VY": execute_skip_if_not_equal_register,
    "LD_I_ADDR": execute_set_index,
    "JP_V0_ADDR": execute_jump_with_offset,
    "RND_VX_BYTE": execute_random,
    "DRW_VX_VY_N": execute_display,
    "SKP_VX": execute_skip_if_key,
    "SKNP_VX": execute_skip_if_not_key,
    "LD_VX_DT": execute_get_delay_timer,
    "LD_VX_K": execute_wait_for_key,
    "LD_DT_VX": execute_set_delay_timer,
    "LD_ST_VX": execute_set_sound_timer,
    "ADD_I_VX": execute_add_to_index,
    "LD_F_VX": execute_font_character,
    "LD_B_VX": execute_bcd_conversion,
    "LD_MEM_I_VX": execute_store_registers,
    "LD_VX_MEM_I": execute_load_registers,
}

# Only the SHR shift direction depends on the mode.
TRANSCRIBED_HANDLERS = {
    **HANDLERS,
    "SHR_VX": alu.execute_alu_shift_right_transcribed,
}


def instruction_handlers(canonical_mode: bool) -> list:
    """Handlers in table order, followed by the unknown-opcode handler."""
    handlers = HANDLERS if canonical_mode else TRANSCRIBED_HANDLERS
    return [handlers[instruction.name] for instruction in INSTRUCTION_TABLE] + [execute_unknown]


def _execute(state: EmulatorState, instruction) -> EmulatorState:
    decoded_instruction = decode(jnp.asarray(instruction, dtype=jnp.uint16))

    return jax.lax.switch(
        decoded_instruction.index,
        instruction_handlers(state.canonical_mode),
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def _fetch(state: EmulatorState) -> jnp.uint16:
    """Read the big-endian opcode at PC. PC itself is moved by the instruction."""
    check_memory_range(state.pc, 2)
    address = jnp.astype(state.pc, jnp.int32)
    return _pack_u16(state.memory[address], state.memory.at[address + 1].get(mode="fill", fill_value=0))


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement each non-zero timer by one."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, 0).astype(jnp.uint8),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, 0).astype(jnp.uint8),
    )


def _step(state: EmulatorState) -> EmulatorState:
    instruction = _fetch(state)
    state = _execute(state, instruction)
    return tick_timers(state)


def run_instruction(state, _):
    state = _step(state)
    return state, None


def _run_n_instruction(state: EmulatorState, n: int) -> EmulatorState:
    state, _ = jax.lax.scan(run_instruction, state, length=n)
    return state


@checked
def fetch(state: EmulatorState) -> jnp.uint16:
    """Opcode at PC, without executing it."""
    return _fetch(state)


@checked
def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Decode and apply a single opcode. No fetch, no timer tick."""
    return _execute(state, instruction)


@checked
def step(state: EmulatorState) -> EmulatorState:
    """One machine cycle: fetch, decode, execute, tick timers."""
    return _step(state)


@checked(static_argnums=1)
def run_n_instruction(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` machine cycles in a single compiled loop."""
    return _run_n_instruction(state, n)


def write_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Copy a program image into memory starting at 0x200."""
    if len(data) > MAX_PROGRAM_SIZE:
        raise MemoryAccessError(
            f"Program of {len(data)} bytes does not fit in {MAX_PROGRAM_SIZE} bytes of program memory"
        )
    rom_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    logger.debug(f"Read {len(rom_data)} bytes from {filename}")
    return write_program(state, rom_data)
