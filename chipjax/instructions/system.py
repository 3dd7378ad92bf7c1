"""CHIP-8 system instructions (0x0xxx) and the unknown-opcode handler."""

import jax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.stack import pop
from chipjax.instructions.display import clear_display
from chipjax.logging import logger


def advance(state: EmulatorState, amount: int = 2) -> EmulatorState:
    """Move the program counter past the current instruction."""
    return state.replace(pc=state.pc + amount)


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Machine code routine, ignored."""
    return advance(state)


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    state = state.replace(display=clear_display(state.display), draw_flag=jnp.ones((), dtype=jnp.bool_))
    return advance(state)


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine, resuming after the call."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address + 2)


def _log_unknown_opcode(raw, pc):
    logger.warning(f"Unknown opcode 0x{int(raw):04X} at 0x{int(pc):03X}")


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Unmatched opcode: logged, PC left where it is."""
    jax.debug.callback(_log_unknown_opcode, instruction.raw, state.pc)
    return state
