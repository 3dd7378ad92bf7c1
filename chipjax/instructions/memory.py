"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from jax.experimental import checkify

from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import MEMORY_SIZE
from chipjax.errors import MEMORY_OUT_OF_RANGE


def check_memory_range(start: jnp.ndarray, length) -> None:
    """Fail unless ``start .. start + length - 1`` lies inside memory."""
    end = jnp.astype(start, jnp.int32) + length
    checkify.check(end <= MEMORY_SIZE, MEMORY_OUT_OF_RANGE + ": {length} bytes at {start}",
                   length=jnp.asarray(length), start=jnp.asarray(start))


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    value = jnp.astype(instruction.nn, jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(value), pc=state.pc + 2)


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX, wrapping at 8 bits. VF is not touched."""
    value = (jnp.astype(state.V[instruction.x], jnp.int32) + instruction.nn) & 0xFF
    return state.replace(V=state.V.at[instruction.x].set(jnp.astype(value, jnp.uint8)), pc=state.pc + 2)


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16), pc=state.pc + 2)


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - Set VX = random & NN."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    value = jnp.astype(random_value & instruction.nn, jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(value), rng=key, pc=state.pc + 2)
