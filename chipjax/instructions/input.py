"""CHIP-8 key input instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from jax.experimental import checkify

from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import NUM_KEYS
from chipjax.errors import KEY_OUT_OF_RANGE
from chipjax.instructions.control_flow import make_skip_instruction


def _key_state(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    key_index = state.V[instruction.x]
    checkify.check(key_index < NUM_KEYS, KEY_OUT_OF_RANGE + ": V{x} holds {key}", x=jnp.asarray(instruction.x), key=key_index)
    return state.keypad[key_index]


execute_skip_if_key = make_skip_instruction(
    lambda state, inst: _key_state(state, inst)
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: ~_key_state(state, inst)
)


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Stores the lowest pressed key in VX. With no key down the program counter
    stays put, so the instruction runs again on the next step.
    """
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(V=state.V.at[instruction.x].set(pressed_key), pc=state.pc + 2)

    def wait_action(state):
        return state

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)
