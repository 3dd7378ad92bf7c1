"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FLAG_REGISTER
from chipjax.instructions.memory import check_memory_range

MAX_SPRITE_ROWS = 15

# Pre-computed sprite offsets: one row per sprite line, one column per bit
row_offsets, col_offsets = jnp.meshgrid(jnp.arange(MAX_SPRITE_ROWS), jnp.arange(8), indexing='ij')


def clear_display(display: jnp.ndarray) -> jnp.ndarray:
    """Switch every pixel off."""
    return jnp.zeros_like(display)


def blit_sprite(display: jnp.ndarray, vx, vy, rows: jnp.ndarray, n) -> tuple[jnp.ndarray, jnp.ndarray]:
    """XOR a sprite onto the flat display.

    ``rows`` holds up to 15 sprite bytes of which the first ``n`` are drawn.
    Coordinates wrap around both screen edges. Returns the new display and a
    collision flag that is set when any sprite bit hits a pixel already on.
    """
    target_x = (jnp.astype(vx, jnp.int32) + col_offsets) % SCREEN_WIDTH
    target_y = (jnp.astype(vy, jnp.int32) + row_offsets) % SCREEN_HEIGHT
    indices = target_y * SCREEN_WIDTH + target_x

    bits = (jnp.astype(rows, jnp.int32)[:, None] >> (7 - col_offsets)) & 1
    bits = jnp.where(row_offsets < n, bits, 0).astype(display.dtype)

    current = display[indices]
    collision = jnp.any((current & bits) == 1)
    return display.at[indices].set(current ^ bits), collision


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw the N-row sprite at memory[I] to (VX, VY), VF = collision."""
    check_memory_range(state.I, instruction.n)
    addresses = jnp.astype(state.I, jnp.int32) + jnp.arange(MAX_SPRITE_ROWS)
    rows = state.memory.at[addresses].get(mode="fill", fill_value=0)

    display, collision = blit_sprite(state.display, state.V[instruction.x], state.V[instruction.y], rows, instruction.n)
    new_V = state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    return state.replace(
        display=display,
        V=new_V,
        draw_flag=jnp.ones((), dtype=jnp.bool_),
        pc=state.pc + 2
    )
