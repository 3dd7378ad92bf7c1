"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass, PyTreeNode, field

from chipjax.errors import MemoryAccessError, MEMORY_OUT_OF_RANGE
from chipjax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, DISPLAY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, MEMORY_SIZE, NUM_REGISTERS, NUM_KEYS
)


@dataclass(frozen=True)
class StackState:
    """Return addresses for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 machine state.

    The display is stored flat in row-major order (``y * 64 + x``); use
    :func:`framebuffer` for a 32x64 view.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros(DISPLAY_SIZE, dtype=jnp.uint8))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    draw_flag: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    canonical_mode: bool = field(pytree_node=False, default=True)


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0), canonical_mode: bool = True) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, canonical_mode=canonical_mode)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def set_key(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Latch a key as pressed or released."""
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index must be in range 0x0-0xF, got {key}")
    return state.replace(keypad=state.keypad.at[key].set(bool(pressed)))


def set_keys(state: EmulatorState, pressed) -> EmulatorState:
    """Latch all 16 keys at once from a sequence of booleans indexed by key."""
    keypad = np.asarray(pressed, dtype=np.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Key buffer must hold {NUM_KEYS} entries, got shape {keypad.shape}")
    return state.replace(keypad=jnp.asarray(keypad))


def acknowledge_redraw(state: EmulatorState) -> EmulatorState:
    """Clear the redraw flag once the host has painted the framebuffer."""
    return state.replace(draw_flag=jnp.zeros((), dtype=jnp.bool_))


def framebuffer(state: EmulatorState) -> np.ndarray:
    """Read-only (height, width) snapshot of the display."""
    pixels = np.asarray(state.display, dtype=np.uint8).reshape(SCREEN_HEIGHT, SCREEN_WIDTH).copy()
    pixels.flags.writeable = False
    return pixels


def read_memory(state: EmulatorState, address: int, length: int) -> bytes:
    """Copy ``length`` bytes of memory starting at ``address``."""
    if address < 0 or length < 0 or address + length > MEMORY_SIZE:
        raise MemoryAccessError(f"{MEMORY_OUT_OF_RANGE}: {length} bytes at {address}")
    return np.asarray(state.memory[address:address + length], dtype=np.uint8).tobytes()
