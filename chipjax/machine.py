"""Host-facing CHIP-8 machine.

:class:`Chip8` holds the current :class:`~chipjax.state.EmulatorState` and
exposes the operations a front end needs: loading a program, latching keys,
stepping, and reading the framebuffer and sound timer. Instances are not
thread-safe; drive each one from a single thread.
"""

import jax
import numpy as np

from chipjax.state import (
    EmulatorState, create_state, set_key, set_keys, acknowledge_redraw, framebuffer, read_memory
)
from chipjax.emulator import step, run_n_instruction, write_program, load_rom
from chipjax.debug import memory_dump, display_dump
from chipjax.logging import logger


class Chip8:
    """Stateful wrapper around the functional CHIP-8 core."""

    def __init__(
        self,
        seed: int = 0,
        canonical_mode: bool = True,
        steps_per_frame: int = 1,
    ):
        """Create a machine with an empty program area.

        Args:
            seed: Seed for the RND instruction's random key
            canonical_mode: SHR shifts right when True, left (transcribed behaviour) when False
            steps_per_frame: Number of cycles executed by :meth:`run_frame`
        """
        if steps_per_frame < 1:
            raise ValueError(f"steps_per_frame must be positive, got {steps_per_frame}")
        self.seed = seed
        self.canonical_mode = canonical_mode
        self.steps_per_frame = steps_per_frame
        self.state: EmulatorState = create_state(jax.random.PRNGKey(seed), canonical_mode=canonical_mode)

    def reset(self):
        """Return to power-on state, dropping any loaded program."""
        self.state = create_state(jax.random.PRNGKey(self.seed), canonical_mode=self.canonical_mode)

    def load_program(self, data: bytes):
        """Copy a program image to 0x200."""
        self.state = write_program(self.state, data)

    def load_rom(self, filename: str):
        """Read a program image from disk and copy it to 0x200."""
        logger.info(f"Loading {filename}...")
        self.state = load_rom(self.state, filename)
        logger.info("Program loaded!")

    def set_key(self, key: int, pressed: bool):
        """Latch key 0x0-0xF as pressed or released."""
        self.state = set_key(self.state, key, pressed)

    def set_keys(self, buffer):
        """Latch the whole keypad from 16 booleans, index = key."""
        self.state = set_keys(self.state, buffer)

    def step(self) -> bool:
        """Run one cycle. Returns True when the framebuffer needs repainting."""
        self.state = step(self.state)
        return self._consume_redraw()

    def run_frame(self) -> bool:
        """Run ``steps_per_frame`` cycles. Returns True if any of them drew."""
        self.state = run_n_instruction(self.state, self.steps_per_frame)
        return self._consume_redraw()

    def _consume_redraw(self) -> bool:
        needs_redraw = bool(self.state.draw_flag)
        if needs_redraw:
            self.state = acknowledge_redraw(self.state)
        return needs_redraw

    @property
    def framebuffer(self) -> np.ndarray:
        """Read-only 32x64 grid of 0/1 pixels."""
        return framebuffer(self.state)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_active(self) -> bool:
        """True while the host should play the tone."""
        return self.sound_timer > 0

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    def read_memory(self, address: int, length: int) -> bytes:
        return read_memory(self.state, address, length)

    def memory_dump(self) -> str:
        return memory_dump(self.state)

    def display_dump(self) -> str:
        return display_dump(self.state)
