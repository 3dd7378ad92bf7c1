"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipjax import create_state, write_program


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def canonical_state():
    """Provide a fresh state with canonical shift and SUBN semantics."""
    return create_state(canonical_mode=True)


@pytest.fixture
def transcribed_state():
    """Provide a fresh state with transcribed shift and SUBN semantics."""
    return create_state(canonical_mode=False)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def with_registers(state, **registers):
    """Helper to set registers by name, e.g. ``with_registers(state, V1=0x10, VF=1)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def load_opcodes(state, opcodes):
    """Helper to write a program given as a list of 16-bit opcodes."""
    data = b"".join(opcode.to_bytes(2, "big") for opcode in opcodes)
    return write_program(state, data)
