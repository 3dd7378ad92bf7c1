"""CHIP-8 ALU operations (8xxx).

Each operation maps ``(vx, vy)`` to ``(result, vf)``; ``vf`` is None when the
operation leaves VF alone. VF is written before VX, so an operation whose
destination is VF keeps its result there.
"""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import FLAG_REGISTER


def _flag(condition) -> jnp.ndarray:
    return jnp.astype(condition, jnp.uint8)


def _byte(value) -> jnp.ndarray:
    return jnp.astype(value & 0xFF, jnp.uint8)


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry."""
    carry = _flag(vy > 255 - vx)
    return _byte(vx + vy), carry


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    return _byte(vx - vy), _flag(vx > vy)


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = shifted-out bit."""
    return vx >> 1, vx & 1


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = VX & 0x80 (the raw high bit, not 1)."""
    return _byte(vx << 1), vx & 0x80


def alu_subn(vx, vy):
    """8XY7 - VX -= VY, VF = 1 unless VX > VY."""
    return _byte(vx - vy), _flag(~(vx > vy))


def alu_shift_right_transcribed(vx, vy):
    """8XY6 - Transcribed SHR: VF = VX & 1, but VX <<= 1."""
    return _byte(vx << 1), vx & 1


def make_alu_instruction(operation):
    """Wrap an ALU operation into an instruction handler."""
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        vx = jnp.astype(state.V[instruction.x], jnp.int32)
        vy = jnp.astype(state.V[instruction.y], jnp.int32)
        result, vf = operation(vx, vy)

        new_V = state.V
        if vf is not None:
            new_V = new_V.at[FLAG_REGISTER].set(jnp.astype(vf, jnp.uint8))
        new_V = new_V.at[instruction.x].set(_byte(result))
        return state.replace(V=new_V, pc=state.pc + 2)
    alu_instruction.__doc__ = operation.__doc__
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set)
execute_alu_or = make_alu_instruction(alu_or)
execute_alu_and = make_alu_instruction(alu_and)
execute_alu_xor = make_alu_instruction(alu_xor)
execute_alu_add = make_alu_instruction(alu_add)
execute_alu_sub_xy = make_alu_instruction(alu_sub_xy)
execute_alu_subn = make_alu_instruction(alu_subn)
execute_alu_shift_right = make_alu_instruction(alu_shift_right)
execute_alu_shift_left = make_alu_instruction(alu_shift_left)
execute_alu_shift_right_transcribed = make_alu_instruction(alu_shift_right_transcribed)
