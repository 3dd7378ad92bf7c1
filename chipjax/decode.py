"""CHIP-8 instruction decoding.

Opcodes are matched against :data:`INSTRUCTION_TABLE` in order: an entry
matches when ``opcode & mask == pattern`` and the first match wins. Opcodes
with no matching entry decode to :data:`UNKNOWN_INDEX`.
"""

from typing import NamedTuple

import jax.numpy as jnp
from chex import dataclass


class Instruction(NamedTuple):
    """One entry of the instruction table."""
    name: str
    mnemonic: str
    mask: int
    pattern: int


INSTRUCTION_TABLE = (
    Instruction("CLS", "CLS", 0xFFFF, 0x00E0),
    Instruction("RET", "RET", 0xFFFF, 0x00EE),
    Instruction("SYS_ADDR", "SYS addr", 0xF000, 0x0000),
    Instruction("JP_ADDR", "JP addr", 0xF000, 0x1000),
    Instruction("CALL_ADDR", "CALL addr", 0xF000, 0x2000),
    Instruction("SE_VX_BYTE", "SE Vx, byte", 0xF000, 0x3000),
    Instruction("SNE_VX_BYTE", "SNE Vx, byte", 0xF000, 0x4000),
    Instruction("SE_VX_VY", "SE Vx, Vy", 0xF000, 0x5000),
    Instruction("LD_VX_BYTE", "LD Vx, byte", 0xF000, 0x6000),
    Instruction("ADD_VX_BYTE", "ADD Vx, byte", 0xF000, 0x7000),
    Instruction("LD_VX_VY", "LD Vx, Vy", 0xF00F, 0x8000),
    Instruction("OR_VX_VY", "OR Vx, Vy", 0xF00F, 0x8001),
    Instruction("AND_VX_VY", "AND Vx, Vy", 0xF00F, 0x8002),
    Instruction("XOR_VX_VY", "XOR Vx, Vy", 0xF00F, 0x8003),
    Instruction("ADD_VX_VY", "ADD Vx, Vy", 0xF00F, 0x8004),
    Instruction("SUB_VX_VY", "SUB Vx, Vy", 0xF00F, 0x8005),
    Instruction("SHR_VX", "SHR Vx {, Vy}", 0xF00F, 0x8006),
    Instruction("SUBN_VX_VY", "SUBN Vx, Vy", 0xF00F, 0x8007),
    Instruction("SHL_VX", "SHL Vx {, Vy}", 0xF00F, 0x800E),
    Instruction("SNE_VX_VY", "SNE Vx, Vy", 0xF000, 0x9000),
    Instruction("LD_I_ADDR", "LD I, addr", 0xF000, 0xA000),
    Instruction("JP_V0_ADDR", "JP V0, addr", 0xF000, 0xB000),
    Instruction("RND_VX_BYTE", "RND Vx, byte", 0xF000, 0xC000),
    Instruction("DRW_VX_VY_N", "DRW Vx, Vy, nibble", 0xF000, 0xD000),
    Instruction("SKP_VX", "SKP Vx", 0xF0FF, 0xE09E),
    Instruction("SKNP_VX", "SKNP Vx", 0xF0FF, 0xE0A1),
    Instruction("LD_VX_DT", "LD Vx, DT", 0xF0FF, 0xF007),
    Instruction("LD_VX_K", "LD Vx, K", 0xF0FF, 0xF00A),
    Instruction("LD_DT_VX", "LD DT, Vx", 0xF0FF, 0xF015),
    Instruction("LD_ST_VX", "LD ST, Vx", 0xF0FF, 0xF018),
    Instruction("ADD_I_VX", "ADD I, Vx", 0xF0FF, 0xF01E),
    Instruction("LD_F_VX", "LD F, Vx", 0xF0FF, 0xF029),
    Instruction("LD_B_VX", "LD B, Vx", 0xF0FF, 0xF033),
    Instruction("LD_MEM_I_VX", "LD [I], Vx", 0xF0FF, 0xF055),
    Instruction("LD_VX_MEM_I", "LD Vx, [I]", 0xF0FF, 0xF065),
)

UNKNOWN = Instruction("UNKNOWN", "UNKNOWN", 0xFFFF, 0xFFFF)
UNKNOWN_INDEX = len(INSTRUCTION_TABLE)


_MASKS = jnp.array([instruction.mask for instruction in INSTRUCTION_TABLE], dtype=jnp.uint16)
_PATTERNS = jnp.array([instruction.pattern for instruction in INSTRUCTION_TABLE], dtype=jnp.uint16)


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    index: int   # Position in INSTRUCTION_TABLE, or UNKNOWN_INDEX
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def match_instruction(instruction) -> jnp.ndarray:
    """Index of the first table entry matching the opcode."""
    opcode = jnp.asarray(instruction, dtype=jnp.uint16)
    matches = (opcode & _MASKS) == _PATTERNS
    return jnp.where(jnp.any(matches), jnp.argmax(matches), UNKNOWN_INDEX).astype(jnp.int32)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        index=match_instruction(instruction),
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


def lookup(instruction: int) -> Instruction:
    """Table entry for a concrete opcode, without going through JAX."""
    for entry in INSTRUCTION_TABLE:
        if instruction & entry.mask == entry.pattern:
            return entry
    return UNKNOWN
