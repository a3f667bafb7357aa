"""CHIP-8 instruction decoding.

:func:`decode` is traceable: the variant comes back as an ``Op`` index in a
jnp array so the emulator can dispatch on it with ``jax.lax.switch``. Words
that are not CHIP-8 opcodes decode to ``INVALID_OP``. :func:`classify` answers
the same question for a plain Python int and is what the disassembler uses.
"""

from enum import IntEnum
from typing import Optional

import jax.numpy as jnp
import numpy as np
from chex import dataclass


class Op(IntEnum):
    """Every instruction variant of the base CHIP-8 set, in dispatch order."""
    SYS = 0                # 0NNN
    CLEAR_SCREEN = 1       # 00E0
    RETURN = 2             # 00EE
    JUMP = 3               # 1NNN
    CALL = 4               # 2NNN
    SKIP_EQ_IMM = 5        # 3XNN
    SKIP_NE_IMM = 6        # 4XNN
    SKIP_EQ_REG = 7        # 5XY0
    SET_IMM = 8            # 6XNN
    ADD_IMM = 9            # 7XNN
    SET_REG = 10           # 8XY0
    OR = 11                # 8XY1
    AND = 12               # 8XY2
    XOR = 13               # 8XY3
    ADD_REG = 14           # 8XY4
    SUB_XY = 15            # 8XY5
    SHIFT_RIGHT = 16       # 8XY6
    SUB_YX = 17            # 8XY7
    SHIFT_LEFT = 18        # 8XYE
    SKIP_NE_REG = 19       # 9XY0
    SET_INDEX = 20         # ANNN
    JUMP_OFFSET = 21       # BNNN
    RANDOM = 22            # CXNN
    DRAW = 23              # DXYN
    SKIP_KEY = 24          # EX9E
    SKIP_NOT_KEY = 25      # EXA1
    GET_DELAY = 26         # FX07
    WAIT_KEY = 27          # FX0A
    SET_DELAY = 28         # FX15
    SET_SOUND = 29         # FX18
    ADD_INDEX = 30         # FX1E
    FONT_CHARACTER = 31    # FX29
    BCD = 32               # FX33
    STORE_REGISTERS = 33   # FX55
    LOAD_REGISTERS = 34    # FX65


INVALID_OP = len(Op)


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: int      # Op index, INVALID_OP for non-opcodes
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


_ALU_OPS = {
    0x0: Op.SET_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB_XY,
    0x6: Op.SHIFT_RIGHT,
    0x7: Op.SUB_YX,
    0xE: Op.SHIFT_LEFT,
}

_KEY_OPS = {
    0x9E: Op.SKIP_KEY,
    0xA1: Op.SKIP_NOT_KEY,
}

_MISC_OPS = {
    0x07: Op.GET_DELAY,
    0x0A: Op.WAIT_KEY,
    0x15: Op.SET_DELAY,
    0x18: Op.SET_SOUND,
    0x1E: Op.ADD_INDEX,
    0x29: Op.FONT_CHARACTER,
    0x33: Op.BCD,
    0x55: Op.STORE_REGISTERS,
    0x65: Op.LOAD_REGISTERS,
}

# Families fully identified by the first nibble
_NIBBLE_OPS = {
    0x1: Op.JUMP,
    0x2: Op.CALL,
    0x3: Op.SKIP_EQ_IMM,
    0x4: Op.SKIP_NE_IMM,
    0x6: Op.SET_IMM,
    0x7: Op.ADD_IMM,
    0xA: Op.SET_INDEX,
    0xB: Op.JUMP_OFFSET,
    0xC: Op.RANDOM,
    0xD: Op.DRAW,
}


def _lookup_table(ops: dict, size: int) -> jnp.ndarray:
    table = np.full(size, INVALID_OP, dtype=np.int32)
    for key, op in ops.items():
        table[key] = int(op)
    return jnp.asarray(table)


_NIBBLE_TABLE = _lookup_table(_NIBBLE_OPS, 16)
_ALU_TABLE = _lookup_table(_ALU_OPS, 16)
_KEY_TABLE = _lookup_table(_KEY_OPS, 256)
_MISC_TABLE = _lookup_table(_MISC_OPS, 256)


def classify(instruction: int) -> Optional[Op]:
    """Return the variant for a 16-bit word, or None if it is not a CHIP-8 opcode."""
    opcode = (instruction & 0xF000) >> 12
    n = instruction & 0x000F
    nn = instruction & 0x00FF

    if opcode in _NIBBLE_OPS:
        return _NIBBLE_OPS[opcode]
    if opcode == 0x0:
        if instruction == 0x00E0:
            return Op.CLEAR_SCREEN
        if instruction == 0x00EE:
            return Op.RETURN
        return Op.SYS
    if opcode == 0x5:
        return Op.SKIP_EQ_REG if n == 0 else None
    if opcode == 0x9:
        return Op.SKIP_NE_REG if n == 0 else None
    if opcode == 0x8:
        return _ALU_OPS.get(n)
    if opcode == 0xE:
        return _KEY_OPS.get(nn)
    return _MISC_OPS.get(nn)


def decode(instruction) -> DecodedInstruction:
    """Decode 16-bit instruction into its variant index and operands."""
    raw = jnp.astype(instruction, jnp.int32) & 0xFFFF
    opcode = (raw & 0xF000) >> 12
    n = raw & 0x000F
    nn = raw & 0x00FF

    system_op = jnp.where(
        raw == 0x00E0, int(Op.CLEAR_SCREEN), jnp.where(raw == 0x00EE, int(Op.RETURN), int(Op.SYS))
    )
    op = jnp.select(
        [
            opcode == 0x0,
            opcode == 0x5,
            opcode == 0x9,
            opcode == 0x8,
            opcode == 0xE,
            opcode == 0xF,
        ],
        [
            system_op,
            jnp.where(n == 0, int(Op.SKIP_EQ_REG), INVALID_OP),
            jnp.where(n == 0, int(Op.SKIP_NE_REG), INVALID_OP),
            _ALU_TABLE[n],
            _KEY_TABLE[nn],
            _MISC_TABLE[nn],
        ],
        default=_NIBBLE_TABLE[opcode],
    )

    return DecodedInstruction(
        raw=raw,
        op=jnp.astype(op, jnp.int32),
        opcode=opcode,
        x=(raw & 0x0F00) >> 8,
        y=(raw & 0x00F0) >> 4,
        n=n,
        nn=nn,
        nnn=raw & 0x0FFF
    )
