"""CHIP-8 ALU operations (8xxx).

Each operation maps ``(vx, vy)`` to ``(result, flag)`` on int32 values.
``flag`` is ``None`` when the operation leaves VF alone. VF is written after
VX so the flag wins when X is F.
"""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction, Op
from chipjax.constants import FLAG_REGISTER


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
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & 0xFF, result > 0xFF


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = 1 when no borrow."""
    return (vx - vy) & 0xFF, vx >= vy


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when no borrow."""
    return (vy - vx) & 0xFF, vy >= vx


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


ALU_OPERATIONS = {
    Op.SET_REG: alu_set,
    Op.OR: alu_or,
    Op.AND: alu_and,
    Op.XOR: alu_xor,
    Op.ADD_REG: alu_add,
    Op.SUB_XY: alu_sub_xy,
    Op.SHIFT_RIGHT: alu_shift_right,
    Op.SUB_YX: alu_sub_yx,
    Op.SHIFT_LEFT: alu_shift_left,
}

_LOGIC_OPS = (Op.OR, Op.AND, Op.XOR)
_SHIFT_OPS = (Op.SHIFT_RIGHT, Op.SHIFT_LEFT)


def make_alu_instruction(op: Op):
    """Factory for one 8XYN variant, applying the shift and logic quirks."""
    operation = ALU_OPERATIONS[op]

    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        vx = jnp.astype(state.V[instruction.x], jnp.int32)
        vy = jnp.astype(state.V[instruction.y], jnp.int32)

        if op in _SHIFT_OPS and state.quirks.shift_uses_vy:
            vx = vy

        result, vf = operation(vx, vy)
        if op in _LOGIC_OPS and state.quirks.logic_resets_vf:
            vf = 0

        new_V = state.V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
        if vf is not None:
            new_V = new_V.at[FLAG_REGISTER].set(jnp.astype(vf, jnp.uint8))
        return state.replace(V=new_V)

    alu_instruction.__name__ = f"execute_{operation.__name__}"
    return alu_instruction


ALU_EXECUTORS = {op: make_alu_instruction(op) for op in ALU_OPERATIONS}
