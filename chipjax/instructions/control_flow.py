"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from chipjax.state import EmulatorState, fail_if
from chipjax.decode import DecodedInstruction
from chipjax.errors import ErrorCode
from chipjax.constants import ADDRESS_MASK, STACK_SIZE
from chipjax.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    stack, overflow = push(state.stack, state.pc)
    state = execute_jump(state.replace(stack=stack), instruction)
    return fail_if(state, overflow, ErrorCode.STACK_OVERFLOW, STACK_SIZE)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        skipped = (state.pc + 2) & ADDRESS_MASK
        return state.replace(pc=jnp.where(condition, skipped, state.pc))
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)


def _key_pressed(state: EmulatorState, instruction: DecodedInstruction):
    key_index = state.V[instruction.x] & 0xF
    return state.keypad[key_index]


# EX9E/EXA1 - Skip if key pressed/not pressed
execute_skip_if_key = make_skip_instruction(
    lambda state, inst: _key_pressed(state, inst) ^ (inst.nn == 0xA1)
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to NNN + V0, or NNN + VX when the jump quirk is enabled."""
    register = instruction.x if state.quirks.jump_uses_vx else 0
    jump_address = (instruction.nnn + jnp.astype(state.V[register], jnp.int32)) & ADDRESS_MASK
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))
