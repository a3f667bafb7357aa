"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chipjax.state import EmulatorState, fail_if
from chipjax.decode import DecodedInstruction
from chipjax.errors import ErrorCode
from chipjax.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Machine-code call, ignored."""
    return state


def execute_invalid(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Words that are not CHIP-8 opcodes."""
    return fail_if(state, True, ErrorCode.INVALID_OPCODE, instruction.raw)


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display), draw_flag=jnp.ones_like(state.draw_flag))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address, underflow = pop(state.stack)
    state = state.replace(stack=stack, pc=jnp.astype(address, jnp.uint16))
    return fail_if(state, underflow, ErrorCode.STACK_UNDERFLOW)
