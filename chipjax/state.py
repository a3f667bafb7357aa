"""CHIP-8 emulator state structures."""

from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipjax.config import Quirks
from chipjax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_KEYS, NUM_REGISTERS
)
from chipjax.errors import ErrorCode


def _zeros(shape, dtype):
    return field(default_factory=lambda: jnp.zeros(shape, dtype=dtype))


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = _zeros(STACK_SIZE, jnp.uint16)
    pointer: jnp.ndarray = _zeros((), jnp.int32)


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is indexed ``[x, y]``. ``key_snapshot`` holds the keypad as last
    seen while waiting on FX0A so that only newly pressed keys release the wait.
    ``error_code``, ``error_pc`` and ``error_value`` record the fault that
    stopped the machine; a state with a nonzero ``error_code`` no longer steps.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = _zeros(MEMORY_SIZE, jnp.uint8)
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = _zeros((SCREEN_WIDTH, SCREEN_HEIGHT), jnp.bool_)
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = _zeros((), jnp.uint8)
    sound_timer: jnp.ndarray = _zeros((), jnp.uint8)
    keypad: jnp.ndarray = _zeros(NUM_KEYS, jnp.bool_)
    V: jnp.ndarray = _zeros(NUM_REGISTERS, jnp.uint8)
    I: jnp.ndarray = _zeros((), jnp.uint16)
    awaiting_key: jnp.ndarray = _zeros((), jnp.bool_)
    key_register: jnp.ndarray = _zeros((), jnp.int32)
    key_snapshot: jnp.ndarray = _zeros(NUM_KEYS, jnp.bool_)
    draw_flag: jnp.ndarray = _zeros((), jnp.bool_)
    error_code: jnp.ndarray = _zeros((), jnp.int32)
    error_pc: jnp.ndarray = _zeros((), jnp.uint16)
    error_value: jnp.ndarray = _zeros((), jnp.int32)
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def create_state(rng: Optional[jax.random.PRNGKey] = None, quirks: Quirks = Quirks()) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(rng, quirks=quirks)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def fail_if(state: EmulatorState, condition, code: ErrorCode, value=0) -> EmulatorState:
    """Record a fault when ``condition`` holds, traceable under ``jax.jit``.

    Instruction handlers call this instead of raising. The dispatcher discards
    the rest of a failing instruction's effects.
    """
    return state.replace(
        error_code=jnp.where(condition, jnp.int32(int(code)), state.error_code),
        error_value=jnp.where(condition, jnp.astype(value, jnp.int32), state.error_value),
    )
