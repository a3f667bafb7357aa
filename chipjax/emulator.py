"""Main CHIP-8 emulator execution engine.

Every function that advances the machine is traceable, so ``step``, ``tick``
and ``execute`` can be wrapped in ``jax.jit`` or scanned with ``jax.lax.scan``.
Faults are recorded in the state (see :func:`error_of`) instead of raised.
"""

from typing import Optional, Sequence

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.config import Quirks
from chipjax.decode import decode, Op
from chipjax.errors import Chip8Error, ErrorCode, ImageTooLarge, from_code
from chipjax.constants import ADDRESS_MASK, PROGRAM_START, MAX_PROGRAM_SIZE, NUM_KEYS
from chipjax.instructions.system import no_op, execute_invalid, execute_clear_screen, execute_return
from chipjax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipjax.instructions.alu import ALU_EXECUTORS
from chipjax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipjax.instructions.display import execute_display
from chipjax.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers, poll_key
)


EXECUTORS = {
    Op.SYS: no_op,
    Op.CLEAR_SCREEN: execute_clear_screen,
    Op.RETURN: execute_return,
    Op.JUMP: execute_jump,
    Op.CALL: execute_call,
    Op.SKIP_EQ_IMM: execute_skip_if_equal_immediate,
    Op.SKIP_NE_IMM: execute_skip_if_not_equal_immediate,
    Op.SKIP_EQ_REG: execute_skip_if_equal_register,
    Op.SET_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    **ALU_EXECUTORS,
    Op.SKIP_NE_REG: execute_skip_if_not_equal_register,
    Op.SET_INDEX: execute_set_index,
    Op.JUMP_OFFSET: execute_jump_with_offset,
    Op.RANDOM: execute_random,
    Op.DRAW: execute_display,
    Op.SKIP_KEY: execute_skip_if_key,
    Op.SKIP_NOT_KEY: execute_skip_if_key,
    Op.GET_DELAY: execute_get_delay_timer,
    Op.WAIT_KEY: execute_wait_for_key,
    Op.SET_DELAY: execute_set_delay_timer,
    Op.SET_SOUND: execute_set_sound_timer,
    Op.ADD_INDEX: execute_add_to_index,
    Op.FONT_CHARACTER: execute_font_character,
    Op.BCD: execute_bcd_conversion,
    Op.STORE_REGISTERS: execute_store_registers,
    Op.LOAD_REGISTERS: execute_load_registers,
}

_missing = set(Op) - set(EXECUTORS)
if _missing:
    raise RuntimeError(f"No executor for {sorted(op.name for op in _missing)}")


def _branches(quirks: Quirks) -> list:
    """``lax.switch`` branches indexed by ``Op`` value, invalid words last."""
    branches = [EXECUTORS[op] for op in Op]
    if not quirks.ignore_sys:
        branches[Op.SYS] = execute_invalid
    return branches + [execute_invalid]


def _record_fault(before: EmulatorState, after: EmulatorState, address) -> EmulatorState:
    return before.replace(error_code=after.error_code, error_value=after.error_value, error_pc=address)


def _take_result(before: EmulatorState, after: EmulatorState, address) -> EmulatorState:
    return after


def _keep_on_error(before: EmulatorState, after: EmulatorState, address) -> EmulatorState:
    """Return ``after``, or ``before`` carrying the fault if ``after`` recorded one."""
    address = jnp.astype(address, jnp.uint16) & ADDRESS_MASK
    return jax.lax.cond(
        after.error_code != int(ErrorCode.NONE), _record_fault, _take_result, before, after, address
    )


def execute(state: EmulatorState, instruction, address=None) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Args:
        state: Current state, with the PC already past the instruction
        instruction: Raw 16-bit instruction word
        address: Where the instruction was fetched from, recorded with a fault.
            Defaults to the word before the PC.

    Returns:
        The new state. A failing instruction returns the input state with only
        the error fields set.
    """
    if address is None:
        address = state.pc - 2
    decoded_instruction = decode(instruction)
    result = jax.lax.switch(
        decoded_instruction.op,
        _branches(state.quirks),
        state, decoded_instruction
    )
    return _keep_on_error(state, result, address)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    instruction = _pack_u16(state.memory[state.pc], state.memory[(state.pc + 1) & ADDRESS_MASK])
    return state.replace(pc=(state.pc + 2) & ADDRESS_MASK), instruction


def _fetch_and_execute(state: EmulatorState) -> EmulatorState:
    address = state.pc
    fetched, instruction = fetch(state)
    return _keep_on_error(state, execute(fetched, instruction, address), address)


def _halted(state: EmulatorState) -> EmulatorState:
    return state


def _run(state: EmulatorState) -> EmulatorState:
    return jax.lax.cond(state.awaiting_key, poll_key, _fetch_and_execute, state)


def step(state: EmulatorState) -> EmulatorState:
    """Run one instruction, or poll the keypad while FX0A is pending.

    A state that already carries a fault is returned unchanged.
    """
    return jax.lax.cond(state.error_code != int(ErrorCode.NONE), _halted, _run, state)


def tick(state: EmulatorState) -> EmulatorState:
    """Decrement both timers once, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def error_of(state: EmulatorState) -> Optional[Chip8Error]:
    """The exception for the fault recorded in a concrete state, or None."""
    return from_code(int(state.error_code), int(state.error_pc), int(state.error_value))


def press_keys(state: EmulatorState, keys: Sequence[bool]) -> EmulatorState:
    """Replace the keypad with a 16-entry pressed/released snapshot."""
    keypad = jnp.asarray(keys, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
    return state.replace(keypad=keypad)


def load_rom(state: EmulatorState, program: bytes) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    if len(program) > MAX_PROGRAM_SIZE:
        raise ImageTooLarge(len(program), MAX_PROGRAM_SIZE)
    if not program:
        return state
    rom_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(rom_array)
    return state.replace(memory=new_memory)
