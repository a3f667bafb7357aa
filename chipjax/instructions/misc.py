"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.bus import read_bytes, write_bytes
from chipjax.constants import ADDRESS_MASK, FONT_START, FONT_CHAR_SIZE, NUM_REGISTERS


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, wrapping at 12 bits."""
    new_i = (jnp.astype(state.I, jnp.int32) + state.V[instruction.x]) & ADDRESS_MASK
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Nothing blocks here: the PC is rewound onto this instruction and the state
    is flagged as awaiting a key. ``poll_key`` completes the instruction once a
    key goes from released to pressed.
    """
    return state.replace(
        pc=(state.pc - 2) & ADDRESS_MASK,
        awaiting_key=jnp.ones_like(state.awaiting_key),
        key_register=jnp.astype(instruction.x, jnp.int32),
        key_snapshot=state.keypad,
    )


def poll_key(state: EmulatorState) -> EmulatorState:
    """Complete a pending FX0A if a key was pressed since the last snapshot."""
    newly_pressed = state.keypad & ~state.key_snapshot
    pressed = jnp.any(newly_pressed)
    pressed_key = jnp.astype(jnp.argmax(newly_pressed), jnp.uint8)

    return state.replace(
        V=jnp.where(pressed, state.V.at[state.key_register].set(pressed_key), state.V),
        pc=jnp.where(pressed, (state.pc + 2) & ADDRESS_MASK, state.pc),
        awaiting_key=state.awaiting_key & ~pressed,
        key_snapshot=state.keypad,
    )


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = jnp.astype(state.V[instruction.x], jnp.int32) & 0xF
    return state.replace(I=jnp.astype(FONT_START + digit * FONT_CHAR_SIZE, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]
    digits = jnp.array([value // 100, (value // 10) % 10, value % 10], dtype=jnp.uint8)
    return write_bytes(state, state.I, digits)


def _index_after_transfer(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    if state.quirks.memory_increments_index:
        return jnp.astype((jnp.astype(state.I, jnp.int32) + instruction.x + 1) & ADDRESS_MASK, jnp.uint16)
    return state.I


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    new_state = write_bytes(state, state.I, state.V, count=instruction.x + 1)
    return new_state.replace(I=_index_after_transfer(state, instruction))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    memory_values = read_bytes(state.memory, state.I, NUM_REGISTERS)
    new_V = jnp.where(register_mask, memory_values, state.V)
    return state.replace(V=new_V, I=_index_after_transfer(state, instruction))
