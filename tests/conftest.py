"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipjax import create_state, Quirks, Interpreter


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def modern_state():
    """Provide a fresh state with modern quirks."""
    return create_state(quirks=Quirks.modern())


@pytest.fixture
def legacy_state():
    """Provide a fresh state with COSMAC VIP quirks."""
    return create_state(quirks=Quirks.legacy())


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*instructions):
    """Assemble 16-bit instruction words into a big-endian program image."""
    return b"".join(i.to_bytes(2, "big") for i in instructions)


def keys(*pressed):
    """16-entry key snapshot with the given keys held down."""
    return [k in pressed for k in range(16)]


@pytest.fixture
def make_interpreter():
    """Build an interpreter from instruction words."""
    def _make(*instructions, **kwargs):
        return Interpreter(program(*instructions), **kwargs)
    return _make
