"""Masked memory reads and writes shared by the instruction handlers."""

from typing import Optional

import jax.numpy as jnp

from chipjax.constants import ADDRESS_MASK, PROGRAM_START
from chipjax.errors import ErrorCode
from chipjax.state import EmulatorState, fail_if


def address_range(start, count: int) -> jnp.ndarray:
    """Addresses start..start+count-1, wrapped to the 12-bit address space."""
    return (jnp.astype(start, jnp.int32) + jnp.arange(count, dtype=jnp.int32)) & ADDRESS_MASK


def read_bytes(memory: jnp.ndarray, start, count: int) -> jnp.ndarray:
    """Read count bytes starting at start."""
    return memory[address_range(start, count)]


def write_bytes(state: EmulatorState, start, values, count: Optional[jnp.ndarray] = None) -> EmulatorState:
    """Write the first ``count`` of ``values`` starting at ``start``.

    The reserved interpreter area below 0x200 holds the font and cannot be
    written by programs. A write touching it records
    ``MEMORY_ACCESS_OUT_OF_RANGE`` with the first protected address.
    """
    values = jnp.asarray(values, dtype=jnp.uint8)
    size = values.shape[0]
    addresses = address_range(start, size)
    active = jnp.arange(size) < (size if count is None else count)

    protected = active & (addresses < PROGRAM_START)
    first_protected = addresses[jnp.argmax(protected)]

    current = state.memory[addresses]
    new_memory = state.memory.at[addresses].set(jnp.where(active, values, current))
    state = state.replace(memory=new_memory)
    return fail_if(state, jnp.any(protected), ErrorCode.MEMORY_ACCESS_OUT_OF_RANGE, first_protected)
