"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chipjax.constants import ADDRESS_MASK, STACK_SIZE
from chipjax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack.

    Returns the new stack and whether the push overflowed. An overflowing push
    leaves the data untouched.
    """
    overflow = stack.pointer >= STACK_SIZE
    masked_address = jnp.astype(address, jnp.uint16) & ADDRESS_MASK
    new_data = stack.data.at[stack.pointer].set(masked_address, mode="drop")
    return stack.replace(data=new_data, pointer=stack.pointer + 1), overflow


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack.

    Returns the new stack, the popped address and whether the stack was empty.
    """
    underflow = stack.pointer <= 0
    new_pointer = jnp.maximum(stack.pointer - 1, 0)
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address, underflow
