"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.bus import read_bytes
from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FLAG_REGISTER

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')

SPRITE_WIDTH = 8
MAX_SPRITE_HEIGHT = 15


def sprite_mask(memory: jnp.ndarray, index, x, y, height, wrap: bool) -> jnp.ndarray:
    """Boolean (64, 32) mask of the pixels a sprite toggles.

    The sprite origin always wraps onto the screen. Pixels past the right or
    bottom edge are clipped unless ``wrap`` is set.
    """
    sprite_x = jnp.astype(x, jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(y, jnp.int32) % SCREEN_HEIGHT

    col_offset = xx - sprite_x
    row_offset = yy - sprite_y
    if wrap:
        col_offset = col_offset % SCREEN_WIDTH
        row_offset = row_offset % SCREEN_HEIGHT

    in_sprite = (col_offset >= 0) & (col_offset < SPRITE_WIDTH) & (row_offset >= 0) & (row_offset < height)

    rows = read_bytes(memory, index, MAX_SPRITE_HEIGHT)
    sprite_bytes = rows[jnp.clip(row_offset, 0, MAX_SPRITE_HEIGHT - 1)]
    bits = (sprite_bytes >> (7 - jnp.clip(col_offset, 0, SPRITE_WIDTH - 1))) & 1
    return jnp.astype(bits, jnp.bool_) & in_sprite


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    sprite = sprite_mask(
        state.memory,
        state.I,
        state.V[instruction.x],
        state.V[instruction.y],
        instruction.n,
        state.quirks.wrap_sprites,
    )
    collision = jnp.any(state.display & sprite)

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        draw_flag=jnp.ones_like(state.draw_flag),
    )
