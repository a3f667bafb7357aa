"""Framebuffer conversions for hosts and debugging."""

from typing import Tuple

import numpy as np

Color = Tuple[int, int, int]

COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
    "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
    "white": ((255, 255, 255), (0, 0, 0)),  # White on black
    "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
}


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Get a predefined ``(on_color, off_color)`` pair.

    Raises:
        ValueError: for an unknown scheme name.
    """
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}"
        )
    return COLOR_SCHEMES[scheme]


def chip8_display_to_rgb(
    display,
    scale: int = 8,
    on_color: Color = (0, 255, 0),
    off_color: Color = (0, 0, 0),
) -> np.ndarray:
    """Convert a (64, 32) boolean framebuffer to an RGB image.

    Args:
        display: Framebuffer indexed [x, y]
        scale: Nearest-neighbour upscaling factor
        on_color: RGB color for set pixels
        off_color: RGB color for clear pixels

    Returns:
        uint8 array of shape (32 * scale, 64 * scale, 3)
    """
    pixels = np.asarray(display, dtype=np.bool_).T

    rgb_frame = np.empty((*pixels.shape, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)
    return rgb_frame


def display_to_text(display, on: str = "#", off: str = ".") -> str:
    """Render a framebuffer as 32 lines of 64 characters."""
    pixels = np.asarray(display, dtype=np.bool_).T
    return "\n".join("".join(on if p else off for p in row) for row in pixels)
