"""Quirk configuration for historical CHIP-8 behaviour variants."""

from flax.struct import dataclass


@dataclass(frozen=True)
class Quirks:
    """Behaviour toggles for opcodes that differ between CHIP-8 interpreters.

    Attributes:
        shift_uses_vy: 8XY6/8XYE copy VY into VX before shifting (COSMAC VIP).
        memory_increments_index: FX55/FX65 leave I pointing past the last register.
        jump_uses_vx: BNNN is read as BXNN and jumps to NNN + VX instead of NNN + V0.
        logic_resets_vf: 8XY1/8XY2/8XY3 clear VF.
        wrap_sprites: Sprite pixels past the right or bottom edge wrap around
            instead of being clipped.
        ignore_sys: 0NNN machine-code calls are skipped instead of being invalid.
    """
    shift_uses_vy: bool = False
    memory_increments_index: bool = False
    jump_uses_vx: bool = False
    logic_resets_vf: bool = False
    wrap_sprites: bool = False
    ignore_sys: bool = False

    @classmethod
    def modern(cls) -> "Quirks":
        """CHIP-48/SCHIP-style behaviour used by most modern ROMs."""
        return cls()

    @classmethod
    def legacy(cls) -> "Quirks":
        """Original COSMAC VIP behaviour."""
        return cls(shift_uses_vy=True, memory_increments_index=True, logic_resets_vf=True)
