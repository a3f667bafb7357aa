"""Stateful CHIP-8 interpreter driven by a host loop.

The host loads a program, feeds key snapshots, calls :meth:`Interpreter.step`
as often as it likes and :meth:`Interpreter.tick` at 60Hz, and reads the
framebuffer and sound signal back. Fatal errors are returned, never raised,
from ``step``.

Steps and ticks run through jit-compiled versions of the functional core; the
first call for a given set of quirks pays the compilation cost.

The interpreter is not thread-safe. A host that calls ``step`` and ``tick``
from different threads must hold one lock around both.
"""

import dataclasses
from enum import Enum
from typing import Optional, Sequence

import jax
import jax.numpy as jnp
import numpy as np

from chipjax import emulator
from chipjax.config import Quirks
from chipjax.constants import NUM_KEYS
from chipjax.errors import Chip8Error
from chipjax.state import EmulatorState, create_state

_step = jax.jit(emulator.step)
_tick = jax.jit(emulator.tick)


class Status(Enum):
    READY = "ready"
    AWAITING_KEY = "awaiting_key"
    HALTED = "halted"


@dataclasses.dataclass(frozen=True)
class StepResult:
    """Outcome of one ``step`` call.

    Attributes:
        status: Interpreter status after the step
        error: The fatal error that halted the machine, if any
        address: PC of the instruction that failed, if any
    """
    status: Status
    error: Optional[Chip8Error] = None
    address: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status is Status.READY

    @property
    def awaiting_key(self) -> bool:
        return self.status is Status.AWAITING_KEY

    @property
    def halted(self) -> bool:
        return self.status is Status.HALTED


def _read_only(array) -> np.ndarray:
    view = np.array(array)
    view.flags.writeable = False
    return view


class Interpreter:
    """A single CHIP-8 machine instance."""

    def __init__(self, program: bytes = b"", quirks: Optional[Quirks] = None, seed: int = 0):
        self.quirks = quirks if quirks is not None else Quirks()
        self.seed = seed
        self._image = b""
        self._state: EmulatorState = create_state(jax.random.PRNGKey(seed), self.quirks)
        self._status = Status.READY
        self._error: Optional[Chip8Error] = None
        self.initialize(program)

    def initialize(self, program: bytes) -> None:
        """Load a program image into a freshly initialized machine.

        Unlike :meth:`step`, which reports faults as a :class:`StepResult`, a
        load failure is raised: the host has not started running anything yet
        and can simply pick another image.

        Raises:
            ImageTooLarge: if the image does not fit above 0x200. The machine
                keeps its previous program and state.
        """
        program = bytes(program)
        state = create_state(jax.random.PRNGKey(self.seed), self.quirks)
        self._state = emulator.load_rom(state, program)
        self._image = program
        self._status = Status.READY
        self._error = None

    def reset(self) -> None:
        """Reinitialize the machine with the currently loaded image."""
        self.initialize(self._image)

    def step(self) -> StepResult:
        """Execute one instruction, or poll for a key while FX0A is pending."""
        if self._status is Status.HALTED:
            return StepResult(Status.HALTED, self._error, self._error_address)

        self._state = _step(self._state)
        error = emulator.error_of(self._state)
        if error is not None:
            self._status = Status.HALTED
            self._error = error
            return StepResult(Status.HALTED, error, self._error_address)

        self._status = Status.AWAITING_KEY if bool(self._state.awaiting_key) else Status.READY
        return StepResult(self._status)

    def tick(self) -> None:
        """Decrement the delay and sound timers, called at 60Hz by the host."""
        self._state = _tick(self._state)

    def set_keys(self, keys: Sequence[bool]) -> None:
        """Replace the whole keypad with a 16-entry snapshot."""
        self._state = emulator.press_keys(self._state, keys)

    def key_down(self, key: int) -> None:
        self._set_key(key, True)

    def key_up(self, key: int) -> None:
        self._set_key(key, False)

    def _set_key(self, key: int, pressed: bool) -> None:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be in 0x0-0xF, got {key!r}")
        self._state = self._state.replace(keypad=self._state.keypad.at[key].set(pressed))

    def consume_draw_flag(self) -> bool:
        """Return whether the framebuffer changed since the last call, and clear the flag."""
        changed = bool(self._state.draw_flag)
        if changed:
            self._state = self._state.replace(draw_flag=jnp.zeros((), dtype=jnp.bool_))
        return changed

    @property
    def _error_address(self) -> Optional[int]:
        return int(self._state.error_pc) if self._error is not None else None

    @property
    def state(self) -> EmulatorState:
        return self._state

    @property
    def status(self) -> Status:
        return self._status

    @property
    def error(self) -> Optional[Chip8Error]:
        return self._error

    @property
    def framebuffer(self) -> np.ndarray:
        """Read-only (64, 32) boolean copy of the display, indexed [x, y]."""
        return _read_only(self._state.display)

    @property
    def sound_active(self) -> bool:
        return int(self._state.sound_timer) != 0

    @property
    def delay_timer(self) -> int:
        return int(self._state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self._state.sound_timer)

    @property
    def pc(self) -> int:
        return int(self._state.pc)

    @property
    def index(self) -> int:
        return int(self._state.I)

    @property
    def registers(self) -> tuple:
        return tuple(int(v) for v in self._state.V)

    @property
    def stack(self) -> tuple:
        """Return addresses from the bottom of the stack up."""
        stack = self._state.stack
        return tuple(int(a) for a in stack.data[:int(stack.pointer)])

    @property
    def memory(self) -> np.ndarray:
        return _read_only(self._state.memory)
