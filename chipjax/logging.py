"""Console logging utilities for chipjax host loops.

The interpreter core never prints. Host-side code such as the headless runner
reports through :class:`ConsoleLogger` and can show a ``tqdm`` progress bar
while frames are being executed.
"""

import time
import sys
from typing import Optional, TextIO

from tqdm import tqdm

from chipjax.state import EmulatorState

_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


class ConsoleLogger:
    """Level-filtered console logger for interpreter runs.

    Messages take keyword fields that are appended as ``key=value`` pairs.
    Fields listed in ``hex_fields`` hold machine addresses or opcodes and are
    printed in hex, so a halt reads ``pc=0x202 opcode=0x5121``.
    """

    LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    def __init__(
        self,
        name: str = "chipjax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
        hex_fields: tuple = ("pc", "opcode", "address", "index"),
    ):
        self.name = name
        self.stream = stream if stream is not None else sys.stdout
        self.threshold = self.LEVELS.index(log_level.upper())
        self.use_colors = use_colors and getattr(self.stream, "isatty", lambda: False)()
        self.show_timestamps = show_timestamps
        self.hex_fields = set(hex_fields)
        self.start_time = time.time()

    def _render_field(self, key: str, value) -> str:
        if key in self.hex_fields and isinstance(value, int):
            width = 4 if key == "opcode" else 3
            return f"{key}=0x{value:0{width}X}"
        return f"{key}={value}"

    def _format_message(self, level: str, message: str, fields: dict) -> str:
        prefix = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{_COLORS[level]}{level_str}{_RESET}"

        line = f"{prefix}{level_str}[{self.name}] {message}"
        if fields:
            line += " " + " ".join(self._render_field(k, v) for k, v in fields.items())
        return line

    def log(self, level: str, message: str, **fields):
        """Log a message with optional structured fields at the given level."""
        level = level.upper()
        if self.LEVELS.index(level) >= self.threshold:
            print(self._format_message(level, message, fields), file=self.stream, flush=True)

    def debug(self, message: str, **fields):
        self.log("DEBUG", message, **fields)

    def info(self, message: str, **fields):
        self.log("INFO", message, **fields)

    def warning(self, message: str, **fields):
        self.log("WARNING", message, **fields)

    def error(self, message: str, **fields):
        self.log("ERROR", message, **fields)

    def critical(self, message: str, **fields):
        self.log("CRITICAL", message, **fields)


def format_registers(state: EmulatorState) -> str:
    """Multi-line dump of PC, I, timers, stack depth and V0-VF."""
    lines = [
        f"PC: 0x{int(state.pc):03X}  I: 0x{int(state.I):03X}  "
        f"DT: {int(state.delay_timer)}  ST: {int(state.sound_timer)}  "
        f"SP: {int(state.stack.pointer)}"
    ]
    for row in range(0, 16, 4):
        lines.append(" ".join(f"V{r:X}:{int(state.V[r]):02X}" for r in range(row, row + 4)))
    return "\n".join(lines)


def build_progress_bar(total: int, desc: Optional[str] = None, **tqdm_kwargs) -> tqdm:
    """Create a frame progress bar for the headless runner."""
    if desc is None:
        desc = f"Running for {total:,} frames"
    return tqdm(total=total, desc=desc, unit="frame", **tqdm_kwargs)
