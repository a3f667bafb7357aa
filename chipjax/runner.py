"""Headless host loop that paces instructions against 60Hz timer ticks."""

import dataclasses
from typing import Callable, Optional, Sequence

from chipjax.constants import ADDRESS_MASK, TIMER_FREQUENCY
from chipjax.errors import Chip8Error
from chipjax.interpreter import Interpreter, Status
from chipjax.logging import ConsoleLogger, format_registers, build_progress_bar


@dataclasses.dataclass
class RunSummary:
    """What happened during :func:`run_frames`."""
    frames: int
    instructions: int
    status: Status
    error: Optional[Chip8Error] = None


def _word_at(interpreter: Interpreter, address: int) -> int:
    memory = interpreter.memory
    return (int(memory[address]) << 8) | int(memory[(address + 1) & ADDRESS_MASK])


def instructions_per_frame(instruction_frequency: int = 600, fps: int = TIMER_FREQUENCY) -> int:
    """Number of instructions to execute per 60Hz frame, at least one."""
    return max(1, instruction_frequency // fps)


def run_frames(
    interpreter: Interpreter,
    frames: int,
    ipf: int = 10,
    logger: Optional[ConsoleLogger] = None,
    progress: bool = False,
    keys_fn: Optional[Callable[[int], Sequence[bool]]] = None,
) -> RunSummary:
    """Drive an interpreter for a number of frames.

    Each frame applies the key snapshot from ``keys_fn(frame)`` if given, runs
    up to ``ipf`` steps and then ticks the timers once. A
    frame's remaining steps are dropped while the program awaits a key. The
    run stops at the first halt.

    Args:
        interpreter: Machine to drive
        frames: Number of 60Hz frames to run
        ipf: Instructions (steps) per frame
        logger: Optional logger for halts and the final summary
        progress: Show a tqdm progress bar
        keys_fn: Maps the frame number to a 16-entry key snapshot

    Returns:
        RunSummary with the frames completed and instructions executed
    """
    executed = 0
    completed = 0
    bar = build_progress_bar(frames) if progress else None

    try:
        for frame in range(frames):
            if keys_fn is not None:
                interpreter.set_keys(keys_fn(frame))

            for _ in range(ipf):
                polling = interpreter.status is Status.AWAITING_KEY
                result = interpreter.step()
                if result.halted:
                    if logger:
                        opcode = _word_at(interpreter, result.address)
                        logger.error(str(result.error), pc=result.address, opcode=opcode)
                        logger.debug(format_registers(interpreter.state))
                    return RunSummary(completed, executed, result.status, result.error)
                # A poll executes nothing, even the one that completes FX0A
                if not polling:
                    executed += 1
                if result.awaiting_key:
                    break

            interpreter.tick()
            completed += 1
            if bar is not None:
                bar.update(1)
    finally:
        if bar is not None:
            bar.close()

    if logger:
        logger.info("Run finished", frames=completed, instructions=executed, status=interpreter.status.value)
    return RunSummary(completed, executed, interpreter.status)
