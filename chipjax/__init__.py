"""CHIP-8 virtual machine package."""

from chipjax.state import EmulatorState, StackState, create_state
from chipjax.emulator import execute, fetch, step, tick, error_of, press_keys, load_rom
from chipjax.decode import DecodedInstruction, Op, INVALID_OP, decode
from chipjax.config import Quirks
from chipjax.errors import (
    ErrorCode, Chip8Error, ImageTooLarge, InvalidOpcode, StackOverflow, StackUnderflow, MemoryAccessOutOfRange
)
from chipjax.interpreter import Interpreter, Status, StepResult
from chipjax.disassembler import disassemble, mnemonic, iter_opcodes
from chipjax.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "tick",
    "error_of",
    "press_keys",
    "load_rom",
    "DecodedInstruction",
    "Op",
    "INVALID_OP",
    "decode",
    "Quirks",
    "ErrorCode",
    "Chip8Error",
    "ImageTooLarge",
    "InvalidOpcode",
    "StackOverflow",
    "StackUnderflow",
    "MemoryAccessOutOfRange",
    "Interpreter",
    "Status",
    "StepResult",
    "disassemble",
    "mnemonic",
    "iter_opcodes",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
