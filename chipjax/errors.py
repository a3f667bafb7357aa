"""CHIP-8 interpreter errors.

Inside the traced core a fault is an :class:`ErrorCode` stored in the machine
state together with the address of the failing instruction and one value of
context. Host code turns that record into one of the exceptions below with
:func:`from_code`.
"""

from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    NONE = 0
    INVALID_OPCODE = 1
    STACK_OVERFLOW = 2
    STACK_UNDERFLOW = 3
    MEMORY_ACCESS_OUT_OF_RANGE = 4


class Chip8Error(Exception):
    """Base class for all interpreter errors."""

    fatal = True


class ImageTooLarge(Chip8Error):
    """Program image does not fit between 0x200 and the end of memory."""

    fatal = False

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Program image is {size} bytes, limit is {limit} bytes")


class InvalidOpcode(Chip8Error):
    """Instruction word does not match any known opcode family."""

    def __init__(self, address: Optional[int], instruction: int):
        self.address = address
        self.instruction = instruction
        where = "" if address is None else f" at 0x{address:03X}"
        super().__init__(f"Invalid opcode 0x{instruction:04X}{where}")


class StackOverflow(Chip8Error):
    """Subroutine call with a full stack."""

    def __init__(self, depth: int, address: Optional[int] = None):
        self.depth = depth
        self.address = address
        super().__init__(f"Stack overflow, depth limit is {depth}")


class StackUnderflow(Chip8Error):
    """Return with an empty stack."""

    def __init__(self, address: Optional[int] = None):
        self.address = address
        super().__init__("Stack underflow on return")


class MemoryAccessOutOfRange(Chip8Error):
    """Memory access outside the program-writable address space."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Memory access out of range at 0x{address:03X}")


def from_code(code: int, address: int, value: int) -> Optional[Chip8Error]:
    """Build the exception for a fault recorded by the core, None for ``ErrorCode.NONE``.

    ``value`` is the instruction word for invalid opcodes, the stack depth for
    overflows and the offending address for protected memory writes.
    """
    code = ErrorCode(code)
    if code is ErrorCode.NONE:
        return None
    if code is ErrorCode.INVALID_OPCODE:
        return InvalidOpcode(address, value)
    if code is ErrorCode.STACK_OVERFLOW:
        return StackOverflow(value, address)
    if code is ErrorCode.STACK_UNDERFLOW:
        return StackUnderflow(address)
    return MemoryAccessOutOfRange(value)
