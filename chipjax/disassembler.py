"""CHIP-8 program listing."""

from typing import Iterator, List, Tuple

from chipjax.constants import PROGRAM_START
from chipjax.decode import Op, classify


_FORMATS = {
    Op.SYS: "SYS ${nnn:03X}",
    Op.CLEAR_SCREEN: "CLS",
    Op.RETURN: "RET",
    Op.JUMP: "JP ${nnn:03X}",
    Op.CALL: "CALL ${nnn:03X}",
    Op.SKIP_EQ_IMM: "SE V{x:X}, ${nn:02X}",
    Op.SKIP_NE_IMM: "SNE V{x:X}, ${nn:02X}",
    Op.SKIP_EQ_REG: "SE V{x:X}, V{y:X}",
    Op.SET_IMM: "LD V{x:X}, ${nn:02X}",
    Op.ADD_IMM: "ADD V{x:X}, ${nn:02X}",
    Op.SET_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}",
    Op.SUB_XY: "SUB V{x:X}, V{y:X}",
    Op.SHIFT_RIGHT: "SHR V{x:X}, V{y:X}",
    Op.SUB_YX: "SUBN V{x:X}, V{y:X}",
    Op.SHIFT_LEFT: "SHL V{x:X}, V{y:X}",
    Op.SKIP_NE_REG: "SNE V{x:X}, V{y:X}",
    Op.SET_INDEX: "LD I, ${nnn:03X}",
    Op.JUMP_OFFSET: "JP V0, ${nnn:03X}",
    Op.RANDOM: "RND V{x:X}, ${nn:02X}",
    Op.DRAW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKIP_KEY: "SKP V{x:X}",
    Op.SKIP_NOT_KEY: "SKNP V{x:X}",
    Op.GET_DELAY: "LD V{x:X}, DT",
    Op.WAIT_KEY: "LD V{x:X}, K",
    Op.SET_DELAY: "LD DT, V{x:X}",
    Op.SET_SOUND: "LD ST, V{x:X}",
    Op.ADD_INDEX: "ADD I, V{x:X}",
    Op.FONT_CHARACTER: "LD F, V{x:X}",
    Op.BCD: "LD B, V{x:X}",
    Op.STORE_REGISTERS: "LD [I], V{x:X}",
    Op.LOAD_REGISTERS: "LD V{x:X}, [I]",
}


def iter_opcodes(program: bytes) -> Iterator[int]:
    """Yield the big-endian 16-bit words of a program image."""
    if len(program) % 2:
        raise ValueError("Program length must be even, opcodes are two bytes")
    for i in range(0, len(program), 2):
        yield (program[i] << 8) | program[i + 1]


def mnemonic(instruction: int) -> str:
    """Render one instruction word in assembler syntax.

    Words that are not CHIP-8 opcodes are rendered as data (``DW $XXXX``).
    """
    op = classify(instruction)
    if op is None:
        return f"DW ${instruction:04X}"
    return _FORMATS[op].format(
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
    )


def disassemble(program: bytes, origin: int = PROGRAM_START) -> List[Tuple[int, int, str]]:
    """List ``(address, instruction, text)`` rows for a whole program image."""
    return [
        (origin + 2 * i, instruction, mnemonic(instruction))
        for i, instruction in enumerate(iter_opcodes(program))
    ]
