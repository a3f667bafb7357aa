from chipjax import Interpreter, disassemble
from chipjax.logging import ConsoleLogger
from chipjax.rendering import display_to_text
from chipjax.runner import run_frames, instructions_per_frame

# Draws the hex digits 0-F in two rows, then spins on a jump to self
PROGRAM = bytes([
    0x60, 0x00,  # 200: LD V0, $00    digit
    0x61, 0x02,  # 202: LD V1, $02    x
    0x62, 0x04,  # 204: LD V2, $04    y
    0xF0, 0x29,  # 206: LD F, V0
    0xD1, 0x25,  # 208: DRW V1, V2, 5
    0x70, 0x01,  # 20A: ADD V0, $01
    0x71, 0x07,  # 20C: ADD V1, $07
    0x30, 0x08,  # 20E: SE V0, $08
    0x12, 0x16,  # 210: JP $216
    0x61, 0x02,  # 212: LD V1, $02
    0x62, 0x0C,  # 214: LD V2, $0C
    0x30, 0x10,  # 216: SE V0, $10
    0x12, 0x06,  # 218: JP $206
    0x12, 0x1A,  # 21A: JP $21A
])

if __name__ == "__main__":
    logger = ConsoleLogger(log_level="DEBUG")

    for address, instruction, text in disassemble(PROGRAM):
        logger.debug(text, address=address, opcode=instruction)

    interpreter = Interpreter(PROGRAM)
    summary = run_frames(
        interpreter, frames=60, ipf=instructions_per_frame(600), logger=logger, progress=True
    )

    print(display_to_text(interpreter.framebuffer))
    print(summary)
