import re
from mintaka import asm
from typing import Iterable, List

_hex_word = re.compile(r'^(0x)?[0-9a-f]{1,8}$', re.IGNORECASE)
_bin_word = re.compile(r'^[01]{32}$')

# sum 10..1, store it, reload and double it, then call the halt loop.
# Branch operands are never produced by the instruction right before the
# branch: decode-stage forwarding only covers the memory and writeback stages.
DEFAULT_PROGRAM = [
    asm.addi(1, 0, 10),    # 0x00: counter
    asm.addi(2, 0, 0),     # 0x04: sum
    asm.addi(3, 0, 1),     # 0x08: step
    asm.add(2, 2, 1),      # 0x0c: loop
    asm.sub(1, 1, 3),      # 0x10
    asm.nop(),             # 0x14
    asm.beq(1, 0, 1),      # 0x18: -> done
    asm.j(0x0c >> 2),      # 0x1c: -> loop
    asm.sw(2, 0, 0),       # 0x20: done
    asm.lw(4, 0, 0),       # 0x24
    asm.add(5, 4, 4),      # 0x28: load-use stall
    asm.jal(0x34 >> 2),    # 0x2c: r31 = 0x30
    asm.ori(6, 0, 0xdead), # 0x30: never executed
    asm.beq(0, 0, -1)      # 0x34: halt
]


def parse_program(lines: Iterable[str]) -> List[int]:
    """
    Parse one instruction word per line.

    Words are hexadecimal (optional 0x prefix) or 32 binary digits. Blank
    lines and anything after '#' or '//' are ignored.
    """
    program = []
    for lineno, line in enumerate(lines, start=1):
        text = line.split('#', 1)[0].split('//', 1)[0].strip().replace('_', '')
        if text == '':
            continue
        if _bin_word.match(text):
            program.append(int(text, 2))
        elif _hex_word.match(text):
            program.append(int(text, 16))
        else:
            raise ValueError(f'Line {lineno}: invalid instruction word "{line.strip()}"')
    return program


def load_program(path: str) -> List[int]:
    with open(path, 'r') as f:
        return parse_program(f)
