"""
Instruction encoders and a small disassembler for the supported subset.

Register operands are plain integers (0-31). Immediates accept either signed
(-32768..32767) or raw 16-bit (0..0xFFFF) values. Branch offsets are counted
in instructions relative to the instruction after the branch.
"""
from mintaka.isa import Opcode
from mintaka.isa import Funct


def _reg(index: int) -> int:
    if not isinstance(index, int):
        raise TypeError(f'Register index must be an integer: {index!r}')
    if not 0 <= index < 32:
        raise ValueError(f'Invalid register index: {index}')
    return index


def _imm16(value: int) -> int:
    if not -2**15 <= value < 2**16:
        raise ValueError(f'Immediate out of range: {value}')
    return value & 0xFFFF


def r_type(funct: int, rd: int, rs: int, rt: int, shamt: int = 0) -> int:
    if not 0 <= shamt < 32:
        raise ValueError(f'Invalid shift amount: {shamt}')
    return (Opcode.SPECIAL << 26) | (_reg(rs) << 21) | (_reg(rt) << 16) | (_reg(rd) << 11) | (shamt << 6) | funct


def i_type(opcode: int, rt: int, rs: int, immediate: int) -> int:
    return (opcode << 26) | (_reg(rs) << 21) | (_reg(rt) << 16) | _imm16(immediate)


def j_type(opcode: int, index: int) -> int:
    if not 0 <= index < 2**26:
        raise ValueError(f'Jump index out of range: {index}')
    return (opcode << 26) | index


def nop() -> int:
    return 0


def add(rd: int, rs: int, rt: int) -> int:
    return r_type(Funct.ADD, rd, rs, rt)


def sub(rd: int, rs: int, rt: int) -> int:
    return r_type(Funct.SUB, rd, rs, rt)


def and_(rd: int, rs: int, rt: int) -> int:
    return r_type(Funct.AND, rd, rs, rt)


def or_(rd: int, rs: int, rt: int) -> int:
    return r_type(Funct.OR, rd, rs, rt)


def slt(rd: int, rs: int, rt: int) -> int:
    return r_type(Funct.SLT, rd, rs, rt)


def sll(rd: int, rt: int, shamt: int) -> int:
    return r_type(Funct.SLL, rd, 0, rt, shamt)


def srl(rd: int, rt: int, shamt: int) -> int:
    return r_type(Funct.SRL, rd, 0, rt, shamt)


def addi(rt: int, rs: int, immediate: int) -> int:
    return i_type(Opcode.ADDI, rt, rs, immediate)


def andi(rt: int, rs: int, immediate: int) -> int:
    return i_type(Opcode.ANDI, rt, rs, immediate)


def ori(rt: int, rs: int, immediate: int) -> int:
    return i_type(Opcode.ORI, rt, rs, immediate)


def lui(rt: int, immediate: int) -> int:
    return i_type(Opcode.LUI, rt, 0, immediate)


def lw(rt: int, offset: int, base: int) -> int:
    return i_type(Opcode.LW, rt, base, offset)


def sw(rt: int, offset: int, base: int) -> int:
    return i_type(Opcode.SW, rt, base, offset)


def beq(rs: int, rt: int, offset: int) -> int:
    return i_type(Opcode.BEQ, rt, rs, offset)


def j(index: int) -> int:
    return j_type(Opcode.J, index)


def jal(index: int) -> int:
    return j_type(Opcode.JAL, index)


_r_mnemonics = {
    Funct.ADD: 'add',
    Funct.SUB: 'sub',
    Funct.AND: 'and',
    Funct.OR:  'or',
    Funct.SLT: 'slt',
    Funct.SLL: 'sll',
    Funct.SRL: 'srl'
}

_i_mnemonics = {
    Opcode.ANDI: 'andi',
    Opcode.ORI:  'ori'
}


def disassemble(word: int) -> str:
    opcode = (word >> 26) & 0x3F
    rs     = (word >> 21) & 0x1F
    rt     = (word >> 16) & 0x1F
    rd     = (word >> 11) & 0x1F
    shamt  = (word >> 6) & 0x1F
    funct  = word & 0x3F
    uimm   = word & 0xFFFF
    simm   = uimm - 0x10000 if uimm & 0x8000 else uimm
    index  = word & 0x3FFFFFF

    if word == 0:
        return 'nop'
    if opcode == Opcode.SPECIAL and funct in _r_mnemonics:
        name = _r_mnemonics[funct]
        if funct in (Funct.SLL, Funct.SRL):
            return f'{name} r{rd}, r{rt}, {shamt}'
        return f'{name} r{rd}, r{rs}, r{rt}'
    if opcode == Opcode.ADDI:
        return f'addi r{rt}, r{rs}, {simm}'
    if opcode in _i_mnemonics:
        return f'{_i_mnemonics[opcode]} r{rt}, r{rs}, {uimm:#x}'
    if opcode == Opcode.LUI:
        return f'lui r{rt}, {uimm:#x}'
    if opcode == Opcode.LW:
        return f'lw r{rt}, {simm}(r{rs})'
    if opcode == Opcode.SW:
        return f'sw r{rt}, {simm}(r{rs})'
    if opcode == Opcode.BEQ:
        return f'beq r{rs}, r{rt}, {simm}'
    if opcode == Opcode.J:
        return f'j {index << 2:#x}'
    if opcode == Opcode.JAL:
        return f'jal {index << 2:#x}'
    return f'.word {word:#010x}'
