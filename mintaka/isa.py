"""
Reduced MIPS-I integer subset.
"""
from amaranth.lib import enum

LINK_REGISTER = 31


class Opcode:
    SPECIAL = 0b000000
    J       = 0b000010
    JAL     = 0b000011
    BEQ     = 0b000100
    ADDI    = 0b001000
    ANDI    = 0b001100
    ORI     = 0b001101
    LUI     = 0b001111
    LW      = 0b100011
    SW      = 0b101011


class Funct:
    SLL = 0b000000
    SRL = 0b000010
    ADD = 0b100000
    SUB = 0b100010
    AND = 0b100100
    OR  = 0b100101
    SLT = 0b101010


# Control fields. The zero encoding of every field is its inert value.
class RegDst(enum.Enum, shape=2):
    UseRt      = 0
    UseRd      = 1
    UseLinkReg = 2


class AluSrc(enum.Enum, shape=1):
    Register  = 0
    Immediate = 1


class MemToReg(enum.Enum, shape=2):
    FromAlu     = 0
    FromMemory  = 1
    FromPcPlus4 = 2


class AluOp(enum.Enum, shape=3):
    Add         = 0
    Sub         = 1
    And         = 2
    Or          = 3
    SetLessThan = 4
    ShiftLeft   = 5
    ShiftRight  = 6


class ImmExt(enum.Enum, shape=2):
    SignExtend   = 0
    ZeroExtend   = 1
    UpperShift16 = 2


class ForwardSource(enum.Enum, shape=2):
    NoForward  = 0
    Memory     = 1
    Writeback  = 2
