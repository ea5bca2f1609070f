import pytest
from mintaka import isa
from mintaka.decoder import DecoderUnit
from mintaka.isa import Opcode, Funct
from mintaka.isa import RegDst, AluSrc, MemToReg, AluOp, ImmExt

enum_fields = {
    'reg_dst':    RegDst,
    'alu_src':    AluSrc,
    'mem_to_reg': MemToReg,
    'alu_op':     AluOp,
    'imm_ext':    ImmExt
}
flag_fields = ('mem_read', 'mem_write', 'reg_write', 'branch', 'jump')

inert = dict(
    reg_dst=RegDst.UseRt, alu_src=AluSrc.Register, mem_to_reg=MemToReg.FromAlu,
    alu_op=AluOp.Add, imm_ext=ImmExt.SignExtend,
    mem_read=0, mem_write=0, reg_write=0, branch=0, jump=0
)


def r_op(op):
    return dict(inert, reg_dst=RegDst.UseRd, alu_op=op, reg_write=1)


def i_op(op, ext):
    return dict(inert, reg_dst=RegDst.UseRt, alu_src=AluSrc.Immediate, alu_op=op, imm_ext=ext, reg_write=1)


expected = {
    'add':  (Opcode.SPECIAL, Funct.ADD, r_op(AluOp.Add)),
    'sub':  (Opcode.SPECIAL, Funct.SUB, r_op(AluOp.Sub)),
    'and':  (Opcode.SPECIAL, Funct.AND, r_op(AluOp.And)),
    'or':   (Opcode.SPECIAL, Funct.OR,  r_op(AluOp.Or)),
    'slt':  (Opcode.SPECIAL, Funct.SLT, r_op(AluOp.SetLessThan)),
    'sll':  (Opcode.SPECIAL, Funct.SLL, r_op(AluOp.ShiftLeft)),
    'srl':  (Opcode.SPECIAL, Funct.SRL, r_op(AluOp.ShiftRight)),
    'lw':   (Opcode.LW, 0, dict(i_op(AluOp.Add, ImmExt.SignExtend), mem_to_reg=MemToReg.FromMemory, mem_read=1)),
    'sw':   (Opcode.SW, 0, dict(inert, alu_src=AluSrc.Immediate, mem_write=1)),
    'beq':  (Opcode.BEQ, 0, dict(inert, alu_op=AluOp.Sub, branch=1)),
    'addi': (Opcode.ADDI, 0, i_op(AluOp.Add, ImmExt.SignExtend)),
    'andi': (Opcode.ANDI, 0, i_op(AluOp.And, ImmExt.ZeroExtend)),
    'ori':  (Opcode.ORI, 0, i_op(AluOp.Or, ImmExt.ZeroExtend)),
    'lui':  (Opcode.LUI, 0, i_op(AluOp.Add, ImmExt.UpperShift16)),
    'j':    (Opcode.J, 0, dict(inert, jump=1)),
    'jal':  (Opcode.JAL, 0, dict(inert, reg_dst=RegDst.UseLinkReg, mem_to_reg=MemToReg.FromPcPlus4,
                                 reg_write=1, jump=1)),
}


def read_control(ctx, dut):
    return {name: ctx.get(getattr(dut.control, name)) for name in (*enum_fields, *flag_fields)}


@pytest.mark.parametrize('name', sorted(expected))
def test_instruction(run_testbench, name):
    opcode, funct, control = expected[name]
    dut = DecoderUnit()

    async def bench(ctx):
        ctx.set(dut.opcode, opcode)
        ctx.set(dut.funct, funct)
        assert read_control(ctx, dut) == control

    run_testbench(dut, bench)


def test_non_special_opcodes_ignore_funct(run_testbench):
    dut = DecoderUnit()

    async def bench(ctx):
        ctx.set(dut.opcode, Opcode.ADDI)
        for funct in (0, Funct.SUB, 0x3F):
            ctx.set(dut.funct, funct)
            assert read_control(ctx, dut) == expected['addi'][2]

    run_testbench(dut, bench)


def test_total_and_inert_for_unknown_encodings(run_testbench):
    dut = DecoderUnit()
    known_opcodes = {Opcode.LW, Opcode.SW, Opcode.BEQ, Opcode.ADDI, Opcode.ANDI, Opcode.ORI,
                     Opcode.LUI, Opcode.J, Opcode.JAL}
    known_functs = {Funct.ADD, Funct.SUB, Funct.AND, Funct.OR, Funct.SLT, Funct.SLL, Funct.SRL}

    async def bench(ctx):
        for opcode in range(64):
            ctx.set(dut.opcode, opcode)
            for funct in range(64):
                ctx.set(dut.funct, funct)
                control = read_control(ctx, dut)
                for name, shape in enum_fields.items():
                    assert control[name] in list(shape), (opcode, funct, name)
                for name in flag_fields:
                    assert control[name] in (0, 1), (opcode, funct, name)

                known = opcode in known_opcodes or (opcode == Opcode.SPECIAL and funct in known_functs)
                if not known:
                    assert control == inert, (opcode, funct)

    run_testbench(dut, bench)


def test_isa_module_docstring():
    assert isa.__doc__.strip() == 'Reduced MIPS-I integer subset.'
