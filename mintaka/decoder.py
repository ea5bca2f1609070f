from amaranth import Module
from amaranth import Signal
from amaranth import Elaboratable
from amaranth.build import Platform
from mintaka.isa import Opcode
from mintaka.isa import Funct
from mintaka.isa import RegDst
from mintaka.isa import AluSrc
from mintaka.isa import MemToReg
from mintaka.isa import AluOp
from mintaka.isa import ImmExt
from mintaka.layout import control_layout


class DecoderUnit(Elaboratable):
    '''Map (opcode, funct) to the control-signal vector.

    Every encoding not listed below leaves the vector at its inert value, so
    unknown instructions retire as no-ops.
    '''
    def __init__(self) -> None:
        self.opcode  = Signal(6)               # Input
        self.funct   = Signal(6)               # Input
        self.control = Signal(control_layout)  # Output

    def elaborate(self, platform: Platform) -> Module:
        m = Module()

        ctrl = self.control

        def register_op(op):
            return [
                ctrl.reg_dst.eq(RegDst.UseRd),
                ctrl.alu_src.eq(AluSrc.Register),
                ctrl.mem_to_reg.eq(MemToReg.FromAlu),
                ctrl.alu_op.eq(op),
                ctrl.reg_write.eq(1)
            ]

        def immediate_op(op, ext):
            return [
                ctrl.reg_dst.eq(RegDst.UseRt),
                ctrl.alu_src.eq(AluSrc.Immediate),
                ctrl.mem_to_reg.eq(MemToReg.FromAlu),
                ctrl.alu_op.eq(op),
                ctrl.imm_ext.eq(ext),
                ctrl.reg_write.eq(1)
            ]

        with m.Switch(self.opcode):
            with m.Case(Opcode.SPECIAL):
                with m.Switch(self.funct):
                    with m.Case(Funct.ADD):
                        m.d.comb += register_op(AluOp.Add)
                    with m.Case(Funct.SUB):
                        m.d.comb += register_op(AluOp.Sub)
                    with m.Case(Funct.AND):
                        m.d.comb += register_op(AluOp.And)
                    with m.Case(Funct.OR):
                        m.d.comb += register_op(AluOp.Or)
                    with m.Case(Funct.SLT):
                        m.d.comb += register_op(AluOp.SetLessThan)
                    with m.Case(Funct.SLL):
                        m.d.comb += register_op(AluOp.ShiftLeft)
                    with m.Case(Funct.SRL):
                        m.d.comb += register_op(AluOp.ShiftRight)
            with m.Case(Opcode.LW):
                m.d.comb += [
                    ctrl.reg_dst.eq(RegDst.UseRt),
                    ctrl.alu_src.eq(AluSrc.Immediate),
                    ctrl.mem_to_reg.eq(MemToReg.FromMemory),
                    ctrl.alu_op.eq(AluOp.Add),
                    ctrl.imm_ext.eq(ImmExt.SignExtend),
                    ctrl.mem_read.eq(1),
                    ctrl.reg_write.eq(1)
                ]
            with m.Case(Opcode.SW):
                m.d.comb += [
                    ctrl.alu_src.eq(AluSrc.Immediate),
                    ctrl.alu_op.eq(AluOp.Add),
                    ctrl.imm_ext.eq(ImmExt.SignExtend),
                    ctrl.mem_write.eq(1)
                ]
            with m.Case(Opcode.BEQ):
                m.d.comb += [
                    ctrl.alu_op.eq(AluOp.Sub),
                    ctrl.imm_ext.eq(ImmExt.SignExtend),
                    ctrl.branch.eq(1)
                ]
            with m.Case(Opcode.ADDI):
                m.d.comb += immediate_op(AluOp.Add, ImmExt.SignExtend)
            with m.Case(Opcode.ANDI):
                m.d.comb += immediate_op(AluOp.And, ImmExt.ZeroExtend)
            with m.Case(Opcode.ORI):
                m.d.comb += immediate_op(AluOp.Or, ImmExt.ZeroExtend)
            with m.Case(Opcode.LUI):
                m.d.comb += immediate_op(AluOp.Add, ImmExt.UpperShift16)
            with m.Case(Opcode.J):
                m.d.comb += ctrl.jump.eq(1)
            with m.Case(Opcode.JAL):
                m.d.comb += [
                    ctrl.reg_dst.eq(RegDst.UseLinkReg),
                    ctrl.mem_to_reg.eq(MemToReg.FromPcPlus4),
                    ctrl.reg_write.eq(1),
                    ctrl.jump.eq(1)
                ]

        return m
