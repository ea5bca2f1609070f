from amaranth import Cat
from amaranth import Mux
from amaranth import Const
from amaranth import Signal
from amaranth import Module
from amaranth import Elaboratable
from amaranth import signed
from amaranth import ResetSignal
from amaranth.build import Platform
from mintaka.alu import ArithmeticUnit
from mintaka.gpr import RegisterFile
from mintaka.stage import Stage
from mintaka.hazard import HazardUnit
from mintaka.decoder import DecoderUnit
from mintaka.forwarding import ForwardingUnit
from mintaka.isa import LINK_REGISTER
from mintaka.isa import RegDst
from mintaka.isa import AluSrc
from mintaka.isa import MemToReg
from mintaka.isa import ImmExt
from mintaka.isa import ForwardSource
from mintaka.layout import control_layout
from mintaka.layout import _fd_layout
from mintaka.layout import _dx_layout
from mintaka.layout import _xm_layout
from mintaka.layout import _mw_layout
from typing import List


class Mintaka(Elaboratable):
    def __init__(self) -> None:
        # instruction store
        self.imem_addr  = Signal(30)  # output (word address)
        self.imem_data  = Signal(32)  # input
        # data store
        self.dmem_addr  = Signal(30)  # output (word address)
        self.dmem_wdata = Signal(32)  # output
        self.dmem_we    = Signal()    # output
        self.dmem_re    = Signal()    # output
        self.dmem_rdata = Signal(32)  # input
        # observation
        self.pc                 = Signal(32)  # output
        self.result             = Signal(32)  # output: last value written by writeback
        self.stall              = Signal()    # output
        self.flush              = Signal()    # output
        self.decode_instruction = Signal(32)  # output
        self.retire_valid       = Signal()    # output
        self.retire_pc          = Signal(32)  # output

        self.gpr = RegisterFile()

    def port_list(self) -> List[Signal]:
        return [
            self.imem_addr,
            self.imem_data,
            self.dmem_addr,
            self.dmem_wdata,
            self.dmem_we,
            self.dmem_re,
            self.dmem_rdata,
            self.pc,
            self.result,
            self.stall,
            self.flush,
            self.decode_instruction,
            self.retire_valid,
            self.retire_pc
        ]

    def elaborate(self, platform: Platform) -> Module:
        cpu = Module()
        # ----------------------------------------------------------------------
        # create the pipeline latches
        fd = cpu.submodules.fd = Stage('fd', _fd_layout)
        dx = cpu.submodules.dx = Stage('dx', _dx_layout)
        xm = cpu.submodules.xm = Stage('xm', _xm_layout)
        mw = cpu.submodules.mw = Stage('mw', _mw_layout)
        # ----------------------------------------------------------------------
        # units
        alu     = cpu.submodules.alu     = ArithmeticUnit()
        decoder = cpu.submodules.decoder = DecoderUnit()
        hazard  = cpu.submodules.hazard  = HazardUnit()
        x_fwd   = cpu.submodules.x_fwd   = ForwardingUnit()
        d_fwd   = cpu.submodules.d_fwd   = ForwardingUnit()
        gpr     = cpu.submodules.gpr     = self.gpr
        # ----------------------------------------------------------------------
        # forward declaration of signals
        m_result        = Signal(32)
        w_result        = Signal(32)
        d_take_branch   = Signal()
        d_jump          = Signal()
        d_branch_target = Signal(32)
        d_jump_target   = Signal(32)

        def forwarded(select: Signal, value: Signal, name: str) -> Signal:
            data = Signal(32, name=name)
            with cpu.Switch(select):
                with cpu.Case(ForwardSource.Memory):
                    cpu.d.comb += data.eq(m_result)
                with cpu.Case(ForwardSource.Writeback):
                    cpu.d.comb += data.eq(w_result)
                with cpu.Default():
                    cpu.d.comb += data.eq(value)
            return data
        # ----------------------------------------------------------------------
        # Fetch Stage
        f_pc4 = Signal(32)

        cpu.d.comb += [
            f_pc4.eq(self.pc + 4),
            self.imem_addr.eq(self.pc[2:])
        ]

        cpu.d.comb += [
            fd.sink.valid.eq(1),
            fd.sink.pc4.eq(f_pc4),
            fd.sink.instruction.eq(self.imem_data)
        ]

        # select next pc
        with cpu.If(~hazard.stall):
            with cpu.If(d_jump):
                cpu.d.sync += self.pc.eq(d_jump_target)
            with cpu.Elif(d_take_branch):
                cpu.d.sync += self.pc.eq(d_branch_target)
            with cpu.Else():
                cpu.d.sync += self.pc.eq(f_pc4)

        fd.add_kill_source(d_take_branch)
        fd.add_kill_source(d_jump)
        fd.add_kill_source(hazard.branch_flush)
        fd.add_stall_source(hazard.stall)
        # ----------------------------------------------------------------------
        # Decode Stage
        instruction = fd.source.instruction
        d_rs        = Signal(5)
        d_rt        = Signal(5)
        d_rd        = Signal(5)
        d_imm16     = Signal(16)
        d_immediate = Signal(32)
        d_offset    = Signal(signed(32))
        d_control   = Signal(control_layout)

        cpu.d.comb += [
            d_rs.eq(instruction[21:26]),
            d_rt.eq(instruction[16:21]),
            d_imm16.eq(instruction[:16]),
            decoder.opcode.eq(instruction[26:32]),
            decoder.funct.eq(instruction[:6])
        ]

        # a bubble decodes as a no-op
        with cpu.If(fd.source.valid):
            cpu.d.comb += d_control.eq(decoder.control)

        with cpu.Switch(d_control.imm_ext):
            with cpu.Case(ImmExt.SignExtend):
                cpu.d.comb += d_immediate.eq(d_imm16.as_signed())
            with cpu.Case(ImmExt.ZeroExtend):
                cpu.d.comb += d_immediate.eq(d_imm16)
            with cpu.Case(ImmExt.UpperShift16):
                cpu.d.comb += d_immediate.eq(Cat(Const(0, 16), d_imm16))

        with cpu.Switch(d_control.reg_dst):
            with cpu.Case(RegDst.UseRt):
                cpu.d.comb += d_rd.eq(d_rt)
            with cpu.Case(RegDst.UseRd):
                cpu.d.comb += d_rd.eq(instruction[11:16])
            with cpu.Case(RegDst.UseLinkReg):
                cpu.d.comb += d_rd.eq(LINK_REGISTER)

        cpu.d.comb += [
            gpr.rp1_addr.eq(d_rs),
            gpr.rp2_addr.eq(d_rt),
            gpr.wp_addr.eq(mw.source.rd),
            gpr.wp_data.eq(w_result),
            gpr.wp_en.eq(mw.source.reg_write & ~ResetSignal())
        ]

        # branch resolution. Same forwarding rules as the execute stage.
        cpu.d.comb += [
            d_fwd.rs.eq(d_rs),
            d_fwd.rt.eq(d_rt),
            d_fwd.m_rd.eq(xm.source.rd),
            d_fwd.m_we.eq(xm.source.reg_write),
            d_fwd.w_rd.eq(mw.source.rd),
            d_fwd.w_we.eq(mw.source.reg_write)
        ]

        d_rs_value = forwarded(d_fwd.fwd_a, gpr.rp1_data, 'd_rs_value')
        d_rt_value = forwarded(d_fwd.fwd_b, gpr.rp2_data, 'd_rt_value')

        # branch offsets are always sign extended
        cpu.d.comb += [
            d_offset.eq(d_imm16.as_signed() << 2),
            d_branch_target.eq(fd.source.pc4 + d_offset),
            d_jump_target.eq(Cat(Const(0, 2), instruction[:26], fd.source.pc4[28:32])),
            d_take_branch.eq(d_control.branch & (d_rs_value == d_rt_value)),
            d_jump.eq(d_control.jump)
        ]

        cpu.d.comb += [
            hazard.x_mem_read.eq(dx.source.mem_read),
            hazard.x_rd.eq(dx.source.rd),
            hazard.d_rs.eq(d_rs),
            hazard.d_rt.eq(d_rt),
            hazard.d_take_branch.eq(d_take_branch)
        ]

        cpu.d.comb += [
            dx.sink.valid.eq(fd.source.valid),
            dx.sink.pc4.eq(fd.source.pc4),
            dx.sink.rs.eq(d_rs),
            dx.sink.rt.eq(d_rt),
            dx.sink.rd.eq(d_rd),
            dx.sink.rs_data.eq(gpr.rp1_data),
            dx.sink.rt_data.eq(gpr.rp2_data),
            dx.sink.immediate.eq(d_immediate),
            dx.sink.shamt.eq(instruction[6:11]),
            dx.sink.alu_src.eq(d_control.alu_src),
            dx.sink.alu_op.eq(d_control.alu_op),
            dx.sink.mem_read.eq(d_control.mem_read),
            dx.sink.mem_write.eq(d_control.mem_write),
            dx.sink.reg_write.eq(d_control.reg_write),
            dx.sink.mem_to_reg.eq(d_control.mem_to_reg)
        ]

        # insert one bubble on a load-use stall. Never killed by branch/jump:
        # a JAL past decode still has to write the link register.
        dx.add_kill_source(hazard.stall)
        # ----------------------------------------------------------------------
        # Execute Stage
        cpu.d.comb += [
            x_fwd.rs.eq(dx.source.rs),
            x_fwd.rt.eq(dx.source.rt),
            x_fwd.m_rd.eq(xm.source.rd),
            x_fwd.m_we.eq(xm.source.reg_write),
            x_fwd.w_rd.eq(mw.source.rd),
            x_fwd.w_we.eq(mw.source.reg_write)
        ]

        x_a_value = forwarded(x_fwd.fwd_a, dx.source.rs_data, 'x_a_value')
        x_b_value = forwarded(x_fwd.fwd_b, dx.source.rt_data, 'x_b_value')

        cpu.d.comb += [
            alu.a.eq(x_a_value),
            alu.b.eq(Mux(dx.source.alu_src == AluSrc.Immediate, dx.source.immediate, x_b_value)),
            alu.op.eq(dx.source.alu_op),
            alu.shamt.eq(dx.source.shamt)
        ]

        cpu.d.comb += [
            xm.sink.valid.eq(dx.source.valid),
            xm.sink.pc4.eq(dx.source.pc4),
            xm.sink.rd.eq(dx.source.rd),
            xm.sink.result.eq(alu.result),
            xm.sink.store_data.eq(x_b_value),
            xm.sink.mem_read.eq(dx.source.mem_read),
            xm.sink.mem_write.eq(dx.source.mem_write),
            xm.sink.reg_write.eq(dx.source.reg_write),
            xm.sink.mem_to_reg.eq(dx.source.mem_to_reg)
        ]
        # ----------------------------------------------------------------------
        # Memory Stage
        cpu.d.comb += [
            self.dmem_addr.eq(xm.source.result[2:]),
            self.dmem_wdata.eq(xm.source.store_data),
            self.dmem_we.eq(xm.source.mem_write & ~ResetSignal()),
            self.dmem_re.eq(xm.source.mem_read)
        ]

        # the value this instruction will commit in writeback
        cpu.d.comb += m_result.eq(Mux(xm.source.mem_to_reg == MemToReg.FromPcPlus4,
                                      xm.source.pc4, xm.source.result))

        cpu.d.comb += [
            mw.sink.valid.eq(xm.source.valid),
            mw.sink.pc4.eq(xm.source.pc4),
            mw.sink.rd.eq(xm.source.rd),
            mw.sink.result.eq(xm.source.result),
            mw.sink.load_data.eq(self.dmem_rdata),
            mw.sink.reg_write.eq(xm.source.reg_write),
            mw.sink.mem_to_reg.eq(xm.source.mem_to_reg)
        ]
        # ----------------------------------------------------------------------
        # Write-back stage
        with cpu.Switch(mw.source.mem_to_reg):
            with cpu.Case(MemToReg.FromMemory):
                cpu.d.comb += w_result.eq(mw.source.load_data)
            with cpu.Case(MemToReg.FromPcPlus4):
                cpu.d.comb += w_result.eq(mw.source.pc4)
            with cpu.Default():
                cpu.d.comb += w_result.eq(mw.source.result)

        with cpu.If(mw.source.reg_write & (mw.source.rd != 0)):
            cpu.d.sync += self.result.eq(w_result)
        # ----------------------------------------------------------------------
        # observation
        cpu.d.comb += [
            self.stall.eq(hazard.stall),
            self.flush.eq(fd.kill),
            self.decode_instruction.eq(Mux(fd.source.valid, instruction, 0)),
            self.retire_valid.eq(mw.source.valid),
            self.retire_pc.eq(mw.source.pc4 - 4)
        ]

        return cpu
