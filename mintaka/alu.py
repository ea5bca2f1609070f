from amaranth import Module
from amaranth import Signal
from amaranth import Elaboratable
from amaranth.build import Platform
from mintaka.isa import AluOp


class ArithmeticUnit(Elaboratable):
    def __init__(self) -> None:
        self.a      = Signal(32)     # Input
        self.b      = Signal(32)     # Input
        self.op     = Signal(AluOp)  # Input
        self.shamt  = Signal(5)      # Input
        self.result = Signal(32)     # Output
        self.zero   = Signal()       # Output

    def elaborate(self, platform: Platform) -> Module:
        m = Module()

        with m.Switch(self.op):
            with m.Case(AluOp.Add):
                m.d.comb += self.result.eq(self.a + self.b)
            with m.Case(AluOp.Sub):
                m.d.comb += self.result.eq(self.a - self.b)
            with m.Case(AluOp.And):
                m.d.comb += self.result.eq(self.a & self.b)
            with m.Case(AluOp.Or):
                m.d.comb += self.result.eq(self.a | self.b)
            with m.Case(AluOp.SetLessThan):
                # unsigned comparison
                m.d.comb += self.result.eq(self.a < self.b)
            with m.Case(AluOp.ShiftLeft):
                m.d.comb += self.result.eq(self.b << self.shamt)
            with m.Case(AluOp.ShiftRight):
                m.d.comb += self.result.eq(self.b >> self.shamt)
            with m.Default():
                m.d.comb += self.result.eq(0)

        m.d.comb += self.zero.eq(self.result == 0)

        return m
