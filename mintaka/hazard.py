from amaranth import Module
from amaranth import Signal
from amaranth import Elaboratable
from amaranth.build import Platform


class HazardUnit(Elaboratable):
    def __init__(self) -> None:
        self.x_mem_read    = Signal()   # Input: load in execute
        self.x_rd          = Signal(5)  # Input
        self.d_rs          = Signal(5)  # Input
        self.d_rt          = Signal(5)  # Input
        self.d_take_branch = Signal()   # Input
        self.stall         = Signal()   # Output
        self.branch_flush  = Signal()   # Output

    def elaborate(self, platform: Platform) -> Module:
        m = Module()

        # load-use: the loaded value is not available before writeback
        m.d.comb += self.stall.eq(
            self.x_mem_read & (self.x_rd != 0) & ((self.x_rd == self.d_rs) | (self.x_rd == self.d_rt))
        )
        m.d.comb += self.branch_flush.eq(self.d_take_branch)

        return m
