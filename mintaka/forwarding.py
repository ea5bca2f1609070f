from amaranth import Module
from amaranth import Signal
from amaranth import Elaboratable
from amaranth.build import Platform
from mintaka.isa import ForwardSource


def resolve_source(m: Module, select: Signal, src: Signal,
                   m_rd: Signal, m_we: Signal, w_rd: Signal, w_we: Signal) -> None:
    """
    Drive `select` with the stage that holds the newest value of `src`.

    The memory stage is younger than the writeback stage, so it wins when
    both write the same register. Writers targeting r0 never forward.
    """
    with m.If(m_we & (m_rd != 0) & (m_rd == src)):
        m.d.comb += select.eq(ForwardSource.Memory)
    with m.Elif(w_we & (w_rd != 0) & (w_rd == src)):
        m.d.comb += select.eq(ForwardSource.Writeback)
    with m.Else():
        m.d.comb += select.eq(ForwardSource.NoForward)


class ForwardingUnit(Elaboratable):
    def __init__(self) -> None:
        self.rs    = Signal(5)              # Input
        self.rt    = Signal(5)              # Input
        self.m_rd  = Signal(5)              # Input
        self.m_we  = Signal()               # Input
        self.w_rd  = Signal(5)              # Input
        self.w_we  = Signal()               # Input
        self.fwd_a = Signal(ForwardSource)  # Output: source for rs
        self.fwd_b = Signal(ForwardSource)  # Output: source for rt

    def elaborate(self, platform: Platform) -> Module:
        m = Module()

        resolve_source(m, self.fwd_a, self.rs, self.m_rd, self.m_we, self.w_rd, self.w_we)
        resolve_source(m, self.fwd_b, self.rt, self.m_rd, self.m_we, self.w_rd, self.w_we)

        return m
