from amaranth import Module
from amaranth import Signal
from amaranth import Elaboratable
from amaranth import unsigned
from amaranth.build import Platform
from amaranth.lib.memory import Memory


class RegisterFile(Elaboratable):
    '''32 x 32-bit general purpose registers.

    Two combinational read ports, one write port committed on the clock edge.
    Reads of the register being written in the same step return the new value.
    Register 0 reads as zero and ignores writes.
    '''
    def __init__(self) -> None:
        self.rp1_addr = Signal(5)   # Input
        self.rp1_data = Signal(32)  # Output
        self.rp2_addr = Signal(5)   # Input
        self.rp2_data = Signal(32)  # Output
        self.wp_addr  = Signal(5)   # Input
        self.wp_data  = Signal(32)  # Input
        self.wp_en    = Signal()    # Input

        self.mem  = Memory(shape=unsigned(32), depth=32, init=[])
        self._rp1 = self.mem.read_port(domain='comb')
        self._rp2 = self.mem.read_port(domain='comb')
        self._wp  = self.mem.write_port()

    def elaborate(self, platform: Platform) -> Module:
        m = Module()
        m.submodules.mem = self.mem

        we = Signal()
        m.d.comb += [
            we.eq(self.wp_en & (self.wp_addr != 0)),
            self._wp.addr.eq(self.wp_addr),
            self._wp.data.eq(self.wp_data),
            self._wp.en.eq(we)
        ]

        for port, addr, data in ((self._rp1, self.rp1_addr, self.rp1_data),
                                 (self._rp2, self.rp2_addr, self.rp2_data)):
            m.d.comb += port.addr.eq(addr)
            with m.If(addr == 0):
                m.d.comb += data.eq(0)
            with m.Elif(we & (self.wp_addr == addr)):
                m.d.comb += data.eq(self.wp_data)  # write-through
            with m.Else():
                m.d.comb += data.eq(port.data)

        return m
