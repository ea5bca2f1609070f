from amaranth import Mux
from amaranth import Module
from amaranth import Elaboratable
from amaranth import unsigned
from amaranth.build import Platform
from amaranth.utils import exact_log2
from amaranth.lib.memory import Memory
from mintaka.core import Mintaka
from typing import Iterable, Optional


class MintakaSystem(Elaboratable):
    '''Core plus instruction and data stores.

    Both stores are word arrays indexed by address[2:], truncated to the
    store depth, so every address maps to some word.
    '''
    def __init__(self, program: Iterable[int], data: Optional[Iterable[int]] = None,
                 imem_depth: int = 256, dmem_depth: int = 256) -> None:
        program = list(program)
        data    = list(data) if data is not None else []

        # raises ValueError if not a power of 2
        self.imem_width = exact_log2(imem_depth)
        self.dmem_width = exact_log2(dmem_depth)

        if len(program) > imem_depth:
            raise ValueError(f'Program too large: {len(program)} words, instruction store holds {imem_depth}')
        if len(data) > dmem_depth:
            raise ValueError(f'Data image too large: {len(data)} words, data store holds {dmem_depth}')
        for word in program + data:
            if not 0 <= word < 2**32:
                raise ValueError(f'Invalid 32-bit word: {word:#x}')

        self.core = Mintaka()
        self.imem = Memory(shape=unsigned(32), depth=imem_depth, init=program)
        self.dmem = Memory(shape=unsigned(32), depth=dmem_depth, init=data)

        self._imem_rp = self.imem.read_port(domain='comb')
        self._dmem_rp = self.dmem.read_port(domain='comb')
        self._dmem_wp = self.dmem.write_port()

    def elaborate(self, platform: Platform) -> Module:
        m = Module()

        core = m.submodules.core = self.core
        m.submodules.imem = self.imem
        m.submodules.dmem = self.dmem

        m.d.comb += [
            self._imem_rp.addr.eq(core.imem_addr[:self.imem_width]),
            core.imem_data.eq(self._imem_rp.data)
        ]

        m.d.comb += [
            self._dmem_rp.addr.eq(core.dmem_addr[:self.dmem_width]),
            core.dmem_rdata.eq(Mux(core.dmem_re, self._dmem_rp.data, 0)),
            self._dmem_wp.addr.eq(core.dmem_addr[:self.dmem_width]),
            self._dmem_wp.data.eq(core.dmem_wdata),
            self._dmem_wp.en.eq(core.dmem_we)
        ]

        return m
