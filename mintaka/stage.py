from amaranth import Module
from amaranth import Signal
from amaranth import Elaboratable
from amaranth.build import Platform
from amaranth.lib.data import StructLayout
from functools import reduce
from operator import or_
from typing import Dict, List, Any

Layout = Dict[str, Any]


class Stage(Elaboratable):
    '''Pipeline latch between two stages.

    `sink` is the value computed by the upstream stage during the current
    step, `source` is the latched value seen by the downstream stage. Every
    clock edge the latch is flushed (bubble), held, or advanced, in that
    order of priority. The domain reset also loads the bubble.
    '''
    def __init__(self, name: str, layout: Layout) -> None:
        # check for reserved keywords. I will add these signals later
        for item in layout:
            if item == 'valid':
                raise ValueError(f'{item} cannot be used as a signal in the stage layout')

        full_layout = StructLayout({
            'valid': 1,  # 0 = bubble
            **layout
        })

        self.name   = name
        self.kill   = Signal(name=f'{name}_kill')
        self.stall  = Signal(name=f'{name}_stall')
        self.sink   = Signal(full_layout, name=f'{name}_sink')
        self.source = Signal(full_layout, name=f'{name}_source')

        self._kill_sources: List[Signal]  = []
        self._stall_sources: List[Signal] = []

    def add_kill_source(self, source: Signal) -> None:
        self._kill_sources.append(source)

    def add_stall_source(self, source: Signal) -> None:
        self._stall_sources.append(source)

    def elaborate(self, platform: Platform) -> Module:
        m = Module()

        m.d.comb += [
            self.kill.eq(reduce(or_, self._kill_sources, 0)),
            self.stall.eq(reduce(or_, self._stall_sources, 0))
        ]

        with m.If(self.kill):
            m.d.sync += self.source.as_value().eq(0)
        with m.Elif(~self.stall):
            m.d.sync += self.source.eq(self.sink)

        return m
