import pytest
from amaranth import Signal
from mintaka.stage import Stage


def test_reserved_name():
    with pytest.raises(ValueError):
        Stage('bad', {'valid': 1})


def test_transitions(run_testbench):
    dut   = Stage('test', {'data': 8})
    kill  = Signal()
    stall = Signal()
    dut.add_kill_source(kill)
    dut.add_stall_source(stall)

    async def bench(ctx):
        # starts as a bubble
        assert ctx.get(dut.source.valid) == 0
        assert ctx.get(dut.source.data) == 0

        ctx.set(dut.sink, {'valid': 1, 'data': 0x5A})
        await ctx.tick()
        assert ctx.get(dut.source.valid) == 1
        assert ctx.get(dut.source.data) == 0x5A

        # hold
        ctx.set(dut.sink, {'valid': 1, 'data': 0x11})
        ctx.set(stall, 1)
        assert ctx.get(dut.stall) == 1
        await ctx.tick()
        assert ctx.get(dut.source.data) == 0x5A

        # flush wins over stall
        ctx.set(kill, 1)
        assert ctx.get(dut.kill) == 1
        await ctx.tick()
        assert ctx.get(dut.source.valid) == 0
        assert ctx.get(dut.source.data) == 0

        # advance
        ctx.set(kill, 0)
        ctx.set(stall, 0)
        await ctx.tick()
        assert ctx.get(dut.source.valid) == 1
        assert ctx.get(dut.source.data) == 0x11

    run_testbench(dut, bench, clocked=True)
