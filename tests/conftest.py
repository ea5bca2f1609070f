import pytest
from amaranth.sim import Simulator


@pytest.fixture
def run_testbench():
    def run(dut, bench, clocked=False):
        sim = Simulator(dut)
        if clocked:
            sim.add_clock(1e-6)
        sim.add_testbench(bench)
        sim.run()
    return run
