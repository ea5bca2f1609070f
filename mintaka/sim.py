from amaranth.sim import Simulator
from dataclasses import dataclass
from mintaka.system import MintakaSystem
from typing import Iterable, List, Optional


@dataclass
class StepRecord:
    cycle: int
    pc: int                 # fetch address
    instruction: int        # instruction in decode (0 for a bubble)
    stall: bool
    flush: bool
    retired: Optional[int]  # pc of the instruction in writeback
    result: int             # last value committed to the register file


@dataclass
class SimulationResult:
    trace: List[StepRecord]
    registers: List[int]
    memory: List[int]

    @property
    def stall_count(self) -> int:
        return sum(step.stall for step in self.trace)

    @property
    def retired(self) -> List[int]:
        return [step.retired for step in self.trace if step.retired is not None]


def simulate(program: Iterable[int], data: Optional[Iterable[int]] = None, cycles: int = 200,
             imem_depth: int = 256, dmem_depth: int = 256, vcd_file: Optional[str] = None) -> SimulationResult:
    """
    Run `program` for `cycles` clock steps.

    Each trace entry samples the combinational state of a step before the
    clock edge commits it. Registers and data memory are read after the last
    step.
    """
    if cycles < 0:
        raise ValueError(f'Invalid number of cycles: {cycles}')

    system = MintakaSystem(program, data, imem_depth=imem_depth, dmem_depth=dmem_depth)
    core   = system.core
    result = SimulationResult(trace=[], registers=[], memory=[])

    async def bench(ctx):
        for cycle in range(cycles):
            retired = ctx.get(core.retire_pc) if ctx.get(core.retire_valid) else None
            result.trace.append(StepRecord(
                cycle=cycle,
                pc=ctx.get(core.pc),
                instruction=ctx.get(core.decode_instruction),
                stall=bool(ctx.get(core.stall)),
                flush=bool(ctx.get(core.flush)),
                retired=retired,
                result=ctx.get(core.result)
            ))
            await ctx.tick()

        result.registers.extend(ctx.get(core.gpr.mem.data[index]) for index in range(32))
        result.memory.extend(ctx.get(system.dmem.data[index]) for index in range(dmem_depth))

    sim = Simulator(system)
    sim.add_clock(1e-6)
    sim.add_testbench(bench)
    if vcd_file is not None:
        with sim.write_vcd(vcd_file):
            sim.run()
    else:
        sim.run()

    return result
