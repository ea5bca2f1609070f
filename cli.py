#!/usr/bin/env python3

import os
import argparse
from amaranth.back import rtlil
from amaranth.back import verilog
from mintaka.core import Mintaka
from mintaka.asm import disassemble
from mintaka.sim import simulate
from mintaka.program import DEFAULT_PROGRAM
from mintaka.program import load_program
from mintaka.config.config import logo
from mintaka.config.config import load_config

current_path = os.path.dirname(os.path.realpath(__file__))
cpu_variants = ['default', 'small', 'custom']
config_files = {variant: f'{current_path}/configurations/mintaka_{variant}.yml' for variant in cpu_variants}


def get_config(args):
    variant = args.variant
    if variant == 'custom':
        if args.config_file == '':
            raise RuntimeError('Configuration file empty for custom variant.')
        configfile = os.path.realpath(args.config_file)
    else:
        configfile = config_files[variant]

    return load_config(variant, configfile, args.verbose)


def generate_verilog(parser, args):
    cpu   = Mintaka()
    ports = cpu.port_list()

    if args.generate_type == 'il':
        output = rtlil.convert(cpu, name='mintaka_core', ports=ports)
    else:
        output = verilog.convert(cpu, name='mintaka_core', ports=ports)

    if args.generate_file:
        args.generate_file.write(output)
    else:
        print(output)


def run_simulation(parser, args):
    core_config  = get_config(args)
    program_file = args.program or core_config['simulation_program']
    cycles       = args.cycles if args.cycles is not None else core_config['simulation_cycles']

    program = load_program(program_file) if program_file else DEFAULT_PROGRAM
    data    = load_program(args.data) if args.data else None

    result = simulate(
        program,
        data,
        cycles=cycles,
        imem_depth=core_config['memory_imem_depth'],
        dmem_depth=core_config['memory_dmem_depth'],
        vcd_file=args.vcd
    )

    if args.trace:
        print('\033[0;32mTrace\033[0;0m')
        for step in result.trace:
            retired = f'{step.retired:#010x}' if step.retired is not None else '-'
            print(f'{step.cycle:5d}  pc={step.pc:#010x}  {disassemble(step.instruction):24s}'
                  f'  stall={int(step.stall)} flush={int(step.flush)}  retire={retired}')
        print('--------------------------------------------------')

    print('\033[0;32mRegisters\033[0;0m')
    for index in range(0, 32, 4):
        print('  '.join(f'r{i:<2d}={result.registers[i]:#010x}' for i in range(index, index + 4)))
    print('\033[0;32mData memory (non-zero)\033[0;0m')
    for index, word in enumerate(result.memory):
        if word:
            print(f'{index << 2:#010x}: {word:#010x}')
    print(f'{cycles} cycles, {len(result.retired)} retired, {result.stall_count} stalls')
    print('--------------------------------------------------')


def main() -> None:
    class custom_formatter(argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter):
        pass

    parser = argparse.ArgumentParser(
        formatter_class=custom_formatter,
        description='''\033[1;33m{}\033[0m'''.format(logo)
    )

    # --------------------------------------------------------------------------
    # add arguments to parser
    parser.add_argument(
        '--variant',
        choices=cpu_variants,
        default='default',
        help='cpu variant'
    )
    parser.add_argument(
        '--config-file',
        default='',
        help='configuration file for custom variants'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='print the configuration file'
    )
    actions = parser.add_subparsers(dest='action')

    p_generate = actions.add_parser('generate', help='generate RTLIL or Verilog for the core')
    p_generate.add_argument(
        '-t', '--type',
        dest='generate_type',
        choices=['il', 'v'],
        default='v',
        help='generate RTLIL or Verilog'
    )
    p_generate.add_argument(
        'generate_file',
        metavar='FILE',
        type=argparse.FileType('w'),
        nargs='?',
        help='write generated code to FILE'
    )

    p_simulate = actions.add_parser('simulate', help='run a program on the core')
    p_simulate.add_argument(
        '--program',
        default=None,
        help='program file, one instruction word per line (default: built-in program)'
    )
    p_simulate.add_argument(
        '--data',
        default=None,
        help='initial data memory image, same format as the program'
    )
    p_simulate.add_argument(
        '--cycles',
        type=int,
        default=None,
        help='number of clock cycles (default: from configuration)'
    )
    p_simulate.add_argument(
        '--vcd',
        default=None,
        help='write waveforms to this VCD file'
    )
    p_simulate.add_argument(
        '--trace',
        action='store_true',
        help='print the pipeline state of every cycle'
    )
    # --------------------------------------------------------------------------
    args = parser.parse_args()

    if args.action == 'generate':
        generate_verilog(parser, args)
    elif args.action == 'simulate':
        run_simulation(parser, args)
    else:
        print('No valid actions.')
        print('--------------------------------------------------')
        parser.print_help()


if __name__ == '__main__':
    main()
