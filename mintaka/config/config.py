import os
import yaml
from typing import Dict

logo = r'''--------------------------------------------------
     __  __ _       _        _
    |  \/  (_)_ __ | |_ __ _| | ____ _
    | |\/| | | '_ \| __/ _` | |/ / _` |
    | |  | | | | | | || (_| |   < (_| |
    |_|  |_|_|_| |_|\__\__,_|_|\_\__,_|

    A 5-stage pipelined MIPS core based on Amaranth
--------------------------------------------------'''

header = '''\033[1;33m{logo}\033[0m

\033[0;32mConfiguration\033[0;0m
Variant name: {variant}
Path config file: {configfile}

\033[0;32mBuild parameters\033[0;0m'''

defaults = {
    'memory_imem_depth':  256,
    'memory_dmem_depth':  256,
    'simulation_cycles':  200,
    'simulation_program': None
}


def load_config(variant: str, configfile: str, verbose: bool) -> Dict:
    if not os.path.isfile(configfile):
        raise RuntimeError(f'Configuration file does not exist: {configfile}')

    with open(configfile) as f:
        core_config = yaml.safe_load(f) or {}
    if not isinstance(core_config, dict):
        raise RuntimeError(f'Unable to parse configuration file: {configfile}')

    config = dict(defaults)
    for key, item in core_config.items():
        if isinstance(item, dict):
            for k2, i2 in item.items():
                config['{}_{}'.format(key, k2)] = i2
        else:
            config[key] = item

    if verbose:
        print(header.format(logo=logo, variant=variant, configfile=configfile))
        for key, item in core_config.items():
            if isinstance(item, dict):
                print(f'{key}:')
                for k2, i2 in item.items():
                    print(f'- {k2}: {i2}')
            else:
                print(f'{key}: {item}')
        print('--------------------------------------------------')

    return config
