import os
import pytest
from mintaka.config.config import load_config

root = os.path.dirname(os.path.dirname(os.path.realpath(__file__)))


def test_flattened_sections(tmp_path):
    path = tmp_path / 'custom.yml'
    path.write_text(
        'memory:\n'
        '  imem_depth: 64\n'
        'simulation:\n'
        '  cycles: 42\n'
        '  program: foo.hex\n'
    )
    config = load_config('custom', str(path), verbose=False)

    assert config['memory_imem_depth'] == 64
    assert config['memory_dmem_depth'] == 256  # default
    assert config['simulation_cycles'] == 42
    assert config['simulation_program'] == 'foo.hex'


@pytest.mark.parametrize('variant', ['default', 'small'])
def test_shipped_variants(variant):
    config = load_config(variant, f'{root}/configurations/mintaka_{variant}.yml', verbose=False)
    for key in ('memory_imem_depth', 'memory_dmem_depth'):
        depth = config[key]
        assert depth > 0 and depth & (depth - 1) == 0


def test_verbose_prints_configuration(tmp_path, capsys):
    path = tmp_path / 'custom.yml'
    path.write_text('memory:\n  dmem_depth: 16\n')
    load_config('custom', str(path), verbose=True)

    out = capsys.readouterr().out
    assert 'Variant name: custom' in out
    assert '- dmem_depth: 16' in out


def test_missing_file(tmp_path):
    with pytest.raises(RuntimeError):
        load_config('custom', str(tmp_path / 'missing.yml'), verbose=False)


def test_not_a_mapping(tmp_path):
    path = tmp_path / 'bad.yml'
    path.write_text('- 1\n- 2\n')
    with pytest.raises(RuntimeError):
        load_config('custom', str(path), verbose=False)
