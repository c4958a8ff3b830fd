import json

import pytest
import yaml

from inisettings import (
    IniJsonExporter,
    IniSyntaxWarning,
    IniTable,
    IniYamlExporter
)


@pytest.fixture
def table():
    return IniTable({
        'net.port': '8080',
        'net.host': 'localhost',
        'ui.lang': '中文',
        'ui.flag': 'true',
        'ui.empty': '',
        'dotless': 'dropped',
    })


def test_yaml_write(table, tmp_path):
    path = tmp_path / 'out.yaml'
    IniYamlExporter(str(path)).write(table)
    doc = yaml.safe_load(path.read_text(encoding='utf-8'))
    assert doc == {
        'net': {'host': 'localhost', 'port': '8080'},
        'ui': {'flag': 'true', 'lang': '中文'},
    }


def test_yaml_roundtrip(table, tmp_path):
    path = str(tmp_path / 'out.yaml')
    IniYamlExporter(path).write(table)
    assert IniYamlExporter(path).read() == {
        'net.port': '8080',
        'net.host': 'localhost',
        'ui.lang': '中文',
        'ui.flag': 'true',
    }


def test_yaml_read_scalars_as_text(tmp_path):
    path = tmp_path / 'hand.yaml'
    path.write_text(
        'net:\n  port: 8080\n  debug: true\n  ratio: 0.5\n  none:\n',
        encoding='utf-8')
    assert IniYamlExporter(str(path)).read() == {
        'net.port': '8080',
        'net.debug': 'True',
        'net.ratio': '0.5',
        'net.none': '',
    }


def test_yaml_read_bad_section(tmp_path):
    path = tmp_path / 'bad.yaml'
    path.write_text('net:\n  port: 1\nstray: 2\n', encoding='utf-8')
    with pytest.warns(IniSyntaxWarning, match='stray'):
        table = IniYamlExporter(str(path)).read()
    assert table == {'net.port': '1'}


def test_yaml_read_not_a_mapping(tmp_path):
    path = tmp_path / 'list.yaml'
    path.write_text('- a\n- b\n', encoding='utf-8')
    with pytest.raises(ValueError):
        IniYamlExporter(str(path)).read()


def test_yaml_read_empty(tmp_path):
    path = tmp_path / 'empty.yaml'
    path.write_text('', encoding='utf-8')
    assert len(IniYamlExporter(str(path)).read()) == 0


def test_json_roundtrip(table, tmp_path):
    path = tmp_path / 'out.json'
    IniJsonExporter(str(path)).write(table)
    with open(path, encoding='utf-8') as fp:
        assert json.load(fp) == {
            'net': {'host': 'localhost', 'port': '8080'},
            'ui': {'flag': 'true', 'lang': '中文'},
        }
    assert IniJsonExporter(str(path)).read() == {
        'net.port': '8080',
        'net.host': 'localhost',
        'ui.lang': '中文',
        'ui.flag': 'true',
    }


def test_export_store_snapshot(settings, tmp_path):
    settings.set_value('a.b', 1)
    settings.set_value('a.c', True)
    path = str(tmp_path / 'snap.yaml')
    IniYamlExporter(path).write(settings.snapshot())
    assert IniYamlExporter(path).read() == {'a.b': '1', 'a.c': '1'}


@pytest.mark.parametrize('section', ['a.b', ''])
def test_read_refuses_bad_section_names(tmp_path, section):
    path = tmp_path / 'dotted.json'
    path.write_text(
        json.dumps({section: {'c': 'v'}, 'ok': {'k': '1'}}), encoding='utf-8')
    with pytest.warns(IniSyntaxWarning, match='skipped'):
        table = IniJsonExporter(str(path)).read()
    assert table == {'ok.k': '1'}
