# =================================================================
#
# Authors: Tom Kralidis <tomkralidis@gmail.com>
#
# Copyright (c) 2024 Tom Kralidis
#
# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation
# files (the "Software"), to deal in the Software without
# restriction, including without limitation the rights to use,
# copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following
# conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES
# OF MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT
# HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY,
# WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
# FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR
# OTHER DEALINGS IN THE SOFTWARE.
#
# =================================================================

import json
import os
from unittest import mock

from click.testing import CliRunner
import pytest

from pytilejson import __version__, cli

from .util import get_test_file_path


@pytest.fixture()
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def no_config():
    """Runs every command with the default configuration"""
    with mock.patch.dict(os.environ):
        os.environ.pop('PYTILEJSON_CONFIG', None)
        yield


def invoke(runner, *args):
    return runner.invoke(cli, [str(arg) for arg in args])


def test_version(runner):
    result = invoke(runner, '--version')

    assert result.exit_code == 0
    assert __version__ in result.output


def test_decode(runner):
    result = invoke(runner, 'tilejson', 'decode',
                    get_test_file_path('data/osm.json'))

    assert result.exit_code == 0
    assert "name='OpenStreetMap'" in result.output


def test_encode(runner):
    result = invoke(runner, 'tilejson', 'encode',
                    get_test_file_path('data/osm.json'))

    assert result.exit_code == 0
    assert result.output.startswith('{"tilejson":"1.0.0","name"')

    result = invoke(runner, 'tilejson', 'encode', '--pretty',
                    get_test_file_path('data/vector.json'))

    assert result.exit_code == 0
    document = json.loads(result.output)
    assert document['scheme'] == 'tms'
    assert list(document.keys())[-2:] == ['format', 'x-generator']


def test_encode_malformed(runner, tmp_path):
    broken = tmp_path / 'broken.json'
    broken.write_text('{"tilejson": "2.2.0",')

    result = invoke(runner, 'tilejson', 'encode', broken)

    assert result.exit_code == 1
    assert 'Malformed JSON' in result.output


def test_validate(runner, tmp_path):
    result = invoke(runner, 'tilejson', 'validate',
                    get_test_file_path('data/antimeridian.json'))

    assert result.exit_code == 0
    assert 'Valid TileJSON document' in result.output

    invalid = tmp_path / 'invalid.json'
    invalid.write_text(json.dumps({
        'tilejson': '2.2.0',
        'tiles': ['https://tiles.example.org/{z}/{x}/{y}.png'],
        'minzoom': 10,
        'maxzoom': 5,
        'vector_layers': [
            {'id': 'water', 'fields': {}},
            {'id': 'water', 'fields': {}}
        ]
    }))

    result = invoke(runner, 'tilejson', 'validate', invalid)

    assert result.exit_code == 1
    assert 'zoom-order' in result.output
    assert 'duplicate-layer-id' in result.output
    assert '2 violation(s) found' in result.output


def test_decode_coerce_numbers_from_config(runner, tmp_path):
    document = tmp_path / 'lenient.json'
    document.write_text('{"tilejson": "2.2.0", "tiles": [], '
                        '"maxzoom": "14"}')

    result = invoke(runner, 'tilejson', 'encode', document)
    assert result.exit_code == 1
    assert 'maxzoom' in result.output

    env = {'PYTILEJSON_CONFIG': str(get_test_file_path(
        'pytilejson-test-config.yml'))}
    with mock.patch.dict(os.environ, env):
        result = invoke(runner, 'tilejson', 'encode', document)

    assert result.exit_code == 0
    assert '"maxzoom":14' in result.output


def test_new(runner):
    result = invoke(runner, 'tilejson', 'new', '--name', 'TileSet Name',
                    '--description', 'TileSet description',
                    '-t', 'https://tiles.example.org/{z}/{x}/{y}.png')

    assert result.exit_code == 0
    document = json.loads(result.output)
    assert document == {
        'tilejson': '2.2.0',
        'name': 'TileSet Name',
        'description': 'TileSet description',
        'scheme': 'xyz',
        'tiles': ['https://tiles.example.org/{z}/{x}/{y}.png'],
        'minzoom': 0,
        'maxzoom': 30,
        'bounds': [-180.0, -90.0, 180.0, 90.0]
    }


def test_config_command_registered(runner):
    import pytilejson.config

    assert callable(pytilejson.config.get_config)

    result = invoke(runner, 'config', '--help')

    assert result.exit_code == 0
    assert 'validate' in result.output


def test_invalid_config_rejected(runner, tmp_path):
    config_file = tmp_path / 'bad-config.yml'
    config_file.write_text('logging:\n    level: ERROR\n'
                           'codec:\n    coerce_numbers: "yes"\n')

    with mock.patch.dict(os.environ, {'PYTILEJSON_CONFIG': str(config_file)}):
        result = invoke(runner, 'tilejson', 'decode',
                        get_test_file_path('data/osm.json'))

    assert result.exit_code == 1
    assert 'Invalid configuration' in result.output
