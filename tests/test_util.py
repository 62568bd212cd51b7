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

from decimal import Decimal
from enum import Enum
from io import StringIO
from pathlib import Path
from unittest import mock

import pytest

from pytilejson import util

from .util import get_test_file_path


class Color(Enum):
    RED = 'red'


def test_get_typed_value():
    value = util.get_typed_value('2')
    assert isinstance(value, int)

    value = util.get_typed_value('1.2')
    assert isinstance(value, float)

    value = util.get_typed_value('1.c2')
    assert isinstance(value, str)

    value = util.get_typed_value('007')
    assert value == '007'

    value = util.get_typed_value('True')
    assert value is True


def test_yaml_load():
    with open(get_test_file_path('pytilejson-test-config.yml')) as fh:
        config = util.yaml_load(fh)

    assert isinstance(config, dict)
    assert config['logging']['level'] == 'ERROR'

    with pytest.raises(FileNotFoundError):
        with open(get_test_file_path('404.yml')) as fh:
            util.yaml_load(fh)


@pytest.mark.parametrize('env,input_config,expected', [
    pytest.param({}, 'foo: something', {'foo': 'something'}, id='no-env-expansion'),  # noqa E501
    pytest.param({'FOO': 'this'}, 'foo: ${FOO}', {'foo': 'this'}),
    pytest.param({'FOO': 'this'}, 'foo: the value is ${FOO}', {'foo': 'the value is this'}, id='no-need-for-yaml-tag'),  # noqa E501
    pytest.param({}, 'foo: ${FOO:-some default}', {'foo': 'some default'}),
    pytest.param({'ZOOM': '14'}, 'maxzoom: ${ZOOM}', {'maxzoom': 14}, id='typed-value'),  # noqa E501
    pytest.param({}, 'composite: ${FOO:-default-foo}:${BAR:-default-bar}', {'composite': 'default-foo:default-bar'}),  # noqa E501
])
def test_yaml_load_with_env_variables(
        env: dict[str, str], input_config: str, expected):

    def mock_get_env(env_var_name):
        return env.get(env_var_name)

    with mock.patch('pytilejson.util.os') as mock_os:
        mock_os.getenv.side_effect = mock_get_env
        loaded_config = util.yaml_load(StringIO(input_config))
        assert loaded_config == expected


def test_str2bool():
    assert not util.str2bool(False)
    assert not util.str2bool('0')
    assert not util.str2bool('no')
    assert util.str2bool('yes')
    assert util.str2bool('1')
    assert util.str2bool(True)
    assert util.str2bool('true')
    assert util.str2bool('tRuE')
    assert util.str2bool('on')
    assert not util.str2bool('off')


def test_to_json():
    dict_ = {'b': 1, 'a': [1.5, 'é'], 'c': Color.RED}

    assert util.to_json(dict_) == '{"b":1,"a":[1.5,"é"],"c":"red"}'
    assert util.to_json(dict_, pretty=True) == (
        '{\n    "b": 1,\n    "a": [\n        1.5,\n        "é"\n    ],\n'
        '    "c": "red"\n}'
    )

    with pytest.raises(ValueError):
        util.to_json({'bounds': [float('nan')]})


def test_json_serial():
    assert util.json_serial(Color.RED) == 'red'
    assert util.json_serial(Decimal('1.5')) == 1.5
    assert util.json_serial(Path('/tmp/tiles')) == '/tmp/tiles'

    with pytest.raises(TypeError):
        util.json_serial(object())
