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

from copy import deepcopy
import json
import logging
import os

import click
from jsonschema import validate as jsonschema_validate
import yaml

from pytilejson.util import to_json, yaml_load, SCHEMASDIR

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'logging': {
        'level': 'WARNING'
    },
    'codec': {
        'coerce_numbers': False,
        'pretty': False
    }
}


def merge_config(base: dict, override: dict) -> dict:
    """
    Recursively merge a configuration over another one

    :param base: `dict` of base configuration
    :param override: `dict` of configuration taking precedence

    :returns: `dict` of merged configuration (inputs are left untouched)
    """

    merged = deepcopy(base)

    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = deepcopy(value)

    return merged


def get_config(raw: bool = False) -> dict:
    """
    Get pytilejson configuration

    Defaults are used as is when the PYTILEJSON_CONFIG environment variable
    is not set.

    :param raw: `bool` over interpolation during config loading

    :returns: `dict` of pytilejson configuration
    """

    config_file = os.environ.get('PYTILEJSON_CONFIG')

    if not config_file:
        LOGGER.debug('PYTILEJSON_CONFIG not set, using defaults')
        return deepcopy(DEFAULT_CONFIG)

    with open(config_file, encoding='utf8') as fh:
        if raw:
            config = yaml.safe_load(fh)
        else:
            config = yaml_load(fh)

    return merge_config(DEFAULT_CONFIG, config)


def load_schema() -> dict:
    """ Reads the JSON schema YAML file. """

    schema_file = SCHEMASDIR / 'config' / 'pytilejson-config-0.x.yml'

    with schema_file.open() as fh:
        return yaml_load(fh)


def validate_config(instance_dict: dict) -> bool:
    """
    Validate pytilejson configuration against pytilejson schema

    :param instance_dict: dict of configuration

    :returns: `bool` of validation
    """

    jsonschema_validate(json.loads(to_json(instance_dict)), load_schema())

    return True


@click.group()
def config():
    """Configuration management"""
    pass


@click.command()
@click.pass_context
@click.option('--config', '-c', 'config_file', help='configuration file')
def validate(ctx, config_file):
    """Validate configuration"""

    if config_file is None:
        raise click.ClickException('--config/-c required')

    with open(config_file) as ff:
        click.echo(f'Validating {config_file}')
        instance = yaml_load(ff)
        validate_config(instance)
        click.echo('Valid configuration')


config.add_command(validate)
