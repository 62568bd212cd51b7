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

"""TileJSON encoding and decoding

Every field is mapped through an explicit rule (presence, default,
JSON type) rather than through model serialization, so the wire format
stays stable whatever the model library does.
"""

from dataclasses import dataclass
from functools import partial
import json
import logging
import math
from typing import Any, Callable, Dict, List, Tuple

import click
from jsonschema.exceptions import ValidationError as SchemaValidationError

from pytilejson.config import get_config, validate_config
from pytilejson.error import (
    DecodeError,
    MalformedError,
    MissingFieldError,
    NotAnObjectError,
    TypeMismatchError,
    ValidationError,
    VectorLayerError,
)
from pytilejson.log import setup_logger
from pytilejson.models.tilejson import (
    DEFAULT_BOUNDS,
    DEFAULT_MAXZOOM,
    DEFAULT_MINZOOM,
    DEFAULT_VERSION,
    FieldType,
    Scheme,
    TileJSON,
    VectorLayer,
)
from pytilejson.util import to_json

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldRule:
    """How one JSON key maps to a model attribute"""

    name: str
    read: Callable[[Any, str, bool], Any]
    write: Callable[[Any], Any]
    default: Any = None
    required: bool = False
    nullable: bool = False
    always: bool = False


def json_type(value: Any) -> str:
    """
    Name of the JSON type of a parsed value

    :param value: value as returned by `json.loads`

    :returns: `str` of JSON type name
    """

    if value is None:
        return 'null'
    elif isinstance(value, bool):
        return 'boolean'
    elif isinstance(value, int):
        return 'integer'
    elif isinstance(value, float):
        return 'number'
    elif isinstance(value, str):
        return 'string'
    elif isinstance(value, list):
        return 'array'
    elif isinstance(value, dict):
        return 'object'
    return type(value).__name__


def _read_string(value: Any, path: str, coerce: bool = False) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError(path, 'string', json_type(value))
    return value


def _read_integer(value: Any, path: str, coerce: bool = False) -> int:
    if coerce and isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeMismatchError(path, 'integer', json_type(value))
    return value


def _read_number(value: Any, path: str, coerce: bool = False) -> float:
    if coerce and isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            pass
        else:
            if math.isfinite(number):
                return number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeMismatchError(path, 'number', json_type(value))
    try:
        return float(value)
    except OverflowError:
        raise TypeMismatchError(path, 'number', 'integer out of range')


def _read_string_array(value: Any, path: str,
                       coerce: bool = False) -> List[str]:
    if not isinstance(value, list):
        raise TypeMismatchError(path, 'array of strings', json_type(value))
    return [_read_string(item, f'{path}[{i}]')
            for i, item in enumerate(value)]


def _read_number_array(value: Any, path: str, coerce: bool = False,
                       arity: int = 0) -> Tuple[float, ...]:
    expected = f'array of {arity} numbers'
    if not isinstance(value, list):
        raise TypeMismatchError(path, expected, json_type(value))
    if len(value) != arity:
        raise TypeMismatchError(path, expected, f'array of {len(value)}')
    return tuple(_read_number(item, f'{path}[{i}]', coerce)
                 for i, item in enumerate(value))


def _read_enum(value: Any, path: str, coerce: bool = False,
               enum_cls: type = None) -> Any:
    expected = 'one of ' + ', '.join(member.value for member in enum_cls)
    if not isinstance(value, str):
        raise TypeMismatchError(path, expected, json_type(value))
    try:
        return enum_cls(value)
    except ValueError:
        raise TypeMismatchError(path, expected, f'string {value!r}')


def _read_attribute_types(value: Any, path: str,
                          coerce: bool = False) -> Dict[str, FieldType]:
    if not isinstance(value, dict):
        raise TypeMismatchError(path, 'object', json_type(value))
    return {name: _read_enum(type_, f'{path}.{name}', enum_cls=FieldType)
            for name, type_ in value.items()}


def _read_vector_layers(value: Any, path: str,
                        coerce: bool = False) -> List[VectorLayer]:
    if not isinstance(value, list):
        raise TypeMismatchError(path, 'array of objects', json_type(value))

    layers = []
    for i, item in enumerate(value):
        try:
            layers.append(_decode_vector_layer(item, coerce))
        except DecodeError as err:
            raise VectorLayerError(i, err)
    return layers


def _write_floats(value: Tuple[float, ...]) -> List[float]:
    return [float(item) for item in value]


def _write_vector_layers(value: List[VectorLayer]) -> List[dict]:
    return [_encode_object(layer, VECTOR_LAYER_RULES) for layer in value]


TILEJSON_RULES = (
    FieldRule('tilejson', _read_string, str, required=True),
    FieldRule('name', _read_string, str, nullable=True),
    FieldRule('description', _read_string, str, nullable=True),
    FieldRule('version', _read_string, str, default=DEFAULT_VERSION),
    FieldRule('attribution', _read_string, str, nullable=True),
    FieldRule('template', _read_string, str, nullable=True),
    FieldRule('legend', _read_string, str, nullable=True),
    FieldRule('scheme', partial(_read_enum, enum_cls=Scheme),
              lambda value: value.value, default=Scheme.XYZ, always=True),
    FieldRule('tiles', _read_string_array, list, required=True),
    FieldRule('grids', _read_string_array, list, default=[]),
    FieldRule('data', _read_string_array, list, default=[]),
    FieldRule('minzoom', _read_integer, int, default=DEFAULT_MINZOOM,
              always=True),
    FieldRule('maxzoom', _read_integer, int, default=DEFAULT_MAXZOOM,
              always=True),
    FieldRule('bounds', partial(_read_number_array, arity=4), _write_floats,
              default=DEFAULT_BOUNDS, always=True),
    FieldRule('center', partial(_read_number_array, arity=3), _write_floats,
              nullable=True),
    FieldRule('vector_layers', _read_vector_layers, _write_vector_layers,
              default=[]),
)

VECTOR_LAYER_RULES = (
    FieldRule('id', _read_string, str, required=True),
    FieldRule('fields', _read_attribute_types,
              lambda value: {name: type_.value
                             for name, type_ in value.items()},
              required=True),
    FieldRule('description', _read_string, str, nullable=True),
    FieldRule('minzoom', _read_integer, int, nullable=True),
    FieldRule('maxzoom', _read_integer, int, nullable=True),
)


def _decode_object(document: dict, rules: Tuple[FieldRule, ...],
                   coerce: bool) -> dict:
    """
    Maps a JSON object onto model keyword arguments

    :param document: `dict` of parsed JSON object
    :param rules: field rules, in emission order
    :param coerce: whether numeric strings are accepted for numbers

    :returns: `dict` of model keyword arguments, including `extensions`
    """

    for rule in rules:
        if rule.required and rule.name not in document:
            raise MissingFieldError(rule.name)

    kwargs = {}
    for rule in rules:
        if rule.name not in document:
            continue
        value = document[rule.name]
        if value is None and rule.nullable:
            kwargs[rule.name] = None
        else:
            kwargs[rule.name] = rule.read(value, rule.name, coerce)

    names = {rule.name for rule in rules}
    kwargs['extensions'] = {
        key: value for key, value in document.items() if key not in names
    }

    return kwargs


def _decode_vector_layer(item: Any, coerce: bool) -> VectorLayer:
    if not isinstance(item, dict):
        raise NotAnObjectError(json_type(item))
    return VectorLayer(**_decode_object(item, VECTOR_LAYER_RULES, coerce))


def _encode_object(model: Any, rules: Tuple[FieldRule, ...]) -> dict:
    """
    Maps a model onto a JSON object, known fields first then extensions

    :param model: `TileJSON` or `VectorLayer`
    :param rules: field rules, in emission order

    :returns: `dict` ready for JSON serialization
    """

    document = {}
    for rule in rules:
        value = getattr(model, rule.name)
        if rule.required or rule.always:
            document[rule.name] = rule.write(value)
        elif value is None:
            continue
        elif value != rule.default:
            document[rule.name] = rule.write(value)

    names = {rule.name for rule in rules}
    for key, value in model.extensions.items():
        if key in names:
            LOGGER.warning(f'Dropping extension {key!r}: it collides with '
                           'a TileJSON field')
            continue
        document[key] = value

    return document


def encode(tilejson: TileJSON, pretty: bool = False) -> str:
    """
    Serialize a TileJSON model to a JSON document

    `scheme`, `minzoom`, `maxzoom` and `bounds` are always written; any
    other optional field is left out when it holds its default value.

    :param tilejson: `TileJSON` model
    :param pretty: `bool` of whether to indent the output

    :returns: `str` of JSON document
    """

    LOGGER.debug('Encoding TileJSON document')
    return to_json(_encode_object(tilejson, TILEJSON_RULES), pretty=pretty)


def _reject_constant(name: str) -> None:
    raise ValueError(f'{name} is not a valid JSON value')


def _parse_float(text: str) -> float:
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f'{text} is out of range')
    return number


def decode(text: str, coerce_numbers: bool = False) -> TileJSON:
    """
    Parse a TileJSON document

    The result is structurally valid only; call `TileJSON.validate` to
    check value ranges and layer ids.

    :param text: `str` of JSON document
    :param coerce_numbers: `bool` of whether numeric strings (e.g.
                           ``"minzoom": "4"``) are accepted for numeric
                           fields (default is `False`)

    :raises: `DecodeError` subclass describing the first problem found

    :returns: `TileJSON` model
    """

    try:
        document = json.loads(text, parse_float=_parse_float,
                              parse_constant=_reject_constant)
    except json.JSONDecodeError as err:
        LOGGER.error(f'Invalid JSON: {err}')
        raise MalformedError(err.msg, err.lineno, err.colno)
    except ValueError as err:
        LOGGER.error(f'Invalid JSON: {err}')
        raise MalformedError(str(err))

    if not isinstance(document, dict):
        raise NotAnObjectError(json_type(document))

    kwargs = _decode_object(document, TILEJSON_RULES, coerce_numbers)
    LOGGER.debug(f'Decoded TileJSON document with '
                 f'{len(kwargs["extensions"])} extension field(s)')

    return TileJSON(**kwargs)


def _load_document(ctx, file_) -> TileJSON:
    """Decodes a command line input file with the configured options"""

    try:
        return decode(file_.read(),
                      coerce_numbers=ctx.obj['codec']['coerce_numbers'])
    except DecodeError as err:
        raise click.ClickException(f'{file_.name}: {err.message}')


@click.group()
@click.pass_context
def tilejson(ctx):
    """TileJSON document management"""

    ctx.obj = get_config()

    try:
        validate_config(ctx.obj)
    except SchemaValidationError as err:
        raise click.ClickException(f'Invalid configuration: {err.message}')

    setup_logger(ctx.obj['logging'])


@click.command()
@click.pass_context
@click.argument('tilejson_file', type=click.File(encoding='utf-8'))
def decode_(ctx, tilejson_file):
    """Decode TileJSON document and print the model"""

    click.echo(repr(_load_document(ctx, tilejson_file)))


@click.command()
@click.pass_context
@click.argument('tilejson_file', type=click.File(encoding='utf-8'))
@click.option('--pretty/--compact', default=None,
              help='Indent output (defaults to codec.pretty setting)')
def encode_(ctx, tilejson_file, pretty):
    """Decode TileJSON document and write it back normalized"""

    if pretty is None:
        pretty = ctx.obj['codec']['pretty']

    click.echo(encode(_load_document(ctx, tilejson_file), pretty=pretty))


@click.command()
@click.pass_context
@click.argument('tilejson_file', type=click.File(encoding='utf-8'))
def validate(ctx, tilejson_file):
    """Validate TileJSON document"""

    click.echo(f'Validating {tilejson_file.name}')
    document = _load_document(ctx, tilejson_file)

    try:
        document.validate()
    except ValidationError as err:
        for violation in err.violations:
            click.echo(str(violation), err=True)
        raise click.ClickException(
            f'{len(err.violations)} violation(s) found')

    click.echo('Valid TileJSON document')


@click.command()
@click.pass_context
@click.option('--name', help='Tileset name')
@click.option('--description', help='Tileset description')
@click.option('--tile', '-t', 'tiles', multiple=True,
              help='Tile endpoint (repeatable)')
@click.option('--tilejson-version', default='2.2.0',
              help='TileJSON format version')
def new(ctx, name, description, tiles, tilejson_version):
    """Create TileJSON document from defaults"""

    document = TileJSON.default()
    document.tilejson = tilejson_version
    document.name = name
    document.description = description
    document.tiles = list(tiles)

    click.echo(encode(document, pretty=ctx.obj['codec']['pretty']))


tilejson.add_command(decode_, name='decode')
tilejson.add_command(encode_, name='encode')
tilejson.add_command(validate)
tilejson.add_command(new)
