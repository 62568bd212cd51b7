# =================================================================
#
# Authors: Antonio Cerciello <anto.nio.cerciello@gmail.com>
#          Tom Kralidis <tomkralidis@gmail.com>
#
# Copyright (c) 2022 Antonio Cerciello
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

from enum import Enum
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from pytilejson.error import ValidationError
from pytilejson.models.validators import (
    Violation,
    check_bounds,
    check_center,
    check_unique_layer_ids,
    check_vector_layers_declared,
    check_zoom_levels,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_VERSION = '1.0.0'
DEFAULT_MINZOOM = 0
DEFAULT_MAXZOOM = 30
DEFAULT_BOUNDS = (-180.0, -90.0, 180.0, 90.0)


class Scheme(str, Enum):
    XYZ = 'xyz'
    TMS = 'tms'


class FieldType(str, Enum):
    NUMBER = 'Number'
    BOOLEAN = 'Boolean'
    STRING = 'String'


class VectorLayer(BaseModel):
    """ Pydantic model for one layer of a vector tile source. """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(description='Layer identifier, unique per document.')
    fields: Dict[str, FieldType] = Field(
        description='Attribute names mapped to their type.')
    description: Optional[str] = None
    minzoom: Optional[int] = Field(
        None, description='Overrides the document minzoom for this layer.')
    maxzoom: Optional[int] = Field(
        None, description='Overrides the document maxzoom for this layer.')
    extensions: Dict[str, Any] = Field(
        default_factory=dict,
        description='Unknown keys of the layer object, in document order.')


class TileJSON(BaseModel):
    """ Pydantic model for a TileJSON 2.2.0 document.

    Construction and decoding never check the value ranges of the format;
    call :meth:`validate` for that.
    """

    model_config = ConfigDict(validate_assignment=True)

    tilejson: str = Field(
        '', description='Version of the TileJSON format implemented.')
    name: Optional[str] = None
    description: Optional[str] = None
    version: str = Field(
        DEFAULT_VERSION,
        description='Semantic version of the tileset data. When tiles '
                    'change the minor version must change; tiles with '
                    'different major versions must not be mixed.')
    attribution: Optional[str] = Field(
        None, description='Attribution, possibly HTML. Never render it '
                          'without sanitizing.')
    template: Optional[str] = Field(
        None, description='Mustache template formatting UTFGrid data.')
    legend: Optional[str] = None
    scheme: Scheme = Scheme.XYZ
    tiles: List[str] = Field(
        default_factory=list,
        description='Tile endpoints; {z}, {x} and {y} are replaced with '
                    'tile coordinates.')
    grids: List[str] = Field(
        default_factory=list, description='UTFGrid endpoints.')
    data: List[str] = Field(
        default_factory=list, description='GeoJSON data endpoints.')
    minzoom: int = DEFAULT_MINZOOM
    maxzoom: int = DEFAULT_MAXZOOM
    bounds: Tuple[float, float, float, float] = Field(
        DEFAULT_BOUNDS,
        description='WGS84 extent as west, south, east, north. West may '
                    'exceed east for extents crossing the antimeridian.')
    center: Optional[Tuple[float, float, float]] = Field(
        None, description='Default view as longitude, latitude, zoom.')
    vector_layers: List[VectorLayer] = Field(default_factory=list)
    extensions: Dict[str, Any] = Field(
        default_factory=dict,
        description='Vendor keys not defined by the format, in document '
                    'order.')

    @classmethod
    def default(cls) -> 'TileJSON':
        """ Returns a document with every optional field at its default,
        an empty `tilejson` version and no tile endpoints. """
        return cls()

    def violations(self) -> List[Violation]:
        """
        Collects every broken invariant of the document

        :returns: `list` of `Violation`, empty when the document is valid
        """

        violations = check_zoom_levels(self.minzoom, self.maxzoom)
        violations.extend(check_bounds(self.bounds))
        violations.extend(check_center(self.center, self.bounds,
                                       self.minzoom, self.maxzoom))

        for i, layer in enumerate(self.vector_layers):
            violations.extend(check_zoom_levels(
                layer.minzoom, layer.maxzoom, prefix=f'vector_layers[{i}].'))

        violations.extend(check_unique_layer_ids(
            [layer.id for layer in self.vector_layers]))
        violations.extend(check_vector_layers_declared(
            self.tiles, len(self.vector_layers)))

        return violations

    def validate(self) -> bool:
        """
        Validate the document against the TileJSON invariants

        :raises: `ValidationError` listing every violation found

        :returns: `bool` of validation
        """

        violations = self.violations()

        if violations:
            LOGGER.debug(f'{len(violations)} violation(s) found')
            raise ValidationError(violations)

        return True
