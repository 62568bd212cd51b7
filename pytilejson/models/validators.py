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

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence
from urllib.parse import urlparse

MIN_ZOOM = 0
MAX_ZOOM = 30

VECTOR_TILE_EXTENSIONS = ('.pbf', '.mvt')


class ViolationCode(str, Enum):
    ZOOM_RANGE = 'zoom-range'
    ZOOM_ORDER = 'zoom-order'
    BOUNDS_RANGE = 'bounds-range'
    BOUNDS_ORDER = 'bounds-order'
    CENTER_OUTSIDE_BOUNDS = 'center-outside-bounds'
    CENTER_ZOOM_RANGE = 'center-zoom-range'
    DUPLICATE_LAYER_ID = 'duplicate-layer-id'
    MISSING_VECTOR_LAYERS = 'missing-vector-layers'


@dataclass(frozen=True)
class Violation:
    code: ViolationCode
    path: str
    message: str

    def __str__(self) -> str:
        return f'{self.path}: {self.message} ({self.code.value})'


def check_zoom_levels(minzoom: Optional[int], maxzoom: Optional[int],
                      prefix: str = '') -> List[Violation]:
    """Validator function that checks zoom levels are within 0..30 and
    ordered. Either zoom may be `None` (unset layer override).
    """

    violations = []
    for name, zoom in (('minzoom', minzoom), ('maxzoom', maxzoom)):
        if zoom is not None and not MIN_ZOOM <= zoom <= MAX_ZOOM:
            violations.append(Violation(
                ViolationCode.ZOOM_RANGE, f'{prefix}{name}',
                f'{name} {zoom} is outside {MIN_ZOOM}..{MAX_ZOOM}'))

    if minzoom is not None and maxzoom is not None and minzoom > maxzoom:
        violations.append(Violation(
            ViolationCode.ZOOM_ORDER, f'{prefix}minzoom',
            f'minzoom {minzoom} is greater than maxzoom {maxzoom}'))

    return violations


def check_bounds(bounds: Sequence[float]) -> List[Violation]:
    """Validator function that checks bounds are WGS84 degrees.

    West greater than east is an antimeridian-crossing extent and is
    accepted.
    """

    west, south, east, north = bounds
    violations = []

    for name, value in (('west', west), ('east', east)):
        if not -180 <= value <= 180:
            violations.append(Violation(
                ViolationCode.BOUNDS_RANGE, 'bounds',
                f'{name} longitude {value} is outside -180..180'))

    for name, value in (('south', south), ('north', north)):
        if not -90 <= value <= 90:
            violations.append(Violation(
                ViolationCode.BOUNDS_RANGE, 'bounds',
                f'{name} latitude {value} is outside -90..90'))

    if south > north:
        violations.append(Violation(
            ViolationCode.BOUNDS_ORDER, 'bounds',
            f'south {south} is greater than north {north}'))

    return violations


def contains(bounds: Sequence[float], lon: float, lat: float) -> bool:
    """Whether a position lies within bounds, antimeridian aware"""

    west, south, east, north = bounds

    if not south <= lat <= north:
        return False
    if west <= east:
        return west <= lon <= east
    return lon >= west or lon <= east


def check_center(center: Optional[Sequence[float]], bounds: Sequence[float],
                 minzoom: int, maxzoom: int) -> List[Violation]:
    """Validator function that checks the center position lies within
    bounds and its zoom within the zoom range.
    """

    if center is None:
        return []

    lon, lat, zoom = center
    violations = []

    if not contains(bounds, lon, lat):
        violations.append(Violation(
            ViolationCode.CENTER_OUTSIDE_BOUNDS, 'center',
            f'position ({lon}, {lat}) is outside bounds {tuple(bounds)}'))

    if not minzoom <= zoom <= maxzoom:
        violations.append(Violation(
            ViolationCode.CENTER_ZOOM_RANGE, 'center',
            f'zoom {zoom} is outside {minzoom}..{maxzoom}'))

    return violations


def check_unique_layer_ids(layer_ids: Sequence[str]) -> List[Violation]:
    """Validator function that reports every repeated vector layer id"""

    seen = set()
    violations = []

    for i, id_ in enumerate(layer_ids):
        if id_ in seen:
            violations.append(Violation(
                ViolationCode.DUPLICATE_LAYER_ID, f'vector_layers[{i}].id',
                f'duplicate vector layer id {id_!r}'))
        seen.add(id_)

    return violations


def is_vector_tile_url(url: str) -> bool:
    """Whether a tile URL template points at vector tiles"""

    path = urlparse(url).path.lower()
    return path.endswith(VECTOR_TILE_EXTENSIONS)


def check_vector_layers_declared(tiles: Sequence[str],
                                 layer_count: int) -> List[Violation]:
    """Validator function that checks vector sources declare their layers"""

    if tiles and layer_count == 0 and all(map(is_vector_tile_url, tiles)):
        return [Violation(
            ViolationCode.MISSING_VECTOR_LAYERS, 'vector_layers',
            'vector tile source declares no vector layers')]

    return []
