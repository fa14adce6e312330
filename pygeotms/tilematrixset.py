# =================================================================
#
# Authors: The pygeotms contributors
#
# Copyright (c) 2026 The pygeotms contributors
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

"""OGC TileMatrixSet: ordered collection of tile matrices sharing a CRS"""

from enum import Enum
import json
import logging
import threading
from typing import Dict, List, Mapping, Optional, Union

from shapely.geometry.base import BaseGeometry

from pygeotms.crs import (
    Projector, project_geometry, resolve_crs, to_geometry
)
from pygeotms.error import (
    TileMatrixSetConfigError, TileMatrixSetError, ZoomRangeError
)
from pygeotms.models.tms import (
    Bounds, Tile, TileIndex, TileMatrixSetType
)
from pygeotms.tilematrix import TileMatrix

LOGGER = logging.getLogger(__name__)


class InitState(Enum):
    UNINITIALIZED = 'uninitialized'
    INITIALIZING = 'initializing'
    READY = 'ready'
    FAILED = 'failed'


def parse_zoom(identifier: str) -> Optional[int]:
    """
    Zoom level encoded in a tile matrix identifier

    :param identifier: tile matrix identifier

    :returns: `int` if the identifier is a non-negative integer, else `None`
    """

    if identifier.isascii() and identifier.isdigit():
        return int(identifier)
    return None


class TileMatrixSet:
    """Tile matrix set with zoom ordering and tile coverage"""

    def __init__(self, definition: Union[TileMatrixSetType, Mapping]):
        """
        Initialize object

        Zoom ordering and identifier checks are deferred to the first call
        which needs them, then cached for the lifetime of the object.

        :param definition: `TileMatrixSetType` or `dict` of the document

        :returns: pygeotms.tilematrixset.TileMatrixSet
        """

        if not isinstance(definition, TileMatrixSetType):
            definition = TileMatrixSetType.model_validate(definition)

        self.definition = definition

        self._lock = threading.Lock()
        self._state = InitState.UNINITIALIZED
        self._matrices: List[TileMatrix] = []
        self._id_to_zoom: Dict[str, int] = {}
        self._init_error: Optional[TileMatrixSetError] = None

    @classmethod
    def from_dict(cls, document: Mapping) -> 'TileMatrixSet':
        return cls(TileMatrixSetType.model_validate(document))

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> 'TileMatrixSet':
        return cls(TileMatrixSetType.model_validate_json(data))

    @property
    def id(self) -> Optional[str]:
        return self.definition.id

    @property
    def state(self) -> InitState:
        return self._state

    def _initialize(self) -> None:
        definitions = [tm.model_copy(deep=True)
                       for tm in self.definition.tileMatrices]

        seen = set()
        for i, tm in enumerate(definitions):
            if not tm.id:
                raise TileMatrixSetConfigError(
                    f'tile matrix at index {i} missing id')
            if tm.id in seen:
                raise TileMatrixSetConfigError(
                    f'duplicate tile matrix id {tm.id!r}')
            seen.add(tm.id)

        zooms = [parse_zoom(tm.id) for tm in definitions]
        if definitions and None not in zooms:
            LOGGER.debug('Numeric tile matrix ids, sorting by id')
            definitions = [tm for _, tm in sorted(
                zip(zooms, definitions), key=lambda item: item[0])]
            for position, tm in enumerate(definitions):
                if parse_zoom(tm.id) != position:
                    raise TileMatrixSetConfigError(
                        f'numeric tile matrix id {tm.id!r} does not match '
                        f'zoom index {position}')

        self._matrices = [TileMatrix(tm) for tm in definitions]
        self._id_to_zoom = {
            tm.id: zoom for zoom, tm in enumerate(definitions)
        }

    def ensure_initialized(self) -> None:
        """
        Build the zoom ordered view of the tile matrices, exactly once.

        Concurrent callers wait for the single run and share its outcome.

        :raises `TileMatrixSetConfigError`: on duplicate or missing ids or
            numeric ids not matching their zoom position. Any
            initialization error is permanent and raised again on every
            call.
        """

        if self._state is InitState.READY:
            return

        with self._lock:
            if self._state is InitState.UNINITIALIZED:
                self._state = InitState.INITIALIZING
                try:
                    self._initialize()
                except Exception as err:
                    LOGGER.error(f'Invalid tile matrix set {self.id}: {err}')
                    self._init_error = err
                    self._state = InitState.FAILED
                else:
                    LOGGER.debug(f'Initialized tile matrix set {self.id} '
                                 f'with {len(self._matrices)} levels')
                    self._state = InitState.READY

        if self._state is InitState.FAILED:
            raise self._init_error

    @property
    def matrices(self) -> List[TileMatrix]:
        """Tile matrices ordered by zoom level"""

        self.ensure_initialized()
        return list(self._matrices)

    def __len__(self):
        return len(self.matrices)

    @property
    def minzoom(self) -> int:
        return 0

    @property
    def maxzoom(self) -> int:
        try:
            count = len(self)
        except TileMatrixSetError:
            return 0
        return max(count - 1, 0)

    @property
    def crs(self) -> str:
        """Normalized CRS identifier of the tile matrix set"""

        return resolve_crs(self.definition.crs)

    def projector(self) -> Projector:
        """Projector from geographic WGS84 to the tile matrix set CRS"""

        return Projector.from_tilematrixset(self.definition)

    def tilematrix(self, zoom: int) -> TileMatrix:
        """
        Tile matrix of a zoom level

        :param zoom: zoom level

        :raises `ZoomRangeError`: if the zoom level does not exist

        :returns: `TileMatrix`
        """

        matrices = self.matrices
        if not 0 <= zoom < len(matrices):
            raise ZoomRangeError(f'zoom {zoom} out of range')
        return matrices[zoom]

    def tilematrix_for_id(self, identifier: str) -> TileMatrix:
        return self.tilematrix(self.zoom_for_id(identifier))

    def zoom_for_id(self, identifier: str) -> int:
        """
        Zoom level of a tile matrix identifier

        :param identifier: tile matrix identifier

        :raises `ZoomRangeError`: if the identifier is unknown

        :returns: `int` of zoom level
        """

        self.ensure_initialized()
        try:
            return self._id_to_zoom[identifier]
        except KeyError:
            raise ZoomRangeError(f'tile matrix id {identifier!r} not found')

    def resolution_for_zoom(self, zoom: int) -> float:
        return self.tilematrix(zoom).resolution

    def resolution_for_id(self, identifier: str) -> float:
        return self.resolution_for_zoom(self.zoom_for_id(identifier))

    def zoom_for_resolution(self, resolution: float,
                            tolerance: float = 0) -> int:
        """
        Zoom level whose cell size is closest to `resolution`, among the
        levels not coarser than `resolution + tolerance`

        :param resolution: target cell size
        :param tolerance: allowed excess of the cell size

        :raises `ZoomRangeError`: if no level qualifies

        :returns: `int` of zoom level
        """

        matrices = self.matrices
        if not matrices:
            raise ZoomRangeError('no tile matrices')

        candidates = [
            (abs(tm.resolution - resolution), zoom)
            for zoom, tm in enumerate(matrices)
            if tm.resolution <= resolution + tolerance
        ]
        if not candidates:
            raise ZoomRangeError(
                f'no tile matrix with resolution <= {resolution + tolerance}')

        return min(candidates)[1]

    def xy_bbox(self) -> Bounds:
        """
        Bounding box of the tile matrix set in its CRS

        :raises `ZoomRangeError`: if the set has no tile matrix and no
                                  declared bounding box

        :returns: `Bounds`
        """

        bbox = self.definition.boundingBox
        if bbox is not None:
            return Bounds(*bbox.lowerLeft[:2], *bbox.upperRight[:2])

        matrices = self.matrices
        if not matrices:
            raise ZoomRangeError('no tile matrices')

        tm = matrices[0]
        first = tm.bounds_for_tile(TileIndex(0, 0))
        last = tm.bounds_for_tile(
            TileIndex(tm.row_info(tm.matrix_height - 1)[0] - 1,
                      tm.matrix_height - 1))

        return Bounds(first.minx, min(first.miny, last.miny),
                      last.maxx, max(first.maxy, last.maxy))

    def xy_bounds(self, tile: Tile) -> Bounds:
        """Bounds of a tile in the tile matrix set CRS"""

        return self.tilematrix(tile.zoom).bounds_for_tile(tile.index)

    def xy_bounds_for_id(self, index: TileIndex, identifier: str) -> Bounds:
        zoom = self.zoom_for_id(identifier)
        return self.xy_bounds(Tile(zoom, index.col, index.row))

    def bounds(self, tile: Tile,
               projector: Optional[Projector] = None) -> Bounds:
        """
        Geographic bounds of a tile

        :param tile: `Tile`
        :param projector: `Projector` from geographic to the set CRS,
                          derived from the set CRS if omitted

        :returns: `Bounds` in geographic coordinates
        """

        if projector is None:
            projector = self.projector()

        return self.tilematrix(tile.zoom).bounds_for_tile_geographic(
            tile.index, projector)

    def bounds_for_id(self, index: TileIndex, identifier: str,
                      projector: Optional[Projector] = None) -> Bounds:
        zoom = self.zoom_for_id(identifier)
        return self.bounds(Tile(zoom, index.col, index.row), projector)

    def tile_for_lonlat(self, lon: float, lat: float, zoom: int,
                        projector: Optional[Projector] = None
                        ) -> Optional[Tile]:
        """
        Tile containing a geographic point at a zoom level

        :param lon: longitude
        :param lat: latitude
        :param zoom: zoom level
        :param projector: `Projector` from geographic to the set CRS,
                          derived from the set CRS if omitted

        :raises `ZoomRangeError`: if the zoom level does not exist

        :returns: `Tile` or `None` if the point is outside the grid
        """

        if projector is None:
            projector = self.projector()

        index = self.tilematrix(zoom).tile_for_lonlat(lon, lat, projector)
        if index is None:
            return None

        return Tile(zoom, index.col, index.row)

    def tile_for_lonlat_id(self, lon: float, lat: float, identifier: str,
                           projector: Optional[Projector] = None
                           ) -> Optional[Tile]:
        return self.tile_for_lonlat(lon, lat, self.zoom_for_id(identifier),
                                    projector)

    def tiles_for_geometry(self, geometry: Union[BaseGeometry, Mapping],
                           minzoom: int, maxzoom: int,
                           buffer: float = 0) -> List[Tile]:
        """
        Tiles covering a geometry over an inclusive zoom range

        :param geometry: shapely geometry or GeoJSON geometry `dict` in the
                         tile matrix set CRS
        :param minzoom: first zoom level
        :param maxzoom: last zoom level
        :param buffer: bounding box expansion in ground units

        :raises `ZoomRangeError`: if the zoom range is invalid

        :returns: `list` of `Tile`, ordered by zoom, row then column
        """

        if minzoom < 0 or maxzoom < minzoom:
            raise ZoomRangeError(
                f'invalid zoom range min={minzoom} max={maxzoom}')

        matrices = self.matrices
        if maxzoom >= len(matrices):
            raise ZoomRangeError(f'max zoom {maxzoom} out of range')

        geometry = to_geometry(geometry)

        tiles = []
        for zoom in range(minzoom, maxzoom + 1):
            indices = matrices[zoom].tiles_for_geometry(geometry, buffer)
            LOGGER.debug(f'{len(indices)} tiles at zoom {zoom}')
            tiles.extend(Tile(zoom, i.col, i.row) for i in indices)

        return tiles

    def tiles_for_geometry_with_crs(
            self, geometry: Union[BaseGeometry, Mapping], source_crs: str,
            minzoom: int, maxzoom: int, buffer: float = 0) -> List[Tile]:
        """
        Tiles covering a geometry given in `source_crs`

        The geometry is projected to the tile matrix set CRS first.

        :param geometry: shapely geometry or GeoJSON geometry `dict`
        :param source_crs: CRS of the geometry (e.g. `EPSG:4326`)
        :param minzoom: first zoom level
        :param maxzoom: last zoom level
        :param buffer: bounding box expansion in ground units of the set

        :returns: `list` of `Tile`
        """

        projected = project_geometry(geometry, source_crs, self.crs)
        return self.tiles_for_geometry(projected, minzoom, maxzoom, buffer)

    def to_json(self, pretty: bool = False) -> str:
        """Serialize the tile matrix set document"""

        document = self.definition.model_dump(mode='json', exclude_none=True)
        return json.dumps(document, indent=4 if pretty else None)

    def __repr__(self):
        return f'<TileMatrixSet> {self.id}'
