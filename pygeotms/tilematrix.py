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

"""Tile math for a single zoom level"""

import logging
import math
from typing import Dict, List, Mapping, Optional, Tuple, Union

from shapely import box, clip_by_rect
from shapely.geometry.base import BaseGeometry

from pygeotms.crs import Projector, to_geometry
from pygeotms.error import TileOutOfRangeError, TransformError
from pygeotms.models.tms import (
    Bounds, CornerOfOriginEnum, TileIndex, TileMatrixType, TileRange
)

LOGGER = logging.getLogger(__name__)


class TileMatrix:
    """Coordinate math of one tile matrix (zoom level)"""

    def __init__(self, definition: Union[TileMatrixType, Mapping]):
        """
        Initialize object

        :param definition: `TileMatrixType` or `dict` of the tile matrix

        :returns: pygeotms.tilematrix.TileMatrix
        """

        if not isinstance(definition, TileMatrixType):
            definition = TileMatrixType.model_validate(definition)

        self.definition = definition
        self._row_info = self._build_row_info()

    def _build_row_info(self) -> Dict[int, Tuple[int, int]]:
        info = {}
        for vmw in self.definition.variableMatrixWidths or []:
            columns = self.matrix_width // vmw.coalesce
            for row in range(vmw.minTileRow, vmw.maxTileRow + 1):
                info[row] = (columns, vmw.coalesce)
        return info

    @property
    def id(self) -> Optional[str]:
        return self.definition.id

    @property
    def resolution(self) -> float:
        """Ground units per pixel (`cellSize`)"""

        return self.definition.cellSize

    @property
    def matrix_width(self) -> int:
        return self.definition.matrixWidth

    @property
    def matrix_height(self) -> int:
        return self.definition.matrixHeight

    @property
    def tile_size_x(self) -> float:
        return self.definition.tileWidth * self.definition.cellSize

    @property
    def tile_size_y(self) -> float:
        return self.definition.tileHeight * self.definition.cellSize

    @property
    def bottom_left(self) -> bool:
        return (self.definition.cornerOfOrigin ==
                CornerOfOriginEnum.BOTTOMLEFT)

    @property
    def origin(self) -> Tuple[float, float]:
        return tuple(self.definition.pointOfOrigin[:2])

    def tile_size(self) -> Tuple[float, float]:
        """Tile dimensions in ground units"""

        return self.tile_size_x, self.tile_size_y

    def row_info(self, row: int) -> Tuple[int, int]:
        """
        Number of addressable columns and coalesce factor of a row

        :param row: tile row

        :returns: `tuple` of (columns, coalesce)
        """

        return self._row_info.get(row, (self.matrix_width, 1))

    def tile_for_xy(self, x: float, y: float) -> Optional[TileIndex]:
        """
        Tile containing a point in the tile matrix CRS

        Points in a coalesced row map to the coalesced column containing
        them, so every point inside a tile maps back to that tile. Points
        beyond the coalesced extent of the row have no tile.

        :param x: x coordinate
        :param y: y coordinate

        :returns: `TileIndex` or `None` if the point is outside the matrix
                  or not finite
        """

        if not (math.isfinite(x) and math.isfinite(y)):
            return None

        origin_x, origin_y = self.origin

        col = math.floor((x - origin_x) / self.tile_size_x)
        if self.bottom_left:
            row = math.floor((y - origin_y) / self.tile_size_y)
        else:
            row = math.floor((origin_y - y) / self.tile_size_y)

        if not (0 <= col < self.matrix_width and
                0 <= row < self.matrix_height):
            return None

        columns, coalesce = self.row_info(row)
        if col >= columns * coalesce:
            return None

        # coalesced tiles span `coalesce` columns of the base grid
        return TileIndex(col // coalesce, row)

    def tile_for_lonlat(self, lon: float, lat: float,
                        projector: Projector) -> Optional[TileIndex]:
        """
        Tile containing a geographic point

        :param lon: longitude
        :param lat: latitude
        :param projector: `Projector` from geographic to matrix CRS

        :returns: `TileIndex` or `None` if the point is outside the matrix
                  or cannot be projected
        """

        try:
            x, y = projector.forward(lon, lat)
        except TransformError as err:
            LOGGER.debug(f'No tile for ({lon}, {lat}): {err}')
            return None

        return self.tile_for_xy(x, y)

    def bounds_for_tile(self, index: TileIndex) -> Bounds:
        """
        Bounds of a tile in the tile matrix CRS

        :param index: `TileIndex`

        :raises `TileOutOfRangeError`: if the tile is out of the matrix or
                                       out of the width of its row

        :returns: `Bounds`
        """

        col, row = index.col, index.row

        if not (0 <= col < self.matrix_width and
                0 <= row < self.matrix_height):
            raise TileOutOfRangeError(
                f'tile out of matrix col={col} row={row}')

        columns, coalesce = self.row_info(row)
        if col >= columns:
            raise TileOutOfRangeError(
                f'tile out of row width col={col} row={row} '
                f'(row width {columns})')

        origin_x, origin_y = self.origin

        tile_width = self.tile_size_x * coalesce
        minx = origin_x + col * tile_width
        maxx = minx + tile_width

        if self.bottom_left:
            miny = origin_y + row * self.tile_size_y
            maxy = miny + self.tile_size_y
        else:
            maxy = origin_y - row * self.tile_size_y
            miny = maxy - self.tile_size_y

        return Bounds(minx, miny, maxx, maxy)

    def bounds_for_tile_geographic(self, index: TileIndex,
                                   projector: Projector) -> Bounds:
        """
        Geographic bounds of a tile.

        Only the min and max corners are inverse projected, the result is
        the box of those two corners.

        :param index: `TileIndex`
        :param projector: `Projector` from geographic to matrix CRS

        :raises `TileOutOfRangeError`: if the tile is out of range
        :raises `TransformError`: if a corner cannot be projected

        :returns: `Bounds` in geographic coordinates
        """

        bounds = self.bounds_for_tile(index)

        minlon, minlat = projector.inverse(bounds.minx, bounds.miny)
        maxlon, maxlat = projector.inverse(bounds.maxx, bounds.maxy)

        return Bounds(minlon, minlat, maxlon, maxlat)

    def tile_range_for_bounds(self, bounds: Bounds) -> Optional[TileRange]:
        """
        Range of tiles covering bounds in the tile matrix CRS, clipped to
        the matrix extent. Coalesced rows are not taken into account.

        :param bounds: `Bounds` in the tile matrix CRS

        :returns: `TileRange` or `None` if the bounds are outside or not
                  finite
        """

        if not all(math.isfinite(value) for value in bounds.to_list()):
            return None

        origin_x, origin_y = self.origin
        size_x, size_y = self.tile_size()

        min_col = math.floor((bounds.minx - origin_x) / size_x)
        max_col = math.ceil((bounds.maxx - origin_x) / size_x) - 1

        if self.bottom_left:
            min_row = math.floor((bounds.miny - origin_y) / size_y)
            max_row = math.ceil((bounds.maxy - origin_y) / size_y) - 1
        else:
            min_row = math.floor((origin_y - bounds.maxy) / size_y)
            max_row = math.ceil((origin_y - bounds.miny) / size_y) - 1

        if (max_col < 0 or max_row < 0 or
                min_col >= self.matrix_width or
                min_row >= self.matrix_height):
            return None

        min_col = max(min_col, 0)
        min_row = max(min_row, 0)
        max_col = min(max_col, self.matrix_width - 1)
        max_row = min(max_row, self.matrix_height - 1)

        if min_col > max_col or min_row > max_row:
            return None

        return TileRange(min_col, max_col, min_row, max_row)

    def tiles_for_bounds(self, bounds: Bounds) -> List[TileIndex]:
        """All tiles covering bounds in the tile matrix CRS"""

        tile_range = self.tile_range_for_bounds(bounds)
        if tile_range is None:
            return []

        return list(tile_range)

    def tiles_for_geometry(self, geometry: Union[BaseGeometry, Mapping],
                           buffer: float = 0) -> List[TileIndex]:
        """
        Tiles intersecting a geometry in the tile matrix CRS.

        With a non zero `buffer` the geometry is replaced by its bounding
        box expanded by `buffer` ground units. A candidate tile is kept
        when clipping the geometry by the tile yields a result or when the
        tile intersects the bounding box of the geometry.

        :param geometry: shapely geometry or GeoJSON geometry `dict`
        :param buffer: expansion of the bounding box in ground units

        :returns: `list` of `TileIndex`, row-major
        """

        geom = to_geometry(geometry)
        if geom.is_empty:
            return []

        geom_bounds = Bounds(*geom.bounds)
        if buffer:
            geom_bounds = geom_bounds.buffer(buffer)
            geom = box(*geom_bounds.to_list())

        tile_range = self.tile_range_for_bounds(geom_bounds)
        if tile_range is None:
            return []

        tiles = []
        for row in range(tile_range.min_row, tile_range.max_row + 1):
            columns, coalesce = self.row_info(row)
            first_col = tile_range.min_col // coalesce
            last_col = min(tile_range.max_col // coalesce, columns - 1)

            for col in range(first_col, last_col + 1):
                index = TileIndex(col, row)
                tile_bounds = self.bounds_for_tile(index)

                clipped = clip_by_rect(geom, *tile_bounds.to_list())
                if (not clipped.is_empty or
                        tile_bounds.intersects(geom_bounds)):
                    tiles.append(index)

        return tiles

    def __repr__(self):
        return f'<TileMatrix> {self.id}'
