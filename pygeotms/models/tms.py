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

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, confloat, conint, conlist


class CornerOfOriginEnum(str, Enum):
    TOPLEFT = "topLeft"
    BOTTOMLEFT = "bottomLeft"


# Tile Matrix Set document types (OGC 17-083r4 JSON encoding)
class VariableMatrixWidthType(BaseModel):
    # Number of tiles in width that coalesce in a single tile for these rows
    coalesce: conint(ge=1)
    # First tile row where the coalescence factor applies
    minTileRow: conint(ge=0)
    # Last tile row where the coalescence factor applies (inclusive)
    maxTileRow: conint(ge=0)


class TileMatrixType(BaseModel):
    model_config = ConfigDict(extra='allow')

    # Identifier of the tile matrix, doubles as zoom level when numeric
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    scaleDenominator: Optional[float] = None
    # Cell size (ground units per pixel) of this tile matrix
    cellSize: confloat(gt=0)
    cornerOfOrigin: CornerOfOriginEnum = CornerOfOriginEnum.TOPLEFT
    pointOfOrigin: conlist(float, min_length=2, max_length=2)
    tileWidth: conint(ge=1)
    tileHeight: conint(ge=1)
    matrixWidth: conint(ge=1)
    matrixHeight: conint(ge=1)
    variableMatrixWidths: Optional[List[VariableMatrixWidthType]] = None


class CRSObjectType(BaseModel):
    model_config = ConfigDict(extra='allow')

    uri: Optional[str] = None
    # WKT string or embedded PROJJSON object
    wkt: Optional[Any] = None
    referenceSystem: Optional[Any] = None


class TwoDBoundingBoxType(BaseModel):
    lowerLeft: conlist(float, min_length=2, max_length=2)
    upperRight: conlist(float, min_length=2, max_length=2)
    crs: Optional[Union[str, CRSObjectType]] = None


class TileMatrixSetType(BaseModel):
    model_config = ConfigDict(extra='allow')

    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[List[str]] = None
    uri: Optional[str] = None
    crs: Optional[Union[str, CRSObjectType]] = None
    orderedAxes: Optional[List[str]] = None
    wellKnownScaleSet: Optional[str] = None
    boundingBox: Optional[TwoDBoundingBoxType] = None
    tileMatrices: List[TileMatrixType] = []


# Grid value types
@dataclass(frozen=True)
class TileIndex:
    col: int
    row: int


@dataclass(frozen=True)
class Tile:
    zoom: int
    col: int
    row: int

    @property
    def index(self) -> TileIndex:
        return TileIndex(self.col, self.row)


@dataclass(frozen=True)
class TileRange:
    """Inclusive range of tiles"""

    min_col: int
    max_col: int
    min_row: int
    max_row: int

    def __iter__(self):
        for row in range(self.min_row, self.max_row + 1):
            for col in range(self.min_col, self.max_col + 1):
                yield TileIndex(col, row)

    def __len__(self):
        return ((self.max_col - self.min_col + 1) *
                (self.max_row - self.min_row + 1))


@dataclass(frozen=True)
class Bounds:
    minx: float
    miny: float
    maxx: float
    maxy: float

    def contains(self, x: float, y: float) -> bool:
        return self.minx <= x < self.maxx and self.miny <= y < self.maxy

    def intersects(self, other: 'Bounds') -> bool:
        """Bounding box overlap test, touching edges included"""

        return not (self.maxx < other.minx or self.minx > other.maxx or
                    self.maxy < other.miny or self.miny > other.maxy)

    def buffer(self, distance: float) -> 'Bounds':
        return Bounds(self.minx - distance, self.miny - distance,
                      self.maxx + distance, self.maxy + distance)

    def to_list(self) -> list:
        return [self.minx, self.miny, self.maxx, self.maxy]
