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

"""CRS resolution and projection functions"""

import json
import logging
import math
from typing import Any, Callable, Mapping, Tuple, Union

import pyproj
from pyproj.exceptions import CRSError, ProjError
from shapely.errors import ShapelyError
from shapely.geometry import (
    GeometryCollection, LinearRing, LineString, MultiLineString,
    MultiPoint, MultiPolygon, Point, Polygon, shape as geojson_to_geom
)
from shapely.geometry.base import BaseGeometry

from pygeotms.error import CRSResolutionError, GeometryError, TransformError
from pygeotms.models.tms import CRSObjectType, TileMatrixSetType

LOGGER = logging.getLogger(__name__)

WGS84_CRS = 'EPSG:4326'

EPSG_URI_MARKER = '/epsg/0/'
EPSG_URN_PREFIX = 'urn:ogc:def:crs:epsg::'


def normalize_crs_string(crs: str) -> str:
    """
    Normalize a CRS string to an `EPSG:<code>` identifier when possible.

    :param crs: CRS identifier, URI or URN

    :returns: `str` of normalized identifier, or the input unchanged
    """

    lower = crs.lower()

    if lower.startswith('epsg:'):
        return crs.upper()

    if EPSG_URI_MARKER in lower:
        code = crs.rstrip('/').rsplit('/', maxsplit=1)[-1]
        return f'EPSG:{code}'

    if lower.startswith(EPSG_URN_PREFIX):
        return f'EPSG:{lower[len(EPSG_URN_PREFIX):]}'

    return crs


def resolve_crs(crs: Any) -> str:
    """
    Extract a normalized CRS identifier from the `crs` member of
    a TileMatrixSet document.

    Plain strings and `uri` members are normalized to `EPSG:<code>` where
    possible. `wkt` members are passed through as a string, embedded
    PROJJSON objects are re-serialized to JSON.

    :param crs: `str`, `CRSObjectType` or `dict` of the `crs` member

    :raises `CRSResolutionError`: if the CRS shape is not supported

    :returns: `str` of CRS identifier understood by `get_crs`
    """

    if isinstance(crs, str):
        return normalize_crs_string(crs)

    if isinstance(crs, CRSObjectType):
        crs = crs.model_dump(exclude_none=True)

    if not isinstance(crs, Mapping):
        msg = f'Unsupported CRS type {type(crs).__name__}'
        LOGGER.error(msg)
        raise CRSResolutionError(msg)

    uri = crs.get('uri')
    if isinstance(uri, str) and uri:
        return normalize_crs_string(uri)

    if 'wkt' in crs and crs['wkt'] is not None:
        wkt = crs['wkt']
        if isinstance(wkt, str):
            return wkt
        if isinstance(wkt, Mapping):
            LOGGER.debug('Serializing embedded PROJJSON definition')
            return json.dumps(wkt, sort_keys=True, separators=(',', ':'))

        msg = f'Unsupported wkt type {type(wkt).__name__}'
        LOGGER.error(msg)
        raise CRSResolutionError(msg)

    if crs.get('referenceSystem') is not None:
        msg = 'referenceSystem CRS definitions are not supported'
        LOGGER.error(msg)
        raise CRSResolutionError(msg)

    msg = 'Unsupported CRS object: no uri or wkt member'
    LOGGER.error(msg)
    raise CRSResolutionError(msg)


def get_crs(crs: Union[str, pyproj.CRS]) -> pyproj.CRS:
    """
    Get a `pyproj.CRS` instance from a CRS identifier.

    :param crs: `EPSG:<code>` identifier, OGC URI (URL or URN form),
                WKT string, PROJJSON string or `pyproj.CRS` object

    :raises `CRSError`: Error raised if no CRS could be identified

    :returns: `pyproj.CRS` instance matching the input
    """

    if isinstance(crs, pyproj.CRS):
        return crs

    uri = str(crs)

    if not uri.lower().startswith(('http://', 'https://', 'urn:')):
        return pyproj.CRS.from_user_input(uri)

    # normalize the input `uri` to a URL first
    url = uri.replace(
        'urn:ogc:def:crs', 'http://www.opengis.net/def/crs'
    ).replace(':', '/')
    try:
        authority, code = url.rsplit('/', maxsplit=3)[1::2]
        return pyproj.CRS.from_authority(authority, code)
    except ValueError:
        msg = (
            f'CRS could not be identified from URI {uri!r}. CRS URIs must '
            'follow one of two formats: '
            '"http://www.opengis.net/def/crs/{authority}/{version}/{code}" or '
            '"urn:ogc:def:crs:{authority}:{version}:{code}"'
        )
        LOGGER.error(msg)
        raise CRSError(msg)
    except CRSError:
        msg = f'CRS could not be identified from URI {uri!r}'
        LOGGER.error(msg)
        raise CRSError(msg)


class Projector:
    """Converts between a source CRS (e.g. lon/lat degrees) and
    a target CRS (grid units)"""

    def __init__(self, source_crs: str, target_crs: str):
        """
        Initialize object

        :param source_crs: CRS of the input coordinates
        :param target_crs: CRS of the output coordinates

        :returns: pygeotms.crs.Projector
        """

        self.source_crs = source_crs
        self.target_crs = target_crs
        self._forward = None
        self._inverse = None

    @classmethod
    def from_wgs84(cls, target_crs: str) -> 'Projector':
        """Projector from geographic WGS84 (lon, lat) to `target_crs`"""

        return cls(WGS84_CRS, target_crs)

    @classmethod
    def from_tilematrixset(cls, tms: TileMatrixSetType) -> 'Projector':
        """
        Projector from geographic WGS84 to the CRS of a TileMatrixSet

        :param tms: `TileMatrixSetType` document

        :raises `CRSResolutionError`: if the document CRS is unsupported

        :returns: pygeotms.crs.Projector
        """

        return cls.from_wgs84(resolve_crs(tms.crs))

    def _transformer(self, source_crs: str, target_crs: str) -> Callable:
        try:
            return pyproj.Transformer.from_crs(
                get_crs(source_crs), get_crs(target_crs), always_xy=True
            ).transform
        except (CRSError, ProjError) as err:
            msg = (f'Cannot create transformation from {source_crs} '
                   f'to {target_crs}: {err}')
            LOGGER.error(msg)
            raise TransformError(msg)

    @staticmethod
    def _apply(transform: Callable, operation: str,
               x: float, y: float) -> Tuple[float, float]:
        try:
            x2, y2 = transform(x, y, errcheck=True)
        except ProjError as err:
            raise TransformError(f'proj {operation} transform: {err}')

        if not (math.isfinite(x2) and math.isfinite(y2)):
            raise TransformError(
                f'proj {operation} transform: non finite result for '
                f'({x}, {y})')

        return x2, y2

    def forward(self, x: float, y: float) -> Tuple[float, float]:
        """
        Project source coordinates (lon, lat) to the target CRS

        :raises `TransformError`: if the transformation fails

        :returns: `tuple` of (x, y) in the target CRS
        """

        if self._forward is None:
            self._forward = self._transformer(self.source_crs,
                                              self.target_crs)
        return self._apply(self._forward, 'forward', x, y)

    def inverse(self, x: float, y: float) -> Tuple[float, float]:
        """
        Project target CRS coordinates back to the source CRS

        :raises `TransformError`: if the transformation fails

        :returns: `tuple` of (lon, lat) in the source CRS
        """

        if self._inverse is None:
            self._inverse = self._transformer(self.target_crs,
                                              self.source_crs)
        return self._apply(self._inverse, 'inverse', x, y)

    def __repr__(self):
        return f'<Projector> {self.source_crs} -> {self.target_crs}'


def to_geometry(geometry: Union[BaseGeometry, Mapping]) -> BaseGeometry:
    """
    Coerce a GeoJSON-like mapping to a shapely geometry

    :param geometry: shapely geometry or GeoJSON geometry `dict`

    :raises `GeometryError`: if the mapping is not a valid geometry

    :returns: `shapely.geometry.base.BaseGeometry`
    """

    if isinstance(geometry, BaseGeometry):
        return geometry

    if isinstance(geometry, Mapping):
        if geometry.get('type') == 'Feature':
            geometry = geometry.get('geometry') or {}
        try:
            return geojson_to_geom(geometry)
        except (AttributeError, KeyError, TypeError, ValueError,
                ShapelyError) as err:
            raise GeometryError(f'Invalid GeoJSON geometry: {err}')

    raise GeometryError(
        f'Unsupported geometry type {type(geometry).__name__}')


def _project_coords(coords, projector: Projector) -> list:
    return [projector.forward(c[0], c[1]) for c in coords]


def _project(geom: BaseGeometry, projector: Projector) -> BaseGeometry:
    """Recursively project a geometry, rebuilding it from projected parts"""

    if isinstance(geom, Point):
        if geom.is_empty:
            return geom
        return Point(projector.forward(geom.x, geom.y))
    # LinearRing is a LineString subclass, check it first
    elif isinstance(geom, LinearRing):
        return LinearRing(_project_coords(geom.coords, projector))
    elif isinstance(geom, LineString):
        return LineString(_project_coords(geom.coords, projector))
    elif isinstance(geom, Polygon):
        if geom.is_empty:
            return geom
        return Polygon(
            _project_coords(geom.exterior.coords, projector),
            [_project_coords(ring.coords, projector)
             for ring in geom.interiors]
        )
    elif isinstance(geom, MultiPoint):
        return MultiPoint([_project(g, projector) for g in geom.geoms])
    elif isinstance(geom, MultiLineString):
        return MultiLineString(
            [_project(g, projector) for g in geom.geoms])
    elif isinstance(geom, MultiPolygon):
        return MultiPolygon([_project(g, projector) for g in geom.geoms])
    elif isinstance(geom, GeometryCollection):
        return GeometryCollection(
            [_project(g, projector) for g in geom.geoms])

    raise GeometryError(f'Unsupported geometry type {geom.geom_type}')


def project_geometry(geometry: Union[BaseGeometry, Mapping],
                     source_crs: str, target_crs: str) -> BaseGeometry:
    """
    Project a geometry from `source_crs` to `target_crs`.

    The geometry is returned unchanged when both CRS are equal. The first
    coordinate which fails to transform aborts the whole projection.

    :param geometry: shapely geometry or GeoJSON geometry `dict`
    :param source_crs: CRS of the input geometry
    :param target_crs: CRS of the output geometry

    :raises `GeometryError`: if the geometry type is not supported
    :raises `TransformError`: if a coordinate cannot be transformed

    :returns: projected `shapely.geometry.base.BaseGeometry`
    """

    geom = to_geometry(geometry)

    if source_crs == target_crs:
        LOGGER.debug('Same source and target CRS, no projection')
        return geom

    LOGGER.debug(f'Projecting {geom.geom_type} from {source_crs} '
                 f'to {target_crs}')
    return _project(geom, Projector(source_crs, target_crs))
