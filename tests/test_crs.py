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

from contextlib import nullcontext as does_not_raise

import pytest
from pyproj.exceptions import CRSError
from shapely.geometry import (
    GeometryCollection, LinearRing, LineString, MultiPolygon, Point, Polygon,
    box
)

from pygeotms import crs
from pygeotms.error import CRSResolutionError, GeometryError, TransformError
from pygeotms.models.tms import CRSObjectType, TileMatrixSetType


@pytest.mark.parametrize('value, expected', [
    pytest.param('EPSG:3857', 'EPSG:3857', id='epsg'),
    pytest.param('epsg:3857', 'EPSG:3857', id='epsg-lowercase'),
    pytest.param('http://www.opengis.net/def/crs/EPSG/0/32632', 'EPSG:32632', id='uri'),  # noqa
    pytest.param('https://www.opengis.net/def/crs/EPSG/0/3857/', 'EPSG:3857', id='uri-trailing-slash'),  # noqa
    pytest.param('urn:ogc:def:crs:EPSG::4326', 'EPSG:4326', id='urn'),
    pytest.param('http://www.opengis.net/def/crs/OGC/1.3/CRS84', 'http://www.opengis.net/def/crs/OGC/1.3/CRS84', id='non-epsg-uri'),  # noqa
    pytest.param('OGC:CRS84', 'OGC:CRS84', id='other-authority'),
])
def test_normalize_crs_string(value, expected):
    assert crs.normalize_crs_string(value) == expected


@pytest.mark.parametrize('value, expected_raise, expected', [
    pytest.param('EPSG:3857', does_not_raise(), 'EPSG:3857', id='string'),
    pytest.param('urn:ogc:def:crs:EPSG::4326', does_not_raise(), 'EPSG:4326', id='urn'),  # noqa
    pytest.param({'uri': 'http://www.opengis.net/def/crs/EPSG/0/32632'}, does_not_raise(), 'EPSG:32632', id='uri-object'),  # noqa
    pytest.param(CRSObjectType(uri='http://www.opengis.net/def/crs/EPSG/0/3395'), does_not_raise(), 'EPSG:3395', id='uri-model'),  # noqa
    pytest.param({'wkt': 'PROJCS["Dummy"]'}, does_not_raise(), 'PROJCS["Dummy"]', id='wkt-string'),  # noqa
    pytest.param({'wkt': [1, 2, 3]}, pytest.raises(CRSResolutionError), None, id='wkt-list'),  # noqa
    pytest.param({'referenceSystem': {'type': 'Dummy'}}, pytest.raises(CRSResolutionError), None, id='reference-system'),  # noqa
    pytest.param({}, pytest.raises(CRSResolutionError), None, id='empty-object'),  # noqa
    pytest.param([1, 2], pytest.raises(CRSResolutionError), None, id='list'),
    pytest.param(None, pytest.raises(CRSResolutionError), None, id='missing'),
])
def test_resolve_crs(value, expected_raise, expected):
    with expected_raise:
        assert crs.resolve_crs(value) == expected


def test_resolve_crs_projjson():
    projjson = {'type': 'ProjectedCRS', 'name': 'Dummy'}

    resolved = crs.resolve_crs({'wkt': projjson})
    assert '"ProjectedCRS"' in resolved
    assert resolved == crs.resolve_crs(
        CRSObjectType(wkt={'name': 'Dummy', 'type': 'ProjectedCRS'}))


@pytest.mark.parametrize('uri, expected_raise, expected', [
    pytest.param('http://www.opengis.net/not/a/valid/crs/uri', pytest.raises(CRSError), None),  # noqa
    pytest.param('http://www.opengis.net/def/crs/EPSG/0/0', pytest.raises(CRSError), None),  # noqa
    pytest.param('http://www.opengis.net/def/crs/OGC/1.3/CRS84', does_not_raise(), 'OGC:CRS84'),  # noqa
    pytest.param('http://www.opengis.net/def/crs/EPSG/0/3857', does_not_raise(), 'EPSG:3857'),  # noqa
    pytest.param('urn:ogc:def:crs:OGC::CRS84', does_not_raise(), 'OGC:CRS84'),
    pytest.param('urn:ogc:def:crs:EPSG::4326', does_not_raise(), 'EPSG:4326'),
    pytest.param('EPSG:32632', does_not_raise(), 'EPSG:32632'),
    pytest.param('EPSG:0', pytest.raises(CRSError), None),
])
def test_get_crs(uri, expected_raise, expected):
    with expected_raise:
        crs_ = crs.get_crs(uri)
        assert crs_.srs.upper() == expected


def test_projector_forward_inverse():
    projector = crs.Projector.from_wgs84('EPSG:3857')
    assert projector.source_crs == crs.WGS84_CRS
    assert projector.target_crs == 'EPSG:3857'

    x, y = projector.forward(0, 0)
    assert x == pytest.approx(0, abs=1e-9)
    assert y == pytest.approx(0, abs=1e-9)

    lon, lat = projector.inverse(x, y)
    assert lon == pytest.approx(0, abs=1e-9)
    assert lat == pytest.approx(0, abs=1e-9)

    x, y = projector.forward(-1, -1)
    assert x == pytest.approx(-111319.49079327357, abs=1e-3)
    assert y == pytest.approx(-111325.14286638486, abs=1e-3)


def test_projector_errors():
    projector = crs.Projector.from_wgs84('EPSG:3857')
    with pytest.raises(TransformError):
        projector.forward(0, 100)

    projector = crs.Projector.from_wgs84('EPSG:0')
    with pytest.raises(TransformError):
        projector.forward(0, 0)


@pytest.mark.parametrize('tms_crs, expected_raise, expected', [
    pytest.param('EPSG:3857', does_not_raise(), 'EPSG:3857', id='string'),
    pytest.param({'uri': 'http://www.opengis.net/def/crs/EPSG/0/32632'}, does_not_raise(), 'EPSG:32632', id='uri'),  # noqa
    pytest.param(None, pytest.raises(CRSResolutionError), None, id='missing'),
])
def test_projector_from_tilematrixset(tms_crs, expected_raise, expected):
    tms = TileMatrixSetType(crs=tms_crs)
    with expected_raise:
        projector = crs.Projector.from_tilematrixset(tms)
        assert projector.target_crs == expected


@pytest.mark.parametrize('geometry, expected_raise, expected_type', [
    pytest.param(Point(1, 2), does_not_raise(), 'Point', id='shapely'),
    pytest.param({'type': 'LineString', 'coordinates': [[0, 0], [1, 1]]}, does_not_raise(), 'LineString', id='geojson'),  # noqa
    pytest.param({'type': 'Feature', 'properties': {}, 'geometry': {'type': 'Point', 'coordinates': [1, 2]}}, does_not_raise(), 'Point', id='feature'),  # noqa
    pytest.param({'type': 'Feature', 'properties': {}, 'geometry': None}, pytest.raises(GeometryError), None, id='feature-without-geometry'),  # noqa
    pytest.param({'type': 'Circle', 'coordinates': [0, 0]}, pytest.raises(GeometryError), None, id='unknown-type'),  # noqa
    pytest.param('POINT (1 2)', pytest.raises(GeometryError), None, id='string'),  # noqa
])
def test_to_geometry(geometry, expected_raise, expected_type):
    with expected_raise:
        assert crs.to_geometry(geometry).geom_type == expected_type


def test_project_geometry_point():
    projected = crs.project_geometry(Point(0, 0), 'EPSG:4326', 'EPSG:3857')

    assert isinstance(projected, Point)
    assert projected.x == pytest.approx(0, abs=1e-9)
    assert projected.y == pytest.approx(0, abs=1e-9)


def test_project_geometry_polygon():
    projected = crs.project_geometry(
        box(-1, -1, 1, 1), 'EPSG:4326', 'EPSG:3857')

    assert isinstance(projected, Polygon)
    minx, miny, maxx, maxy = projected.bounds
    assert minx == pytest.approx(-111319.49079327357, abs=1e-3)
    assert miny == pytest.approx(-111325.14286638486, abs=1e-3)
    assert maxx == pytest.approx(111319.49079327357, abs=1e-3)
    assert maxy == pytest.approx(111325.14286638486, abs=1e-3)


def test_project_geometry_polygon_with_hole():
    polygon = Polygon(
        [(-2, -2), (2, -2), (2, 2), (-2, 2), (-2, -2)],
        [[(-1, -1), (1, -1), (1, 1), (-1, 1), (-1, -1)]]
    )

    projected = crs.project_geometry(polygon, 'EPSG:4326', 'EPSG:3857')

    assert len(projected.interiors) == 1
    hole_minx = projected.interiors[0].bounds[0]
    assert hole_minx == pytest.approx(-111319.49079327357, abs=1e-3)


def test_project_geometry_collection():
    collection = GeometryCollection([
        Point(0, 0),
        LineString([(0, 0), (1, 1)]),
        MultiPolygon([box(0, 0, 1, 1), box(2, 2, 3, 3)])
    ])

    projected = crs.project_geometry(collection, 'EPSG:4326', 'EPSG:3857')

    assert isinstance(projected, GeometryCollection)
    point, line, polygons = projected.geoms
    assert point.x == pytest.approx(0, abs=1e-9)
    assert line.coords[1][0] == pytest.approx(111319.49079327357, abs=1e-3)
    assert line.coords[1][1] == pytest.approx(111325.14286638486, abs=1e-3)
    assert isinstance(polygons, MultiPolygon)
    assert len(polygons.geoms) == 2

    ring = crs.project_geometry(
        LinearRing([(0, 0), (1, 0), (1, 1)]), 'EPSG:4326', 'EPSG:3857')
    assert isinstance(ring, LinearRing)
    assert ring.is_closed


def test_project_geometry_same_crs():
    point = Point(1, 2)

    projected = crs.project_geometry(point, 'EPSG:4326', 'EPSG:4326')
    assert projected.equals(point)

    projected = crs.project_geometry(
        {'type': 'Point', 'coordinates': [1, 2]}, 'EPSG:3857', 'EPSG:3857')
    assert projected.equals(point)


def test_project_geometry_errors():
    with pytest.raises(TransformError):
        crs.project_geometry(
            LineString([(0, 0), (0, 100)]), 'EPSG:4326', 'EPSG:3857')

    with pytest.raises(GeometryError):
        crs.project_geometry(42, 'EPSG:4326', 'EPSG:3857')
