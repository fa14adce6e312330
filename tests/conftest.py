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

import pytest

from pygeotms.registry import load_tilematrixset
from pygeotms.tilematrix import TileMatrix
from pygeotms.tilematrixset import TileMatrixSet
from pygeotms.util import yaml_load

from tests.util import get_test_file_path, load_json


@pytest.fixture()
def config():
    with open(get_test_file_path('pygeotms-test-config.yml')) as fh:
        return yaml_load(fh)


@pytest.fixture()
def webmercatorquad():
    return load_tilematrixset('WebMercatorQuad')


@pytest.fixture()
def custom_tms_document():
    return load_json('data/custom-tms.json')


@pytest.fixture()
def custom_tms(custom_tms_document):
    return TileMatrixSet.from_dict(custom_tms_document)


@pytest.fixture()
def berlin_geometry():
    collection = load_json('data/berlin.geojson')
    return collection['features'][0]['geometry']


@pytest.fixture()
def square_matrix():
    """2x2 matrix of single pixel tiles with a 24000 unit cell size"""
    return TileMatrix({
        'id': 'square',
        'cellSize': 24000,
        'pointOfOrigin': [0, 48000],
        'tileWidth': 1,
        'tileHeight': 1,
        'matrixWidth': 2,
        'matrixHeight': 2
    })


@pytest.fixture()
def bottom_left_matrix():
    return TileMatrix({
        'id': 'bottomleft',
        'cellSize': 1,
        'cornerOfOrigin': 'bottomLeft',
        'pointOfOrigin': [0, 0],
        'tileWidth': 1,
        'tileHeight': 1,
        'matrixWidth': 2,
        'matrixHeight': 2
    })


@pytest.fixture()
def coalesced_matrix():
    """4x4 matrix with the first two rows coalesced by a factor of 2"""
    return TileMatrix({
        'id': 'coalesced',
        'cellSize': 1,
        'pointOfOrigin': [0, 4],
        'tileWidth': 1,
        'tileHeight': 1,
        'matrixWidth': 4,
        'matrixHeight': 4,
        'variableMatrixWidths': [
            {'coalesce': 2, 'minTileRow': 0, 'maxTileRow': 1}
        ]
    })
