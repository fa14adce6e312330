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

import json
import os.path

TESTSDIR = os.path.dirname(os.path.abspath(__file__))


def get_test_file_path(filename: str) -> str:
    """helper function to open test file safely"""

    if os.path.isfile(filename):
        return filename
    else:
        return os.path.join(TESTSDIR, filename)


def load_json(filename: str) -> dict:
    with open(get_test_file_path(filename), encoding='utf8') as fh:
        return json.load(fh)


def tile_matrix(id_: str, cell_size: float, **kwargs) -> dict:
    """
    Minimal tile matrix definition for testing

    :param id_: tile matrix identifier
    :param cell_size: cell size in CRS units

    :returns: `dict` of tile matrix, overridden with `kwargs`
    """

    tm = {
        'id': id_,
        'cellSize': cell_size,
        'pointOfOrigin': [0, 0],
        'tileWidth': 256,
        'tileHeight': 256,
        'matrixWidth': 1,
        'matrixHeight': 1
    }
    tm.update(kwargs)
    return tm
