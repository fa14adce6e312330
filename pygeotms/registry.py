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

"""Registry of well-known tile matrix sets shipped with pygeotms"""

from functools import lru_cache
import json
import logging
from typing import List

import click

from pygeotms.crs import WGS84_CRS
from pygeotms.error import TileMatrixSetError, TileMatrixSetNotFoundError
from pygeotms.models.tms import Tile, TileMatrixSetType
from pygeotms.tilematrixset import TileMatrixSet
from pygeotms.util import DEFINITIONSDIR, to_json

LOGGER = logging.getLogger(__name__)

REGISTRY_DIR = DEFINITIONSDIR / 'tilematrixsets'


@lru_cache(maxsize=None)
def _registry() -> dict:
    """Map of tile matrix set names to their JSON document paths"""

    return {path.stem: path for path in REGISTRY_DIR.glob('*.json')}


@lru_cache(maxsize=None)
def _parse(name: str) -> TileMatrixSetType:
    path = _registry()[name]
    LOGGER.debug(f'Loading tile matrix set {name} from {path}')
    with path.open(encoding='utf8') as fh:
        return TileMatrixSetType.model_validate_json(fh.read())


def available_tilematrixsets() -> List[str]:
    """
    Names of the built-in tile matrix sets

    :returns: sorted `list` of names
    """

    return sorted(_registry())


def load_document(name: str) -> TileMatrixSetType:
    """
    Built-in tile matrix set document by name (case-sensitive)

    :param name: tile matrix set name, e.g. `WebMercatorQuad`

    :raises `TileMatrixSetNotFoundError`: if the name is unknown

    :returns: `TileMatrixSetType` owned by the caller
    """

    if name not in _registry():
        msg = f'tilematrixset {name!r} not found'
        LOGGER.error(msg)
        raise TileMatrixSetNotFoundError(msg)

    return _parse(name).model_copy(deep=True)


def load_tilematrixset(name: str) -> TileMatrixSet:
    """
    Built-in tile matrix set by name

    :param name: tile matrix set name, e.g. `WebMercatorQuad`

    :raises `TileMatrixSetNotFoundError`: if the name is unknown

    :returns: `TileMatrixSet`
    """

    return TileMatrixSet(load_document(name))


def _load_geometry(filename: str) -> dict:
    with open(filename, encoding='utf8') as fh:
        document = json.load(fh)

    if document.get('type') == 'FeatureCollection':
        return {
            'type': 'GeometryCollection',
            'geometries': [f['geometry'] for f in document['features']
                           if f.get('geometry')]
        }
    elif document.get('type') == 'Feature':
        return document['geometry']

    return document


@click.group()
def tms():
    """Tile matrix set utilities"""
    pass


@click.command('list')
def list_():
    """List built-in tile matrix sets"""

    for name in available_tilematrixsets():
        tms_ = load_tilematrixset(name)
        click.echo(f'{name} (crs={tms_.crs}, minzoom={tms_.minzoom}, '
                   f'maxzoom={tms_.maxzoom})')


@click.command()
@click.argument('name')
@click.option('--pretty', is_flag=True, default=False,
              help='pretty print JSON')
def info(name, pretty):
    """Print a built-in tile matrix set document"""

    try:
        click.echo(load_tilematrixset(name).to_json(pretty=pretty))
    except TileMatrixSetError as err:
        raise click.ClickException(str(err))


@click.command()
@click.argument('name')
@click.argument('lon', type=float)
@click.argument('lat', type=float)
@click.argument('zoom', type=int)
def tile(name, lon, lat, zoom):
    """Tile containing a longitude/latitude at a zoom level"""

    try:
        tile_ = load_tilematrixset(name).tile_for_lonlat(lon, lat, zoom)
    except TileMatrixSetError as err:
        raise click.ClickException(str(err))

    if tile_ is None:
        raise click.ClickException(f'No tile for ({lon}, {lat})')

    click.echo(to_json(tile_))


@click.command()
@click.argument('name')
@click.argument('zoom', type=int)
@click.argument('col', type=int)
@click.argument('row', type=int)
@click.option('--geographic', is_flag=True, default=False,
              help='bounds in longitude/latitude')
def bounds(name, zoom, col, row, geographic):
    """Bounds of a tile"""

    tile_ = Tile(zoom, col, row)
    try:
        tms_ = load_tilematrixset(name)
        if geographic:
            bounds_ = tms_.bounds(tile_)
        else:
            bounds_ = tms_.xy_bounds(tile_)
    except TileMatrixSetError as err:
        raise click.ClickException(str(err))

    click.echo(to_json(bounds_.to_list()))


@click.command()
@click.pass_context
@click.argument('name')
@click.argument('resolution', type=float)
@click.option('--tolerance', type=float, default=None,
              help='allowed excess of the cell size')
def zoom(ctx, name, resolution, tolerance):
    """Zoom level matching a resolution (CRS units per pixel)"""

    if tolerance is None:
        tolerance = (ctx.obj or {}).get('defaults', {}).get('tolerance', 0)

    try:
        tms_ = load_tilematrixset(name)
        zoom_ = tms_.zoom_for_resolution(resolution, tolerance)
    except TileMatrixSetError as err:
        raise click.ClickException(str(err))

    click.echo(to_json({
        'zoom': zoom_,
        'id': tms_.tilematrix(zoom_).id,
        'resolution': tms_.resolution_for_zoom(zoom_)
    }))


@click.command()
@click.pass_context
@click.argument('name')
@click.argument('geojson_file', type=click.Path(exists=True))
@click.option('--minzoom', type=int, required=True, help='first zoom level')
@click.option('--maxzoom', type=int, required=True, help='last zoom level')
@click.option('--buffer', type=float, default=None,
              help='bounding box expansion in CRS units')
@click.option('--crs', 'source_crs', default=None,
              help='CRS of the GeoJSON geometry')
def cover(ctx, name, geojson_file, minzoom, maxzoom, buffer, source_crs):
    """Tiles covering the geometry of a GeoJSON file"""

    defaults = (ctx.obj or {}).get('defaults', {})
    if buffer is None:
        buffer = defaults.get('buffer', 0)
    if source_crs is None:
        source_crs = defaults.get('source_crs', WGS84_CRS)

    try:
        tiles = load_tilematrixset(name).tiles_for_geometry_with_crs(
            _load_geometry(geojson_file), source_crs, minzoom, maxzoom,
            buffer)
    except TileMatrixSetError as err:
        raise click.ClickException(str(err))

    click.echo(to_json(tiles))


tms.add_command(list_)
tms.add_command(info)
tms.add_command(tile)
tms.add_command(bounds)
tms.add_command(zoom)
tms.add_command(cover)
