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

"""Error classes"""


class GenericError(Exception):
    """Exception class where error codes and messages
    can be defined in custom error subclasses, so callers
    can tell configuration, range and transform failures apart.
    """

    default_msg = 'Unknown error'

    def __init__(self, msg=None, *args, user_msg=None) -> None:
        # if only a user_msg is provided, use it as msg
        if user_msg and not msg:
            msg = user_msg
        super().__init__(msg, *args)
        self.user_msg = user_msg

    @property
    def message(self):
        return self.user_msg if self.user_msg else self.default_msg


class TileMatrixSetError(GenericError):
    """tile matrix set generic error"""
    default_msg = 'tile matrix set error (check logs)'


class TileMatrixSetConfigError(TileMatrixSetError):
    """malformed or inconsistent tile matrix set document"""
    default_msg = 'invalid tile matrix set definition'


class CRSResolutionError(TileMatrixSetConfigError):
    """CRS field of a tile matrix set cannot be resolved"""
    default_msg = 'unsupported CRS'


class RangeError(TileMatrixSetError):
    """argument outside of the valid grid range"""
    default_msg = 'value out of range'


class ZoomRangeError(RangeError):
    """zoom level or zoom range out of range"""
    default_msg = 'zoom out of range'


class TileOutOfRangeError(RangeError):
    """tile index outside of the tile matrix"""
    default_msg = 'tile out of range'


class TransformError(TileMatrixSetError):
    """coordinate transformation failure"""
    default_msg = 'coordinate transformation failed'


class GeometryError(TileMatrixSetError):
    """unsupported geometry"""
    default_msg = 'unsupported geometry'


class TileMatrixSetNotFoundError(TileMatrixSetError):
    """tile matrix set not found in registry"""
    default_msg = 'tile matrix set not found'


class ValidationError(TileMatrixSetError):
    """document does not validate against its schema"""
    default_msg = 'document is not valid'
