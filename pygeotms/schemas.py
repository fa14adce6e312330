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

"""OGC TileMatrixSet and TileSet JSON Schema validation"""

from enum import Enum
from functools import lru_cache
import json
import logging
from typing import Mapping, Union

import click
from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError as JSONSchemaValidationError

from pygeotms.error import ValidationError
from pygeotms.models.tms import TileMatrixSetType
from pygeotms.util import SCHEMASDIR

LOGGER = logging.getLogger(__name__)


class SchemaKind(Enum):
    TILEMATRIXSET = 'tileMatrixSet'
    TILESET = 'tileSet'


@lru_cache(maxsize=None)
def get_validator(kind: SchemaKind) -> Draft7Validator:
    """
    Compiled validator of a schema kind, loaded once

    :param kind: `SchemaKind`

    :returns: `jsonschema.Draft7Validator`
    """

    schema_file = SCHEMASDIR / 'tms' / f'{kind.value}.json'
    LOGGER.debug(f'Loading schema {schema_file}')

    with schema_file.open(encoding='utf8') as fh:
        schema = json.load(fh)

    Draft7Validator.check_schema(schema)
    return Draft7Validator(schema)


def validate_document(kind: Union[SchemaKind, str],
                      data: Union[bytes, str, Mapping]) -> bool:
    """
    Validate a TileMatrixSet or TileSet document against its schema

    :param kind: `SchemaKind` or its value (`tileMatrixSet`, `tileSet`)
    :param data: JSON bytes/string or already decoded `dict`

    :raises `ValidationError`: if the document is not valid JSON or does
                               not validate against the schema

    :returns: `bool` of validation
    """

    try:
        kind = SchemaKind(kind)
    except ValueError:
        raise ValidationError(f'Unknown schema kind {kind!r}')

    if isinstance(data, (bytes, str)):
        try:
            data = json.loads(data)
        except ValueError as err:
            raise ValidationError(f'invalid JSON: {err}')

    try:
        get_validator(kind).validate(data)
    except JSONSchemaValidationError as err:
        LOGGER.debug(f'{kind.value} document failed validation: {err}')
        raise ValidationError(
            f'{kind.value} document is not valid: {err.message}',
            user_msg=err.message)

    return True


def validate_tilematrixset(tms: TileMatrixSetType) -> bool:
    """
    Validate a TileMatrixSet model against the TileMatrixSet schema

    :param tms: `TileMatrixSetType`

    :returns: `bool` of validation
    """

    document = tms.model_dump(mode='json', exclude_none=True)
    return validate_document(SchemaKind.TILEMATRIXSET, document)


@click.group()
def schema():
    """Schema validation of OGC tiles documents"""
    pass


@click.command()
@click.argument('document_file', type=click.Path(exists=True))
@click.option('--kind', '-k', default=SchemaKind.TILEMATRIXSET.value,
              type=click.Choice([k.value for k in SchemaKind]),
              help='document type')
def validate(document_file, kind):
    """Validate a TileMatrixSet or TileSet JSON document"""

    with open(document_file, 'rb') as fh:
        click.echo(f'Validating {document_file} as {kind}')
        try:
            validate_document(kind, fh.read())
        except ValidationError as err:
            raise click.ClickException(str(err))
        click.echo(f'Valid {kind} document')


schema.add_command(validate)
