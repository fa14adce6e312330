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

"""Generic util functions used in the code"""

from dataclasses import asdict, is_dataclass
from enum import Enum
import json
import logging
import os
from pathlib import Path
import re
from typing import Any, IO, Union

import yaml

LOGGER = logging.getLogger(__name__)

THISDIR = Path(__file__).parent.resolve()
RESOURCESDIR = THISDIR / 'resources'
DEFINITIONSDIR = RESOURCESDIR / 'definitions'
SCHEMASDIR = RESOURCESDIR / 'schemas'

ENV_VAR_PATTERN = re.compile(
    r'\$\{(?P<varname>\w+)(:-(?P<default>[^}]*))?\}')


def get_typed_value(value: str) -> Union[bool, float, int, str]:
    """
    Derive true type from data value

    :param value: value

    :returns: value as a native Python data type
    """

    if value.lower() in ('true', 'false'):
        return value.lower() == 'true'

    for type_ in (int, float):
        try:
            return type_(value)
        except ValueError:
            pass

    return value


def _expand_env(match: re.Match) -> str:
    varname = match.group('varname')
    value = os.getenv(varname)
    if value is not None:
        return value
    if match.group('default') is not None:
        return match.group('default')
    raise EnvironmentError(
        f'Could not find the {varname!r} environment variable')


def yaml_load(fh: IO) -> dict:
    """
    serializes a YAML files into a pyyaml object, expanding
    `${VAR}` and `${VAR:-default}` environment variable references

    :param fh: file handle

    :returns: `dict` representation of YAML
    """

    class EnvVarLoader(yaml.SafeLoader):
        pass

    def env_constructor(loader, node):
        value = ENV_VAR_PATTERN.sub(_expand_env, node.value)
        return get_typed_value(value)

    EnvVarLoader.add_implicit_resolver(
        '!env', re.compile(r'.*\$\{\w+(:-[^}]*)?\}'), None)
    EnvVarLoader.add_constructor('!env', env_constructor)

    return yaml.load(fh, Loader=EnvVarLoader)


def json_serial(obj: Any) -> Any:
    """
    helper function to convert to JSON non-default types

    :param obj: `object` to be evaluated

    :returns: JSON serializable representation
    """

    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, Path):
        return str(obj)
    elif hasattr(obj, 'model_dump'):
        return obj.model_dump(mode='json', exclude_none=True)
    else:
        msg = f'{obj} type {type(obj)} not serializable'
        LOGGER.error(msg)
        raise TypeError(msg)


def to_json(dict_: Any, pretty: bool = False) -> str:
    """
    Serialize dict to json

    :param dict_: `dict` of JSON representation
    :param pretty: `bool` of whether to prettify JSON (default is `False`)

    :returns: JSON string representation
    """

    indent = 4 if pretty else None

    return json.dumps(dict_, default=json_serial, indent=indent)
