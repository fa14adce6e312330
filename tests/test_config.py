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

from copy import deepcopy

from jsonschema.exceptions import ValidationError
import pytest

import pygeotms.config
from pygeotms.util import yaml_load

from tests.util import get_test_file_path


def test_config_envvars(monkeypatch):
    monkeypatch.setenv('PYGEOTMS_TEST_LOGLEVEL', 'DEBUG')

    with open(get_test_file_path('pygeotms-test-config.yml')) as fh:
        config = yaml_load(fh)

    assert isinstance(config, dict)
    assert config['logging']['level'] == 'DEBUG'
    assert config['defaults']['source_crs'] == 'EPSG:4326'

    monkeypatch.delenv('PYGEOTMS_TEST_LOGLEVEL')

    with open(get_test_file_path('pygeotms-test-config.yml')) as fh:
        config = yaml_load(fh)

    assert config['logging']['level'] == 'ERROR'


def test_config_envvars_missing(monkeypatch, tmp_path):
    monkeypatch.delenv('PYGEOTMS_TEST_UNDEFINED', raising=False)
    monkeypatch.setenv('PYGEOTMS_TEST_BUFFER', '250')

    config_file = tmp_path / 'config.yml'
    config_file.write_text(
        'defaults:\n'
        '    buffer: ${PYGEOTMS_TEST_BUFFER}\n'
        '    source_crs: ${PYGEOTMS_TEST_UNDEFINED}\n'
    )

    with pytest.raises(EnvironmentError):
        with config_file.open() as fh:
            yaml_load(fh)

    monkeypatch.setenv('PYGEOTMS_TEST_UNDEFINED', 'EPSG:3857')
    with config_file.open() as fh:
        config = yaml_load(fh)

    assert config['defaults']['buffer'] == 250
    assert config['defaults']['source_crs'] == 'EPSG:3857'


def test_validate_config(config):
    is_valid = pygeotms.config.validate_config(config)
    assert is_valid

    with pytest.raises(ValidationError):
        pygeotms.config.validate_config({'foo': 'bar'})

    cfg_copy = deepcopy(config)
    cfg_copy['logging']['level'] = 'VERBOSE'
    with pytest.raises(ValidationError):
        pygeotms.config.validate_config(cfg_copy)

    cfg_copy = deepcopy(config)
    cfg_copy['defaults']['tolerance'] = -1
    with pytest.raises(ValidationError):
        pygeotms.config.validate_config(cfg_copy)


def test_get_config(monkeypatch):
    config_file = get_test_file_path('pygeotms-test-config.yml')

    config = pygeotms.config.get_config(config_file)
    assert config['logging']['level'] == 'ERROR'

    monkeypatch.setenv('PYGEOTMS_CONFIG', config_file)
    assert pygeotms.config.get_config() == config

    monkeypatch.delenv('PYGEOTMS_CONFIG')
    with pytest.raises(RuntimeError):
        pygeotms.config.get_config()


def test_get_defaults(config):
    assert pygeotms.config.get_defaults() == pygeotms.config.DEFAULTS

    config['defaults'] = {'tolerance': 0.5}
    defaults = pygeotms.config.get_defaults(config)

    assert defaults['tolerance'] == 0.5
    assert defaults['source_crs'] == 'EPSG:4326'
    assert defaults['buffer'] == 0
