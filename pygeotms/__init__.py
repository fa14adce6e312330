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

__version__ = '0.1.0'

import click

from pygeotms.config import config as config_cli, get_config, get_defaults
from pygeotms.log import setup_logger
from pygeotms.registry import tms
from pygeotms.schemas import schema


@click.group()
@click.version_option(version=__version__)
@click.option('--config', '-c', 'config_file', envvar='PYGEOTMS_CONFIG',
              default=None, help='configuration file')
@click.pass_context
def cli(ctx, config_file):
    ctx.ensure_object(dict)

    if config_file:
        config_ = get_config(config_file)
        setup_logger(config_.get('logging', {}))
        ctx.obj['defaults'] = get_defaults(config_)
    else:
        ctx.obj['defaults'] = get_defaults()


cli.add_command(config_cli)
cli.add_command(schema)
cli.add_command(tms)
