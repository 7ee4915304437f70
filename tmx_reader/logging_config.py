"""
Logging for tmx_reader.

=============================================================================
LOGGER NAMES
=============================================================================

Every module logs under the package logger:

    tmx_reader.data      ignored compression on csv/xml tile data
    tmx_reader.tileset   tilesets parsed, external TSX reads
    tmx_reader.map       maps loaded, duplicate object ids

The decoder itself never installs handlers; an application embedding it
configures logging its own way. The command line tool calls
setup_logging(), mapping its flags to levels:

    (none)   WARNING
    -v       INFO     one line per loaded map
    -d       DEBUG    every tileset and external read

=============================================================================
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = 'tmx_reader'


def setup_logging(verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Send tmx_reader log records to stderr at the level the flags select."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # force: replace handlers left over from an earlier call
    logging.basicConfig(
        level=level,
        format='%(levelname)s %(name)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for one module, e.g. get_logger('data') -> tmx_reader.data."""
    if name:
        return logging.getLogger(f'{PACKAGE_LOGGER}.{name}')
    return logging.getLogger(PACKAGE_LOGGER)
