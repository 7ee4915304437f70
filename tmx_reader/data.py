"""
Tile data decoding (<data> element).

=============================================================================
DATA ENCODINGS
=============================================================================

TMX supports multiple encodings for tile data:

1. XML (deprecated, no `encoding` attribute):
   <data>
       <tile gid="1"/><tile gid="2"/><tile/>...
   </data>
   A <tile> without gid is an empty cell.

2. CSV:
   <data encoding="csv">
       1,2,3,4,5,
       6,7,8,9,10
   </data>

3. Base64:
   <data encoding="base64">
       AQAAAAIAAAADAAAABAAAAAUAAAAGAAAABwAAAA==
   </data>
   Every 4 bytes form one little-endian uint32 gid.

=============================================================================
COMPRESSION (with Base64 only)
=============================================================================

    base64 text --b64decode--> compressed bytes --codec--> raw bytes --<u4--> gids

Codecs are looked up by the `compression` token in CODECS:

- zlib: zlib.decompress
- gzip: gzip.decompress
- zstd: zstandard (Tiled 1.3+)

register_codec() adds more without touching the decoder.

=============================================================================
"""

import base64
import binascii
import gzip
import xml.etree.ElementTree as ET
import zlib
from typing import Callable, Dict, Optional, Tuple

import numpy as np
import zstandard

from .attributes import parse_uint
from .errors import (DataLengthMismatch, InvalidCompression, InvalidEncoding,
                     UnsupportedCodec)
from .logging_config import get_logger

logger = get_logger('data')

Codec = Callable[[bytes], bytes]


def _zstd_decompress(raw: bytes) -> bytes:
    # decompressobj() copes with frames that omit the content size
    return zstandard.ZstdDecompressor().decompressobj().decompress(raw)


CODECS: Dict[str, Codec] = {
    'zlib': zlib.decompress,
    'gzip': gzip.decompress,
    'zstd': _zstd_decompress,
}

# Exceptions a codec may raise on corrupt input
_CODEC_ERRORS = (zlib.error, OSError, EOFError, ValueError, zstandard.ZstdError)


def register_codec(name: str, codec: Codec):
    """Make `compression="<name>"` decodable with codec(bytes) -> bytes."""
    CODECS[name] = codec


def decompress(compression: str, raw: bytes) -> bytes:
    codec = CODECS.get(compression)
    if codec is None:
        raise UnsupportedCodec(compression)
    try:
        return codec(raw)
    except _CODEC_ERRORS as exc:
        raise InvalidCompression(compression, str(exc)) from exc


# =============================================================================
# PAYLOAD DECODERS
# =============================================================================

def _payload_bytes(data_elem: ET.Element, compression: Optional[str]) -> bytes:
    """Base64-decode the element text and decompress it if requested."""
    text = ''.join((data_elem.text or '').split())
    try:
        raw = base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise InvalidEncoding('base64', str(exc)) from exc

    if compression:
        raw = decompress(compression, raw)
    return raw


def _gids_from_csv(text: str) -> Tuple[int, ...]:
    gids = []
    # Trailing commas at the end of each row produce empty tokens
    for token in text.split(','):
        token = token.strip()
        if not token:
            continue
        try:
            gids.append(parse_uint(token))
        except ValueError as exc:
            raise InvalidEncoding('csv', f"bad gid `{token}`") from exc
    return tuple(gids)


def _gids_from_bytes(raw: bytes) -> Tuple[int, ...]:
    if len(raw) % 4:
        raise InvalidEncoding(
            'base64', f"{len(raw)} bytes is not a whole number of gids")
    return tuple(np.frombuffer(raw, dtype='<u4').tolist())


def _gids_from_tiles(data_elem: ET.Element) -> Tuple[int, ...]:
    gids = []
    for tile_elem in data_elem.findall('tile'):
        raw = tile_elem.get('gid', '0')
        try:
            gids.append(parse_uint(raw))
        except ValueError as exc:
            raise InvalidEncoding('xml', f"bad gid `{raw}`") from exc
    return tuple(gids)


def decode_gids(data_elem: ET.Element, expected: int) -> Tuple[int, ...]:
    """
    Decode a tile layer's <data> into `expected` raw gids, row-major.

    The gids still carry their flip flags; see gid.split_gid().

    Raises UnsupportedCodec, InvalidEncoding, InvalidCompression,
    DataLengthMismatch.
    """
    encoding = data_elem.get('encoding')
    compression = data_elem.get('compression')

    if encoding == 'base64':
        gids = _gids_from_bytes(_payload_bytes(data_elem, compression))
    elif encoding in ('csv', None):
        if compression:
            logger.warning("Ignoring compression=%r on %s tile data",
                           compression, encoding or 'xml')
        if encoding == 'csv':
            gids = _gids_from_csv(data_elem.text or '')
        else:
            gids = _gids_from_tiles(data_elem)
    else:
        raise UnsupportedCodec(encoding)

    if len(gids) != expected:
        raise DataLengthMismatch(expected, len(gids))
    return gids


def decode_bytes(data_elem: ET.Element) -> bytes:
    """
    Decode an embedded binary payload (e.g. <image><data>).

    Only base64 makes sense for arbitrary bytes. The result is returned
    as-is, image bytes are never interpreted.
    """
    encoding = data_elem.get('encoding')
    if encoding != 'base64':
        raise UnsupportedCodec(encoding or 'xml')
    return _payload_bytes(data_elem, data_elem.get('compression'))
