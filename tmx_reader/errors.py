"""
Exceptions raised while decoding TMX/TSX documents.

Every error is terminal for the current parse: a map with silently wrong
tile data is worse than a refused load. All exceptions derive from
TmxError so callers can catch the whole family at once:

    try:
        tmx_map = load_map("level1.tmx")
    except TmxError as e:
        print(f"Error: {e}")

Unknown elements and attributes are NOT errors. Newer Tiled versions add
fields all the time and we want to keep reading their files.
"""

from typing import Optional


class TmxError(Exception):
    """Base class for all decoding errors."""


class XmlSyntaxError(TmxError):
    """The document is not well-formed XML, or has the wrong root element."""

    def __init__(self, message: str):
        super().__init__(f"Invalid XML input: {message}")
        self.detail = message


class MissingRequiredAttribute(TmxError):
    def __init__(self, name: str, element: str):
        super().__init__(f"Missing required attribute `{name}` on <{element}>")
        self.name = name
        self.element = element


class InvalidAttributeValue(TmxError):
    def __init__(self, name: str, raw: str, expected: str,
                 element: Optional[str] = None):
        where = f" on <{element}>" if element else ""
        super().__init__(
            f"Illegal value `{raw}` for the `{name}` attribute{where} "
            f"(expected {expected})"
        )
        self.name = name
        self.raw = raw
        self.expected = expected
        self.element = element


class InvalidPropertyValue(TmxError):
    def __init__(self, name: str, type: str, raw: str):
        super().__init__(
            f"Property `{name}` of type `{type}` has an invalid value `{raw}`"
        )
        self.name = name
        self.type = type
        self.raw = raw


class InvalidEncoding(TmxError):
    """Tile data could not be decoded (bad base64, bad CSV token, ...)."""

    def __init__(self, encoding: str, detail: str):
        super().__init__(f"Invalid {encoding} data: {detail}")
        self.encoding = encoding
        self.detail = detail


class InvalidCompression(TmxError):
    def __init__(self, compression: str, detail: str):
        super().__init__(f"Could not decompress {compression} data: {detail}")
        self.compression = compression
        self.detail = detail


class UnsupportedCodec(TmxError):
    """Unknown `encoding` or `compression` token."""

    def __init__(self, name: str):
        super().__init__(f"Unsupported encoding or compression: `{name}`")
        self.name = name


class DataLengthMismatch(TmxError):
    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Tile data holds {actual} cells, layer needs {expected}"
        )
        self.expected = expected
        self.actual = actual


class InvalidPointList(TmxError):
    def __init__(self, raw: str):
        super().__init__(f"Invalid point list: `{raw}`")
        self.raw = raw


class UnresolvedGid(TmxError):
    """A nonzero gid that no tileset of the map covers."""

    def __init__(self, gid: int):
        super().__init__(f"Global tile id {gid} does not belong to any tileset")
        self.gid = gid


class TilesetOverlap(TmxError):
    def __init__(self, first: str, second: str, firstgid: int):
        super().__init__(
            f"Tileset `{second}` (firstgid={firstgid}) overlaps the gid "
            f"range of tileset `{first}`"
        )
        self.first = first
        self.second = second
        self.firstgid = firstgid


class IoError(TmxError):
    """Wraps an OSError raised by the file reader."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"I/O error reading `{path}`: {cause}")
        self.path = path
        self.cause = cause


class TilesetLoadError(TmxError):
    """An external tileset (TSX) could not be read or decoded."""

    def __init__(self, source: str, cause: Exception):
        super().__init__(f"Could not load tileset `{source}`: {cause}")
        self.source = source
        self.cause = cause
