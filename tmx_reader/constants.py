"""
Constants and enumerations of the TMX format.

=============================================================================
GID FLIP FLAGS
=============================================================================

The three highest bits of a 32-bit gid store how the tile is transformed
when drawn:

    bit 31: horizontal flip   0x80000000
    bit 30: vertical flip     0x40000000
    bit 29: diagonal flip     0x20000000  (anti-diagonal, used for rotation)

The tileset lookup must be done with these bits cleared:

    raw gid   = 0x80000005
    flags     = HORIZONTAL
    gid       = 5

=============================================================================
"""

from enum import Enum, IntFlag


FLIPPED_HORIZONTALLY_FLAG = 0x80000000
FLIPPED_VERTICALLY_FLAG = 0x40000000
FLIPPED_DIAGONALLY_FLAG = 0x20000000

FLIP_MASK = (FLIPPED_HORIZONTALLY_FLAG
             | FLIPPED_VERTICALLY_FLAG
             | FLIPPED_DIAGONALLY_FLAG)
GID_MASK = ~FLIP_MASK & 0xFFFFFFFF

UINT32_MAX = 0xFFFFFFFF


class FlipFlags(IntFlag):
    """Transform flags packed in the high bits of a gid."""
    NONE = 0
    HORIZONTAL = FLIPPED_HORIZONTALLY_FLAG
    VERTICAL = FLIPPED_VERTICALLY_FLAG
    DIAGONAL = FLIPPED_DIAGONALLY_FLAG


class Orientation(Enum):
    ORTHOGONAL = "orthogonal"
    ISOMETRIC = "isometric"
    STAGGERED = "staggered"
    HEXAGONAL = "hexagonal"


class RenderOrder(Enum):
    RIGHT_DOWN = "right-down"
    RIGHT_UP = "right-up"
    LEFT_DOWN = "left-down"
    LEFT_UP = "left-up"


class StaggerAxis(Enum):
    X = "x"
    Y = "y"


class StaggerIndex(Enum):
    EVEN = "even"
    ODD = "odd"


class DrawOrder(Enum):
    TOPDOWN = "topdown"   # sorted by y
    INDEX = "index"       # document order


class PropertyType(Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    COLOR = "color"
    FILE = "file"


class LayerKind(Enum):
    TILE = "layer"
    OBJECTS = "objectgroup"
    IMAGE = "imagelayer"
    GROUP = "group"


class ShapeKind(Enum):
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    POLYGON = "polygon"
    POLYLINE = "polyline"
    POINT = "point"
    TILE = "tile"


# Orientations for which staggeraxis/staggerindex mean something
STAGGERED_ORIENTATIONS = (Orientation.STAGGERED, Orientation.HEXAGONAL)
