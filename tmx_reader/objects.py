"""
Objects placed in object layers (<object>) and their shapes.

=============================================================================
OBJECT SHAPES
=============================================================================

An <object> has exactly one shape, chosen by what the element carries:

    gid attribute          -> TileShape   (a tile stamped as a free object)
    <ellipse/> child       -> Ellipse
    <polygon points=.../>  -> Polygon     (closed)
    <polyline points=.../> -> Polyline    (open)
    <point/> child         -> Point
    nothing of the above   -> Rectangle   (x, y, width, height)

A gid wins over any shape child: tile objects are a different concept
from vector shapes, even if an editor left a shape element behind.

Polygon and polyline points are relative to the object's own (x, y):

    <object id="3" x="100" y="50">
        <polygon points="0,0 10,0 10,10"/>
    </object>

    absolute corners: (100,50) (110,50) (110,60)

=============================================================================
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import ClassVar, Optional, Tuple, Union

from .attributes import Attr, resolve_attributes
from .constants import FlipFlags, ShapeKind
from .errors import InvalidPointList, MissingRequiredAttribute
from .gid import split_gid
from .properties import PropertyMap, frozen_mapping_field, read_properties

Point2D = Tuple[float, float]


# =============================================================================
# SHAPES
# =============================================================================

@dataclass(frozen=True)
class Rectangle:
    kind: ClassVar[ShapeKind] = ShapeKind.RECTANGLE
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class Ellipse:
    kind: ClassVar[ShapeKind] = ShapeKind.ELLIPSE
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class Polygon:
    kind: ClassVar[ShapeKind] = ShapeKind.POLYGON
    points: Tuple[Point2D, ...] = ()


@dataclass(frozen=True)
class Polyline:
    kind: ClassVar[ShapeKind] = ShapeKind.POLYLINE
    points: Tuple[Point2D, ...] = ()


@dataclass(frozen=True)
class Point:
    kind: ClassVar[ShapeKind] = ShapeKind.POINT


@dataclass(frozen=True)
class TileShape:
    """Tile object. `gid` has its flip bits removed, they live in `flags`."""
    kind: ClassVar[ShapeKind] = ShapeKind.TILE
    gid: int = 0
    flags: FlipFlags = FlipFlags.NONE
    width: float = 0.0
    height: float = 0.0

    @property
    def raw_gid(self) -> int:
        return self.gid | int(self.flags)


Shape = Union[Rectangle, Ellipse, Polygon, Polyline, Point, TileShape]

SHAPE_TAGS = ('ellipse', 'polygon', 'polyline', 'point')


def parse_points(raw: str) -> Tuple[Point2D, ...]:
    """
    Parse "x1,y1 x2,y2 ..." into a tuple of float pairs.

    Raises InvalidPointList on malformed pairs or an empty list.
    """
    points = []
    for pair in raw.split():
        coords = pair.split(',')
        if len(coords) != 2:
            raise InvalidPointList(raw)
        try:
            points.append((float(coords[0]), float(coords[1])))
        except ValueError as exc:
            raise InvalidPointList(raw) from exc

    if not points:
        raise InvalidPointList(raw)
    return tuple(points)


def _points_of(shape_elem: ET.Element) -> Tuple[Point2D, ...]:
    raw = shape_elem.get('points')
    if raw is None:
        raise MissingRequiredAttribute('points', shape_elem.tag)
    return parse_points(raw)


# =============================================================================
# MAP OBJECT
# =============================================================================

OBJECT_ATTRIBUTES = {
    'id': Attr('uint', default=0),
    'name': Attr('str', default=''),
    'type': Attr('str', default=None),
    'class': Attr('str', default=''),    # Tiled 1.9 renamed type to class
    'x': Attr('float', default=0.0),
    'y': Attr('float', default=0.0),
    'width': Attr('float', default=0.0),
    'height': Attr('float', default=0.0),
    'rotation': Attr('float', default=0.0),
    'gid': Attr('uint', default=None),
    'visible': Attr('bool', default=True),
}


@dataclass(frozen=True)
class MapObject:
    """
    Object in an object layer.

    Objects are used for collision shapes, spawn points, trigger areas and
    decorations (tile objects). Position is in pixels, relative to the
    owning layer's offset; rotation is in degrees clockwise around (x, y).
    """
    id: int
    name: str = ""
    type: str = ""
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    visible: bool = True
    shape: Shape = field(default_factory=Rectangle)
    properties: PropertyMap = frozen_mapping_field()

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'MapObject':
        attrs = resolve_attributes(elem, OBJECT_ATTRIBUTES)
        width, height = attrs['width'], attrs['height']

        # -----------------------------------------------------------------
        # SHAPE SELECTION
        # -----------------------------------------------------------------
        shape: Shape
        if attrs['gid'] is not None:
            gid, flags = split_gid(attrs['gid'])
            shape = TileShape(gid=gid, flags=flags, width=width, height=height)
        else:
            shape_elem = next(
                (child for child in elem if child.tag in SHAPE_TAGS), None)
            if shape_elem is None:
                shape = Rectangle(width, height)
            elif shape_elem.tag == 'ellipse':
                shape = Ellipse(width, height)
            elif shape_elem.tag == 'polygon':
                shape = Polygon(_points_of(shape_elem))
            elif shape_elem.tag == 'polyline':
                shape = Polyline(_points_of(shape_elem))
            else:
                shape = Point()

        object_type = attrs['type'] if attrs['type'] is not None else attrs['class']

        return cls(
            id=attrs['id'],
            name=attrs['name'],
            type=object_type,
            x=attrs['x'],
            y=attrs['y'],
            rotation=attrs['rotation'],
            visible=attrs['visible'],
            shape=shape,
            properties=read_properties(elem),
        )

    @property
    def tile_gid(self) -> Optional[int]:
        """Raw gid (with flags) for tile objects, None for vector shapes."""
        if isinstance(self.shape, TileShape):
            return self.shape.raw_gid
        return None
