"""
Layers of a map: tile layers, object groups, image layers and groups.

=============================================================================
LAYER TYPES
=============================================================================

    <layer>        -> TileLayer    grid of gids
    <objectgroup>  -> ObjectGroup  free-form objects
    <imagelayer>   -> ImageLayer   a single image
    <group>        -> LayerGroup   folder containing other layers

build_layer() dispatches on the element tag; any other tag is not a layer
and yields None so the caller can skip it.

=============================================================================
COMMON PROPERTIES
=============================================================================

Rendering properties:
- visible: Whether layer is rendered (default True)
- opacity: Transparency, 0.0 = invisible, 1.0 = opaque (default 1.0)
- tintcolor: Color tint applied to all tiles/objects

Positioning:
- offsetx, offsety: Pixel offset from map origin
- parallaxx, parallaxy: Parallax scrolling factors
  (1.0 = normal, 0.5 = half speed, 0 = static background)

=============================================================================
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple, Union

import numpy as np

from .attributes import REQUIRED, Attr, Color, positive, resolve_attributes, unit_interval
from .constants import DrawOrder, LayerKind
from .data import decode_gids
from .errors import DataLengthMismatch
from .image import Image
from .objects import MapObject
from .properties import PropertyMap, frozen_mapping_field, read_properties


COMMON_ATTRIBUTES = {
    'id': Attr('uint', default=0),
    'name': Attr('str', default=''),
    'offsetx': Attr('float', default=0.0),
    'offsety': Attr('float', default=0.0),
    'opacity': Attr('float', default=1.0, check=unit_interval,
                    expected="a number between 0 and 1"),
    'visible': Attr('bool', default=True),
    'parallaxx': Attr('float', default=1.0),
    'parallaxy': Attr('float', default=1.0),
    'tintcolor': Attr('color', default=None),
}


def _common(elem: ET.Element) -> dict:
    values = resolve_attributes(elem, COMMON_ATTRIBUTES)
    values['properties'] = read_properties(elem)
    return values


@dataclass(frozen=True)
class BaseLayer:
    """Fields shared by every layer kind."""
    name: str = ""
    id: int = 0
    visible: bool = True
    opacity: float = 1.0
    offsetx: float = 0.0
    offsety: float = 0.0
    parallaxx: float = 1.0
    parallaxy: float = 1.0
    tintcolor: Optional[Color] = None
    properties: PropertyMap = frozen_mapping_field()


# =============================================================================
# TILE LAYER
# =============================================================================

@dataclass(frozen=True)
class TileLayer(BaseLayer):
    """
    Tile layer - a grid of tile references.

    `tiles` holds width * height raw gids in row-major order, flip flags
    included. Index calculation: tiles[y * width + x]
    """
    kind: ClassVar[LayerKind] = LayerKind.TILE
    width: int = 0
    height: int = 0
    tiles: Tuple[int, ...] = ()

    @classmethod
    def from_xml(cls, elem: ET.Element, map_width: Optional[int] = None,
                 map_height: Optional[int] = None) -> 'TileLayer':
        common = _common(elem)
        size = resolve_attributes(elem, {
            'width': Attr('uint', default=map_width if map_width else REQUIRED,
                          check=positive, expected="a positive integer"),
            'height': Attr('uint', default=map_height if map_height else REQUIRED,
                           check=positive, expected="a positive integer"),
        })
        width, height = size['width'], size['height']

        data_elem = elem.find('data')
        if data_elem is None:
            raise DataLengthMismatch(width * height, 0)
        tiles = decode_gids(data_elem, width * height)

        return cls(width=width, height=height, tiles=tiles, **common)

    def get_tile_gid(self, x: int, y: int) -> int:
        """
        Raw gid of the tile at column x, row y.

        Out of bounds = 0 (empty).
        """
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.tiles[y * self.width + x]
        return 0

    def as_array(self) -> np.ndarray:
        """Tiles as a (height, width) uint32 array: grid[y, x]."""
        return np.array(self.tiles, dtype=np.uint32).reshape(self.height, self.width)


# =============================================================================
# OBJECT GROUP
# =============================================================================

OBJECTGROUP_ATTRIBUTES = {
    'color': Attr('color', default=None),
    'draworder': Attr(DrawOrder, default=DrawOrder.TOPDOWN),
}


@dataclass(frozen=True)
class ObjectGroup(BaseLayer):
    """
    Object layer - contains vector objects.

    Objects keep document order; draworder tells the renderer whether to
    draw them in that order (index) or sorted by y (topdown).
    """
    kind: ClassVar[LayerKind] = LayerKind.OBJECTS
    color: Optional[Color] = None
    draworder: DrawOrder = DrawOrder.TOPDOWN
    objects: Tuple[MapObject, ...] = ()

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'ObjectGroup':
        common = _common(elem)
        attrs = resolve_attributes(elem, OBJECTGROUP_ATTRIBUTES)
        objects = tuple(MapObject.from_xml(obj_elem)
                        for obj_elem in elem.findall('object'))
        return cls(objects=objects, **attrs, **common)


# =============================================================================
# IMAGE LAYER
# =============================================================================

@dataclass(frozen=True)
class ImageLayer(BaseLayer):
    """A single image drawn at (x, y) plus the layer offset."""
    kind: ClassVar[LayerKind] = LayerKind.IMAGE
    x: float = 0.0
    y: float = 0.0
    image: Optional[Image] = None

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'ImageLayer':
        common = _common(elem)
        position = resolve_attributes(elem, {
            'x': Attr('float', default=0.0),
            'y': Attr('float', default=0.0),
        })
        img_elem = elem.find('image')
        image = Image.from_xml(img_elem) if img_elem is not None else None
        return cls(image=image, **position, **common)


# =============================================================================
# LAYER GROUP
# =============================================================================

@dataclass(frozen=True)
class LayerGroup(BaseLayer):
    """
    Group of layers - a folder containing other layers.

    Groups can be nested (groups within groups). Opacity, visibility and
    offsets of a group apply on top of those of its children.
    """
    kind: ClassVar[LayerKind] = LayerKind.GROUP
    layers: Tuple['Layer', ...] = ()

    @classmethod
    def from_xml(cls, elem: ET.Element, map_width: Optional[int] = None,
                 map_height: Optional[int] = None) -> 'LayerGroup':
        common = _common(elem)
        layers = []
        for child in elem:
            layer = build_layer(child, map_width, map_height)
            if layer is not None:
                layers.append(layer)
        return cls(layers=tuple(layers), **common)


Layer = Union[TileLayer, ObjectGroup, ImageLayer, LayerGroup]


def build_layer(elem: ET.Element, map_width: Optional[int] = None,
                map_height: Optional[int] = None) -> Optional[Layer]:
    """
    Build the layer variant matching elem.tag, None if it is not a layer.

    map_width/map_height are the fallback size of tile layers.
    """
    if elem.tag == 'layer':
        return TileLayer.from_xml(elem, map_width, map_height)
    elif elem.tag == 'objectgroup':
        return ObjectGroup.from_xml(elem)
    elif elem.tag == 'imagelayer':
        return ImageLayer.from_xml(elem)
    elif elem.tag == 'group':
        return LayerGroup.from_xml(elem, map_width, map_height)
    return None
