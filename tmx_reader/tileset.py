"""
Tilesets (<tileset>) and their tiles.

=============================================================================
TILESET TYPES
=============================================================================

1. SPRITESHEET TILESET (most common):
   One large image divided into a grid of tiles.

   +---+---+---+---+
   | 0 | 1 | 2 | 3 |
   +---+---+---+---+
   | 4 | 5 | 6 | 7 |
   +---+---+---+---+

   Attributes used: image, tilewidth, tileheight, columns, spacing, margin

2. IMAGE COLLECTION TILESET:
   Each tile is a separate image file, listed as <tile><image/></tile>.
   Tile ids may be sparse.

=============================================================================
EMBEDDED vs EXTERNAL TILESETS
=============================================================================

EMBEDDED: Tileset data is inside the TMX file
    <tileset firstgid="1" name="terrain" tilewidth="32" ...>
        <image source="terrain.png"/>
    </tileset>

EXTERNAL (TSX): Tileset data is in separate .tsx file
    <tileset firstgid="1" source="terrain.tsx"/>

    The TSX file contains the actual tileset definition but no firstgid:
    that one always comes from the referencing map.

=============================================================================
SPACING AND MARGIN
=============================================================================

margin = pixels around the EDGE of the entire image
spacing = pixels BETWEEN tiles

When `columns` is missing it is computed from the image:

    columns = (image.width - 2 * margin + spacing) // (tilewidth + spacing)

An explicit `columns` attribute always wins over the computed value.

=============================================================================
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .attributes import Attr, parse_uint, positive, resolve_attributes
from .errors import InvalidAttributeValue, TilesetLoadError, TmxError, IoError
from .image import Image
from .io import FileReader, parse_document
from .layers import ObjectGroup
from .logging_config import get_logger
from .properties import PropertyMap, frozen_mapping, frozen_mapping_field, read_properties

logger = get_logger('tileset')


# =============================================================================
# SMALL PARTS
# =============================================================================

@dataclass(frozen=True)
class TileOffset:
    """Pixel shift applied when drawing tiles of this tileset."""
    x: int = 0
    y: int = 0

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'TileOffset':
        attrs = resolve_attributes(elem, {
            'x': Attr('int', default=0),
            'y': Attr('int', default=0),
        })
        return cls(**attrs)


@dataclass(frozen=True)
class Terrain:
    """Terrain type; `tile` is the local id of its representative tile (-1 = none)."""
    name: str = ""
    tile: int = -1
    properties: PropertyMap = frozen_mapping_field()

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Terrain':
        attrs = resolve_attributes(elem, {
            'name': Attr('str', default=''),
            'tile': Attr('int', default=-1),
        })
        return cls(properties=read_properties(elem), **attrs)


@dataclass(frozen=True)
class Frame:
    tileid: int
    duration: int       # milliseconds

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Frame':
        attrs = resolve_attributes(elem, {
            'tileid': Attr('uint'),
            'duration': Attr('uint'),
        })
        return cls(**attrs)


Corners = Tuple[Optional[int], Optional[int], Optional[int], Optional[int]]


def parse_corners(raw: str, terrain_count: int) -> Corners:
    """
    Parse terrain="tl,tr,bl,br". An empty entry means no terrain.

    Every index must point into the tileset's terrain list.
    """
    expected = "four comma-separated terrain indices"
    parts = raw.split(',')
    if len(parts) != 4:
        raise InvalidAttributeValue('terrain', raw, expected, 'tile')

    corners = []
    for part in parts:
        part = part.strip()
        if not part:
            corners.append(None)
            continue
        try:
            index = parse_uint(part)
        except ValueError as exc:
            raise InvalidAttributeValue('terrain', raw, expected, 'tile') from exc
        if not 0 <= index < terrain_count:
            raise InvalidAttributeValue('terrain', raw, expected, 'tile')
        corners.append(index)
    return tuple(corners)


# =============================================================================
# TILE CLASS
# =============================================================================

TILE_ATTRIBUTES = {
    'id': Attr('uint'),
    'type': Attr('str', default=None),
    'class': Attr('str', default=''),
    'terrain': Attr('str', default=None),
    'probability': Attr('float', default=None, check=lambda p: p >= 0,
                        expected="a non-negative number"),
}


@dataclass(frozen=True)
class TileDefinition:
    """
    Metadata of one tile within a tileset.

    The 'id' is LOCAL to the tileset (0-based index).
    To get the Global ID (GID): gid = tileset.firstgid + tile.id

    Tiles without a <tile> element get a default definition: no terrain,
    no animation, no properties.
    """
    id: int
    type: str = ""
    terrain: Optional[Corners] = None
    probability: Optional[float] = None
    properties: PropertyMap = frozen_mapping_field()
    image: Optional[Image] = None
    objectgroup: Optional[ObjectGroup] = None   # collision shapes
    animation: Tuple[Frame, ...] = ()

    @classmethod
    def from_xml(cls, elem: ET.Element, terrain_count: int = 0) -> 'TileDefinition':
        attrs = resolve_attributes(elem, TILE_ATTRIBUTES)

        corners = None
        if attrs['terrain'] is not None:
            corners = parse_corners(attrs['terrain'], terrain_count)

        img_elem = elem.find('image')
        group_elem = elem.find('objectgroup')
        anim_elem = elem.find('animation')

        animation: Tuple[Frame, ...] = ()
        if anim_elem is not None:
            animation = tuple(Frame.from_xml(frame_elem)
                              for frame_elem in anim_elem.findall('frame'))

        return cls(
            id=attrs['id'],
            type=attrs['type'] if attrs['type'] is not None else attrs['class'],
            terrain=corners,
            probability=attrs['probability'],
            properties=read_properties(elem),
            image=Image.from_xml(img_elem) if img_elem is not None else None,
            objectgroup=ObjectGroup.from_xml(group_elem) if group_elem is not None else None,
            animation=animation,
        )


# =============================================================================
# TILESET CLASS
# =============================================================================

TILESET_ATTRIBUTES = {
    'name': Attr('str', default=''),
    'tilewidth': Attr('uint'),
    'tileheight': Attr('uint'),
    'spacing': Attr('uint', default=0),
    'margin': Attr('uint', default=0),
    'tilecount': Attr('uint', default=None),
    'columns': Attr('uint', default=None),
}


def _grid_cells(image_size: int, margin: int, spacing: int, tile_size: int) -> int:
    if tile_size + spacing <= 0:
        return 0
    return max(0, (image_size - 2 * margin + spacing) // (tile_size + spacing))


@dataclass(frozen=True)
class Tileset:
    """
    Tileset collection - a set of tile graphics registered at `firstgid`.

    `tiles` maps every local id in 0..tilecount-1 (plus any explicitly
    listed id beyond) to its TileDefinition.
    """
    firstgid: int
    name: str
    tilewidth: int
    tileheight: int
    spacing: int = 0
    margin: int = 0
    tilecount: Optional[int] = None
    columns: Optional[int] = None
    tileoffset: Optional[TileOffset] = None
    image: Optional[Image] = None
    terrains: Tuple[Terrain, ...] = ()
    tiles: Mapping[int, TileDefinition] = frozen_mapping_field()
    properties: PropertyMap = frozen_mapping_field()
    source: Optional[str] = None                     # TSX file path (if external)

    @classmethod
    def from_xml(cls, elem: ET.Element, firstgid: int,
                 source: Optional[str] = None) -> 'Tileset':
        """
        Parse a full tileset definition.

        Parameters:
        -----------
        elem : ET.Element
            The <tileset> element (inline in a TMX, or the TSX root)
        firstgid : int
            First Global ID (from parent TMX, not the TSX itself)
        source : str, optional
            Path of the TSX file when the tileset is external
        """
        attrs = resolve_attributes(elem, TILESET_ATTRIBUTES)

        img_elem = elem.find('image')
        image = Image.from_xml(img_elem) if img_elem is not None else None

        offset_elem = elem.find('tileoffset')
        tileoffset = TileOffset.from_xml(offset_elem) if offset_elem is not None else None

        terrains: Tuple[Terrain, ...] = ()
        terrains_elem = elem.find('terraintypes')
        if terrains_elem is not None:
            terrains = tuple(Terrain.from_xml(t) for t in terrains_elem.findall('terrain'))

        # -----------------------------------------------------------------
        # GRID SIZE FROM THE IMAGE
        # -----------------------------------------------------------------
        columns = attrs['columns']
        tilecount = attrs['tilecount']
        if image is not None and image.width is not None and columns is None:
            columns = _grid_cells(image.width, attrs['margin'], attrs['spacing'],
                                  attrs['tilewidth'])
        if (image is not None and image.height is not None and tilecount is None
                and columns is not None):
            rows = _grid_cells(image.height, attrs['margin'], attrs['spacing'],
                               attrs['tileheight'])
            tilecount = columns * rows

        # -----------------------------------------------------------------
        # TILE DEFINITIONS
        # -----------------------------------------------------------------
        # Implicit defaults first, then the (sparse) explicit <tile> elements
        tiles = {tile_id: TileDefinition(id=tile_id) for tile_id in range(tilecount or 0)}
        for tile_elem in elem.findall('tile'):
            tile = TileDefinition.from_xml(tile_elem, len(terrains))
            tiles[tile.id] = tile

        tileset = cls(
            firstgid=firstgid,
            name=attrs['name'],
            tilewidth=attrs['tilewidth'],
            tileheight=attrs['tileheight'],
            spacing=attrs['spacing'],
            margin=attrs['margin'],
            tilecount=tilecount,
            columns=columns,
            tileoffset=tileoffset,
            image=image,
            terrains=terrains,
            tiles=frozen_mapping(tiles),
            properties=read_properties(elem),
            source=source,
        )
        logger.debug("Loaded tileset %r (firstgid=%d, %d tiles)",
                     tileset.name, firstgid, len(tiles))
        return tileset

    def get_tile(self, local_id: int) -> Optional[TileDefinition]:
        return self.tiles.get(local_id)

    def tile_range(self) -> Optional[range]:
        """
        Gids owned by this tileset, None when its size is unknown.

        Image collections may list tile ids past tilecount; the range
        stretches to cover them.
        """
        if self.tilecount is None:
            return None
        count = self.tilecount
        if self.tiles:
            count = max(count, max(self.tiles) + 1)
        return range(self.firstgid, self.firstgid + count)


def load_tileset_reference(elem: ET.Element, reader: FileReader) -> Tileset:
    """
    Build the tileset for a map-level <tileset> element.

    Inline definitions are parsed directly. With a `source` attribute the
    TSX document is fetched through reader and parsed with the firstgid
    given here. Any failure while doing so becomes TilesetLoadError.
    """
    firstgid = resolve_attributes(elem, {
        'firstgid': Attr('uint', check=positive, expected="a positive integer"),
    })['firstgid']

    source = elem.get('source')
    if source is None:
        return Tileset.from_xml(elem, firstgid)

    logger.debug("Reading external tileset %s", source)
    try:
        try:
            data = reader.read(source)
        except OSError as exc:
            raise IoError(source, exc) from exc
        root = parse_document(data, 'tileset')
        return Tileset.from_xml(root, firstgid, source=source)
    except TmxError as exc:
        raise TilesetLoadError(source, exc) from exc
