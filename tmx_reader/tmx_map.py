"""
Map assembly and the public entry points.

    tmx_map = load_map("level1.tmx")
    print(f"Map size: {tmx_map.width}x{tmx_map.height}")

    ground = tmx_map.get_layer_by_name("Ground")
    ref = tmx_map.tile_at(ground, 5, 10)
    if ref is not None:
        print(ref.tileset.name, ref.local_id, ref.flags)

The <map> element is read top to bottom: map attributes, properties,
every <tileset> (external ones are fetched through the FileReader), then
every layer-like child in document order. Once all tilesets are known the
gids of tile layers and tile objects are checked against them, so a map
that loads never references a tile that does not exist.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union
import xml.etree.ElementTree as ET

from .attributes import Attr, Color, positive, resolve_attributes
from .constants import (STAGGERED_ORIENTATIONS, Orientation, RenderOrder,
                        StaggerAxis, StaggerIndex)
from .errors import IoError, UnresolvedGid
from .gid import GidResolver, TileRef
from .io import FileReader, FilesystemReader, parse_document
from .layers import Layer, LayerGroup, ObjectGroup, TileLayer, build_layer
from .logging_config import get_logger
from .properties import PropertyMap, frozen_mapping_field, read_properties
from .tileset import Tileset, load_tileset_reference

logger = get_logger('map')


MAP_ATTRIBUTES = {
    'version': Attr('str', default='1.0'),
    'tiledversion': Attr('str', default=None),
    'orientation': Attr(Orientation, default=Orientation.ORTHOGONAL),
    'renderorder': Attr(RenderOrder, default=RenderOrder.RIGHT_DOWN),
    'width': Attr('uint', check=positive, expected="a positive integer"),
    'height': Attr('uint', check=positive, expected="a positive integer"),
    'tilewidth': Attr('uint'),
    'tileheight': Attr('uint'),
    'hexsidelength': Attr('int', default=None),
    'staggeraxis': Attr(StaggerAxis, default=None),
    'staggerindex': Attr(StaggerIndex, default=None),
    'backgroundcolor': Attr('color', default=None),
    'nextobjectid': Attr('uint', default=1),
    'nextlayerid': Attr('uint', default=1),
    'infinite': Attr('bool', default=False),
}


@dataclass(frozen=True)
class TiledMap:
    """
    Complete Tiled map - the root object for TMX files.

    Map orientations:
    - orthogonal: square grid
    - isometric: diamond-shaped tiles
    - staggered: offset rows/columns (uses staggeraxis/staggerindex)
    - hexagonal: hexagon tiles (uses hexsidelength + stagger fields)

    Stagger fields are None unless the orientation uses them.
    """
    width: int
    height: int
    tilewidth: int
    tileheight: int
    version: str = "1.0"
    tiledversion: Optional[str] = None
    orientation: Orientation = Orientation.ORTHOGONAL
    renderorder: RenderOrder = RenderOrder.RIGHT_DOWN
    hexsidelength: Optional[int] = None
    staggeraxis: Optional[StaggerAxis] = None
    staggerindex: Optional[StaggerIndex] = None
    backgroundcolor: Optional[Color] = None
    nextobjectid: int = 1
    nextlayerid: int = 1
    infinite: bool = False
    properties: PropertyMap = frozen_mapping_field()
    tilesets: Tuple[Tileset, ...] = ()
    layers: Tuple[Layer, ...] = ()
    resolver: GidResolver = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'resolver', GidResolver(self.tilesets))

    @classmethod
    def from_xml(cls, root: ET.Element, reader: FileReader) -> 'TiledMap':
        """Assemble a map from its <map> element."""
        attrs = resolve_attributes(root, MAP_ATTRIBUTES)

        # -----------------------------------------------------------------
        # ORIENTATION-SPECIFIC FIELDS
        # -----------------------------------------------------------------
        if attrs['orientation'] not in STAGGERED_ORIENTATIONS:
            if attrs['staggeraxis'] is not None or attrs['staggerindex'] is not None:
                logger.debug("Dropping stagger attributes of a %s map",
                             attrs['orientation'].value)
            attrs['staggeraxis'] = None
            attrs['staggerindex'] = None
        if attrs['orientation'] is not Orientation.HEXAGONAL:
            attrs['hexsidelength'] = None

        # -----------------------------------------------------------------
        # TILESETS, THEN LAYERS
        # -----------------------------------------------------------------
        tilesets = tuple(load_tileset_reference(tileset_elem, reader)
                         for tileset_elem in root.findall('tileset'))

        layers = []
        for child in root:
            layer = build_layer(child, attrs['width'], attrs['height'])
            if layer is not None:
                layers.append(layer)

        tmx_map = cls(
            properties=read_properties(root),
            tilesets=tilesets,
            layers=tuple(layers),
            **attrs,
        )
        _check_layers(tmx_map.layers, tmx_map.resolver)
        logger.info("Loaded %dx%d %s map: %d tilesets, %d layers",
                    tmx_map.width, tmx_map.height, tmx_map.orientation.value,
                    len(tilesets), len(layers))
        return tmx_map

    # =====================================================================
    # LOOKUPS
    # =====================================================================

    def resolve(self, gid: int) -> Optional[TileRef]:
        """Resolve a raw gid; None for empty cells (gid 0)."""
        return self.resolver.resolve(gid)

    def get_tileset_for_gid(self, gid: int) -> Optional[Tileset]:
        """The tileset containing gid, or None if gid is 0 or unknown."""
        try:
            ref = self.resolver.resolve(gid)
        except UnresolvedGid:
            return None
        return ref.tileset if ref is not None else None

    def tile_at(self, layer: Union[str, TileLayer], x: int, y: int) -> Optional[TileRef]:
        """Resolved tile at column x, row y of a tile layer (or its name)."""
        if isinstance(layer, str):
            found = self.get_layer_by_name(layer)
            if not isinstance(found, TileLayer):
                raise KeyError(f"No tile layer named {layer!r}")
            layer = found
        return self.resolver.resolve(layer.get_tile_gid(x, y))

    def get_layer_by_name(self, name: str) -> Optional[Layer]:
        """Find a layer by name (searches recursively through groups)."""
        for layer in _walk(self.layers):
            if layer.name == name:
                return layer
        return None

    def get_all_layers_flat(self) -> List[Layer]:
        """All non-group layers, groups expanded recursively, in draw order."""
        return [layer for layer in _walk(self.layers)
                if not isinstance(layer, LayerGroup)]


def _walk(layers):
    for layer in layers:
        yield layer
        if isinstance(layer, LayerGroup):
            yield from _walk(layer.layers)


def _check_layers(layers, resolver: GidResolver):
    """Make sure every gid used by tile layers and tile objects resolves."""
    seen_ids = set()
    for layer in _walk(layers):
        if isinstance(layer, TileLayer):
            resolver.check(layer.tiles)
        elif isinstance(layer, ObjectGroup):
            for obj in layer.objects:
                # gid 0 is an empty cell, never a tile
                if obj.tile_gid is not None and resolver.resolve(obj.tile_gid) is None:
                    raise UnresolvedGid(obj.tile_gid)
                if obj.id and obj.id in seen_ids:
                    logger.warning("Duplicate object id %d in layer %r",
                                   obj.id, layer.name)
                seen_ids.add(obj.id)


# =============================================================================
# ENTRY POINTS
# =============================================================================

def _read_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise IoError(str(path), exc) from exc


def parse_map(data: Union[bytes, str], reader: Optional[FileReader] = None) -> TiledMap:
    """
    Decode a TMX document held in memory.

    reader resolves external tileset paths; defaults to the current
    directory.
    """
    root = parse_document(data, 'map')
    return TiledMap.from_xml(root, reader if reader is not None else FilesystemReader())


def load_map(filepath: Union[str, Path], reader: Optional[FileReader] = None) -> TiledMap:
    """
    Load a TMX file from disk.

    External tilesets are read relative to the map's directory unless a
    reader is given.

    Raises:
    -------
    IoError : If the TMX file can't be read
    XmlSyntaxError : If XML is malformed
    TmxError : Any other decoding problem
    """
    filepath = Path(filepath)
    data = _read_file(filepath)
    if reader is None:
        reader = FilesystemReader(filepath.parent)
    logger.debug("Loading map %s", filepath)
    return parse_map(data, reader)


def parse_tileset(data: Union[bytes, str], firstgid: int = 1,
                  source: Optional[str] = None) -> Tileset:
    """Decode a standalone TSX document held in memory."""
    root = parse_document(data, 'tileset')
    return Tileset.from_xml(root, firstgid, source=source)


def load_tileset(filepath: Union[str, Path], firstgid: int = 1) -> Tileset:
    """Load a standalone TSX file from disk."""
    filepath = Path(filepath)
    return parse_tileset(_read_file(filepath), firstgid, source=str(filepath))
