from dataclasses import FrozenInstanceError

import pytest

from conftest import SAMPLE_TMX, TERRAIN_TSX
from tmx_reader import (Color, FlipFlags, ImageLayer, IoError, LayerGroup,
                        MemoryReader, ObjectGroup, Orientation, Point,
                        StaggerAxis, StaggerIndex, TiledMap, TileLayer, TileShape,
                        TilesetLoadError, TilesetOverlap, UnresolvedGid,
                        XmlSyntaxError, load_map, load_tileset, parse_map,
                        parse_tileset)
from tmx_reader.constants import DrawOrder
from tmx_reader.errors import InvalidAttributeValue, MissingRequiredAttribute


def small_map(body='', **attrs):
    values = {'width': '2', 'height': '1', 'tilewidth': '16', 'tileheight': '16'}
    values.update(attrs)
    rendered = ' '.join(f'{key}="{value}"' for key, value in values.items())
    return f'<map {rendered}>{body}</map>'


SMALL_TILESET = ('<tileset firstgid="1" name="t" tilewidth="16" tileheight="16"'
                 ' tilecount="4" columns="2"/>')


@pytest.fixture
def sample_map(sample_files):
    return parse_map(SAMPLE_TMX, MemoryReader(sample_files))


def test_map_attributes(sample_map):
    assert (sample_map.width, sample_map.height) == (4, 2)
    assert (sample_map.tilewidth, sample_map.tileheight) == (16, 16)
    assert sample_map.version == '1.10'
    assert sample_map.tiledversion == '1.10.2'
    assert sample_map.orientation is Orientation.ORTHOGONAL
    assert sample_map.backgroundcolor == Color(0x20, 0x20, 0x40)
    assert sample_map.nextlayerid == 6
    assert sample_map.nextobjectid == 4
    assert sample_map.infinite is False
    assert sample_map.staggeraxis is None
    assert sample_map.properties['gravity'].value == 9.8


def test_tilesets_in_order(sample_map):
    inline, external = sample_map.tilesets
    assert (inline.name, inline.firstgid, inline.source) == ('inline', 1, None)
    assert inline.get_tile(0).properties['solid'].value is True
    assert (external.name, external.firstgid) == ('terrain', 33)
    assert external.source == 'tilesets/terrain.tsx'


def test_layers_in_document_order(sample_map):
    assert [layer.name for layer in sample_map.layers] == ['Ground', 'Things', 'Sky', 'Decor']
    ground, things, sky, decor = sample_map.layers
    assert isinstance(ground, TileLayer)
    assert ground.tiles == (1, 2, 3, 4, 33, 36, 0, 2147483649)
    assert isinstance(things, ObjectGroup)
    assert things.draworder is DrawOrder.INDEX
    assert isinstance(sky, ImageLayer)
    assert (sky.offsetx, sky.offsety, sky.opacity) == (5.0, -5.0, 0.5)
    assert isinstance(decor, LayerGroup)
    assert decor.layers[0].tiles[-1] == 40


def test_objects(sample_map):
    spawn, chest, zone = sample_map.get_layer_by_name('Things').objects
    assert spawn.shape == Point()
    assert (spawn.x, spawn.y) == (10.0, 20.0)
    assert chest.shape == TileShape(gid=36, width=16.0, height=16.0)
    assert sample_map.resolve(chest.tile_gid).local_id == 3
    assert len(zone.shape.points) == 3


def test_decoding_is_deterministic(sample_files):
    first = parse_map(SAMPLE_TMX, MemoryReader(sample_files))
    second = parse_map(SAMPLE_TMX.encode('utf-8'), MemoryReader(sample_files))
    assert first == second


def test_tile_at(sample_map):
    ref = sample_map.tile_at('Ground', 1, 1)
    assert ref.tileset.name == 'terrain'
    assert ref.local_id == 3
    assert sample_map.tile_at('Ground', 2, 1) is None

    flipped = sample_map.tile_at('Ground', 3, 1)
    assert flipped.tileset.name == 'inline'
    assert flipped.local_id == 0
    assert flipped.flags == FlipFlags.HORIZONTAL

    flowers = sample_map.get_layer_by_name('Flowers')
    assert sample_map.tile_at(flowers, 3, 1).local_id == 7


def test_tile_at_unknown_layer(sample_map):
    with pytest.raises(KeyError):
        sample_map.tile_at('Things', 0, 0)
    with pytest.raises(KeyError):
        sample_map.tile_at('Nope', 0, 0)


def test_layer_lookups(sample_map):
    assert sample_map.get_layer_by_name('Flowers').name == 'Flowers'
    assert sample_map.get_layer_by_name('Missing') is None
    assert [layer.name for layer in sample_map.get_all_layers_flat()] == [
        'Ground', 'Things', 'Sky', 'Flowers']


def test_get_tileset_for_gid(sample_map):
    assert sample_map.get_tileset_for_gid(40).name == 'terrain'
    assert sample_map.get_tileset_for_gid(32).name == 'inline'
    assert sample_map.get_tileset_for_gid(0) is None
    assert sample_map.get_tileset_for_gid(1000) is None


def test_unresolved_gid_in_layer():
    document = small_map(SMALL_TILESET + '<layer><data encoding="csv">1,9</data></layer>')
    with pytest.raises(UnresolvedGid) as excinfo:
        parse_map(document, MemoryReader({}))
    assert excinfo.value.gid == 9


def test_unresolved_gid_in_nested_layer():
    document = small_map(
        SMALL_TILESET + '<group><layer><data encoding="csv">0,5</data></layer></group>')
    with pytest.raises(UnresolvedGid):
        parse_map(document, MemoryReader({}))


def test_unresolved_tile_object():
    document = small_map(
        SMALL_TILESET + '<objectgroup><object id="1" gid="77"/></objectgroup>')
    with pytest.raises(UnresolvedGid) as excinfo:
        parse_map(document, MemoryReader({}))
    assert excinfo.value.gid == 77


def test_map_without_tilesets():
    tmx_map = parse_map(small_map('<layer><data encoding="csv">0,0</data></layer>'),
                        MemoryReader({}))
    assert tmx_map.tilesets == ()
    assert tmx_map.tile_at(tmx_map.layers[0], 0, 0) is None


def test_overlapping_tilesets():
    document = small_map(SMALL_TILESET + SMALL_TILESET.replace('name="t"', 'name="u"'))
    with pytest.raises(TilesetOverlap):
        parse_map(document, MemoryReader({}))


def test_missing_external_tileset():
    document = small_map('<tileset firstgid="1" source="nowhere.tsx"/>')
    with pytest.raises(TilesetLoadError):
        parse_map(document, MemoryReader({}))


def test_stagger_fields_dropped_for_orthogonal():
    tmx_map = parse_map(small_map(staggeraxis='x', staggerindex='odd', hexsidelength='8'),
                        MemoryReader({}))
    assert tmx_map.staggeraxis is None
    assert tmx_map.staggerindex is None
    assert tmx_map.hexsidelength is None


def test_stagger_fields_kept_for_hexagonal():
    tmx_map = parse_map(small_map(orientation='hexagonal', staggeraxis='y',
                                  staggerindex='even', hexsidelength='8'),
                        MemoryReader({}))
    assert tmx_map.staggeraxis is StaggerAxis.Y
    assert tmx_map.staggerindex is StaggerIndex.EVEN
    assert tmx_map.hexsidelength == 8


def test_staggered_map_keeps_axis_but_not_side_length():
    tmx_map = parse_map(small_map(orientation='staggered', staggeraxis='x',
                                  staggerindex='odd', hexsidelength='8'),
                        MemoryReader({}))
    assert tmx_map.staggeraxis is StaggerAxis.X
    assert tmx_map.hexsidelength is None


def test_wrong_root_element():
    with pytest.raises(XmlSyntaxError):
        parse_map('<tileset name="t" tilewidth="8" tileheight="8"/>', MemoryReader({}))


def test_malformed_xml():
    with pytest.raises(XmlSyntaxError):
        parse_map('<map width="2"', MemoryReader({}))


def test_zero_width():
    with pytest.raises(InvalidAttributeValue) as excinfo:
        parse_map(small_map(width='0'), MemoryReader({}))
    assert excinfo.value.name == 'width'


def test_missing_width():
    with pytest.raises(MissingRequiredAttribute) as excinfo:
        parse_map('<map height="1" tilewidth="16" tileheight="16"/>', MemoryReader({}))
    assert excinfo.value.name == 'width'


def test_unknown_orientation():
    with pytest.raises(InvalidAttributeValue):
        parse_map(small_map(orientation='spherical'), MemoryReader({}))


def test_load_map_from_disk(tmp_path):
    (tmp_path / 'tilesets').mkdir()
    (tmp_path / 'tilesets' / 'terrain.tsx').write_text(TERRAIN_TSX, encoding='utf-8')
    (tmp_path / 'level.tmx').write_text(SAMPLE_TMX, encoding='utf-8')

    tmx_map = load_map(tmp_path / 'level.tmx')
    assert tmx_map.tilesets[1].name == 'terrain'
    assert tmx_map.tile_at('Ground', 0, 1).tileset.name == 'terrain'


def test_load_missing_map(tmp_path):
    with pytest.raises(IoError) as excinfo:
        load_map(tmp_path / 'missing.tmx')
    assert isinstance(excinfo.value.cause, FileNotFoundError)


def test_load_tileset_from_disk(tmp_path):
    path = tmp_path / 'terrain.tsx'
    path.write_text(TERRAIN_TSX, encoding='utf-8')
    tileset = load_tileset(path)
    assert tileset.firstgid == 1
    assert tileset.source == str(path)
    assert tileset.columns == 8


def test_parse_tileset_firstgid():
    tileset = parse_tileset(TERRAIN_TSX, firstgid=100)
    assert tileset.tile_range() == range(100, 132)


def test_loaded_map_is_read_only(sample_map):
    with pytest.raises(TypeError):
        sample_map.properties['title'] = 'changed'
    with pytest.raises(TypeError):
        sample_map.tilesets[0].tiles[99] = None
    with pytest.raises(AttributeError):
        sample_map.tilesets[0].tiles.clear()
    with pytest.raises(TypeError):
        sample_map.get_layer_by_name('Things').objects[0].properties['x'] = 1
    with pytest.raises(FrozenInstanceError):
        sample_map.width = 99
    assert sample_map.properties['title'].value == 'Sample'
    assert len(sample_map.tilesets[0].tiles) == 32


def test_model_values_are_hashable(sample_map):
    ref = sample_map.tile_at('Ground', 0, 0)
    counts = {ref: 1}
    assert counts[sample_map.tile_at('Ground', 0, 0)] == 1
    assert len({layer for layer in sample_map.get_all_layers_flat()}) == 4
    assert hash(sample_map) == hash(parse_map(SAMPLE_TMX, MemoryReader({
        'tilesets/terrain.tsx': TERRAIN_TSX})))


@pytest.mark.parametrize('gid', ['0', '2147483648'])
def test_tile_object_without_tile(gid):
    document = small_map(
        SMALL_TILESET + f'<objectgroup><object id="1" gid="{gid}"/></objectgroup>')
    with pytest.raises(UnresolvedGid) as excinfo:
        parse_map(document, MemoryReader({}))
    assert excinfo.value.gid == int(gid)


def test_constructed_map_resolves(sample_map):
    tmx_map = TiledMap(width=4, height=2, tilewidth=16, tileheight=16,
                       tilesets=sample_map.tilesets)
    assert tmx_map.resolve(40).local_id == 7
    assert tmx_map.get_tileset_for_gid(1).name == 'inline'
    assert tmx_map == TiledMap(width=4, height=2, tilewidth=16, tileheight=16,
                               tilesets=sample_map.tilesets)
