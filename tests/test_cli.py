from conftest import SAMPLE_TMX, TERRAIN_TSX
from tmx_reader.__main__ import main


def write_sample(tmp_path):
    (tmp_path / 'tilesets').mkdir()
    (tmp_path / 'tilesets' / 'terrain.tsx').write_text(TERRAIN_TSX, encoding='utf-8')
    path = tmp_path / 'level.tmx'
    path.write_text(SAMPLE_TMX, encoding='utf-8')
    return path


def test_dump_map(tmp_path, capsys):
    path = write_sample(tmp_path)
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert 'map 4x2 orthogonal, tiles 16x16' in out
    assert "tileset 'terrain': firstgid=33" in out
    assert "objectgroup 'Things': 3 objects" in out
    assert "group 'Decor'" in out
    assert "    layer 'Flowers'" in out


def test_dump_tileset(tmp_path, capsys):
    path = tmp_path / 'terrain.tsx'
    path.write_text(TERRAIN_TSX, encoding='utf-8')
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("tileset 'terrain': firstgid=1 tiles=32")
    assert 'animated tiles: 1' in out


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / 'missing.tmx')]) == 1
    assert capsys.readouterr().out.startswith('Error: ')


def test_broken_map(tmp_path, capsys):
    path = tmp_path / 'broken.tmx'
    path.write_text('<map width="1"', encoding='utf-8')
    assert main([str(path)]) == 1
    assert 'Invalid XML input' in capsys.readouterr().out


def test_unknown_extension(tmp_path, capsys):
    assert main([str(tmp_path / 'level.json')]) == 1
    assert 'a .tmx or .tsx file is expected' in capsys.readouterr().out
