#!/usr/bin/env python3

"""
TMX Reader - dump a Tiled map or tileset

Usage:
    python -m tmx_reader <map.tmx | tileset.tsx> [-v] [-d]
"""

import argparse
import sys
from pathlib import Path

from .errors import TmxError
from .layers import ImageLayer, LayerGroup, ObjectGroup, TileLayer
from .logging_config import setup_logging
from .tmx_map import TiledMap, load_map, load_tileset
from .tileset import Tileset


def describe_tileset(tileset: Tileset, indent: str = "  "):
    print(f"{indent}tileset {tileset.name!r}: firstgid={tileset.firstgid} "
          f"tiles={tileset.tilecount} columns={tileset.columns} "
          f"size={tileset.tilewidth}x{tileset.tileheight}")
    if tileset.image is not None:
        print(f"{indent}  image: {tileset.image.source} "
              f"({tileset.image.width}x{tileset.image.height})")
    animated = sum(1 for tile in tileset.tiles.values() if tile.animation)
    if animated:
        print(f"{indent}  animated tiles: {animated}")


def describe_layers(layers, indent: str = "  "):
    for layer in layers:
        if isinstance(layer, TileLayer):
            used = sum(1 for gid in layer.tiles if gid)
            print(f"{indent}layer {layer.name!r}: {layer.width}x{layer.height}, "
                  f"{used} tiles")
        elif isinstance(layer, ObjectGroup):
            print(f"{indent}objectgroup {layer.name!r}: {len(layer.objects)} objects")
            for obj in layer.objects:
                print(f"{indent}  #{obj.id} {obj.name!r} {obj.shape.kind.value} "
                      f"at ({obj.x}, {obj.y})")
        elif isinstance(layer, ImageLayer):
            source = layer.image.source if layer.image is not None else None
            print(f"{indent}imagelayer {layer.name!r}: {source}")
        elif isinstance(layer, LayerGroup):
            print(f"{indent}group {layer.name!r}")
            describe_layers(layer.layers, indent + "  ")


def describe_map(tmx_map: TiledMap):
    print(f"map {tmx_map.width}x{tmx_map.height} {tmx_map.orientation.value}, "
          f"tiles {tmx_map.tilewidth}x{tmx_map.tileheight}")
    for name, prop in tmx_map.properties.items():
        print(f"  property {name} = {prop.value!r}")
    for tileset in tmx_map.tilesets:
        describe_tileset(tileset)
    describe_layers(tmx_map.layers)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Decode a Tiled .tmx map or .tsx tileset and print a summary"
    )
    parser.add_argument("path", help="Path to a .tmx or .tsx file")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show progress information"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Show debug information (implies verbose)"
    )
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, debug=args.debug)

    path = Path(args.path)
    try:
        if path.suffix == '.tmx':
            describe_map(load_map(path))
        elif path.suffix == '.tsx':
            describe_tileset(load_tileset(path), indent="")
        else:
            print("Error: a .tmx or .tsx file is expected.")
            return 1
    except TmxError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
