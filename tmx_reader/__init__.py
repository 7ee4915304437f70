"""
tmx_reader - decode Tiled TMX maps and TSX tilesets

Usage:
    from tmx_reader import load_map

    tmx_map = load_map("level1.tmx")
    for layer in tmx_map.layers:
        print(layer.kind, layer.name)
"""

from .attributes import Color
from .constants import (DrawOrder, FlipFlags, LayerKind, Orientation,
                        PropertyType, RenderOrder, ShapeKind, StaggerAxis,
                        StaggerIndex)
from .data import register_codec
from .errors import (DataLengthMismatch, InvalidAttributeValue,
                     InvalidCompression, InvalidEncoding, InvalidPointList,
                     InvalidPropertyValue, IoError, MissingRequiredAttribute,
                     TilesetLoadError, TilesetOverlap, TmxError,
                     UnresolvedGid, UnsupportedCodec, XmlSyntaxError)
from .gid import GidResolver, TileRef, split_gid
from .image import Image
from .io import FileReader, FilesystemReader, MemoryReader
from .layers import ImageLayer, Layer, LayerGroup, ObjectGroup, TileLayer
from .objects import (Ellipse, MapObject, Point, Polygon, Polyline, Rectangle,
                      Shape, TileShape)
from .properties import Property
from .tileset import Frame, Terrain, TileDefinition, TileOffset, Tileset
from .tmx_map import TiledMap, load_map, load_tileset, parse_map, parse_tileset

__version__ = "1.0.0"
__all__ = [
    "load_map",
    "parse_map",
    "load_tileset",
    "parse_tileset",
    "register_codec",
    "TiledMap",
    "Tileset",
    "TileDefinition",
    "TileOffset",
    "Terrain",
    "Frame",
    "Image",
    "TileLayer",
    "ObjectGroup",
    "ImageLayer",
    "LayerGroup",
    "Layer",
    "MapObject",
    "Shape",
    "Rectangle",
    "Ellipse",
    "Polygon",
    "Polyline",
    "Point",
    "TileShape",
    "Property",
    "Color",
    "GidResolver",
    "TileRef",
    "split_gid",
    "FileReader",
    "FilesystemReader",
    "MemoryReader",
    "FlipFlags",
    "Orientation",
    "RenderOrder",
    "StaggerAxis",
    "StaggerIndex",
    "DrawOrder",
    "PropertyType",
    "LayerKind",
    "ShapeKind",
    "TmxError",
    "XmlSyntaxError",
    "MissingRequiredAttribute",
    "InvalidAttributeValue",
    "InvalidPropertyValue",
    "InvalidEncoding",
    "InvalidCompression",
    "UnsupportedCodec",
    "DataLengthMismatch",
    "InvalidPointList",
    "UnresolvedGid",
    "TilesetOverlap",
    "TilesetLoadError",
    "IoError",
]
