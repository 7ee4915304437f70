"""
Image references (<image>).

Used by tilesets (one spritesheet), image-collection tiles (one image per
tile) and image layers. Only metadata is recorded; pixels are never
loaded here.

    <image source="terrain.png" trans="ff00ff" width="256" height="256"/>

    source: Path to image file (relative to the TMX/TSX file)
    trans:  Transparent color, pixels of this color become transparent
    width, height: Declared size in pixels (optional)

An image may instead embed its bytes:

    <image format="png">
        <data encoding="base64">iVBORw0KGgo...</data>
    </image>
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional

from .attributes import Attr, Color, resolve_attributes
from .data import decode_bytes


IMAGE_ATTRIBUTES = {
    'format': Attr('str', default=None),
    'source': Attr('str', default=None),
    'trans': Attr('color', default=None),
    'width': Attr('uint', default=None),
    'height': Attr('uint', default=None),
}


@dataclass(frozen=True)
class Image:
    source: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    trans: Optional[Color] = None
    format: Optional[str] = None
    data: Optional[bytes] = None          # embedded payload, still encoded as the image format

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Image':
        attrs = resolve_attributes(elem, IMAGE_ATTRIBUTES)

        data_elem = elem.find('data')
        data = decode_bytes(data_elem) if data_elem is not None else None

        return cls(
            source=attrs['source'],
            width=attrs['width'],
            height=attrs['height'],
            trans=attrs['trans'],
            format=attrs['format'],
            data=data,
        )
