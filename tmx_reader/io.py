"""
File access for external references (tileset `source` attributes)
and parsing of raw documents into element trees.

The decoder never opens files itself. It asks a reader:

    reader.read("tilesets/terrain.tsx") -> bytes

Paths are relative to the document that contains the reference. Two
readers are provided: FilesystemReader for files on disk and MemoryReader
for documents held in memory (tests, archives, network caches).
"""

import errno
import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Protocol, Union

from .errors import IoError, XmlSyntaxError


class FileReader(Protocol):
    def read(self, path: str) -> bytes:
        ...


class FilesystemReader:
    """Reads paths relative to base_dir (usually the map's directory)."""

    def __init__(self, base_dir: Union[str, Path] = '.'):
        self.base_dir = Path(base_dir)

    def read(self, path: str) -> bytes:
        full_path = self.base_dir / path
        try:
            return full_path.read_bytes()
        except OSError as exc:
            raise IoError(str(full_path), exc) from exc


class MemoryReader:
    """Serves documents from a {path: bytes or str} dict."""

    def __init__(self, files: Dict[str, Union[bytes, str]]):
        self.files = dict(files)

    def read(self, path: str) -> bytes:
        try:
            content = self.files[path]
        except KeyError:
            raise IoError(path, FileNotFoundError(
                errno.ENOENT, os.strerror(errno.ENOENT), path)) from None
        if isinstance(content, str):
            return content.encode('utf-8')
        return content


def parse_document(data: Union[bytes, str], root_tag: str) -> ET.Element:
    """
    Parse a whole TMX/TSX document and check its root element.

    Raises XmlSyntaxError for malformed XML or an unexpected root.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise XmlSyntaxError(str(exc)) from exc

    if root.tag != root_tag:
        raise XmlSyntaxError(f"expected <{root_tag}> root element, found <{root.tag}>")
    return root
