"""
Custom properties (<properties>/<property>).

Tiled lets users attach typed key/value pairs to maps, layers, tilesets,
tiles and objects:

    <properties>
        <property name="solid" type="bool" value="true"/>
        <property name="health" type="int" value="100"/>
        <property name="description">A wooden
    door</property>
    </properties>

The value comes from the `value` attribute, or from the element text for
multi-line strings. The declared type decides the Python value:

    string (default) -> str
    int              -> int
    float            -> float
    bool             -> bool ("true"/"false" only)
    color            -> Color, or None when empty (unset in Tiled)
    file             -> str (path relative to the document)

Unknown types (object, class, ...) are kept as plain strings.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .attributes import Color, parse_int
from .constants import PropertyType
from .errors import InvalidPropertyValue, MissingRequiredAttribute


def frozen_mapping(mapping: Optional[Mapping] = None) -> Mapping:
    """Read-only copy of mapping, for the dict-valued fields of the model."""
    return MappingProxyType(dict(mapping or {}))


def frozen_mapping_field():
    """
    Dataclass field holding a frozen_mapping().

    Mappings are not hashable, so they stay out of the generated __hash__.
    """
    return field(default_factory=frozen_mapping, hash=False)


def _parse_bool(raw: str) -> bool:
    if raw == 'true':
        return True
    if raw == 'false':
        return False
    raise ValueError(raw)


def _parse_color(raw: str) -> Optional[Color]:
    if raw == '':
        return None
    return Color.from_str(raw)


_CONVERTERS = {
    PropertyType.STRING: str,
    PropertyType.INT: parse_int,
    PropertyType.FLOAT: float,
    PropertyType.BOOL: _parse_bool,
    PropertyType.COLOR: _parse_color,
    PropertyType.FILE: str,
}


@dataclass(frozen=True)
class Property:
    """A typed name/value pair. `type` tags which kind `value` holds."""
    name: str
    type: PropertyType = PropertyType.STRING
    value: Any = ""

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Property':
        name = elem.get('name')
        if name is None:
            raise MissingRequiredAttribute('name', elem.tag)

        declared = elem.get('type', 'string')
        try:
            prop_type = PropertyType(declared)
        except ValueError:
            prop_type = PropertyType.STRING

        raw = elem.get('value')
        if raw is None:
            raw = elem.text or ''

        try:
            value = _CONVERTERS[prop_type](raw)
        except ValueError as exc:
            raise InvalidPropertyValue(name, declared, raw) from exc

        return cls(name=name, type=prop_type, value=value)


PropertyMap = Mapping[str, Property]


def read_properties(parent: ET.Element) -> PropertyMap:
    """
    Collect the properties of an element.

    A later property with the same name replaces an earlier one, also
    across several <properties> containers. The result is read-only.
    """
    properties: Dict[str, Property] = {}
    for props_elem in parent.findall('properties'):
        for prop_elem in props_elem.findall('property'):
            prop = Property.from_xml(prop_elem)
            properties[prop.name] = prop
    return frozen_mapping(properties)
