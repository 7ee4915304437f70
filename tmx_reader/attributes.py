"""
Typed attribute resolution for TMX elements.

=============================================================================
WHY A SCHEMA?
=============================================================================

The quick way of reading an attribute is

    width = int(elem.get('width', 0))

which works until the file contains width="abc" (ValueError with no
context) or forgets a mandatory attribute (silently 0). Instead, every
element type declares a small schema:

    LAYER_ATTRIBUTES = {
        'name':    Attr('str', default=''),
        'width':   Attr('uint'),                  # required
        'opacity': Attr('float', default=1.0),
        'visible': Attr('bool', default=True),
    }

    attrs = resolve_attributes(elem, LAYER_ATTRIBUTES)
    attrs['width']   # -> int

Errors carry the attribute name, the raw text and the expected type.
Attributes not listed in the schema are ignored.

=============================================================================
BOOLEANS AND COLORS
=============================================================================

TMX booleans are written "0"/"1" (visible="0"). Anything else is an error.

Colors come in three spellings:

    #RRGGBB      backgroundcolor="#202040"
    #AARRGGBB    tintcolor="#80ff0000"   (alpha first!)
    RRGGBB       trans="ff00ff"          (image transparent color)

=============================================================================
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from .constants import UINT32_MAX
from .errors import InvalidAttributeValue, MissingRequiredAttribute


# Sentinel for attributes without a default
REQUIRED = object()

_HEX = re.compile(r'^[0-9a-fA-F]+$')
_DIGITS = re.compile(r'[0-9]+')
_SIGNED_DIGITS = re.compile(r'[-+]?[0-9]+')


# =============================================================================
# COLOR
# =============================================================================

@dataclass(frozen=True)
class Color:
    """RGBA color. Alpha defaults to fully opaque."""
    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def from_str(cls, text: str) -> 'Color':
        """
        Parse "#RRGGBB", "#AARRGGBB" or "RRGGBB".

        Raises ValueError on anything else.
        """
        if text.startswith('#'):
            digits = text[1:]
            if len(digits) not in (6, 8):
                raise ValueError(f"invalid color: {text!r}")
        else:
            digits = text
            if len(digits) != 6:
                raise ValueError(f"invalid color: {text!r}")

        if not _HEX.match(digits):
            raise ValueError(f"invalid color: {text!r}")

        alpha = 255
        if len(digits) == 8:
            alpha = int(digits[0:2], 16)
            digits = digits[2:]

        return cls(
            r=int(digits[0:2], 16),
            g=int(digits[2:4], 16),
            b=int(digits[4:6], 16),
            a=alpha,
        )

    def __str__(self) -> str:
        return f"#{self.a:02x}{self.r:02x}{self.g:02x}{self.b:02x}"


# =============================================================================
# PRIMITIVE COERCIONS
# =============================================================================

def parse_bool(text: str) -> bool:
    if text == '1':
        return True
    if text == '0':
        return False
    raise ValueError(f"invalid boolean: {text!r}")


def parse_int(text: str) -> int:
    # int() alone also takes "1_0", padding and non-ASCII digits
    if not _SIGNED_DIGITS.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


def parse_uint(text: str) -> int:
    if not _DIGITS.fullmatch(text):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    value = int(text)
    if value > UINT32_MAX:
        raise ValueError(f"out of range: {text!r}")
    return value


_COERCIONS: Dict[str, Callable[[str], Any]] = {
    'int': parse_int,
    'uint': parse_uint,
    'float': float,
    'str': str,
    'bool': parse_bool,
    'color': Color.from_str,
}

_EXPECTED = {
    'int': "an integer",
    'uint': "an unsigned integer",
    'float': "a number",
    'str': "a string",
    'bool': "0 or 1",
    'color': "#RRGGBB or #AARRGGBB",
}


@dataclass(frozen=True)
class Attr:
    """
    Declaration of one recognized attribute.

    kind is one of 'int', 'uint', 'float', 'str', 'bool', 'color' or an
    Enum subclass whose values are the allowed tokens. check, when given,
    is an extra predicate on the coerced value (e.g. opacity range).
    """
    kind: Union[str, type]
    default: Any = REQUIRED
    check: Optional[Callable[[Any], bool]] = None
    expected: Optional[str] = None

    def describe(self) -> str:
        if self.expected:
            return self.expected
        if isinstance(self.kind, type) and issubclass(self.kind, Enum):
            return "one of " + ", ".join(m.value for m in self.kind)
        return _EXPECTED[self.kind]

    def coerce(self, name: str, raw: str, element: str) -> Any:
        try:
            if isinstance(self.kind, type) and issubclass(self.kind, Enum):
                value = self.kind(raw)
            else:
                value = _COERCIONS[self.kind](raw)
        except ValueError as exc:
            raise InvalidAttributeValue(
                name, raw, self.describe(), element) from exc

        if self.check is not None and not self.check(value):
            raise InvalidAttributeValue(name, raw, self.describe(), element)
        return value


def unit_interval(value: float) -> bool:
    return 0.0 <= value <= 1.0


def positive(value: int) -> bool:
    return value > 0


def resolve_attributes(elem: ET.Element, schema: Dict[str, Attr]) -> Dict[str, Any]:
    """
    Read every attribute declared in schema off elem.

    Returns a dict with one entry per schema key: the coerced value, or
    the declared default when the attribute is absent.

    Raises MissingRequiredAttribute / InvalidAttributeValue.
    """
    values = {}
    for name, attr in schema.items():
        raw = elem.get(name)
        if raw is None:
            if attr.default is REQUIRED:
                raise MissingRequiredAttribute(name, elem.tag)
            values[name] = attr.default
        else:
            values[name] = attr.coerce(name, raw, elem.tag)
    return values
