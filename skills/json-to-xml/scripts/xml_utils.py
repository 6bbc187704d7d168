#!/usr/bin/env python3
"""
ABOUTME: XML text helpers shared by the JSON-to-XML serializer
ABOUTME: Provides escaping, CDATA wrapping, element-name sanitization and prolog strings
"""

import math
import re
from decimal import Decimal
from typing import Any, Mapping, Union

from render_options import DeclarationOptions


# ============================================================
# Constants
# ============================================================

# Approximation of the XML 1.0 NameStartChar production
ELEMENT_START_CHARS = (
    'a-zA-Z_'
    '\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u00FF'
    '\u0370-\u037D\u037F-\u1FFF'
    '\u200C-\u200D\u2070-\u218F'
    '\u2C00-\u2FFF\u3001-\uD7FF'
    '\uF900-\uFDCF\uFDF0-\uFFFD'
)

# Characters legal after the first position only
ELEMENT_NON_START_CHARS = '\\-.0-9\u00B7\u0300-\u036F\u203F\u2040'

# One pass replaces: an illegal first character, a leading "xml" (any case),
# and any character that is illegal anywhere in a name.
ELEMENT_NAME_REPLACE_PATTERN = re.compile(
    '^([^' + ELEMENT_START_CHARS + '])'
    '|^([xX][mM][lL])'
    '|([^' + ELEMENT_START_CHARS + ELEMENT_NON_START_CHARS + '])'
)

# Ampersand must come first so the entities added later are not re-escaped
XML_ESCAPES = (
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ("'", '&apos;'),
    ('"', '&quot;'),
)

CDATA_TERMINATOR = ']]>'

# Floats in [POSITIONAL_MIN, POSITIONAL_MAX) are written without an exponent
POSITIONAL_MIN = 1e-6
POSITIONAL_MAX = 1e21


# ============================================================
# Text Conversion
# ============================================================

def stringify(value: Any) -> str:
    """
    Convert a scalar to text the way JSON producers write it.

    Booleans become "true"/"false" and None becomes an empty string. Floats
    follow JavaScript number formatting: positional notation from 1e-6 up to
    1e21 with no trailing ".0" (1.0 -> "1", 1e16 -> "10000000000000000"),
    exponent notation outside that range (1e21 -> "1e+21", 1e-7 -> "1e-7").
    The result never depends on the current locale.

    Args:
        value: Any scalar (or object with a sensible str())

    Returns:
        Text form of the value
    """
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return _format_float(value)
    return str(value)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value == 0:
        return '0'
    # repr() gives the shortest digits that round-trip
    shortest = repr(value)
    if POSITIONAL_MIN <= abs(value) < POSITIONAL_MAX:
        return format(Decimal(shortest).normalize(), 'f')
    # Outside the positional range repr() always uses exponent notation
    mantissa, _, exponent = shortest.partition('e')
    power = int(exponent)
    return '{}e{}{}'.format(mantissa, '+' if power >= 0 else '-', abs(power))


def escape(value: Any) -> str:
    """
    Escape a value for use as XML text or attribute content.

    Args:
        value: Scalar to escape; stringified first

    Returns:
        Text with &, <, >, ' and " replaced by their predefined entities
    """
    text = stringify(value)
    for char, entity in XML_ESCAPES:
        text = text.replace(char, entity)
    return text


def cdata(text: Any) -> str:
    """
    Wrap text in a CDATA section.

    Any embedded "]]>" is deleted rather than escaped, so content containing
    the terminator is silently altered.

    Args:
        text: Content to wrap; falsy input gives an empty section

    Returns:
        The CDATA section string
    """
    if not text:
        return '<![CDATA[]]>'
    content = text if isinstance(text, str) else stringify(text)
    return '<![CDATA[' + content.replace(CDATA_TERMINATOR, '') + ']]>'


def sanitize_xml_name(name: Any) -> str:
    """
    Replace characters that cannot appear in an XML element name with "_".

    Examples:
        "1tag"      -> "_tag"
        "xml:bad"   -> "__bad"   (":" is not a name character either)
        "my key"    -> "my_key"
        "valid_tag" -> "valid_tag"
    """
    if not isinstance(name, str):
        name = stringify(name)
    return ELEMENT_NAME_REPLACE_PATTERN.sub('_', name)


# ============================================================
# Prolog
# ============================================================

def xml_header(declaration: Union[None, bool, Mapping[str, Any], DeclarationOptions] = None) -> str:
    """
    Build the <?xml ... ?> prolog.

    Version and encoding are interpolated verbatim, so they must come from
    trusted configuration.

    Args:
        declaration: None/True for defaults, a mapping with version/encoding/standalone
            keys, or a DeclarationOptions

    Returns:
        The prolog string
    """
    declaration = DeclarationOptions.from_value(declaration)
    header = '<?xml version="{}" encoding="{}" '.format(declaration.version, declaration.encoding)
    if declaration.standalone:
        header += 'standalone="yes"'
    return header + '?>'


def doc_type_declaration(doc_type: str) -> str:
    """Build a <!DOCTYPE ...> declaration; an empty doc_type still yields one."""
    return '<!DOCTYPE ' + doc_type + '>'
