#!/usr/bin/env python3
"""
ABOUTME: Serializes JSON-like Python values (or JSON text) into an XML string
ABOUTME: Mapping keys become elements; {name, attrs, value|text, children} in lists are element descriptors
"""

import datetime
import json
from collections.abc import Mapping
from typing import Any, Optional, Union

from loguru import logger

from render_options import DeclarationOptions, RenderOptions
from xml_utils import (
    cdata,
    doc_type_declaration,
    escape,
    sanitize_xml_name,
    stringify,
    xml_header,
)

__all__ = [
    'json_to_xml',
    'obj_to_xml',
    'serialize',
    'escape',
    'cdata',
    'make_node',
    'sanitize_xml_name',
    'xml_header',
    'XmlSerializer',
    'NestingDepthError',
    'RenderOptions',
    'DeclarationOptions',
]


# ============================================================
# Constants
# ============================================================

# Where a value sits; element descriptors are only recognized as list items
POSITION_KEYED = 0       # Root value or value under a mapping key / descriptor children
POSITION_LIST_ITEM = 1   # Direct item of a list or tuple

JSON_TEXT_TYPES = (str, bytes, bytearray)
SEQUENCE_TYPES = (list, tuple)
DATE_TYPES = (datetime.datetime, datetime.date, datetime.time)


class NestingDepthError(ValueError):
    """Raised when input nesting exceeds RenderOptions.max_depth"""


# ============================================================
# Node Rendering
# ============================================================

def make_node(
    name: Any,
    content: Optional[str],
    attributes: Optional[str],
    level: int,
    has_sub_nodes: bool,
    options: RenderOptions,
) -> str:
    """
    Render one element.

    Args:
        name: Element name (sanitized when remove_illegal_name_characters is set)
        content: Already-serialized inner XML; empty or None gives a self-closing tag
        attributes: Pre-formatted attribute string starting with a space, or None
        level: Nesting depth used for pretty-print indentation
        has_sub_nodes: Put the closing tag on its own indented line
        options: Render options

    Returns:
        "<name attrs>content</name>" or "<name attrs/>", prefixed by the indentation
    """
    if options.remove_illegal_name_characters:
        name = sanitize_xml_name(name)
    elif not isinstance(name, str):
        name = stringify(name)

    indent = '\n' + options.indent * level if options.pretty_print else ''

    node = indent + '<' + name + (attributes or '')
    if content:
        node += '>' + content + (indent if has_sub_nodes else '') + '</' + name + '>'
    else:
        node += '/>'
    return node


def format_date(value: Union[datetime.datetime, datetime.date, datetime.time]) -> str:
    """
    Render a date-like value as ISO 8601.

    Timezone-aware datetimes are converted to UTC and written with millisecond
    precision and a trailing "Z" (2013-01-01T12:00:00.000Z). Naive datetimes keep
    millisecond precision without a zone; dates and times use isoformat().
    """
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None and value.utcoffset() is not None:
            utc_value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
            return utc_value.isoformat(timespec='milliseconds') + 'Z'
        return value.isoformat(timespec='milliseconds')
    return value.isoformat()


# ============================================================
# Tree Serialization
# ============================================================

class XmlSerializer:
    """
    Recursive value-to-XML serializer.

    Dispatch order per value: list/tuple, date-like, element descriptor (only as a
    list item), mapping, callable, scalar. A mapping that merely has a "name" key is
    only treated as a descriptor when it sits directly inside a list.
    """

    def __init__(self, options: Optional[RenderOptions] = None):
        self.options = options or RenderOptions()

    def serialize(self, value: Any) -> str:
        """Serialize a root value (descriptor recognition disabled at the root)"""
        return self._serialize(value, POSITION_KEYED, 0)

    def _text(self, value: Any) -> str:
        return escape(value) if self.options.escape else stringify(value)

    def _serialize(self, value: Any, position: int, level: int) -> str:
        max_depth = self.options.max_depth
        if max_depth is not None and level > max_depth:
            raise NestingDepthError(
                f"Input nesting exceeds max_depth={max_depth} (reached level {level})"
            )

        if isinstance(value, SEQUENCE_TYPES):
            return self._serialize_sequence(value, level)

        if isinstance(value, DATE_TYPES):
            return format_date(value)

        if isinstance(value, Mapping):
            if position == POSITION_LIST_ITEM and value.get('name'):
                return self._serialize_descriptor(value, level)
            return self._serialize_mapping(value, level)

        if callable(value):
            result = value()
            return result if isinstance(result, str) else stringify(result)

        return self._text(value)

    def _serialize_sequence(self, items, level: int) -> str:
        ret = ''.join(self._serialize(item, POSITION_LIST_ITEM, level + 1) for item in items)
        if self.options.pretty_print and items:
            ret += '\n'
        return ret

    def _serialize_descriptor(self, descriptor: Mapping, level: int) -> str:
        attributes = ''
        attrs = descriptor.get('attrs')
        if attrs:
            if not isinstance(attrs, Mapping):
                # Pre-formatted attribute text is appended verbatim
                attributes += ' ' + stringify(attrs)
            else:
                for key, val in attrs.items():
                    attributes += ' ' + stringify(key) + '="' + self._text(val) + '"'

        content = ''
        if 'value' in descriptor:
            content += self._text(descriptor['value'])
        elif 'text' in descriptor:
            content += self._text(descriptor['text'])

        children = descriptor.get('children')
        # Empty containers still count as children; other falsy values do not
        has_children = isinstance(children, (SEQUENCE_TYPES, Mapping)) or bool(children)
        if has_children:
            content += self._serialize(children, POSITION_KEYED, level + 1)

        return make_node(descriptor['name'], content, attributes, level, has_children, self.options)

    def _serialize_mapping(self, mapping: Mapping, level: int) -> str:
        nodes = ''
        for key, val in mapping.items():
            child = self._serialize(val, POSITION_KEYED, level + 1)
            nodes += make_node(key, child, None, level + 1, False, self.options)
        if self.options.pretty_print and nodes:
            nodes += '\n'
        return nodes


# ============================================================
# Entry Point
# ============================================================

def _load_json_text(text: Union[str, bytes, bytearray]) -> Any:
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode('utf-8')
    return json.loads(text)


def json_to_xml(obj: Any, options: Any = None) -> Union[str, bool]:
    """
    Convert a JSON-like value, or JSON text, to an XML string.

    Args:
        obj: Python value (dict, list, scalars, dates, callables) or str/bytes JSON text
        options: None, a mapping of render options (camelCase or snake_case keys),
            a RenderOptions instance, or any other truthy value to request a
            default XML header with otherwise default settings

    Returns:
        The XML string, or False when obj is text that is not valid JSON

    Raises:
        NestingDepthError: If max_depth is set and the input nests deeper
    """
    if isinstance(obj, JSON_TEXT_TYPES):
        try:
            obj = _load_json_text(obj)
        except (ValueError, UnicodeDecodeError) as e:
            logger.debug("Input is not valid JSON, returning False: {}", e)
            return False

    header = ''
    doc_type = None

    if isinstance(options, (Mapping, RenderOptions)):
        render_options = RenderOptions.from_value(options)
        declaration = render_options.header_declaration
        if declaration is not None:
            header = xml_header(declaration)
        if render_options.doc_type is not None:
            doc_type = doc_type_declaration(render_options.doc_type)
    elif options:
        render_options = RenderOptions()
        header = xml_header()
    else:
        render_options = RenderOptions()

    prefix = header
    if doc_type is not None:
        if render_options.pretty_print:
            prefix += '\n'
        prefix += doc_type

    return prefix + XmlSerializer(render_options).serialize(obj)


# Same callable under the other names callers know it by
obj_to_xml = json_to_xml
serialize = json_to_xml
