#!/usr/bin/env python3
"""
ABOUTME: Render configuration for the JSON-to-XML serializer
ABOUTME: Normalizes caller options (camelCase or snake_case keys) into frozen dataclasses once
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from loguru import logger


# ============================================================
# Constants
# ============================================================

DEFAULT_INDENT = '\t'

# Caller-facing spellings accepted for each RenderOptions field
OPTION_ALIASES = {
    'indent': 'indent',
    'prettyPrint': 'pretty_print',
    'pretty_print': 'pretty_print',
    'removeIllegalNameCharacters': 'remove_illegal_name_characters',
    'remove_illegal_name_characters': 'remove_illegal_name_characters',
    'escape': 'escape',
    'xmlHeader': 'xml_header',
    'xml_header': 'xml_header',
    'docType': 'doc_type',
    'doc_type': 'doc_type',
    'maxDepth': 'max_depth',
    'max_depth': 'max_depth',
}


# ============================================================
# Data Classes
# ============================================================

@dataclass(frozen=True)
class DeclarationOptions:
    """Values written into the <?xml ... ?> prolog"""
    version: str = '1.0'
    encoding: str = 'utf-8'
    standalone: bool = False     # Adds standalone="yes" when set

    @classmethod
    def from_value(cls, value: Any) -> 'DeclarationOptions':
        """
        Build declaration options from an xmlHeader setting.

        Args:
            value: True for defaults, a mapping with version/encoding/standalone keys,
                or an existing DeclarationOptions

        Returns:
            DeclarationOptions with missing or None entries defaulted
        """
        if isinstance(value, DeclarationOptions):
            return value
        if not isinstance(value, Mapping):
            return cls()
        defaults = cls()
        version = value.get('version')
        encoding = value.get('encoding')
        return cls(
            version=defaults.version if version is None else str(version),
            encoding=defaults.encoding if encoding is None else str(encoding),
            standalone=bool(value.get('standalone')),
        )


@dataclass(frozen=True)
class RenderOptions:
    """Serializer settings, defaulted once at the entry point"""
    indent: str = DEFAULT_INDENT                      # One indentation unit
    pretty_print: bool = False                        # Newline + indent before nodes
    remove_illegal_name_characters: bool = False      # Sanitize element names
    escape: bool = False                              # Escape text and attribute values
    xml_header: Union[bool, DeclarationOptions] = False
    doc_type: Optional[str] = None                    # None = no doctype; "" is honored
    max_depth: Optional[int] = None                   # None = no nesting guard

    @property
    def header_declaration(self) -> Optional[DeclarationOptions]:
        """Declaration to emit, or None when no prolog was requested"""
        if not self.xml_header:
            return None
        return DeclarationOptions.from_value(self.xml_header)

    @classmethod
    def from_value(cls, options: Union[None, Mapping[str, Any], 'RenderOptions']) -> 'RenderOptions':
        """
        Normalize caller options into a RenderOptions instance.

        Keys may use the camelCase spelling (prettyPrint, xmlHeader, ...) or the
        snake_case field names. A None indent falls back to a tab, while an empty
        string indent is kept. Unknown keys are ignored.

        Args:
            options: None, a mapping of option keys, or an existing RenderOptions

        Returns:
            RenderOptions

        Raises:
            TypeError: If max_depth is given but is not an integer
        """
        if isinstance(options, RenderOptions):
            return options
        if not options:
            return cls()
        if not isinstance(options, Mapping):
            raise TypeError(f"Render options must be a mapping, got {type(options).__name__}")

        values = {}
        for key, value in options.items():
            field_name = OPTION_ALIASES.get(key)
            if field_name is None:
                logger.debug("Ignoring unknown render option: {}", key)
                continue
            values[field_name] = value

        indent = values.get('indent')
        if indent is None:
            indent = DEFAULT_INDENT

        xml_header = values.get('xml_header', False)
        if isinstance(xml_header, Mapping):
            xml_header = DeclarationOptions.from_value(xml_header)
        elif not isinstance(xml_header, DeclarationOptions):
            xml_header = bool(xml_header)

        doc_type = values.get('doc_type')
        if doc_type is not None:
            doc_type = str(doc_type)

        max_depth = values.get('max_depth')
        if max_depth is not None and (isinstance(max_depth, bool) or not isinstance(max_depth, int)):
            raise TypeError(f"max_depth must be an integer, got {max_depth!r}")

        return cls(
            indent=str(indent),
            pretty_print=bool(values.get('pretty_print')),
            remove_illegal_name_characters=bool(values.get('remove_illegal_name_characters')),
            escape=bool(values.get('escape')),
            xml_header=xml_header,
            doc_type=doc_type,
            max_depth=max_depth,
        )
