"""
Tests for render_options module - option aliases, defaulting and validation
"""

import sys
from pathlib import Path

import pytest

# Add scripts directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "skills" / "json-to-xml" / "scripts"))

from render_options import DeclarationOptions, RenderOptions  # type: ignore


class TestRenderOptionsDefaults:
    """None or an empty mapping gives the default configuration"""

    def test_none(self):
        options = RenderOptions.from_value(None)
        assert options == RenderOptions()
        assert options.indent == '\t'
        assert options.pretty_print is False
        assert options.escape is False
        assert options.doc_type is None
        assert options.header_declaration is None

    def test_empty_mapping(self):
        assert RenderOptions.from_value({}) == RenderOptions()

    def test_instance_passes_through(self):
        options = RenderOptions(pretty_print=True)
        assert RenderOptions.from_value(options) is options


class TestRenderOptionsAliases:
    """Both the camelCase and snake_case spellings are accepted"""

    def test_camel_case(self):
        options = RenderOptions.from_value({
            'prettyPrint': True,
            'removeIllegalNameCharacters': True,
            'escape': True,
            'docType': 'html',
            'maxDepth': 10,
        })
        assert options.pretty_print is True
        assert options.remove_illegal_name_characters is True
        assert options.escape is True
        assert options.doc_type == 'html'
        assert options.max_depth == 10

    def test_snake_case(self):
        options = RenderOptions.from_value({'pretty_print': 1, 'doc_type': 'html'})
        assert options.pretty_print is True
        assert options.doc_type == 'html'

    def test_unknown_keys_ignored(self):
        assert RenderOptions.from_value({'colour': 'blue'}) == RenderOptions()


class TestFalsyButValidValues:
    """Falsy values that are meaningful must not be replaced by defaults"""

    def test_empty_indent_kept(self):
        assert RenderOptions.from_value({'indent': ''}).indent == ''

    def test_none_indent_defaults(self):
        assert RenderOptions.from_value({'indent': None}).indent == '\t'

    def test_empty_doc_type_kept(self):
        assert RenderOptions.from_value({'docType': ''}).doc_type == ''


class TestHeaderDeclaration:
    """xmlHeader may be a flag or a mapping of declaration values"""

    def test_true_gives_defaults(self):
        options = RenderOptions.from_value({'xmlHeader': True})
        assert options.header_declaration == DeclarationOptions()

    def test_mapping(self):
        options = RenderOptions.from_value({'xmlHeader': {'version': '1.1', 'standalone': True}})
        declaration = options.header_declaration
        assert declaration.version == '1.1'
        assert declaration.encoding == 'utf-8'
        assert declaration.standalone is True

    def test_false_gives_none(self):
        assert RenderOptions.from_value({'xmlHeader': False}).header_declaration is None

    def test_declaration_from_none_values(self):
        declaration = DeclarationOptions.from_value({'version': None, 'encoding': None})
        assert declaration == DeclarationOptions()


class TestValidation:
    """Invalid option values raise TypeError"""

    def test_non_integer_max_depth(self):
        with pytest.raises(TypeError):
            RenderOptions.from_value({'maxDepth': '5'})

    def test_bool_max_depth(self):
        with pytest.raises(TypeError):
            RenderOptions.from_value({'max_depth': True})

    def test_non_mapping_options(self):
        with pytest.raises(TypeError):
            RenderOptions.from_value(['prettyPrint'])
