"""
Structured passage tests

Tests strict JSON and lenient object-literal reflow, preservation of
unquoted keys, and the cases that must fall back to markup formatting.
"""

import pytest

from tweeformat.lib.structured import lenient_normalize, structuredPassage_format


INDENT = "    "


class TestStrictJson:
    """Test bodies that are valid JSON"""

    def test_object_reflowed(self):
        result = structuredPassage_format('{"a":1,"b":[true,null]}', "  ")
        assert result == '{\n  "a": 1,\n  "b": [\n    true,\n    null\n  ]\n}'

    def test_array_reflowed(self):
        result = structuredPassage_format('[1, "two", {"x": 3}]', INDENT)
        assert result == '[\n    1,\n    "two",\n    {\n        "x": 3\n    }\n]'

    def test_empty_containers(self):
        result = structuredPassage_format('{"a": {}, "b": []}', INDENT)
        assert result == '{\n    "a": {},\n    "b": []\n}'

    def test_multiline_source(self):
        body = '\n{\n"ifid": "ABC",\n  "format": "SugarCube"}\n'
        result = structuredPassage_format(body, INDENT)
        assert result == '{\n    "ifid": "ABC",\n    "format": "SugarCube"\n}'

    def test_unicode_kept(self):
        result = structuredPassage_format('{"name": "café"}', INDENT)
        assert result == '{\n    "name": "café"\n}'

    def test_tab_indent(self):
        result = structuredPassage_format('{"a": [1]}', "\t")
        assert result == '{\n\t"a": [\n\t\t1\n\t]\n}'


class TestNumbers:
    """Test that number literals are written back as the author wrote them"""

    def test_strict_json_numbers_verbatim(self):
        result = structuredPassage_format('{"big": 1e5, "price": 1.50, "neg": -0}', INDENT)
        assert result == '{\n    "big": 1e5,\n    "price": 1.50,\n    "neg": -0\n}'

    def test_lenient_numbers_verbatim(self):
        result = structuredPassage_format("{a: 1e5, b: 1.50}", INDENT)
        assert result == "{\n    a: 1e5,\n    b: 1.50\n}"

    def test_numbers_idempotent(self):
        once = structuredPassage_format("[2.50E-3, 10, 0.0]", INDENT)
        assert once == "[\n    2.50E-3,\n    10,\n    0.0\n]"
        assert structuredPassage_format(once, INDENT) == once


class TestLenient:
    """Test script-style object literals"""

    def test_unquoted_keys_and_trailing_commas(self):
        """Trailing commas go, unquoted keys stay unquoted"""
        result = structuredPassage_format('{name:"a", list:[1,2,],}', INDENT)
        assert result == '{\n    name: "a",\n    list: [\n        1,\n        2\n    ]\n}'

    def test_mixed_key_styles(self):
        result = structuredPassage_format('{"quoted": 1, bare: 2}', INDENT)
        assert result == '{\n    "quoted": 1,\n    bare: 2\n}'

    def test_single_quoted_values(self):
        result = structuredPassage_format("{a: 'x', b: 'it\\'s'}", INDENT)
        assert result == '{\n    a: "x",\n    b: "it\'s"\n}'

    def test_idempotent(self):
        once = structuredPassage_format("{hp: 10, items: ['sword', 'shield'],}", INDENT)
        assert structuredPassage_format(once, INDENT) == once

    def test_normalize(self):
        text, bare_keys = lenient_normalize("{a: 'x', b: [true, 1,],}")
        assert text == '{"a": "x", "b": [true, 1]}'
        assert bare_keys == {"a", "b"}

    def test_normalize_unterminated(self):
        with pytest.raises(ValueError):
            lenient_normalize("{a: 'x}")


class TestFallback:
    """Test bodies that are not structured data"""

    @pytest.mark.parametrize(
        "body",
        [
            "Hello there",
            "",
            "   \n  ",
            "<div>{x}</div>",
            "{{{verbatim}}}",
            "[[Start]]",
            "[[1]]",
            "[1, 2,]",
            "{broken: [1, 2}",
            '{"a": 1, "a": 2}',
            "{ this is prose }",
        ],
    )
    def test_returns_none(self, body):
        assert structuredPassage_format(body, INDENT) is None
