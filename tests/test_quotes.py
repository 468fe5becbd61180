"""
Quote normalizer tests

Tests stripping of single-word literals, re-quoting per quote style,
escaping and the value-context heuristics that keep literals quoted.
"""

import pytest

from tweeformat.config import FormatterOptions
from tweeformat.lib.quotes import (
    macroArguments_format,
    quotes_escape,
    quotes_unescape,
    valueContext_check,
    word_isStrippable,
)


def fmt(tag: str, **overrides) -> str:
    return macroArguments_format(tag, FormatterOptions(**overrides))


class TestStripSingleWordQuotes:
    """Test removal of quotes around passage-name-like words"""

    def test_passage_name_unquoted(self):
        assert fmt("<<goto 'Start'>>") == "<<goto Start>>"

    def test_link_arguments_unquoted(self):
        assert fmt('<<link "Go" "Start">>') == "<<link Go Start>>"

    def test_multi_word_requoted(self):
        assert fmt("<<set $x to 'hello world'>>", quote_style="double") == '<<set $x to "hello world">>'

    def test_assignment_value_kept(self):
        """A value after 'to' keeps its quotes"""
        assert fmt("<<set $name to 'Bob'>>") == '<<set $name to "Bob">>'

    def test_comparison_value_kept(self):
        assert fmt("<<if $x is 'a'>>") == '<<if $x is "a">>'
        assert fmt("<<if $x == 'a'>>") == '<<if $x == "a">>'

    def test_function_argument_kept(self):
        assert fmt('<<run setup.go("Start")>>') == '<<run setup.go("Start")>>'
        assert fmt("<<run fn(\"a\", 'b')>>") == '<<run fn("a", "b")>>'

    def test_variable_reference_kept(self):
        assert fmt('<<goto "$dest">>') == '<<goto "$dest">>'
        assert fmt('<<goto "_tmp">>') == '<<goto "_tmp">>'

    def test_hyphen_slash_backslash_kept(self):
        assert fmt('<<goto "my-room">>') == '<<goto "my-room">>'
        assert fmt('<<include "a/b">>') == '<<include "a/b">>'

    def test_empty_string_kept(self):
        assert fmt("<<goto ''>>") == '<<goto "">>'

    def test_disabled(self):
        assert fmt("<<goto 'Start'>>", strip_single_word_quotes=False) == '<<goto "Start">>'


class TestQuoteStyle:
    """Test re-quoting per quote style"""

    def test_double(self):
        assert fmt("<<link 'Go on'>>") == '<<link "Go on">>'

    def test_single(self):
        assert fmt('<<link "Go on">>', quote_style="single") == "<<link 'Go on'>>"

    def test_preserve(self):
        """Delimiters survive unchanged with preserve and no stripping"""
        tag = "<<link 'Go on' \"Next room\">>"
        assert fmt(tag, quote_style="preserve", strip_single_word_quotes=False) == tag

    def test_escaped_quote_converted(self):
        assert fmt("<<link 'It\\'s here'>>") == '<<link "It\'s here">>'

    def test_inner_double_quotes_escaped(self):
        assert fmt("<<link 'Say \"hi\" now'>>") == '<<link "Say \\"hi\\" now">>'

    def test_escaped_double_to_single(self):
        tag = '<<link "Say \\"hi\\" now">>'
        assert fmt(tag, quote_style="single") == "<<link 'Say \"hi\" now'>>"

    @pytest.mark.parametrize("style", ["double", "single", "preserve"])
    def test_idempotent(self, style):
        """Formatting a formatted tag changes nothing"""
        tag = "<<link 'It\\'s \"here\"' \"a b\">>"
        once = fmt(tag, quote_style=style)
        assert fmt(once, quote_style=style) == once


class TestLiteralRecognition:
    """Test what the scanner treats as a literal"""

    def test_apostrophes_in_words(self):
        tag = "<<print Bob's and Ann's>>"
        assert fmt(tag) == tag

    def test_link_markup_untouched(self):
        tag = "<<link [[Bob's 'big' room|Room]]>>"
        assert fmt(tag) == tag

    def test_unterminated_literal(self):
        tag = "<<print 'oops>>"
        assert fmt(tag) == tag


class TestHelpers:
    """Test the small building blocks"""

    def test_unescape(self):
        assert quotes_unescape("it\\'s \\\"x\\\"") == "it's \"x\""

    def test_escape_is_idempotent(self):
        once = quotes_escape('say "hi"', '"')
        assert once == 'say \\"hi\\"'
        assert quotes_escape(once, '"') == once

    def test_value_context(self):
        assert valueContext_check("<<set $x to 'a'>>", 12)
        assert not valueContext_check("<<goto 'Start'>>", 7)

    def test_strippable_words(self):
        assert word_isStrippable("Start")
        assert not word_isStrippable("two words")
        assert not word_isStrippable("")
        assert not word_isStrippable("$var")
        assert not word_isStrippable("it's")
