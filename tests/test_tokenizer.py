"""
Tokenizer tests - block macro detection and line splitting

Tests the whole-document classifier and the per-line tokenizer, including
tags that contain single ">" characters and tag shapes that must stay text.
"""

import pytest

from tweeformat.config import FormatterOptions
from tweeformat.lib.tokenizer import blockMacros_detect, line_tokenize, tagEnd_find
from tweeformat.models import Token, TokenKind


@pytest.fixture
def options():
    return FormatterOptions()


class TestBlockMacroDetection:
    """Test the document-wide block macro pre-pass"""

    def test_closing_tags_collected(self):
        """Every closed macro name is a block macro"""
        text = "<<if $a>>x<</if>>\n<<for _i range 3>>_i<</for>>\n<<goto X>>"
        assert blockMacros_detect(text) == {"if", "for"}

    def test_no_closing_tags(self):
        """Documents without closers have no block macros"""
        assert blockMacros_detect("<<if $x>> <<else>> <<goto Start>>") == frozenset()

    def test_malformed_closers_ignored(self):
        """Only the exact <</name>> form counts"""
        assert blockMacros_detect("<</ if>> <</if x>> </if>") == frozenset()

    def test_closer_anywhere_in_document(self):
        """A closer late in the document classifies earlier openers too"""
        text = ":: A\n<<widget \"x\">>\n\n:: B\n<</widget>>"
        assert "widget" in blockMacros_detect(text)

    def test_empty_document(self):
        assert blockMacros_detect("") == frozenset()


class TestTagBoundaries:
    """Test where a tag ends"""

    def test_simple_tag(self):
        assert tagEnd_find("<<if $x>>rest", 0) == 9

    def test_single_gt_inside_tag(self):
        """Comparison operators do not end the tag"""
        line = "<<if $hp >= 10>>"
        assert tagEnd_find(line, 0) == len(line)

    def test_unterminated_tag(self):
        assert tagEnd_find("<<if $x", 0) is None


class TestLineTokenize:
    """Test splitting a single line into tokens"""

    def test_block_on_one_line(self, options):
        """Opening, text and closing tokens in order"""
        tokens = line_tokenize("<<if $hp >= 10>>strong<</if>>", options)

        assert tokens == [
            Token(value="<<if $hp >= 10>>", kind=TokenKind.OPENING_MACRO, macro_name="if"),
            Token(value="strong", kind=TokenKind.TEXT),
            Token(value="<</if>>", kind=TokenKind.CLOSING_MACRO, macro_name="if"),
        ]

    def test_plain_text(self, options):
        tokens = line_tokenize("Just some prose.", options)
        assert tokens == [Token(value="Just some prose.", kind=TokenKind.TEXT)]

    def test_html_is_text(self, options):
        """Single-bracket HTML stays one text token, quotes untouched"""
        line = "<span class='note'>Hi</span>"
        tokens = line_tokenize(line, options)
        assert tokens == [Token(value=line, kind=TokenKind.TEXT)]

    def test_whitespace_runs_dropped(self, options):
        tokens = line_tokenize("<<a>>   <<b>>", options)
        assert [t.value for t in tokens] == ["<<a>>", "<<b>>"]

    def test_text_runs_trimmed(self, options):
        tokens = line_tokenize("before <<else>>  after", options)
        assert [t.value for t in tokens] == ["before", "<<else>>", "after"]
        assert [t.kind for t in tokens] == [
            TokenKind.TEXT,
            TokenKind.OPENING_MACRO,
            TokenKind.TEXT,
        ]

    def test_unterminated_tag_is_text(self, options):
        tokens = line_tokenize("<<if $x and more", options)
        assert tokens == [Token(value="<<if $x and more", kind=TokenKind.TEXT)]

    def test_naked_variable_is_text(self, options):
        """<<$var>> is neither an opening nor a closing macro"""
        tokens = line_tokenize("Hello <<$name>>!", options)
        assert tokens == [Token(value="Hello <<$name>>!", kind=TokenKind.TEXT)]

    def test_malformed_closer_is_text(self, options):
        tokens = line_tokenize("<</if extra>>", options)
        assert tokens == [Token(value="<</if extra>>", kind=TokenKind.TEXT)]

    def test_print_shorthand_is_text(self, options):
        tokens = line_tokenize("<<= $gold>>", options)
        assert tokens[0].kind == TokenKind.TEXT

    def test_opening_value_normalized(self, options):
        """Opening tags pass through quote normalization"""
        tokens = line_tokenize("<<goto 'Start'>>", options)
        assert tokens == [
            Token(value="<<goto Start>>", kind=TokenKind.OPENING_MACRO, macro_name="goto")
        ]

    def test_links_between_macros(self, options):
        tokens = line_tokenize("<<if $x>>[[Go|Room]]<</if>>", options)
        assert [t.value for t in tokens] == ["<<if $x>>", "[[Go|Room]]", "<</if>>"]

    def test_empty_line(self, options):
        assert line_tokenize("", options) == []
