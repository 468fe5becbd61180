"""
Macro tag scanning for SugarCube/Twee markup

Two pieces live here:

1. blockMacros_detect(): a whole-document pre-pass collecting every macro
   name that is ever closed (<</name>>). Membership decides, document-wide,
   whether an opening tag indents the lines that follow it.
2. line_tokenize(): splits one trimmed source line into opening-macro,
   closing-macro and text tokens.

A tag runs from "<<" to the first ">>" after it, so single ">" characters
inside the tag (<<if $hp >= 10>>) do not end it. Tags of any other shape
(<<$var>>, <<= expr>>, a "<<" that is never closed) stay part of the
surrounding text.

Example:
    >>> from tweeformat.config import FormatterOptions
    >>> [t.value for t in line_tokenize("<<if $x >= 2>>Hi <b>you</b><</if>>", FormatterOptions())]
    ['<<if $x >= 2>>', 'Hi <b>you</b>', '<</if>>']
"""

import re
from typing import FrozenSet, List, Optional

from ..config.options import FormatterOptions
from ..models.tokens import Token, TokenKind
from .quotes import macroArguments_format


TAG_OPEN = "<<"
TAG_CLOSE = ">>"

_CLOSING_TAG = re.compile(r"<</(\w+)>>")
_CLOSING_TAG_EXACT = re.compile(r"<</(\w+)>>$")
_MACRO_NAME = re.compile(r"\w+")


def blockMacros_detect(text: str) -> FrozenSet[str]:
    """
    Collect the names of all macros that have a closing tag.

    Args:
        text: Complete document text

    Returns:
        Frozen set of macro names (e.g. {"if", "for", "link"})

    Example:
        >>> sorted(blockMacros_detect("<<if $a>>x<</if>> <<goto B>>"))
        ['if']
    """
    return frozenset(match.group(1) for match in _CLOSING_TAG.finditer(text))


def tagEnd_find(line: str, start: int) -> Optional[int]:
    """
    Find where the tag opening at ``start`` ends.

    Args:
        line: Source line
        start: Index of the opening "<<"

    Returns:
        Index just past the closing ">>", or None if the tag never closes
    """
    close = line.find(TAG_CLOSE, start + len(TAG_OPEN))
    if close == -1:
        return None
    return close + len(TAG_CLOSE)


def tag_classify(tag: str, options: FormatterOptions) -> Optional[Token]:
    """
    Turn complete tag text into a macro token.

    Returns:
        An OPENING_MACRO or CLOSING_MACRO token, or None when the tag has
        neither shape and should be treated as text
    """
    closing = _CLOSING_TAG_EXACT.match(tag)
    if closing:
        return Token(value=tag, kind=TokenKind.CLOSING_MACRO, macro_name=closing.group(1))

    name = _MACRO_NAME.match(tag, len(TAG_OPEN))
    if name:
        return Token(
            value=macroArguments_format(tag, options),
            kind=TokenKind.OPENING_MACRO,
            macro_name=name.group(0),
        )

    return None


def line_tokenize(line: str, options: FormatterOptions) -> List[Token]:
    """
    Split one trimmed line into macro and text tokens.

    Args:
        line: Source line with surrounding whitespace removed
        options: Active FormatterOptions (used for quote normalization)

    Returns:
        Tokens in source order. Text runs are stripped and whitespace-only
        runs are dropped.

    Example:
        >>> [t.kind.value for t in line_tokenize("a <<else>> b", FormatterOptions())]
        ['text', 'opening-macro', 'text']
    """
    tokens: List[Token] = []
    text_run: List[str] = []

    def text_flush() -> None:
        text = "".join(text_run).strip()
        text_run.clear()
        if text:
            tokens.append(Token(value=text, kind=TokenKind.TEXT))

    pos = 0
    while pos < len(line):
        if line.startswith(TAG_OPEN, pos):
            end = tagEnd_find(line, pos)
            if end is not None:
                token = tag_classify(line[pos:end], options)
                if token is not None:
                    text_flush()
                    tokens.append(token)
                    pos = end
                    continue
                # Unrecognised tag shape: keep it verbatim as text
                text_run.append(line[pos:end])
                pos = end
                continue

        text_run.append(line[pos])
        pos += 1

    text_flush()
    return tokens
