"""
Quote normalization for macro arguments

Rewrites every quoted literal inside one opening macro tag:

1. Single-word literals that look like passage names lose their quotes
   (<<goto 'Start'>> → <<goto Start>>), unless the literal sits in a value
   context such as an assignment, a comparison or a function argument.
2. Everything else is re-quoted in the configured quote style, escaping
   only the target delimiter.

Recognition is done by an explicit scanner rather than one regular
expression: a literal starts at a quote that does not follow a word
character, runs to the next unescaped identical quote, and tolerates the
other quote character inside. [[link]] markup is copied untouched.

Example:
    >>> from tweeformat.config import FormatterOptions
    >>> macroArguments_format("<<set $x to 'hello world'>>", FormatterOptions())
    '<<set $x to "hello world">>'
    >>> macroArguments_format("<<goto 'Start'>>", FormatterOptions())
    '<<goto Start>>'
"""

import re
from typing import Optional

from ..config.options import FormatterOptions, QuoteStyle


QUOTE_CHARACTERS = "'\""

# Keywords after which a literal is a string value, not a passage name
VALUE_KEYWORDS = frozenset({
    "to", "is", "isnot", "eq", "neq", "gt", "gte", "lt", "lte",
    "and", "or", "not", "def", "ndef",
})

# Operators and separators after which a literal is a string value.
# "(" and "," cover function-call arguments.
VALUE_PUNCTUATION = "(,=+-*/%<>!&|?:[{"

# Characters that keep a literal quoted even if it is a single word
UNSAFE_CHARACTERS = "-/\\'\"<>[]|"

_TRAILING_WORD = re.compile(r"(\w+)$")


def quotes_unescape(content: str) -> str:
    r"""
    Resolve escaped quotes (\' → ', \" → ").
    """
    return content.replace("\\'", "'").replace('\\"', '"')


def quotes_escape(content: str, quote: str) -> str:
    r"""
    Escape ``quote`` inside content, idempotently.

    Existing escapes are resolved first so repeated formatting never
    produces \\\" sequences.

    Example:
        >>> quotes_escape('say \\"hi\\"', '"')
        'say \\"hi\\"'
        >>> quotes_escape("it's", "'")
        "it\\'s"
    """
    return quotes_unescape(content).replace(quote, "\\" + quote)


def quotedString_format(original_quote: str, content: str, quote_style: QuoteStyle) -> str:
    """
    Re-quote a literal according to quote_style.

    Args:
        original_quote: Delimiter the literal was written with
        content: Raw (still escaped) text between the delimiters
        quote_style: "double", "single" or "preserve"

    Returns:
        The literal with its new delimiters
    """
    if quote_style == "preserve":
        target = original_quote
    elif quote_style == "single":
        target = "'"
    else:
        target = '"'
    return f"{target}{quotes_escape(content, target)}{target}"


def literal_findEnd(text: str, start: int) -> Optional[int]:
    """
    Find the closing delimiter of the literal opening at ``start``.

    Backslash escapes skip the following character; the other quote
    character is ordinary content.

    Returns:
        Index of the closing quote, or None if the literal is unterminated
    """
    quote = text[start]
    pos = start + 1
    while pos < len(text):
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == quote:
            return pos
        pos += 1
    return None


def valueContext_check(text: str, start: int) -> bool:
    """
    Decide whether the literal at ``start`` is used as a value.

    Looks only at the last token before the opening quote: an operator or
    separator character, or one of VALUE_KEYWORDS (e.g. ``to`` in
    ``<<set $x to 'a'>>``).

    Example:
        >>> valueContext_check("<<set $x to 'a'>>", 12)
        True
        >>> valueContext_check("<<goto 'Start'>>", 7)
        False
    """
    before = text[:start].rstrip()
    if not before:
        return False
    if before[-1] in VALUE_PUNCTUATION and not before.endswith("<<"):
        return True
    match = _TRAILING_WORD.search(before)
    return bool(match) and match.group(1).lower() in VALUE_KEYWORDS


def word_isStrippable(content: str) -> bool:
    """
    True if unescaped literal content is a bare single word.

    Empty strings, variable references ($var, _temp) and anything holding
    whitespace or UNSAFE_CHARACTERS keep their quotes.
    """
    if not content or content[0] in "$_":
        return False
    return not any(char.isspace() or char in UNSAFE_CHARACTERS for char in content)


def literal_format(tag: str, start: int, end: int, options: FormatterOptions) -> str:
    """
    Format the literal spanning tag[start:end + 1].
    """
    quote = tag[start]
    content = tag[start + 1:end]
    unescaped = quotes_unescape(content)

    if (
        options.strip_single_word_quotes
        and word_isStrippable(unescaped)
        and not valueContext_check(tag, start)
    ):
        return unescaped

    return quotedString_format(quote, content, options.quote_style)


def macroArguments_format(tag: str, options: FormatterOptions) -> str:
    """
    Normalize all quoted arguments of one opening macro tag.

    Args:
        tag: Complete tag text, e.g. "<<link 'Go' 'Start'>>"
        options: Active FormatterOptions

    Returns:
        Tag text with every literal stripped or re-quoted
    """
    result = []
    pos = 0

    while pos < len(tag):
        char = tag[pos]

        # [[link|Target]] markup is left alone
        if tag.startswith("[[", pos):
            link_end = tag.find("]]", pos + 2)
            if link_end != -1:
                result.append(tag[pos:link_end + 2])
                pos = link_end + 2
                continue

        if char in QUOTE_CHARACTERS and (pos == 0 or not _char_isWord(tag[pos - 1])):
            end = literal_findEnd(tag, pos)
            if end is not None:
                result.append(literal_format(tag, pos, end, options))
                pos = end + 1
                continue

        result.append(char)
        pos += 1

    return "".join(result)


def _char_isWord(char: str) -> bool:
    return char.isalnum() or char == "_"
