"""
Token models

Type-safe structures produced by the line tokenizer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TokenKind(Enum):
    """
    Kinds of tokens a logical line is split into
    """
    OPENING_MACRO = "opening-macro"    # <<if $x>>, <<set $y to 1>>
    CLOSING_MACRO = "closing-macro"    # <</if>>
    TEXT = "text"                      # prose, HTML, [[links]], <<$naked>>


@dataclass(frozen=True)
class Token:
    """
    One typed segment of a trimmed source line

    Attributes:
        value: Token text as it should be rendered (opening macros have
               already been through quote normalization)
        kind: TokenKind of the segment
        macro_name: Macro name for opening/closing macros, None for text

    Example:
        For the line "<<if $x>>hi<</if>>":
        [
            Token(value="<<if $x>>", kind=TokenKind.OPENING_MACRO, macro_name="if"),
            Token(value="hi", kind=TokenKind.TEXT),
            Token(value="<</if>>", kind=TokenKind.CLOSING_MACRO, macro_name="if"),
        ]
    """
    value: str
    kind: TokenKind
    macro_name: Optional[str] = None
