"""
Structured passage reformatting

Passages such as StoryData, or author data passages, often hold a JSON
value or a script-style object literal. When a passage body starts with
"{" or "[" it is parsed and re-serialized with one member per line:

    :: Inventory                  :: Inventory
    {name:"a", list:[1,2,],}  →   {
                                      name: "a",
                                      list: [
                                          1,
                                          2
                                      ]
                                  }

Two parse attempts are made:

1. Strict JSON.
2. Lenient (only if the body has a plausible unquoted "key:"): unquoted
   identifier keys are quoted, single-quoted strings become JSON strings
   and trailing commas are dropped. Keys that were unquoted in the source
   are written back unquoted.

Anything that fails both returns None so the caller can fall back to
ordinary line formatting.
"""

import json
import re
from typing import Any, List, Optional, Set, Tuple

from .log import LOG
from .quotes import literal_findEnd, quotes_escape


_UNQUOTED_KEY = re.compile(r"[{,]\s*[A-Za-z_$][\w$]*\s*:")
_LINK_ONLY = re.compile(r"\[\[[^\[\],]*\]\]")


class NumberLiteral(str):
    """A number as written in the source (1e5 stays 1e5, 1.50 stays 1.50)."""


def structured_loads(text: str) -> Any:
    """
    json.loads that keeps number tokens verbatim and rejects duplicate keys.

    Example:
        >>> structured_loads('{"a": 1.50}')
        {'a': '1.50'}
    """
    return json.loads(
        text,
        object_pairs_hook=_pairs_unique,
        parse_float=NumberLiteral,
        parse_int=NumberLiteral,
    )


def _pairs_unique(pairs: List[Tuple[str, Any]]) -> dict:
    """object_pairs_hook rejecting duplicate keys, which would lose data."""
    result = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"duplicate key {key!r}")
        result[key] = value
    return result


def _identifier_isStart(char: str) -> bool:
    return char.isalpha() or char in "_$"


def _identifier_isPart(char: str) -> bool:
    return char.isalnum() or char in "_$"


def lenient_normalize(text: str) -> Tuple[str, Set[str]]:
    """
    Rewrite a script-style object literal into strict JSON.

    Args:
        text: Trimmed passage body

    Returns:
        (json_text, bare_keys) where bare_keys holds every key that was
        written without quotes

    Raises:
        ValueError: On an unterminated string literal

    Example:
        >>> lenient_normalize("{a: 'x', b: [1,],}")
        ('{"a": "x", "b": [1]}', {'a', 'b'})
    """
    out: List[str] = []
    bare_keys: Set[str] = set()
    expecting_key = False
    pos = 0
    length = len(text)

    while pos < length:
        char = text[pos]

        if char in "\"'":
            end = literal_findEnd(text, pos)
            if end is None:
                raise ValueError(f"unterminated string at offset {pos}")
            if char == '"':
                out.append(text[pos:end + 1])
            else:
                out.append('"' + quotes_escape(text[pos + 1:end], '"') + '"')
            expecting_key = False
            pos = end + 1
            continue

        if char == ",":
            ahead = pos + 1
            while ahead < length and text[ahead].isspace():
                ahead += 1
            if ahead < length and text[ahead] in "}]":
                # Trailing comma
                pos += 1
                continue
            out.append(char)
            expecting_key = True
            pos += 1
            continue

        if char == "{":
            out.append(char)
            expecting_key = True
            pos += 1
            continue

        if char.isspace():
            out.append(char)
            pos += 1
            continue

        if expecting_key and _identifier_isStart(char):
            end = pos + 1
            while end < length and _identifier_isPart(text[end]):
                end += 1
            name = text[pos:end]
            ahead = end
            while ahead < length and text[ahead].isspace():
                ahead += 1
            if ahead < length and text[ahead] == ":":
                out.append(json.dumps(name))
                bare_keys.add(name)
            else:
                out.append(name)
            expecting_key = False
            pos = end
            continue

        out.append(char)
        expecting_key = False
        pos += 1

    return "".join(out), bare_keys


def key_render(key: str, bare_keys: Set[str]) -> str:
    if key in bare_keys:
        return key
    return json.dumps(key, ensure_ascii=False)


def value_render(value: Any, indent_unit: str, bare_keys: Set[str], depth: int = 0) -> str:
    """
    Serialize a parsed value with one member per line.

    Args:
        value: Parsed JSON value
        indent_unit: String for one level of indentation
        bare_keys: Keys rendered without quotes
        depth: Current nesting depth

    Returns:
        Serialized text (no trailing newline)
    """
    inner = indent_unit * (depth + 1)
    outer = indent_unit * depth

    if isinstance(value, dict):
        if not value:
            return "{}"
        members = [
            f"{inner}{key_render(key, bare_keys)}: {value_render(item, indent_unit, bare_keys, depth + 1)}"
            for key, item in value.items()
        ]
        return "{\n" + ",\n".join(members) + "\n" + outer + "}"

    if isinstance(value, list):
        if not value:
            return "[]"
        members = [
            f"{inner}{value_render(item, indent_unit, bare_keys, depth + 1)}" for item in value
        ]
        return "[\n" + ",\n".join(members) + "\n" + outer + "]"

    if isinstance(value, NumberLiteral):
        return str(value)

    return json.dumps(value, ensure_ascii=False)


def structuredPassage_format(body: str, indent_unit: str) -> Optional[str]:
    """
    Reformat a passage body holding a JSON-like value.

    Args:
        body: Raw passage body (lines between two headers, joined by "\\n")
        indent_unit: String for one level of indentation

    Returns:
        The canonical serialization, or None if the body is not a
        structured value (the caller formats it line by line instead)

    Example:
        >>> print(structuredPassage_format('{"a": [1, 2]}', "  "))
        {
          "a": [
            1,
            2
          ]
        }
    """
    trimmed = body.strip()
    if not trimmed or trimmed[0] not in "{[":
        return None
    if _LINK_ONLY.fullmatch(trimmed):
        return None

    try:
        value = structured_loads(trimmed)
        return value_render(value, indent_unit, set())
    except ValueError as e:
        LOG(f"Passage body is not strict JSON: {e}", level=3)

    if not _UNQUOTED_KEY.search(trimmed):
        return None

    try:
        normalized, bare_keys = lenient_normalize(trimmed)
        value = structured_loads(normalized)
    except ValueError as e:
        LOG(f"Passage body is not a script object literal: {e}", level=3)
        return None

    return value_render(value, indent_unit, bare_keys)
