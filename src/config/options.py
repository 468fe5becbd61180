"""
Formatter option schema

FormatterOptions is the single source of truth for the formatter's
configuration surface. Every field carries its default, and both the
editor's camelCase keys (quoteStyle) and the Python names (quote_style)
are accepted on input.

Overrides are merged generically over the schema defaults, so adding an
option only means adding a field here.
"""

from typing import Any, FrozenSet, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


QuoteStyle = Literal["double", "single", "preserve"]
EmptyLines = Union[Literal[0, 1, 2], Literal["preserve"]]
IndentationStyle = Literal["spaces", "tabs"]


class FormatterOptions(BaseModel):
    """
    Immutable options for one formatting run.

    Examples:
        >>> FormatterOptions().quote_style
        'double'
        >>> FormatterOptions.model_validate({"quoteStyle": "single"}).quote_style
        'single'
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    strip_single_word_quotes: bool = Field(
        default=True,
        description="Remove quotes from single-word macro arguments such as passage names",
    )

    quote_style: QuoteStyle = Field(
        default="double",
        description="Delimiter used for quoted macro arguments",
    )

    empty_lines_before_passages: EmptyLines = Field(
        default=2,
        description="Blank lines enforced before every passage header except the first",
    )

    indentation_enabled: bool = Field(
        default=True,
        description="Re-indent lines according to macro block depth",
    )

    indentation_style: IndentationStyle = Field(
        default="spaces",
        description="Indent with spaces or tabs",
    )

    indentation_size: int = Field(
        default=4,
        ge=1,
        description="Number of spaces per indent level (ignored for tabs)",
    )

    format_json_passages: bool = Field(
        default=True,
        description="Reflow passages whose body is a JSON object or array literal",
    )

    custom_mid_block_macros: FrozenSet[str] = Field(
        default=frozenset(),
        description="Extra macro names rendered at the parent level inside a block (like <<else>>)",
    )

    @property
    def indent_unit(self) -> str:
        """One level of indentation as a string."""
        if self.indentation_style == "tabs":
            return "\t"
        return " " * self.indentation_size


def options_merge(
    overrides: Optional[Union[FormatterOptions, Mapping[str, Any]]] = None
) -> FormatterOptions:
    """
    Merge a (possibly partial) set of overrides over the schema defaults.

    Args:
        overrides: None, an existing FormatterOptions, or a mapping keyed by
                   either camelCase editor keys or snake_case field names.
                   Keys with a value of None and unknown keys are ignored.

    Returns:
        A fully populated FormatterOptions

    Example:
        >>> options_merge({"emptyLinesBeforePassages": 1}).empty_lines_before_passages
        1
    """
    if overrides is None:
        return FormatterOptions()
    if isinstance(overrides, FormatterOptions):
        return overrides

    merged = FormatterOptions().model_dump()
    aliases = {
        field.alias: name for name, field in FormatterOptions.model_fields.items()
    }
    for key, value in overrides.items():
        if value is None:
            continue
        name = aliases.get(key, key)
        if name in merged:
            merged[name] = value

    return FormatterOptions.model_validate(merged)
