"""
Formatter result models

Structures returned by the formatter and consumed by the editor-facing
edit computation.
"""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class FormatResult:
    """
    Result of formatting one document

    Attributes:
        formatted_text: Complete formatted document (LF line breaks)
        line_map: For every zero-based source line index, the output lines
                  it was rendered into. An entry may be empty (the line
                  vanished) or hold several lines (the line was split).

    Invariant:
        "\\n".join(result.lines) == result.formatted_text

    Example:
        Source "<<if $x>>foo<</if>>" produces
        FormatResult(
            formatted_text="<<if $x>>\\n    foo\\n<</if>>",
            line_map={0: ["<<if $x>>", "    foo", "<</if>>"]}
        )
    """
    formatted_text: str
    line_map: Dict[int, List[str]]

    @property
    def lines(self) -> List[str]:
        """All output lines, in source order."""
        return [line for index in sorted(self.line_map) for line in self.line_map[index]]

    @property
    def line_count(self) -> int:
        """Number of source lines covered by the map."""
        return len(self.line_map)


@dataclass(frozen=True)
class LineEdit:
    """
    Replacement of one source line

    Attributes:
        line: Zero-based source line index
        new_text: Replacement text (may span several lines or be empty)
        include_break: Whether the replaced range includes the line's
                       trailing line break (False only for the last line)
    """
    line: int
    new_text: str
    include_break: bool


@dataclass
class TweeConfigResult:
    """
    Macro information extracted from twee-config files

    Attributes:
        custom_mid_block_macros: Children of container macros, in first-seen
                                 order without duplicates. These render at
                                 the parent level like <<else>>.

    Example:
        A twee-config declaring
            menu: {container: true, children: [option, divider]}
        yields TweeConfigResult(custom_mid_block_macros=["option", "divider"])
    """
    custom_mid_block_macros: List[str] = field(default_factory=list)

    def merge(self, other: "TweeConfigResult") -> None:
        """Append macros from ``other`` that are not already known."""
        for name in other.custom_mid_block_macros:
            if name not in self.custom_mid_block_macros:
                self.custom_mid_block_macros.append(name)
