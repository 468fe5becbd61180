"""
Minimal line edits

An editor applying a formatting result should only touch the lines that
changed, so cursor positions, folding and undo history elsewhere survive.
edits_compute() compares each source line with the output lines it maps to
and produces one LineEdit per difference.

Replacing a non-final line covers its trailing line break too; the new
text then carries a line break of its own unless the line vanished.
"""

from typing import List

from ..models.result import FormatResult, LineEdit
from .formatter import text_normalizeLineBreaks


def edits_compute(source: str, result: FormatResult, line_break: str = "\n") -> List[LineEdit]:
    """
    List the line replacements that turn ``source`` into the result.

    Args:
        source: Document text that was formatted
        result: FormatResult produced for that text
        line_break: Line break used to join multi-line replacements

    Returns:
        Edits in ascending line order; empty if nothing changed

    Example:
        >>> from tweeformat.lib.formatter import document_format
        >>> text = ":: Start\\n<<if $x>>hi<</if>>"
        >>> [e.line for e in edits_compute(text, document_format(text))]
        [1]
    """
    lines = text_normalizeLineBreaks(source).split("\n")
    last = len(lines) - 1
    edits: List[LineEdit] = []

    # Source lines after the last one with output all vanish, and that
    # line's own break goes with them
    final = max(
        (index for index in range(len(lines)) if result.line_map.get(index)),
        default=-1,
    )

    for index, original in enumerate(lines):
        output = result.line_map.get(index, [])
        replacement = line_break.join(output)
        if index == final and final < last:
            edits.append(LineEdit(line=index, new_text=replacement, include_break=True))
            continue
        # A blank line mapped to nothing still differs: its break must go
        if output == [original]:
            continue
        if index == last:
            edits.append(LineEdit(line=index, new_text=replacement, include_break=False))
        else:
            new_text = replacement + line_break if output else ""
            edits.append(LineEdit(line=index, new_text=new_text, include_break=True))

    return edits


def edits_apply(source: str, edits: List[LineEdit]) -> str:
    """
    Apply LineEdits to ``source`` the way an editor would.

    Args:
        source: Original document text
        edits: Edits from edits_compute()

    Returns:
        The edited document
    """
    lines = text_normalizeLineBreaks(source).split("\n")
    last = len(lines) - 1
    by_line = {edit.line: edit for edit in edits}
    pieces: List[str] = []

    for index, original in enumerate(lines):
        edit = by_line.get(index)
        if edit is None:
            pieces.append(original if index == last else original + "\n")
        else:
            pieces.append(edit.new_text)

    return "".join(pieces)
