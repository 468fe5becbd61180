"""
Formatter for SugarCube/Twee documents

Turns a Twee document into its canonical form and records, for every
source line, the output lines it became. The editor integration relies on
that map to replace only the lines that actually changed.

The formatter operates in two phases:
1. Classification: collect every block macro name (anything closed with
   <</name>> somewhere in the document)
2. Line pass: walk the source top to bottom, tracking indent depth and
   passage boundaries, splitting each line into tokens and rendering one
   output line per token

Key features:
- Block macros indent their body; mid-block macros (<<else>>, <<case>>, ...)
  sit at the level of their parent block
- Unmatched closing tags clamp the depth at zero
- Blank lines before passage headers are normalized to a fixed count
- JSON-like passage bodies are reflowed, with line-by-line fallback

Example:
    >>> result = Formatter("<<if $x>>\\nfoo\\n<<else>>\\nbar\\n<</if>>").format()
    >>> print(result.formatted_text)
    <<if $x>>
        foo
    <<else>>
        bar
    <</if>>
"""

from typing import Any, FrozenSet, List, Mapping, Optional, Union

from ..config.options import FormatterOptions, options_merge
from ..models.result import FormatResult
from ..models.state import FormatState
from ..models.tokens import Token, TokenKind
from .log import LOG
from .structured import structuredPassage_format
from .tokenizer import blockMacros_detect, line_tokenize


PASSAGE_MARKER = "::"

# Macros rendered at their parent block's level, like <<else>>
MID_BLOCK_MACROS: FrozenSet[str] = frozenset({
    "else",
    "elseif",
    "case",
    "default",
    "stop",
    "next",
    "option",
    "optionsfrom",
    "track",
})


def text_normalizeLineBreaks(text: str) -> str:
    """
    Convert CRLF and lone CR line breaks to LF.
    """
    return text.replace("\r\n", "\n").replace("\r", "\n")


def line_isHeader(trimmed: str) -> bool:
    return trimmed.startswith(PASSAGE_MARKER)


class Formatter:
    """
    Formatter for one SugarCube/Twee document

    Handles:
    - Indentation by macro block depth
    - Quote normalization of macro arguments (via the tokenizer)
    - Blank-line normalization before passage headers
    - Structured (JSON-like) passage bodies
    - Source line → output lines mapping
    """

    def __init__(
        self,
        source: str,
        options: Optional[Union[FormatterOptions, Mapping[str, Any]]] = None,
        debug: bool = False,
    ):
        """
        Initialize formatter with source text

        Args:
            source: Raw document text (any line break style)
            options: FormatterOptions, a partial mapping of overrides, or
                     None for the defaults
            debug: Log each fallback decision (structured bodies, tags)

        Attributes:
            lines: Source lines after line-break normalization
            options: Resolved FormatterOptions
            block_macros: Macro names with a closing tag in the document
            mid_block_macros: Built-in and custom mid-block macro names
            indent_unit: String for one indent level
            state: FormatState of the current run
        """
        self.source = text_normalizeLineBreaks(source)
        self.lines: List[str] = self.source.split("\n")
        self.options = options_merge(options)
        self.debug = debug
        self.block_macros: FrozenSet[str] = frozenset()
        self.mid_block_macros = MID_BLOCK_MACROS | self.options.custom_mid_block_macros
        self.indent_unit = self.options.indent_unit
        self.state = FormatState()

    def format(self) -> FormatResult:
        """
        Format the document

        Returns:
            FormatResult holding the formatted text and the line map. Every
            source line index has an entry, and joining all entries in
            order with "\\n" reproduces formatted_text.
        """
        self.state = FormatState(line_map={index: [] for index in range(len(self.lines))})
        self.block_macros = blockMacros_detect(self.source)
        if self.debug:
            LOG(f"Block macros: {sorted(self.block_macros)}", level=3)

        index = 0
        while index < len(self.lines):
            index = self.line_process(index)

        output = [line for i in range(len(self.lines)) for line in self.state.line_map[i]]
        return FormatResult(formatted_text="\n".join(output), line_map=self.state.line_map)

    def line_process(self, index: int) -> int:
        """
        Process the source line at ``index``.

        Returns:
            Index of the next line to process (a reflowed structured
            passage consumes several lines at once)
        """
        trimmed = self.lines[index].strip()

        if not trimmed:
            self.blank_process(index)
            return index + 1

        if line_isHeader(trimmed):
            return self.header_process(index, trimmed)

        self.tokens_render(index, line_tokenize(trimmed, self.options))
        return index + 1

    def blank_process(self, index: int) -> None:
        """
        Blank lines before the first passage header vanish; every later
        blank line stays as one.
        """
        if not self.state.seen_first_passage:
            return
        self.state.line_map[index].append("")

    def header_process(self, index: int, trimmed: str) -> int:
        """
        Emit a passage header and, if possible, its structured body.

        Returns:
            Index of the next line to process
        """
        is_first = not self.state.seen_first_passage
        self.state.seen_first_passage = True

        target = self.options.empty_lines_before_passages
        if not is_first and target != "preserve":
            self.blankRun_adjust(index, target)

        self.state.line_map[index].append(trimmed)
        self.state.indent_level = 0

        if self.options.format_json_passages:
            return self.structuredBody_process(index + 1)
        return index + 1

    def blankRun_adjust(self, header_index: int, target: int) -> None:
        """
        Make exactly ``target`` blank output lines precede a header.

        Walks backwards over the entries of the source lines before
        ``header_index``, counting trailing blank output lines. Missing
        blanks are appended to the nearest earlier source line that has
        output; surplus blanks are popped from the end, so a source line
        whose output was only blanks ends up mapped to nothing.
        """
        line_map = self.state.line_map

        trailing = 0
        nearest: Optional[int] = None
        for j in range(header_index - 1, -1, -1):
            entry = line_map[j]
            if not entry:
                continue
            if nearest is None:
                nearest = j
            blanks = 0
            for line in reversed(entry):
                if line != "":
                    break
                blanks += 1
            trailing += blanks
            if blanks < len(entry):
                break

        if trailing < target:
            if nearest is None:
                return
            line_map[nearest].extend([""] * (target - trailing))
            return

        excess = trailing - target
        j = header_index - 1
        while excess > 0 and j >= 0:
            entry = line_map[j]
            if entry and entry[-1] == "":
                entry.pop()
                excess -= 1
            elif not entry:
                j -= 1
            else:
                break

    def structuredBody_process(self, start: int) -> int:
        """
        Try to reflow the passage body beginning at ``start``.

        The body runs to the next header (or the end of the document);
        trailing blank lines are left for normal processing so that the
        spacing before the next header is handled the usual way.

        Returns:
            ``start`` if the body is not structured, otherwise the index
            just past the reflowed span
        """
        end = start
        while end < len(self.lines) and not line_isHeader(self.lines[end].strip()):
            end += 1
        while end > start and not self.lines[end - 1].strip():
            end -= 1
        if end == start:
            return start

        body = "\n".join(self.lines[start:end])
        formatted = structuredPassage_format(body, self.indent_unit)
        if formatted is None:
            if self.debug:
                LOG(f"Line {start + 1}: passage body kept as markup", level=3)
            return start

        self.span_assign(start, end, formatted.split("\n"))
        return end

    def span_assign(self, start: int, end: int, output: List[str]) -> None:
        """
        Distribute reflowed output over the source lines [start, end).

        Output line k goes to source line start + k. Surplus output joins
        the last source line; source lines with no output line left map
        to nothing.
        """
        span = end - start
        line_map = self.state.line_map
        if len(output) >= span:
            for offset in range(span - 1):
                line_map[start + offset] = [output[offset]]
            line_map[end - 1] = output[span - 1:]
            return

        for offset in range(span):
            line_map[start + offset] = [output[offset]] if offset < len(output) else []

    def tokens_render(self, index: int, tokens: List[Token]) -> None:
        """
        Render one output line per token, updating the indent depth.
        """
        entry = self.state.line_map[index]
        original_indent = self.lines[index][: len(self.lines[index]) - len(self.lines[index].lstrip())]

        for token in tokens:
            level = self.level_forToken(token)
            if self.options.indentation_enabled:
                prefix = self.indent_unit * level
            else:
                prefix = original_indent
            entry.append(prefix + token.value)

    def level_forToken(self, token: Token) -> int:
        """
        Indent level for ``token``; updates the stored depth as needed.

        - closing block macro: step out first, render at the new level
        - opening block macro: render at the current level, then step in
        - opening mid-block macro inside a block: render one level up
        - anything else: current level
        """
        state = self.state
        is_block = token.macro_name in self.block_macros

        if token.kind is TokenKind.CLOSING_MACRO:
            if is_block:
                state.indent_decrease()
            return state.indent_level

        if token.kind is TokenKind.OPENING_MACRO:
            if is_block:
                level = state.indent_level
                state.indent_increase()
                return level
            if token.macro_name in self.mid_block_macros and state.indent_level > 0:
                return state.indent_level - 1

        return state.indent_level


def document_format(
    text: str,
    options: Optional[Union[FormatterOptions, Mapping[str, Any]]] = None,
) -> FormatResult:
    """
    Format a document; the functional entry point used by integrations.

    Args:
        text: Raw document text
        options: FormatterOptions or a partial mapping of overrides

    Returns:
        FormatResult with formatted_text and line_map
    """
    return Formatter(text, options).format()
