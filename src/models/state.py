"""
Program state models and pipeline helper

Defines ProgramState for the CLI's functional pipeline, the pipeline()
helper for composing its stages, and FormatState, the per-document state
carried by the formatter's line loop.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, pattern, formatter overrides
        - env_check: sourceFiles, envOK
        - options_resolve: formatterOptions
        - documents_format: formatReport
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory searched for .tw/.twee documents
        outputdir: Directory receiving formatted documents
        verbosity: Logging verbosity level (1-3)
        pattern: Optional glob overriding the settings' source_glob
        quoteStyle .. keepSingleWordQuotes: CLI formatter overrides
        diff: Print a highlighted unified diff for changed documents
        envOK: Environment validation passed
        sourceFiles: Documents found under inputdir
        formatterOptions: Resolved FormatterOptions for the run
        formatReport: Per-run summary (formatted, unchanged, failed lists)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    pattern: Optional[str] = field(default=None)
    quoteStyle: Optional[str] = field(default=None)
    emptyLinesBeforePassages: Optional[str] = field(default=None)
    indentationStyle: Optional[str] = field(default=None)
    indentationSize: Optional[int] = field(default=None)
    noIndentation: bool = field(default=False)
    noJsonPassages: bool = field(default=False)
    keepSingleWordQuotes: bool = field(default=False)
    diff: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    sourceFiles: List[Path] = field(default_factory=list)
    formatterOptions: Optional[Any] = field(default=None)  # FormatterOptions at runtime
    formatReport: Optional[Dict[str, List[str]]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments
            inputdir: Directory containing source documents
            outputdir: Directory for formatted output

        Returns:
            ProgramState instance with all known CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Unknown namespace entries (e.g. added by the plugin wrapper) are dropped
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            options_resolve,
            documents_format,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)


@dataclass
class FormatState:
    """
    Mutable state of a single formatting run

    Created fresh for every document and discarded once the FormatResult
    has been built.

    Attributes:
        indent_level: Current macro block depth (never negative)
        seen_first_passage: A passage header (::) has been emitted
        line_map: Output lines produced per source line index
    """
    indent_level: int = 0
    seen_first_passage: bool = False
    line_map: Dict[int, List[str]] = field(default_factory=dict)

    def indent_increase(self) -> None:
        self.indent_level += 1

    def indent_decrease(self) -> None:
        """Step out of a block; unmatched closers clamp at zero."""
        self.indent_level = max(0, self.indent_level - 1)
