#!/usr/bin/env python3
"""
tweeformat - Canonical formatter for SugarCube/Twee documents

Formats every .tw/.twee document under an input directory and writes the
result to the same relative path under an output directory. Editor
integrations call tweeformat.document_format() directly; this command is
the batch equivalent of "format all files in the workspace".

Philosophy:
    - Author intent first: quoting style, data passages and spacing
      between passages are normalized, never rewritten semantically
    - Never fail on markup: unbalanced macros and malformed data degrade
      to plain formatting
    - Idempotent: formatting formatted output changes nothing

Usage:
    tweeformat inputdir/ outputdir/

    twee-config files (*.twee-config.yml/.json) in inputdir contribute
    custom mid-block macros.

Examples:
    # Format a story with the defaults
    tweeformat story/ formatted/

    # Tabs, single quotes, one blank line between passages, show diffs
    tweeformat story/ formatted/ --indentationStyle tabs --quoteStyle single \\
        --emptyLinesBeforePassages 1 --diff

    # Verbose output
    tweeformat story/ formatted/ -vv
"""

import sys
import difflib
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from pydantic import ValidationError
from pygments import highlight
from pygments.lexers import DiffLexer
from pygments.formatters import TerminalFormatter

from . import __version__
from .config import appsettings, options_merge
from .lib import Formatter, tweeConfig_load, LOG, state_connectToLogger
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
  _                      __                            _
 | |___      _____  ___ / _| ___  _ __ _ __ ___   __ _| |_
 | __\ \ /\ / / _ \/ _ \ |_ / _ \| '__| '_ ` _ \ / _` | __|
 | |_ \ V  V /  __/  __/  _| (_) | |  | | | | | | (_| | |_
  \__| \_/\_/ \___|\___|_|  \___/|_|  |_| |_| |_|\__,_|\__|

  Canonical formatter for SugarCube/Twee documents
"""

# Define CLI arguments
parser = ArgumentParser(
    description="tweeformat - Canonical formatter for SugarCube/Twee documents",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--pattern",
    default=None,
    type=str,
    help="Glob (relative to inputdir) selecting documents; defaults to TWEEFORMAT_SOURCE_GLOB",
)

parser.add_argument(
    "--quoteStyle",
    default=None,
    choices=["double", "single", "preserve"],
    help="Delimiter for quoted macro arguments",
)

parser.add_argument(
    "--emptyLinesBeforePassages",
    default=None,
    choices=["0", "1", "2", "preserve"],
    help="Blank lines enforced before each passage header except the first",
)

parser.add_argument(
    "--indentationStyle",
    default=None,
    choices=["spaces", "tabs"],
    help="Indent with spaces or tabs",
)

parser.add_argument(
    "--indentationSize",
    default=None,
    type=int,
    help="Spaces per indent level",
)

parser.add_argument(
    "--noIndentation",
    action="store_true",
    help="Keep existing indentation instead of re-indenting by macro depth",
)

parser.add_argument(
    "--keepSingleWordQuotes",
    action="store_true",
    help="Do not strip quotes from single-word macro arguments",
)

parser.add_argument(
    "--noJsonPassages",
    action="store_true",
    help="Do not reflow JSON-like passage bodies",
)

parser.add_argument(
    "--diff",
    action="store_true",
    help="Print a unified diff for every changed document",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the input directory and collect the documents to format.

    Returns:
        ProgramState with added fields:
            - sourceFiles: Documents found under inputdir
            - envOK: True if environment is valid

    Exits:
        1 if the input directory does not exist
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if state.inputdir is None or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    pattern = state.pattern or appsettings.source_glob
    state.sourceFiles = sorted(
        path
        for path in state.inputdir.glob(pattern)
        if path.is_file() and appsettings.source_accepts(path.name)
    )
    LOG(f"Found {len(state.sourceFiles)} documents matching {pattern}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def options_resolve(inputstate: ProgramState) -> ProgramState:
    """
    Build the FormatterOptions for this run.

    CLI overrides are merged over the option defaults; twee-config files
    in inputdir supply custom mid-block macros.

    Returns:
        ProgramState with added field:
            - formatterOptions: Resolved FormatterOptions

    Exits:
        1 if the overrides do not validate
    """
    state = inputstate.copy()

    empty_lines = state.emptyLinesBeforePassages
    if empty_lines is not None and empty_lines.isdigit():
        empty_lines = int(empty_lines)

    overrides = {
        "quoteStyle": state.quoteStyle,
        "emptyLinesBeforePassages": empty_lines,
        "indentationStyle": state.indentationStyle,
        "indentationSize": state.indentationSize,
        "indentationEnabled": False if state.noIndentation else None,
        "stripSingleWordQuotes": False if state.keepSingleWordQuotes else None,
        "formatJsonPassages": False if state.noJsonPassages else None,
    }

    tweeconfig = tweeConfig_load(state.inputdir)
    if tweeconfig.custom_mid_block_macros:
        overrides["customMidBlockMacros"] = tweeconfig.custom_mid_block_macros
        LOG(f"Custom mid-block macros: {', '.join(tweeconfig.custom_mid_block_macros)}", level=2)

    try:
        state.formatterOptions = options_merge(overrides)
    except ValidationError as e:
        print(f"Error: Invalid formatter options: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Indent unit: {state.formatterOptions.indent_unit!r}", level=3)
    return state


def diff_show(name: str, before: str, after: str) -> None:
    """
    Print a highlighted unified diff of one document.
    """
    diff = "".join(
        difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=f"a/{name}",
            tofile=f"b/{name}",
        )
    )
    if sys.stdout.isatty():
        diff = highlight(diff, DiffLexer(), TerminalFormatter())
    print(diff, end="" if diff.endswith("\n") else "\n")


def documents_format(inputstate: ProgramState) -> ProgramState:
    """
    Format every source document and write it below outputdir.

    Unreadable documents are reported and skipped; the rest of the run
    continues.

    Returns:
        ProgramState with added field:
            - formatReport: {"formatted": [...], "unchanged": [...], "failed": [...]}
    """
    state = inputstate.copy()
    report = {"formatted": [], "unchanged": [], "failed": []}

    LOG("Formatting documents...", level=1)

    for source_file in state.sourceFiles:
        relative = source_file.relative_to(state.inputdir)
        try:
            text = source_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading {relative}: {e}", file=sys.stderr)
            report["failed"].append(str(relative))
            continue

        debug = appsettings.debug_mode or state.verbosity >= 3
        result = Formatter(text, state.formatterOptions, debug=debug).format()
        formatted = result.formatted_text.replace("\n", appsettings.line_break)

        target = state.outputdir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(formatted, encoding="utf-8")

        if formatted == text:
            report["unchanged"].append(str(relative))
            LOG(f"  unchanged  {relative}", level=2)
        else:
            report["formatted"].append(str(relative))
            LOG(f"  formatted  {relative}", level=2)
            if state.diff:
                diff_show(str(relative), text, formatted)

    state.formatReport = report
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Summarize the run for the user.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if any document could not be read
    """
    state: ProgramState = inputstate.copy()
    if state.formatReport is None:
        print("Error: Formatting did not run", file=sys.stderr)
        sys.exit(1)

    report = state.formatReport
    LOG(
        f"Formatting complete: {len(report['formatted'])} files formatted, "
        f"{len(report['unchanged'])} unchanged.",
        level=1,
    )
    if report["failed"]:
        print(f"Error: {len(report['failed'])} documents could not be read", file=sys.stderr)
        sys.exit(1)
    return state


@chris_plugin(
    parser=parser,
    title="tweeformat - Canonical formatter for SugarCube/Twee documents",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - format all Twee documents in inputdir into outputdir.

    Orchestrates the pipeline:
        1. env_check: Validate paths and collect documents
        2. options_resolve: Merge CLI overrides and twee-config macros
        3. documents_format: Format and write every document
        4. results_report: Summarize

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, options_resolve, documents_format, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
