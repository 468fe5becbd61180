"""
tweeformat - Canonical formatter for SugarCube/Twee documents

Reindents macro blocks, normalizes quoted macro arguments, reflows
JSON-like passages and reports which source lines changed so editors can
apply minimal edits.
"""

__version__ = "1.0.0"

from .config import FormatterOptions, options_merge
from .lib import Formatter, document_format, edits_compute, LOG, state_connectToLogger

__all__ = [
    "Formatter",
    "FormatterOptions",
    "options_merge",
    "document_format",
    "edits_compute",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
