"""
tweeformat - Canonical formatter for SugarCube/Twee documents

Reformatting engine: block macro detection, line tokenization, quote
normalization, structured passage reflow and source-to-output line maps.
"""

__version__ = "1.0.0"

from .formatter import Formatter, document_format
from .edits import edits_compute, edits_apply
from .tweeconfig import tweeConfig_load, tweeConfig_parse
from .log import LOG, state_connectToLogger

__all__ = [
    "Formatter",
    "document_format",
    "edits_compute",
    "edits_apply",
    "tweeConfig_load",
    "tweeConfig_parse",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
