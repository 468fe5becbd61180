"""
Models package for tweeformat

Contains data structures and type definitions for the formatting pipeline.
"""

from .state import ProgramState, FormatState, pipeline
from .tokens import Token, TokenKind
from .result import FormatResult, LineEdit, TweeConfigResult

__all__ = [
    "ProgramState",
    "FormatState",
    "pipeline",
    "Token",
    "TokenKind",
    "FormatResult",
    "LineEdit",
    "TweeConfigResult",
]
