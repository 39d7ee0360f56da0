"""
Models package for lineview

Contains data structures and type definitions for the interpreter and the CLI pipeline.
"""

from .state import ProgramState, pipeline
from .directives import Directive, DirectiveKind, ImportKind, ImportSpec
from .line import CommandTemplate, Line, LineKind, ResolvedCommand

__all__ = [
    "ProgramState",
    "pipeline",
    "Directive",
    "DirectiveKind",
    "ImportKind",
    "ImportSpec",
    "CommandTemplate",
    "Line",
    "LineKind",
    "ResolvedCommand",
]
