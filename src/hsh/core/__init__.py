"""Core classification and dispatch for hsh."""

from .aliases import AliasTable
from .dispatch import Dispatcher
from .lexer import classify, tokenize
from .registry import CommandRegistry
from .session import SessionState, ShellHistory

__all__ = [
    "AliasTable",
    "CommandRegistry",
    "Dispatcher",
    "SessionState",
    "ShellHistory",
    "classify",
    "tokenize",
]
