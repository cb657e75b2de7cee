"""
Script parsing and command dispatch.
"""

from .tokenizer import tokenize, iter_commands, trim_comments, split_command
from .registry import CommandRegistry, Handler

__all__ = [
    "tokenize",
    "iter_commands",
    "trim_comments",
    "split_command",
    "CommandRegistry",
    "Handler",
]
