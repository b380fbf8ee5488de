"""CLI module - Command-line interface components."""

from zklock.cli.main import main, run
from zklock.cli.parser import parse_arguments

__all__ = [
    "main",
    "parse_arguments",
    "run",
]
