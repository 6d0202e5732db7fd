"""Public parsing functions."""

from .parser import load, parse, parse_file, parse_string, to_string

__all__ = [
    "load",
    "parse",
    "parse_file",
    "parse_string",
    "to_string",
]
