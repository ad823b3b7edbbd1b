"""Public parsing API for simple XML tree documents.

Provides module-level parsing functions, the reusable XmlTreeParser class and
the save helper that persists serialized trees.
"""

from .parser import (
    XmlTreeParser,
    parse,
    parse_file,
    parse_string,
    save,
)

__all__ = [
    "XmlTreeParser",
    "parse",
    "parse_file",
    "parse_string",
    "save",
]
