"""Simple XML Tree.

A small XML parser that turns well-formed-ish documents into a tree of
leaves and subtrees using lexical tag scanning and open-tag counting, with
lookup, merge, search and serialization over the result.

API levels:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), save()
- Level 2: Configured parser - XmlTreeParser class with ParserConfig
- Level 3: Building blocks - XmlTreeBuilder, get_parallel_roots(), is_tree()
"""

__version__ = "0.1.0"
__author__ = "Simple XML Tree Team"

# Level 1 and 2: parsing API
from .api import XmlTreeParser, parse, parse_file, parse_string, save

# Configuration classes for advanced usage
from .shared.config import ParserConfig, SerializationConfig, TreeConfig

# Failures reported by the parser
from .shared.errors import (
    CannotIdentifyRoot,
    DepthLimitExceeded,
    FailureKind,
    IncompleteTree,
    MalformedAttributes,
    UnbalancedCloseTag,
    UnseparatedChildren,
    XmlError,
)

# Core result objects and building blocks
from .tokenization import strip_formatting
from .tree import (
    NodeKind,
    ParseResult,
    SimpleXmlTag,
    XmlTree,
    XmlTreeBuilder,
    get_parallel_roots,
    is_tree,
    merge,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",
    "save",

    # Level 2: Configured parser
    "XmlTreeParser",
    "ParserConfig",
    "SerializationConfig",
    "TreeConfig",

    # Level 3: Building blocks
    "XmlTreeBuilder",
    "get_parallel_roots",
    "is_tree",
    "merge",
    "strip_formatting",

    # Result objects and data structures
    "NodeKind",
    "ParseResult",
    "SimpleXmlTag",
    "XmlTree",

    # Failures
    "CannotIdentifyRoot",
    "DepthLimitExceeded",
    "FailureKind",
    "IncompleteTree",
    "MalformedAttributes",
    "UnbalancedCloseTag",
    "UnseparatedChildren",
    "XmlError",
]
