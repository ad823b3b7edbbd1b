"""Tree construction and tree operations for simple XML tree parsing.

Key Components:
    XmlTreeBuilder: Recursive construction of trees from document strings
    XmlTree: Tag with attributes, child leaves and child trees
    SimpleXmlTag: Tag with attributes and a value but no children
    ParseResult: Tagged outcome holding a tree or a failure
    get_parallel_roots: Splits back-to-back sibling fragments
    is_tree: Fast well-formedness predicate
"""

from .builder import ParseResult, XmlTreeBuilder, is_leaf_fragment
from .node import NodeKind, SimpleXmlTag, XmlTree, merge
from .splitter import (
    OpenTagCounter,
    check_tree,
    get_parallel_roots,
    is_tree,
)

__all__ = [
    "NodeKind",
    "OpenTagCounter",
    "ParseResult",
    "SimpleXmlTag",
    "XmlTree",
    "XmlTreeBuilder",
    "check_tree",
    "get_parallel_roots",
    "is_leaf_fragment",
    "is_tree",
    "merge",
]
