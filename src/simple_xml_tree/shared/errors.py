"""Failure types raised while lexing, splitting and building XML trees.

Every failure derives from :class:`XmlError` and reports a :class:`FailureKind`
so that result objects can carry the kind without holding on to exception
classes.
"""

from enum import Enum, auto
from typing import List, Optional


class FailureKind(Enum):
    """Distinct kinds of parse failure."""

    MALFORMED_ATTRIBUTES = auto()   # Quoted attribute value never closes
    UNBALANCED_CLOSE_TAG = auto()   # Closing tag without a tracked opening tag
    INCOMPLETE_TREE = auto()        # Input ended with tags still open
    CANNOT_IDENTIFY_ROOT = auto()   # No root tag / closing tag pair found
    UNSEPARATED_CHILDREN = auto()   # Several top-level siblings where one root was expected
    DEPTH_LIMIT_EXCEEDED = auto()   # Nesting deeper than the configured maximum


class XmlError(Exception):
    """Base class for all parse failures."""

    kind: Optional[FailureKind] = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedAttributes(XmlError):
    """A quoted attribute token never closes its quote."""

    kind = FailureKind.MALFORMED_ATTRIBUTES


class UnbalancedCloseTag(XmlError):
    """A closing tag appeared for a tag name that was never opened."""

    kind = FailureKind.UNBALANCED_CLOSE_TAG

    def __init__(self, tag_name: str) -> None:
        super().__init__(f"Closing tag </{tag_name}> has no matching opening tag")
        self.tag_name = tag_name


class IncompleteTree(XmlError):
    """End of input reached while at least one tag was still open."""

    kind = FailureKind.INCOMPLETE_TREE


class CannotIdentifyRoot(XmlError):
    """No well-formed root tag and closing tag pair could be located."""

    kind = FailureKind.CANNOT_IDENTIFY_ROOT


class UnseparatedChildren(XmlError):
    """Several top-level siblings were found where a single root was expected.

    The separated fragments are kept on the exception so a caller can parse
    them one by one or recombine them.
    """

    kind = FailureKind.UNSEPARATED_CHILDREN

    def __init__(self, message: str, fragments: List[str]) -> None:
        super().__init__(message)
        self.fragments = list(fragments)


class DepthLimitExceeded(XmlError):
    """Document nesting went past the configured maximum depth."""

    kind = FailureKind.DEPTH_LIMIT_EXCEEDED

    def __init__(self, max_depth: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"Document nesting exceeds maximum depth of {max_depth}")
        self.max_depth = max_depth
