"""Tag scanning for simple XML tree parsing.

The scanner walks a document and yields one :class:`TagToken` per ``<...>``
span, leaving the text between tags untouched. Structural decisions (sibling
splitting, well-formedness) are made by the tree layer on top of this token
stream; the regular expressions here are only used to recognise complete,
properly quoted opening tags.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from simple_xml_tree.shared.errors import IncompleteTree

logger = logging.getLogger(__name__)

NAME_PATTERN = r"[a-zA-Z_][a-zA-Z_\d]*"
ATTRIBUTE_PATTERN = r"""\s+[a-zA-Z_][\w.:-]*=(?:"[^"]*"|'[^']*')"""

OPENING_TAG = re.compile(
    rf"<(?P<name>{NAME_PATTERN})(?P<attributes>(?:{ATTRIBUTE_PATTERN})*)\s*/?>"
)
SELF_CLOSING_TAG = re.compile(rf"<(?P<name>{NAME_PATTERN})(?:{ATTRIBUTE_PATTERN})*\s*/>")
TREE_PATTERN = re.compile(
    rf"<(?P<root>{NAME_PATTERN})(?:{ATTRIBUTE_PATTERN})*\s*>.*</(?P=root)\s*>",
    re.DOTALL,
)
HEADER_PATTERN = re.compile(r"<\?[^?]*\?>", re.DOTALL)

_FORMATTING = str.maketrans("", "", "\r\n\t")
_QUOTES = "\"'"


class TagKind(Enum):
    """Kinds of tag recognised by the scanner."""

    OPENING = auto()        # <name ...>
    CLOSING = auto()        # </name>
    SELF_CLOSING = auto()   # <name .../>


@dataclass(frozen=True)
class TagToken:
    """A single ``<...>`` span found in a document.

    ``body`` is the text between the angle brackets without the leading slash
    of a closing tag or the trailing slash of a self-closing tag.
    ``start`` and ``end`` are offsets into the scanned text, ``end`` exclusive.
    """

    kind: TagKind
    name: str
    body: str
    raw: str
    start: int
    end: int

    @classmethod
    def from_span(cls, text: str, start: int, end: int) -> "TagToken":
        """Classify the tag occupying ``text[start:end]``."""
        raw = text[start:end]
        inner = raw[1:-1]
        if inner.endswith("/"):
            kind = TagKind.SELF_CLOSING
            body = inner[:-1].strip()
        elif inner.startswith("/"):
            kind = TagKind.CLOSING
            body = inner[1:].strip()
        else:
            kind = TagKind.OPENING
            body = inner.strip()
        name = re.split(r"\s+", body, maxsplit=1)[0]
        return cls(kind=kind, name=name, body=body, raw=raw, start=start, end=end)


def _find_tag_end(text: str, start: int) -> int:
    """Return the index of the ``>`` closing the tag opened at ``start``."""
    quote: Optional[str] = None
    for index in range(start + 1, len(text)):
        char = text[index]
        if quote:
            if char == quote:
                quote = None
        elif char in _QUOTES:
            quote = char
        elif char == ">":
            return index
    return -1


def scan_tags(text: str) -> Iterator[TagToken]:
    """Yield every tag in ``text`` from left to right.

    A ``>`` inside a quoted attribute value does not end the tag.

    Raises:
        IncompleteTree: a ``<`` is never closed by a ``>``.
    """
    position = 0
    while True:
        start = text.find("<", position)
        if start < 0:
            return
        end = _find_tag_end(text, start)
        if end < 0:
            raise IncompleteTree(f"Unterminated tag starting at offset {start}")
        token = TagToken.from_span(text, start, end + 1)
        logger.debug("Scanned %s tag %r at %d", token.kind.name, token.name, start)
        yield token
        position = end + 1


def match_opening_tag(text: str) -> Optional[str]:
    """Return the first properly quoted opening or self-closing tag in ``text``."""
    match = OPENING_TAG.search(text)
    return match.group(0) if match else None


def find_closing_tag(text: str, name: str) -> Optional["re.Match[str]"]:
    """Return the last ``</name>`` in ``text``, allowing spaces before ``>``."""
    last = None
    for last in re.finditer(rf"</{re.escape(name)}\s*>", text):
        pass
    return last


def is_self_closing(fragment: str) -> bool:
    """True if ``fragment`` starts with a self-closing tag such as ``<tag a="1"/>``."""
    return SELF_CLOSING_TAG.match(fragment) is not None


def strip_formatting(text: str) -> str:
    """Remove carriage returns, newlines and tabs."""
    return text.translate(_FORMATTING)


def strip_header(text: str) -> str:
    """Remove ``<?...?>`` declarations such as ``<?xml version="1.0"?>``."""
    return HEADER_PATTERN.sub("", text)
