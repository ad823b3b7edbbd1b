"""Sibling splitting and well-formedness checks.

Both operations walk the tag stream from :func:`scan_tags` while keeping a
per-name count of open tags. A top-level fragment ends as soon as no tag name
has a positive count, which finds sibling boundaries without building a tree
first.
"""

from typing import Dict, List

from simple_xml_tree.shared.errors import (
    CannotIdentifyRoot,
    IncompleteTree,
    UnbalancedCloseTag,
    XmlError,
)
from simple_xml_tree.tokenization import TagKind, TagToken, scan_tags
from simple_xml_tree.tokenization.tokenizer import TREE_PATTERN

PREVIEW_LENGTH = 100  # Max length of document text quoted in error messages


def preview(text: str) -> str:
    """Shorten ``text`` for use in messages."""
    if len(text) <= PREVIEW_LENGTH:
        return text
    return text[:PREVIEW_LENGTH] + "..."


class OpenTagCounter:
    """Signed count of currently open tags, keyed by tag name."""

    def __init__(self) -> None:
        self.counts: Dict[str, int] = {}

    def track(self, name: str) -> None:
        """Register ``name`` without changing its count."""
        self.counts.setdefault(name, 0)

    def open(self, name: str) -> None:
        self.counts[name] = self.counts.get(name, 0) + 1

    def close(self, name: str) -> None:
        if name not in self.counts:
            raise UnbalancedCloseTag(name)
        self.counts[name] -= 1

    def apply(self, token: TagToken) -> None:
        """Update the counts for one scanned tag."""
        if token.kind is TagKind.SELF_CLOSING:
            self.track(token.name)
        elif token.kind is TagKind.OPENING:
            self.open(token.name)
        else:
            self.close(token.name)

    @property
    def is_settled(self) -> bool:
        """True when no tag name has a pending open."""
        return all(count <= 0 for count in self.counts.values())

    @property
    def is_balanced(self) -> bool:
        return all(count == 0 for count in self.counts.values())

    def ensure_balanced(self) -> None:
        """Raise :class:`IncompleteTree` unless every count is back to zero."""
        if not self.is_balanced:
            pending = ", ".join(
                f"{name}={count}" for name, count in self.counts.items() if count
            )
            raise IncompleteTree(f"Incomplete XML tree, unbalanced tags: {pending}")


def get_parallel_roots(text: str) -> List[str]:
    """Split back-to-back sibling fragments into a list, one per top-level element.

    Text lying between top-level elements is returned as a fragment of its own,
    so ``"".join(get_parallel_roots(text)) == text`` always holds.

    Raises:
        UnbalancedCloseTag: a closing tag names a tag that was never seen
        IncompleteTree: tags remain open at the end of ``text``
    """
    counter = OpenTagCounter()
    roots: List[str] = []
    root_start = -1
    position = 0

    for token in scan_tags(text):
        if root_start < 0:
            if token.start > position:
                roots.append(text[position:token.start])
            root_start = token.start
        counter.apply(token)
        position = token.end
        if counter.is_settled:
            roots.append(text[root_start:position])
            root_start = -1

    counter.ensure_balanced()
    if position < len(text):
        roots.append(text[position:])
    return roots


def tag_fragments(fragments: List[str]) -> List[str]:
    """Keep only the fragments that contain at least one tag."""
    return [fragment for fragment in fragments if "<" in fragment]


def check_tree(text: str) -> None:
    """Raise the matching :class:`XmlError` unless ``text`` is a usable tree.

    The text must contain a root tag closed by a tag of the same name, and the
    non-self-closing tags must balance.
    """
    if not TREE_PATTERN.search(text):
        raise CannotIdentifyRoot(f"Cannot identify root tag in: {preview(text)}")

    counter = OpenTagCounter()
    for token in scan_tags(text):
        if token.kind is not TagKind.SELF_CLOSING:
            counter.apply(token)
    counter.ensure_balanced()


def is_tree(text: str) -> bool:
    """Check whether ``text`` can be parsed as a tree."""
    try:
        check_tree(text)
    except XmlError:
        return False
    return True
