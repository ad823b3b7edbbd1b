"""Leaf and tree node types with lookup, merge, search and serialization.

A document is a :class:`XmlTree` whose children are split into two ordered
lists: :class:`SimpleXmlTag` leaves (tags holding only attributes and a text
value) and nested :class:`XmlTree` subtrees.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from simple_xml_tree.tokenization import (
    TagKind,
    find_closing_tag,
    parse_attribute_tokens,
    scan_tags,
    split_attributes,
)

MERGE_TAG = "merge"
RESULT_TAG = "result"


class NodeKind(Enum):
    """Whether a tree node is a parsed element or a synthetic container."""

    ELEMENT = auto()    # Tag parsed from a document
    MERGE = auto()      # Holds trees that could not be merged into one
    RESULT = auto()     # Holds the matches of a search


def _format_attributes(attributes: Dict[str, str]) -> str:
    return "".join(f' {key}="{value}"' for key, value in attributes.items())


@dataclass
class SimpleXmlTag:
    """An XML tag with attributes and a value but no child tags."""

    tag_name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    value: str = ""

    @classmethod
    def from_string(cls, fragment: str) -> "SimpleXmlTag":
        """Read ``<tag attr="x"/>`` or ``<tag attr="x">value</tag>``.

        The fragment must hold exactly one tag; anything else gives a
        best-effort result rather than an error.
        """
        token = next(iter(scan_tags(fragment)), None)
        if token is None or token.kind is TagKind.CLOSING:
            return cls(tag_name="", value=fragment)

        tag_name, tokens = split_attributes(token.body)
        attributes = parse_attribute_tokens(tokens)
        if token.kind is TagKind.SELF_CLOSING:
            return cls(tag_name=tag_name, attributes=attributes)

        remainder = fragment[:token.start] + fragment[token.end:]
        closing = find_closing_tag(remainder, tag_name)
        if closing is not None and closing.end() == len(remainder):
            remainder = remainder[:closing.start()]
        return cls(tag_name=tag_name, attributes=attributes, value=remainder)

    @property
    def is_empty(self) -> bool:
        """True if there are no attributes and no value."""
        return not self.attributes and not self.value

    def get(self, key: str = "") -> str:
        """Return the value for ``""``, otherwise the named attribute or ``""``."""
        if not key:
            return self.value
        return self.attributes.get(key, "")

    def find_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def to_text(self) -> str:
        """One-line XML for this tag, self-closing when the value is empty."""
        opening = f"<{self.tag_name}{_format_attributes(self.attributes)}"
        if not self.value:
            return opening + "/>"
        return f"{opening}>{self.value}</{self.tag_name}>"

    def to_dict(self) -> Dict[str, Any]:
        """Convert the leaf to dictionary representation."""
        result: Dict[str, Any] = {
            "tag": self.tag_name,
            "attributes": dict(self.attributes),
        }
        if self.value:
            result["value"] = self.value
        return result

    def __str__(self) -> str:
        return self.to_text()


TreeChild = Union["XmlTree", SimpleXmlTag]


@dataclass
class XmlTree:
    """An XML tag with nested child tags.

    Synthetic containers produced by :meth:`merge_with` and :meth:`search` have
    ``kind`` set to ``NodeKind.MERGE`` or ``NodeKind.RESULT``. They serialize
    under the tag names ``merge`` and ``result``, but only ``kind`` marks them
    as containers, so a parsed ``<merge>`` element stays an ordinary element.
    """

    tag_name: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    child_leaves: List[SimpleXmlTag] = field(default_factory=list)
    child_trees: List["XmlTree"] = field(default_factory=list)
    kind: NodeKind = NodeKind.ELEMENT

    @classmethod
    def from_string(cls, xml: str) -> "XmlTree":
        """Parse a document with the default configuration.

        Raises:
            XmlError: the document cannot be parsed
        """
        # Builder depends on this module
        from .builder import XmlTreeBuilder
        return XmlTreeBuilder().build(xml)

    @classmethod
    def merge_container(
        cls,
        child_trees: Iterable["XmlTree"] = (),
        child_leaves: Iterable[SimpleXmlTag] = (),
    ) -> "XmlTree":
        return cls(
            tag_name=MERGE_TAG,
            child_trees=list(child_trees),
            child_leaves=list(child_leaves),
            kind=NodeKind.MERGE,
        )

    @classmethod
    def result_container(
        cls,
        child_trees: Iterable["XmlTree"] = (),
        child_leaves: Iterable[SimpleXmlTag] = (),
    ) -> "XmlTree":
        return cls(
            tag_name=RESULT_TAG,
            child_trees=list(child_trees),
            child_leaves=list(child_leaves),
            kind=NodeKind.RESULT,
        )

    @property
    def is_empty(self) -> bool:
        """True if the tree has no child leaves and no child trees."""
        return not self.child_leaves and not self.child_trees

    @property
    def is_synthetic(self) -> bool:
        return self.kind is not NodeKind.ELEMENT

    def _same_label(self, other: "XmlTree") -> bool:
        return self.kind is other.kind and self.tag_name == other.tag_name

    # Lookup

    def find_leaf(self, tag: str, attribute: str, value: str) -> Optional[SimpleXmlTag]:
        """First direct leaf named ``tag`` whose ``attribute`` equals ``value``.

        An empty ``attribute`` compares the leaf's text value instead.
        """
        for leaf in self.child_leaves:
            if leaf.tag_name == tag and leaf.get(attribute) == value:
                return leaf
        return None

    def find_child_by_tag(self, tag: str) -> Optional[TreeChild]:
        """The only direct subtree named ``tag``, else the only such leaf.

        Returns None when there is no match or the match is ambiguous.
        """
        trees = [tree for tree in self.child_trees if tree.tag_name == tag]
        if len(trees) == 1:
            return trees[0]
        leaves = [leaf for leaf in self.child_leaves if leaf.tag_name == tag]
        if len(leaves) == 1:
            return leaves[0]
        return None

    def find_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def lookup(self, key: str) -> Union[TreeChild, str, None]:
        """Resolve ``key`` as a unique child tag first, then as an attribute name."""
        child = self.find_child_by_tag(key)
        if child is not None:
            return child
        return self.find_attribute(key)

    # Operations

    def merge_with(self, other: "XmlTree") -> "XmlTree":
        """Combine this tree with ``other``.

        Trees with the same tag and no attribute holding different values on
        both sides become one tree: attributes are united (this tree's values
        first) and children concatenated (this tree's first). Otherwise the
        two end up side by side in a merge container, reusing an existing
        container from either side. The operation favors the left operand and
        is not commutative.
        """
        conflict = any(
            key in other.attributes and other.attributes[key] != value
            for key, value in self.attributes.items()
        )
        if self._same_label(other) and not conflict:
            attributes = dict(self.attributes)
            for key, value in other.attributes.items():
                attributes.setdefault(key, value)
            return XmlTree(
                tag_name=self.tag_name,
                attributes=attributes,
                child_leaves=self.child_leaves + other.child_leaves,
                child_trees=self.child_trees + other.child_trees,
                kind=self.kind,
            )
        if self.kind is NodeKind.MERGE:
            return XmlTree.merge_container(
                child_trees=self.child_trees + [other],
                child_leaves=self.child_leaves,
            )
        if other.kind is NodeKind.MERGE:
            return XmlTree.merge_container(
                child_trees=other.child_trees + [self],
                child_leaves=other.child_leaves,
            )
        return XmlTree.merge_container(child_trees=[self, other])

    def search(self, tag_name: str) -> "XmlTree":
        """Collect every subtree and leaf named ``tag_name`` at any depth.

        Matches are returned flat inside a result container; their positions
        in the document are not kept.
        """
        result = XmlTree.result_container()
        for subtree in self.child_trees:
            if subtree.tag_name == tag_name:
                result.child_trees.append(subtree)
            found = subtree.search(tag_name)
            result.child_trees.extend(found.child_trees)
            result.child_leaves.extend(found.child_leaves)
        result.child_leaves.extend(
            leaf for leaf in self.child_leaves if leaf.tag_name == tag_name
        )
        return result

    # Serialization

    def _lines(self, indent: str, depth: int) -> Iterator[str]:
        prefix = indent * depth
        yield f"{prefix}<{self.tag_name}{_format_attributes(self.attributes)}>"
        for subtree in self.child_trees:
            yield from subtree._lines(indent, depth + 1)
        for leaf in self.child_leaves:
            yield indent * (depth + 1) + leaf.to_text()
        yield f"{prefix}</{self.tag_name}>"

    def to_text(self, indent: Optional[str] = None) -> str:
        """Serialize the tree with one tag per line.

        Child trees come before child leaves. Attribute values are written
        verbatim. With ``indent``, nested lines are prefixed by ``indent``
        once per level.
        """
        return "\n".join(self._lines(indent or "", 0))

    def to_dict(self) -> Dict[str, Any]:
        """Convert the tree to dictionary representation."""
        result: Dict[str, Any] = {
            "tag": self.tag_name,
            "attributes": dict(self.attributes),
        }
        if self.is_synthetic:
            result["synthetic"] = self.kind.name.lower()
        if self.child_trees:
            result["trees"] = [tree.to_dict() for tree in self.child_trees]
        if self.child_leaves:
            result["leaves"] = [leaf.to_dict() for leaf in self.child_leaves]
        return result

    def __str__(self) -> str:
        return self.to_text()


def merge(left: XmlTree, right: XmlTree) -> XmlTree:
    """Module-level form of :meth:`XmlTree.merge_with`."""
    return left.merge_with(right)
