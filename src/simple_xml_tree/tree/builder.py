"""Recursive tree construction for simple XML tree parsing.

:class:`XmlTreeBuilder` turns a document string into an :class:`XmlTree` by
repeatedly splitting tag content into sibling fragments and classifying each
fragment as a leaf or a subtree. :class:`ParseResult` is the tagged outcome
returned by the API layer: it holds either the tree or the failure.
"""

import time
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Dict, List, Optional, cast

from simple_xml_tree.shared import (
    CannotIdentifyRoot,
    DepthLimitExceeded,
    DiagnosticEntry,
    DiagnosticSeverity,
    FailureKind,
    PerformanceMetrics,
    TreeConfig,
    UnseparatedChildren,
    XmlError,
    get_logger,
)
from simple_xml_tree.tokenization import (
    find_closing_tag,
    is_self_closing,
    match_opening_tag,
    parse_attribute_tokens,
    split_attributes,
    strip_formatting,
    strip_header,
)

from .node import NodeKind, SimpleXmlTag, XmlTree, merge
from .splitter import check_tree, get_parallel_roots, preview, tag_fragments

# Fragments with at most this many "<" hold a single tag and become leaves
LEAF_MAX_TAG_MARKERS = 2


def is_leaf_fragment(fragment: str) -> bool:
    """True if ``fragment`` is one tag pair or one self-closing tag."""
    return fragment.count("<") <= LEAF_MAX_TAG_MARKERS


@dataclass
class ParseResult:
    """Outcome of parsing one document.

    Exactly one of ``tree`` and ``error`` is set. When the error is
    :class:`UnseparatedChildren`, ``fragments`` lists the separated siblings so
    they can be parsed individually.
    """

    tree: Optional[XmlTree] = None
    error: Optional[XmlError] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate that the result holds a tree or an error, not both."""
        if (self.tree is None) == (self.error is None):
            raise ValueError("ParseResult needs exactly one of tree or error")

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def failure_kind(self) -> Optional[FailureKind]:
        return self.error.kind if self.error else None

    @property
    def fragments(self) -> List[str]:
        """Separated sibling fragments carried by an UnseparatedChildren failure."""
        if isinstance(self.error, UnseparatedChildren):
            return list(self.error.fragments)
        return []

    def unwrap(self) -> XmlTree:
        """Return the tree or raise the stored failure."""
        if self.error is not None:
            raise self.error
        return cast(XmlTree, self.tree)

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            details=details,
            correlation_id=self.correlation_id,
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        return any(diag.severity is DiagnosticSeverity.ERROR for diag in self.diagnostics)

    def summary(self) -> Dict[str, Any]:
        """Summarize the result for reporting."""
        summary: Dict[str, Any] = {
            "success": self.success,
            "correlation_id": self.correlation_id,
            "performance": self.performance.to_dict(),
            "diagnostics": [
                {
                    "severity": diag.severity.name,
                    "message": diag.message,
                    "component": diag.component,
                } for diag in self.diagnostics
            ],
        }
        if self.error is not None:
            summary["failure_kind"] = self.failure_kind.name if self.failure_kind else None
            summary["error"] = self.error.message
            if self.fragments:
                summary["fragments"] = self.fragments
        else:
            summary["root"] = self.tree.tag_name if self.tree else None
        return summary


class XmlTreeBuilder:
    """Builds :class:`XmlTree` objects from document strings.

    One builder may be reused; metrics and diagnostics describe the most
    recent :meth:`build` call.
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Tree construction settings, defaults when omitted
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder")
        self.metrics = PerformanceMetrics()
        self.diagnostics: List[DiagnosticEntry] = []

    def build(self, xml: str) -> XmlTree:
        """Parse ``xml`` into a tree.

        Raises:
            XmlError: the document cannot be parsed; no partial tree is kept
        """
        start_time = time.time()
        self.metrics = PerformanceMetrics(characters_processed=len(xml))
        self.diagnostics = []

        if self.config.strip_header:
            xml = strip_header(xml)
        if self.config.strip_formatting:
            xml = strip_formatting(xml)

        try:
            try:
                return self._build_tree(xml)
            except UnseparatedChildren as error:
                if not self.config.merge_unseparated_roots:
                    raise
                return self._merge_siblings(error.fragments)
        except RecursionError as error:
            # max_depth is above what the interpreter stack allows
            raise DepthLimitExceeded(
                self.metrics.max_depth_reached,
                "Document nesting exceeds the interpreter recursion limit "
                f"at depth {self.metrics.max_depth_reached}",
            ) from error
        finally:
            self.metrics.processing_time_ms = (time.time() - start_time) * 1000

    def _merge_siblings(self, fragments: List[str]) -> XmlTree:
        """Parse sibling roots one by one and merge them into a single tree."""
        self.logger.info(
            "Merging sibling roots",
            extra={"fragment_count": len(fragments)}
        )
        self._diagnose(
            DiagnosticSeverity.INFO,
            "Document had several root elements; they were merged",
            {"fragment_count": len(fragments)},
        )
        trees: List[XmlTree] = []
        leaves: List[SimpleXmlTag] = []
        for fragment in fragments:
            if is_leaf_fragment(fragment):
                leaves.append(self._build_leaf(fragment))
            else:
                trees.append(self._build_element(fragment, depth=0))

        merged = reduce(merge, trees) if trees else XmlTree.merge_container()
        if leaves:
            if merged.kind is not NodeKind.MERGE:
                merged = XmlTree.merge_container(child_trees=[merged])
            merged.child_leaves.extend(leaves)
        return merged

    def _build_leaf(self, fragment: str) -> SimpleXmlTag:
        self.metrics.leaves_built += 1
        return SimpleXmlTag.from_string(fragment)

    def _build_tree(self, xml: str) -> XmlTree:
        """Check a whole document, narrow it to its single root and build it."""
        check_tree(xml)
        roots = tag_fragments(get_parallel_roots(xml))
        if len(roots) > 1:
            raise UnseparatedChildren("XML contains multiple sister tags", roots)
        return self._build_element(roots[0], depth=0)

    def _build_element(self, xml: str, depth: int) -> XmlTree:
        # xml is one balanced fragment produced by get_parallel_roots
        if depth >= self.config.max_depth:
            raise DepthLimitExceeded(self.config.max_depth)
        self.metrics.max_depth_reached = max(self.metrics.max_depth_reached, depth)

        opening = match_opening_tag(xml)
        if opening is None or not xml.startswith(opening) or is_self_closing(opening):
            raise CannotIdentifyRoot(f"Cannot identify root tag in: {preview(xml)}")
        tag_name, tokens = split_attributes(opening[1:-1])
        closing = find_closing_tag(xml, tag_name)
        if closing is None or closing.start() < len(opening):
            raise CannotIdentifyRoot(f"Cannot find </{tag_name}> in: {preview(xml)}")

        tree = XmlTree(tag_name=tag_name, attributes=parse_attribute_tokens(tokens))
        children = get_parallel_roots(xml[len(opening):closing.start()])
        self.metrics.fragments_split += len(children)
        self.logger.debug(
            "Splitting tree content",
            extra={"tag": tag_name, "depth": depth, "fragment_count": len(children)}
        )

        for child in children:
            if "<" not in child:
                if child.strip():
                    self._diagnose(
                        DiagnosticSeverity.WARNING,
                        f"Discarded text inside <{tag_name}> next to child tags",
                        {"text": preview(child)},
                    )
            elif is_leaf_fragment(child):
                tree.child_leaves.append(self._build_leaf(child))
            else:
                tree.child_trees.append(self._build_element(child, depth + 1))

        self.metrics.trees_built += 1
        return tree

    def _diagnose(
        self,
        severity: DiagnosticSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component="xml_tree_builder",
            details=details,
            correlation_id=self.correlation_id,
        ))
        if severity is DiagnosticSeverity.WARNING:
            self.logger.warning(message, extra=details)
