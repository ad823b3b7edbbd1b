"""Parsing API for simple XML tree documents.

Module-level functions cover one-off parsing; :class:`XmlTreeParser` keeps a
configuration and running statistics for repeated use. Document failures are
never raised from this layer: they come back inside a :class:`ParseResult`.
"""

import uuid
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, TextIO, Union

from simple_xml_tree.shared import (
    DiagnosticSeverity,
    ParserConfig,
    PerformanceMetrics,
    XmlError,
    get_logger,
    set_package_level,
)
from simple_xml_tree.tree import ParseResult, XmlTree, XmlTreeBuilder

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]


def _read_input(input_data: InputType, encoding: str) -> str:
    if isinstance(input_data, str):
        return input_data
    if isinstance(input_data, bytes):
        return input_data.decode(encoding)
    if isinstance(input_data, Path):
        return input_data.read_text(encoding=encoding)
    if hasattr(input_data, "read"):
        content = input_data.read()
        if isinstance(content, bytes):
            return content.decode(encoding)
        return content
    raise TypeError(f"Unsupported input type: {type(input_data).__name__}")


def _parse_text(
    xml: str,
    config: ParserConfig,
    correlation_id: Optional[str]
) -> ParseResult:
    logger = get_logger(__name__, correlation_id, "parse")
    builder = XmlTreeBuilder(config.tree, correlation_id)

    logger.info("Starting parse operation", extra={"characters": len(xml)})
    try:
        tree = builder.build(xml)
    except XmlError as error:
        logger.warning(
            f"Parse failed: {error.message}",
            extra={"failure_kind": error.kind.name if error.kind else None}
        )
        result = ParseResult(
            error=error,
            diagnostics=builder.diagnostics,
            performance=builder.metrics,
            correlation_id=correlation_id,
        )
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            error.message,
            "parse",
            {"failure_kind": error.kind.name if error.kind else None},
        )
        return result

    logger.info(
        "Parse operation completed",
        extra={
            "root": tree.tag_name,
            "processing_time_ms": builder.metrics.processing_time_ms,
        }
    )
    return ParseResult(
        tree=tree,
        diagnostics=builder.diagnostics,
        performance=builder.metrics,
        correlation_id=correlation_id,
    )


def parse(
    input_data: InputType,
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None,
    encoding: str = "utf-8"
) -> ParseResult:
    """Parse XML from a string, bytes, a path or a file-like object.

    Examples:
        >>> result = parse('<root><item id="1">hi</item></root>')
        >>> result.success
        True
        >>> result.tree.find_leaf("item", "id", "1").value
        'hi'

        >>> parse("<a></a><a></a>").fragments
        ['<a></a>', '<a></a>']
    """
    xml = _read_input(input_data, encoding)
    return _parse_text(xml, config or ParserConfig(), correlation_id)


def parse_string(
    xml_string: str,
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None
) -> ParseResult:
    """Parse XML held in a string."""
    return _parse_text(xml_string, config or ParserConfig(), correlation_id)


def parse_file(
    file_path: Union[str, Path],
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None,
    encoding: str = "utf-8"
) -> ParseResult:
    """Parse XML from a file.

    Raises:
        OSError: the file cannot be read
    """
    path = Path(file_path)
    return _parse_text(
        path.read_text(encoding=encoding),
        config or ParserConfig(),
        correlation_id,
    )


def save(
    tree: XmlTree,
    file_path: Union[str, Path],
    overwrite: bool = True,
    indent: Optional[str] = None,
    encoding: str = "utf-8"
) -> Path:
    """Write the serialized tree to ``file_path``.

    Raises:
        FileExistsError: the file exists and ``overwrite`` is False
    """
    path = Path(file_path)
    with path.open("w" if overwrite else "x", encoding=encoding) as handle:
        handle.write(tree.to_text(indent))
    return path


class XmlTreeParser:
    """Reusable parser holding a configuration and running statistics.

    Creating or reconfiguring a parser applies ``global_.logging_level`` to
    the package loggers.

    Examples:
        >>> parser = XmlTreeParser(ParserConfig.lenient())
        >>> parser.parse("<a></a><b><c/></b>").tree.tag_name
        'merge'
        >>> parser.statistics["documents_parsed"]
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tree_parser")
        set_package_level(self.config.global_.logging_level)
        self.reset_statistics()

    def _next_correlation_id(self) -> Optional[str]:
        if self.correlation_id is not None:
            return self.correlation_id
        if self.config.global_.enable_correlation_tracking:
            return uuid.uuid4().hex[:12]
        return None

    def parse(self, input_data: InputType, encoding: str = "utf-8") -> ParseResult:
        """Parse one document with this parser's configuration."""
        xml = _read_input(input_data, encoding)
        result = _parse_text(xml, self.config, self._next_correlation_id())

        self._documents_parsed += 1
        self._add_metrics(result.performance)
        if not result.success and result.failure_kind is not None:
            name = result.failure_kind.name
            self._failures[name] = self._failures.get(name, 0) + 1
        return result

    def to_text(self, tree: XmlTree) -> str:
        """Serialize ``tree`` using the configured indentation."""
        return tree.to_text(self.config.serialization.indent)

    def save(self, tree: XmlTree, file_path: Union[str, Path], overwrite: bool = True) -> Path:
        """Write ``tree`` to a file using the configured indentation."""
        path = save(tree, file_path, overwrite, self.config.serialization.indent)
        self.logger.info("Saved tree", extra={"path": str(path), "root": tree.tag_name})
        return path

    def reconfigure(self, **overrides: Any) -> None:
        """Replace the configuration, e.g. ``reconfigure(tree__max_depth=10)``."""
        self.config = self.config.override(**overrides)
        set_package_level(self.config.global_.logging_level)
        self.logger.debug("Parser reconfigured", extra={"overrides": sorted(overrides)})

    def _add_metrics(self, metrics: PerformanceMetrics) -> None:
        self._metrics.processing_time_ms += metrics.processing_time_ms
        self._metrics.characters_processed += metrics.characters_processed
        self._metrics.fragments_split += metrics.fragments_split
        self._metrics.leaves_built += metrics.leaves_built
        self._metrics.trees_built += metrics.trees_built
        self._metrics.max_depth_reached = max(
            self._metrics.max_depth_reached, metrics.max_depth_reached
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Counters accumulated since creation or the last reset."""
        failures = sum(self._failures.values())
        return {
            "documents_parsed": self._documents_parsed,
            "successful_parses": self._documents_parsed - failures,
            "failed_parses": failures,
            "failures_by_kind": dict(self._failures),
            "nodes_built": self._metrics.nodes_built,
            **self._metrics.to_dict(),
        }

    def reset_statistics(self) -> None:
        self._documents_parsed = 0
        self._failures: Dict[str, int] = {}
        self._metrics = PerformanceMetrics()
