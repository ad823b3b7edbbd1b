"""Shared utilities for simple XML tree parsing.

This module provides the failure taxonomy, configuration objects, diagnostic
types and logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ParserConfig,
    SerializationConfig,
    TreeConfig,
)
from .errors import (
    CannotIdentifyRoot,
    DepthLimitExceeded,
    FailureKind,
    IncompleteTree,
    MalformedAttributes,
    UnbalancedCloseTag,
    UnseparatedChildren,
    XmlError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
    set_package_level,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "CannotIdentifyRoot",
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "DepthLimitExceeded",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "FailureKind",
    "GlobalConfig",
    "IncompleteTree",
    "MalformedAttributes",
    "ParserConfig",
    "PerformanceMetrics",
    "SerializationConfig",
    "TreeConfig",
    "UnbalancedCloseTag",
    "UnseparatedChildren",
    "XmlError",
    "get_logger",
    "set_package_level",
]
