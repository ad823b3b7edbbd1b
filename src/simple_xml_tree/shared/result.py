"""Diagnostic and metric types shared by the parsing layers."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Input that was accepted but partly ignored
    ERROR = auto()      # Failures that aborted the parse


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class PerformanceMetrics:
    """Counters collected while building a tree."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    fragments_split: int = 0
    leaves_built: int = 0
    trees_built: int = 0
    max_depth_reached: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def nodes_built(self) -> int:
        """Total number of leaves and trees constructed."""
        return self.leaves_built + self.trees_built

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary representation."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "characters_processed": self.characters_processed,
            "fragments_split": self.fragments_split,
            "leaves_built": self.leaves_built,
            "trees_built": self.trees_built,
            "max_depth_reached": self.max_depth_reached,
        }
