"""Metrics objects for parse and serialize operations.

Parse and serialize report success as a plain boolean. The figures collected
here are kept on the builder and serializer instances and attached to log
records, they never change the outcome of an operation.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass
class ParseMetrics:
    """Figures collected while building a tree from parse events."""

    processing_time_ms: float = 0.0
    events_processed: int = 0
    nodes_created: int = 0
    text_events: int = 0
    max_depth: int = 0

    @property
    def events_per_second(self) -> float:
        """Calculate events consumed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.events_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a dictionary suitable for log extras."""
        return asdict(self)


@dataclass
class SerializeMetrics:
    """Figures collected while writing a tree to a text writer."""

    processing_time_ms: float = 0.0
    nodes_written: int = 0
    attributes_written: int = 0

    @property
    def nodes_per_second(self) -> float:
        """Calculate nodes written per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.nodes_written * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a dictionary suitable for log extras."""
        return asdict(self)
