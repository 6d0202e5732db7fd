"""Shared utilities for XML node trees.

This module provides configuration objects, exception types, metrics, and
logging helpers used by the tokenizer, tree, and serialization layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParseConfig,
    ParseOptions,
    SerializeConfig,
    SerializeOptions,
    TreeConfig,
    resolve_parse_config,
    resolve_serialize_config,
)
from .errors import (
    InvalidOperationError,
    MalformedNestingError,
    WriterStateError,
    XMLTreeError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    ParseMetrics,
    SerializeMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParseConfig",
    "ParseOptions",
    "SerializeConfig",
    "SerializeOptions",
    "TreeConfig",
    "resolve_parse_config",
    "resolve_serialize_config",
    "InvalidOperationError",
    "MalformedNestingError",
    "WriterStateError",
    "XMLTreeError",
    "CorrelationLogger",
    "get_logger",
    "ParseMetrics",
    "SerializeMetrics",
]
