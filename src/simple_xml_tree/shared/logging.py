"""Structured logging utilities for XML node trees.

Every log record produced by the tokenizer, tree builder, and serializer
carries the component name and the caller's correlation ID, so a single
parse or serialize call can be followed through the layers.
"""

import logging
from typing import Any, Dict, MutableMapping, Optional, Tuple


class CorrelationLogger(logging.LoggerAdapter):
    """Logger that automatically includes correlation ID and component information.

    Per-call ``extra`` dictionaries are merged over the correlation fields
    instead of replacing them.
    """

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name for structured logging
        """
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]
        super().__init__(
            logging.getLogger(name),
            {"component": self.component, "correlation_id": correlation_id},
        )

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        combined_extra: Dict[str, Any] = dict(self.extra or {})
        combined_extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = combined_extra
        return msg, kwargs


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)
