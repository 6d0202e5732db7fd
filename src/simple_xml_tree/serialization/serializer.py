"""Pre-order serialization of XMLNode trees onto a text writer."""

import time
from typing import TYPE_CHECKING, List, Optional, Tuple

from simple_xml_tree.serialization.writer import XMLTextWriter
from simple_xml_tree.shared import (
    SerializeMetrics,
    SerializeOptions,
    get_logger,
    resolve_serialize_config,
)

if TYPE_CHECKING:
    from simple_xml_tree.tree.node import XMLNode


class NodeSerializer:
    """Writes a node and its subtree to an XMLTextWriter.

    Each node produces its start tag, its attributes, then either its children
    or, for a node without children, its text value, and finally its end tag.
    Serializing a root (a node without parent) also ends the document.
    """

    def __init__(self, writer: XMLTextWriter, correlation_id: Optional[str] = None) -> None:
        self.writer = writer
        self.logger = get_logger(__name__, correlation_id, "node_serializer")
        self.metrics = SerializeMetrics()

    def serialize(self, node: "XMLNode") -> bool:
        """Serialize ``node``; False if the writer raised at any point."""
        start_time = time.time()
        self.metrics = SerializeMetrics()

        try:
            self._write_tree(node)
            if node.get_parent() is None:
                self.writer.end_document()
        except Exception:
            self.metrics.processing_time_ms = (time.time() - start_time) * 1000
            self.logger.exception(
                "Serialization failed",
                extra={"node_name": node.get_name(), **self.metrics.to_dict()}
            )
            return False

        self.metrics.processing_time_ms = (time.time() - start_time) * 1000
        self.logger.debug(
            "Serialization completed",
            extra={
                **self.metrics.to_dict(),
                "nodes_per_second": self.metrics.nodes_per_second,
            }
        )
        return True

    def _write_tree(self, node: "XMLNode") -> None:
        # (node, closing) frames; a node with children is pushed again to be
        # closed after its children have been written
        stack: List[Tuple["XMLNode", bool]] = [(node, False)]
        while stack:
            current, closing = stack.pop()
            if closing:
                self._write_end(current)
                continue

            self.writer.start_tag(current.get_name())
            for key, value in current.get_attributes().items():
                self.writer.attribute(key, value)
                self.metrics.attributes_written += 1

            if current.has_children():
                stack.append((current, True))
                stack.extend((child, False) for child in reversed(current.get_children()))
            else:
                self.writer.text(current.get_value())
                self._write_end(current)

    def _write_end(self, node: "XMLNode") -> None:
        self.writer.end_tag(node.get_name())
        self.metrics.nodes_written += 1


def serialize(
    node: "XMLNode",
    writer: XMLTextWriter,
    correlation_id: Optional[str] = None
) -> bool:
    """Serialize ``node`` onto ``writer``.

    Returns:
        True on success, False if any writer call failed
    """
    return NodeSerializer(writer, correlation_id).serialize(node)


def node_to_string(
    node: "XMLNode",
    config: Optional[SerializeOptions] = None,
    correlation_id: Optional[str] = None
) -> str:
    """Serialize ``node`` with a fresh writer and return the XML text.

    ``config`` is a SerializeConfig or a TreeConfig. The writer is closed on
    every outcome, including a serialization that stopped halfway.

    Returns:
        The document text, or "" if the writer could not be created or
        serialization failed
    """
    logger = get_logger(__name__, correlation_id, "node_to_string")
    try:
        writer = XMLTextWriter(resolve_serialize_config(config))
    except Exception:
        logger.exception("Unable to create XML text writer")
        return ""

    try:
        if not serialize(node, writer, correlation_id):
            return ""
        return writer.getvalue()
    finally:
        try:
            writer.close()
        except Exception:
            logger.exception("Unable to close XML text writer")
