"""Tree building from tokenizer events.

NodeTreeBuilder walks a stream of ParseEvents with a cursor that descends on
start tags and ascends on end tags, attaching a new node for every element
below the root. The first start tag does not create a node: the root passed
in by the caller takes that element's name and attributes.
"""

import time
from typing import TYPE_CHECKING, Iterable, Optional

from simple_xml_tree.shared import (
    MalformedNestingError,
    ParseMetrics,
    ParseOptions,
    get_logger,
    resolve_parse_config,
)
from simple_xml_tree.tokenization import EventType, ParseEvent, XMLEventSource

if TYPE_CHECKING:
    from simple_xml_tree.tokenization import SourceType
    from simple_xml_tree.tree.node import XMLNode


class NodeTreeBuilder:
    """Builds an XMLNode tree in place from parse events.

    A builder instance may be reused; state is reset on every ``build`` call
    and the metrics of the most recent build stay available in ``metrics``.
    """

    def __init__(
        self,
        config: Optional[ParseOptions] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Optional ParseConfig, or a TreeConfig whose parse part is used
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = resolve_parse_config(config)
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "node_tree_builder")
        self.metrics = ParseMetrics()

        self._cursor: Optional["XMLNode"] = None
        self._first_tag = True
        self._depth = 0

    def build(self, root: "XMLNode", events: Iterable[ParseEvent]) -> bool:
        """Consume ``events`` and grow the tree rooted at ``root``.

        Args:
            root: Node that becomes the document's outermost element
            events: Tokenizer events, normally ending with END_DOCUMENT

        Returns:
            True when END_DOCUMENT (or the end of ``events``) was reached,
            False if the event source or the tree raised. Nothing is rolled
            back on failure.
        """
        start_time = time.time()
        self._reset_state(root)

        try:
            for event in events:
                self.metrics.events_processed += 1
                if event.type is EventType.END_DOCUMENT:
                    break
                if self._cursor is None:
                    self._handle_dangling_event(event)
                    continue
                self._process_event(root, event)
        except Exception:
            self.metrics.processing_time_ms = (time.time() - start_time) * 1000
            self.logger.exception(
                "Tree building failed",
                extra=self.metrics.to_dict()
            )
            return False

        self.metrics.processing_time_ms = (time.time() - start_time) * 1000
        self.logger.debug(
            "Tree building completed",
            extra={
                **self.metrics.to_dict(),
                "events_per_second": self.metrics.events_per_second,
            }
        )
        return True

    def _reset_state(self, root: "XMLNode") -> None:
        self._cursor = root
        self._first_tag = True
        self._depth = 0
        self.metrics = ParseMetrics()

    def _process_event(self, root: "XMLNode", event: ParseEvent) -> None:
        if event.type is EventType.START_TAG:
            self._handle_start_tag(root, event)
        elif event.type is EventType.TEXT:
            self.metrics.text_events += 1
            self._cursor.set_value(event.text)
        elif event.type is EventType.END_TAG:
            self._cursor = self._cursor.get_parent()
            self._depth -= 1

    def _handle_start_tag(self, root: "XMLNode", event: ParseEvent) -> None:
        if self._first_tag:
            node = root
            node.set_name(event.name)
            # The parsed root is a tree member even if it never gets children
            node._present = True  # noqa: SLF001
            self._first_tag = False
        else:
            node = root.__class__()
            node.set_name(event.name)
            self._cursor.add_child(node)
            self.metrics.nodes_created += 1

        for key, value in event.attributes:
            node.set_attribute(key, value)

        self._cursor = node
        self._depth += 1
        self.metrics.max_depth = max(self.metrics.max_depth, self._depth)

    def _handle_dangling_event(self, event: ParseEvent) -> None:
        """Handle an event arriving after the cursor ascended past the root."""
        if self.config.strict_nesting:
            raise MalformedNestingError(
                f"{event.type.name} event after the root element was closed"
            )
        self.logger.debug(
            "Ignoring event after root end tag",
            extra={"event_type": event.type.name}
        )


def parse_into(
    root: "XMLNode",
    source: "SourceType",
    config: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None
) -> bool:
    """Parse ``source`` into ``root``.

    The source is opened for the duration of the parse and released on every
    outcome. Any failure, from opening the source to malformed markup,
    collapses to False.

    Args:
        root: Node that receives the document
        source: Bytes, XML text, a Path, or a binary stream
        config: Optional ParseConfig or TreeConfig
        correlation_id: Optional correlation ID for request tracking

    Returns:
        True if the document was read completely, False otherwise
    """
    logger = get_logger(__name__, correlation_id, "parse_into")
    logger.debug(
        "Starting parse",
        extra={"source_type": type(source).__name__}
    )

    try:
        config = resolve_parse_config(config)
        builder = NodeTreeBuilder(config, correlation_id)
        with XMLEventSource(source, config, correlation_id) as events:
            success = builder.build(root, events)
            bytes_read = events.bytes_read
    except (OSError, TypeError) as e:
        logger.warning(
            "Unable to open XML source",
            extra={"source_type": type(source).__name__, "error": str(e)}
        )
        return False
    except Exception:
        logger.exception(
            "Parse aborted",
            extra={"source_type": type(source).__name__}
        )
        return False

    if success:
        logger.info(
            "Parse completed",
            extra={"bytes_read": bytes_read, **builder.metrics.to_dict()}
        )
    return success
