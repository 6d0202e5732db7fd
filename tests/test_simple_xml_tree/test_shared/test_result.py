"""Tests for parse and serialize metrics."""

from simple_xml_tree.shared import ParseMetrics, SerializeMetrics
from simple_xml_tree.tree import NodeTreeBuilder, XMLNode
from simple_xml_tree.tokenization import ParseEvent


class TestParseMetrics:
    """Test derived parse figures."""

    def test_events_per_second(self):
        """Test throughput is derived from the processing time."""
        metrics = ParseMetrics(processing_time_ms=500.0, events_processed=100)

        assert metrics.events_per_second == 200.0

    def test_zero_time_gives_zero_rate(self):
        """Test a zero duration does not divide by zero."""
        assert ParseMetrics(events_processed=10).events_per_second == 0.0

    def test_builder_fills_metrics(self):
        """Test the builder counts events, nodes, text, and depth."""
        builder = NodeTreeBuilder()
        builder.build(XMLNode(), [
            ParseEvent.start_tag("a"),
            ParseEvent.start_tag("b"),
            ParseEvent.text_event("t"),
            ParseEvent.end_tag("b"),
            ParseEvent.end_tag("a"),
            ParseEvent.end_document(),
        ])

        assert builder.metrics.events_processed == 6
        assert builder.metrics.nodes_created == 1
        assert builder.metrics.text_events == 1
        assert builder.metrics.max_depth == 2
        assert set(builder.metrics.to_dict()) == {
            "processing_time_ms",
            "events_processed",
            "nodes_created",
            "text_events",
            "max_depth",
        }


class TestSerializeMetrics:
    """Test derived serialize figures."""

    def test_nodes_per_second(self):
        """Test throughput is derived from the processing time."""
        metrics = SerializeMetrics(processing_time_ms=1000.0, nodes_written=50)

        assert metrics.nodes_per_second == 50.0
        assert metrics.to_dict()["nodes_written"] == 50
