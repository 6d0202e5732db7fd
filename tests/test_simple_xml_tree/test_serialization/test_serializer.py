"""Tests for pre-order node serialization."""

import sys
from typing import List, Tuple

import pytest

from simple_xml_tree.serialization import NodeSerializer, XMLTextWriter, serialize
from simple_xml_tree.shared import TreeConfig, WriterStateError
from simple_xml_tree.tree import XMLNode


class RecordingWriter:
    """Writer double recording every call made by the serializer."""

    def __init__(self, fail_on: str = "") -> None:
        self.calls: List[Tuple[str, ...]] = []
        self.fail_on = fail_on

    def _record(self, *call: str) -> None:
        if call[0] == self.fail_on:
            raise OSError(f"{call[0]} failed")
        self.calls.append(call)

    def start_tag(self, name: str) -> None:
        self._record("start_tag", name)

    def attribute(self, name: str, value: str) -> None:
        self._record("attribute", name, value)

    def text(self, value: str) -> None:
        self._record("text", value)

    def end_tag(self, name: str) -> None:
        self._record("end_tag", name)

    def end_document(self) -> None:
        self._record("end_document")


def _sample_tree() -> XMLNode:
    root = XMLNode("a")
    root.set_attribute("id", "1")
    root.add_child("b", "hello")
    c = root.add_child("c")
    c.add_child("d", "x")
    return root


class TestNodeSerializer:
    """Test the traversal order and failure handling."""

    def test_pre_order_call_sequence(self) -> None:
        """Test calls follow start, attributes, children or text, end."""
        writer = RecordingWriter()

        assert serialize(_sample_tree(), writer) is True  # type: ignore[arg-type]
        assert writer.calls == [
            ("start_tag", "a"),
            ("attribute", "id", "1"),
            ("start_tag", "b"),
            ("text", "hello"),
            ("end_tag", "b"),
            ("start_tag", "c"),
            ("start_tag", "d"),
            ("text", "x"),
            ("end_tag", "d"),
            ("end_tag", "c"),
            ("end_tag", "a"),
            ("end_document",),
        ]

    def test_value_of_node_with_children_is_not_written(self) -> None:
        """Test children and leaf text are mutually exclusive outputs."""
        root = XMLNode("a")
        root.set_value("hidden")
        root.add_child("b", "shown")
        writer = RecordingWriter()

        serialize(root, writer)  # type: ignore[arg-type]

        assert ("text", "hidden") not in writer.calls
        assert ("text", "shown") in writer.calls

    def test_subtree_does_not_end_document(self) -> None:
        """Test only a node without parent ends the document."""
        root = _sample_tree()
        writer = RecordingWriter()

        serialize(root.get_child("c"), writer)  # type: ignore[arg-type]

        assert writer.calls[0] == ("start_tag", "c")
        assert ("end_document",) not in writer.calls

    def test_writer_failure_returns_false(self) -> None:
        """Test any writer error aborts with False."""
        writer = RecordingWriter(fail_on="text")

        assert serialize(_sample_tree(), writer) is False  # type: ignore[arg-type]
        assert writer.calls[-1] == ("start_tag", "b")

    def test_tree_is_not_modified(self) -> None:
        """Test serialization is a read-only traversal."""
        root = _sample_tree()
        before = root.to_dict()

        serialize(root, RecordingWriter())  # type: ignore[arg-type]

        assert root.to_dict() == before

    def test_metrics_are_recorded(self) -> None:
        """Test node and attribute counts are collected."""
        serializer = NodeSerializer(XMLTextWriter())

        assert serializer.serialize(_sample_tree()) is True
        assert serializer.metrics.nodes_written == 4
        assert serializer.metrics.attributes_written == 1


class TestToString:
    """Test whole-document serialization through XMLNode."""

    def test_to_string_example(self) -> None:
        """Test the canonical small document."""
        root = XMLNode("a")
        root.set_attribute("id", "1")
        root.add_child("b", "hello")

        assert root.to_string() == '<a id="1"><b>hello</b></a>'
        assert str(root) == root.to_string()

    def test_sentinel_serializes_to_empty_string(self) -> None:
        """Test a nameless node cannot be written and yields ""."""
        assert XMLNode().to_string() == ""

    def test_child_node_to_string(self) -> None:
        """Test serializing a subtree produces only its markup."""
        root = _sample_tree()

        assert root.get_child("c").to_string() == "<c><d>x</d></c>"

    def test_round_trip(self) -> None:
        """Test parse(serialize(tree)) reproduces the tree."""
        root = XMLNode("config")
        root.set_attribute("version", "2")
        server = root.add_child("server")
        server.set_attribute("name", "primary & <main>")
        server.add_child("host", "example.org")
        server.add_child("port", "443")
        root.add_child("note", 'quotes " and apostrophes \'')
        root.add_child("empty")

        parsed = XMLNode.from_string(root.to_string())

        assert parsed.is_present()
        assert parsed.to_dict() == root.to_dict()

    def test_tree_config_selects_serialize_settings(self) -> None:
        """Test a TreeConfig is accepted and its serialize part applied."""
        root = XMLNode("a")
        config = TreeConfig().override(serialize__xml_declaration=True)

        output = root.to_string(config)

        assert output.startswith("<?xml")
        assert "<a" in output

    def test_deeply_nested_tree(self) -> None:
        """Test nesting deeper than the recursion limit is written in full."""
        depth = sys.getrecursionlimit() * 3
        root = XMLNode("n")
        node = root
        for _ in range(depth - 1):
            node = node.add_child("n")
        node.set_value("bottom")

        output = root.to_string()

        assert output == "<n>" * depth + "bottom" + "</n>" * depth

    def test_writer_closed_when_serialization_fails(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the writer's open elements are released after a failure."""
        closed: List[XMLTextWriter] = []
        original_close = XMLTextWriter.close

        def tracking_close(writer: XMLTextWriter) -> None:
            original_close(writer)
            closed.append(writer)

        monkeypatch.setattr(XMLTextWriter, "close", tracking_close)
        root = XMLNode("a")
        root.add_child("b").add_child("1bad")

        assert root.to_string() == ""
        assert len(closed) == 1
        assert closed[0]._open_elements == []  # noqa: SLF001
        with pytest.raises(WriterStateError):
            closed[0].start_tag("c")
