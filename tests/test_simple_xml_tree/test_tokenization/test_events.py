"""Tests for the lxml-backed parse event source."""

import io
from pathlib import Path
from typing import List

import pytest
from lxml import etree

from simple_xml_tree.shared import ParseConfig, XMLTreeError
from simple_xml_tree.tokenization import EventType, ParseEvent, XMLEventSource


def _collect(source, config: ParseConfig = None) -> List[ParseEvent]:  # type: ignore[assignment]
    with XMLEventSource(source, config) as events:
        return list(events)


class TestXMLEventSource:
    """Test event production for the supported source types."""

    def test_event_sequence(self) -> None:
        """Test start, text, end, and end-of-document events in order."""
        events = _collect(b'<a id="1"><b>hello</b></a>')

        assert events == [
            ParseEvent.start_tag("a", (("id", "1"),)),
            ParseEvent.start_tag("b"),
            ParseEvent.text_event("hello"),
            ParseEvent.end_tag("b"),
            ParseEvent.end_tag("a"),
            ParseEvent.end_document(),
        ]

    def test_whitespace_between_tags_is_reported(self) -> None:
        """Test whitespace runs arrive as text events like any other text."""
        events = _collect(b"<a>\n  <b/>\n</a>")

        texts = [event.text for event in events if event.type is EventType.TEXT]
        assert texts == ["\n  ", "\n"]

    def test_text_coalesced_across_chunks(self) -> None:
        """Test character data split by small reads forms one event."""
        events = _collect(b"<a>abcdefghij&amp;klm</a>", ParseConfig(chunk_size=2))

        texts = [event.text for event in events if event.type is EventType.TEXT]
        assert texts == ["abcdefghij&klm"]

    def test_comments_and_processing_instructions_are_skipped(self) -> None:
        """Test only structural events and text are produced."""
        events = _collect(b"<a><!-- note --><?pi data?><b/></a>")

        assert [event.type for event in events] == [
            EventType.START_TAG,
            EventType.START_TAG,
            EventType.END_TAG,
            EventType.END_TAG,
            EventType.END_DOCUMENT,
        ]

    def test_namespaces_reduced_to_local_names(self) -> None:
        """Test namespace URIs are dropped from tag and attribute names."""
        xml = b'<r:root xmlns:r="urn:r" xmlns:x="urn:x" x:kind="k"><r:item/></r:root>'

        events = _collect(xml)

        assert events[0] == ParseEvent.start_tag("root", (("kind", "k"),))
        assert events[1].name == "item"

    def test_clark_names_when_local_names_disabled(self) -> None:
        """Test the namespace URI is kept when local names are disabled."""
        xml = b'<r:root xmlns:r="urn:r"/>'

        events = _collect(xml, ParseConfig(local_names=False))

        assert events[0].name == "{urn:r}root"

    def test_str_source_is_encoded(self) -> None:
        """Test str sources are treated as XML text."""
        events = _collect("<a>café</a>")

        assert events[1] == ParseEvent.text_event("café")

    def test_path_source_opened_and_closed(self, tmp_path: Path) -> None:
        """Test a path is read and released when the context exits."""
        document = tmp_path / "doc.xml"
        document.write_bytes(b"<a>1</a>")

        source = XMLEventSource(document)
        with source as events:
            assert [event.type for event in events][0] is EventType.START_TAG
            stream = source._stream  # noqa: SLF001

        assert stream is not None
        assert stream.closed
        assert source.bytes_read == len(b"<a>1</a>")

    def test_text_stream_chunks_are_encoded(self) -> None:
        """Test file-like objects returning str are accepted."""
        events = _collect(io.StringIO("<a>text</a>"))

        assert events[1] == ParseEvent.text_event("text")

    def test_malformed_input_raises_after_earlier_events(self) -> None:
        """Test events before a syntax error are produced before it is raised."""
        seen: List[ParseEvent] = []

        with pytest.raises(etree.XMLSyntaxError):
            with XMLEventSource(b"<a><b>x</b><c></a>") as events:
                for event in events:
                    seen.append(event)

        assert seen[0] == ParseEvent.start_tag("a")
        assert ParseEvent.end_tag("b") in seen

    def test_iterating_outside_context_raises(self) -> None:
        """Test the source must be entered before use."""
        with pytest.raises(XMLTreeError):
            list(XMLEventSource(b"<a/>"))

    def test_unsupported_source_type(self) -> None:
        """Test unknown source types raise TypeError on entry."""
        with pytest.raises(TypeError, match="Unsupported XML source type"):
            with XMLEventSource(3.14):  # type: ignore[arg-type]
                pass
