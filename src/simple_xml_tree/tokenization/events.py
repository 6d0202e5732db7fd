"""Parse event source built on the lxml target parser interface.

The tree builder never looks at raw bytes. It consumes a flat stream of
ParseEvent objects (start tag, text, end tag, end of document) produced here
by feeding the input to ``lxml.etree.XMLParser`` in chunks and collecting the
callbacks lxml makes on its parser target.
"""

import io
from collections import deque
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from types import TracebackType
from typing import IO, Deque, Dict, Iterator, List, Optional, Tuple, Type, Union

from lxml import etree

from simple_xml_tree.shared import ParseConfig, XMLTreeError, get_logger

SourceType = Union[str, bytes, bytearray, Path, IO[bytes]]


class EventType(Enum):
    """Structural events reported by the tokenizer."""

    START_TAG = auto()      # Element opened, carries name and attributes
    TEXT = auto()           # Character data between tags
    END_TAG = auto()        # Element closed
    END_DOCUMENT = auto()   # Input exhausted


@dataclass(frozen=True)
class ParseEvent:
    """Single tokenizer event."""

    type: EventType
    name: str = ""
    text: str = ""
    attributes: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def start_tag(cls, name: str, attributes: Tuple[Tuple[str, str], ...] = ()) -> "ParseEvent":
        return cls(EventType.START_TAG, name=name, attributes=tuple(attributes))

    @classmethod
    def text_event(cls, text: str) -> "ParseEvent":
        return cls(EventType.TEXT, text=text)

    @classmethod
    def end_tag(cls, name: str) -> "ParseEvent":
        return cls(EventType.END_TAG, name=name)

    @classmethod
    def end_document(cls) -> "ParseEvent":
        return cls(EventType.END_DOCUMENT)


class _EventCollector:
    """lxml parser target that turns callbacks into queued ParseEvents.

    Consecutive ``data`` callbacks are coalesced into one TEXT event, so a
    text run split by entity references or chunk boundaries arrives whole.
    """

    def __init__(self, local_names: bool) -> None:
        self._local_names = local_names
        self._events: Deque[ParseEvent] = deque()
        self._text: List[str] = []
        self.elements_seen = 0

    def _name(self, name: str) -> str:
        if self._local_names:
            return etree.QName(name).localname
        return name

    def _flush_text(self) -> None:
        if self._text:
            self._events.append(ParseEvent.text_event("".join(self._text)))
            self._text.clear()

    def start(self, tag: str, attrib: Dict[str, str]) -> None:
        self._flush_text()
        self.elements_seen += 1
        attributes = tuple((self._name(key), value) for key, value in attrib.items())
        self._events.append(ParseEvent.start_tag(self._name(tag), attributes))

    def end(self, tag: str) -> None:
        self._flush_text()
        self._events.append(ParseEvent.end_tag(self._name(tag)))

    def data(self, data: str) -> None:
        self._text.append(data)

    def close(self) -> None:
        self._flush_text()

    def drain(self) -> Iterator[ParseEvent]:
        while self._events:
            yield self._events.popleft()


class XMLEventSource:
    """Scoped producer of ParseEvents for a single input.

    Use as a context manager. Inputs opened by the source (paths) are closed
    when the context exits, whatever the outcome of the parse. Streams passed
    in by the caller are left open.

    Accepted sources:
        bytes / bytearray: raw document bytes
        str: XML text, encoded with the configured encoding as it is read
        pathlib.Path: file opened in binary mode
        file-like object: anything with ``read()``; str chunks are encoded

    Example:
        >>> with XMLEventSource(b"<a>hi</a>") as source:
        ...     [event.type.name for event in source]
        ['START_TAG', 'TEXT', 'END_TAG', 'END_DOCUMENT']
    """

    def __init__(
        self,
        source: SourceType,
        config: Optional[ParseConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.source = source
        self.config = config or ParseConfig()
        self.logger = get_logger(__name__, correlation_id, "event_source")
        self.bytes_read = 0
        self._stream: Optional[IO] = None
        self._exit_stack = ExitStack()

    def __enter__(self) -> "XMLEventSource":
        self._stream = self._open()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType]
    ) -> None:
        self._exit_stack.close()
        self._stream = None

    def _open(self) -> IO:
        source = self.source
        if isinstance(source, (bytes, bytearray)):
            return io.BytesIO(bytes(source))
        if isinstance(source, str):
            # Encoded chunk by chunk in __iter__, inside the parse
            return io.StringIO(source)
        if isinstance(source, Path):
            self.logger.debug("Opening source file", extra={"path": str(source)})
            return self._exit_stack.enter_context(source.open("rb"))
        if hasattr(source, "read"):
            return source
        raise TypeError(f"Unsupported XML source type: {type(source).__name__}")

    def _new_parser(self, target: _EventCollector) -> etree.XMLParser:
        return etree.XMLParser(
            target=target,
            encoding=self.config.encoding,
            resolve_entities=self.config.resolve_entities,
            no_network=True,
        )

    def __iter__(self) -> Iterator[ParseEvent]:
        if self._stream is None:
            raise XMLTreeError("XMLEventSource must be entered before iterating")

        collector = _EventCollector(self.config.local_names)
        parser = self._new_parser(collector)

        while True:
            chunk = self._stream.read(self.config.chunk_size)
            if not chunk:
                break
            if isinstance(chunk, str):
                chunk = chunk.encode(self.config.encoding)
            self.bytes_read += len(chunk)
            try:
                parser.feed(chunk)
            except etree.XMLSyntaxError:
                # Events seen before the error still reach the consumer
                yield from collector.drain()
                raise
            yield from collector.drain()

        # Raises XMLSyntaxError for empty or truncated documents
        try:
            parser.close()
        except etree.XMLSyntaxError:
            yield from collector.drain()
            raise
        yield from collector.drain()

        if not collector.elements_seen:
            raise XMLTreeError("Document has no root element")
        yield ParseEvent.end_document()
