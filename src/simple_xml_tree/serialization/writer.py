"""XML text writer built on ``lxml.etree.xmlfile``.

The serializer talks to a writer through five calls: start_tag, attribute,
text, end_tag and end_document. Attributes arrive one at a time after their
start tag, so the start tag is held back until the element's first content,
its end tag, or the next start tag.
"""

import io
from contextlib import ExitStack
from typing import Dict, List, Optional, Tuple

from lxml import etree

from simple_xml_tree.shared import SerializeConfig, WriterStateError


class XMLTextWriter:
    """Single-use writer producing an XML document in memory.

    lxml escapes text and attribute values and rejects invalid names.

    Example:
        >>> writer = XMLTextWriter()
        >>> writer.start_tag("a")
        >>> writer.attribute("id", "1")
        >>> writer.text("x < y")
        >>> writer.end_tag("a")
        >>> writer.end_document()
        >>> writer.getvalue()
        '<a id="1">x &lt; y</a>'
    """

    def __init__(self, config: Optional[SerializeConfig] = None) -> None:
        self.config = config or SerializeConfig()
        self._buffer = io.BytesIO()
        self._document = ExitStack()
        self._xf = self._document.enter_context(
            etree.xmlfile(self._buffer, encoding=self.config.encoding)
        )
        if self.config.xml_declaration:
            self._xf.write_declaration()

        # (name, element context) for every element written but not closed
        self._open_elements: List[Tuple[str, ExitStack]] = []
        self._pending: Optional[Tuple[str, Dict[str, str]]] = None
        self._finished = False

    def _check_writable(self) -> None:
        if self._finished:
            raise WriterStateError("Document already finished")

    def _flush_pending(self) -> None:
        if self._pending is None:
            return
        name, attributes = self._pending
        self._pending = None

        element = ExitStack()
        element.enter_context(self._xf.element(name, attributes))
        self._open_elements.append((name, element))

    def start_tag(self, name: str) -> None:
        self._check_writable()
        etree.QName(name)  # ValueError for names lxml cannot write
        self._flush_pending()
        self._pending = (name, {})

    def attribute(self, name: str, value: str) -> None:
        self._check_writable()
        if self._pending is None:
            raise WriterStateError(f"attribute {name!r} written outside a start tag")
        etree.QName(name)
        self._pending[1][name] = value

    def text(self, value: str) -> None:
        self._check_writable()
        self._flush_pending()
        if not self._open_elements:
            raise WriterStateError("text written outside an element")
        if value:
            self._xf.write(value)

    def end_tag(self, name: str) -> None:
        self._check_writable()
        self._flush_pending()
        if not self._open_elements or self._open_elements[-1][0] != name:
            raise WriterStateError(f"end tag </{name}> does not close the innermost element")
        _, element = self._open_elements.pop()
        element.close()

    def end_document(self) -> None:
        """Close every open element and flush the document."""
        if self._finished:
            return
        self._flush_pending()
        while self._open_elements:
            _, element = self._open_elements.pop()
            element.close()
        self._document.close()
        self._finished = True

    def close(self) -> None:
        """Release the lxml writer contexts without completing the document.

        A start tag still waiting for content is dropped. Elements already
        written get their end tags. Safe to call more than once and after
        ``end_document``.
        """
        if self._finished:
            return
        self._finished = True
        self._pending = None
        try:
            while self._open_elements:
                _, element = self._open_elements.pop()
                element.close()
        finally:
            self._document.close()

    def getvalue(self) -> str:
        """Finish the document if needed and return the written text."""
        self.end_document()
        return self._buffer.getvalue().decode(self.config.encoding)
