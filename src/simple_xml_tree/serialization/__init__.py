"""Serialization of node trees to XML text.

Key Components:
    XMLTextWriter: lxml-backed writer receiving start/attribute/text/end calls
    NodeSerializer: Pre-order traversal emitting a tree onto a writer
"""

from .serializer import NodeSerializer, node_to_string, serialize
from .writer import XMLTextWriter

__all__ = [
    "NodeSerializer",
    "XMLTextWriter",
    "node_to_string",
    "serialize",
]
