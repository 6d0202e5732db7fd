"""Node tree and its event-driven builder.

Key Components:
    XMLNode: Tree entity with default-valued navigation and lookups
    NodeTreeBuilder: State machine building a tree from parse events
"""

from .builder import NodeTreeBuilder, parse_into
from .node import XMLNode

__all__ = [
    "NodeTreeBuilder",
    "XMLNode",
    "parse_into",
]
