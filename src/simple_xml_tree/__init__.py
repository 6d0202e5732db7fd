"""Simple XML Tree.

An in-memory XML node tree with default-valued navigation: parse a document
into XMLNode objects, read optional children and attributes without checking
for None, and serialize the tree back to XML text.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), to_string()
- Level 2: XMLNode methods - XMLNode.parse(), XMLNode.to_string()
- Level 3: Collaborators - NodeTreeBuilder, XMLEventSource, XMLTextWriter
"""

__version__ = "0.1.0"
__author__ = "Simple XML Tree Team"

from .api import load, parse, parse_file, parse_string, to_string
from .serialization import NodeSerializer, XMLTextWriter
from .shared import (
    InvalidOperationError,
    ParseConfig,
    SerializeConfig,
    TreeConfig,
    XMLTreeError,
)
from .tokenization import XMLEventSource
from .tree import NodeTreeBuilder, XMLNode

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "load",
    "parse",
    "parse_string",
    "parse_file",
    "to_string",

    # Level 2: Tree entity
    "XMLNode",

    # Level 3: Collaborators
    "NodeTreeBuilder",
    "NodeSerializer",
    "XMLEventSource",
    "XMLTextWriter",

    # Configuration and errors
    "ParseConfig",
    "SerializeConfig",
    "TreeConfig",
    "InvalidOperationError",
    "XMLTreeError",
]
