"""Module-level parsing API.

Thin functions over XMLNode for callers who prefer not to construct a node
first. Every function returns a node, never None; callers check
``is_present()`` or use ``load`` when they need the success flag.
"""

from pathlib import Path
from typing import Optional, Tuple, Union

from simple_xml_tree.shared import ParseOptions, SerializeOptions, get_logger
from simple_xml_tree.tokenization import SourceType
from simple_xml_tree.tree import XMLNode


def load(
    source: SourceType,
    config: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None
) -> Tuple[bool, XMLNode]:
    """Parse ``source`` into a new node and report the outcome.

    Examples:
        >>> ok, root = load(b'<config><debug>true</debug></config>')
        >>> ok, root.get_child_value_as_bool("debug")
        (True, True)
    """
    root = XMLNode()
    success = root.parse(source, config, correlation_id)
    if not success:
        get_logger(__name__, correlation_id, "load").warning(
            "Document could not be parsed completely",
            extra={"source_type": type(source).__name__}
        )
    return success, root


def parse(
    source: SourceType,
    config: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None
) -> XMLNode:
    """Parse bytes, XML text, a Path, or a binary stream into a new node."""
    return load(source, config, correlation_id)[1]


def parse_string(
    xml_string: Union[str, bytes],
    config: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None
) -> XMLNode:
    """Parse XML text into a new node."""
    return XMLNode.from_string(xml_string, config, correlation_id)


def parse_file(
    file_path: Union[str, Path],
    config: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None
) -> XMLNode:
    """Parse the file at ``file_path`` into a new node.

    A missing or unreadable file yields a not-present node.
    """
    return XMLNode.from_file(file_path, config, correlation_id)


def to_string(node: XMLNode, config: Optional[SerializeOptions] = None) -> str:
    """Serialize ``node`` to XML text, or "" on failure."""
    return node.to_string(config)
