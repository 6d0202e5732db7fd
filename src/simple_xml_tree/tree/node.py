"""XML node entity with default-valued navigation.

XMLNode is the single entity of the tree: a name, a text value, an attribute
map, ordered children, and a back-reference to the parent. Lookups never
return None. A lookup that finds nothing returns a fresh node that is not
present, and that node answers every further read with defaults, so chains
such as ``root.get_child("a").get_child("b").get_attribute_as_int("n")`` are
always safe.
"""

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Tuple, Union

from simple_xml_tree.serialization.serializer import node_to_string, serialize
from simple_xml_tree.shared import (
    InvalidOperationError,
    ParseOptions,
    SerializeOptions,
)
from simple_xml_tree.tree.builder import parse_into

if TYPE_CHECKING:
    from simple_xml_tree.serialization.writer import XMLTextWriter
    from simple_xml_tree.tokenization import SourceType

# Optional sign followed by ASCII digits; anything else parses to 0
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN, _INT_MAX = -(2 ** 31), 2 ** 31 - 1
_LONG_MIN, _LONG_MAX = -(2 ** 63), 2 ** 63 - 1


def _parse_integer(text: Optional[str], low: int, high: int) -> int:
    if text is None or not _INTEGER_PATTERN.fullmatch(text):
        return 0
    number = int(text)
    if not low <= number <= high:
        return 0
    return number


def _parse_bool(text: Optional[str]) -> bool:
    return text is not None and text.lower() == "true"


def _require_str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a string, got {type(value).__name__}")
    return value


class XMLNode:
    """A single element of an XML document tree.

    A node is *present* once it is a member of a tree: when it has been
    attached as a child, when it has received a child of its own, or when it
    is the root of a successful parse. Fresh nodes and the default nodes
    returned by failed lookups are not present.

    Children are addressable by name through an index that records only the
    first child with each name. Later siblings sharing that name are reached
    through ``get_children()`` or ``get_child(index)``.

    Examples:
        >>> root = XMLNode.from_string('<a id="1"><b>hello</b></a>')
        >>> root.get_child_value("b")
        'hello'
        >>> root.get_attribute_as_int("id")
        1
        >>> root.get_child("missing").get_child("deeper").is_present()
        False
    """

    def __init__(self, name: str = "", value: str = "") -> None:
        self._name = _require_str(name, "Node name")
        self._value = _require_str(value, "Node value")
        self._attributes: Dict[str, str] = {}
        self._children: List["XMLNode"] = []
        self._child_index: Dict[str, int] = {}
        self._parent: Optional["XMLNode"] = None
        self._present = False

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        config: Optional[ParseOptions] = None,
        correlation_id: Optional[str] = None
    ) -> "XMLNode":
        """Parse a file into a new node.

        The node is returned whatever the outcome; a failed parse leaves it
        partially built or not present.
        """
        node = cls()
        node.parse(Path(path), config, correlation_id)
        return node

    @classmethod
    def from_string(
        cls,
        text: Union[str, bytes],
        config: Optional[ParseOptions] = None,
        correlation_id: Optional[str] = None
    ) -> "XMLNode":
        """Parse XML text into a new node (see ``from_file``)."""
        node = cls()
        node.parse(text, config, correlation_id)
        return node

    # Name, value, presence

    def get_name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        """Set the tag name.

        Renaming a node that is already attached does not update its
        parent's child index.
        """
        self._name = _require_str(name, "Node name")

    def get_value(self) -> str:
        return self._value

    def set_value(self, value: str) -> None:
        self._value = _require_str(value, "Node value")

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self.set_name(name)

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: str) -> None:
        self.set_value(value)

    def is_present(self) -> bool:
        """Check whether this node is a member of a tree."""
        return self._present

    # Attributes

    def set_attribute(self, key: str, value: str) -> None:
        """Set attribute value, replacing any previous value."""
        self._attributes[_require_str(key, "Attribute name")] = _require_str(
            value, "Attribute value"
        )

    def remove_attribute(self, key: str) -> None:
        """Remove attribute if it exists."""
        self._attributes.pop(key, None)

    def has_attribute(self, key: str) -> bool:
        return key in self._attributes

    def get_attributes(self) -> Dict[str, str]:
        """Get a copy of the attribute map."""
        return dict(self._attributes)

    def get_attribute(self, key: str, default: str = "") -> str:
        """Get attribute value, or ``default`` when the attribute is missing."""
        return self._attributes.get(key, default)

    def get_attribute_as_int(self, key: str) -> int:
        """Get attribute as a 32-bit integer, 0 when missing or malformed."""
        return _parse_integer(self._attributes.get(key), _INT_MIN, _INT_MAX)

    def get_attribute_as_long(self, key: str) -> int:
        """Get attribute as a 64-bit integer, 0 when missing or malformed."""
        return _parse_integer(self._attributes.get(key), _LONG_MIN, _LONG_MAX)

    def get_attribute_as_bool(self, key: str) -> bool:
        """True only when the attribute equals "true", ignoring case."""
        return _parse_bool(self._attributes.get(key))

    # Tree structure

    def get_parent(self) -> Optional["XMLNode"]:
        return self._parent

    @property
    def parent(self) -> Optional["XMLNode"]:
        return self._parent

    def set_parent(self, parent: Optional["XMLNode"]) -> None:
        """Attach this node to ``parent``, or detach it when ``parent`` is None."""
        if parent is not None:
            parent.add_child(self)
        elif self._parent is not None:
            self._parent._detach_child(self)

    def add_child(self, child: Union["XMLNode", str], value: str = "") -> "XMLNode":
        """Append a child and return it.

        Accepts either a node or a name; a name builds a new node carrying
        ``value``. Both the child and this node become present. The child is
        added to the name index only when no earlier child has the same name.
        A child that already has a parent is moved here.

        Raises:
            InvalidOperationError: If the child is this node or an ancestor
            TypeError: If child is neither an XMLNode nor a str
        """
        if isinstance(child, str):
            child = self.__class__(child, value)
        elif not isinstance(child, XMLNode):
            raise TypeError("Child must be an XMLNode instance or a node name")

        ancestor: Optional[XMLNode] = self
        while ancestor is not None:
            if ancestor is child:
                raise InvalidOperationError(
                    f"Cannot attach <{child._name}> to itself or to one of its descendants"
                )
            ancestor = ancestor._parent

        if child._parent is not None:
            child._parent._detach_child(child)

        child._parent = self
        self._children.append(child)
        child._present = True
        self._present = True
        if child._name not in self._child_index:
            self._child_index[child._name] = len(self._children) - 1
        return child

    def _detach_child(self, child: "XMLNode") -> None:
        self._children.remove(child)
        child._parent = None
        child._present = False

        self._child_index.clear()
        for position, sibling in enumerate(self._children):
            self._child_index.setdefault(sibling._name, position)

    def has_children(self) -> bool:
        return bool(self._children)

    def get_children(self) -> Tuple["XMLNode", ...]:
        """Get all children in document order."""
        return tuple(self._children)

    def get_children_count(self) -> int:
        return len(self._children)

    def child_exists(self, name: str) -> bool:
        """Check whether a direct child with this name exists."""
        return name in self._child_index

    def get_child(self, key: Union[str, int]) -> "XMLNode":
        """Get a direct child by name or by position.

        By name, returns the first child with that name, or a not-present
        default node when there is none. By position, the index must be in
        range.

        Raises:
            IndexError: If an integer position is out of range
            TypeError: If key is a bool
        """
        if isinstance(key, bool):
            raise TypeError("Child key must be a name or an integer position, got bool")
        if isinstance(key, int):
            if not 0 <= key < len(self._children):
                raise IndexError("Child index out of range")
            return self._children[key]

        position = self._child_index.get(key)
        if position is None:
            return self.__class__()
        return self._children[position]

    def get_child_value(self, name: str) -> str:
        return self.get_child(name).get_value()

    def get_child_value_as_int(self, name: str) -> int:
        return _parse_integer(self.get_child_value(name), _INT_MIN, _INT_MAX)

    def get_child_value_as_long(self, name: str) -> int:
        return _parse_integer(self.get_child_value(name), _LONG_MIN, _LONG_MAX)

    def get_child_value_as_bool(self, name: str) -> bool:
        return _parse_bool(self.get_child_value(name))

    def find_node(self, name: str) -> "XMLNode":
        """Find a node by name anywhere below this node.

        A direct child always wins. Otherwise children are searched in order
        and the first match inside an earlier child's subtree is returned.
        The search keeps its own stack, so nesting depth is not limited by
        the interpreter's recursion limit.

        Returns:
            The matching node, or a not-present default node
        """
        pending: List["XMLNode"] = [self]
        while pending:
            node = pending.pop()
            position = node._child_index.get(name)
            if position is not None:
                return node._children[position]
            pending.extend(
                child for child in reversed(node._children) if child._children
            )

        return self.__class__()

    def iter_nodes(self) -> Iterator["XMLNode"]:
        """Iterate over this node and all descendants in document order."""
        pending: List["XMLNode"] = [self]
        while pending:
            node = pending.pop()
            yield node
            pending.extend(reversed(node._children))

    # Parsing and serialization

    def parse(
        self,
        source: "SourceType",
        config: Optional[ParseOptions] = None,
        correlation_id: Optional[str] = None
    ) -> bool:
        """Parse ``source`` into this node.

        The outermost element of the document becomes this node. On failure
        the tree keeps whatever was built before the error.

        Args:
            source: Bytes, XML text, a Path, or a binary stream
            config: Optional ParseConfig or TreeConfig
            correlation_id: Optional correlation ID for request tracking

        Returns:
            True if the whole document was read, False otherwise
        """
        return parse_into(self, source, config, correlation_id)

    def serialize(self, writer: "XMLTextWriter") -> bool:
        """Write this subtree to ``writer``; False if the writer failed."""
        return serialize(self, writer)

    def to_string(self, config: Optional[SerializeOptions] = None) -> str:
        """Serialize this subtree to XML text, or "" on failure."""
        return node_to_string(self, config)

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary representation.

        Mirrors what serialization writes: ``value`` appears only for nodes
        without children.
        """
        result: Dict[str, Any] = {}
        # (node, dict to fill)
        pending: List[Tuple["XMLNode", Dict[str, Any]]] = [(self, result)]
        while pending:
            node, entry = pending.pop()
            entry["name"] = node._name
            entry["attributes"] = dict(node._attributes)
            if node._children:
                entry["children"] = [{} for _ in node._children]
                pending.extend(zip(node._children, entry["children"]))
            else:
                entry["value"] = node._value
        return result

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self._name!r}, "
            f"children={len(self._children)}, present={self._present})"
        )
