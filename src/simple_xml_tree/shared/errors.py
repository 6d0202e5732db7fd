"""Exception types raised by the XML tree components."""


class XMLTreeError(Exception):
    """Base exception for XML tree errors."""


class InvalidOperationError(XMLTreeError):
    """Raised when an operation would break the tree invariants.

    Attaching a node to itself or to one of its own descendants would create
    a cycle, which has no sensible recovery.
    """


class MalformedNestingError(XMLTreeError):
    """Raised by the tree builder when events continue past the root end tag."""


class WriterStateError(XMLTreeError):
    """Raised when text writer calls arrive in an order that cannot be written."""
