"""Exception hierarchy for slim-xml."""


class SlimXMLError(Exception):
    """Base exception for all slim-xml errors."""


class DetachedNodeError(SlimXMLError, LookupError):
    """Raised when a node handle refers to a node that was removed."""

    def __init__(self, node_id: int) -> None:
        super().__init__(f"Node {node_id} is no longer part of its document")
        self.node_id = node_id
