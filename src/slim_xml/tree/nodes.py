"""Document tree data model.

Nodes of a document live in a :class:`NodeArena` keyed by integer ids that
are never reused. Each record owns its attribute list and the ordered ids of
its children; removing a node deletes the ids of its whole subtree from the
arena. :class:`XMLNode` is a lightweight handle onto one record, so handles
can be created freely and compare equal when they refer to the same node.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence

from slim_xml.shared.errors import DetachedNodeError
from slim_xml.tree.values import (
    TypedValue,
    ValueHolder,
    ValueKind,
    format_value,
    kind_of,
    parse_hex,
    parse_int,
    parse_value,
)


class NodeType(Enum):
    """Kinds of node; fixed when the node is created."""

    DOCUMENT = 0
    ELEMENT = 1
    COMMENT = 2
    DECLARATION = 3


_NO_ATTRIBUTES = (NodeType.DOCUMENT, NodeType.COMMENT)


def _text(value: Optional[str], field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string, got {type(value).__name__}")
    return value


def _checked_name(name: str, node_type: NodeType) -> str:
    if name and node_type is NodeType.COMMENT:
        raise ValueError("Comment nodes cannot have a name")
    return name


class XMLAttribute(ValueHolder):
    """A name/value pair owned by exactly one element."""

    __slots__ = ("_name", "_value")

    def __init__(self, name: Optional[str] = "", value: Optional[str] = "") -> None:
        self._name = _text(name, "Attribute name")
        self._value = _text(value, "Attribute value")

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: Optional[str]) -> None:
        self._name = _text(name, "Attribute name")

    @property
    def value(self) -> str:  # type: ignore[override]
        return self._value

    @value.setter
    def value(self, value: Optional[str]) -> None:
        self._value = _text(value, "Attribute value")

    def __repr__(self) -> str:
        return f"XMLAttribute(name={self._name!r}, value={self._value!r})"


@dataclass
class NodeRecord:
    """Storage for one node inside an arena."""

    node_type: NodeType
    parent: Optional[int]
    name: str = ""
    value: str = ""
    children: List[int] = field(default_factory=list)
    attributes: List[XMLAttribute] = field(default_factory=list)


class NodeArena:
    """Owns every node record of one document."""

    def __init__(self) -> None:
        self._records: Dict[int, NodeRecord] = {}
        self._next_id = 0
        self.root_handle: Optional["XMLNode"] = None

    def allocate(self, node_type: NodeType, parent: Optional[int], name: str = "") -> int:
        """Create a record and return its id; the caller links it to the parent."""
        node_id = self._next_id
        self._next_id += 1
        self._records[node_id] = NodeRecord(node_type=node_type, parent=parent, name=name)
        return node_id

    def record(self, node_id: int) -> NodeRecord:
        """Get the record for ``node_id``.

        Raises:
            DetachedNodeError: If the node has been removed
        """
        try:
            return self._records[node_id]
        except KeyError:
            raise DetachedNodeError(node_id) from None

    def release(self, node_id: int) -> int:
        """Delete a node and its whole subtree; returns the number of records freed."""
        freed = 0
        pending = [node_id]
        while pending:
            record = self._records.pop(pending.pop(), None)
            if record is None:
                continue
            freed += 1
            pending.extend(record.children)
            record.children.clear()
            record.attributes.clear()
        return freed

    def handle(self, node_id: int) -> "XMLNode":
        """Return a handle for ``node_id``; the root maps to its registered handle."""
        root = self.root_handle
        if root is not None and root.node_id == node_id:
            return root
        return XMLNode(self, node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._records

    def __len__(self) -> int:
        return len(self._records)


class XMLNode(ValueHolder):
    """Handle onto one node of a document tree."""

    __slots__ = ("_arena", "_node_id")

    def __init__(self, arena: NodeArena, node_id: int) -> None:
        self._arena = arena
        self._node_id = node_id

    @property
    def _record(self) -> NodeRecord:
        return self._arena.record(self._node_id)

    @property
    def node_id(self) -> int:
        return self._node_id

    @property
    def is_alive(self) -> bool:
        """Whether the node is still part of its document."""
        return self._node_id in self._arena

    @property
    def node_type(self) -> NodeType:
        return self._record.node_type

    @property
    def name(self) -> str:
        return self._record.name

    @name.setter
    def name(self, name: Optional[str]) -> None:
        record = self._record
        record.name = _checked_name(_text(name, "Node name"), record.node_type)

    @property
    def value(self) -> str:  # type: ignore[override]
        return self._record.value

    @value.setter
    def value(self, value: Optional[str]) -> None:
        self._record.value = _text(value, "Node value")

    @property
    def parent(self) -> Optional["XMLNode"]:
        parent_id = self._record.parent
        return None if parent_id is None else self._arena.handle(parent_id)

    @property
    def depth(self) -> int:
        """Number of ancestors above this node (the document root is 0)."""
        depth = 0
        parent_id = self._record.parent
        while parent_id is not None:
            depth += 1
            parent_id = self._arena.record(parent_id).parent
        return depth

    def is_empty(self) -> bool:
        """True when the node has neither children nor a value."""
        record = self._record
        return not record.children and not record.value

    # Children

    def has_child(self) -> bool:
        return bool(self._record.children)

    @property
    def children(self) -> List["XMLNode"]:
        """Snapshot of the children in insertion order."""
        return list(self.iter_children())

    def iter_children(self) -> Iterator["XMLNode"]:
        """Iterate children in insertion order.

        Iterates over a snapshot, so children may be removed while iterating.
        """
        for child_id in tuple(self._record.children):
            if child_id in self._arena:
                yield self._arena.handle(child_id)

    def get_child(self, index: int) -> Optional["XMLNode"]:
        """Child at ``index``, or None when out of range."""
        children = self._record.children
        if -len(children) <= index < len(children):
            return self._arena.handle(children[index])
        return None

    def child_count(self, name: Optional[str] = None) -> int:
        """Number of children, or of children called ``name``."""
        if name is None:
            return len(self._record.children)
        return sum(1 for _ in self.find_children(name))

    def find_child(self, name: str) -> Optional["XMLNode"]:
        """First child called ``name``, or None."""
        return next(self.find_children(name), None)

    def find_children(self, name: str) -> Iterator["XMLNode"]:
        """Iterate the children called ``name`` in insertion order."""
        arena = self._arena
        for child_id in tuple(self._record.children):
            if child_id in arena and arena.record(child_id).name == name:
                yield arena.handle(child_id)

    def add_child(
        self, name: Optional[str] = "", node_type: NodeType = NodeType.ELEMENT
    ) -> "XMLNode":
        """Append a new child and return it."""
        if node_type is NodeType.DOCUMENT:
            raise ValueError("A document node cannot be added as a child")
        record = self._record
        name = _checked_name(_text(name, "Node name"), node_type)
        child_id = self._arena.allocate(node_type, self._node_id, name)
        record.children.append(child_id)
        return self._arena.handle(child_id)

    def remove_child(self, node: "XMLNode") -> bool:
        """Remove ``node`` and its subtree; returns False if it is not a child."""
        if not isinstance(node, XMLNode) or node._arena is not self._arena:
            return False
        children = self._record.children
        if node.node_id not in children:
            return False
        children.remove(node.node_id)
        self._arena.release(node.node_id)
        return True

    def clear_children(self) -> None:
        """Remove every child and its subtree."""
        children = self._record.children
        while children:
            self._arena.release(children.pop())

    def iter_descendants(self) -> Iterator["XMLNode"]:
        """Iterate all descendants in document (pre-)order, at any depth."""
        pending = self.children[::-1]
        while pending:
            node = pending.pop()
            if not node.is_alive:
                continue
            yield node
            if node.is_alive:
                pending.extend(node.children[::-1])

    # Attributes

    def has_attribute(self, name: Optional[str] = None) -> bool:
        """Whether the node has any attribute, or one called ``name``."""
        if name is None:
            return bool(self._record.attributes)
        return self.find_attribute(name) is not None

    @property
    def attributes(self) -> List[XMLAttribute]:
        """Snapshot of the attributes in source order."""
        return list(self._record.attributes)

    def iter_attributes(self) -> Iterator[XMLAttribute]:
        return iter(tuple(self._record.attributes))

    def attribute_count(self) -> int:
        return len(self._record.attributes)

    def find_attribute(self, name: str) -> Optional[XMLAttribute]:
        """First attribute called ``name``, or None."""
        for attribute in self._record.attributes:
            if attribute.name == name:
                return attribute
        return None

    def add_attribute(
        self, name: Optional[str] = "", value: Optional[TypedValue] = ""
    ) -> XMLAttribute:
        """Append an attribute; typed values are formatted as text.

        Raises:
            ValueError: On comment and document nodes, which cannot carry
                attributes in markup
        """
        record = self._record
        if record.node_type in _NO_ATTRIBUTES:
            raise ValueError(
                f"{record.node_type.name.capitalize()} nodes cannot have attributes"
            )
        text = "" if value is None else format_value(value)
        attribute = XMLAttribute(name, text)
        record.attributes.append(attribute)
        return attribute

    def remove_attribute(self, attribute: XMLAttribute) -> bool:
        """Remove ``attribute``; returns False if this node does not own it."""
        attributes = self._record.attributes
        for index, owned in enumerate(attributes):
            if owned is attribute:
                del attributes[index]
                return True
        return False

    def clear_attributes(self) -> None:
        self._record.attributes.clear()

    def read_attribute(
        self, name: str, default: TypedValue, kind: Optional[ValueKind] = None
    ) -> TypedValue:
        """Read an attribute as the kind of ``default`` (or ``kind``).

        Returns ``default`` when the attribute is missing.
        """
        attribute = self.find_attribute(name)
        if attribute is None:
            return default
        return parse_value(attribute.value, kind or kind_of(default))

    def read_attribute_as_hex(self, name: str, default: int = 0) -> int:
        attribute = self.find_attribute(name)
        if attribute is None:
            return default
        return parse_hex(attribute.value)

    def read_attribute_as_enum(
        self, name: str, names: Sequence[str], default: int = 0
    ) -> int:
        """Index of the attribute's text in ``names`` (exact match), else ``default``."""
        attribute = self.find_attribute(name)
        if attribute is None:
            return default
        for index, candidate in enumerate(names):
            if candidate == attribute.value:
                return index
        return default

    def read_attribute_as_int_array(
        self, name: str, length: int, default: int = 0
    ) -> List[int]:
        """Read up to ``length`` whitespace separated integers.

        Slots without a matching token are filled with ``default``.
        """
        if length < 0:
            raise ValueError("length must be >= 0")
        attribute = self.find_attribute(name)
        tokens = attribute.value.split()[:length] if attribute is not None else []
        values = [parse_int(token) for token in tokens]
        values.extend([default] * (length - len(values)))
        return values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, XMLNode):
            return NotImplemented
        return other._arena is self._arena and other._node_id == self._node_id

    def __hash__(self) -> int:
        return hash((id(self._arena), self._node_id))

    def __repr__(self) -> str:
        if not self.is_alive:
            return f"<{type(self).__name__} #{self._node_id} detached>"
        return f"<{type(self).__name__} {self.node_type.name} {self.name!r}>"
