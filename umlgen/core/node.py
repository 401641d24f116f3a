"""
Diagram node representation module.

This module defines the Node class, which represents classes,
interfaces and enumerations drawn on a class diagram, together with
the members they declare.
"""

from dataclasses import dataclass, field
from typing import Optional

from umlgen.core.enums import NodeKind, Visibility


@dataclass
class Attribute:
    """An attribute declared on a diagram node."""

    id: str
    name: str
    type: str = "String"
    visibility: Visibility = Visibility.PRIVATE
    is_static: bool = False
    is_final: bool = False
    default_value: Optional[str] = None


@dataclass
class Parameter:
    """A method parameter."""

    name: str
    type: str = "String"
    default_value: Optional[str] = None


@dataclass
class Method:
    """A method declared on a diagram node."""

    id: str
    name: str
    return_type: str = "void"
    parameters: list[Parameter] = field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    is_abstract: bool = False


@dataclass
class EnumValue:
    """A literal of an enumeration node."""

    name: str
    value: Optional[str] = None


class Node:
    """
    Represents an element of the class diagram.

    A node is a class, interface or enumeration. It owns its members but
    never holds references to relationships: edges live in the diagram's
    ordered relationship list and refer to nodes by id only.
    """

    def __init__(
        self,
        node_id: str,
        label: str,
        kind: NodeKind = NodeKind.CLASS,
        class_name: Optional[str] = None,
        is_abstract: bool = False,
    ):
        """
        Initialize a new Node.

        Args:
            node_id: Stable identifier, unique within a diagram
            label: Display name as typed in the editor
            kind: Node kind (class, interface, enum)
            class_name: Sanitized identifier; defaults to the label
            is_abstract: Whether the class was declared abstract
        """
        self.id = node_id
        self.label = label
        self.kind = kind
        self.class_name = class_name or label
        self.is_abstract = is_abstract
        self.attributes: list[Attribute] = []
        self.methods: list[Method] = []
        self.enum_values: list[EnumValue] = []

    def add_attribute(self, attribute: Attribute) -> None:
        """Append an attribute, keeping declaration order."""
        self.attributes.append(attribute)

    def add_method(self, method: Method) -> None:
        """Append a method, keeping declaration order."""
        self.methods.append(method)

    def add_enum_value(self, value: EnumValue) -> None:
        """
        Add an enumeration literal to this node.

        Args:
            value: Literal to add; duplicates by name are ignored
        """
        if all(existing.name != value.name for existing in self.enum_values):
            self.enum_values.append(value)

    @property
    def is_class(self) -> bool:
        return self.kind == NodeKind.CLASS

    @property
    def is_interface(self) -> bool:
        return self.kind == NodeKind.INTERFACE

    @property
    def is_enumeration(self) -> bool:
        return self.kind == NodeKind.ENUM

    def __repr__(self) -> str:
        return f"Node({self.id!r}, {self.class_name!r}, {self.kind.value})"
