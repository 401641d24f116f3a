"""
Class descriptor module.

Descriptors are the engine's output: a structural description of every
class to generate, ready for a text emitter to render. They are built
fresh on every generation run and are not modified after being returned.
"""

from dataclasses import dataclass, field, fields as dataclass_fields, is_dataclass
from enum import Enum
from typing import Any, Optional

from umlgen.core.enums import (
    Cardinality,
    Containment,
    DescriptorKind,
    RelationshipType,
    Visibility,
)


@dataclass
class RelationMeta:
    """Relationship metadata carried by a relationship-derived field."""

    related_class_name: str
    cardinality: Cardinality
    owning_side: bool
    containment: Containment = Containment.NONE
    relationship_type: RelationshipType = RelationshipType.ASSOCIATION
    mapped_by: Optional[str] = None
    join_column: Optional[str] = None
    required: bool = False
    persistent: bool = True
    edge_id: Optional[str] = None


@dataclass
class FieldDescriptor:
    """A field of a generated class."""

    name: str
    type: str
    annotations: list[str] = field(default_factory=list)
    visibility: Visibility = Visibility.PRIVATE
    is_static: bool = False
    is_final: bool = False
    default_value: Optional[str] = None
    relation: Optional[RelationMeta] = None

    @property
    def is_relationship(self) -> bool:
        return self.relation is not None


@dataclass
class ParameterDescriptor:
    name: str
    type: str
    annotations: list[str] = field(default_factory=list)


@dataclass
class MethodDescriptor:
    """
    A method of a generated class.

    Signature-only methods (interfaces, abstract methods) have
    is_abstract set. `invokes` lists helper methods of the same class
    that the emitted body must call, in order.
    """

    name: str
    return_type: str = "void"
    parameters: list[ParameterDescriptor] = field(default_factory=list)
    annotations: list[str] = field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    is_abstract: bool = False
    throws: list[str] = field(default_factory=list)
    invokes: list[str] = field(default_factory=list)


@dataclass
class ForeignKeyResolution:
    """
    Conversion of a DTO foreign-key id into a related entity reference.

    The generated service looks the id up through `repository_field` and
    assigns the entity to `entity_field`; when the id does not resolve it
    raises `exception` with `not_found_message`.
    """

    fk_field: str
    entity_field: str
    related_class_name: str
    repository_field: str
    method_name: str
    required: bool = False
    exception: str = "EntityNotFoundException"
    not_found_message: str = ""


@dataclass
class ClassDescriptor:
    """A class to generate."""

    name: str
    kind: DescriptorKind
    package: str = ""
    fields: list[FieldDescriptor] = field(default_factory=list)
    methods: list[MethodDescriptor] = field(default_factory=list)
    annotations: list[str] = field(default_factory=list)
    superclass: Optional[str] = None
    interfaces: list[str] = field(default_factory=list)
    is_abstract: bool = False
    node_id: Optional[str] = None
    resolutions: list[ForeignKeyResolution] = field(default_factory=list)

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        for descriptor_field in self.fields:
            if descriptor_field.name == name:
                return descriptor_field
        return None

    def get_method(self, name: str) -> Optional[MethodDescriptor]:
        for method in self.methods:
            if method.name == name:
                return method
        return None

    def field_names(self) -> list[str]:
        return [descriptor_field.name for descriptor_field in self.fields]

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name


def to_serializable(value: Any) -> Any:
    """
    Convert descriptors (and nested enums) into JSON-compatible values.

    Args:
        value: Descriptor, dataclass, enum, list or primitive

    Returns:
        Plain dicts/lists/primitives
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_serializable(getattr(value, f.name)) for f in dataclass_fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_serializable(item) for item in value]
    if isinstance(value, dict):
        return {key: to_serializable(item) for key, item in value.items()}
    return value
