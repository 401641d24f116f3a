"""
Core code generation components.

This package contains the foundational data structures: the diagram
arena (nodes and ordered relationships), the closed enumerations resolved
at extraction time, the diagnostics list and the class descriptors the
engine produces.
"""

from umlgen.core.enums import (
    Cardinality,
    Containment,
    DescriptorKind,
    NodeKind,
    RelationshipType,
    Visibility,
)
from umlgen.core.node import Attribute, EnumValue, Method, Node, Parameter
from umlgen.core.relationship import Relationship
from umlgen.core.diagram import Diagram
from umlgen.core.diagnostics import Diagnostic, DiagnosticCode, DiagnosticLog, Severity
from umlgen.core.descriptors import (
    ClassDescriptor,
    FieldDescriptor,
    ForeignKeyResolution,
    MethodDescriptor,
    ParameterDescriptor,
    RelationMeta,
)

__all__ = [
    'Cardinality',
    'Containment',
    'DescriptorKind',
    'NodeKind',
    'RelationshipType',
    'Visibility',
    'Attribute',
    'EnumValue',
    'Method',
    'Node',
    'Parameter',
    'Relationship',
    'Diagram',
    'Diagnostic',
    'DiagnosticCode',
    'DiagnosticLog',
    'Severity',
    'ClassDescriptor',
    'FieldDescriptor',
    'ForeignKeyResolution',
    'MethodDescriptor',
    'ParameterDescriptor',
    'RelationMeta',
]
