"""
Enumeration types used in code generation.

This module defines the closed variants that the graph extractor resolves
raw diagram tokens into, plus the categorical values produced by the
relationship classifier and the descriptor builders.
"""

from enum import Enum


class NodeKind(Enum):
    """Kinds of diagram nodes."""
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"


class RelationshipType(Enum):
    """
    Enumeration of relationship types between diagram nodes.

    These are the standard UML class diagram relationships. INHERITANCE
    edges point from subclass to superclass and REALIZATION edges from the
    implementing class to the interface.
    """
    ASSOCIATION = "association"
    AGGREGATION = "aggregation"
    COMPOSITION = "composition"
    INHERITANCE = "inheritance"
    REALIZATION = "realization"
    DEPENDENCY = "dependency"


class Visibility(Enum):
    """Member visibility."""
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    PACKAGE = "package"


class Cardinality(Enum):
    """ORM cardinality of a relationship, seen from one of its ends."""
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_ONE = "many-to-one"
    MANY_TO_MANY = "many-to-many"

    def reversed(self) -> "Cardinality":
        """Return the cardinality as seen from the opposite end."""
        if self is Cardinality.ONE_TO_MANY:
            return Cardinality.MANY_TO_ONE
        if self is Cardinality.MANY_TO_ONE:
            return Cardinality.ONE_TO_MANY
        return self


class Containment(Enum):
    """Lifecycle coupling between the two ends of a relationship."""
    NONE = "none"
    AGGREGATE = "aggregate"
    COMPOSE = "compose"


class DescriptorKind(Enum):
    """Kinds of generated class descriptors."""
    ENTITY = "entity"
    DTO = "dto"
    REPOSITORY = "repository"
    SERVICE = "service"
    CONTROLLER = "controller"
    INTERFACE = "interface"
    ENUM = "enum"
