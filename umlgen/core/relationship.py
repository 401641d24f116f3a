"""
Relationship representation module.

This module defines the Relationship class, which represents a typed,
multiplicity-annotated edge between two diagram nodes.
"""

from typing import Optional

from umlgen.core.enums import RelationshipType


class Relationship:
    """
    Represents a relationship between two diagram nodes.

    Relationships reference their endpoints by node id. The position of
    a relationship in the diagram's edge sequence is part of its identity
    for code generation: it breaks ownership ties between mirrored
    one-to-one edges.
    """

    def __init__(
        self,
        relationship_id: str,
        source_id: str,
        target_id: str,
        relationship_type: RelationshipType,
        source_multiplicity: str = "",
        target_multiplicity: str = "",
        source_label: Optional[str] = None,
        target_label: Optional[str] = None,
        position: int = 0,
    ):
        """
        Initialize a new relationship between diagram nodes.

        Args:
            relationship_id: Unique identifier for this relationship
            source_id: ID of the source node
            target_id: ID of the target node
            relationship_type: Type of relationship
            source_multiplicity: Multiplicity token at the source end
            target_multiplicity: Multiplicity token at the target end
            source_label: Role name of the source end (names the field
                          the target holds)
            target_label: Role name of the target end (names the field
                          the source holds)
            position: Index of this edge in the ordered edge sequence
        """
        self.id = relationship_id
        self.source_id = source_id
        self.target_id = target_id
        self.relationship_type = relationship_type
        self.source_multiplicity = source_multiplicity
        self.target_multiplicity = target_multiplicity
        self.source_label = source_label
        self.target_label = target_label
        self.position = position

    def set_multiplicity(self, source_mult: str, target_mult: str) -> None:
        """
        Set multiplicity constraints for this relationship.

        Args:
            source_mult: Multiplicity at the source end (e.g., "1", "0..*")
            target_mult: Multiplicity at the target end
        """
        self.source_multiplicity = source_mult
        self.target_multiplicity = target_mult

    def is_inheritance(self) -> bool:
        """Check if this relationship represents inheritance."""
        return self.relationship_type == RelationshipType.INHERITANCE

    def is_realization(self) -> bool:
        """Check if this relationship represents interface realization."""
        return self.relationship_type == RelationshipType.REALIZATION

    def is_composition(self) -> bool:
        """Check if this relationship represents composition."""
        return self.relationship_type == RelationshipType.COMPOSITION

    def is_dependency(self) -> bool:
        """Check if this relationship represents a dependency."""
        return self.relationship_type == RelationshipType.DEPENDENCY

    def is_structural(self) -> bool:
        """Check if this relationship maps to a persisted reference."""
        return self.relationship_type in (
            RelationshipType.ASSOCIATION,
            RelationshipType.AGGREGATION,
            RelationshipType.COMPOSITION,
        )

    def is_self_reference(self) -> bool:
        return self.source_id == self.target_id

    def mirrors(self, other: "Relationship") -> bool:
        """
        Check if another relationship is the reverse declaration of this one.

        Args:
            other: Relationship to compare with

        Returns:
            True if both have the same type and swapped endpoints
        """
        return (
            other.relationship_type == self.relationship_type
            and other.source_id == self.target_id
            and other.target_id == self.source_id
        )

    def __repr__(self) -> str:
        return (
            f"Relationship({self.id!r}, {self.source_id!r} -> {self.target_id!r}, "
            f"{self.relationship_type.value}, "
            f"{self.source_multiplicity!r}:{self.target_multiplicity!r})"
        )
