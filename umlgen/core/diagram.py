"""
Diagram container module.

This module defines the Diagram class, the flat, id-indexed container
for a class diagram snapshot: nodes keyed by id and relationships kept
in their original order.
"""

from typing import Dict, Iterator, List, Optional

from umlgen.core.enums import NodeKind, RelationshipType
from umlgen.core.node import Node
from umlgen.core.relationship import Relationship


class Diagram:
    """
    Container for a class diagram snapshot.

    Nodes and relationships are stored separately and linked by id only,
    so cyclic and bidirectional relationships never create ownership
    ambiguity. The relationship list is ordered; its order decides
    ownership ties and must not be treated as a set.
    """

    def __init__(self):
        """Initialize a new empty diagram."""
        self.nodes: Dict[str, Node] = {}
        self.relationships: List[Relationship] = []

    def add_node(self, node: Node) -> bool:
        """
        Add a node to the diagram.

        Args:
            node: The node to add

        Returns:
            True if added, False if a node with the same id already exists
        """
        if node.id in self.nodes:
            return False
        self.nodes[node.id] = node
        return True

    def add_relationship(self, relationship: Relationship) -> bool:
        """
        Append a relationship, stamping its position in the edge sequence.

        Args:
            relationship: The relationship to add

        Returns:
            True if added, False if an endpoint is not in the diagram
        """
        if relationship.source_id not in self.nodes or relationship.target_id not in self.nodes:
            return False

        relationship.position = len(self.relationships)
        self.relationships.append(relationship)
        return True

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def get_node_by_class_name(self, class_name: str) -> Optional[Node]:
        """
        Find a node by class name (case-insensitive).

        Args:
            class_name: The class name to search for

        Returns:
            The matching Node or None if not found
        """
        name_lower = class_name.lower()
        for node in self.nodes.values():
            if node.class_name.lower() == name_lower:
                return node
        return None

    def nodes_of_kind(self, kind: NodeKind) -> List[Node]:
        """Nodes of the given kind, in insertion order."""
        return [node for node in self.nodes.values() if node.kind == kind]

    def get_relationships_by_type(self, rel_type: RelationshipType) -> List[Relationship]:
        """
        Get relationships of a specific type, in edge order.

        Args:
            rel_type: The relationship type to filter by

        Returns:
            List of matching relationships
        """
        return [rel for rel in self.relationships if rel.relationship_type == rel_type]

    def relationships_from(self, node_id: str) -> Iterator[Relationship]:
        return (rel for rel in self.relationships if rel.source_id == node_id)

    def relationships_to(self, node_id: str) -> Iterator[Relationship]:
        return (rel for rel in self.relationships if rel.target_id == node_id)

    def get_inheritance_hierarchy(self) -> Dict[str, List[str]]:
        """
        Get the declared inheritance hierarchy.

        Returns:
            Dictionary mapping parent node IDs to lists of child node IDs
        """
        hierarchy: Dict[str, List[str]] = {}
        for rel in self.get_relationships_by_type(RelationshipType.INHERITANCE):
            hierarchy.setdefault(rel.target_id, []).append(rel.source_id)
        return hierarchy

    def __len__(self) -> int:
        return len(self.nodes)
