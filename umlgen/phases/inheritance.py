"""
Inheritance and realization resolution.

This module answers the hierarchy questions the descriptor builders ask:
which class a node extends, which interfaces it implements, and whether
it is the root of a hierarchy.
"""

import logging
from typing import Dict, List, Optional

from umlgen.core.diagnostics import Diagnostic, DiagnosticCode, DiagnosticLog
from umlgen.core.diagram import Diagram
from umlgen.core.node import Node
from umlgen.core.relationship import Relationship

logger = logging.getLogger(__name__)


class InheritanceResolver:
    """
    Resolves the class hierarchy of a diagram.

    All INHERITANCE and REALIZATION edges are read once, in edge order,
    when the resolver is created:
    - class -> class INHERITANCE sets the superclass. A class keeps its
      first superclass; edges that would give it a second one, point at
      the class itself, or close a cycle are ignored with a diagnostic.
    - class -> interface INHERITANCE counts as a realization.
    - interface -> interface INHERITANCE is an interface `extends`.
    - REALIZATION edges from a class to an interface add the interface.
      Realizations of non-interfaces are ignored (ModelValidator reports
      them).
    """

    def __init__(self, diagram: Diagram):
        """
        Initialize the resolver.

        Args:
            diagram: Diagram snapshot to resolve
        """
        self.diagram = diagram
        self._superclass: Dict[str, str] = {}
        self._interfaces: Dict[str, List[str]] = {}
        self._extended: Dict[str, List[str]] = {}
        self._log = DiagnosticLog()

        for relationship in diagram.relationships:
            if relationship.is_inheritance():
                self._add_inheritance(relationship)
            elif relationship.is_realization():
                self._add_realization(relationship)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._log.entries)

    def _add_inheritance(self, relationship: Relationship) -> None:
        source = self.diagram.get_node(relationship.source_id)
        target = self.diagram.get_node(relationship.target_id)
        if source is None or target is None:
            return

        if relationship.is_self_reference():
            self._log.add(
                DiagnosticCode.INHERITANCE_CYCLE,
                f"'{source.class_name}' cannot extend itself; edge '{relationship.id}' ignored",
                node_id=source.id,
                edge_id=relationship.id,
            )
            return

        if source.is_interface and target.is_interface:
            self._append_unique(self._extended, source.id, target.id)
            return

        if source.is_class and target.is_interface:
            self._append_unique(self._interfaces, source.id, target.id)
            return

        if not (source.is_class and target.is_class):
            self._log.add(
                DiagnosticCode.INVALID_RELATIONSHIP,
                f"'{source.class_name}' ({source.kind.value}) cannot extend "
                f"'{target.class_name}' ({target.kind.value}); edge '{relationship.id}' ignored",
                node_id=source.id,
                edge_id=relationship.id,
            )
            return

        if source.id in self._superclass:
            current = self.diagram.get_node(self._superclass[source.id])
            self._log.add(
                DiagnosticCode.MULTIPLE_SUPERCLASSES,
                f"'{source.class_name}' already extends '{current.class_name}'; "
                f"edge '{relationship.id}' to '{target.class_name}' ignored",
                node_id=source.id,
                edge_id=relationship.id,
            )
            return

        if source.id in self.ancestors(target.id):
            self._log.add(
                DiagnosticCode.INHERITANCE_CYCLE,
                f"'{source.class_name}' extending '{target.class_name}' would close an "
                f"inheritance cycle; edge '{relationship.id}' ignored",
                node_id=source.id,
                edge_id=relationship.id,
            )
            return

        self._superclass[source.id] = target.id

    def _add_realization(self, relationship: Relationship) -> None:
        source = self.diagram.get_node(relationship.source_id)
        target = self.diagram.get_node(relationship.target_id)
        if source is None or target is None or not target.is_interface:
            return
        if source.is_interface:
            self._append_unique(self._extended, source.id, target.id)
        elif source.is_class:
            self._append_unique(self._interfaces, source.id, target.id)

    @staticmethod
    def _append_unique(index: Dict[str, List[str]], key: str, value: str) -> None:
        values = index.setdefault(key, [])
        if value not in values:
            values.append(value)

    def find_superclass(self, node_id: str) -> Optional[str]:
        """
        Get the superclass of a node.

        Args:
            node_id: Node to look up

        Returns:
            ID of the superclass node, or None
        """
        return self._superclass.get(node_id)

    def is_inheritance_root(self, node_id: str) -> bool:
        """
        Check whether at least one class extends this node.

        Args:
            node_id: Node to check

        Returns:
            True if the node is the superclass of some other node
        """
        return node_id in self._superclass.values()

    def find_interfaces(self, node_id: str) -> List[str]:
        """IDs of the interfaces a class implements, in edge order."""
        return list(self._interfaces.get(node_id, []))

    def extended_interfaces(self, node_id: str) -> List[str]:
        """IDs of the interfaces an interface extends, in edge order."""
        return list(self._extended.get(node_id, []))

    def subclasses(self, node_id: str) -> List[str]:
        """IDs of the direct subclasses of a node."""
        return [child for child, parent in self._superclass.items() if parent == node_id]

    def ancestors(self, node_id: str) -> List[str]:
        """
        Walk the superclass chain of a node.

        Args:
            node_id: Starting node

        Returns:
            Superclass IDs, nearest first. The walk stops at the first
            repeated node, so it always terminates.
        """
        chain: List[str] = []
        visited = {node_id}
        current = self._superclass.get(node_id)
        while current is not None and current not in visited:
            chain.append(current)
            visited.add(current)
            current = self._superclass.get(current)
        return chain

    def descendants(self, node_id: str) -> List[str]:
        """IDs of every direct and indirect subclass of a node, nearest first."""
        found: List[str] = []
        pending = self.subclasses(node_id)
        while pending:
            current = pending.pop(0)
            if current in found or current == node_id:
                continue
            found.append(current)
            pending.extend(self.subclasses(current))
        return found

    def inheritance_chain_root(self, node_id: str) -> str:
        """The topmost ancestor of a node (the node itself if it has none)."""
        chain = self.ancestors(node_id)
        return chain[-1] if chain else node_id

    def is_subclass(self, node_id: str) -> bool:
        return node_id in self._superclass

    def is_abstract(self, node: Node) -> bool:
        """
        Check whether a class is generated as abstract.

        Args:
            node: Node to check

        Returns:
            True if declared abstract or extended by another class
        """
        return node.is_abstract or self.is_inheritance_root(node.id)

    def owns_identity(self, node_id: str) -> bool:
        """Check whether a class declares the id and timestamp fields itself."""
        return not self.is_subclass(node_id)
