"""
Relationship classification.

This module decides, for every association, aggregation, composition and
dependency edge, the ORM cardinality, which class owns the foreign key or
join table, the cascade policy, and the name of the field each class
gets. The result is a RelationshipPlan: a pure function of the diagram
that every descriptor builder consumes.

Ownership rules:
- one-to-one: the source of the earliest edge of a mirrored pair (or of
  the only edge) owns the foreign key; the other class gets an inverse
  back-reference mapped by the owner's field.
- one-to-many / many-to-one: the "many" class owns the foreign key.
- many-to-many: the edge source owns the join table.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from umlgen.core.descriptors import RelationMeta
from umlgen.core.diagnostics import Diagnostic, DiagnosticCode, DiagnosticLog, Severity
from umlgen.core.diagram import Diagram
from umlgen.core.enums import Cardinality, Containment, RelationshipType
from umlgen.core.node import Node
from umlgen.core.relationship import Relationship
from umlgen.phases.inheritance import InheritanceResolver
from umlgen.phases.multiplicity import is_many, is_required
from umlgen.phases.phase_utils import (
    escape_reserved,
    normalize_name,
    pluralize,
    table_name,
    to_field_name,
    to_identifier,
    to_snake_case,
)

logger = logging.getLogger(__name__)

RESERVED_FIELD_NAMES = frozenset(["id", "createdat", "updatedat"])

CONTAINMENT_BY_TYPE = {
    RelationshipType.ASSOCIATION: Containment.NONE,
    RelationshipType.AGGREGATION: Containment.AGGREGATE,
    RelationshipType.COMPOSITION: Containment.COMPOSE,
    RelationshipType.DEPENDENCY: Containment.NONE,
}

CASCADE_ALL = "ALL"
CASCADE_PERSIST_MERGE = "PERSIST_MERGE"


@dataclass(frozen=True)
class EdgeClassification:
    """Cardinality and containment of one edge, seen from its source."""

    cardinality: Cardinality
    containment: Containment
    persistent: bool = True


@dataclass
class RelationEnd:
    """
    The field one class gets for one relationship.

    `cardinality` is seen from `node_id`: an Order holding its Customer
    is MANY_TO_ONE, the Customer holding its Orders is ONE_TO_MANY.
    """

    node_id: str
    field_name: str
    related_node_id: str
    related_class_name: str
    cardinality: Cardinality
    owning_side: bool
    relationship_type: RelationshipType
    edge_id: str
    is_collection: bool = False
    containment: Containment = Containment.NONE
    required: bool = False
    persistent: bool = True
    mapped_by: Optional[str] = None
    join_column: Optional[str] = None
    join_table: Optional[str] = None
    inverse_join_column: Optional[str] = None
    cascade: Optional[str] = None
    orphan_removal: bool = False
    is_enum_reference: bool = False

    @property
    def is_foreign_key(self) -> bool:
        """True if this end holds a physical foreign-key column."""
        return (
            self.owning_side
            and self.persistent
            and not self.is_collection
            and not self.is_enum_reference
        )

    @property
    def fk_field_name(self) -> str:
        return f"{self.field_name}Id"

    def synthesized_names(self) -> List[str]:
        """Every field name this end may produce on an entity or DTO."""
        names = [self.field_name]
        if self.is_foreign_key:
            names.extend([f"{self.field_name}Id", f"{self.field_name}id", f"{self.field_name}_id"])
        return names

    def to_meta(self) -> RelationMeta:
        return RelationMeta(
            related_class_name=self.related_class_name,
            cardinality=self.cardinality,
            owning_side=self.owning_side,
            containment=self.containment,
            relationship_type=self.relationship_type,
            mapped_by=self.mapped_by,
            join_column=self.join_column,
            required=self.required,
            persistent=self.persistent,
            edge_id=self.edge_id,
        )


@dataclass
class RelationshipPlan:
    """All relationship ends of a diagram, plus classification diagnostics."""

    ends: List[RelationEnd] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def ends_for(self, node_id: str) -> List[RelationEnd]:
        """Relationship ends held by a node, in edge order."""
        return [end for end in self.ends if end.node_id == node_id]

    def foreign_keys_for(self, node_id: str) -> List[RelationEnd]:
        """Owning single-valued persistent ends (foreign-key columns) of a node."""
        return [end for end in self.ends_for(node_id) if end.is_foreign_key]

    def ends_for_edge(self, edge_id: str) -> List[RelationEnd]:
        return [end for end in self.ends if end.edge_id == edge_id]


class FieldNameRegistry:
    """
    Relationship field names claimed during one classification.

    A class shares its fields with every class above and below it in the
    hierarchy (a single-table hierarchy maps them to one table), so a name
    claimed on any of them, or a manual attribute of an ancestor, blocks
    the name for the whole line.
    """

    def __init__(self, diagram: Diagram, hierarchy: InheritanceResolver):
        self.diagram = diagram
        self.hierarchy = hierarchy
        self._claimed: Dict[str, Set[str]] = {}

    def is_taken(self, node_id: str, name: str) -> bool:
        key = normalize_name(name)
        if key in RESERVED_FIELD_NAMES:
            return True

        ancestors = self.hierarchy.ancestors(node_id)
        for other_id in [node_id] + ancestors + self.hierarchy.descendants(node_id):
            if key in self._claimed.get(other_id, ()):
                return True

        for ancestor_id in ancestors:
            ancestor = self.diagram.get_node(ancestor_id)
            if any(normalize_name(to_identifier(a.name)) == key for a in ancestor.attributes):
                return True
        return False

    def claim(self, node_id: str, name: str) -> None:
        self._claimed.setdefault(node_id, set()).add(normalize_name(name))


class RelationshipClassifier:
    """
    Classifies relationship edges and plans the fields they produce.

    The classifier holds no state between calls: `classify` builds a new
    plan from the diagram each time and never mutates the diagram.
    """

    def classify_edge(self, relationship: Relationship) -> Optional[EdgeClassification]:
        """
        Classify a single edge.

        Args:
            relationship: Edge to classify

        Returns:
            Cardinality (from the edge source) and containment, or None
            for inheritance and realization edges
        """
        if relationship.is_inheritance() or relationship.is_realization():
            return None

        source_many = is_many(relationship.source_multiplicity)
        target_many = is_many(relationship.target_multiplicity)

        if source_many and target_many:
            cardinality = Cardinality.MANY_TO_MANY
        elif source_many:
            cardinality = Cardinality.MANY_TO_ONE
        elif target_many:
            cardinality = Cardinality.ONE_TO_MANY
        else:
            cardinality = Cardinality.ONE_TO_ONE

        return EdgeClassification(
            cardinality=cardinality,
            containment=CONTAINMENT_BY_TYPE.get(relationship.relationship_type, Containment.NONE),
            persistent=not relationship.is_dependency(),
        )

    def classify(self, diagram: Diagram) -> RelationshipPlan:
        """
        Plan the relationship fields of every node in the diagram.

        Args:
            diagram: Diagram snapshot

        Returns:
            RelationshipPlan with ends in edge order
        """
        diagnostics = DiagnosticLog()
        ends: List[RelationEnd] = []
        names = FieldNameRegistry(diagram, InheritanceResolver(diagram))
        absorbed: Set[int] = set()

        for relationship in diagram.relationships:
            if relationship.is_inheritance() or relationship.is_realization():
                continue
            if relationship.position in absorbed:
                continue

            source = diagram.get_node(relationship.source_id)
            target = diagram.get_node(relationship.target_id)
            if source is None or target is None:
                diagnostics.add(
                    DiagnosticCode.SKIPPED_EDGE,
                    f"Edge '{relationship.id}' references a node that is not in the diagram",
                    edge_id=relationship.id,
                )
                continue

            classification = self.classify_edge(relationship)

            if relationship.is_dependency():
                if not source.is_class:
                    diagnostics.add(
                        DiagnosticCode.INVALID_RELATIONSHIP,
                        f"Dependency '{relationship.id}' starts at non-class '{source.class_name}'; skipped",
                        edge_id=relationship.id,
                    )
                    continue
                ends.append(self._dependency_end(
                    relationship, classification, source, target, names, diagnostics
                ))
                continue

            if not source.is_class or target.is_interface:
                diagnostics.add(
                    DiagnosticCode.INVALID_RELATIONSHIP,
                    f"{relationship.relationship_type.value.capitalize()} '{relationship.id}' between "
                    f"'{source.class_name}' and '{target.class_name}' cannot be persisted; skipped",
                    edge_id=relationship.id,
                )
                continue

            if target.is_enumeration:
                ends.append(self._enum_end(relationship, classification, source, target, names, diagnostics))
                continue

            mirror = self._find_mirror(relationship, classification, diagram, absorbed)
            if mirror is not None:
                absorbed.add(mirror.position)
                diagnostics.add(
                    DiagnosticCode.MIRRORED_EDGE,
                    f"Edge '{mirror.id}' mirrors edge '{relationship.id}'; both describe one "
                    f"relationship owned through '{relationship.id}'",
                    severity=Severity.INFO,
                    edge_id=mirror.id,
                )

            ends.extend(self._structural_ends(
                relationship, classification, source, target, names, diagnostics
            ))

        logger.debug("Planned %d relationship ends", len(ends))
        return RelationshipPlan(ends=ends, diagnostics=diagnostics.entries)

    def _find_mirror(
        self,
        relationship: Relationship,
        classification: EdgeClassification,
        diagram: Diagram,
        absorbed: Set[int],
    ) -> Optional[Relationship]:
        """
        Find a later edge that declares the same relationship in reverse.

        Args:
            relationship: The earlier edge
            classification: Its classification
            diagram: Diagram holding the edge sequence
            absorbed: Positions already merged into other edges

        Returns:
            The first later mirror edge, or None
        """
        if relationship.is_self_reference():
            return None

        for candidate in diagram.relationships:
            if candidate.position <= relationship.position or candidate.position in absorbed:
                continue
            if not relationship.mirrors(candidate):
                continue
            candidate_classification = self.classify_edge(candidate)
            if candidate_classification.cardinality == classification.cardinality.reversed():
                return candidate
        return None

    def _structural_ends(
        self,
        relationship: Relationship,
        classification: EdgeClassification,
        source: Node,
        target: Node,
        names: FieldNameRegistry,
        diagnostics: DiagnosticLog,
    ) -> List[RelationEnd]:
        """
        Build the owning and inverse ends of an association, aggregation
        or composition edge.
        """
        cardinality = classification.cardinality
        containment = classification.containment

        if cardinality == Cardinality.ONE_TO_MANY:
            owner, referenced = target, source
            owner_label, inverse_label = relationship.source_label, relationship.target_label
            referenced_multiplicity = relationship.source_multiplicity
        else:
            owner, referenced = source, target
            owner_label, inverse_label = relationship.target_label, relationship.source_label
            referenced_multiplicity = relationship.target_multiplicity

        owner_cardinality = {
            Cardinality.ONE_TO_ONE: Cardinality.ONE_TO_ONE,
            Cardinality.MANY_TO_ONE: Cardinality.MANY_TO_ONE,
            Cardinality.ONE_TO_MANY: Cardinality.MANY_TO_ONE,
            Cardinality.MANY_TO_MANY: Cardinality.MANY_TO_MANY,
        }[cardinality]
        owner_collection = cardinality == Cardinality.MANY_TO_MANY
        inverse_collection = cardinality != Cardinality.ONE_TO_ONE

        owner_name = self._claim_name(
            owner, self._base_name(owner_label, referenced, owner_collection),
            relationship, names, diagnostics,
        )
        inverse_name = self._claim_name(
            referenced, self._base_name(inverse_label, owner, inverse_collection),
            relationship, names, diagnostics,
        )

        owner_end = RelationEnd(
            node_id=owner.id,
            field_name=owner_name,
            related_node_id=referenced.id,
            related_class_name=referenced.class_name,
            cardinality=owner_cardinality,
            owning_side=True,
            relationship_type=relationship.relationship_type,
            edge_id=relationship.id,
            is_collection=owner_collection,
            containment=containment,
        )
        inverse_end = RelationEnd(
            node_id=referenced.id,
            field_name=inverse_name,
            related_node_id=owner.id,
            related_class_name=owner.class_name,
            cardinality=owner_cardinality.reversed(),
            owning_side=False,
            relationship_type=relationship.relationship_type,
            edge_id=relationship.id,
            is_collection=inverse_collection,
            containment=containment,
            mapped_by=owner_name,
        )

        if owner_collection:
            owner_end.join_table = f"{table_name(owner.class_name)}_{to_snake_case(owner_name)}"
            owner_end.join_column = f"{to_snake_case(owner.class_name)}_id"
            if owner.id == referenced.id:
                owner_end.inverse_join_column = f"related_{to_snake_case(referenced.class_name)}_id"
            else:
                owner_end.inverse_join_column = f"{to_snake_case(referenced.class_name)}_id"
        else:
            owner_end.join_column = f"{to_snake_case(owner_name)}_id"
            owner_end.required = is_required(referenced_multiplicity)

        if containment == Containment.COMPOSE:
            self._apply_composition(owner_end, inverse_end, cardinality)

        return [owner_end, inverse_end]

    def _apply_composition(
        self,
        owner_end: RelationEnd,
        inverse_end: RelationEnd,
        cardinality: Cardinality,
    ) -> None:
        """
        Mark the parent end as cascading and the child reference as required.

        The parent is the "one" side of a one-to-many, and the edge source
        (the owner) of a one-to-one or many-to-many.
        """
        if cardinality == Cardinality.MANY_TO_MANY:
            owner_end.cascade = CASCADE_PERSIST_MERGE
            return

        if cardinality == Cardinality.ONE_TO_ONE:
            parent_end, child_end = owner_end, inverse_end
        else:
            parent_end, child_end = inverse_end, owner_end

        parent_end.cascade = CASCADE_ALL
        parent_end.orphan_removal = True
        child_end.required = True

    def _dependency_end(
        self,
        relationship: Relationship,
        classification: EdgeClassification,
        source: Node,
        target: Node,
        names: FieldNameRegistry,
        diagnostics: DiagnosticLog,
    ) -> RelationEnd:
        collection = is_many(relationship.target_multiplicity)
        name = self._claim_name(
            source, self._base_name(relationship.target_label, target, collection),
            relationship, names, diagnostics,
        )
        return RelationEnd(
            node_id=source.id,
            field_name=name,
            related_node_id=target.id,
            related_class_name=target.class_name,
            cardinality=classification.cardinality,
            owning_side=False,
            relationship_type=relationship.relationship_type,
            edge_id=relationship.id,
            is_collection=collection,
            persistent=False,
        )

    def _enum_end(
        self,
        relationship: Relationship,
        classification: EdgeClassification,
        source: Node,
        target: Node,
        names: FieldNameRegistry,
        diagnostics: DiagnosticLog,
    ) -> RelationEnd:
        collection = is_many(relationship.target_multiplicity)
        name = self._claim_name(
            source, self._base_name(relationship.target_label, target, collection),
            relationship, names, diagnostics,
        )
        return RelationEnd(
            node_id=source.id,
            field_name=name,
            related_node_id=target.id,
            related_class_name=target.class_name,
            cardinality=classification.cardinality,
            owning_side=True,
            relationship_type=relationship.relationship_type,
            edge_id=relationship.id,
            is_collection=collection,
            required=is_required(relationship.target_multiplicity),
            is_enum_reference=True,
        )

    def _base_name(self, label: Optional[str], related: Node, collection: bool) -> str:
        """Field name for a reference to `related`, before collision handling."""
        if label:
            name = to_field_name(to_identifier(label))
        else:
            name = to_field_name(related.class_name)
            if collection:
                name = pluralize(name)
        return escape_reserved(name)

    def _claim_name(
        self,
        node: Node,
        base_name: str,
        relationship: Relationship,
        names: FieldNameRegistry,
        diagnostics: DiagnosticLog,
    ) -> str:
        """
        Reserve a relationship field name on a node.

        Later claims of an already used name get a numeric suffix.

        Args:
            node: Node receiving the field
            base_name: Preferred field name
            relationship: Edge the field comes from
            names: Names already claimed across the class hierarchy
            diagnostics: Log receiving rename notices

        Returns:
            The claimed field name
        """
        candidate = base_name
        suffix = 2
        while names.is_taken(node.id, candidate):
            candidate = f"{base_name}{suffix}"
            suffix += 1

        if candidate != base_name:
            diagnostics.add(
                DiagnosticCode.FIELD_RENAMED,
                f"Field '{base_name}' already exists on '{node.class_name}'; relationship "
                f"'{relationship.id}' uses '{candidate}' instead (label the edge end to choose a name)",
                node_id=node.id,
                edge_id=relationship.id,
            )

        names.claim(node.id, candidate)
        return candidate
