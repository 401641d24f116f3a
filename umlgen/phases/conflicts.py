"""
Attribute/field conflict resolution.

Relationship fields always win over manual attributes: an attribute whose
normalized name matches a relationship field (or its foreign-key id
field) is dropped, as are attributes using the reserved names `id`,
`createdAt` and `updatedAt`.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Sequence

from umlgen.core.diagnostics import Diagnostic, DiagnosticCode, DiagnosticLog
from umlgen.core.node import Attribute, Node
from umlgen.phases.classification import RESERVED_FIELD_NAMES, RelationEnd
from umlgen.phases.phase_utils import normalize_name, to_identifier

logger = logging.getLogger(__name__)


@dataclass
class ConflictResolution:
    """Attributes that survive conflict resolution, in declaration order."""

    attributes: List[Attribute] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def names(self) -> List[str]:
        return [attribute.name for attribute in self.attributes]


class ConflictResolver:
    """Filters a node's manual attributes against reserved and synthesized names."""

    def resolve(
        self,
        node: Node,
        relation_ends: Sequence[RelationEnd],
        inherited_names: Iterable[str] = (),
        inherited_ends: Sequence[RelationEnd] = (),
    ) -> ConflictResolution:
        """
        Resolve attribute conflicts for one node.

        Args:
            node: Node whose attributes are filtered
            relation_ends: Relationship ends held by the node
            inherited_names: Attribute names already declared by superclasses
            inherited_ends: Relationship ends held by superclasses

        Returns:
            ConflictResolution with the surviving attributes (names
            sanitized to legal identifiers) and one diagnostic per drop
        """
        log = DiagnosticLog()

        synthesized = {
            normalize_name(name)
            for end in list(relation_ends) + list(inherited_ends)
            for name in end.synthesized_names()
        }
        inherited = {normalize_name(name) for name in inherited_names}
        seen = set()
        survivors: List[Attribute] = []

        for attribute in node.attributes:
            name = to_identifier(attribute.name)
            key = normalize_name(name)

            if key in RESERVED_FIELD_NAMES:
                log.add(
                    DiagnosticCode.RESERVED_ATTRIBUTE,
                    f"Attribute '{attribute.name}' of '{node.class_name}' uses a reserved name; "
                    f"the generated field is used instead",
                    node_id=node.id,
                )
                continue

            if key in synthesized:
                log.add(
                    DiagnosticCode.ATTRIBUTE_COLLISION,
                    f"Attribute '{attribute.name}' of '{node.class_name}' collides with a "
                    f"relationship field; the relationship field is kept",
                    node_id=node.id,
                )
                continue

            if key in seen or key in inherited:
                log.add(
                    DiagnosticCode.DUPLICATE_ATTRIBUTE,
                    f"Attribute '{attribute.name}' of '{node.class_name}' is declared more than once",
                    node_id=node.id,
                )
                continue

            seen.add(key)
            survivors.append(attribute if name == attribute.name else replace(attribute, name=name))

        logger.debug(
            "%s: %d of %d attributes kept",
            node.class_name, len(survivors), len(node.attributes),
        )
        return ConflictResolution(attributes=survivors, diagnostics=log.entries)
