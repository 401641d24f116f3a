"""
Graph model extraction.

This module normalizes raw diagram payloads, as produced by the diagram
editor, into a Diagram: typed nodes keyed by id and an ordered list of
typed relationships. Malformed input degrades gracefully: unusable
nodes become empty classes and unusable edges are skipped, each with a
diagnostic.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from umlgen.core.diagnostics import Diagnostic, DiagnosticCode, DiagnosticLog, Severity
from umlgen.core.diagram import Diagram
from umlgen.core.enums import NodeKind, RelationshipType, Visibility
from umlgen.core.node import Attribute, EnumValue, Method, Node, Parameter
from umlgen.core.relationship import Relationship
from umlgen.phases.phase_utils import format_class_name

logger = logging.getLogger(__name__)

NODE_KIND_TOKENS = {
    "class": NodeKind.CLASS,
    "abstractclass": NodeKind.CLASS,
    "abstract": NodeKind.CLASS,
    "record": NodeKind.CLASS,
    "entity": NodeKind.CLASS,
    "interface": NodeKind.INTERFACE,
    "enum": NodeKind.ENUM,
    "enumeration": NodeKind.ENUM,
}

RELATIONSHIP_TOKENS = {
    "association": RelationshipType.ASSOCIATION,
    "aggregation": RelationshipType.AGGREGATION,
    "composition": RelationshipType.COMPOSITION,
    "inheritance": RelationshipType.INHERITANCE,
    "generalization": RelationshipType.INHERITANCE,
    "realization": RelationshipType.REALIZATION,
    "implementation": RelationshipType.REALIZATION,
    "dependency": RelationshipType.DEPENDENCY,
}

VISIBILITY_TOKENS = {
    "public": Visibility.PUBLIC,
    "+": Visibility.PUBLIC,
    "protected": Visibility.PROTECTED,
    "#": Visibility.PROTECTED,
    "private": Visibility.PRIVATE,
    "-": Visibility.PRIVATE,
    "package": Visibility.PACKAGE,
    "~": Visibility.PACKAGE,
}


@dataclass
class ExtractionResult:
    """A normalized diagram plus the diagnostics raised while building it."""

    diagram: Diagram
    diagnostics: List[Diagnostic] = field(default_factory=list)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _as_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


class GraphExtractor:
    """
    Normalizes raw node/edge collections into a Diagram.

    Both the editor's nested shape (`{"id", "data": {...}}`) and a flat
    shape with the same keys at top level are accepted. Extraction never
    raises for bad diagram content.
    """

    def extract(
        self,
        nodes: Optional[Iterable[Any]],
        edges: Optional[Iterable[Any]],
    ) -> ExtractionResult:
        """
        Build a diagram from raw editor collections.

        Args:
            nodes: Raw node payloads
            edges: Raw edge payloads, in editor order

        Returns:
            ExtractionResult with the diagram and recorded diagnostics
        """
        diagnostics = DiagnosticLog()
        diagram = Diagram()
        taken_names: Dict[str, str] = {}

        for index, raw in enumerate(nodes or []):
            node = self._extract_node(raw, index, diagnostics)
            if node is None:
                continue

            if node.id in diagram.nodes:
                diagnostics.add(
                    DiagnosticCode.DUPLICATE_NODE,
                    f"Node id '{node.id}' appears more than once; keeping the first",
                    node_id=node.id,
                )
                continue

            self._assign_unique_class_name(node, taken_names, diagnostics)
            diagram.add_node(node)

        for index, raw in enumerate(edges or []):
            relationship = self._extract_edge(raw, index, diagnostics)
            if relationship is None:
                continue

            if not diagram.add_relationship(relationship):
                missing = [
                    node_id for node_id in (relationship.source_id, relationship.target_id)
                    if node_id not in diagram.nodes
                ]
                diagnostics.add(
                    DiagnosticCode.SKIPPED_EDGE,
                    f"Edge '{relationship.id}' references missing node(s): {', '.join(missing)}",
                    edge_id=relationship.id,
                )

        logger.debug(
            "Extracted %d nodes and %d relationships",
            len(diagram.nodes), len(diagram.relationships),
        )
        return ExtractionResult(diagram=diagram, diagnostics=diagnostics.entries)

    def _extract_node(self, raw: Any, index: int, diagnostics: DiagnosticLog) -> Optional[Node]:
        """
        Build one node from its raw payload.

        Args:
            raw: Raw node payload
            index: Position of the payload, used for fallback ids
            diagnostics: Log receiving recoverable problems

        Returns:
            The node, or None if the payload is not a mapping
        """
        if not isinstance(raw, dict):
            diagnostics.add(
                DiagnosticCode.MALFORMED_NODE,
                f"Node at index {index} is not an object and was ignored",
            )
            return None

        data = raw.get("data") if isinstance(raw.get("data"), dict) else raw
        node_id = _as_text(raw.get("id")) or f"node-{index}"

        kind_token = _as_text(data.get("nodeType") or data.get("kind") or raw.get("type"))
        kind = NODE_KIND_TOKENS.get(kind_token.replace("_", "").lower())
        if kind is None:
            if kind_token and kind_token.lower() not in ("umlclass", "umlnode", "default"):
                diagnostics.add(
                    DiagnosticCode.MALFORMED_NODE,
                    f"Node '{node_id}' has unknown kind '{kind_token}'; treated as a class",
                    severity=Severity.INFO,
                    node_id=node_id,
                )
            kind = NodeKind.CLASS

        label = _as_text(data.get("label") or data.get("name"))
        node = Node(
            node_id,
            label,
            kind=kind,
            class_name=format_class_name(label),
            is_abstract=(
                _as_bool(data.get("isAbstract"))
                or kind_token.replace("_", "").lower() in ("abstractclass", "abstract")
            ),
        )

        attributes = data.get("attributes") or data.get("properties") or []
        for attr_index, raw_attr in enumerate(attributes if isinstance(attributes, list) else []):
            attribute = self._extract_attribute(raw_attr, node_id, attr_index)
            if attribute is None:
                diagnostics.add(
                    DiagnosticCode.DROPPED_MEMBER,
                    f"Attribute #{attr_index} of '{node.class_name}' has no name and was dropped",
                    node_id=node_id,
                )
                continue
            node.add_attribute(attribute)

        methods = data.get("methods") or []
        for method_index, raw_method in enumerate(methods if isinstance(methods, list) else []):
            method = self._extract_method(raw_method, node_id, method_index)
            if method is None:
                diagnostics.add(
                    DiagnosticCode.DROPPED_MEMBER,
                    f"Method #{method_index} of '{node.class_name}' has no name and was dropped",
                    node_id=node_id,
                )
                continue
            node.add_method(method)

        if kind == NodeKind.ENUM:
            values = data.get("enumValues") or data.get("values") or []
            for raw_value in values if isinstance(values, list) else []:
                enum_value = self._extract_enum_value(raw_value)
                if enum_value is not None:
                    node.add_enum_value(enum_value)

        return node

    def _extract_attribute(self, raw: Any, node_id: str, index: int) -> Optional[Attribute]:
        if isinstance(raw, str):
            raw = {"name": raw}
        if not isinstance(raw, dict):
            return None

        name = _as_text(raw.get("name"))
        if not name:
            return None

        default_value = raw.get("defaultValue")
        return Attribute(
            id=_as_text(raw.get("id")) or f"{node_id}-attr-{index}",
            name=name,
            type=_as_text(raw.get("type")) or "String",
            visibility=VISIBILITY_TOKENS.get(_as_text(raw.get("visibility")).lower(), Visibility.PRIVATE),
            is_static=_as_bool(raw.get("isStatic")),
            is_final=_as_bool(raw.get("isFinal")),
            default_value=None if default_value in (None, "") else str(default_value),
        )

    def _extract_method(self, raw: Any, node_id: str, index: int) -> Optional[Method]:
        if isinstance(raw, str):
            raw = {"name": raw}
        if not isinstance(raw, dict):
            return None

        name = _as_text(raw.get("name"))
        if not name:
            return None

        parameters = []
        raw_params = raw.get("parameters") or []
        for raw_param in raw_params if isinstance(raw_params, list) else []:
            if isinstance(raw_param, dict) and _as_text(raw_param.get("name")):
                parameters.append(Parameter(
                    name=_as_text(raw_param.get("name")),
                    type=_as_text(raw_param.get("type")) or "String",
                    default_value=raw_param.get("defaultValue"),
                ))

        return Method(
            id=_as_text(raw.get("id")) or f"{node_id}-method-{index}",
            name=name,
            return_type=_as_text(raw.get("returnType")) or "void",
            parameters=parameters,
            visibility=VISIBILITY_TOKENS.get(_as_text(raw.get("visibility")).lower(), Visibility.PUBLIC),
            is_static=_as_bool(raw.get("isStatic")),
            is_abstract=_as_bool(raw.get("isAbstract")),
        )

    def _extract_enum_value(self, raw: Any) -> Optional[EnumValue]:
        if isinstance(raw, str):
            return EnumValue(name=raw.strip()) if raw.strip() else None
        if isinstance(raw, dict) and _as_text(raw.get("name")):
            value = raw.get("value")
            return EnumValue(name=_as_text(raw.get("name")), value=None if value in (None, "") else str(value))
        return None

    def _extract_edge(self, raw: Any, index: int, diagnostics: DiagnosticLog) -> Optional[Relationship]:
        """
        Build one relationship from its raw payload.

        Args:
            raw: Raw edge payload
            index: Position of the payload in the editor's edge list
            diagnostics: Log receiving recoverable problems

        Returns:
            The relationship, or None if the edge cannot be typed
        """
        if not isinstance(raw, dict):
            diagnostics.add(DiagnosticCode.SKIPPED_EDGE, f"Edge at index {index} is not an object")
            return None

        data = raw.get("data") if isinstance(raw.get("data"), dict) else {}
        edge_id = _as_text(raw.get("id")) or f"edge-{index}"

        source_id = _as_text(raw.get("source") or raw.get("sourceNodeId") or data.get("sourceNodeId"))
        target_id = _as_text(raw.get("target") or raw.get("targetNodeId") or data.get("targetNodeId"))
        if not source_id or not target_id:
            diagnostics.add(
                DiagnosticCode.SKIPPED_EDGE,
                f"Edge '{edge_id}' is missing a source or target",
                edge_id=edge_id,
            )
            return None

        type_token = _as_text(data.get("relationshipType") or raw.get("relationshipType"))
        relationship_type = RELATIONSHIP_TOKENS.get(type_token.lower())
        if relationship_type is None:
            diagnostics.add(
                DiagnosticCode.SKIPPED_EDGE,
                f"Edge '{edge_id}' has unknown relationship type '{type_token}'",
                edge_id=edge_id,
            )
            return None

        return Relationship(
            edge_id,
            source_id,
            target_id,
            relationship_type,
            source_multiplicity=self._multiplicity(raw, data, "source"),
            target_multiplicity=self._multiplicity(raw, data, "target"),
            source_label=_as_text(data.get("sourceLabel") or raw.get("sourceLabel")) or None,
            target_label=_as_text(data.get("targetLabel") or raw.get("targetLabel")) or None,
        )

    def _multiplicity(self, raw: Dict[str, Any], data: Dict[str, Any], end: str) -> str:
        """Read one end's multiplicity, resolving the editor's "custom" token."""
        token = _as_text(data.get(f"{end}Multiplicity") or raw.get(f"{end}Multiplicity"))
        if token.lower() == "custom":
            custom_key = f"custom{end.capitalize()}Multiplicity"
            token = _as_text(data.get(custom_key) or raw.get(custom_key))
        return token

    def _assign_unique_class_name(
        self,
        node: Node,
        taken_names: Dict[str, str],
        diagnostics: DiagnosticLog,
    ) -> None:
        base_name = node.class_name
        candidate = base_name
        suffix = 2
        while candidate.lower() in taken_names:
            candidate = f"{base_name}{suffix}"
            suffix += 1

        if candidate != base_name:
            diagnostics.add(
                DiagnosticCode.RENAMED_CLASS,
                f"Class name '{base_name}' of node '{node.id}' is already used by node "
                f"'{taken_names[base_name.lower()]}'; renamed to '{candidate}'",
                node_id=node.id,
            )
            node.class_name = candidate

        taken_names[candidate.lower()] = node.id
