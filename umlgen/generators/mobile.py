"""
Mobile client descriptor builder.

This module describes, per class, the model, the state provider and the
foreign-key selectors of a Flutter client talking to the generated
backend. It uses the same relationship plan and conflict resolution as
the backend, so both sides agree on every field name.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from umlgen.config.settings import ProjectConfig
from umlgen.core.diagnostics import Diagnostic
from umlgen.core.diagram import Diagram
from umlgen.core.node import Node
from umlgen.generators.backend import BackendDescriptorBuilder
from umlgen.phases.classification import RelationshipPlan
from umlgen.phases.phase_utils import endpoint_name, map_dart_type, to_snake_case

logger = logging.getLogger(__name__)


@dataclass
class MobileField:
    """A field of a client model class."""

    name: str
    type: str
    nullable: bool = True
    is_foreign_key: bool = False


@dataclass
class ProviderCall:
    """One REST call a provider makes."""

    name: str
    http_method: str
    path: str


@dataclass
class ProviderDescriptor:
    """A ChangeNotifier provider holding the items of one class."""

    name: str
    endpoint: str
    item_type: str
    base_url: str = ""
    calls: List[ProviderCall] = field(default_factory=list)

    def get_call(self, name: str) -> Optional[ProviderCall]:
        for call in self.calls:
            if call.name == name:
                return call
        return None


@dataclass
class SelectorDescriptor:
    """
    A form selector for a foreign-key field.

    The form loads the related items through `provider_name` and writes
    the chosen item's id into `field_name`.
    """

    field_name: str
    entity_field: str
    related_class_name: str
    provider_name: str
    endpoint: str
    required: bool = False


@dataclass
class MobileBundle:
    """Everything the client needs for one class."""

    node_id: str
    class_name: str
    file_name: str
    package_name: str
    model_fields: List[MobileField] = field(default_factory=list)
    provider: Optional[ProviderDescriptor] = None
    selectors: List[SelectorDescriptor] = field(default_factory=list)

    def field_names(self) -> List[str]:
        return [model_field.name for model_field in self.model_fields]


class MobileDescriptorBuilder:
    """Builds one MobileBundle per class node."""

    def __init__(
        self,
        diagram: Diagram,
        project: ProjectConfig,
        plan: Optional[RelationshipPlan] = None,
    ):
        """
        Initialize the builder.

        Args:
            diagram: Diagram snapshot
            project: Configuration of the generated project
            plan: Relationship plan of the diagram, if already computed
        """
        self.diagram = diagram
        self.project = project
        self._backend = BackendDescriptorBuilder(diagram, project, plan)
        self.plan = self._backend.plan

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self._backend.diagnostics

    def build(self) -> List[MobileBundle]:
        """
        Build the bundles of every class node.

        Returns:
            Bundles in node order
        """
        bundles = [
            self.build_bundle(node)
            for node in self.diagram.nodes.values()
            if node.is_class
        ]
        logger.info("Built %d mobile bundles", len(bundles))
        return bundles

    def build_bundle(self, node: Node) -> MobileBundle:
        """
        Build the bundle of one class.

        Args:
            node: Class node

        Returns:
            Model fields (id, inherited and own attributes, foreign-key
            ids), provider calls and foreign-key selectors
        """
        endpoint = f"/{endpoint_name(node.class_name)}"

        return MobileBundle(
            node_id=node.id,
            class_name=node.class_name,
            file_name=f"{to_snake_case(node.class_name)}.dart",
            package_name=self.project.package_name,
            model_fields=self._model_fields(node),
            provider=self._provider(node, endpoint),
            selectors=self._selectors(node),
        )

    def _model_fields(self, node: Node) -> List[MobileField]:
        hierarchy = self._backend.hierarchy
        lineage = list(reversed(hierarchy.ancestors(node.id))) + [node.id]

        fields = [MobileField(name="id", type="int")]
        for node_id in lineage:
            for attribute in self._backend.surviving_attributes(self.diagram.get_node(node_id)):
                if not attribute.is_static:
                    fields.append(MobileField(name=attribute.name, type=map_dart_type(attribute.type)))

        for end in self._backend.foreign_keys(node):
            fields.append(MobileField(
                name=end.fk_field_name,
                type="int",
                nullable=not end.required,
                is_foreign_key=True,
            ))

        for node_id in lineage:
            for end in self.plan.ends_for(node_id):
                if end.is_enum_reference and not end.is_collection:
                    fields.append(MobileField(name=end.field_name, type="String", nullable=not end.required))

        return fields

    def _provider(self, node: Node, endpoint: str) -> ProviderDescriptor:
        return ProviderDescriptor(
            name=f"{node.class_name}Provider",
            endpoint=endpoint,
            item_type=node.class_name,
            base_url=self.project.base_url.rstrip("/"),
            calls=[
                ProviderCall(name="fetchItems", http_method="GET", path=endpoint),
                ProviderCall(name="addItem", http_method="POST", path=endpoint),
                ProviderCall(name="updateItem", http_method="PUT", path=f"{endpoint}/{{id}}"),
                ProviderCall(name="deleteItem", http_method="DELETE", path=f"{endpoint}/{{id}}"),
            ],
        )

    def _selectors(self, node: Node) -> List[SelectorDescriptor]:
        return [
            SelectorDescriptor(
                field_name=end.fk_field_name,
                entity_field=end.field_name,
                related_class_name=end.related_class_name,
                provider_name=f"{end.related_class_name}Provider",
                endpoint=f"/{endpoint_name(end.related_class_name)}",
                required=end.required,
            )
            for end in self._backend.foreign_keys(node)
        ]
