"""
Backend descriptor builder.

This module turns a diagram and its relationship plan into the class
descriptors of a Spring-style backend: an entity, DTO, repository,
service and controller per class, plus interface and enum descriptors.
"""

import logging
from typing import Dict, List, Optional

from umlgen.config.settings import ProjectConfig
from umlgen.core.descriptors import (
    ClassDescriptor,
    FieldDescriptor,
    ForeignKeyResolution,
    MethodDescriptor,
    ParameterDescriptor,
)
from umlgen.core.diagnostics import Diagnostic, DiagnosticCode, DiagnosticLog
from umlgen.core.diagram import Diagram
from umlgen.core.enums import Cardinality, DescriptorKind, Visibility
from umlgen.core.node import Attribute, Method, Node
from umlgen.phases.classification import (
    CASCADE_ALL,
    CASCADE_PERSIST_MERGE,
    RelationEnd,
    RelationshipClassifier,
    RelationshipPlan,
)
from umlgen.phases.conflicts import ConflictResolution, ConflictResolver
from umlgen.phases.inheritance import InheritanceResolver
from umlgen.phases.phase_utils import (
    capitalize_first,
    endpoint_name,
    map_java_type,
    table_name,
    to_field_name,
    to_identifier,
    to_snake_case,
)

logger = logging.getLogger(__name__)

NOT_FOUND_EXCEPTION = "EntityNotFoundException"
LOMBOK_ANNOTATIONS = ["@Data", "@NoArgsConstructor", "@AllArgsConstructor"]


def annotation(name: str, /, **params: str) -> str:
    """
    Render a Java annotation.

    Args:
        name: Annotation name without the `@`
        **params: Attribute values, already in Java syntax; None values
                  are left out

    Returns:
        Annotation text (e.g., '@Column(name = "total", nullable = false)')
    """
    rendered = [f"{key} = {value}" for key, value in params.items() if value is not None]
    if not rendered:
        return f"@{name}"
    return f"@{name}({', '.join(rendered)})"


def quoted(value: str) -> str:
    return f'"{value}"'


class BackendDescriptorBuilder:
    """
    Builds backend class descriptors.

    The builder reads the diagram and never modifies it. When no plan is
    given it classifies the diagram itself; passing the plan shared with
    other builders avoids classifying twice.
    """

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
        self.plan = plan if plan is not None else RelationshipClassifier().classify(diagram)
        self.hierarchy = InheritanceResolver(diagram)
        self.conflict_resolver = ConflictResolver()
        self._resolved: Dict[str, ConflictResolution] = {}
        self._log = DiagnosticLog()

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """
        Diagnostics raised while building.

        Relationship plan diagnostics are not repeated here; they live on
        the plan.
        """
        entries = list(self.hierarchy.diagnostics)
        for resolution in self._resolved.values():
            entries.extend(resolution.diagnostics)
        entries.extend(self._log.entries)
        return entries

    def build(self) -> List[ClassDescriptor]:
        """
        Build the descriptors of every node.

        Returns:
            Descriptors in node order; a class yields its entity, DTO,
            repository, service and controller in that order
        """
        descriptors: List[ClassDescriptor] = []

        for node in self.diagram.nodes.values():
            if node.is_class:
                descriptors.extend(self.build_class(node))
            elif node.is_interface:
                descriptors.append(self.build_interface(node))
            else:
                descriptors.append(self.build_enum(node))

        logger.info("Built %d backend descriptors", len(descriptors))
        return descriptors

    def build_class(self, node: Node) -> List[ClassDescriptor]:
        return [
            self.build_entity(node),
            self.build_dto(node),
            self.build_repository(node),
            self.build_service(node),
            self.build_controller(node),
        ]

    # Shared lookups

    def surviving_attributes(self, node: Node) -> List[Attribute]:
        """
        Manual attributes of a node after conflict resolution.

        Args:
            node: Class node

        Returns:
            Attributes that become plain fields on the entity and DTO
        """
        return self._resolve(node).attributes

    def _resolve(self, node: Node) -> ConflictResolution:
        if node.id not in self._resolved:
            inherited: List[str] = []
            inherited_ends: List[RelationEnd] = []
            for ancestor_id in self.hierarchy.ancestors(node.id):
                ancestor = self.diagram.get_node(ancestor_id)
                inherited.extend(self._resolve(ancestor).names())
                inherited_ends.extend(self.plan.ends_for(ancestor_id))
            self._resolved[node.id] = self.conflict_resolver.resolve(
                node,
                self.plan.ends_for(node.id),
                inherited_names=inherited,
                inherited_ends=inherited_ends,
            )
        return self._resolved[node.id]

    def foreign_keys(self, node: Node, inherited: bool = True) -> List[RelationEnd]:
        """
        Foreign-key relationship ends of a class.

        Args:
            node: Class node
            inherited: Include the foreign keys of superclasses, root first

        Returns:
            Owning single-valued persistent relationship ends
        """
        node_ids = [node.id]
        if inherited:
            node_ids = list(reversed(self.hierarchy.ancestors(node.id))) + node_ids
        return [end for node_id in node_ids for end in self.plan.foreign_keys_for(node_id)]

    def _class_name(self, node_id: Optional[str]) -> Optional[str]:
        if node_id is None:
            return None
        return self.diagram.get_node(node_id).class_name

    # Entity

    def build_entity(self, node: Node) -> ClassDescriptor:
        """
        Build the JPA entity descriptor of a class.

        Args:
            node: Class node

        Returns:
            Entity descriptor
        """
        hierarchy = self.hierarchy
        superclass = self._class_name(hierarchy.find_superclass(node.id))

        annotations = ["@Entity"]
        if superclass is None:
            annotations.append(annotation("Table", name=quoted(table_name(node.class_name))))
            if hierarchy.is_inheritance_root(node.id):
                annotations.append(annotation("Inheritance", strategy="InheritanceType.SINGLE_TABLE"))
                annotations.append(annotation(
                    "DiscriminatorColumn", name=quoted(self.project.discriminator_column)
                ))
        else:
            annotations.append(annotation("DiscriminatorValue", value=quoted(node.class_name)))
        annotations.extend(LOMBOK_ANNOTATIONS)
        if superclass is not None:
            annotations.append(annotation("EqualsAndHashCode", callSuper="true"))

        fields: List[FieldDescriptor] = []
        if hierarchy.owns_identity(node.id):
            fields.append(self._id_field())

        fields.extend(self._attribute_field(attribute) for attribute in self.surviving_attributes(node))
        fields.extend(self._relation_field(end) for end in self.plan.ends_for(node.id))

        if hierarchy.owns_identity(node.id):
            fields.extend(self._timestamp_fields())

        return ClassDescriptor(
            name=node.class_name,
            kind=DescriptorKind.ENTITY,
            package=self.project.package_for("entity"),
            fields=fields,
            methods=[self._method(method, node) for method in node.methods],
            annotations=annotations,
            superclass=superclass,
            interfaces=[self._class_name(node_id) for node_id in hierarchy.find_interfaces(node.id)],
            is_abstract=hierarchy.is_abstract(node),
            node_id=node.id,
        )

    def _id_field(self) -> FieldDescriptor:
        return FieldDescriptor(
            name="id",
            type=self.project.id_type,
            annotations=["@Id", annotation("GeneratedValue", strategy="GenerationType.IDENTITY")],
        )

    def _timestamp_fields(self) -> List[FieldDescriptor]:
        return [
            FieldDescriptor(
                name="createdAt",
                type=self.project.timestamp_type,
                annotations=[
                    "@CreationTimestamp",
                    annotation("Column", name=quoted("created_at"), updatable="false"),
                ],
            ),
            FieldDescriptor(
                name="updatedAt",
                type=self.project.timestamp_type,
                annotations=["@UpdateTimestamp", annotation("Column", name=quoted("updated_at"))],
            ),
        ]

    def _attribute_field(self, attribute: Attribute) -> FieldDescriptor:
        annotations = []
        if not attribute.is_static:
            annotations.append(annotation("Column", name=quoted(to_snake_case(attribute.name))))
        return FieldDescriptor(
            name=attribute.name,
            type=map_java_type(attribute.type),
            annotations=annotations,
            visibility=attribute.visibility,
            is_static=attribute.is_static,
            is_final=attribute.is_final,
            default_value=attribute.default_value,
        )

    def _relation_field(self, end: RelationEnd) -> FieldDescriptor:
        """
        Build the entity field of one relationship end.

        Args:
            end: Relationship end held by the entity

        Returns:
            Field carrying the JPA mapping and the relationship metadata
        """
        related = end.related_class_name
        field_type = related
        default_value = None

        if end.is_collection:
            if end.cardinality == Cardinality.MANY_TO_MANY or end.is_enum_reference:
                field_type, default_value = f"Set<{related}>", "new HashSet<>()"
            else:
                field_type, default_value = f"List<{related}>", "new ArrayList<>()"

        if not end.persistent:
            annotations = ["@Transient"]
        elif end.is_enum_reference:
            annotations = self._enum_reference_annotations(end)
        elif end.cardinality == Cardinality.MANY_TO_MANY:
            annotations = self._many_to_many_annotations(end)
        elif end.cardinality == Cardinality.ONE_TO_MANY:
            annotations = [annotation(
                "OneToMany",
                mappedBy=quoted(end.mapped_by),
                cascade="CascadeType.ALL" if end.cascade == CASCADE_ALL else None,
                orphanRemoval="true" if end.orphan_removal else None,
            )]
        else:
            annotations = self._single_reference_annotations(end)

        return FieldDescriptor(
            name=end.field_name,
            type=field_type,
            annotations=annotations,
            default_value=default_value,
            relation=end.to_meta(),
        )

    def _single_reference_annotations(self, end: RelationEnd) -> List[str]:
        kind = "OneToOne" if end.cardinality == Cardinality.ONE_TO_ONE else "ManyToOne"
        mapping = annotation(
            kind,
            mappedBy=None if end.owning_side else quoted(end.mapped_by),
            fetch="FetchType.LAZY",
            cascade="CascadeType.ALL" if end.cascade == CASCADE_ALL else None,
            orphanRemoval="true" if end.orphan_removal else None,
            optional="false" if end.required else None,
        )
        if not end.owning_side:
            return [mapping]
        return [mapping, annotation(
            "JoinColumn",
            name=quoted(end.join_column),
            nullable="false" if end.required else None,
        )]

    def _many_to_many_annotations(self, end: RelationEnd) -> List[str]:
        cascade = None
        if end.cascade == CASCADE_PERSIST_MERGE:
            cascade = "{CascadeType.PERSIST, CascadeType.MERGE}"

        if not end.owning_side:
            return [annotation("ManyToMany", mappedBy=quoted(end.mapped_by))]

        return [
            annotation("ManyToMany", cascade=cascade),
            annotation(
                "JoinTable",
                name=quoted(end.join_table),
                joinColumns=annotation("JoinColumn", name=quoted(end.join_column)),
                inverseJoinColumns=annotation("JoinColumn", name=quoted(end.inverse_join_column)),
            ),
        ]

    def _enum_reference_annotations(self, end: RelationEnd) -> List[str]:
        if end.is_collection:
            return [
                annotation("ElementCollection", targetClass=f"{end.related_class_name}.class"),
                annotation("Enumerated", value="EnumType.STRING"),
            ]
        return [
            annotation("Enumerated", value="EnumType.STRING"),
            annotation(
                "Column",
                name=quoted(to_snake_case(end.field_name)),
                nullable="false" if end.required else None,
            ),
        ]

    def _method(self, method: Method, node: Node, signature_only: bool = False) -> MethodDescriptor:
        return MethodDescriptor(
            name=to_identifier(method.name, fallback="method"),
            return_type=map_java_type(method.return_type),
            parameters=[
                ParameterDescriptor(name=to_identifier(p.name, fallback="arg"), type=map_java_type(p.type))
                for p in method.parameters
            ],
            visibility=Visibility.PUBLIC if signature_only else method.visibility,
            is_static=method.is_static,
            is_abstract=signature_only or (method.is_abstract and self.hierarchy.is_abstract(node)),
        )

    # DTO

    def build_dto(self, node: Node) -> ClassDescriptor:
        """
        Build the DTO descriptor of a class.

        The DTO exposes plain attributes, the id, and one `<field>Id` per
        foreign key. Collections and inverse references are never exposed.

        Args:
            node: Class node

        Returns:
            DTO descriptor
        """
        superclass = self._class_name(self.hierarchy.find_superclass(node.id))

        fields: List[FieldDescriptor] = []
        if self.hierarchy.owns_identity(node.id):
            fields.append(FieldDescriptor(name="id", type=self.project.id_type))

        for attribute in self.surviving_attributes(node):
            if attribute.is_static:
                continue
            fields.append(FieldDescriptor(name=attribute.name, type=map_java_type(attribute.type)))

        for end in self.plan.ends_for(node.id):
            if end.is_foreign_key:
                fields.append(FieldDescriptor(
                    name=end.fk_field_name,
                    type=self.project.id_type,
                    annotations=["@NotNull"] if end.required else [],
                    relation=end.to_meta(),
                ))
            elif end.is_enum_reference and not end.is_collection:
                fields.append(FieldDescriptor(
                    name=end.field_name,
                    type=end.related_class_name,
                    annotations=["@NotNull"] if end.required else [],
                    relation=end.to_meta(),
                ))

        annotations = list(LOMBOK_ANNOTATIONS)
        if superclass is not None:
            annotations.append(annotation("EqualsAndHashCode", callSuper="true"))

        return ClassDescriptor(
            name=f"{node.class_name}DTO",
            kind=DescriptorKind.DTO,
            package=self.project.package_for("dto"),
            fields=fields,
            annotations=annotations,
            superclass=f"{superclass}DTO" if superclass else None,
            node_id=node.id,
        )

    # Repository

    def build_repository(self, node: Node) -> ClassDescriptor:
        """
        Build the repository descriptor of a class.

        Args:
            node: Class node

        Returns:
            Repository descriptor with a derived finder per foreign key
        """
        id_type = self.project.id_type
        finders = [
            MethodDescriptor(
                name=f"findBy{capitalize_first(end.field_name)}Id",
                return_type=f"List<{node.class_name}>",
                parameters=[ParameterDescriptor(name=end.fk_field_name, type=id_type)],
                is_abstract=True,
            )
            for end in self.foreign_keys(node)
        ]

        return ClassDescriptor(
            name=f"{node.class_name}Repository",
            kind=DescriptorKind.REPOSITORY,
            package=self.project.package_for("repository"),
            methods=finders,
            annotations=["@Repository"],
            interfaces=[f"JpaRepository<{node.class_name}, {id_type}>"],
            node_id=node.id,
        )

    # Service

    def build_service(self, node: Node) -> ClassDescriptor:
        """
        Build the service descriptor of a class.

        Every foreign key of the DTO gets a repository to look the related
        entity up and a `resolve<Field>` helper that raises
        EntityNotFoundException when the id does not resolve. `save` and
        `update` call every helper.

        Args:
            node: Class node

        Returns:
            Service descriptor with its foreign-key resolutions
        """
        class_name = node.class_name
        dto = f"{class_name}DTO"
        id_type = self.project.id_type
        own_repository = f"{to_field_name(class_name)}Repository"

        fields = [FieldDescriptor(name=own_repository, type=f"{class_name}Repository", is_final=True)]
        repository_fields = {class_name: own_repository}
        resolutions: List[ForeignKeyResolution] = []

        for end in self.foreign_keys(node):
            related = end.related_class_name
            if related not in repository_fields:
                repository_fields[related] = f"{to_field_name(related)}Repository"
                fields.append(FieldDescriptor(
                    name=repository_fields[related], type=f"{related}Repository", is_final=True
                ))

            resolutions.append(ForeignKeyResolution(
                fk_field=end.fk_field_name,
                entity_field=end.field_name,
                related_class_name=related,
                repository_field=repository_fields[related],
                method_name=f"resolve{capitalize_first(end.field_name)}",
                required=end.required,
                exception=NOT_FOUND_EXCEPTION,
                not_found_message=f"{related} not found with id: ",
            ))

        resolvers = [resolution.method_name for resolution in resolutions]
        id_param = ParameterDescriptor(name="id", type=id_type)
        dto_param = ParameterDescriptor(name="dto", type=dto)

        methods = [
            MethodDescriptor(name="findAll", return_type=f"List<{dto}>"),
            MethodDescriptor(name="findById", return_type=f"Optional<{dto}>", parameters=[id_param]),
            MethodDescriptor(
                name="save",
                return_type=dto,
                parameters=[dto_param],
                annotations=["@Transactional"],
                throws=[NOT_FOUND_EXCEPTION] if resolvers else [],
                invokes=list(resolvers),
            ),
            MethodDescriptor(
                name="update",
                return_type=dto,
                parameters=[id_param, dto_param],
                annotations=["@Transactional"],
                throws=[NOT_FOUND_EXCEPTION],
                invokes=list(resolvers),
            ),
            MethodDescriptor(
                name="deleteById",
                parameters=[id_param],
                annotations=["@Transactional"],
                throws=[NOT_FOUND_EXCEPTION],
            ),
        ]
        methods.extend(
            MethodDescriptor(
                name=resolution.method_name,
                return_type=resolution.related_class_name,
                parameters=[ParameterDescriptor(name=resolution.fk_field, type=id_type)],
                visibility=Visibility.PRIVATE,
                throws=[resolution.exception],
            )
            for resolution in resolutions
        )

        return ClassDescriptor(
            name=f"{class_name}Service",
            kind=DescriptorKind.SERVICE,
            package=self.project.package_for("service"),
            fields=fields,
            methods=methods,
            annotations=["@Service", "@RequiredArgsConstructor"],
            node_id=node.id,
            resolutions=resolutions,
        )

    # Controller

    def build_controller(self, node: Node) -> ClassDescriptor:
        """Build the REST controller descriptor of a class."""
        class_name = node.class_name
        dto = f"{class_name}DTO"
        id_param = ParameterDescriptor(name="id", type=self.project.id_type, annotations=["@PathVariable"])
        body_param = ParameterDescriptor(name="dto", type=dto, annotations=["@Valid", "@RequestBody"])
        path = f"{self.project.api_prefix.rstrip('/')}/{endpoint_name(class_name)}"

        return ClassDescriptor(
            name=f"{class_name}Controller",
            kind=DescriptorKind.CONTROLLER,
            package=self.project.package_for("controller"),
            fields=[FieldDescriptor(
                name=f"{to_field_name(class_name)}Service", type=f"{class_name}Service", is_final=True
            )],
            methods=[
                MethodDescriptor(
                    name="getAll",
                    return_type=f"ResponseEntity<List<{dto}>>",
                    annotations=["@GetMapping"],
                ),
                MethodDescriptor(
                    name="getById",
                    return_type=f"ResponseEntity<{dto}>",
                    parameters=[id_param],
                    annotations=[annotation("GetMapping", value=quoted("/{id}"))],
                ),
                MethodDescriptor(
                    name="create",
                    return_type=f"ResponseEntity<{dto}>",
                    parameters=[body_param],
                    annotations=["@PostMapping"],
                ),
                MethodDescriptor(
                    name="update",
                    return_type=f"ResponseEntity<{dto}>",
                    parameters=[id_param, body_param],
                    annotations=[annotation("PutMapping", value=quoted("/{id}"))],
                ),
                MethodDescriptor(
                    name="delete",
                    return_type="ResponseEntity<Void>",
                    parameters=[id_param],
                    annotations=[annotation("DeleteMapping", value=quoted("/{id}"))],
                ),
            ],
            annotations=[
                "@RestController",
                annotation("RequestMapping", value=quoted(path)),
                "@RequiredArgsConstructor",
            ],
            node_id=node.id,
        )

    # Interfaces and enums

    def build_interface(self, node: Node) -> ClassDescriptor:
        """
        Build an interface descriptor.

        Methods become signatures. Attributes with a default value become
        constants; other attributes are dropped with a diagnostic.

        Args:
            node: Interface node

        Returns:
            Interface descriptor
        """
        constants = []
        for attribute in node.attributes:
            if attribute.default_value is None:
                self._log.add(
                    DiagnosticCode.DROPPED_MEMBER,
                    f"Attribute '{attribute.name}' of interface '{node.class_name}' has no value; "
                    f"interfaces only declare constants",
                    node_id=node.id,
                )
                continue
            constants.append(FieldDescriptor(
                name=to_identifier(attribute.name),
                type=map_java_type(attribute.type),
                visibility=Visibility.PUBLIC,
                is_static=True,
                is_final=True,
                default_value=attribute.default_value,
            ))

        return ClassDescriptor(
            name=node.class_name,
            kind=DescriptorKind.INTERFACE,
            package=self.project.package_for("entity"),
            fields=constants,
            methods=[self._method(method, node, signature_only=True) for method in node.methods],
            interfaces=[
                self._class_name(node_id) for node_id in self.hierarchy.extended_interfaces(node.id)
            ],
            is_abstract=True,
            node_id=node.id,
        )

    def build_enum(self, node: Node) -> ClassDescriptor:
        """Build an enum descriptor with one field per literal."""
        return ClassDescriptor(
            name=node.class_name,
            kind=DescriptorKind.ENUM,
            package=self.project.package_for("entity"),
            fields=[
                FieldDescriptor(
                    name=to_identifier(value.name, fallback="VALUE"),
                    type=node.class_name,
                    visibility=Visibility.PUBLIC,
                    is_static=True,
                    is_final=True,
                    default_value=value.value,
                )
                for value in node.enum_values
            ],
            node_id=node.id,
        )
