"""
Model validation module.

This module provides utilities for validating the project configuration
and for reporting questionable diagram content before generation.
"""

import re
import logging
from difflib import SequenceMatcher
from typing import List

from umlgen.config.settings import ProjectConfig
from umlgen.core.diagnostics import Diagnostic, DiagnosticCode, DiagnosticLog
from umlgen.core.diagram import Diagram
from umlgen.core.enums import RelationshipType

logger = logging.getLogger(__name__)

_PACKAGE_SEGMENT = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_DART_PACKAGE = re.compile(r"^[a-z_][a-z0-9_]*$")


class ConfigurationError(ValueError):
    """Raised when a generation run cannot start because its configuration is invalid."""


class ModelValidator:
    """
    Validates generation inputs.

    Project configuration problems are fatal and raise ConfigurationError.
    Diagram problems never stop generation; they are returned as warning
    diagnostics. The validator never modifies what it checks.
    """

    def __init__(self):
        """Initialize the model validator."""
        self.issues: List[str] = []
        self.warnings: List[Diagnostic] = []

    def validate_project(self, config: ProjectConfig) -> None:
        """
        Validate the project configuration.

        Args:
            config: Project configuration to check

        Raises:
            ConfigurationError: If the name is empty or the group id or
                                mobile package name is not a legal package
        """
        self.issues = []

        if not config.name or not config.name.strip():
            self.issues.append("Project name must not be empty")
        elif not config.artifact_id:
            self.issues.append(f"Project name '{config.name}' contains no letters or digits")

        segments = (config.group_id or "").split(".")
        if not all(_PACKAGE_SEGMENT.match(segment) for segment in segments):
            self.issues.append(f"Group id '{config.group_id}' is not a valid dotted package name")

        if config.package_name and not _DART_PACKAGE.match(config.package_name):
            self.issues.append(f"Mobile package name '{config.package_name}' must be lower_snake_case")

        for issue in self.issues:
            logger.error("Validation issue: %s", issue)

        if self.issues:
            raise ConfigurationError("; ".join(self.issues))

    def validate_diagram(self, diagram: Diagram) -> List[Diagnostic]:
        """
        Check a diagram for content that generates poorly.

        Args:
            diagram: Diagram to check

        Returns:
            Warning diagnostics, one per finding
        """
        log = DiagnosticLog()

        self._check_realizations(diagram, log)
        self._check_interface_implementations(diagram, log)
        self._check_empty_classes(diagram, log)
        self._check_empty_enums(diagram, log)
        self._check_similar_names(diagram, log)

        self.warnings = log.entries
        return list(self.warnings)

    def _check_realizations(self, diagram: Diagram, log: DiagnosticLog) -> None:
        """Check that realization edges target interfaces."""
        for rel in diagram.get_relationships_by_type(RelationshipType.REALIZATION):
            target = diagram.get_node(rel.target_id)
            if target is not None and not target.is_interface:
                log.add(
                    DiagnosticCode.MODEL_WARNING,
                    f"Realization '{rel.id}' targets non-interface '{target.class_name}'; ignored",
                    edge_id=rel.id,
                )

    def _check_interface_implementations(self, diagram: Diagram, log: DiagnosticLog) -> None:
        """Check that every interface is implemented or extended."""
        for node in diagram.nodes.values():
            if not node.is_interface:
                continue

            has_implementation = any(
                rel.target_id == node.id and (rel.is_realization() or rel.is_inheritance())
                for rel in diagram.relationships
            )
            if not has_implementation:
                log.add(
                    DiagnosticCode.MODEL_WARNING,
                    f"Interface '{node.class_name}' has no implementations",
                    node_id=node.id,
                )

    def _check_empty_classes(self, diagram: Diagram, log: DiagnosticLog) -> None:
        """Check for classes with neither attributes nor relationships."""
        connected = set()
        for rel in diagram.relationships:
            connected.add(rel.source_id)
            connected.add(rel.target_id)

        for node in diagram.nodes.values():
            if node.is_class and not node.attributes and node.id not in connected:
                log.add(
                    DiagnosticCode.MODEL_WARNING,
                    f"Class '{node.class_name}' has no attributes and no relationships",
                    node_id=node.id,
                )

    def _check_empty_enums(self, diagram: Diagram, log: DiagnosticLog) -> None:
        for node in diagram.nodes.values():
            if node.is_enumeration and not node.enum_values:
                log.add(
                    DiagnosticCode.MODEL_WARNING,
                    f"Enumeration '{node.class_name}' has no literals",
                    node_id=node.id,
                )

    def _check_similar_names(self, diagram: Diagram, log: DiagnosticLog) -> None:
        """Check for class names that are easy to confuse."""
        names = [node.class_name for node in diagram.nodes.values()]
        for i, name1 in enumerate(names):
            for name2 in names[i + 1:]:
                similarity = SequenceMatcher(None, name1.lower(), name2.lower()).ratio()
                if similarity > 0.9:
                    log.add(
                        DiagnosticCode.MODEL_WARNING,
                        f"Very similar class names: '{name1}' and '{name2}'",
                    )
