"""
Generation report module.

This module provides the ReportGenerator class for creating Markdown
reports that document what a generation run produced from a diagram
and which problems it recovered from.
"""

import time
from typing import Dict, List, Optional, Sequence

from umlgen.core.descriptors import ClassDescriptor
from umlgen.core.diagnostics import Diagnostic
from umlgen.core.diagram import Diagram
from umlgen.core.enums import DescriptorKind, RelationshipType
from umlgen.phases.classification import RelationshipPlan


class ReportGenerator:
    """
    Generator for generation reports.

    This class creates reports documenting the generated descriptors,
    the relationship decisions behind them and the diagnostics of the run.
    """

    def __init__(
        self,
        diagram: Diagram,
        project_name: str,
        descriptors: Sequence[ClassDescriptor] = (),
        plan: Optional[RelationshipPlan] = None,
        diagnostics: Sequence[Diagnostic] = (),
    ):
        """
        Initialize the report generator.

        Args:
            diagram: The source diagram
            project_name: Name of the generated project
            descriptors: Descriptors produced by the run
            plan: Relationship plan of the diagram
            diagnostics: Diagnostics recorded during the run
        """
        self.diagram = diagram
        self.project_name = project_name
        self.descriptors = list(descriptors)
        self.plan = plan
        self.diagnostics = list(diagnostics)

    def generate_markdown(self, include_metrics: bool = True) -> str:
        """
        Generate a Markdown report for the run.

        Args:
            include_metrics: Whether to include diagram and output metrics

        Returns:
            Markdown report as string
        """
        report = [f"# Generation Report for {self.project_name}\n"]
        report.append(f"**Generated on:** {time.strftime('%Y-%m-%d %H:%M:%S')}\n")

        if include_metrics:
            metrics = self.calculate_metrics()
            report.append("## Metrics")
            report.append(f"- **Classes:** {metrics['classes']}")
            report.append(f"- **Abstract classes:** {metrics['abstract_classes']}")
            report.append(f"- **Interfaces:** {metrics['interfaces']}")
            report.append(f"- **Enumerations:** {metrics['enumerations']}")
            report.append(f"- **Relationships:** {metrics['relationships']}")
            for rel_type in RelationshipType:
                report.append(f"  - {rel_type.value}: {metrics[rel_type.value]}")
            report.append(f"- **Descriptors:** {metrics['descriptors']}")
            report.append(f"- **Diagnostics:** {metrics['diagnostics']}")
            report.append("\n")

        report.append("## Classes")
        for name, descriptors in sorted(self._descriptors_by_class().items()):
            report.append(f"### {name}")
            for descriptor in descriptors:
                report.append(f"- **{descriptor.kind.value}:** `{descriptor.qualified_name}`")
                for descriptor_field in descriptor.fields:
                    note = ""
                    if descriptor_field.relation is not None:
                        relation = descriptor_field.relation
                        side = "owning" if relation.owning_side else "inverse"
                        note = f" ({relation.cardinality.value}, {side})"
                    report.append(f"  - {descriptor_field.name}: {descriptor_field.type}{note}")
            report.append("\n")

        if self.plan is not None and self.plan.ends:
            report.append("## Relationships")
            report.append("| Class | Field | Related | Cardinality | Owning | Cascade |")
            report.append("|---|---|---|---|---|---|")
            for end in self.plan.ends:
                owner = self.diagram.get_node(end.node_id)
                report.append(
                    f"| {owner.class_name} | {end.field_name} | {end.related_class_name} | "
                    f"{end.cardinality.value} | {'yes' if end.owning_side else 'no'} | "
                    f"{end.cascade or '-'} |"
                )
            report.append("\n")

        report.append("## Diagnostics")
        if not self.diagnostics:
            report.append("No problems recorded.")
        for diagnostic in self.diagnostics:
            report.append(f"- {diagnostic.severity.value.upper()} {diagnostic}")

        return "\n".join(report)

    def save_report(self, output_path: str, include_metrics: bool = True) -> None:
        """
        Save the Markdown report to a file.

        Args:
            output_path: Path to save the report
            include_metrics: Whether to include metrics
        """
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.generate_markdown(include_metrics))

    def calculate_metrics(self) -> Dict[str, int]:
        """
        Calculate metrics about the diagram and the generated output.

        Returns:
            Dictionary of metrics
        """
        metrics = {
            "classes": 0,
            "abstract_classes": 0,
            "interfaces": 0,
            "enumerations": 0,
            "relationships": len(self.diagram.relationships),
            "descriptors": len(self.descriptors),
            "diagnostics": len(self.diagnostics),
        }
        for rel_type in RelationshipType:
            metrics[rel_type.value] = 0

        for node in self.diagram.nodes.values():
            if node.is_enumeration:
                metrics["enumerations"] += 1
            elif node.is_interface:
                metrics["interfaces"] += 1
            else:
                metrics["classes"] += 1

        for rel in self.diagram.relationships:
            metrics[rel.relationship_type.value] += 1

        metrics["abstract_classes"] = sum(
            1 for descriptor in self.descriptors
            if descriptor.kind == DescriptorKind.ENTITY and descriptor.is_abstract
        )

        return metrics

    def _descriptors_by_class(self) -> Dict[str, List[ClassDescriptor]]:
        grouped: Dict[str, List[ClassDescriptor]] = {}
        for descriptor in self.descriptors:
            node = self.diagram.get_node(descriptor.node_id) if descriptor.node_id else None
            key = node.class_name if node is not None else descriptor.name
            grouped.setdefault(key, []).append(descriptor)
        return grouped
