"""
Code generation pipeline implementation.

This module implements the pipeline that turns raw diagram payloads into
class descriptors and mobile bundles.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from umlgen.config.settings import ProjectConfig, Settings
from umlgen.core.descriptors import ClassDescriptor, to_serializable
from umlgen.core.diagnostics import Diagnostic, Severity
from umlgen.generators.backend import BackendDescriptorBuilder
from umlgen.generators.mobile import MobileBundle, MobileDescriptorBuilder
from umlgen.generators.report import ReportGenerator
from umlgen.phases.classification import RelationshipClassifier
from umlgen.phases.extraction import GraphExtractor
from umlgen.pipelines.base_pipeline import Pipeline, PipelineResult
from umlgen.utils.validation import ConfigurationError, ModelValidator

logger = logging.getLogger(__name__)

TARGET_BACKEND = "backend"
TARGET_MOBILE = "mobile"
TARGET_ALL = "all"
TARGETS = (TARGET_BACKEND, TARGET_MOBILE, TARGET_ALL)


@dataclass
class GenerationResult(PipelineResult):
    """
    Result of a generation run.

    A run is all or nothing: on failure the descriptor and bundle lists
    are empty and `error_message` says why.
    """

    descriptors: List[ClassDescriptor] = field(default_factory=list)
    mobile_bundles: List[MobileBundle] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    report: str = ""

    def get_descriptor(self, name: str) -> Optional[ClassDescriptor]:
        for descriptor in self.descriptors:
            if descriptor.name == name:
                return descriptor
        return None

    def get_bundle(self, class_name: str) -> Optional[MobileBundle]:
        for bundle in self.mobile_bundles:
            if bundle.class_name == class_name:
                return bundle
        return None

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible form of the result, without the report text."""
        return {
            "success": self.success,
            "error_message": self.error_message,
            "execution_time": self.execution_time,
            "metrics": self.metrics,
            "messages": self.messages,
            "descriptors": to_serializable(self.descriptors),
            "mobile_bundles": to_serializable(self.mobile_bundles),
            "diagnostics": to_serializable(self.diagnostics),
        }


class CodeGenerationPipeline(Pipeline):
    """
    Pipeline for descriptor generation from a class diagram.

    This pipeline orchestrates one generation run:
    1. Validating the project configuration
    2. Extracting the diagram from the raw payload
    3. Checking the diagram for questionable content
    4. Classifying relationships (once, shared by every builder)
    5. Building backend descriptors and/or mobile bundles
    6. Writing the generation report
    """

    result_class = GenerationResult

    def __init__(self, project: Optional[ProjectConfig] = None, settings: Optional[Settings] = None):
        """
        Initialize the code generation pipeline.

        Args:
            project: Project configuration; read from settings if omitted
            settings: Settings; defaults and environment if omitted
        """
        super().__init__("Code Generation")
        self.settings = settings or Settings()
        self.project = project or ProjectConfig.from_settings(self.settings)
        self.target = self.settings.get("generation", "target", default=TARGET_ALL)
        self.validator = ModelValidator()
        self.extractor = GraphExtractor()
        self.classifier = RelationshipClassifier()

    def setup(self, project: Optional[ProjectConfig] = None, target: Optional[str] = None) -> bool:
        """
        Change the project or target of later runs.

        Args:
            project: New project configuration
            target: New target ("backend", "mobile" or "all")

        Returns:
            True if setup successful, False otherwise
        """
        if target is not None and target not in TARGETS:
            self.add_error(f"Unknown target '{target}'; expected one of {', '.join(TARGETS)}")
            return False

        if project is not None:
            self.project = project
        if target is not None:
            self.target = target
        return True

    def execute(
        self,
        nodes: Optional[Iterable[Any]] = None,
        edges: Optional[Iterable[Any]] = None,
        target: Optional[str] = None,
    ) -> GenerationResult:
        """
        Execute one generation run.

        Args:
            nodes: Raw node payloads
            edges: Raw edge payloads, in editor order
            target: Overrides the configured target for this run

        Returns:
            GenerationResult; never raises
        """
        self._start_execution()

        try:
            return self._run(nodes, edges, target or self.target)
        except ConfigurationError as e:
            self.add_error(f"Invalid configuration: {e}")
            return self.create_result(False, error_message=str(e))
        except Exception as e:
            logger.exception("Generation run failed")
            self.add_error(f"Generation failed: {e}")
            return self.create_result(False, error_message=f"{type(e).__name__}: {e}")

    def _run(self, nodes: Optional[Iterable[Any]], edges: Optional[Iterable[Any]], target: str) -> GenerationResult:
        if target not in TARGETS:
            raise ConfigurationError(f"Unknown target '{target}'; expected one of {', '.join(TARGETS)}")

        self.add_message("1. Validating project configuration...")
        self.validator.validate_project(self.project)

        self.add_message("2. Extracting diagram...")
        extraction = self.extractor.extract(nodes, edges)
        diagram = extraction.diagram
        diagnostics: List[Diagnostic] = list(extraction.diagnostics)

        self.add_message("3. Checking diagram...")
        diagnostics.extend(self.validator.validate_diagram(diagram))

        self.add_message("4. Classifying relationships...")
        plan = self.classifier.classify(diagram)
        diagnostics.extend(plan.diagnostics)

        descriptors: List[ClassDescriptor] = []
        bundles: List[MobileBundle] = []

        if target in (TARGET_BACKEND, TARGET_ALL):
            self.add_message("5. Building backend descriptors...")
            backend = BackendDescriptorBuilder(diagram, self.project, plan)
            descriptors = backend.build()
            diagnostics.extend(backend.diagnostics)

        if target in (TARGET_MOBILE, TARGET_ALL):
            self.add_message("6. Building mobile bundles...")
            mobile = MobileDescriptorBuilder(diagram, self.project, plan)
            bundles = mobile.build()
            diagnostics.extend(mobile.diagnostics)

        diagnostics = list(dict.fromkeys(diagnostics))
        warning_count = sum(1 for d in diagnostics if d.severity == Severity.WARNING)
        if warning_count:
            self.add_warning(f"{warning_count} diagnostic warning(s) recorded")

        report = ReportGenerator(diagram, self.project.name, descriptors, plan, diagnostics)
        self.add_metric("nodes", len(diagram.nodes))
        self.add_metric("relationships", len(diagram.relationships))
        self.add_metric("relationship_ends", len(plan.ends))
        self.add_metric("descriptors", len(descriptors))
        self.add_metric("mobile_bundles", len(bundles))
        self.add_metric("diagnostics", len(diagnostics))
        self.add_metric("warnings", warning_count)

        self.add_message(
            f"Generated {len(descriptors)} descriptors and {len(bundles)} mobile bundles "
            f"for project '{self.project.name}'"
        )

        return self.create_result(
            True,
            descriptors=descriptors,
            mobile_bundles=bundles,
            diagnostics=diagnostics,
            report=report.generate_markdown(),
        )
