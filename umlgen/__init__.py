"""
umlgen - Relationship-aware code generation from UML class diagrams.

This package turns an editor's class diagram (nodes plus typed,
multiplicity-annotated edges) into class descriptors for a Spring-style
backend and a Flutter client, resolving foreign-key ownership, cascades,
inheritance and field-name conflicts along the way.
"""

__version__ = "0.1.0"
__author__ = "umlgen contributors"

from umlgen.core.diagram import Diagram
from umlgen.core.node import Node
from umlgen.core.relationship import Relationship
from umlgen.config.settings import ProjectConfig, Settings
from umlgen.pipelines.code_generation import CodeGenerationPipeline, GenerationResult
