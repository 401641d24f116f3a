"""
Generation phases.

This package provides the analysis steps that run between the raw diagram
payload and the descriptor builders: extraction, multiplicity
interpretation, relationship classification, inheritance resolution and
attribute conflict resolution.
"""

from umlgen.phases.extraction import ExtractionResult, GraphExtractor
from umlgen.phases.multiplicity import is_many, is_required
from umlgen.phases.classification import (
    EdgeClassification,
    RelationEnd,
    RelationshipClassifier,
    RelationshipPlan,
)
from umlgen.phases.inheritance import InheritanceResolver
from umlgen.phases.conflicts import ConflictResolution, ConflictResolver

__all__ = [
    'ExtractionResult',
    'GraphExtractor',
    'is_many',
    'is_required',
    'EdgeClassification',
    'RelationEnd',
    'RelationshipClassifier',
    'RelationshipPlan',
    'InheritanceResolver',
    'ConflictResolution',
    'ConflictResolver',
]
