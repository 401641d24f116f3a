"""
Pipeline components for code generation.

This package provides the pipeline implementations that orchestrate
a generation run from raw diagram payloads to descriptors.
"""

from umlgen.pipelines.base_pipeline import Pipeline, PipelineResult
from umlgen.pipelines.code_generation import CodeGenerationPipeline, GenerationResult

__all__ = ['Pipeline', 'PipelineResult', 'CodeGenerationPipeline', 'GenerationResult']
