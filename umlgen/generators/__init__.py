"""
Output generators for code generation.

This package provides the descriptor builders for the backend and the
mobile client, and the Markdown generation report.
"""

from umlgen.generators.backend import BackendDescriptorBuilder
from umlgen.generators.mobile import (
    MobileBundle,
    MobileDescriptorBuilder,
    MobileField,
    ProviderCall,
    ProviderDescriptor,
    SelectorDescriptor,
)
from umlgen.generators.report import ReportGenerator

__all__ = [
    'BackendDescriptorBuilder',
    'MobileBundle',
    'MobileDescriptorBuilder',
    'MobileField',
    'ProviderCall',
    'ProviderDescriptor',
    'SelectorDescriptor',
    'ReportGenerator',
]
