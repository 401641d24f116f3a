"""
Utility functions and classes for code generation.

This package provides validation of generation inputs and
diagram file loading.
"""

from umlgen.utils.validation import ConfigurationError, ModelValidator
from umlgen.utils.data_loader import DiagramLoader, dump_json

__all__ = [
    'ConfigurationError',
    'ModelValidator',
    'DiagramLoader',
    'dump_json',
]
