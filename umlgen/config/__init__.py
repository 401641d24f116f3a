"""
Configuration components for code generation.

This package provides settings and project configuration management
for generation runs.
"""

from umlgen.config.settings import ProjectConfig, Settings

__all__ = ['ProjectConfig', 'Settings']
