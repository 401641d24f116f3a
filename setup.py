"""
umlgen Package Setup Configuration

This file defines the metadata for the 'umlgen' package, which provides
a library and CLI tool for turning UML class diagrams into
relationship-aware class descriptors for a Spring-style backend and a
Flutter client.

Key Components:
- CLI entry point: 'umlgen=umlgen.cli:main'
- Core dependencies: none beyond the standard library
- Target audience: Developers building code generators on top of a diagram editor
- License: MIT License
"""

from setuptools import setup, find_packages

setup(
    name="umlgen",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "umlgen=umlgen.cli:main",
        ],
    },
    author="umlgen contributors",
    description="umlgen: Relationship-aware code generation descriptors from UML class diagrams",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
)
