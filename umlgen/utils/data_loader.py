"""
Diagram loading utilities for code generation.
"""

import json
import os
from typing import Any, Dict, List, Tuple


class DiagramLoader:
    """Loads diagram payloads saved by the diagram editor."""

    def __init__(self, data_root: str = "."):
        """
        Initialize the diagram loader.

        Args:
            data_root: Directory relative paths are resolved against
        """
        self.data_root = data_root

    def get_diagram_path(self, filename: str) -> str:
        """
        Get the full path of a diagram file.

        Args:
            filename: Diagram filename or path

        Returns:
            The path itself if absolute, otherwise joined to the data root
        """
        if os.path.isabs(filename):
            return filename
        return os.path.join(self.data_root, filename)

    def load(self, filename: str) -> Tuple[List[Any], List[Any]]:
        """
        Load the node and edge collections of a diagram file.

        The file holds either `{"nodes": [...], "edges": [...]}` or the
        same object under a top-level `"diagram"` key.

        Args:
            filename: Diagram filename or path

        Returns:
            Tuple of (nodes, edges)

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not a diagram document
        """
        path = self.get_diagram_path(filename)
        with open(path, 'r', encoding='utf-8') as f:
            document = json.load(f)

        return self.parse(document, source=path)

    def parse(self, document: Any, source: str = "<memory>") -> Tuple[List[Any], List[Any]]:
        """
        Pull the node and edge collections out of a decoded document.

        Args:
            document: Decoded JSON document
            source: Name used in error messages

        Returns:
            Tuple of (nodes, edges)

        Raises:
            ValueError: If the document has no node list or its edges are not a list
        """
        if isinstance(document, dict) and isinstance(document.get("diagram"), dict):
            document = document["diagram"]

        if not isinstance(document, dict) or not isinstance(document.get("nodes"), list):
            raise ValueError(f"{source} is not a diagram document: expected a 'nodes' list")

        edges = document.get("edges")
        if edges is None:
            edges = []
        elif not isinstance(edges, list):
            raise ValueError(f"{source} is not a diagram document: 'edges' must be a list")

        return document["nodes"], edges

    def list_diagrams(self) -> List[str]:
        """
        List diagram files in the data root.

        Returns:
            Sorted JSON filenames
        """
        if not os.path.isdir(self.data_root):
            return []

        return sorted(
            f
            for f in os.listdir(self.data_root)
            if f.endswith(".json") and os.path.isfile(os.path.join(self.data_root, f))
        )


def dump_json(payload: Dict[str, Any], path: str, indent: int = 2) -> None:
    """
    Write a JSON document, creating parent directories.

    Args:
        payload: JSON-compatible value
        path: Destination path
        indent: Indentation width
    """
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=indent)
