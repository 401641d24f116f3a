"""
Tests for the command-line interface and diagram loading.
"""

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from umlgen.cli import build_parser, main
from umlgen.utils.data_loader import DiagramLoader

from diagram_fixtures import customer_order_payload


class TestDiagramLoader(unittest.TestCase):
    """Tests for the DiagramLoader class."""

    def test_parse_shapes(self):
        """Test plain and wrapped diagram documents."""
        loader = DiagramLoader()
        nodes, edges = customer_order_payload()

        self.assertEqual(loader.parse({"nodes": nodes, "edges": edges}), (nodes, edges))
        self.assertEqual(loader.parse({"diagram": {"nodes": nodes}}), (nodes, []))

    def test_parse_rejects_non_diagrams(self):
        """Test documents without a node list."""
        loader = DiagramLoader()
        for document in ([], {"edges": []}, {"nodes": [], "edges": {}}):
            with self.subTest(document=document):
                with self.assertRaises(ValueError):
                    loader.parse(document)

    def test_parse_rejects_non_list_edges(self):
        """Test that an edges value other than a list is an error, not an empty diagram."""
        loader = DiagramLoader()
        for edges in ({}, {"e1": {}}, "e1", 3):
            with self.subTest(edges=edges):
                with self.assertRaises(ValueError):
                    loader.parse({"nodes": [], "edges": edges})
        self.assertEqual(loader.parse({"nodes": [], "edges": None}), ([], []))

    def test_list_and_load(self):
        """Test listing and loading files under the data root."""
        nodes, edges = customer_order_payload()
        with tempfile.TemporaryDirectory() as tmp:
            with open(os.path.join(tmp, "shop.json"), "w", encoding="utf-8") as f:
                json.dump({"nodes": nodes, "edges": edges}, f)
            with open(os.path.join(tmp, "notes.txt"), "w", encoding="utf-8") as f:
                f.write("not a diagram")

            loader = DiagramLoader(tmp)
            self.assertEqual(loader.list_diagrams(), ["shop.json"])
            self.assertEqual(loader.load("shop.json"), (nodes, edges))

        self.assertEqual(DiagramLoader("/does/not/exist").list_diagrams(), [])


class TestCli(unittest.TestCase):
    """Tests for the umlgen command."""

    def setUp(self):
        """Create a temporary directory holding a diagram file."""
        patcher = mock.patch.dict(os.environ, {}, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        nodes, edges = customer_order_payload()
        self.diagram_path = os.path.join(self.tmp.name, "shop.json")
        with open(self.diagram_path, "w", encoding="utf-8") as f:
            json.dump({"nodes": nodes, "edges": edges}, f)
        self.output_dir = os.path.join(self.tmp.name, "out")

    def test_parser_requires_diagram(self):
        """Test that --diagram is mandatory."""
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                build_parser().parse_args([])

    def test_writes_output(self):
        """Test a successful run."""
        with redirect_stdout(io.StringIO()) as stdout:
            code = main([
                "--diagram", self.diagram_path,
                "--output-dir", self.output_dir,
                "--group-id", "com.acme",
                "--name", "Shop",
            ])

        self.assertEqual(code, 0)
        self.assertEqual(json.loads(stdout.getvalue())["descriptors"], 10)

        with open(os.path.join(self.output_dir, "descriptors.json"), encoding="utf-8") as f:
            descriptors = json.load(f)["descriptors"]
        self.assertEqual(descriptors[0]["package"], "com.acme.shop.entity")
        self.assertTrue(os.path.exists(os.path.join(self.output_dir, "mobile.json")))
        self.assertTrue(os.path.exists(os.path.join(self.output_dir, "generation_report.md")))

    def test_missing_diagram(self):
        """Test that an unreadable diagram exits with status 2."""
        code = main(["--diagram", os.path.join(self.tmp.name, "missing.json"), "--output-dir", self.output_dir])

        self.assertEqual(code, 2)
        self.assertFalse(os.path.exists(self.output_dir))

    def test_invalid_configuration(self):
        """Test that a failed run writes nothing and exits with status 1."""
        with redirect_stderr(io.StringIO()) as stderr:
            code = main([
                "--diagram", self.diagram_path,
                "--output-dir", self.output_dir,
                "--group-id", "com.9acme",
            ])

        self.assertEqual(code, 1)
        self.assertIn("Generation failed", stderr.getvalue())
        self.assertFalse(os.path.exists(self.output_dir))


if __name__ == '__main__':
    unittest.main()
