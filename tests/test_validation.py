"""
Tests for configuration and diagram validation.
"""

import unittest

from umlgen.config.settings import ProjectConfig
from umlgen.core.diagnostics import DiagnosticCode
from umlgen.utils.validation import ConfigurationError, ModelValidator

from diagram_fixtures import build_diagram, edge, node


class TestProjectValidation(unittest.TestCase):
    """Tests for project configuration checks."""

    def setUp(self):
        """Set up the validator."""
        self.validator = ModelValidator()

    def test_valid_configuration(self):
        """Test that the default configuration passes."""
        self.validator.validate_project(ProjectConfig())
        self.assertEqual(self.validator.issues, [])

    def test_invalid_configurations(self):
        """Test each kind of fatal configuration problem."""
        cases = [
            ProjectConfig(name=""),
            ProjectConfig(name="!!!"),
            ProjectConfig(group_id="com..acme"),
            ProjectConfig(group_id="com.acme-corp"),
            ProjectConfig(package_name="ShopApp"),
        ]
        for config in cases:
            with self.subTest(config=config):
                with self.assertLogs("umlgen.utils.validation", level="ERROR"):
                    with self.assertRaises(ConfigurationError):
                        self.validator.validate_project(config)

    def test_configuration_error_is_value_error(self):
        """Test that callers may catch ValueError."""
        self.assertTrue(issubclass(ConfigurationError, ValueError))


class TestDiagramValidation(unittest.TestCase):
    """Tests for diagram warnings."""

    def setUp(self):
        """Set up the validator."""
        self.validator = ModelValidator()

    def test_clean_diagram(self):
        """Test that a connected diagram produces no warnings."""
        diagram = build_diagram(
            [node("c", "Customer"), node("o", "Order", attributes=[("total", "Double")])],
            [edge("e1", "c", "o", source_mult="1", target_mult="*")],
        )
        self.assertEqual(self.validator.validate_diagram(diagram), [])

    def test_warnings(self):
        """Test every diagram check."""
        diagram = build_diagram(
            [
                node("o", "Order", attributes=[("total", "Double")]),
                node("o2", "Orders", attributes=[("total", "Double")]),
                node("l", "Lonely"),
                node("p", "Payable", kind="interface"),
                node("s", "Status", kind="enum"),
            ],
            [edge("e1", "o", "o2", rel_type="realization")],
        )

        warnings = self.validator.validate_diagram(diagram)
        messages = [d.message for d in warnings]

        self.assertTrue(all(d.code == DiagnosticCode.MODEL_WARNING for d in warnings))
        self.assertEqual(len(warnings), 5)
        self.assertEqual(warnings[0].edge_id, "e1")
        self.assertIn("Interface 'Payable' has no implementations", messages)
        self.assertIn("Class 'Lonely' has no attributes and no relationships", messages)
        self.assertIn("Enumeration 'Status' has no literals", messages)
        self.assertIn("Very similar class names: 'Order' and 'Orders'", messages)
        self.assertEqual(self.validator.warnings, warnings)

    def test_diagram_is_not_modified(self):
        """Test that validation leaves the diagram alone."""
        diagram = build_diagram([node("l", "Lonely")], [])

        self.validator.validate_diagram(diagram)

        self.assertEqual(len(diagram), 1)
        self.assertEqual(diagram.relationships, [])


if __name__ == '__main__':
    unittest.main()
