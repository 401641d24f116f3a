"""
Tests for core code generation components.
"""

import unittest

from umlgen.core.enums import Cardinality, DescriptorKind, NodeKind, RelationshipType
from umlgen.core.node import Attribute, EnumValue, Node
from umlgen.core.relationship import Relationship
from umlgen.core.diagram import Diagram
from umlgen.core.diagnostics import DiagnosticCode, DiagnosticLog, Severity
from umlgen.core.descriptors import ClassDescriptor, FieldDescriptor, to_serializable


class TestNode(unittest.TestCase):
    """Tests for the Node class."""

    def test_initialization(self):
        """Test basic initialization."""
        node = Node("n1", "order item", class_name="OrderItem")
        self.assertEqual(node.id, "n1")
        self.assertEqual(node.label, "order item")
        self.assertEqual(node.class_name, "OrderItem")
        self.assertEqual(node.kind, NodeKind.CLASS)
        self.assertEqual(node.attributes, [])
        self.assertEqual(node.methods, [])
        self.assertTrue(node.is_class)
        self.assertFalse(node.is_abstract)

    def test_class_name_defaults_to_label(self):
        """Test that the label is used when no class name is given."""
        node = Node("n1", "Order")
        self.assertEqual(node.class_name, "Order")

    def test_add_attribute_keeps_order(self):
        """Test adding attributes."""
        node = Node("n1", "User")
        node.add_attribute(Attribute("a1", "name"))
        node.add_attribute(Attribute("a2", "age", type="Integer"))

        self.assertEqual([a.name for a in node.attributes], ["name", "age"])
        self.assertEqual(node.attributes[0].type, "String")

    def test_add_enum_value_ignores_duplicates(self):
        """Test adding enum values."""
        node = Node("n1", "Status", kind=NodeKind.ENUM)
        node.add_enum_value(EnumValue("OPEN"))
        node.add_enum_value(EnumValue("CLOSED"))
        node.add_enum_value(EnumValue("OPEN"))

        self.assertTrue(node.is_enumeration)
        self.assertEqual([v.name for v in node.enum_values], ["OPEN", "CLOSED"])


class TestRelationship(unittest.TestCase):
    """Tests for the Relationship class."""

    def test_type_predicates(self):
        """Test relationship type checks."""
        composition = Relationship("r1", "a", "b", RelationshipType.COMPOSITION)
        dependency = Relationship("r2", "a", "b", RelationshipType.DEPENDENCY)
        inheritance = Relationship("r3", "a", "b", RelationshipType.INHERITANCE)

        self.assertTrue(composition.is_composition())
        self.assertTrue(composition.is_structural())
        self.assertTrue(dependency.is_dependency())
        self.assertFalse(dependency.is_structural())
        self.assertTrue(inheritance.is_inheritance())
        self.assertFalse(inheritance.is_structural())

    def test_mirrors(self):
        """Test detection of reverse declarations."""
        forward = Relationship("r1", "a", "b", RelationshipType.ASSOCIATION)
        backward = Relationship("r2", "b", "a", RelationshipType.ASSOCIATION)
        other_type = Relationship("r3", "b", "a", RelationshipType.AGGREGATION)

        self.assertTrue(forward.mirrors(backward))
        self.assertTrue(backward.mirrors(forward))
        self.assertFalse(forward.mirrors(other_type))
        self.assertFalse(forward.mirrors(forward))

    def test_set_multiplicity(self):
        """Test setting multiplicities."""
        rel = Relationship("r1", "a", "b", RelationshipType.ASSOCIATION)
        rel.set_multiplicity("1", "0..*")
        self.assertEqual(rel.source_multiplicity, "1")
        self.assertEqual(rel.target_multiplicity, "0..*")


class TestDiagram(unittest.TestCase):
    """Tests for the Diagram class."""

    def setUp(self):
        """Set up a small diagram."""
        self.diagram = Diagram()
        self.diagram.add_node(Node("a", "Animal"))
        self.diagram.add_node(Node("d", "Dog"))
        self.diagram.add_node(Node("c", "Cat"))

    def test_add_node_rejects_duplicate_ids(self):
        """Test duplicate node ids."""
        self.assertFalse(self.diagram.add_node(Node("a", "Other")))
        self.assertEqual(self.diagram.get_node("a").class_name, "Animal")
        self.assertEqual(len(self.diagram), 3)

    def test_add_relationship_stamps_position(self):
        """Test that edge positions follow insertion order."""
        first = Relationship("r1", "d", "a", RelationshipType.INHERITANCE)
        second = Relationship("r2", "c", "a", RelationshipType.INHERITANCE)

        self.assertTrue(self.diagram.add_relationship(first))
        self.assertTrue(self.diagram.add_relationship(second))
        self.assertEqual(first.position, 0)
        self.assertEqual(second.position, 1)

    def test_add_relationship_requires_endpoints(self):
        """Test that edges to missing nodes are rejected."""
        rel = Relationship("r1", "d", "missing", RelationshipType.ASSOCIATION)
        self.assertFalse(self.diagram.add_relationship(rel))
        self.assertEqual(self.diagram.relationships, [])

    def test_get_node_by_class_name(self):
        """Test case-insensitive lookup."""
        self.assertEqual(self.diagram.get_node_by_class_name("dog").id, "d")
        self.assertIsNone(self.diagram.get_node_by_class_name("Bird"))

    def test_inheritance_hierarchy(self):
        """Test the declared hierarchy map."""
        self.diagram.add_relationship(Relationship("r1", "d", "a", RelationshipType.INHERITANCE))
        self.diagram.add_relationship(Relationship("r2", "c", "a", RelationshipType.INHERITANCE))
        self.diagram.add_relationship(Relationship("r3", "d", "c", RelationshipType.ASSOCIATION))

        self.assertEqual(self.diagram.get_inheritance_hierarchy(), {"a": ["d", "c"]})
        self.assertEqual([r.id for r in self.diagram.relationships_from("d")], ["r1", "r3"])


class TestCardinality(unittest.TestCase):
    """Tests for Cardinality."""

    def test_reversed(self):
        """Test the view from the opposite end."""
        self.assertEqual(Cardinality.ONE_TO_MANY.reversed(), Cardinality.MANY_TO_ONE)
        self.assertEqual(Cardinality.MANY_TO_ONE.reversed(), Cardinality.ONE_TO_MANY)
        self.assertEqual(Cardinality.ONE_TO_ONE.reversed(), Cardinality.ONE_TO_ONE)
        self.assertEqual(Cardinality.MANY_TO_MANY.reversed(), Cardinality.MANY_TO_MANY)


class TestDiagnosticLog(unittest.TestCase):
    """Tests for DiagnosticLog."""

    def test_add_and_filter(self):
        """Test recording and filtering diagnostics."""
        log = DiagnosticLog()
        log.add(DiagnosticCode.SKIPPED_EDGE, "edge skipped", edge_id="e1")
        log.add(DiagnosticCode.MIRRORED_EDGE, "edge mirrored", severity=Severity.INFO)

        self.assertEqual(len(log), 2)
        self.assertEqual([d.edge_id for d in log.by_code(DiagnosticCode.SKIPPED_EDGE)], ["e1"])
        self.assertEqual([d.code for d in log.warnings()], [DiagnosticCode.SKIPPED_EDGE])
        self.assertEqual(str(log.entries[0]), "[skipped_edge] edge skipped")


class TestDescriptors(unittest.TestCase):
    """Tests for descriptor helpers."""

    def test_lookup_and_serialization(self):
        """Test field lookup and JSON conversion."""
        descriptor = ClassDescriptor(
            name="Order",
            kind=DescriptorKind.ENTITY,
            package="com.acme.shop.entity",
            fields=[FieldDescriptor(name="total", type="Double")],
        )

        self.assertEqual(descriptor.qualified_name, "com.acme.shop.entity.Order")
        self.assertEqual(descriptor.field_names(), ["total"])
        self.assertIsNone(descriptor.get_field("missing"))

        data = to_serializable(descriptor)
        self.assertEqual(data["kind"], "entity")
        self.assertEqual(data["fields"][0]["visibility"], "private")
        self.assertIsNone(data["fields"][0]["relation"])


if __name__ == '__main__':
    unittest.main()
