"""
Tests for relationship classification.
"""

import unittest

from umlgen.core.diagnostics import DiagnosticCode
from umlgen.core.enums import Cardinality, Containment, RelationshipType
from umlgen.core.relationship import Relationship
from umlgen.phases.classification import (
    CASCADE_ALL,
    CASCADE_PERSIST_MERGE,
    RelationshipClassifier,
)

from diagram_fixtures import build_diagram, edge, node


def end_named(plan, node_id, field_name):
    for end in plan.ends_for(node_id):
        if end.field_name == field_name:
            return end
    raise AssertionError(f"{node_id} has no relationship field {field_name!r}")


class TestClassifyEdge(unittest.TestCase):
    """Tests for single-edge classification."""

    def setUp(self):
        """Set up the classifier."""
        self.classifier = RelationshipClassifier()

    def test_cardinality_table(self):
        """Test every combination of many/one ends."""
        cases = [
            ("1", "1", Cardinality.ONE_TO_ONE),
            ("*", "1", Cardinality.MANY_TO_ONE),
            ("1", "0..*", Cardinality.ONE_TO_MANY),
            ("1..*", "n", Cardinality.MANY_TO_MANY),
            ("", "", Cardinality.ONE_TO_ONE),
        ]
        for source_mult, target_mult, expected in cases:
            with self.subTest(source=source_mult, target=target_mult):
                rel = Relationship("r", "a", "b", RelationshipType.ASSOCIATION, source_mult, target_mult)
                self.assertEqual(self.classifier.classify_edge(rel).cardinality, expected)

    def test_containment(self):
        """Test containment by relationship type."""
        expected = {
            RelationshipType.ASSOCIATION: Containment.NONE,
            RelationshipType.AGGREGATION: Containment.AGGREGATE,
            RelationshipType.COMPOSITION: Containment.COMPOSE,
            RelationshipType.DEPENDENCY: Containment.NONE,
        }
        for rel_type, containment in expected.items():
            rel = Relationship("r", "a", "b", rel_type, "1", "*")
            self.assertEqual(self.classifier.classify_edge(rel).containment, containment)

        dependency = Relationship("r", "a", "b", RelationshipType.DEPENDENCY)
        self.assertFalse(self.classifier.classify_edge(dependency).persistent)

    def test_hierarchy_edges_are_not_classified(self):
        """Test that inheritance and realization are left to the hierarchy resolver."""
        for rel_type in (RelationshipType.INHERITANCE, RelationshipType.REALIZATION):
            rel = Relationship("r", "a", "b", rel_type)
            self.assertIsNone(self.classifier.classify_edge(rel))


class TestOwnership(unittest.TestCase):
    """Tests for foreign-key ownership."""

    def setUp(self):
        """Set up the classifier."""
        self.classifier = RelationshipClassifier()

    def test_many_side_owns_foreign_key(self):
        """Test that Order, the many side, holds the customer reference."""
        diagram = build_diagram(
            [node("c", "Customer"), node("o", "Order")],
            [edge("e1", "c", "o", source_mult="1", target_mult="*")],
        )
        plan = self.classifier.classify(diagram)

        customer = end_named(plan, "o", "customer")
        self.assertTrue(customer.owning_side)
        self.assertTrue(customer.is_foreign_key)
        self.assertEqual(customer.cardinality, Cardinality.MANY_TO_ONE)
        self.assertEqual(customer.join_column, "customer_id")
        self.assertTrue(customer.required)

        orders = end_named(plan, "c", "orders")
        self.assertFalse(orders.owning_side)
        self.assertTrue(orders.is_collection)
        self.assertEqual(orders.cardinality, Cardinality.ONE_TO_MANY)
        self.assertEqual(orders.mapped_by, "customer")
        self.assertEqual(plan.foreign_keys_for("c"), [])

    def test_optional_reference(self):
        """Test that a 0..1 end gives an optional foreign key."""
        diagram = build_diagram(
            [node("c", "Customer"), node("o", "Order")],
            [edge("e1", "o", "c", source_mult="*", target_mult="0..1")],
        )
        plan = self.classifier.classify(diagram)

        self.assertFalse(end_named(plan, "o", "customer").required)

    def _user_profile_plan(self, reverse=False):
        edges = [
            edge("e1", "u", "p", source_mult="1", target_mult="1"),
            edge("e2", "p", "u", source_mult="1", target_mult="1"),
        ]
        if reverse:
            edges.reverse()
        diagram = build_diagram([node("u", "User"), node("p", "Profile")], edges)
        return self.classifier.classify(diagram)

    def test_mirrored_one_to_one_first_edge_owns(self):
        """Test that the source of the earlier edge owns the foreign key."""
        plan = self._user_profile_plan()

        self.assertEqual(len(plan.ends), 2)
        self.assertTrue(end_named(plan, "u", "profile").owning_side)
        user = end_named(plan, "p", "user")
        self.assertFalse(user.owning_side)
        self.assertEqual(user.mapped_by, "profile")
        self.assertEqual(
            [d.edge_id for d in plan.diagnostics if d.code == DiagnosticCode.MIRRORED_EDGE],
            ["e2"],
        )

    def test_reversing_edge_order_flips_ownership(self):
        """Test that ownership follows edge order, not node order."""
        plan = self._user_profile_plan(reverse=True)

        self.assertEqual(len(plan.ends), 2)
        self.assertTrue(end_named(plan, "p", "user").owning_side)
        self.assertFalse(end_named(plan, "u", "profile").owning_side)
        self.assertEqual(plan.foreign_keys_for("u"), [])

    def test_single_one_to_one_edge(self):
        """Test that a single edge gives the target an inverse reference."""
        diagram = build_diagram(
            [node("u", "User"), node("p", "Profile")],
            [edge("e1", "u", "p")],
        )
        plan = self.classifier.classify(diagram)

        self.assertTrue(end_named(plan, "u", "profile").owning_side)
        self.assertFalse(end_named(plan, "p", "user").owning_side)

    def test_mirrored_one_to_many_pair(self):
        """Test that a reverse declaration of a one-to-many is absorbed."""
        diagram = build_diagram(
            [node("c", "Customer"), node("o", "Order")],
            [
                edge("e1", "c", "o", source_mult="1", target_mult="*"),
                edge("e2", "o", "c", source_mult="*", target_mult="1"),
            ],
        )
        plan = self.classifier.classify(diagram)

        self.assertEqual(sorted(e.field_name for e in plan.ends), ["customer", "orders"])

    def test_many_to_many_source_owns_join_table(self):
        """Test join table ownership."""
        diagram = build_diagram(
            [node("s", "Student"), node("c", "Course")],
            [edge("e1", "s", "c", source_mult="*", target_mult="*")],
        )
        plan = self.classifier.classify(diagram)

        courses = end_named(plan, "s", "courses")
        self.assertTrue(courses.owning_side)
        self.assertTrue(courses.is_collection)
        self.assertFalse(courses.is_foreign_key)
        self.assertEqual(courses.join_table, "students_courses")
        self.assertEqual(courses.join_column, "student_id")
        self.assertEqual(courses.inverse_join_column, "course_id")

        students = end_named(plan, "c", "students")
        self.assertFalse(students.owning_side)
        self.assertEqual(students.mapped_by, "courses")


class TestContainment(unittest.TestCase):
    """Tests for cascade and required flags."""

    def setUp(self):
        """Set up the classifier."""
        self.classifier = RelationshipClassifier()

    def test_composition_cascades_from_parent(self):
        """Test that Order cascades to its items and items require their order."""
        diagram = build_diagram(
            [node("o", "Order"), node("i", "OrderItem")],
            [edge("e1", "o", "i", rel_type="composition", source_mult="1", target_mult="*")],
        )
        plan = self.classifier.classify(diagram)

        items = end_named(plan, "o", "orderItems")
        self.assertEqual(items.cascade, CASCADE_ALL)
        self.assertTrue(items.orphan_removal)
        self.assertEqual(items.containment, Containment.COMPOSE)

        order = end_named(plan, "i", "order")
        self.assertTrue(order.required)
        self.assertIsNone(order.cascade)

    def test_composition_child_required_regardless_of_multiplicity(self):
        """Test that a composed part always requires its whole."""
        diagram = build_diagram(
            [node("o", "Order"), node("i", "OrderItem")],
            [edge("e1", "o", "i", rel_type="composition", source_mult="0..1", target_mult="*")],
        )
        plan = self.classifier.classify(diagram)

        self.assertTrue(end_named(plan, "i", "order").required)

    def test_one_to_one_composition(self):
        """Test that the source is the parent of a one-to-one composition."""
        diagram = build_diagram(
            [node("c", "Car"), node("e", "Engine")],
            [edge("e1", "c", "e", rel_type="composition")],
        )
        plan = self.classifier.classify(diagram)

        engine = end_named(plan, "c", "engine")
        self.assertEqual(engine.cascade, CASCADE_ALL)
        self.assertTrue(engine.orphan_removal)
        self.assertTrue(end_named(plan, "e", "car").required)

    def test_many_to_many_composition(self):
        """Test that many-to-many composition cascades persist and merge only."""
        diagram = build_diagram(
            [node("p", "Playlist"), node("s", "Song")],
            [edge("e1", "p", "s", rel_type="composition", source_mult="*", target_mult="*")],
        )
        plan = self.classifier.classify(diagram)

        songs = end_named(plan, "p", "songs")
        self.assertEqual(songs.cascade, CASCADE_PERSIST_MERGE)
        self.assertFalse(songs.orphan_removal)
        self.assertIsNone(end_named(plan, "s", "playlists").cascade)

    def test_aggregation_has_no_cascade(self):
        """Test weak containment."""
        diagram = build_diagram(
            [node("t", "Team"), node("p", "Player")],
            [edge("e1", "t", "p", rel_type="aggregation", source_mult="0..1", target_mult="*")],
        )
        plan = self.classifier.classify(diagram)

        players = end_named(plan, "t", "players")
        self.assertIsNone(players.cascade)
        self.assertFalse(players.orphan_removal)
        self.assertEqual(players.containment, Containment.AGGREGATE)
        self.assertFalse(end_named(plan, "p", "team").required)


class TestSpecialEnds(unittest.TestCase):
    """Tests for dependency, enum and interface edges."""

    def setUp(self):
        """Set up the classifier."""
        self.classifier = RelationshipClassifier()

    def test_dependency_is_transient_and_one_sided(self):
        """Test that a dependency gives the source a non-persisted reference only."""
        diagram = build_diagram(
            [node("s", "Checkout"), node("g", "PaymentGateway")],
            [edge("e1", "s", "g", rel_type="dependency")],
        )
        plan = self.classifier.classify(diagram)

        gateway = end_named(plan, "s", "paymentGateway")
        self.assertFalse(gateway.persistent)
        self.assertFalse(gateway.owning_side)
        self.assertFalse(gateway.is_foreign_key)
        self.assertEqual(gateway.relationship_type, RelationshipType.DEPENDENCY)
        self.assertEqual(plan.ends_for("g"), [])

    def test_association_to_enum(self):
        """Test that an association to an enum becomes an enum-valued field."""
        diagram = build_diagram(
            [node("o", "Order"), node("s", "OrderStatus", kind="enum", enum_values=["NEW"])],
            [edge("e1", "o", "s", source_mult="*", target_mult="1")],
        )
        plan = self.classifier.classify(diagram)

        status = end_named(plan, "o", "orderStatus")
        self.assertTrue(status.is_enum_reference)
        self.assertFalse(status.is_collection)
        self.assertFalse(status.is_foreign_key)
        self.assertTrue(status.required)
        self.assertEqual(plan.ends_for("s"), [])

    def test_association_to_interface_is_skipped(self):
        """Test that interfaces cannot take part in persisted relationships."""
        diagram = build_diagram(
            [node("o", "Order"), node("p", "Payable", kind="interface")],
            [edge("e1", "o", "p", source_mult="*", target_mult="1")],
        )
        plan = self.classifier.classify(diagram)

        self.assertEqual(plan.ends, [])
        self.assertEqual(
            [d.code for d in plan.diagnostics],
            [DiagnosticCode.INVALID_RELATIONSHIP],
        )


class TestFieldNaming(unittest.TestCase):
    """Tests for relationship field names."""

    def setUp(self):
        """Set up the classifier."""
        self.classifier = RelationshipClassifier()

    def test_repeated_relationship_gets_suffix(self):
        """Test that the later of two same-named fields gets a numeric suffix."""
        diagram = build_diagram(
            [node("p", "Person"), node("a", "Address")],
            [
                edge("e1", "p", "a", source_mult="*", target_mult="1"),
                edge("e2", "p", "a", source_mult="*", target_mult="1"),
            ],
        )
        plan = self.classifier.classify(diagram)

        self.assertEqual([e.field_name for e in plan.ends_for("p")], ["address", "address2"])
        self.assertEqual(end_named(plan, "p", "address2").join_column, "address2_id")
        renamed = [d for d in plan.diagnostics if d.code == DiagnosticCode.FIELD_RENAMED]
        self.assertTrue(all(d.edge_id == "e2" for d in renamed))

    def test_labels_name_fields(self):
        """Test that edge labels override default names."""
        diagram = build_diagram(
            [node("p", "Person"), node("a", "Address")],
            [
                edge("e1", "p", "a", source_mult="*", target_mult="1", target_label="homeAddress"),
                edge("e2", "p", "a", source_mult="*", target_mult="1", target_label="workAddress",
                     source_label="workers"),
            ],
        )
        plan = self.classifier.classify(diagram)

        self.assertEqual([e.field_name for e in plan.ends_for("p")], ["homeAddress", "workAddress"])
        self.assertEqual([e.field_name for e in plan.ends_for("a")], ["persons", "workers"])
        self.assertEqual(end_named(plan, "a", "workers").mapped_by, "workAddress")

    def test_self_reference(self):
        """Test a labelled self-association."""
        diagram = build_diagram(
            [node("e", "Employee")],
            [edge("e1", "e", "e", source_mult="*", target_mult="0..1",
                  source_label="reports", target_label="manager")],
        )
        plan = self.classifier.classify(diagram)

        manager = end_named(plan, "e", "manager")
        self.assertTrue(manager.owning_side)
        self.assertEqual(manager.join_column, "manager_id")
        self.assertFalse(manager.required)
        self.assertEqual(end_named(plan, "e", "reports").mapped_by, "manager")

    def test_reserved_names_are_never_used(self):
        """Test that a relationship labelled id is renamed."""
        diagram = build_diagram(
            [node("a", "A"), node("b", "B")],
            [edge("e1", "a", "b", source_mult="*", target_mult="1", target_label="id")],
        )
        plan = self.classifier.classify(diagram)

        self.assertEqual([e.field_name for e in plan.ends_for("a")], ["id2"])

    def test_keyword_class_names_are_escaped(self):
        """Test that an unlabelled reference to Package is not named package."""
        diagram = build_diagram(
            [node("s", "Shipment"), node("p", "Package")],
            [edge("e1", "s", "p", source_mult="*", target_mult="1")],
        )
        plan = self.classifier.classify(diagram)

        package = end_named(plan, "s", "packageValue")
        self.assertEqual(package.join_column, "package_value_id")
        self.assertEqual([e.field_name for e in plan.ends_for("p")], ["shipments"])

    def _hierarchy_plan(self, subclass_first=False):
        """Dog extends Animal; both reference Owner."""
        animal_edge = edge("e2", "a", "o", source_mult="*", target_mult="1")
        dog_edge = edge("e3", "d", "o", source_mult="*", target_mult="1")
        return self.classifier.classify(build_diagram(
            [node("a", "Animal"), node("d", "Dog"), node("o", "Owner")],
            [edge("e1", "d", "a", rel_type="inheritance")]
            + ([dog_edge, animal_edge] if subclass_first else [animal_edge, dog_edge]),
        ))

    def test_subclass_reference_does_not_reuse_inherited_name(self):
        """Test that a subclass field to the same class as its superclass is renamed."""
        plan = self._hierarchy_plan()

        self.assertEqual([e.field_name for e in plan.ends_for("a")], ["owner"])
        self.assertEqual([e.field_name for e in plan.ends_for("d")], ["owner2"])
        self.assertEqual(end_named(plan, "d", "owner2").join_column, "owner2_id")
        self.assertEqual([e.field_name for e in plan.ends_for("o")], ["animals", "dogs"])

        renamed = [d for d in plan.diagnostics if d.code == DiagnosticCode.FIELD_RENAMED]
        self.assertEqual([(d.node_id, d.edge_id) for d in renamed], [("d", "e3")])

    def test_hierarchy_names_follow_edge_order(self):
        """Test that the earlier edge keeps the plain name in a hierarchy."""
        plan = self._hierarchy_plan(subclass_first=True)

        self.assertEqual([e.field_name for e in plan.ends_for("d")], ["owner"])
        self.assertEqual([e.field_name for e in plan.ends_for("a")], ["owner2"])
        self.assertEqual(end_named(plan, "a", "owner2").join_column, "owner2_id")

    def test_inherited_attribute_blocks_relationship_name(self):
        """Test that a superclass attribute named owner renames the subclass field."""
        diagram = build_diagram(
            [
                node("a", "Animal", attributes=[("nickname", "String"), ("owner", "String")]),
                node("d", "Dog"),
                node("o", "Owner"),
            ],
            [
                edge("e1", "d", "a", rel_type="inheritance"),
                edge("e2", "d", "o", source_mult="*", target_mult="1"),
            ],
        )
        plan = self.classifier.classify(diagram)

        self.assertEqual([e.field_name for e in plan.ends_for("d")], ["owner2"])
        self.assertEqual([e.field_name for e in plan.ends_for("o")], ["dogs"])


class TestPurity(unittest.TestCase):
    """Tests for repeatability."""

    def test_classify_is_repeatable(self):
        """Test that classifying twice gives identical plans."""
        diagram = build_diagram(
            [node("c", "Customer"), node("o", "Order"), node("u", "User"), node("p", "Profile")],
            [
                edge("e1", "c", "o", source_mult="1", target_mult="*"),
                edge("e2", "u", "p"),
                edge("e3", "p", "u"),
            ],
        )
        classifier = RelationshipClassifier()

        first = classifier.classify(diagram)
        second = classifier.classify(diagram)

        self.assertEqual(first, second)
        self.assertEqual(len(diagram.relationships), 3)


if __name__ == '__main__':
    unittest.main()
