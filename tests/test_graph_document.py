import unittest

from Service.itn_modules.graph import (
    GraphDocument,
    Link,
    MissingElementError,
    Orientation,
    Road,
    format_length,
    parse_grade_level,
)

from fixtures import chain_document, make_link, ref


class GraphDocumentQueryTests(unittest.TestCase):
    def test_find_raised_refs_filters_by_level_in_document_order(self):
        doc = chain_document()
        doc_extra = GraphDocument(
            links=doc.links + [make_link("C", ref("#P", "-", 2), ref("#Q", "+"), [(9, 9), (9, 10)])],
            roads=doc.roads,
        )

        level1 = doc_extra.find_raised_directed_node_refs(1)
        level2 = doc_extra.find_raised_directed_node_refs(2)

        self.assertEqual([r.link_fid for r in level1], ["A", "B"])
        self.assertEqual({r.node_id for r in level1}, {"#N"})
        self.assertEqual([(r.link_fid, r.node_id) for r in level2], [("C", "#P")])
        self.assertEqual(doc_extra.find_raised_directed_node_refs(3), [])

    def test_find_raised_refs_rejects_out_of_range_level(self):
        doc = chain_document()
        for level in (0, 4, -1):
            with self.assertRaises(ValueError):
                doc.find_raised_directed_node_refs(level)

    def test_parent_link_returns_owner(self):
        doc = chain_document()
        raised = doc.find_raised_directed_node_refs(1)[1]
        self.assertIs(doc.parent_link(raised), doc.get_link("B"))

    def test_parent_link_of_deleted_link_is_structural_error(self):
        doc = chain_document()
        raised = doc.find_raised_directed_node_refs(1)[0]
        doc.remove_link("A")
        with self.assertRaises(MissingElementError):
            doc.parent_link(raised)


class GraphDocumentMutationTests(unittest.TestCase):
    def test_remove_link_records_fid(self):
        doc = chain_document()
        removed = doc.remove_link("B")

        self.assertEqual(removed.fid, "B")
        self.assertFalse(doc.has_link("B"))
        self.assertEqual(doc.removed_link_fids, ["B"])

    def test_remove_missing_link_raises(self):
        doc = chain_document()
        with self.assertRaises(MissingElementError):
            doc.remove_link("nope")

    def test_remove_link_from_all_roads_counts_touched_roads(self):
        doc = chain_document()
        touched = doc.remove_link_from_all_roads("B")

        self.assertEqual(touched, 2)
        self.assertEqual([road.members for road in doc.roads], [["A"], [], ["A"]])
        self.assertEqual(doc.remove_link_from_all_roads("B"), 0)

    def test_roads_referencing(self):
        doc = chain_document()
        self.assertEqual([road.fid for road in doc.roads_referencing("A")], ["R1", "R3"])

    def test_duplicate_fid_is_rejected(self):
        link = make_link("A", ref("#1", "-"), ref("#2", "+"), [(0, 0), (1, 0)])
        twin = make_link("A", ref("#3", "-"), ref("#4", "+"), [(5, 0), (6, 0)])
        with self.assertRaises(ValueError):
            GraphDocument(links=[link, twin], roads=[Road("R", ["A"])])


class LinkModelTests(unittest.TestCase):
    def test_link_requires_exactly_two_directed_nodes(self):
        with self.assertRaises(MissingElementError):
            Link(fid="X", length=1.0, coordinates=["0,0", "1,0"], directed_nodes=[ref("#1", "-")])

    def test_ref_lookup_and_geometry(self):
        link = make_link("A", ref("#1", "-"), ref("#2", "+", 3), [(0, 0), (3, 4)], 5.0)

        self.assertEqual(link.ref_to("#2").grade_separation, 3)
        self.assertEqual(link.other_ref("#2").node_id, "#1")
        self.assertIsNone(link.ref_to("#9"))
        self.assertAlmostEqual(link.geometry.length, 5.0)

    def test_points_keep_third_dimension(self):
        link = Link(
            fid="Z",
            length=1.0,
            coordinates=["0,0,10", "1,0,12.5"],
            directed_nodes=[ref("#1", "-"), ref("#2", "+")],
        )
        self.assertEqual(link.points, [(0.0, 0.0, 10.0), (1.0, 0.0, 12.5)])
        self.assertAlmostEqual(link.geometry.length, 1.0)

    def test_attribute_parsers(self):
        self.assertIs(Orientation.parse(" + "), Orientation.FORWARD)
        with self.assertRaises(ValueError):
            Orientation.parse("*")

        self.assertIsNone(parse_grade_level(None))
        self.assertEqual(parse_grade_level("2"), 2)
        for bad in ("0", "4", "x", ""):
            with self.assertRaises(ValueError):
                parse_grade_level(bad)

    def test_format_length_uses_fifteen_significant_digits(self):
        self.assertEqual(format_length(4.0), "4")
        self.assertEqual(format_length(12.34 + 5.1), "17.44")
        self.assertEqual(format_length(123.456), "123.456")


if __name__ == "__main__":
    unittest.main()
