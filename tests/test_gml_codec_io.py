import gzip
import os
import stat
import tempfile
import unittest
import xml.etree.ElementTree as ET
from pathlib import Path

from Service.itn_modules.gml_codec import (
    COORDINATES_TAG,
    DIRECTED_NODE_TAG,
    GMLCodec,
    HREF_ATTR,
    LENGTH_TAG,
    NETWORK_MEMBER_TAG,
    OSGB_NS,
)
from Service.itn_modules.gml_io import GMLIO
from Service.itn_modules.graph import MissingElementError, Orientation
from Service.itn_modules.grade_separation import GradeSeparationResolver, LinkPairMatcher, LinkPairMerger
from Service.schemas import FileLoadRequest, FileSaveRequest

from fixtures import SAMPLE_GML, RecordingLogger, make_config


def find_link_element(root: ET.Element, fid: str):
    for element in root.iter():
        if element.get("fid") == fid:
            return element
    return None


class GMLCodecDecodeTests(unittest.TestCase):
    def test_decode_links_and_roads(self):
        document, binding = GMLCodec().decode(ET.fromstring(SAMPLE_GML.encode("utf-8")))

        self.assertEqual([link.fid for link in document.links], ["L1", "L2", "L3"])
        self.assertEqual([road.members for road in document.roads], [["L1", "L2", "L3"]])

        link1 = document.get_link("L1")
        self.assertEqual(link1.length, 2.0)
        self.assertEqual(link1.coordinates, ["0,0", "1,0", "2,0"])
        self.assertEqual(link1.directed_nodes[1].node_id, "#N1")
        self.assertIs(link1.directed_nodes[1].orientation, Orientation.FORWARD)
        self.assertEqual(link1.directed_nodes[1].grade_separation, 1)
        self.assertIsNone(link1.directed_nodes[0].grade_separation)
        self.assertEqual(set(binding.links), {"L1", "L2", "L3"})

    def test_network_member_text_is_accepted(self):
        xml = (
            f'<c xmlns:osgb="{OSGB_NS}"><osgb:Road fid="R9">'
            "<osgb:networkMember> L7 </osgb:networkMember></osgb:Road></c>"
        )
        document, _ = GMLCodec().decode(ET.fromstring(xml))
        self.assertEqual(document.roads[0].members, ["L7"])

    def test_missing_length_is_structural_error(self):
        root = ET.fromstring(SAMPLE_GML.encode("utf-8"))
        link = find_link_element(root, "L2")
        link.remove(link.find(LENGTH_TAG))

        with self.assertRaises(MissingElementError):
            GMLCodec().decode(root)

    def test_three_directed_nodes_is_structural_error(self):
        root = ET.fromstring(SAMPLE_GML.encode("utf-8"))
        link = find_link_element(root, "L1")
        extra = ET.SubElement(link, DIRECTED_NODE_TAG, {"orientation": "+", HREF_ATTR: "#X"})
        self.assertIsNotNone(extra)

        with self.assertRaises(MissingElementError):
            GMLCodec().decode(root)

    def test_bad_grade_value_is_rejected(self):
        root = ET.fromstring(SAMPLE_GML.encode("utf-8"))
        link = find_link_element(root, "L1")
        link.findall(DIRECTED_NODE_TAG)[1].set("gradeSeparation", "7")

        with self.assertRaises(ValueError):
            GMLCodec().decode(root)


class GMLCodecEncodeTests(unittest.TestCase):
    def setUp(self):
        logger = RecordingLogger()
        config = make_config()
        self.resolver = GradeSeparationResolver(
            logger=logger, config=config, matcher=LinkPairMatcher(logger), merger=LinkPairMerger(logger, config)
        )
        self.codec = GMLCodec()

    def test_encode_reflects_resolution(self):
        root = ET.fromstring(SAMPLE_GML.encode("utf-8"))
        document, binding = self.codec.decode(root)

        self.resolver.resolve(document)
        self.codec.encode(document, binding)

        self.assertIsNone(find_link_element(root, "L2"))
        self.assertIsNone(find_link_element(root, "L3"))
        self.assertEqual(len(root.findall(f"{{{OSGB_NS}}}roadMember")), 2)

        link1 = find_link_element(root, "L1")
        self.assertEqual(link1.find(LENGTH_TAG).text, "4")
        self.assertEqual(next(link1.iter(COORDINATES_TAG)).text, "0,0 1,0 2,0 3,0 4,0")

        shared = link1.findall(DIRECTED_NODE_TAG)[1]
        self.assertEqual(shared.get(HREF_ATTR), "#M2")
        self.assertEqual(shared.get("orientation"), "+")
        self.assertNotIn("gradeSeparation", shared.attrib)

        road = find_link_element(root, "R1")
        self.assertEqual([m.get(HREF_ATTR) for m in road.findall(NETWORK_MEMBER_TAG)], ["#L1"])

    def test_untouched_values_keep_original_text(self):
        xml = SAMPLE_GML.replace("<osgb:length>5</osgb:length>", "<osgb:length>5.000</osgb:length>")
        root = ET.fromstring(xml.encode("utf-8"))
        document, binding = self.codec.decode(root)

        self.codec.encode(document, binding)

        self.assertEqual(find_link_element(root, "L3").find(LENGTH_TAG).text, "5.000")


class GMLIOTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.base = Path(self.tmp.name)
        self.io = GMLIO(RecordingLogger(), GMLCodec())

    def tearDown(self):
        self.tmp.cleanup()

    def test_gzip_roundtrip_keeps_prefixes(self):
        source = self.base / "tile.gz"
        with gzip.open(source, "wb") as f:
            f.write(SAMPLE_GML.encode("utf-8"))

        loaded = self.io.load(FileLoadRequest(file_path=source))
        loaded.document.remove_link("L3")
        loaded.document.remove_link_from_all_roads("L3")

        target = self.base / "out" / "tile.gz"
        saved = self.io.save(loaded, FileSaveRequest(output_path=target))

        self.assertEqual(saved, target.resolve())
        with gzip.open(saved, "rb") as f:
            text = f.read().decode("utf-8")
        self.assertIn("<osgb:FeatureCollection", text)
        self.assertIn('fid="L1"', text)
        self.assertNotIn('fid="L3"', text)
        self.assertEqual([p.name for p in target.parent.iterdir()], ["tile.gz"])

    def test_plain_gml_is_supported(self):
        source = self.base / "tile.gml"
        source.write_text(SAMPLE_GML, encoding="utf-8")

        loaded = self.io.load(FileLoadRequest(file_path=source))
        saved = self.io.save(loaded, FileSaveRequest(output_path=self.base / "copy.gml"))

        document, _ = GMLCodec().decode(ET.parse(saved).getroot())
        self.assertEqual([link.fid for link in document.links], ["L1", "L2", "L3"])

    @unittest.skipIf(os.name == "nt", "POSIX file modes only")
    def test_saved_file_gets_same_mode_as_regular_file(self):
        source = self.base / "tile.gml"
        source.write_text(SAMPLE_GML, encoding="utf-8")
        reference = self.base / "reference.txt"
        reference.write_text("x", encoding="utf-8")

        loaded = self.io.load(FileLoadRequest(file_path=source))
        saved = self.io.save(loaded, FileSaveRequest(output_path=self.base / "copy.gz"))

        self.assertEqual(stat.S_IMODE(os.stat(saved).st_mode), stat.S_IMODE(os.stat(reference).st_mode))

    def test_malformed_xml_raises(self):
        source = self.base / "broken.gz"
        with gzip.open(source, "wb") as f:
            f.write(b"<osgb:FeatureCollection")

        with self.assertRaises(ET.ParseError):
            self.io.load(FileLoadRequest(file_path=source))


if __name__ == "__main__":
    unittest.main()
