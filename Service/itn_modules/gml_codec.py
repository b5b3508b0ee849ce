"""
Service/itn_modules/gml_codec.py

ITN GML 문서 트리를 GraphDocument로 변환하고, 처리 결과를 다시 문서 트리에 반영하는 모듈입니다.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from Service.itn_modules.graph import (
    DirectedNodeRef,
    GraphDocument,
    Link,
    MissingElementError,
    Orientation,
    Road,
    format_length,
    parse_grade_level,
)

OSGB_NS = "http://www.ordnancesurvey.co.uk/xml/namespaces/osgb"
GML_NS = "http://www.opengis.net/gml"
XLINK_NS = "http://www.w3.org/1999/xlink"

DIRECTED_NODE_TAG = f"{{{OSGB_NS}}}directedNode"
NETWORK_MEMBER_TAG = f"{{{OSGB_NS}}}networkMember"
LENGTH_TAG = f"{{{OSGB_NS}}}length"
COORDINATES_TAG = f"{{{GML_NS}}}coordinates"
HREF_ATTR = f"{{{XLINK_NS}}}href"
GML_ID_ATTR = f"{{{GML_NS}}}id"
GRADE_ATTR = "gradeSeparation"
ORIENTATION_ATTR = "orientation"


@dataclass
class LinkBinding:
    element: ET.Element
    length_element: ET.Element
    coordinates_element: ET.Element
    directed_node_elements: List[ET.Element]
    original_length: float
    original_coordinates: List[str]


@dataclass
class RoadBinding:
    road: Road
    element: ET.Element
    member_elements: List[Tuple[str, ET.Element]]


@dataclass
class GMLBinding:
    """GraphDocument의 각 객체와 원본 XML 요소의 대응 관계입니다."""
    root: ET.Element
    parents: Dict[ET.Element, ET.Element] = field(default_factory=dict)
    links: Dict[str, LinkBinding] = field(default_factory=dict)
    roads: List[RoadBinding] = field(default_factory=list)


def member_link_fid(member: ET.Element) -> str:
    """networkMember 요소가 가리키는 링크 fid를 반환합니다. xlink:href의 '#' 접두어는 제거합니다."""
    href = member.get(HREF_ATTR)
    if href:
        return href[1:] if href.startswith("#") else href
    return (member.text or "").strip()


class GMLCodec:
    """
    directedNode 자식을 가진 요소는 링크로, networkMember 자식을 가진 요소는 도로로 해석합니다.
    """

    def decode(self, root: ET.Element) -> Tuple[GraphDocument, GMLBinding]:
        binding = GMLBinding(root=root)
        binding.parents = {child: parent for parent in root.iter() for child in parent}

        links: List[Link] = []
        roads: List[Road] = []

        for element in root.iter():
            directed_elements = element.findall(DIRECTED_NODE_TAG)
            if directed_elements:
                link, link_binding = self._decode_link(element, directed_elements)
                if link.fid in binding.links:
                    raise ValueError(f"중복된 링크 fid입니다: {link.fid}")
                links.append(link)
                binding.links[link.fid] = link_binding
                continue

            member_elements = element.findall(NETWORK_MEMBER_TAG)
            if member_elements:
                members = [(member_link_fid(m), m) for m in member_elements]
                road = Road(fid=self._feature_id(element) or "", members=[fid for fid, _ in members])
                roads.append(road)
                binding.roads.append(RoadBinding(road=road, element=element, member_elements=members))

        return GraphDocument(links=links, roads=roads), binding

    def encode(self, document: GraphDocument, binding: GMLBinding) -> ET.Element:
        """문서의 현재 상태(링크 삭제, 길이/좌표/방향 노드 변경, 도로 구성원 제거)를 XML 트리에 반영합니다."""
        for fid in document.removed_link_fids:
            link_binding = binding.links.pop(fid, None)
            if link_binding is not None:
                self._detach(binding, link_binding.element)

        for link in document.links:
            link_binding = binding.links.get(link.fid)
            if link_binding is None:
                continue
            self._encode_link(link, link_binding)

        for road_binding in binding.roads:
            remaining = Counter(road_binding.road.members)
            kept: List[Tuple[str, ET.Element]] = []
            for fid, member in road_binding.member_elements:
                if remaining[fid] > 0:
                    remaining[fid] -= 1
                    kept.append((fid, member))
                else:
                    road_binding.element.remove(member)
            road_binding.member_elements = kept

        return binding.root

    def _decode_link(
            self, element: ET.Element, directed_elements: List[ET.Element]
    ) -> Tuple[Link, LinkBinding]:
        fid = self._feature_id(element)
        if not fid:
            raise MissingElementError(f"fid가 없는 링크 요소가 있습니다: {element.tag}")

        length_element = element.find(LENGTH_TAG)
        if length_element is None or not (length_element.text or "").strip():
            raise MissingElementError(f"링크 {fid}에 length 요소가 없습니다.")
        try:
            length = float(length_element.text)
        except ValueError:
            raise ValueError(f"링크 {fid}의 length 값이 숫자가 아닙니다: {length_element.text!r}") from None

        coordinates_element = next(element.iter(COORDINATES_TAG), None)
        if coordinates_element is None:
            raise MissingElementError(f"링크 {fid}에 coordinates 요소가 없습니다.")
        coordinates = (coordinates_element.text or "").split()

        refs = [self._decode_directed_node(fid, el) for el in directed_elements]
        link = Link(fid=fid, length=length, coordinates=coordinates, directed_nodes=refs)

        link_binding = LinkBinding(
            element=element,
            length_element=length_element,
            coordinates_element=coordinates_element,
            directed_node_elements=directed_elements,
            original_length=length,
            original_coordinates=list(coordinates),
        )
        return link, link_binding

    def _decode_directed_node(self, fid: str, element: ET.Element) -> DirectedNodeRef:
        href = element.get(HREF_ATTR)
        if not href:
            raise MissingElementError(f"링크 {fid}의 directedNode에 xlink:href가 없습니다.")
        orientation = element.get(ORIENTATION_ATTR)
        if orientation is None:
            raise MissingElementError(f"링크 {fid}의 directedNode({href})에 orientation이 없습니다.")
        return DirectedNodeRef(
            node_id=href,
            orientation=Orientation.parse(orientation),
            grade_separation=parse_grade_level(element.get(GRADE_ATTR)),
        )

    def _encode_link(self, link: Link, link_binding: LinkBinding) -> None:
        if link.length != link_binding.original_length:
            link_binding.length_element.text = format_length(link.length)

        if link.coordinates != link_binding.original_coordinates:
            link_binding.coordinates_element.text = " ".join(link.coordinates)

        for ref, element in zip(link.directed_nodes, link_binding.directed_node_elements):
            element.set(HREF_ATTR, ref.node_id)
            element.set(ORIENTATION_ATTR, ref.orientation.value)
            if ref.grade_separation is None:
                element.attrib.pop(GRADE_ATTR, None)
            else:
                element.set(GRADE_ATTR, str(ref.grade_separation))

    def _detach(self, binding: GMLBinding, element: ET.Element) -> None:
        """링크 요소를 부모에서 제거합니다. 링크만 감싸던 멤버 요소가 비면 함께 제거합니다."""
        parent = binding.parents.get(element)
        if parent is None:
            return
        parent.remove(element)

        grandparent = binding.parents.get(parent)
        if grandparent is not None and len(parent) == 0 and not (parent.text or "").strip():
            grandparent.remove(parent)

    @staticmethod
    def _feature_id(element: ET.Element) -> Optional[str]:
        return element.get("fid") or element.get(GML_ID_ATTR)
