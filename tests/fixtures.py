"""
tests/fixtures.py

테스트에서 공통으로 사용하는 가짜 로거와 링크/문서 생성 도우미입니다.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from Service.config import GradeSeparationConfig
from Service.itn_modules.graph import DirectedNodeRef, GraphDocument, Link, Orientation, Road


class RecordingLogger:
    def __init__(self):
        self.records: List[Tuple[str, str]] = []

    def log(self, msg, level="DEBUG"):
        self.records.append((level.upper(), msg))

    def messages(self, level: Optional[str] = None) -> List[str]:
        return [msg for lv, msg in self.records if level is None or lv == level]


def make_config(**overrides) -> GradeSeparationConfig:
    return GradeSeparationConfig(_env_file=None, **overrides)


def ref(node_id: str, orientation: str, grade: Optional[int] = None) -> DirectedNodeRef:
    return DirectedNodeRef(node_id=node_id, orientation=Orientation(orientation), grade_separation=grade)


def make_link(
        fid: str,
        start: DirectedNodeRef,
        end: DirectedNodeRef,
        points: Sequence[Tuple[float, float]],
        length: Optional[float] = None,
) -> Link:
    coordinates = [f"{x:g},{y:g}" for x, y in points]
    if length is None:
        length = float(len(points) - 1)
    return Link(fid=fid, length=length, coordinates=coordinates, directed_nodes=[start, end])


def chain_document() -> GraphDocument:
    """
    M1 --A--> N(1) <--B-- M2 형태의 기본 쌍입니다.
    A: (0,0)->(2,0), N에서 '+' / B: (2,0)->(4,0), N에서 '+'
    """
    link_a = make_link("A", ref("#M1", "-"), ref("#N", "+", 1), [(0, 0), (1, 0), (2, 0)], 2.0)
    link_b = make_link("B", ref("#N", "+", 1), ref("#M2", "-"), [(2, 0), (3, 0), (4, 0)], 2.0)
    roads = [Road("R1", ["A", "B"]), Road("R2", ["B"]), Road("R3", ["A"])]
    return GraphDocument(links=[link_a, link_b], roads=roads)


SAMPLE_GML = """<?xml version="1.0" encoding="UTF-8"?>
<osgb:FeatureCollection xmlns:osgb="http://www.ordnancesurvey.co.uk/xml/namespaces/osgb" xmlns:gml="http://www.opengis.net/gml" xmlns:xlink="http://www.w3.org/1999/xlink" fid="GDS-1">
  <osgb:roadMember>
    <osgb:RoadLink fid="L1">
      <osgb:descriptiveTerm>A Road</osgb:descriptiveTerm>
      <osgb:length>2</osgb:length>
      <osgb:polyline><gml:LineString><gml:coordinates>0,0 1,0 2,0</gml:coordinates></gml:LineString></osgb:polyline>
      <osgb:directedNode orientation="-" xlink:href="#M1"/>
      <osgb:directedNode orientation="+" gradeSeparation="1" xlink:href="#N1"/>
    </osgb:RoadLink>
  </osgb:roadMember>
  <osgb:roadMember>
    <osgb:RoadLink fid="L2">
      <osgb:descriptiveTerm>A Road</osgb:descriptiveTerm>
      <osgb:length>2</osgb:length>
      <osgb:polyline><gml:LineString><gml:coordinates>2,0 3,0 4,0</gml:coordinates></gml:LineString></osgb:polyline>
      <osgb:directedNode orientation="-" gradeSeparation="1" xlink:href="#N1"/>
      <osgb:directedNode orientation="+" xlink:href="#M2"/>
    </osgb:RoadLink>
  </osgb:roadMember>
  <osgb:roadMember>
    <osgb:RoadLink fid="L3">
      <osgb:descriptiveTerm>Minor Road</osgb:descriptiveTerm>
      <osgb:length>5</osgb:length>
      <osgb:polyline><gml:LineString><gml:coordinates>10,0 15,0</gml:coordinates></gml:LineString></osgb:polyline>
      <osgb:directedNode orientation="-" xlink:href="#M3"/>
      <osgb:directedNode orientation="+" gradeSeparation="2" xlink:href="#EDGE"/>
    </osgb:RoadLink>
  </osgb:roadMember>
  <osgb:roadMember>
    <osgb:Road fid="R1">
      <osgb:descriptiveTerm>A1</osgb:descriptiveTerm>
      <osgb:networkMember xlink:href="#L1"/>
      <osgb:networkMember xlink:href="#L2"/>
      <osgb:networkMember xlink:href="#L3"/>
    </osgb:Road>
  </osgb:roadMember>
</osgb:FeatureCollection>
"""
