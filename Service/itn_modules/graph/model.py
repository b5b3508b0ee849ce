"""
Service/itn_modules/graph/model.py

도로망 그래프를 구성하는 링크, 방향 노드 참조, 도로 데이터 구조를 정의하는 모듈입니다.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from shapely.geometry import LineString

GRADE_LEVELS: Tuple[int, ...] = (1, 2, 3)


class MissingElementError(ValueError):
    """병합/삭제에 필요한 구조 요소(링크, 방향 노드, 좌표 등)를 찾을 수 없을 때 발생합니다."""


class Orientation(str, Enum):
    """링크 좌표열이 노드에서 출발(+)하는지, 노드로 도착(-)하는지를 나타냅니다."""
    FORWARD = "+"
    BACKWARD = "-"

    @classmethod
    def parse(cls, value: str) -> "Orientation":
        try:
            return cls(value.strip())
        except ValueError:
            raise ValueError(f"지원하지 않는 orientation 값입니다: {value!r}") from None


def parse_grade_level(value: Optional[str]) -> Optional[int]:
    """gradeSeparation 속성 문자열을 1~3 정수로 변환합니다. 값이 없으면 None을 반환합니다."""
    if value is None:
        return None
    text = value.strip()
    if not text.isdigit() or int(text) not in GRADE_LEVELS:
        raise ValueError(f"gradeSeparation 값은 1~3 이어야 합니다: {value!r}")
    return int(text)


def format_length(value: float) -> str:
    """길이 값을 유효숫자 15자리로 직렬화합니다. (4.0 -> '4')"""
    return f"{value:.15g}"


@dataclass
class DirectedNodeRef:
    node_id: str
    orientation: Orientation
    grade_separation: Optional[int] = None


@dataclass
class Link:
    """
    두 개의 방향 노드 참조와 길이, 좌표열을 가진 도로 링크입니다.

    coordinates는 원본 좌표 문자열("x,y" 또는 "x,y,z")을 그대로 보관하여
    변경되지 않은 좌표가 원본과 동일하게 저장되도록 합니다.
    """
    fid: str
    length: float
    coordinates: List[str]
    directed_nodes: List[DirectedNodeRef] = field(default_factory=list)

    def __post_init__(self):
        if len(self.directed_nodes) != 2:
            raise MissingElementError(
                f"링크 {self.fid}의 방향 노드 수가 2개가 아닙니다: {len(self.directed_nodes)}개"
            )

    @property
    def points(self) -> List[Tuple[float, ...]]:
        return [tuple(float(v) for v in token.split(",")) for token in self.coordinates]

    @property
    def geometry(self) -> LineString:
        return LineString([pt[:2] for pt in self.points])

    def ref_to(self, node_id: str) -> Optional[DirectedNodeRef]:
        """지정한 노드를 참조하는 방향 노드를 반환합니다."""
        for ref in self.directed_nodes:
            if ref.node_id == node_id:
                return ref
        return None

    def other_ref(self, node_id: str) -> Optional[DirectedNodeRef]:
        """지정한 노드가 아닌 반대편 방향 노드를 반환합니다."""
        for ref in self.directed_nodes:
            if ref.node_id != node_id:
                return ref
        return None


@dataclass
class Road:
    fid: str
    members: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RaisedNodeRef:
    """등급 분리 속성이 지정된 방향 노드와 그 소유 링크의 fid 묶음입니다."""
    link_fid: str
    ref: DirectedNodeRef

    @property
    def node_id(self) -> str:
        return self.ref.node_id
