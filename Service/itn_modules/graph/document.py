"""
Service/itn_modules/graph/document.py

링크와 도로를 보관하고 조회/삭제 기능을 제공하는 그래프 문서 모듈입니다.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .model import GRADE_LEVELS, Link, MissingElementError, RaisedNodeRef, Road


class GraphDocument:
    """
    하나의 입력 파일에서 읽어 들인 도로망 그래프입니다.

    링크는 fid 기준으로, 도로는 문서 순서대로 보관합니다.
    노드는 별도 객체 없이 방향 노드 참조의 node_id로만 표현됩니다.
    """

    def __init__(self, links: Iterable[Link] = (), roads: Iterable[Road] = ()):
        self._links: Dict[str, Link] = {}
        for link in links:
            if link.fid in self._links:
                raise ValueError(f"중복된 링크 fid입니다: {link.fid}")
            self._links[link.fid] = link
        self._roads: List[Road] = list(roads)
        self._removed_link_fids: List[str] = []

    @property
    def links(self) -> List[Link]:
        return list(self._links.values())

    @property
    def roads(self) -> List[Road]:
        return list(self._roads)

    @property
    def removed_link_fids(self) -> List[str]:
        return list(self._removed_link_fids)

    def get_link(self, fid: str) -> Optional[Link]:
        return self._links.get(fid)

    def has_link(self, fid: str) -> bool:
        return fid in self._links

    def find_raised_directed_node_refs(self, level: int) -> List[RaisedNodeRef]:
        """모든 링크에서 gradeSeparation 값이 level인 방향 노드를 문서 순서대로 찾습니다."""
        if level not in GRADE_LEVELS:
            raise ValueError(f"등급 분리 레벨은 1~3 범위여야 합니다: {level}")

        raised: List[RaisedNodeRef] = []
        for link in self._links.values():
            for ref in link.directed_nodes:
                if ref.grade_separation == level:
                    raised.append(RaisedNodeRef(link_fid=link.fid, ref=ref))
        return raised

    def parent_link(self, raised: RaisedNodeRef) -> Link:
        link = self._links.get(raised.link_fid)
        if link is None:
            raise MissingElementError(f"방향 노드 {raised.node_id}의 소유 링크 {raised.link_fid}가 없습니다.")
        return link

    def remove_link(self, fid: str) -> Link:
        """링크를 문서에서 완전히 삭제합니다."""
        link = self._links.pop(fid, None)
        if link is None:
            raise MissingElementError(f"삭제할 링크를 찾을 수 없습니다: {fid}")
        self._removed_link_fids.append(fid)
        return link

    def roads_referencing(self, fid: str) -> List[Road]:
        return [road for road in self._roads if fid in road.members]

    def remove_link_from_all_roads(self, fid: str) -> int:
        """fid를 구성원으로 가진 모든 도로에서 해당 참조를 제거하고, 수정된 도로 수를 반환합니다."""
        touched = 0
        for road in self._roads:
            if fid not in road.members:
                continue
            road.members[:] = [member for member in road.members if member != fid]
            touched += 1
        return touched
