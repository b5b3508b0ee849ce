"""
Service/itn_modules/grade_separation/merger.py

등급 분리 노드를 공유하는 두 링크를 하나의 링크로 병합하는 모듈입니다.
"""
from __future__ import annotations

from typing import List, Tuple

from Common.log import Log
from Service.config import GradeSeparationConfig
from Service.itn_modules.graph import DirectedNodeRef, GraphDocument, Link, MissingElementError, Orientation


class LinkPairMerger:
    """
    link1을 link0에 흡수시킨 뒤 link1을 문서에서 삭제합니다.

    길이는 합산하고, link0의 공유 방향 노드는 link1의 반대편 노드로 교체되며,
    좌표열은 공유 노드의 orientation 조합에 따라 방향을 맞추어 이어 붙입니다.
    """

    def __init__(self, logger: Log, config: GradeSeparationConfig):
        self._logger = logger
        self._config = config

    def merge(self, document: GraphDocument, node_id: str, link0: Link, link1: Link) -> Link:
        self._logger.log(f"[GradeSep:Merger] {link0.fid} <- {link1.fid} 병합 (노드 {node_id})", level="INFO")

        shared0, shared1, free1 = self._identify_refs(node_id, link0, link1)
        if len(link0.coordinates) < 2 or len(link1.coordinates) < 2:
            raise MissingElementError(f"좌표가 2개 미만인 링크가 있습니다: {link0.fid}, {link1.fid}")

        far0 = link0.other_ref(node_id)
        if far0 is not None and far0.node_id == free1.node_id:
            self._logger.log(
                f"[GradeSep:Merger] {link0.fid}, {link1.fid}가 양 끝 노드를 모두 공유합니다. "
                f"병합 결과는 노드 {free1.node_id}에서 닫힌 루프가 됩니다.",
                level="WARNING",
            )

        link0.length = link0.length + link1.length

        shared0.node_id = free1.node_id
        shared0.grade_separation = free1.grade_separation

        link0.coordinates = self._stitch(
            link0.coordinates, link1.coordinates, shared0.orientation, shared1.orientation
        )

        touched = document.remove_link_from_all_roads(link1.fid)
        if touched == 0:
            if self._config.strict_road_membership:
                raise MissingElementError(f"링크 {link1.fid}를 구성원으로 가진 도로가 없습니다.")
            self._logger.log(f"[GradeSep:Merger] 링크 {link1.fid}를 참조하는 도로가 없습니다.", level="DEBUG")

        document.remove_link(link1.fid)
        return link0

    def _identify_refs(
            self, node_id: str, link0: Link, link1: Link
    ) -> Tuple[DirectedNodeRef, DirectedNodeRef, DirectedNodeRef]:
        """link0/link1의 공유 방향 노드와 link1의 반대편 방향 노드를 찾습니다."""
        shared0 = link0.ref_to(node_id)
        shared1 = link1.ref_to(node_id)
        free1 = link1.other_ref(node_id)

        if shared0 is None:
            raise MissingElementError(f"링크 {link0.fid}에 노드 {node_id} 방향 노드가 없습니다.")
        if shared1 is None:
            raise MissingElementError(f"링크 {link1.fid}에 노드 {node_id} 방향 노드가 없습니다.")
        if free1 is None:
            raise MissingElementError(f"링크 {link1.fid}에 노드 {node_id}가 아닌 방향 노드가 없습니다.")
        return shared0, shared1, free1

    @staticmethod
    def _stitch(
            coords0: List[str], coords1: List[str], orientation0: Orientation, orientation1: Orientation
    ) -> List[str]:
        """
        공유 노드의 orientation 조합에 따라 두 좌표열을 이어 붙입니다.

            link0 공유 | link1 공유 | 결과
            -----------|------------|-------------------------------
                +      |     +      | link0[:-1] + reverse(link1)
                +      |     -      | link0[:-1] + link1
                -      |     +      | link1 + link0[1:]
                -      |     -      | reverse(link1) + link0[1:]
        """
        head = list(coords0)
        tail = list(coords1)

        if orientation0 is Orientation.FORWARD:
            head.pop()
            if orientation1 is Orientation.FORWARD:
                tail.reverse()
            return head + tail

        head.pop(0)
        if orientation1 is Orientation.BACKWARD:
            tail.reverse()
        return tail + head
