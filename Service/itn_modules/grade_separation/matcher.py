"""
Service/itn_modules/grade_separation/matcher.py

등급 분리 노드를 공유하는 링크들을 노드별로 묶어 쌍/고립/이상 그룹으로 분류하는 모듈입니다.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from Common.log import Log
from Service.itn_modules.graph import GraphDocument, Link, RaisedNodeRef


@dataclass
class MatchResult:
    """매칭 결과입니다. pairs에는 정확히 2개 링크가 공유하는 노드만 포함됩니다."""
    pairs: Dict[str, Tuple[Link, Link]] = field(default_factory=dict)
    removed_orphans: List[str] = field(default_factory=list)
    anomalies: Dict[str, List[str]] = field(default_factory=dict)


def group_by_node(document: GraphDocument, raised_refs: Sequence[RaisedNodeRef]) -> Dict[str, List[Link]]:
    """
    등급 분리 방향 노드를 참조 노드 ID 기준으로 묶습니다. 문서를 변경하지 않습니다.

    Args:
        document (GraphDocument): 대상 그래프 문서
        raised_refs (Sequence[RaisedNodeRef]): 같은 레벨의 등급 분리 방향 노드 목록

    Returns:
        Dict[str, List[Link]]: 노드 ID별 링크 목록 (최초 등장 순서 유지, 링크 중복 없음)
    """
    groups: Dict[str, List[Link]] = {}
    for raised in raised_refs:
        link = document.parent_link(raised)
        links = groups.setdefault(raised.node_id, [])
        if all(existing is not link for existing in links):
            links.append(link)
    return groups


class LinkPairMatcher:
    """
    노드별 링크 그룹을 분류하여 병합 가능한 쌍만 반환합니다.

    고립 링크(1개)는 인접 타일에 속한 링크이므로 즉시 문서와 도로에서 삭제하고,
    3개 이상이 공유하는 노드는 데이터 이상으로 기록만 남기고 그대로 둡니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def match(self, document: GraphDocument, raised_refs: Sequence[RaisedNodeRef]) -> MatchResult:
        result = MatchResult()

        for node_id, links in group_by_node(document, raised_refs).items():
            count = len(links)

            if count == 0:
                self._logger.log(f"[GradeSep:Matcher] 노드 {node_id}에 연결된 링크가 없습니다.", level="DEBUG")

            elif count == 1:
                orphan_fid = links[0].fid
                document.remove_link(orphan_fid)
                document.remove_link_from_all_roads(orphan_fid)
                result.removed_orphans.append(orphan_fid)
                self._logger.log(f"[GradeSep:Matcher] 고립 링크 삭제: {orphan_fid} (노드 {node_id})", level="INFO")

            elif count == 2:
                result.pairs[node_id] = (links[0], links[1])

            else:
                fids = [link.fid for link in links]
                result.anomalies[node_id] = fids
                self._logger.log(
                    f"[GradeSep:Matcher] 노드 {node_id}를 {count}개 링크가 공유합니다. 병합하지 않고 유지합니다.",
                    level="WARNING",
                )
                for fid in fids:
                    self._logger.log(f"[GradeSep:Matcher]   - 링크 {fid}", level="WARNING")

        if result.removed_orphans:
            # 이번 스윕에서 삭제된 고립 링크가 포함된 쌍은 다음 스윕에서 다시 분류
            result.pairs = {
                node_id: pair
                for node_id, pair in result.pairs.items()
                if document.has_link(pair[0].fid) and document.has_link(pair[1].fid)
            }

        return result
