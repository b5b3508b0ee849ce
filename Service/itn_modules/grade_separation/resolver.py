"""
Service/itn_modules/grade_separation/resolver.py

레벨별로 등급 분리 노드를 반복 탐색하여 링크 쌍을 병합하는 등급 분리 제거 오케스트레이터 모듈입니다.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from Service.config import GradeSeparationConfig
from Service.itn_modules.graph import GRADE_LEVELS, GraphDocument, Link

from .matcher import LinkPairMatcher
from .merger import LinkPairMerger


@dataclass
class LevelSummary:
    level: int
    sweeps: int = 0
    merged: int = 0
    orphans_removed: int = 0
    anomaly_nodes: int = 0


class GradeSeparationResolver:
    """
    레벨 1부터 순서대로, 병합 가능한 쌍이 없어질 때까지 스윕을 반복합니다.

    병합 한 번으로 다른 노드의 분류가 바뀔 수 있으므로 매 스윕마다 등급 분리 노드를 새로 조회하고,
    한 스윕에서는 한 쌍만 병합합니다.
    """

    def __init__(
            self,
            logger: Log,
            config: GradeSeparationConfig,
            matcher: LinkPairMatcher,
            merger: LinkPairMerger,
    ):
        self._logger = logger
        self._config = config
        self._matcher = matcher
        self._merger = merger
        self._last_summary: List[LevelSummary] = []

    @safe_run
    @log_execution_time
    def resolve(self, document: GraphDocument, levels: Optional[Iterable[int]] = None) -> GraphDocument:
        """지정된 레벨(기본값: 설정의 최소~최대 레벨)을 오름차순으로 처리합니다."""
        target_levels = sorted(levels) if levels is not None else list(self._config.grade_levels)
        for level in target_levels:
            self._validate_level(level)

        self._last_summary = []
        for level in target_levels:
            self.resolve_level(document, level)
        return document

    def resolve_level(self, document: GraphDocument, level: int) -> GraphDocument:
        self._validate_level(level)
        summary = LevelSummary(level=level)
        anomaly_nodes = set()

        while True:
            raised_refs = document.find_raised_directed_node_refs(level)
            if not raised_refs:
                break

            summary.sweeps += 1
            result = self._matcher.match(document, raised_refs)
            summary.orphans_removed += len(result.removed_orphans)
            anomaly_nodes.update(result.anomalies.keys())

            if not result.pairs:
                if result.removed_orphans:
                    continue
                break

            node_id, (link0, link1) = self._select_pair(result.pairs)
            self._merger.merge(document, node_id, link0, link1)
            summary.merged += 1

        summary.anomaly_nodes = len(anomaly_nodes)
        self._last_summary.append(summary)

        self._logger.log(
            f"[GradeSep:Resolver] 레벨 {level} 완료 - 스윕={summary.sweeps} 병합={summary.merged} "
            f"고립삭제={summary.orphans_removed} 이상노드={summary.anomaly_nodes}",
            level="INFO",
        )
        return document

    def get_last_summary(self) -> List[Dict[str, int]]:
        return [asdict(item) for item in self._last_summary]

    def _select_pair(self, pairs: Dict[str, Tuple[Link, Link]]) -> Tuple[str, Tuple[Link, Link]]:
        """설정된 기준에 따라 이번 스윕에서 병합할 쌍 하나를 고릅니다."""
        if self._config.pair_selection_order == "node_id":
            node_id = min(pairs)
            return node_id, pairs[node_id]
        return next(iter(pairs.items()))

    @staticmethod
    def _validate_level(level: int) -> None:
        if level not in GRADE_LEVELS:
            raise ValueError(f"등급 분리 레벨은 1~3 범위여야 합니다: {level}")
