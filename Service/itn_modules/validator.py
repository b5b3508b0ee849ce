"""
Service/itn_modules/validator.py

등급 분리 제거 결과의 데이터 품질을 점검하고 리스크 요소를 로깅하는 품질 보증(QA) 모듈입니다.
"""
from __future__ import annotations

from typing import List

import geopandas as gpd
import networkx as nx

from Common.log import Log
from Service.config import GradeSeparationConfig
from Service.itn_modules.graph import GRADE_LEVELS, GraphDocument


class ResultValidator:
    """
    처리된 그래프의 잔여 등급 분리 노드, 도로 구성원 무결성, 길이 일관성, 연결 상태를 검증합니다.
    """
    def __init__(self, logger: Log, config: GradeSeparationConfig):
        self._logger = logger
        self._config = config

    def execute(self, document: GraphDocument) -> List[str]:
        """
        검증 로직을 실행하며, 문서를 변경하지 않고 발견된 위험 요소 목록만 반환합니다.
        """
        if not document.links:
            self._logger.log("[Validator] 검증 대상 링크가 없습니다.", level="WARNING")
            return []

        errors: List[str] = []

        self._check_remaining_raised(document, errors)
        self._check_road_members(document, errors)
        self._check_length_drift(document, errors)
        self._check_connectivity(document)
        self._log_length_summary(document)

        if errors:
            self._logger.log(f"[Validator] 검증 완료: {len(errors)}개의 잠재적 위험 요소가 발견되었습니다.", level="WARNING")
            for err in errors[:5]:
                self._logger.log(f"  - {err}", level="WARNING")
        else:
            self._logger.log("[Validator] 검증 완료: 모든 품질 기준을 통과했습니다.", level="INFO")

        return errors

    def _check_remaining_raised(self, document: GraphDocument, errors: list) -> None:
        """처리 후에도 남아 있는 등급 분리 방향 노드를 레벨별로 집계합니다."""
        for level in GRADE_LEVELS:
            remaining = document.find_raised_directed_node_refs(level)
            if remaining:
                nodes = sorted({raised.node_id for raised in remaining})
                errors.append(f"레벨 {level} 등급 분리 노드 {len(nodes)}개가 남아 있습니다. (예: {nodes[0]})")

    def _check_road_members(self, document: GraphDocument, errors: list) -> None:
        """도로 구성원 중 문서에 없는 링크를 가리키는 참조를 검사합니다."""
        dangling = [
            (road.fid, member)
            for road in document.roads
            for member in road.members
            if not document.has_link(member)
        ]
        if dangling:
            road_fid, member = dangling[0]
            errors.append(f"존재하지 않는 링크를 참조하는 도로 구성원 {len(dangling)}개 (예: {road_fid} -> {member})")

    def _check_length_drift(self, document: GraphDocument, errors: list) -> None:
        """선언된 length 값과 좌표로 계산한 길이의 차이가 허용 비율을 넘는 링크를 찾습니다."""
        tolerance = float(self._config.length_tolerance_ratio)
        drifted = 0
        sample = None

        for link in document.links:
            if len(link.coordinates) < 2 or link.length <= 0:
                continue
            measured = float(link.geometry.length)
            ratio = abs(measured - link.length) / link.length
            if ratio > tolerance:
                drifted += 1
                if sample is None:
                    sample = f"{link.fid}: 선언={link.length:.3f} 좌표={measured:.3f}"

        if drifted:
            errors.append(f"길이 편차가 {tolerance:.0%}를 넘는 링크 {drifted}개 (예: {sample})")

    def _check_connectivity(self, document: GraphDocument) -> None:
        """노드 ID 기준 그래프를 만들어 분리된 네트워크 그룹 수를 기록합니다."""
        graph = nx.MultiGraph()
        for link in document.links:
            start, end = link.directed_nodes
            graph.add_edge(start.node_id, end.node_id, key=link.fid)

        components = nx.number_connected_components(graph) if graph.number_of_nodes() else 0
        terminals = sum(1 for _, degree in graph.degree() if degree == 1)
        self._logger.log(
            f"[Validator] 노드={graph.number_of_nodes()} 링크={graph.number_of_edges()} "
            f"그룹={components} 단말={terminals}",
            level="INFO",
        )

    def _log_length_summary(self, document: GraphDocument) -> None:
        """링크 길이에 대한 백분위수 분포를 기록합니다."""
        gdf = gpd.GeoDataFrame(
            {
                "fid": [link.fid for link in document.links],
                "length": [link.length for link in document.links],
            },
            geometry=[link.geometry if len(link.coordinates) >= 2 else None for link in document.links],
        )
        desc = gdf["length"].describe(percentiles=[0.05, 0.5, 0.95]).to_dict()
        self._logger.log(
            "[Validator][Length] " + " ".join([f"{k}={float(v):.3f}" for k, v in desc.items()]),
            level="DEBUG",
        )
