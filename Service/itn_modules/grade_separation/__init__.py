"""
Service/itn_modules/grade_separation/__init__.py

등급 분리 노드의 매칭, 링크 병합, 레벨별 반복 처리 모듈들을 외부로 노출합니다.
"""
from .matcher import LinkPairMatcher, MatchResult, group_by_node
from .merger import LinkPairMerger
from .resolver import GradeSeparationResolver, LevelSummary

__all__ = [
    "LinkPairMatcher",
    "MatchResult",
    "group_by_node",
    "LinkPairMerger",
    "GradeSeparationResolver",
    "LevelSummary",
]
