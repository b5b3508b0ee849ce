"""
Service/itn_modules/__init__.py

ITN 도로망 등급 분리 제거 파이프라인 구성에 필요한 주요 모듈들을 외부로 노출합니다.
"""
from .gml_codec import GMLCodec
from .gml_io import GMLIO, LoadedNetwork
from .validator import ResultValidator
from .grade_separation import GradeSeparationResolver, LinkPairMatcher, LinkPairMerger

__all__ = [
    "GMLCodec",
    "GMLIO",
    "LoadedNetwork",
    "ResultValidator",
    "GradeSeparationResolver",
    "LinkPairMatcher",
    "LinkPairMerger",
]
