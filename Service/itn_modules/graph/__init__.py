"""
Service/itn_modules/graph/__init__.py

도로망 그래프 문서와 데이터 모델을 외부로 노출합니다.
"""
from .document import GraphDocument
from .model import (
    GRADE_LEVELS,
    DirectedNodeRef,
    Link,
    MissingElementError,
    Orientation,
    RaisedNodeRef,
    Road,
    format_length,
    parse_grade_level,
)

__all__ = [
    "GRADE_LEVELS",
    "GraphDocument",
    "DirectedNodeRef",
    "Link",
    "MissingElementError",
    "Orientation",
    "RaisedNodeRef",
    "Road",
    "format_length",
    "parse_grade_level",
]
