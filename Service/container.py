"""
Service/container.py

애플리케이션의 모든 객체를 생성하고 의존성을 주입하여 실행 가능한 상태로 조립합니다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from Common.log import Log

from Service.config import GradeSeparationConfig
from Service.itn_modules import (
    GMLCodec,
    GMLIO,
    ResultValidator,
    GradeSeparationResolver,
    LinkPairMatcher,
    LinkPairMerger,
)
from Service.grade_separation_service import GradeSeparationService


@dataclass(frozen=True)
class BuiltApp:
    """조립이 완료된 애플리케이션 서비스 객체 묶음입니다."""
    config: GradeSeparationConfig
    grade_separation_service: GradeSeparationService


def build_app(logger: Log, config: Optional[GradeSeparationConfig] = None) -> BuiltApp:
    """
    설정 로드 및 모든 내부 모듈의 의존성을 주입하여 BuiltApp 객체를 생성합니다.
    """
    config = config or GradeSeparationConfig()

    gml_io = GMLIO(logger, GMLCodec())

    resolver = GradeSeparationResolver(
        logger=logger,
        config=config,
        matcher=LinkPairMatcher(logger),
        merger=LinkPairMerger(logger, config),
    )

    validator = ResultValidator(logger, config)

    service = GradeSeparationService(
        logger=logger,
        gml_io=gml_io,
        resolver=resolver,
        validator=validator,
        config=config,
    )

    return BuiltApp(config=config, grade_separation_service=service)
