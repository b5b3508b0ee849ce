"""
Service/config.py

등급 분리 제거 파이프라인의 동작을 제어하는 설정 모듈입니다.
"""
from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GradeSeparationConfig(BaseSettings):
    """
    등급 분리 제거 파이프라인의 핵심 파라미터를 정의하는 설정 클래스입니다.
    """

    min_grade_level: int = Field(
        default=1,
        ge=1,
        le=3,
        description="처리를 시작할 등급 분리 레벨"
    )

    max_grade_level: int = Field(
        default=3,
        ge=1,
        le=3,
        description="처리를 종료할 등급 분리 레벨"
    )

    input_glob: str = Field(
        default="*.gz",
        description="입력 폴더에서 처리할 파일 패턴"
    )

    output_dir_name: str = Field(
        default="out",
        min_length=1,
        description="입력 폴더 하위에 생성할 결과 폴더명"
    )

    clean_output_dir: bool = Field(
        default=True,
        description="실행 전 기존 결과 폴더 삭제 여부"
    )

    debug_export_gml: bool = Field(
        default=False,
        description="디버그 모드: 압축하지 않은 GML 결과물을 함께 저장 여부"
    )

    pair_selection_order: Literal["first_seen", "node_id"] = Field(
        default="first_seen",
        description="한 번의 스윕에서 병합할 쌍의 선택 기준 (문서 순서 또는 노드 ID 정렬)"
    )

    strict_road_membership: bool = Field(
        default=False,
        description="병합으로 삭제되는 링크가 어떤 도로에도 속하지 않으면 파일 처리를 중단할지 여부"
    )

    length_tolerance_ratio: float = Field(
        default=0.05,
        ge=0.0,
        description="검증 시 선언 길이와 좌표 길이의 허용 편차 비율"
    )

    log_retention_days: int = Field(
        default=3,
        ge=0,
        description="로그 파일 보관 기간(일)"
    )

    model_config = SettingsConfigDict(
        env_prefix="ITN_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @model_validator(mode="after")
    def check_level_range(self) -> "GradeSeparationConfig":
        if self.min_grade_level > self.max_grade_level:
            raise ValueError(
                f"min_grade_level({self.min_grade_level})이 max_grade_level({self.max_grade_level})보다 큽니다."
            )
        return self

    @property
    def grade_levels(self) -> range:
        return range(self.min_grade_level, self.max_grade_level + 1)
