"""
Service/schemas.py

입출력 요청의 구조를 정의하고 입력값의 유효성을 검증하는 스키마 모듈입니다.
"""
from pathlib import Path
from pydantic import BaseModel, Field, field_validator

GML_SUFFIXES = (".gz", ".gml", ".xml")


class SourceFolderRequest(BaseModel):
    """
    일괄 처리 대상 폴더 요청을 위한 데이터 모델입니다.
    """
    source_dir: Path = Field(..., description="압축된 GML 파일들이 위치한 폴더 경로")

    @field_validator("source_dir")
    @classmethod
    def validate_existence(cls, v: Path) -> Path:
        resolved_path = v.expanduser().resolve()
        if not resolved_path.is_dir():
            raise ValueError(f"입력 폴더가 존재하지 않습니다: {resolved_path}")
        return resolved_path


class FileLoadRequest(BaseModel):
    """
    GML 파일 로드 요청을 위한 데이터 모델입니다.
    """
    file_path: Path = Field(..., description="읽어올 GML(.gz/.gml/.xml) 파일의 경로")

    @field_validator("file_path")
    @classmethod
    def validate_extension(cls, v: Path) -> Path:
        if v.suffix.lower() not in GML_SUFFIXES:
            raise ValueError(f"지원하지 않는 파일 형식입니다. ({', '.join(GML_SUFFIXES)} 필요): {v.suffix}")
        return v

    @field_validator("file_path")
    @classmethod
    def validate_existence(cls, v: Path) -> Path:
        resolved_path = v.expanduser().resolve()
        if not resolved_path.is_file():
            raise ValueError(f"파일을 찾을 수 없습니다: {resolved_path}")
        return resolved_path

    @property
    def is_compressed(self) -> bool:
        return self.file_path.suffix.lower() == ".gz"


class FileSaveRequest(BaseModel):
    """
    GML 파일 저장 요청을 위한 데이터 모델입니다.
    """
    output_path: Path = Field(..., description="결과를 저장할 파일 경로")

    @field_validator("output_path")
    @classmethod
    def validate_extension(cls, v: Path) -> Path:
        if v.suffix.lower() not in GML_SUFFIXES:
            raise ValueError(f"저장 파일 형식은 {', '.join(GML_SUFFIXES)} 중 하나여야 합니다: {v.suffix}")
        return v.expanduser().resolve()

    @property
    def is_compressed(self) -> bool:
        return self.output_path.suffix.lower() == ".gz"
