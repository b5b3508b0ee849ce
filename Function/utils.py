"""
Function/utils.py

실행 환경 및 입력 폴더 기준의 경로 연산을 처리하는 유틸리티 모듈입니다.
"""
from pathlib import Path
import shutil
import sys


def get_runtime_base_path() -> Path:
    """
    실행 파일 또는 메인 스크립트가 위치한 물리적 경로를 반환합니다.

    Returns:
        Path: 프로그램 실행 파일이 위치한 디렉토리 경로
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(sys.argv[0]).resolve().parent


def prepare_output_dir(output_dir: Path, clean: bool) -> Path:
    """
    결과 폴더를 생성합니다. clean이 True이면 기존 폴더를 삭제한 뒤 새로 만듭니다.

    Returns:
        Path: 생성된 결과 폴더 경로
    """
    if clean and output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def strip_archive_suffix(path: Path) -> str:
    """'93701-SU0400.gz', '93701-SU0400.gml.gz' 등에서 확장자를 제외한 파일명을 반환합니다."""
    name = path.name
    for suffix in (".gz", ".gml", ".xml"):
        if name.lower().endswith(suffix):
            name = name[: -len(suffix)]
    return name
