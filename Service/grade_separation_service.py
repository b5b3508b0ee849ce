"""
Service/grade_separation_service.py

입력 폴더의 GML 파일들을 순서대로 읽어 등급 분리를 제거하고 저장하는 일괄 처리 서비스 모듈입니다.
"""
from __future__ import annotations

import time
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from Function.utils import prepare_output_dir, strip_archive_suffix
from Service.config import GradeSeparationConfig
from Service.schemas import FileLoadRequest, FileSaveRequest, SourceFolderRequest
from Service.itn_modules import GMLIO, GradeSeparationResolver, ResultValidator


@dataclass
class FileOutcome:
    source_path: Path
    elapsed_ms: float
    output_path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    output_dir: Path
    outcomes: List[FileOutcome] = field(default_factory=list)

    @property
    def failed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


class GradeSeparationService:
    """
    파일 단위로 로드 → 레벨별 등급 분리 제거 → 검증 → 저장 공정을 실행합니다.
    한 파일의 실패는 기록만 하고 다음 파일 처리를 계속합니다.
    """

    def __init__(
        self,
        logger: Log,
        gml_io: GMLIO,
        resolver: GradeSeparationResolver,
        validator: ResultValidator,
        config: GradeSeparationConfig,
    ):
        self._logger = logger
        self._gml_io = gml_io
        self._resolver = resolver
        self._validator = validator
        self._config = config

    @safe_run
    @log_execution_time
    def run_batch(self, source_dir: str, output_dir: Optional[str] = None) -> BatchResult:
        """
        입력 폴더에서 설정된 패턴의 파일을 이름순으로 처리합니다. 결과 폴더 기본값은 '<입력 폴더>/out' 입니다.
        """
        source = SourceFolderRequest(source_dir=Path(source_dir)).source_dir
        target_dir = Path(output_dir).expanduser().resolve() if output_dir else source / self._config.output_dir_name
        if target_dir == source or source.is_relative_to(target_dir):
            # 결과 폴더 정리(rmtree)가 입력 파일까지 지우게 되므로 거부
            raise ValueError(f"결과 폴더가 입력 폴더와 같거나 그 상위 폴더입니다: {target_dir}")
        prepare_output_dir(target_dir, clean=self._config.clean_output_dir)

        self._logger.log("=== 등급 분리 제거 시작 ===", level="INFO")
        self._logger.log(f"결과 폴더: {target_dir}", level="INFO")

        result = BatchResult(output_dir=target_dir)
        files = sorted(p for p in source.glob(self._config.input_glob) if p.is_file())
        if not files:
            self._logger.log(f"처리할 파일이 없습니다. (패턴: {self._config.input_glob})", level="WARNING")

        for file_path in files:
            result.outcomes.append(self._run_file(file_path, target_dir))

        self._logger.log(
            f"=== 등급 분리 제거 완료: 성공 {len(result.outcomes) - len(result.failed)}건, "
            f"실패 {len(result.failed)}건 ===",
            level="INFO",
        )
        return result

    def process_file(self, file_path: Path, output_dir: Path) -> Path:
        """단일 파일을 처리하여 결과 폴더에 같은 이름의 파일로 저장합니다."""
        loaded = self._gml_io.load(FileLoadRequest(file_path=file_path))

        self._resolver.resolve(loaded.document)
        self._validator.execute(loaded.document)

        if self._config.debug_export_gml:
            debug_path = output_dir / f"{strip_archive_suffix(file_path)}.gml"
            self._gml_io.save(loaded, FileSaveRequest(output_path=debug_path))

        return self._gml_io.save(loaded, FileSaveRequest(output_path=output_dir / file_path.name))

    def _run_file(self, file_path: Path, output_dir: Path) -> FileOutcome:
        """파일 단위 처리 경계입니다. 예외는 기록 후 결과 객체로 변환하며, 불완전한 결과 파일은 남기지 않습니다."""
        self._logger.log(file_path.name, level="INFO")
        start = time.perf_counter()
        outcome = FileOutcome(source_path=file_path, elapsed_ms=0.0)

        try:
            outcome.output_path = self.process_file(file_path, output_dir)
        except Exception as e:
            outcome.error = f"{type(e).__name__}: {e}"
            self._logger.log(f"파일 처리 실패: {file_path.name}\n{traceback.format_exc()}", level="ERROR")
            self._discard_outputs(file_path, output_dir)

        outcome.elapsed_ms = (time.perf_counter() - start) * 1000.0
        self._logger.log(f"{outcome.elapsed_ms:.0f}ms", level="INFO")
        return outcome

    def _discard_outputs(self, file_path: Path, output_dir: Path) -> None:
        candidates = [output_dir / file_path.name]
        if self._config.debug_export_gml:
            candidates.append(output_dir / f"{strip_archive_suffix(file_path)}.gml")

        for candidate in candidates:
            if candidate.exists() and candidate != file_path:
                candidate.unlink()
                self._logger.log(f"불완전한 결과 파일 삭제: {candidate.name}", level="WARNING")
