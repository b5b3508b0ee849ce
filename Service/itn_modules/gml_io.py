"""
Service/itn_modules/gml_io.py

ITN GML 데이터(.gz 압축 또는 일반 GML)의 입출력을 담당하는 모듈입니다.
"""
from __future__ import annotations

import gzip
import os
import tempfile
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List, Tuple

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from Service.itn_modules.gml_codec import GMLBinding, GMLCodec
from Service.itn_modules.graph import GraphDocument
from Service.schemas import FileLoadRequest, FileSaveRequest


@dataclass
class LoadedNetwork:
    """로드된 GML 트리와 그로부터 만든 그래프 문서 묶음입니다."""
    source_path: Path
    document: GraphDocument
    binding: GMLBinding
    namespaces: List[Tuple[str, str]]


class GMLIO:
    """
    GML 파일을 읽어 GraphDocument로 변환하고, 처리 결과를 다시 파일로 저장합니다.
    """

    def __init__(self, logger: Log, codec: GMLCodec):
        self._logger = logger
        self._codec = codec

    @safe_run
    @log_execution_time
    def load(self, request: FileLoadRequest) -> LoadedNetwork:
        """
        파일을 파싱하여 링크/도로를 추출합니다.

        Args:
            request (FileLoadRequest): 파일 경로를 포함한 로드 요청 객체

        Returns:
            LoadedNetwork: 그래프 문서와 원본 XML 트리
        """
        file_path = request.file_path

        if request.is_compressed:
            with gzip.open(file_path, "rb") as stream:
                root, namespaces = self._parse(stream)
        else:
            with open(file_path, "rb") as stream:
                root, namespaces = self._parse(stream)

        document, binding = self._codec.decode(root)

        if not document.links:
            self._logger.log(f"링크가 없는 문서입니다: {file_path.name}", level="WARNING")

        self._logger.log(
            f"데이터 로드 상세 - 링크 수: {len(document.links)}, 도로 수: {len(document.roads)}",
            level="INFO",
        )
        return LoadedNetwork(source_path=file_path, document=document, binding=binding, namespaces=namespaces)

    @safe_run
    @log_execution_time
    def save(self, loaded: LoadedNetwork, request: FileSaveRequest) -> Path:
        """
        문서의 변경 사항을 XML 트리에 반영한 뒤 임시 파일에 기록하고, 완료되면 대상 경로로 교체합니다.

        Args:
            loaded (LoadedNetwork): 저장할 데이터
            request (FileSaveRequest): 저장 경로를 포함한 요청 객체

        Returns:
            Path: 저장된 파일의 경로
        """
        output_path = request.output_path
        output_path.parent.mkdir(parents=True, exist_ok=True)

        root = self._codec.encode(loaded.document, loaded.binding)
        self._register_namespaces(loaded.namespaces)
        tree = ET.ElementTree(root)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", dir=output_path.parent)
        try:
            with os.fdopen(fd, "wb") as raw:
                if request.is_compressed:
                    with gzip.GzipFile(filename=output_path.stem, mode="wb", fileobj=raw) as stream:
                        tree.write(stream, encoding="utf-8", xml_declaration=True)
                else:
                    tree.write(raw, encoding="utf-8", xml_declaration=True)
            # mkstemp는 0600으로 생성하므로 open()과 같은 권한으로 맞춤
            os.chmod(tmp_name, 0o666 & ~_current_umask())
            os.replace(tmp_name, output_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

        self._logger.log(f"저장 완료: {output_path}", level="INFO")
        return output_path

    def _parse(self, stream: BinaryIO) -> Tuple[ET.Element, List[Tuple[str, str]]]:
        """네임스페이스 접두어를 함께 수집하며 XML을 파싱합니다."""
        namespaces: List[Tuple[str, str]] = []
        root = None
        for event, item in ET.iterparse(stream, events=("start-ns", "start")):
            if event == "start-ns":
                namespaces.append(item)
            elif root is None:
                root = item

        if root is None:
            raise ValueError("XML 루트 요소가 없습니다.")
        return root, namespaces

    def _register_namespaces(self, namespaces: List[Tuple[str, str]]) -> None:
        """원본 문서의 네임스페이스 접두어를 저장 시에도 유지하도록 등록합니다."""
        for prefix, uri in namespaces:
            try:
                ET.register_namespace(prefix, uri)
            except ValueError:
                self._logger.log(f"네임스페이스 접두어 등록 생략: {prefix}={uri}", level="DEBUG")


def _current_umask() -> int:
    """현재 프로세스의 umask를 반환합니다."""
    umask = os.umask(0)
    os.umask(umask)
    return umask
