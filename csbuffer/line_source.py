from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Sequence

import logging
import os

from .models import RawLine

logger = logging.getLogger(__name__)

RAW_EXTENSION = "raw"


class LineSource(ABC):
    """
    입력 줄 소스 추상 인터페이스

    파일 목록이든 다른 형태든 RawLine을 하나씩 yield하는
    동일한 인터페이스로 처리
    """

    @abstractmethod
    def __iter__(self) -> Iterator[RawLine]:
        """줄을 하나씩 yield"""
        pass


class RawLogSource(LineSource):
    """clickstream 로그 파일 소스 - 파일 순서대로 한 줄씩 스트리밍"""

    def __init__(self, filepaths: Sequence[str]):
        self.filepaths = list(filepaths)
        self.skipped_files: List[str] = []
        self.files_processed = 0
        self.total_lines = 0

    def __iter__(self) -> Iterator[RawLine]:
        self.skipped_files = []
        self.files_processed = 0
        self.total_lines = 0

        for path in self.filepaths:
            logger.info("Processing: %s", path)
            try:
                handle = open(path, "r", encoding="utf-8", errors="replace", newline="")
            except OSError as e:
                # 파일 하나 실패는 전체 실행을 멈추지 않음
                logger.warning("Error opening file %s: %s", path, e)
                self.skipped_files.append(path)
                continue

            mso = mso_name(path)
            with handle:
                for line_no, line in enumerate(handle, start=1):
                    self.total_lines += 1
                    yield RawLine(
                        file_name=path,
                        line_no=line_no,
                        text=line.rstrip("\r\n"),
                        mso=mso,
                    )
            self.files_processed += 1


def mso_name(file_name: str) -> str:
    """
    파일명에서 MSO(사업자) 식별자 추출

    마지막 '_'와 확장자 사이 문자열 (예: 'events_20160101_comcast.raw' -> 'comcast').
    '_'가 없으면 확장자를 뺀 파일명 전체.
    """
    stem, _ = os.path.splitext(os.path.basename(file_name))
    return stem.rsplit("_", 1)[-1]


def collect_input_files(directory: str, extension: str = RAW_EXTENSION) -> List[str]:
    """
    디렉토리를 재귀적으로 탐색하여 확장자가 일치하는 파일 목록 반환 (경로순 정렬)

    Args:
        directory: 탐색할 디렉토리
        extension: 점 없는 확장자 (예: 'raw', 'cs')
    """
    if not os.path.isdir(directory):
        logger.warning("Working directory not found: %s", directory)
        return []

    suffix = "." + extension
    files = []
    for root, _dirs, names in os.walk(directory):
        for name in names:
            if os.path.splitext(name)[1] == suffix:
                path = os.path.join(root, name)
                logger.debug("Added: %s", path)
                files.append(path)
    return sorted(files)


def resolve_input_files(
    input_file: Optional[str],
    input_dir: Optional[str],
    extension: str = RAW_EXTENSION,
) -> List[str]:
    """
    처리할 파일 목록 결정 (디렉토리가 주어지면 단일 파일보다 우선)

    Raises:
        ValueError: 파일도 디렉토리도 주어지지 않음
    """
    if input_dir:
        return collect_input_files(input_dir, extension)
    if input_file:
        return [input_file]
    raise ValueError("Input file name or working directory is not provided")
