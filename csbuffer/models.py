"""
파이프라인 전 구간에서 사용하는 데이터 객체

I/O나 파싱 로직과 무관한 작은 dataclass 모음.
파이프라인을 통과하는 값들은 생성 이후 변경하지 않음(frozen).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .event_codes import Category, get_event_definition


# === Intake ===
@dataclass(frozen=True)
class RawLine:
    """입력 파일의 한 줄 (파일명, 1부터 시작하는 줄 번호, 원문)"""
    file_name: str
    line_no: int
    text: str
    mso: str


# === Decoded event ===
@dataclass(frozen=True)
class ParsedEvent:
    """디코딩된 clickstream 이벤트 한 건"""
    timestamp: datetime          # GPS 시각을 UTC로 변환한 값
    device_id: str
    category: Category
    payload_hex: str
    size_bytes: int              # len(payload_hex) // 2
    received: str                # 수신 시각 토큰 (없으면 placeholder)
    timestamp_degraded: bool = False

    @property
    def event_name(self) -> str:
        return get_event_definition(self.category).name


# === Buffer flush ===
@dataclass(frozen=True)
class Package:
    """버퍼가 watermark를 넘어 전송된 '패키지' 한 건"""
    timestamp: datetime
    device_id: str
    category: Category

    @property
    def event_name(self) -> str:
        return get_event_definition(self.category).name


# === Aggregation bucket ===
@dataclass(frozen=True)
class TimePoint:
    """초 단위 집계 버킷"""
    timestamp: datetime
    count: int


# === Side-channel logs ===
@dataclass(frozen=True)
class EventLogEntry:
    timestamp: datetime
    received: str
    device_id: str
    event_name: str              # VOD 서브타입은 " / Type V" 등이 붙음
    mso: str


@dataclass(frozen=True)
class ErrorLogEntry:
    file_name: str
    line_no: int
    line: str
    error_kind: str
    message: str = ""


# === Run summary (console) ===
@dataclass
class RunSummary:
    """실행 종료 시 출력할 통계"""
    device_count: int = 0
    total_lines: int = 0
    total_packages: int = 0
    first_package_at: Optional[datetime] = None
    last_package_at: Optional[datetime] = None
    error_count: int = 0
    bucket_count: int = 0
    max_per_second: int = 0
    max_per_second_at: Optional[datetime] = None
    average_per_second: int = 0
    event_log_entries: int = 0
    files_processed: int = 0
    skipped_files: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    artifacts: List[str] = field(default_factory=list)
