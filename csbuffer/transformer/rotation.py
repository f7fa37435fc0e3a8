"""
Daily Rotating Writer

시각순으로 정렬된 행을 받아 날짜가 바뀔 때마다 새 파일로 넘겨 쓰는 writer
(<prefix>-YYYY-MM-DD.csv)

입력이 정렬되어 있다는 전제로만 올바르게 동작한다. 정렬되지 않은 입력에서
같은 날짜가 다시 나오면 같은 이름의 파일이 새로 열려 앞의 내용을 덮어쓴다.
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

logger = logging.getLogger(__name__)


def format_daily_file_name(prefix: str, day: date) -> str:
    """날짜별 파일명 (예: eventsPerSecond-2016-01-01.csv)"""
    return f"{prefix}-{day.year:04d}-{day.month:02d}-{day.day:02d}.csv"


class DailyRotatingWriter:
    """
    날짜 기준 파일 회전 writer

    Example:
        >>> with DailyRotatingWriter(out_dir, "vodLog", ["timestamp", "received", "deviceId"]) as w:
        ...     for entry in sorted_entries:
        ...         w.append(entry.timestamp, [entry.timestamp, entry.received, entry.device_id])
    """

    def __init__(self, output_dir, prefix: str, columns: Sequence[str]):
        """
        Args:
            output_dir: 출력 디렉토리
            prefix: 파일명 접두사
            columns: CSV 헤더
        """
        self.output_dir = Path(output_dir)
        self.prefix = prefix
        self.columns = list(columns)
        self.written_files: List[Path] = []

        self._current_date: Optional[date] = None
        self._rows: List[list] = []

    @property
    def current_date(self) -> Optional[date]:
        return self._current_date

    def append(self, timestamp: datetime, row: Sequence):
        """
        한 행 추가. timestamp의 날짜가 현재 파일과 다르면 현재 파일을 닫고 새 파일을 연다.

        Args:
            timestamp: 날짜 판정용 시각 (현지 타임존으로 변환된 값)
            row: columns 순서의 값
        """
        day = timestamp.date()
        if self._current_date is None:
            self._open(day)
        elif day != self._current_date:
            self._flush()
            self._open(day)
        self._rows.append(list(row))

    def close(self) -> List[Path]:
        """마지막 파일을 닫고 지금까지 쓴 파일 목록 반환"""
        if self._current_date is not None:
            self._flush()
            self._current_date = None
        return list(self.written_files)

    def _open(self, day: date):
        self._current_date = day
        self._rows = []
        logger.debug("New filename: %s", format_daily_file_name(self.prefix, day))

    def _flush(self):
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / format_daily_file_name(self.prefix, self._current_date)
        pd.DataFrame(self._rows, columns=self.columns).to_csv(path, index=False)
        self.written_files.append(path)
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
