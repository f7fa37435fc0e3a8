"""
출력 파일 생성

| 파일 | 내용 |
|---|---|
| <output_name>.<format>        | 정렬된 패키지 목록 (timestamp, deviceId, eventCode) |
| eventsPerSecond-YYYY-MM-DD.csv | 초 단위 버킷 (timestamp, count), 날짜별 회전 |
| vodLog-YYYY-MM-DD.csv          | VOD 이벤트 (timestamp, received, deviceId), 날짜별 회전 |
| eventsLog-<run timestamp>.csv  | 전체 이벤트 시퀀스 (단일 파일) |
| errorlog.txt                   | 잘못된 줄 목록 |
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from .excel_writer import ExcelWriter
from .models import ErrorLogEntry, EventLogEntry, Package, RunSummary, TimePoint
from .sink import PACKAGE_COLUMNS
from .transformer.rotation import DailyRotatingWriter
from .transformer.time_window import StatsAccumulator, WindowStats

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
OUTPUT_FORMATS = ("csv", "json", "xlsx")

EVENTS_PER_SECOND_PREFIX = "eventsPerSecond"
VOD_LOG_PREFIX = "vodLog"
EVENTS_LOG_PREFIX = "eventsLog"
ERROR_LOG_NAME = "errorlog.txt"


class ReportWriter:
    """실행 결과를 파일로 저장"""

    def __init__(self, output_dir=".", timezone: str = "UTC"):
        """
        Args:
            output_dir: 모든 출력 파일을 저장할 디렉토리
            timezone: 출력 시각과 날짜 회전 기준 타임존
        """
        self.output_dir = Path(output_dir)
        self.timezone = timezone

    def _local(self, timestamp: datetime) -> pd.Timestamp:
        return pd.Timestamp(timestamp).tz_convert(self.timezone)

    def _format(self, timestamp: datetime) -> str:
        return self._local(timestamp).strftime(TIMESTAMP_FORMAT)

    def _prepare_dir(self):
        self.output_dir.mkdir(parents=True, exist_ok=True)

    # --- packages ---

    def write_packages(
        self,
        packages: Sequence[Package],
        output_name: str = "output",
        output_format: str = "csv",
        summary: Optional[RunSummary] = None,
    ) -> Path:
        """
        정렬된 패키지 목록 저장

        Args:
            packages: 시각순으로 정렬된 패키지
            output_name: 확장자 없는 파일명
            output_format: 'csv', 'json', 'xlsx'
            summary: xlsx일 때 Summary 시트로 함께 저장할 실행 요약
        """
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"지원하지 않는 출력 형식입니다: {output_format}")

        self._prepare_dir()
        path = self.output_dir / f"{output_name}.{output_format}"

        if output_format == "xlsx":
            df = pd.DataFrame(
                [(self._local(p.timestamp).tz_localize(None), p.device_id, p.event_name) for p in packages],
                columns=PACKAGE_COLUMNS,
            )
            writer = ExcelWriter(path)
            try:
                writer.write_packages(df)
                if summary is not None:
                    writer.write_summary(self.summary_frame(summary))
                writer.save()
            finally:
                writer.close()
        else:
            df = pd.DataFrame(
                [(self._format(p.timestamp), p.device_id, p.event_name) for p in packages],
                columns=PACKAGE_COLUMNS,
            )
            if output_format == "json":
                df.to_json(path, orient="records", indent=2)
            else:
                df.to_csv(path, index=False)

        logger.info("Packages written: %s (%d rows)", path, len(packages))
        return path

    # --- events per second ---

    def write_events_per_second(self, points: Sequence[TimePoint]) -> Tuple[WindowStats, List[Path]]:
        """
        초 단위 버킷을 날짜별 파일로 저장하면서 최대값/평균 계산

        Args:
            points: 시각순으로 정렬된 버킷

        Returns:
            (WindowStats, 작성된 파일 목록)
        """
        acc = StatsAccumulator()
        with DailyRotatingWriter(self.output_dir, EVENTS_PER_SECOND_PREFIX, ["timestamp", "count"]) as writer:
            for point in points:
                local = self._local(point.timestamp)
                writer.append(local, [local.strftime(TIMESTAMP_FORMAT), point.count])
                acc.update(point)
        return acc.result(), list(writer.written_files)

    # --- side logs ---

    def write_vod_log(self, entries: Sequence[EventLogEntry]) -> List[Path]:
        """VOD 이벤트를 날짜별 파일로 저장 (entries는 시각순 정렬)"""
        if not entries:
            logger.info("No VOD events")
            return []

        with DailyRotatingWriter(self.output_dir, VOD_LOG_PREFIX, ["timestamp", "received", "deviceId"]) as writer:
            for entry in entries:
                local = self._local(entry.timestamp)
                writer.append(local, [local.strftime(TIMESTAMP_FORMAT), entry.received, entry.device_id])
        return list(writer.written_files)

    def write_events_log(self, entries: Sequence[EventLogEntry], run_started: datetime) -> Optional[Path]:
        """전체 이벤트 시퀀스를 단일 파일로 저장 (entries는 시각순 정렬)"""
        if not entries:
            logger.info("No events")
            return None

        self._prepare_dir()
        path = self.output_dir / f"{EVENTS_LOG_PREFIX}-{run_started.strftime('%Y%m%d_%H%M%S')}.csv"
        df = pd.DataFrame(
            [(self._format(e.timestamp), e.received, e.device_id, e.event_name, e.mso) for e in entries],
            columns=["timestamp", "received", "deviceId", "eventCode", "mso"],
        )
        df.to_csv(path, index=False)
        return path

    def write_error_log(self, errors: Sequence[ErrorLogEntry]) -> Path:
        """에러 로그 저장 (에러가 없어도 빈 파일 생성)"""
        self._prepare_dir()
        path = self.output_dir / ERROR_LOG_NAME
        with open(path, "w", encoding="utf-8") as f:
            for entry in errors:
                f.write(
                    f"File: {entry.file_name} \t lineNo: {entry.line_no}\t "
                    f"Error:{entry.error_kind}: {entry.message}\nEntry:[{entry.line}]\n"
                )
        return path

    # --- summary ---

    def summary_frame(self, summary: RunSummary) -> pd.DataFrame:
        """RunSummary를 metric/value 2열 DataFrame으로 변환"""

        def fmt(ts):
            return self._format(ts) if ts is not None else ""

        rows = [
            ("devices", summary.device_count),
            ("total_lines", summary.total_lines),
            ("total_packages", summary.total_packages),
            ("first_package_at", fmt(summary.first_package_at)),
            ("last_package_at", fmt(summary.last_package_at)),
            ("error_entries", summary.error_count),
            ("buckets", summary.bucket_count),
            ("max_per_second", summary.max_per_second),
            ("max_per_second_at", fmt(summary.max_per_second_at)),
            ("average_per_second", summary.average_per_second),
            ("files_processed", summary.files_processed),
            ("skipped_files", json.dumps(summary.skipped_files)),
        ]
        return pd.DataFrame(rows, columns=["metric", "value"])
