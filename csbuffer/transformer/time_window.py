"""
Events-per-second Aggregator

전송된 패키지(또는 이벤트)를 초 단위 버킷으로 집계
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

import pandas as pd

from ..models import Package, TimePoint

# Primetime 구간 [20:00, 23:00)
PRIMETIME_START_HOUR = 20
PRIMETIME_END_HOUR = 23

# 누적 primetime 모드에서 모든 시각을 옮겨 놓는 날짜
UNIFIED_DATE = pd.Timestamp("2016-01-01")


class AggregationMode(str, Enum):
    ALL = "all"
    PRIMETIME = "primetime"
    CUMULATIVE_PRIMETIME = "cumulative_primetime"


@dataclass(frozen=True)
class WindowStats:
    """버킷 통계 (최대 버킷, 평균, 버킷 수)"""
    max_point: Optional[TimePoint]
    average: int
    bucket_count: int
    total_count: int


class StatsAccumulator:
    """
    버킷을 순서대로 받으면서 최대값/평균을 계산

    파일에 쓰는 루프와 같은 패스에서 갱신할 수 있도록 분리
    """

    def __init__(self):
        self.max_point: Optional[TimePoint] = None
        self.total_count = 0
        self.bucket_count = 0

    def update(self, point: TimePoint):
        # 같은 최대값이면 먼저 나온 버킷 유지
        if self.max_point is None or point.count > self.max_point.count:
            self.max_point = point
        self.total_count += point.count
        self.bucket_count += 1

    def result(self) -> WindowStats:
        average = self.total_count // self.bucket_count if self.bucket_count else 0
        return WindowStats(
            max_point=self.max_point,
            average=average,
            bucket_count=self.bucket_count,
            total_count=self.total_count,
        )


class EventsPerSecondAggregator:
    """
    초 단위 집계

    - ALL: 모든 시각
    - PRIMETIME: 현지 시각 20:00~23:00만
    - CUMULATIVE_PRIMETIME: primetime만, 날짜를 무시하고 하나의 날짜로 합침
    """

    def __init__(self, mode: AggregationMode = AggregationMode.ALL, timezone: str = "UTC"):
        """
        Args:
            mode: 집계 모드
            timezone: 시(hour) 필터와 날짜 판정에 사용할 IANA 타임존
        """
        self.mode = AggregationMode(mode)
        self.timezone = timezone

    def aggregate(self, timestamps: Iterable[datetime]) -> List[TimePoint]:
        """
        타임스탬프 목록을 초 단위 버킷으로 집계

        Args:
            timestamps: tz-aware datetime 목록 (순서 무관)

        Returns:
            list[TimePoint]: 시각 오름차순으로 정렬된 버킷
        """
        values = list(timestamps)
        if not values:
            return []

        local = pd.Series(pd.to_datetime(values, utc=True)).dt.tz_convert(self.timezone).dt.floor("s")

        if self.mode != AggregationMode.ALL:
            hours = local.dt.hour
            local = local[(hours >= PRIMETIME_START_HOUR) & (hours < PRIMETIME_END_HOUR)]
            if local.empty:
                return []

        if self.mode == AggregationMode.CUMULATIVE_PRIMETIME:
            wall_clock = local.dt.tz_localize(None)
            local = (UNIFIED_DATE + (wall_clock - wall_clock.dt.normalize())).dt.tz_localize(self.timezone)

        counts = local.value_counts().sort_index()
        return [TimePoint(timestamp=ts.to_pydatetime(), count=int(n)) for ts, n in counts.items()]

    def aggregate_packages(self, packages: Iterable[Package]) -> List[TimePoint]:
        return self.aggregate(p.timestamp for p in packages)

    @staticmethod
    def summarize(points: Iterable[TimePoint]) -> WindowStats:
        """파일 출력 없이 통계만 계산"""
        acc = StatsAccumulator()
        for point in points:
            acc.update(point)
        return acc.result()
