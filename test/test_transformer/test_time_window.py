#!/usr/bin/env python3
"""
EventsPerSecondAggregator 단위 테스트
"""

import pytest
import pytz
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# 프로젝트 루트 추가
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from csbuffer.event_codes import Category
from csbuffer.models import Package, TimePoint
from csbuffer.transformer import (
    AggregationMode,
    EventsPerSecondAggregator,
    StatsAccumulator,
    WindowStats,
)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestAggregateAll:
    """ALL 모드"""

    def test_counts_per_second(self):
        t = utc(2016, 1, 1, 10, 0, 0)
        stamps = [t, t, t + timedelta(seconds=1), t]

        points = EventsPerSecondAggregator().aggregate(stamps)

        assert [(p.timestamp, p.count) for p in points] == [(t, 3), (t + timedelta(seconds=1), 1)]

    def test_sorted_output_from_unsorted_input(self):
        t = utc(2016, 1, 2, 0, 0, 0)
        stamps = [t + timedelta(days=1), t, t - timedelta(hours=5)]

        points = EventsPerSecondAggregator().aggregate(stamps)

        assert [p.timestamp for p in points] == sorted(stamps)

    def test_sub_second_floored(self):
        t = utc(2016, 1, 1, 10, 0, 0)
        points = EventsPerSecondAggregator().aggregate([t, t + timedelta(milliseconds=999)])

        assert points == [TimePoint(timestamp=t, count=2)]

    def test_empty(self):
        assert EventsPerSecondAggregator().aggregate([]) == []

    def test_total_preserved(self):
        t = utc(2016, 1, 1, 0, 0, 0)
        stamps = [t + timedelta(seconds=i % 37) for i in range(500)]

        points = EventsPerSecondAggregator().aggregate(stamps)

        assert sum(p.count for p in points) == 500
        assert len(points) == 37

    def test_aggregate_packages(self):
        t = utc(2016, 1, 1, 21, 0, 0)
        packages = [Package(t, "A", Category.AD_DISPLAY), Package(t, "B", Category.KEY_PRESS)]

        points = EventsPerSecondAggregator().aggregate_packages(packages)

        assert points == [TimePoint(timestamp=t, count=2)]


class TestPrimetime:
    """PRIMETIME 모드: [20:00, 23:00)"""

    def test_boundaries(self):
        stamps = [
            utc(2016, 1, 1, 19, 59, 59),
            utc(2016, 1, 1, 20, 0, 0),
            utc(2016, 1, 1, 22, 59, 59),
            utc(2016, 1, 1, 23, 0, 0),
        ]

        points = EventsPerSecondAggregator(AggregationMode.PRIMETIME).aggregate(stamps)

        assert [p.timestamp for p in points] == [stamps[1], stamps[2]]

    def test_uses_configured_timezone(self):
        """01:30 UTC는 뉴욕 기준 전날 20:30 (EST)"""
        stamp = utc(2016, 1, 2, 1, 30, 0)
        aggregator = EventsPerSecondAggregator(AggregationMode.PRIMETIME, "America/New_York")

        points = aggregator.aggregate([stamp, utc(2016, 1, 1, 20, 30, 0)])

        assert len(points) == 1
        assert points[0].timestamp == stamp
        assert points[0].timestamp.astimezone(pytz.timezone("America/New_York")).hour == 20

    def test_nothing_in_window(self):
        points = EventsPerSecondAggregator("primetime").aggregate([utc(2016, 1, 1, 8, 0, 0)])
        assert points == []


class TestCumulativePrimetime:
    """CUMULATIVE_PRIMETIME 모드: 날짜를 하나로 합침"""

    def test_dates_folded(self):
        stamps = [
            utc(2016, 3, 5, 20, 0, 0),
            utc(2017, 7, 9, 20, 0, 0),
            utc(2016, 3, 5, 21, 15, 30),
            utc(2016, 3, 5, 12, 0, 0),
        ]
        aggregator = EventsPerSecondAggregator(AggregationMode.CUMULATIVE_PRIMETIME)

        points = aggregator.aggregate(stamps)

        assert [(p.timestamp, p.count) for p in points] == [
            (utc(2016, 1, 1, 20, 0, 0), 2),
            (utc(2016, 1, 1, 21, 15, 30), 1),
        ]

    def test_local_wall_clock_kept(self):
        tz = pytz.timezone("America/New_York")
        aggregator = EventsPerSecondAggregator(AggregationMode.CUMULATIVE_PRIMETIME, "America/New_York")

        points = aggregator.aggregate([utc(2016, 6, 10, 1, 0, 0)])  # 2016-06-09 21:00 EDT

        assert points[0].timestamp == tz.localize(datetime(2016, 1, 1, 21, 0, 0))


class TestSummarize:
    """통계 계산"""

    def test_max_and_average(self):
        t = utc(2016, 1, 1, 0, 0, 0)
        points = [TimePoint(t, 3), TimePoint(t + timedelta(seconds=1), 1), TimePoint(t + timedelta(seconds=2), 1)]

        stats = EventsPerSecondAggregator.summarize(points)

        assert stats.max_point == points[0]
        assert stats.average == 1, "5 // 3"
        assert stats.bucket_count == 3
        assert stats.total_count == 5

    def test_first_max_wins(self):
        t = utc(2016, 1, 1, 0, 0, 0)
        points = [TimePoint(t, 1), TimePoint(t + timedelta(seconds=1), 4), TimePoint(t + timedelta(seconds=2), 4)]

        assert EventsPerSecondAggregator.summarize(points).max_point == points[1]

    def test_empty(self):
        assert EventsPerSecondAggregator.summarize([]) == WindowStats(
            max_point=None, average=0, bucket_count=0, total_count=0,
        )

    def test_accumulator_incremental(self):
        acc = StatsAccumulator()
        t = utc(2016, 1, 1, 0, 0, 0)
        acc.update(TimePoint(t, 2))
        acc.update(TimePoint(t + timedelta(seconds=1), 5))

        stats = acc.result()
        assert stats.max_point.count == 5
        assert stats.average == 3


def test_invalid_mode():
    with pytest.raises(ValueError):
        EventsPerSecondAggregator("weekly")
