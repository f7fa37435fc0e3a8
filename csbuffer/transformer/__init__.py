"""
Transformer 패키지

전송된 패키지를 초 단위로 집계하고 날짜별 파일로 나누어 출력
"""

from .time_window import (
    AggregationMode,
    EventsPerSecondAggregator,
    StatsAccumulator,
    WindowStats,
)
from .rotation import DailyRotatingWriter, format_daily_file_name

__all__ = [
    'AggregationMode',
    'EventsPerSecondAggregator',
    'StatsAccumulator',
    'WindowStats',
    'DailyRotatingWriter',
    'format_daily_file_name',
]
