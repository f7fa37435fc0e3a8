"""
Excel Writer 패키지

패키지 목록을 xlsx 파일로 변환하는 기능 제공
"""

from .writer import ExcelWriter
from .styler import ExcelStyler
from .formatter import ColumnFormatter

__all__ = [
    'ExcelWriter',
    'ExcelStyler',
    'ColumnFormatter',
]
