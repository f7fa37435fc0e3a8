#!/usr/bin/env python3
"""
Excel 컬럼 포맷팅

컬럼 너비 자동 조정, 셀 숫자/날짜 포맷
"""

from datetime import datetime

from openpyxl.utils import get_column_letter

TIMESTAMP_FORMAT = 'yyyy-mm-dd hh:mm:ss'

# 너비 계산에 쓰는 최대 행 수 (헤더 포함)
WIDTH_SAMPLE_ROWS = 1000

# 컬럼 이름 -> number_format
NUMBER_FORMATS = {
    'timestamp': TIMESTAMP_FORMAT,
    'count': '0',
    'deviceId': '@',      # 앞자리 0 유지
}


def _display_length(value) -> int:
    if value is None:
        return 0
    if isinstance(value, datetime):
        return len(TIMESTAMP_FORMAT)
    return len(str(value))


class ColumnFormatter:
    """Excel 컬럼 포맷팅 관리"""

    @staticmethod
    def auto_adjust_column_width(worksheet, min_width=10, max_width=50, sample_rows=WIDTH_SAMPLE_ROWS):
        """
        앞쪽 sample_rows 행만 보고 컬럼 너비 조정

        Args:
            worksheet: openpyxl Worksheet 객체
            min_width: 최소 너비
            max_width: 최대 너비
            sample_rows: 너비 계산에 사용할 행 수
        """
        last_row = min(worksheet.max_row, sample_rows)
        columns = worksheet.iter_cols(min_row=1, max_row=last_row, values_only=True)
        for col_idx, values in enumerate(columns, start=1):
            longest = max((_display_length(v) for v in values), default=0)
            width = min(max(longest * 1.2, min_width), max_width)
            worksheet.column_dimensions[get_column_letter(col_idx)].width = width

    @staticmethod
    def apply_number_format(cell, column_name):
        """컬럼 이름에 맞는 number_format 적용 (..._at 컬럼은 시각)"""
        name = str(column_name)
        fmt = NUMBER_FORMATS.get(name)
        if fmt is None and name.endswith('_at'):
            fmt = TIMESTAMP_FORMAT
        if fmt is not None:
            cell.number_format = fmt
