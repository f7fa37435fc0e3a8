#!/usr/bin/env python3
"""
Excel 파일 생성

패키지 목록과 실행 요약 DataFrame을 xlsx 파일로 변환
"""

import logging
from datetime import datetime
from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils.dataframe import dataframe_to_rows

from .styler import ExcelStyler
from .formatter import ColumnFormatter

logger = logging.getLogger(__name__)

# 이 행 수를 넘으면 데이터 셀 스타일 생략 (속도)
STYLED_ROW_LIMIT = 10000


class ExcelWriter:
    """Excel 파일 생성 및 관리"""

    def __init__(self, output_path=None):
        """
        Args:
            output_path: 출력 파일 경로 (None이면 자동 생성)
        """
        if output_path is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output_path = f"packages_{timestamp}.xlsx"

        self.output_path = Path(output_path)
        self.workbook = Workbook()
        self.styler = ExcelStyler(self.workbook)

        # 기본 시트 삭제
        if 'Sheet' in self.workbook.sheetnames:
            del self.workbook['Sheet']

    def write_packages(self, df_packages):
        """
        Packages 시트 생성

        Args:
            df_packages: pandas.DataFrame
                Columns: timestamp | deviceId | eventCode
                timestamp는 tz 정보 없는 현지 시각이어야 함 (Excel 제한)
        """
        ws = self.workbook.create_sheet("Packages")
        self._write_dataframe_to_sheet(ws, df_packages)
        logger.info("Packages 시트 생성: %d rows", len(df_packages))

    def write_summary(self, df_summary):
        """
        Summary 시트 생성

        Args:
            df_summary: pandas.DataFrame
                Columns: metric | value
        """
        ws = self.workbook.create_sheet("Summary", 0)
        self._write_dataframe_to_sheet(ws, df_summary)

    def _write_dataframe_to_sheet(self, worksheet, df):
        """
        DataFrame을 시트에 쓰기 (1행 헤더 + 데이터)

        Args:
            worksheet: openpyxl Worksheet 객체
            df: pandas.DataFrame
        """
        rows = list(dataframe_to_rows(df, index=False, header=True))
        columns = df.columns.tolist()
        style_data = len(rows) - 1 <= STYLED_ROW_LIMIT

        for row_idx, row_data in enumerate(rows, start=1):
            for col_idx, value in enumerate(row_data, start=1):
                cell = worksheet.cell(row=row_idx, column=col_idx, value=value)

                if row_idx == 1:
                    self.styler.apply_header_style(cell)
                    continue

                column_name = columns[col_idx - 1]
                # named style이 number_format을 덮어쓰므로 스타일 먼저
                if style_data:
                    is_even = (row_idx - 2) % 2 == 0
                    self.styler.apply_data_style(
                        cell, is_even_row=is_even, align=ExcelStyler.column_alignment(column_name)
                    )
                ColumnFormatter.apply_number_format(cell, column_name)

        worksheet.freeze_panes = "A2"
        ColumnFormatter.auto_adjust_column_width(worksheet)

    def save(self):
        """
        Excel 파일 저장

        Returns:
            Path: 저장된 파일 경로
        """
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.workbook.save(self.output_path)
        return self.output_path

    def close(self):
        """Workbook 닫기"""
        self.workbook.close()
