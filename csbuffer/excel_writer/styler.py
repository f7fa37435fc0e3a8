#!/usr/bin/env python3
"""
Excel 셀 스타일링

셀마다 Font/Fill 객체를 새로 만드는 대신 workbook에 NamedStyle을 한 번
등록해두고 이름으로 적용한다. 패키지 시트는 수십만 행이 될 수 있음.
"""

from openpyxl.styles import Alignment, Border, Font, NamedStyle, PatternFill, Side

HEADER_STYLE = "csb_header"

_THIN = Side(style='thin', color='000000')


class ExcelStyler:
    """workbook 단위 NamedStyle 등록 및 적용"""

    HEADER_BG_COLOR = "4472C4"   # 파란색
    EVEN_ROW_BG_COLOR = "F2F2F2"  # 연한 회색
    ODD_ROW_BG_COLOR = "FFFFFF"

    ALIGNMENTS = ('left', 'center', 'right')

    def __init__(self, workbook):
        self.workbook = workbook
        self._registered = set(
            s if isinstance(s, str) else s.name for s in workbook.named_styles
        )
        self._register(self._header_style())
        for even in (True, False):
            for align in self.ALIGNMENTS:
                self._register(self._data_style(even, align))

    def _register(self, style):
        if style.name not in self._registered:
            self.workbook.add_named_style(style)
            self._registered.add(style.name)

    @classmethod
    def _header_style(cls):
        return NamedStyle(
            name=HEADER_STYLE,
            font=Font(name='Calibri', size=11, bold=True, color="FFFFFF"),
            fill=PatternFill(start_color=cls.HEADER_BG_COLOR, end_color=cls.HEADER_BG_COLOR, fill_type='solid'),
            alignment=Alignment(horizontal='center', vertical='center'),
            border=Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN),
        )

    @classmethod
    def _data_style(cls, even, align):
        color = cls.EVEN_ROW_BG_COLOR if even else cls.ODD_ROW_BG_COLOR
        return NamedStyle(
            name=cls.data_style_name(even, align),
            font=Font(name='Calibri', size=10),
            fill=PatternFill(start_color=color, end_color=color, fill_type='solid'),
            alignment=Alignment(horizontal=align, vertical='center'),
            border=Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN),
        )

    @staticmethod
    def data_style_name(even, align):
        return f"csb_{'even' if even else 'odd'}_{align}"

    def apply_header_style(self, cell):
        cell.style = HEADER_STYLE

    def apply_data_style(self, cell, is_even_row=False, align='left'):
        """
        데이터 셀 스타일 적용

        Args:
            cell: openpyxl Cell 객체
            is_even_row: 짝수 행 여부 (배경색 번갈아가며)
            align: 'left', 'center', 'right'
        """
        if align not in self.ALIGNMENTS:
            align = 'left'
        cell.style = self.data_style_name(is_even_row, align)

    @staticmethod
    def column_alignment(column_name) -> str:
        """컬럼 이름으로 정렬 방식 결정 (시각과 숫자는 오른쪽)"""
        name = str(column_name or '')
        if name == 'timestamp' or name.endswith('_at') or name in ('count', 'value'):
            return 'right'
        return 'left'
