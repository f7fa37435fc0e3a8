#!/usr/bin/env python3
"""
Clickstream 이벤트 코드 정의

STB가 보내는 2자리 16진수 이벤트 코드와 카테고리(표시 이름, 진단 여부) 매핑.
테이블은 고정되어 있으며, 목록에 없는 코드는 디코딩 실패로 처리한다.
"""

from enum import Enum
from typing import Dict, List, Optional, Union


class Category(str, Enum):
    """이벤트 카테고리 (값은 2자리 16진수 코드)"""

    AD_DISPLAY = "41"
    BUTTON_CONFIG = "42"
    CHANNEL_CHANGE_VERBOSE = "43"
    CHANNEL_CHANGE_BRIEF = "63"
    PROGRAM_EVENT = "45"
    FAVORITE = "46"
    VOD_CATEGORY = "47"
    HIGHLIGHT = "48"
    INFO_SCREEN = "49"
    KEY_PRESS = "4B"
    LOCK = "4C"
    MISSING = "4D"
    OPTION = "4F"
    PULSE = "50"
    RESET = "52"
    STATE_CHANGE = "53"
    TURBO_KEY = "54"
    UNIT_IDENT = "55"
    VIDEO_PLAYBACK_SESSION = "56"
    STATUS = "58"
    MENU_CONFIG = "5A"


class EventCodeDefinition:
    """이벤트 코드 정의 클래스"""

    def __init__(self, category: Category, letter: str, name: str, diagnostic: bool = False):
        """
        Args:
            category: 카테고리 (예: Category.AD_DISPLAY)
            letter: 코드의 ASCII 문자 (예: 'A' = 0x41)
            name: 출력용 표시 이름 (예: 'Ad Display')
            diagnostic: 진단용 이벤트 여부 (-S 옵션으로 버퍼에서 제외 가능)
        """
        self.category = category
        self.letter = letter
        self.name = name
        self.diagnostic = diagnostic

    @property
    def code(self) -> str:
        """2자리 16진수 코드"""
        return self.category.value

    @property
    def label(self) -> str:
        """문자와 이름을 합친 라벨 (예: '`A`Ad Display')"""
        return f"`{self.letter}`{self.name}"

    def __repr__(self) -> str:
        return f"EventCodeDefinition({self.code}, {self.name!r}, diagnostic={self.diagnostic})"


# 전체 이벤트 코드 정의
EVENT_CODE_DEFINITIONS: List[EventCodeDefinition] = [
    EventCodeDefinition(Category.AD_DISPLAY, "A", "Ad Display"),
    EventCodeDefinition(Category.BUTTON_CONFIG, "B", "Button Config", diagnostic=True),
    EventCodeDefinition(Category.CHANNEL_CHANGE_VERBOSE, "C", "Channel Change (verbose)"),
    EventCodeDefinition(Category.CHANNEL_CHANGE_BRIEF, "c", "Channel Change (brief)"),
    EventCodeDefinition(Category.PROGRAM_EVENT, "E", "Program Event"),
    EventCodeDefinition(Category.FAVORITE, "F", "Favorite"),
    EventCodeDefinition(Category.VOD_CATEGORY, "G", "VOD Category"),
    EventCodeDefinition(Category.HIGHLIGHT, "H", "Highlight"),
    EventCodeDefinition(Category.INFO_SCREEN, "I", "Info Screen"),
    EventCodeDefinition(Category.KEY_PRESS, "K", "Key Press"),
    EventCodeDefinition(Category.LOCK, "L", "Lock"),
    EventCodeDefinition(Category.MISSING, "M", "Missing"),
    EventCodeDefinition(Category.OPTION, "O", "Option"),
    EventCodeDefinition(Category.PULSE, "P", "Pulse"),
    EventCodeDefinition(Category.RESET, "R", "Reset"),
    EventCodeDefinition(Category.STATE_CHANGE, "S", "State Change"),
    EventCodeDefinition(Category.TURBO_KEY, "T", "Turbo Key"),
    EventCodeDefinition(Category.UNIT_IDENT, "U", "Unit Ident.", diagnostic=True),
    EventCodeDefinition(Category.VIDEO_PLAYBACK_SESSION, "V", "Video Playback Session (non- OCAP)"),
    EventCodeDefinition(Category.STATUS, "X", "Status", diagnostic=True),
    EventCodeDefinition(Category.MENU_CONFIG, "Z", "Menu Config.", diagnostic=True),
]


# 조회용 딕셔너리 생성
EVENT_BY_CODE: Dict[str, EventCodeDefinition] = {d.code: d for d in EVENT_CODE_DEFINITIONS}
EVENT_BY_CATEGORY: Dict[Category, EventCodeDefinition] = {d.category: d for d in EVENT_CODE_DEFINITIONS}

DIAGNOSTIC_CATEGORIES = frozenset(d.category for d in EVENT_CODE_DEFINITIONS if d.diagnostic)


def get_event_definition(identifier: Union[Category, str]) -> Optional[EventCodeDefinition]:
    """
    이벤트 코드 정의 조회

    Args:
        identifier: Category 또는 2자리 16진수 코드 (대문자, 정확히 일치)

    Returns:
        EventCodeDefinition 객체 또는 None
    """
    if isinstance(identifier, Category):
        return EVENT_BY_CATEGORY.get(identifier)
    if isinstance(identifier, str):
        return EVENT_BY_CODE.get(identifier)
    return None


def is_diagnostic(category: Category) -> bool:
    """진단용 카테고리 여부"""
    return category in DIAGNOSTIC_CATEGORIES


if __name__ == "__main__":
    print("=" * 60)
    print("Clickstream 이벤트 코드 목록")
    print("=" * 60)
    for d in EVENT_CODE_DEFINITIONS:
        flag = " (diagnostic)" if d.diagnostic else ""
        print(f"{d.code}  {d.label:<45s}{flag}")
    print("=" * 60)
    print(f"총 {len(EVENT_CODE_DEFINITIONS)}개 코드, 진단용 {len(DIAGNOSTIC_CATEGORIES)}개")
