"""
Event Classifier

디코딩된 이벤트의 진단 여부와 VOD 활동 여부를 판정하는 모듈
VOD 판정은 payload의 특정 바이트를 ASCII로 해석해서 마커와 비교한다.
"""

import binascii
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..event_codes import Category, get_event_definition, is_diagnostic
from ..models import EventLogEntry, ParsedEvent
from .errors import DecodeFault

VOD_MARKER = "V"

# 카테고리 -> (바이트 오프셋, 서브타입 접미사)
# None이면 payload와 무관하게 항상 VOD
VOD_RULES: Dict[Category, Optional[Tuple[int, str]]] = {
    Category.VOD_CATEGORY: None,
    Category.INFO_SCREEN: (5, " / Type V"),
    Category.VIDEO_PLAYBACK_SESSION: (13, " / Source V"),
}


def payload_byte_as_ascii(payload_hex: str, offset: int) -> Optional[str]:
    """
    payload의 offset 번째 바이트를 ASCII 문자로 변환

    Args:
        payload_hex: 이벤트 16진수 문자열 (코드 포함 전체)
        offset: 바이트 오프셋 (0-based, 문자 위치는 offset*2)

    Returns:
        str | None: 디코딩된 문자, 범위 밖이거나 16진수가 아니면 None
    """
    start = offset * 2
    chunk = payload_hex[start:start + 2]
    if len(chunk) != 2:
        return None
    try:
        return binascii.unhexlify(chunk).decode("latin-1")
    except (binascii.Error, ValueError):
        return None


@dataclass(frozen=True)
class Classification:
    """분류 결과"""
    diagnostic: bool
    vod: bool
    label: str               # 출력용 이름 (VOD 서브타입 접미사 포함)


class EventClassifier:
    """이벤트 카테고리 분류기"""

    def classify(self, event: ParsedEvent, require_vod_fields: bool = False) -> Classification:
        """
        이벤트 분류

        - VOD Category: 항상 VOD
        - Info Screen: 5번째 바이트가 'V'이면 VOD (" / Type V")
        - Video Playback Session: 13번째 바이트가 'V'이면 VOD (" / Source V")
        - 그 외: VOD 아님

        Args:
            event: 디코딩된 이벤트
            require_vod_fields: True이면 VOD 판정 바이트가 payload 밖일 때 DecodeFault

        Raises:
            DecodeFault: require_vod_fields이고 payload가 오프셋보다 짧음
        """
        name = get_event_definition(event.category).name
        diagnostic = is_diagnostic(event.category)

        if event.category not in VOD_RULES:
            return Classification(diagnostic=diagnostic, vod=False, label=name)

        rule = VOD_RULES[event.category]
        if rule is None:
            return Classification(diagnostic=diagnostic, vod=True, label=name)

        offset, suffix = rule
        if require_vod_fields and len(event.payload_hex) < (offset + 1) * 2:
            raise DecodeFault(
                f"Event payload too short for VOD field at byte {offset}: {len(event.payload_hex)} hex chars",
                payload=event.payload_hex,
            )
        if payload_byte_as_ascii(event.payload_hex, offset) == VOD_MARKER:
            return Classification(diagnostic=diagnostic, vod=True, label=name + suffix)
        return Classification(diagnostic=diagnostic, vod=False, label=name)

    def to_log_entry(self, event: ParsedEvent, classification: Classification, mso: str) -> EventLogEntry:
        """VOD/전체 시퀀스 로그용 엔트리 생성"""
        return EventLogEntry(
            timestamp=event.timestamp,
            received=event.received,
            device_id=event.device_id,
            event_name=classification.label,
            mso=mso,
        )
