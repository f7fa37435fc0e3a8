"""
Clickstream Event Decoder

입력 한 줄을 ParsedEvent로 변환하는 디코더

줄 형식:
    [<received>] <deviceId> <eventHex>

eventHex 구조:
    [0:2]   이벤트 코드 (2 hex)
    [2:10]  GPS 기준 초 (8 hex)
    [10:]   나머지 payload (opaque)
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional

from ..event_codes import EVENT_BY_CODE
from ..models import ParsedEvent
from .errors import DecodeFault, FutureTimestamp, MalformedLine, UnknownEventCode

logger = logging.getLogger(__name__)

# GPS epoch(1980-01-06) -> Unix epoch 보정값 (초)
GPS_EPOCH_OFFSET = 315964800

# received 토큰이 없는 2-토큰 형식에서 사용하는 값
DEFAULT_RECEIVED = "1900-01-01 00:00:00"

# 타임스탬프 16진수 해석 실패 시 사용하는 값 (GPS 카운트 0)
ZERO_TIMESTAMP = datetime.fromtimestamp(GPS_EPOCH_OFFSET, tz=timezone.utc)

FIELD_DELIMITER = " "
CODE_LEN = 2
TIMESTAMP_LEN = 8
HEADER_LEN = CODE_LEN + TIMESTAMP_LEN

_HEX_TIMESTAMP = re.compile(r"[0-9A-Fa-f]{%d}" % TIMESTAMP_LEN)


def convert_gps_timestamp(hex_value: str) -> Optional[datetime]:
    """
    8자리 16진수 GPS 초를 UTC datetime으로 변환

    Args:
        hex_value: GPS epoch 기준 경과 초 (16진수 문자열)

    Returns:
        datetime | None: UTC 시각, 16진수가 아니면 None
    """
    if not _HEX_TIMESTAMP.fullmatch(hex_value):
        return None
    return datetime.fromtimestamp(int(hex_value, 16) + GPS_EPOCH_OFFSET, tz=timezone.utc)


class ClickstreamDecoder:
    """
    Clickstream 로그 한 줄을 디코딩

    실패는 DecodeError 하위 예외로 전달되며, 호출자(processor)가
    에러 로그에 기록하고 다음 줄로 진행한다.
    """

    def __init__(self, now: Optional[datetime] = None):
        """
        Args:
            now: 미래 시각 판정 기준. None이면 줄마다 현재 시각 사용
        """
        self._now = now

    @property
    def now(self) -> datetime:
        return self._now if self._now is not None else datetime.now(timezone.utc)

    def parse(self, line: str) -> ParsedEvent:
        """
        한 줄을 파싱하여 ParsedEvent 반환

        Args:
            line: 줄바꿈이 제거된 입력 한 줄

        Returns:
            ParsedEvent

        Raises:
            MalformedLine: 토큰 개수가 2 또는 3이 아님
            DecodeFault: eventHex가 10자 미만
            UnknownEventCode: 테이블에 없는 이벤트 코드
            FutureTimestamp: 현재 시각 이후의 이벤트 (e.event에 파싱 결과 포함)
        """
        tokens = line.split(FIELD_DELIMITER)

        if len(tokens) == 2:
            received = DEFAULT_RECEIVED
            device_id, payload = tokens
        elif len(tokens) == 3:
            received, device_id, payload = tokens
        else:
            raise MalformedLine(f"Wrong line format: expected 2 or 3 tokens, got {len(tokens)}")

        if len(payload) < HEADER_LEN:
            raise DecodeFault(
                f"Event payload too short: {len(payload)} hex chars, need at least {HEADER_LEN}",
                payload=payload,
            )

        code = payload[:CODE_LEN]
        definition = EVENT_BY_CODE.get(code)
        if definition is None:
            raise UnknownEventCode(code)

        timestamp = convert_gps_timestamp(payload[CODE_LEN:HEADER_LEN])
        degraded = timestamp is None
        if degraded:
            logger.warning(
                "Unparseable timestamp field %r for device %s, using zero timestamp",
                payload[CODE_LEN:HEADER_LEN], device_id,
            )
            timestamp = ZERO_TIMESTAMP

        event = ParsedEvent(
            timestamp=timestamp,
            device_id=device_id,
            category=definition.category,
            payload_hex=payload,
            size_bytes=len(payload) // 2,
            received=received,
            timestamp_degraded=degraded,
        )

        logger.debug(
            "STB Id: %s\teventCode: %s\ttimeStamp: %s\teventSize: %d",
            event.device_id, definition.name, event.timestamp, event.size_bytes,
        )

        if event.timestamp > self.now:
            raise FutureTimestamp(f"Wrong date: {event.timestamp.isoformat()}", event=event)

        return event
