"""
Parser 패키지

Clickstream 로그 한 줄 디코딩 및 이벤트 분류 기능 제공
"""

from .event_decoder import (
    ClickstreamDecoder,
    convert_gps_timestamp,
    GPS_EPOCH_OFFSET,
    DEFAULT_RECEIVED,
    ZERO_TIMESTAMP,
)
from .classifier import EventClassifier, Classification, payload_byte_as_ascii
from .errors import (
    DecodeError,
    MalformedLine,
    UnknownEventCode,
    FutureTimestamp,
    DecodeFault,
)

__all__ = [
    'ClickstreamDecoder',
    'convert_gps_timestamp',
    'GPS_EPOCH_OFFSET',
    'DEFAULT_RECEIVED',
    'ZERO_TIMESTAMP',
    'EventClassifier',
    'Classification',
    'payload_byte_as_ascii',
    'DecodeError',
    'MalformedLine',
    'UnknownEventCode',
    'FutureTimestamp',
    'DecodeFault',
]
