import random
from datetime import datetime, timezone

import pytest

from csbuffer.event_codes import Category
from csbuffer.models import ParsedEvent
from csbuffer.parser.event_decoder import DEFAULT_RECEIVED, GPS_EPOCH_OFFSET


# 테스트 기준 "현재 시각" (이후 시각은 FutureTimestamp)
FIXED_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FixedRng:
    """randrange()가 항상 같은 값을 돌려주는 난수 생성기 대역"""

    def __init__(self, value=0):
        self.value = value
        self.calls = []

    def randrange(self, stop):
        self.calls.append(stop)
        return self.value


def build_event_hex(code, when, size_bytes=5, filler="00"):
    """
    이벤트 16진수 문자열 생성

    Args:
        code: 2자리 이벤트 코드
        when: tz-aware datetime
        size_bytes: 전체 크기 (코드+시각 5바이트 포함)
        filler: 나머지 바이트를 채울 16진수 2자리
    """
    gps = int(when.timestamp()) - GPS_EPOCH_OFFSET
    body = filler * (size_bytes - 5)
    return f"{code}{gps:08X}{body}"


def build_event(device_id="DEV1", category=Category.AD_DISPLAY, when=None, size_bytes=5):
    """디코딩을 거치지 않은 ParsedEvent 생성"""
    when = when or datetime(2016, 1, 1, 20, 0, 0, tzinfo=timezone.utc)
    return ParsedEvent(
        timestamp=when,
        device_id=device_id,
        category=category,
        payload_hex=build_event_hex(category.value, when, max(size_bytes, 5)),
        size_bytes=size_bytes,
        received=DEFAULT_RECEIVED,
    )


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def event_hex():
    return build_event_hex


@pytest.fixture
def make_event():
    return build_event


@pytest.fixture
def zero_rng():
    return FixedRng(0)


@pytest.fixture
def seeded_rng():
    return random.Random(42)


@pytest.fixture
def write_raw(tmp_path):
    """tmp_path 아래에 입력 파일을 만드는 팩토리"""

    def _write(name, lines, subdir=None):
        directory = tmp_path / "input"
        if subdir:
            directory = directory / subdir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return path

    return _write
