"""
디바이스별 전송 버퍼 시뮬레이터

STB는 이벤트를 버퍼에 모았다가 크기가 watermark를 넘으면 한 번에 전송한다.
이 모듈은 디바이스마다 누적 바이트를 추적하면서 전송("패키지") 시점을 재구성한다.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Dict, Optional

from .event_codes import is_diagnostic
from .models import Package, ParsedEvent

logger = logging.getLogger(__name__)

# iGuide R31 버퍼 크기 (bytes)
WATERMARK = 750


class BufferSimulator:
    """
    디바이스별 버퍼 누적 및 flush 판정

    규칙:
    - 처음 보는 디바이스는 [0, watermark) 범위의 무작위 값으로 시작
      (관측 전에 이미 버퍼에 쌓여 있던 양을 모름)
    - 누적 + 이벤트 크기 > watermark 이면 패키지를 내보내고
      누적값을 해당 이벤트 크기로 재설정 (트리거 이벤트가 다음 버퍼의 시작)
    - 그 외에는 이벤트 크기만큼 누적
    """

    def __init__(
        self,
        *,
        watermark: int = WATERMARK,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        suppress_diagnostics: bool = False,
    ) -> None:
        """
        Args:
            watermark: 버퍼 임계값 (bytes)
            rng: 초기 버퍼값용 난수 생성기. 지정하면 seed는 무시
            seed: rng가 없을 때 사용할 시드. None이면 현재 시각(초)
            suppress_diagnostics: True면 진단용 이벤트를 버퍼에 넣지 않음
        """
        if watermark <= 0:
            raise ValueError("watermark는 0보다 커야합니다.")

        self.watermark = int(watermark)
        if rng is None:
            rng = random.Random(seed if seed is not None else int(time.time()))
        self._rng = rng
        self.suppress_diagnostics = suppress_diagnostics

        self._levels: Dict[str, int] = {}
        self.packages_sent = 0
        self.suppressed_events = 0

    # --- state ---

    @property
    def device_count(self) -> int:
        return len(self._levels)

    def buffer_level(self, device_id: str) -> Optional[int]:
        """현재 누적 바이트, 아직 보지 못한 디바이스면 None"""
        return self._levels.get(device_id)

    def prime(self, device_id: str, level: int) -> None:
        """디바이스의 초기 누적값을 직접 지정 (무작위 초기화 대신)"""
        if not 0 <= level < self.watermark:
            raise ValueError(f"level은 [0, {self.watermark}) 범위여야 합니다: {level}")
        self._levels[device_id] = int(level)

    def _get_or_create(self, device_id: str) -> int:
        level = self._levels.get(device_id)
        if level is None:
            level = self._rng.randrange(self.watermark)
            self._levels[device_id] = level
        return level

    # --- observation ---

    def observe(self, event: ParsedEvent) -> Optional[Package]:
        """
        이벤트 한 건을 버퍼에 반영

        Args:
            event: 디코딩된 이벤트

        Returns:
            Package | None: watermark를 넘었으면 전송된 패키지
        """
        level = self._get_or_create(event.device_id)
        logger.debug("Buff: %d\tWatermark: %d", level, self.watermark)

        if self.suppress_diagnostics and is_diagnostic(event.category):
            self.suppressed_events += 1
            logger.debug("Skipped: %s %s %s", event.timestamp, event.device_id, event.category.name)
            return None

        if level + event.size_bytes > self.watermark:
            package = Package(
                timestamp=event.timestamp,
                device_id=event.device_id,
                category=event.category,
            )
            self._levels[event.device_id] = event.size_bytes
            self.packages_sent += 1
            logger.debug("Sent package: %s, %s, %s", package.timestamp, package.device_id, package.event_name)
            return package

        self._levels[event.device_id] = level + event.size_bytes
        return None
