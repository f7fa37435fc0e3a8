from abc import ABC, abstractmethod
import logging
import queue
import threading
from typing import List, Optional

import pandas as pd

from .models import ErrorLogEntry, EventLogEntry, Package, RawLine
from .parser.errors import DecodeError

logger = logging.getLogger(__name__)

PACKAGE_COLUMNS = ['timestamp', 'deviceId', 'eventCode']


class DataSink(ABC):
    """데이터 출력 추상 인터페이스"""

    @abstractmethod
    def write(self, data):
        """데이터 한 건 쓰기"""
        pass

    @abstractmethod
    def get_result(self):
        """최종 결과 반환"""
        pass


class PackageSink(DataSink):
    """전송된 패키지를 실행 전체에 걸쳐 모으는 Sink (정렬은 출력 시점에)"""

    def __init__(self):
        self.rows: List[Package] = []

    def write(self, data: Package):
        self.rows.append(data)

    def sorted_packages(self) -> List[Package]:
        # 같은 초의 패키지는 입력 순서 유지 (stable sort)
        return sorted(self.rows, key=lambda p: p.timestamp)

    def get_result(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(p.timestamp, p.device_id, p.event_name) for p in self.sorted_packages()],
            columns=PACKAGE_COLUMNS,
        )

    def __len__(self):
        return len(self.rows)


class ErrorSink(DataSink):
    """줄 단위 에러를 발생 순서대로 기록"""

    def __init__(self):
        self.rows: List[ErrorLogEntry] = []

    def write(self, data: ErrorLogEntry):
        self.rows.append(data)

    def record(self, raw: RawLine, error: DecodeError):
        self.write(ErrorLogEntry(
            file_name=raw.file_name,
            line_no=raw.line_no,
            line=raw.text,
            error_kind=error.kind,
            message=error.message,
        ))

    def get_result(self) -> List[ErrorLogEntry]:
        return list(self.rows)

    def __len__(self):
        return len(self.rows)


_CLOSED = object()


class EventLogSink(DataSink):
    """
    VOD/전체 시퀀스 로그용 Sink

    파싱 루프(producer)가 write()로 큐에 넣고, 백그라운드 worker 하나가
    큐를 비우면서 리스트에 추가한다. close()는 종료 신호를 넣고 worker가
    끝날 때까지 기다리므로, close() 이후에만 get_result()를 읽을 수 있다.
    """

    def __init__(self):
        self._queue: "queue.Queue" = queue.Queue()
        self._entries: List[EventLogEntry] = []
        self._closed = False
        self._worker = threading.Thread(target=self._drain, name="event-log-worker", daemon=True)
        self._worker.start()

    def _drain(self):
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            self._entries.append(item)

    def write(self, data: EventLogEntry):
        if self._closed:
            raise RuntimeError("EventLogSink가 이미 닫혔습니다.")
        self._queue.put(data)

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._queue.put(_CLOSED)
        self._worker.join()

    @property
    def closed(self) -> bool:
        return self._closed

    def get_result(self) -> List[EventLogEntry]:
        if not self._closed:
            raise RuntimeError("close()로 worker를 종료한 뒤에 결과를 읽어야 합니다.")
        return sorted(self._entries, key=lambda e: e.timestamp)


class RunContext:
    """
    한 번의 실행 동안 수집되는 상태 묶음

    orchestrator가 생성해서 processor에 넘기고, 실행이 끝나면 close()로
    event log worker를 정리한 뒤 각 sink의 결과를 읽는다.
    """

    def __init__(self, event_log_enabled: bool = False):
        self.packages = PackageSink()
        self.errors = ErrorSink()
        self.event_log: Optional[EventLogSink] = EventLogSink() if event_log_enabled else None

    def close(self):
        if self.event_log is not None:
            self.event_log.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
