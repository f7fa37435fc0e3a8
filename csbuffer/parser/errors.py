"""
디코딩 에러 정의

모든 에러는 줄 단위로 처리되며 실행을 중단시키지 않는다.
processor가 잡아서 ErrorSink에 기록한 뒤 다음 줄로 넘어간다.
"""

from typing import Optional


class DecodeError(Exception):
    """한 줄 디코딩 실패의 공통 부모 클래스"""

    kind = "DecodeError"

    def __init__(self, message: str, event=None):
        super().__init__(message)
        self.message = message
        # FutureTimestamp처럼 필드는 해석되었지만 거부된 경우 로깅용으로 보관
        self.event = event

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class MalformedLine(DecodeError):
    """토큰 개수가 2개 또는 3개가 아님"""

    kind = "MalformedLine"


class UnknownEventCode(DecodeError):
    """이벤트 코드가 고정 테이블에 없음"""

    kind = "UnknownEventCode"

    def __init__(self, code: str):
        super().__init__(f"Unknown Clickstream Code {code!r}")
        self.code = code


class FutureTimestamp(DecodeError):
    """디코딩된 시각이 현재 시각보다 이후"""

    kind = "FutureTimestamp"


class DecodeFault(DecodeError):
    """payload가 너무 짧거나 고정 오프셋을 읽을 수 없음"""

    kind = "DecodeFault"

    def __init__(self, message: str, payload: Optional[str] = None):
        super().__init__(message)
        self.payload = payload
