import logging

from tqdm import tqdm

from .parser.classifier import EventClassifier
from .parser.errors import DecodeError

logger = logging.getLogger(__name__)


class ClickstreamProcessor:
    """ 입력 줄 단위로 디코딩 -> 분류 -> 버퍼 시뮬레이션 """

    def __init__(self, simulator, classifier=None, vod_log=False, sequence_log=False,
                 max_lines=None, show_progress=True):

        if max_lines is not None and max_lines <= 0:
            raise ValueError("max_lines는 0보다 커야합니다.")

        self.simulator = simulator
        self.classifier = classifier or EventClassifier()
        # VOD 로그가 켜져 있으면 전체 시퀀스 로그보다 우선
        self.vod_log = vod_log
        self.sequence_log = sequence_log and not vod_log
        self.max_lines = max_lines
        self.show_progress = show_progress

    @property
    def event_log_enabled(self):
        return self.vod_log or self.sequence_log

    @property
    def packaging_enabled(self):
        # 전체 시퀀스 로그 모드에서는 버퍼/패키지 단계를 건너뜀
        return not self.sequence_log

    def process_stream(self, source, decoder, context):
        if self.event_log_enabled and context.event_log is None:
            raise ValueError("event log가 켜져 있으면 RunContext(event_log_enabled=True)가 필요합니다.")

        line_count = 0
        lines = iter(source)
        iterator = tqdm(lines, desc="Parsing lines", unit="line", disable=not self.show_progress)

        try:
            for raw in iterator:
                if self.max_lines and line_count >= self.max_lines:
                    logger.info("최대 줄 수(%d)에 도달했습니다.", self.max_lines)
                    break
                line_count += 1

                logger.debug("Got next line: %s", raw.text)
                try:
                    event = decoder.parse(raw.text)
                    self._log_event(event, raw, context)
                except DecodeError as e:
                    logger.debug("Parse error at %s:%d: %s", raw.file_name, raw.line_no, e)
                    context.errors.record(raw, e)
                    continue

                if not self.packaging_enabled:
                    continue

                package = self.simulator.observe(event)
                if package is not None:
                    context.packages.write(package)
        finally:
            iterator.close()
            # 중간에 멈춘 소스 제너레이터의 열린 파일 정리
            close = getattr(lines, "close", None)
            if close is not None:
                close()

        return line_count

    def _log_event(self, event, raw, context):
        if self.vod_log:
            classification = self.classifier.classify(event, require_vod_fields=True)
            if classification.vod:
                context.event_log.write(self.classifier.to_log_entry(event, classification, raw.mso))
        elif self.sequence_log:
            classification = self.classifier.classify(event)
            context.event_log.write(self.classifier.to_log_entry(event, classification, raw.mso))
