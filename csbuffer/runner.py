"""
Run orchestration

입력 파일 목록 결정 -> 줄 단위 파이프라인 -> 집계 -> 출력 파일 작성까지
한 번의 배치 실행을 담당한다. 실행 중 상태는 모두 RunContext에 모이며
전역 상태는 사용하지 않는다.
"""

from __future__ import annotations

import logging
import random
import time
from datetime import datetime
from typing import Optional

from .config import AnalyzerConfig
from .line_source import RawLogSource, resolve_input_files
from .models import RunSummary
from .parser.event_decoder import ClickstreamDecoder
from .processor import ClickstreamProcessor
from .report_writer import ReportWriter
from .simulator import BufferSimulator
from .sink import RunContext
from .transformer.time_window import EventsPerSecondAggregator

logger = logging.getLogger(__name__)


def run_analysis(
    config: AnalyzerConfig,
    *,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
    show_progress: bool = True,
) -> RunSummary:
    """
    설정에 따라 전체 분석을 실행하고 요약 반환

    Args:
        config: 실행 설정
        now: 미래 시각 판정 기준 (None이면 현재 시각)
        rng: 초기 버퍼값 난수 생성기 (None이면 config.seed 사용)
        show_progress: tqdm 진행 표시 여부

    Raises:
        ValueError: 입력 파일/디렉토리가 모두 지정되지 않음
    """
    run_started = datetime.now()
    t0 = time.perf_counter()

    files = resolve_input_files(config.input_file, config.input_dir, config.extension)
    logger.info("concurrency=%d accepted; files are processed sequentially", config.concurrency)

    source = RawLogSource(files)
    decoder = ClickstreamDecoder(now=now)
    simulator = BufferSimulator(
        watermark=config.watermark,
        rng=rng,
        seed=config.seed,
        suppress_diagnostics=config.suppress_diagnostics,
    )
    processor = ClickstreamProcessor(
        simulator,
        vod_log=config.vod_log,
        sequence_log=config.sequence_log,
        show_progress=show_progress,
    )
    aggregator = EventsPerSecondAggregator(config.aggregation_mode, config.timezone)
    writer = ReportWriter(config.output_dir, config.timezone)

    with RunContext(event_log_enabled=processor.event_log_enabled) as context:
        processor.process_stream(source, decoder, context)
    # 여기서부터 event log worker는 종료된 상태

    packages = context.packages.sorted_packages()
    entries = context.event_log.get_result() if context.event_log is not None else []

    summary = RunSummary(
        device_count=simulator.device_count,
        total_lines=source.total_lines,
        total_packages=len(packages),
        error_count=len(context.errors),
        event_log_entries=len(entries),
        files_processed=source.files_processed,
        skipped_files=list(source.skipped_files),
    )
    if packages:
        summary.first_package_at = packages[0].timestamp
        summary.last_package_at = packages[-1].timestamp

    if processor.packaging_enabled:
        points = aggregator.aggregate_packages(packages)
        if not points:
            logger.warning("No events were found for the %s window", aggregator.mode.value)
        stats, written = writer.write_events_per_second(points)
        summary.artifacts.extend(str(p) for p in written)
    else:
        points = aggregator.aggregate(e.timestamp for e in entries)
        stats = aggregator.summarize(points)

    summary.bucket_count = stats.bucket_count
    summary.average_per_second = stats.average
    if stats.max_point is not None:
        summary.max_per_second = stats.max_point.count
        summary.max_per_second_at = stats.max_point.timestamp

    if processor.vod_log:
        summary.artifacts.extend(str(p) for p in writer.write_vod_log(entries))
    elif processor.sequence_log:
        events_path = writer.write_events_log(entries, run_started)
        if events_path is not None:
            summary.artifacts.append(str(events_path))

    summary.artifacts.append(str(writer.write_error_log(context.errors.get_result())))

    if processor.packaging_enabled:
        package_path = writer.write_packages(
            packages,
            output_name=config.output_name,
            output_format=config.output_format,
            summary=summary,
        )
        summary.artifacts.insert(0, str(package_path))

    summary.elapsed_seconds = time.perf_counter() - t0
    return summary
