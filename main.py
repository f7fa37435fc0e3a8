#!/usr/bin/env python3

import sys
import argparse

import pytz
from pydantic import ValidationError

from csbuffer import __version__
from csbuffer.config import AnalyzerConfig
from csbuffer.logger_config import level_for, setup_logger
from csbuffer.runner import run_analysis


def build_arg_parser():
    parser = argparse.ArgumentParser(
        description=f"STB Clickstream Buffer Analyzer, ver. {__version__}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog="""
    예시:
        python main.py data/events_20160101_mso1.raw
        python main.py -d data/ -x raw -o packages -s xlsx
        python main.py -d data/ -P --timezone America/New_York
        python main.py -d data/ -VOD --output-dir reports/
    파일과 디렉토리를 모두 지정하면 디렉토리가 우선합니다.
            """
    )
    parser.add_argument('input', nargs='?', default=None, help='입력 파일 경로 (-f 와 동일)')
    parser.add_argument('-f', dest='input_file', default=None, help='처리할 입력 파일')
    parser.add_argument('-d', dest='input_dir', default=None, help='입력 파일 디렉토리 (재귀 탐색)')
    parser.add_argument('-x', dest='extension', default='raw', help='입력 파일 확장자: raw, cs [기본값: raw]')
    parser.add_argument('-t', dest='diagnostics', action='store_true', help='진단 메시지 출력 (DEBUG)')
    parser.add_argument('-s', dest='output_format', default='csv', choices=['csv', 'json', 'xlsx'],
                        help='패키지 파일 출력 형식 [기본값: csv]')
    parser.add_argument('-o', dest='output_name', default='output', help='패키지 파일 이름 [기본값: output]')
    parser.add_argument('-c', dest='concurrency', type=int, default=100,
                        help='동시 처리 파일 수 (현재는 순차 처리) [기본값: 100]')
    parser.add_argument('-v', dest='verbose', action='store_true', help='처리 과정 출력 (INFO)')
    parser.add_argument('-S', dest='suppress_diagnostics', action='store_true',
                        help='진단용 이벤트를 버퍼 계산에서 제외')
    parser.add_argument('-P', dest='primetime_only', action='store_true', help='Primetime: 20시~23시 이벤트만')
    parser.add_argument('-PC', dest='cumulative_primetime', action='store_true',
                        help='누적 Primetime: 날짜 무시, 20시~23시를 하나의 파일로')
    parser.add_argument('-VOD', dest='vod_log', action='store_true', help='VOD 활동 로그 생성')
    parser.add_argument('-L', dest='sequence_log', action='store_true', help='전체 이벤트 시퀀스 로그 생성')
    parser.add_argument('--output-dir', default='.', help='출력 디렉토리 [기본값: .]')
    parser.add_argument('--seed', type=int, default=None, help='초기 버퍼값 난수 시드 [기본값: 현재 시각]')
    parser.add_argument('--timezone', default='UTC', help='시간대 (primetime/날짜 기준) [기본값: UTC]')
    parser.add_argument('--watermark', type=int, default=750, help='버퍼 watermark (bytes) [기본값: 750]')
    parser.add_argument('--log-file', default=None, help='로그 파일 경로')
    return parser


def config_from_args(args):
    values = vars(args).copy()
    positional = values.pop('input')
    if not values['input_file'] and not values['input_dir']:
        values['input_file'] = positional
    return AnalyzerConfig(**values)


def print_summary(summary, timezone):
    tz_info = pytz.timezone(timezone)

    def fmt(ts):
        return ts.astimezone(tz_info).strftime('%Y-%m-%d %H:%M:%S %Z')

    print("\n" + "=" * 70)
    print("실행 결과")
    print("=" * 70)
    print(f"디바이스 수:        {summary.device_count:,}")
    print(f"전체 이벤트(줄) 수: {summary.total_lines:,}")
    print(f"전송 패키지 수:     {summary.total_packages:,}")
    if summary.first_package_at is not None:
        print(f"첫 패키지 전송:     {fmt(summary.first_package_at)}")
        print(f"마지막 패키지 전송: {fmt(summary.last_package_at)}")
    else:
        print("전송된 패키지가 없습니다.")
    print(f"에러 항목 수:       {summary.error_count:,}")
    print(f"집계 버킷 수:       {summary.bucket_count:,}")
    if summary.max_per_second_at is not None:
        print(f"초당 최대:          {summary.max_per_second} ({fmt(summary.max_per_second_at)})")
    print(f"초당 평균:          {summary.average_per_second}")
    print(f"처리 파일 수:       {summary.files_processed} ({summary.elapsed_seconds:.2f}초)")
    if summary.skipped_files:
        print(f"열지 못한 파일:     {len(summary.skipped_files)}개")
        for path in summary.skipped_files:
            print(f"  - {path}")


def main():
    parser = build_arg_parser()
    args = parser.parse_args()

    try:
        config = config_from_args(args)
    except ValidationError as e:
        print(f"오류: 잘못된 설정입니다.\n{e}")
        sys.exit(1)

    if not config.has_input:
        print("입력 파일 또는 작업 디렉토리를 지정해야 합니다.\n")
        parser.print_help()
        sys.exit(2)

    setup_logger(level=level_for(config.diagnostics, config.verbose), log_file=config.log_file)

    # 시작 메시지
    print("=" * 70)
    print(f"STB Clickstream Buffer Analyzer {__version__}")
    print("=" * 70)
    print(f"입력: {config.input_dir or config.input_file}")
    print(f"Watermark: {config.watermark} bytes")
    print(f"집계 모드: {config.aggregation_mode.value}")
    print(f"출력 디렉토리: {config.output_dir}")
    print("=" * 70)

    try:
        summary = run_analysis(config)
    except ValueError as e:
        print(f"오류: {e}")
        sys.exit(1)

    if config.vod_log and summary.event_log_entries == 0:
        print("No VOD events")
    elif config.sequence_log and not config.vod_log and summary.event_log_entries == 0:
        print("No events")

    print_summary(summary, config.timezone)

    print("\n" + "=" * 70)
    print("완료!")
    print("=" * 70)
    for path in summary.artifacts:
        print(f"결과 파일: {path}")


if __name__ == "__main__":
    main()
