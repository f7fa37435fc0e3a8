import json
from datetime import datetime, timedelta, timezone

import pandas as pd
import pytest
from openpyxl import load_workbook

from csbuffer.event_codes import Category
from csbuffer.models import ErrorLogEntry, EventLogEntry, Package, RunSummary, TimePoint
from csbuffer.report_writer import ReportWriter

T0 = datetime(2016, 1, 1, 23, 59, 58, tzinfo=timezone.utc)


@pytest.fixture
def packages():
    return [
        Package(T0, "DEV1", Category.AD_DISPLAY),
        Package(T0 + timedelta(seconds=1), "DEV2", Category.VOD_CATEGORY),
        Package(T0 + timedelta(seconds=3), "DEV1", Category.KEY_PRESS),
    ]


@pytest.fixture
def writer(tmp_path):
    return ReportWriter(tmp_path / "out")


class TestPackages:
    """패키지 파일 (csv/json/xlsx)"""

    def test_csv(self, writer, packages):
        path = writer.write_packages(packages, output_name="output", output_format="csv")

        df = pd.read_csv(path)
        assert path.name == "output.csv"
        assert list(df.columns) == ["timestamp", "deviceId", "eventCode"]
        assert df["timestamp"].tolist() == [
            "2016-01-01 23:59:58", "2016-01-01 23:59:59", "2016-01-02 00:00:01",
        ]
        assert df["eventCode"].tolist() == ["Ad Display", "VOD Category", "Key Press"]

    def test_csv_in_timezone(self, tmp_path, packages):
        path = ReportWriter(tmp_path, "America/New_York").write_packages(packages)

        assert pd.read_csv(path)["timestamp"].iloc[0] == "2016-01-01 18:59:58"

    def test_json(self, writer, packages):
        path = writer.write_packages(packages, output_name="pkg", output_format="json")

        with open(path, encoding="utf-8") as f:
            records = json.load(f)
        assert path.suffix == ".json"
        assert records[0] == {"timestamp": "2016-01-01 23:59:58", "deviceId": "DEV1", "eventCode": "Ad Display"}
        assert len(records) == 3

    def test_xlsx_with_summary(self, writer, packages):
        summary = RunSummary(device_count=2, total_packages=3, first_package_at=T0)

        path = writer.write_packages(packages, output_name="pkg", output_format="xlsx", summary=summary)

        wb = load_workbook(path)
        assert wb.sheetnames == ["Summary", "Packages"]
        ws = wb["Packages"]
        assert [c.value for c in ws[1]] == ["timestamp", "deviceId", "eventCode"]
        assert ws.max_row == 4
        assert ws.cell(row=2, column=1).value == datetime(2016, 1, 1, 23, 59, 58)
        metrics = {row[0]: row[1] for row in wb["Summary"].iter_rows(min_row=2, values_only=True)}
        assert metrics["devices"] == 2
        assert metrics["first_package_at"] == "2016-01-01 23:59:58"
        wb.close()

    def test_empty_csv(self, writer):
        path = writer.write_packages([])
        assert len(pd.read_csv(path)) == 0

    def test_unknown_format(self, writer, packages):
        with pytest.raises(ValueError):
            writer.write_packages(packages, output_format="parquet")


class TestEventsPerSecond:

    def test_rotates_and_summarizes(self, writer):
        points = [
            TimePoint(T0, 2),
            TimePoint(T0 + timedelta(seconds=1), 5),
            TimePoint(T0 + timedelta(seconds=2), 2),
        ]

        stats, files = writer.write_events_per_second(points)

        assert [p.name for p in files] == ["eventsPerSecond-2016-01-01.csv", "eventsPerSecond-2016-01-02.csv"]
        assert stats.max_point == points[1]
        assert stats.average == 3
        day2 = pd.read_csv(files[1])
        assert day2.to_dict("records") == [{"timestamp": "2016-01-02 00:00:00", "count": 2}]

    def test_empty(self, writer):
        stats, files = writer.write_events_per_second([])
        assert files == []
        assert stats.bucket_count == 0


class TestSideLogs:

    def entries(self):
        return [
            EventLogEntry(T0, "1900-01-01 00:00:00", "DEV1", "VOD Category", "mso1"),
            EventLogEntry(T0 + timedelta(seconds=5), "r2", "DEV2", "Info Screen / Type V", "mso2"),
        ]

    def test_vod_log(self, writer):
        files = writer.write_vod_log(self.entries())

        assert [p.name for p in files] == ["vodLog-2016-01-01.csv", "vodLog-2016-01-02.csv"]
        first = pd.read_csv(files[0])
        assert list(first.columns) == ["timestamp", "received", "deviceId"]
        assert first["deviceId"].tolist() == ["DEV1"]

    def test_vod_log_empty(self, writer, tmp_path):
        assert writer.write_vod_log([]) == []

    def test_events_log(self, writer):
        path = writer.write_events_log(self.entries(), datetime(2024, 3, 4, 5, 6, 7))

        assert path.name == "eventsLog-20240304_050607.csv"
        df = pd.read_csv(path)
        assert list(df.columns) == ["timestamp", "received", "deviceId", "eventCode", "mso"]
        assert df["eventCode"].tolist() == ["VOD Category", "Info Screen / Type V"]
        assert df["mso"].tolist() == ["mso1", "mso2"]

    def test_events_log_empty(self, writer):
        assert writer.write_events_log([], datetime(2024, 1, 1)) is None


class TestErrorLog:

    def test_format(self, writer):
        errors = [ErrorLogEntry("a.raw", 7, "bad line", "MalformedLine", "Wrong line format")]

        path = writer.write_error_log(errors)

        assert path.name == "errorlog.txt"
        assert path.read_text(encoding="utf-8") == (
            "File: a.raw \t lineNo: 7\t Error:MalformedLine: Wrong line format\nEntry:[bad line]\n"
        )

    def test_always_written(self, writer):
        path = writer.write_error_log([])
        assert path.exists()
        assert path.read_text(encoding="utf-8") == ""


def test_summary_frame(writer):
    summary = RunSummary(device_count=4, skipped_files=["x.raw"])

    df = writer.summary_frame(summary)

    values = dict(zip(df["metric"], df["value"]))
    assert values["devices"] == 4
    assert values["first_package_at"] == ""
    assert json.loads(values["skipped_files"]) == ["x.raw"]
