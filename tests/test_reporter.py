import csv
from pathlib import Path

from data_classes.data_classes import CSV_HEADER, MetricRecord
from pipeline.reporter import CsvReporter, summarize


def _read(path: Path) -> list[list[str]]:
    with path.open(newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


def test_header_and_rows(tmp_path: Path) -> None:
    path = tmp_path / "out" / "data.csv"
    with CsvReporter(str(path)) as reporter:
        reporter.write(MetricRecord("FAST", 1.23456789, 120, "BRIEF", 0.5))
        reporter.write(MetricRecord("FAST", 2.0, 118, "BRIEF", 0.75, matches=97, t_match=0.125))

    rows = _read(path)
    assert rows[0] == ["detect T", "t_detect", "keypoints", "descr T", "t_extract", "matches", "t_match"]
    assert rows[1] == ["FAST", "1.23457", "120", "BRIEF", "0.5", "0", "0"]
    assert rows[2] == ["FAST", "2", "118", "BRIEF", "0.75", "97", "0.125"]
    assert reporter.rows_written == 2


def test_rows_are_flushed_immediately(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    reporter = CsvReporter(str(path)).open()
    reporter.write(MetricRecord("ORB", 3.0, 10, "ORB", 1.0))
    assert len(_read(path)) == 2
    reporter.close()


def test_summarize_groups_by_pair(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    with CsvReporter(str(path)) as reporter:
        reporter.write(MetricRecord("FAST", 1.0, 100, "BRIEF", 2.0))
        reporter.write(MetricRecord("FAST", 3.0, 110, "BRIEF", 4.0, matches=80, t_match=1.0))
        reporter.write(MetricRecord("ORB", 5.0, 50, "ORB", 6.0))

    summary = summarize(str(path))
    assert list(summary.columns) == ["detect T", "descr T", "frames"] + list(CSV_HEADER[1:3]) + list(CSV_HEADER[4:])
    fast = summary[summary["detect T"] == "FAST"].iloc[0]
    assert fast["frames"] == 2
    assert fast["t_detect"] == 2.0
    assert fast["keypoints"] == 105
    assert fast["matches"] == 40
    assert summary[summary["detect T"] == "ORB"].iloc[0]["frames"] == 1
