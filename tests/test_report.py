"""Tests for batch report building and persistence."""
import json
import pytest
from pathlib import Path
from unittest.mock import patch

from pydantic import ValidationError

from vidbatch.core.config import BatchConfig
from vidbatch.core.errors import ReportWriteError
from vidbatch.core.models import InputFile, JobResult
from vidbatch.services.report import (
    BatchReport,
    ReportWriter,
    build_report,
    load_report,
)

from .fixtures import report_files


@pytest.fixture
def config(tmp_path: Path) -> BatchConfig:
    return BatchConfig(directory=tmp_path, delay=0.25, frame_skip=15)


@pytest.fixture
def results(tmp_path: Path) -> list[JobResult]:
    def item(name: str) -> InputFile:
        return InputFile(path=tmp_path / name, size=10, relative_path=Path(name))

    return [
        JobResult.succeeded(item("a.mp4"), tmp_path / "a.txt", 12.345678901234),
        JobResult.skipped(item("b.mp4"), tmp_path / "b.txt"),
        JobResult.failed(item("c.mp4"), "exit code 1", "bad header"),
    ]


class TestBuildReport:
    """Tests for report construction."""

    def test_summary(self, results, config):
        report = build_report(results, config, total_duration=20.5)

        s = report.summary
        assert (s.total_files, s.successful, s.skipped, s.errors) == (3, 1, 1, 1)
        assert s.total_duration == 20.5

    def test_results_preserve_order(self, results, config):
        report = build_report(results, config, total_duration=1.0)

        assert [r.file for r in report.results] == ["a.mp4", "b.mp4", "c.mp4"]
        assert [r.status for r in report.results] == ["success", "skipped", "error"]

    def test_timestamp_is_iso(self, results, config):
        report = build_report(results, config, total_duration=1.0)

        assert report.timestamp.endswith("Z")
        assert "T" in report.timestamp

    def test_counts_must_add_up(self):
        """Test the model rejects an inconsistent summary."""
        with pytest.raises(ValidationError):
            BatchReport(
                timestamp="2024-01-01T00:00:00.000Z",
                directory="/v",
                summary={
                    "totalFiles": 2, "successful": 1, "skipped": 0,
                    "errors": 0, "totalDuration": 1.0,
                },
                results=[],
            )


class TestReportWriter:
    """Tests for ReportWriter."""

    def test_write_json_shape(self, results, config, tmp_path):
        """Test the written file has the documented keys."""
        path = ReportWriter(tmp_path).write(results, config, total_duration=20.5)

        assert path.parent == tmp_path
        assert path.name.startswith("batch-analysis-report-")
        assert path.suffix == ".json"

        data = json.loads(path.read_text())
        assert set(data) == {"timestamp", "directory", "options", "summary", "results"}
        assert data["directory"] == str(config.directory)
        assert data["options"]["frameSkip"] == 15
        assert data["options"]["delay"] == 0.25
        assert data["summary"] == {
            "totalFiles": 3,
            "successful": 1,
            "skipped": 1,
            "errors": 1,
            "totalDuration": 20.5,
        }
        for entry in data["results"]:
            assert set(entry) == {"file", "status", "duration", "outputPath", "error"}

    def test_result_entries(self, results, config, tmp_path):
        path = ReportWriter(tmp_path).write(results, config, total_duration=1.0)
        success, skipped, error = json.loads(path.read_text())["results"]

        assert success["duration"] == 12.345678901234
        assert success["outputPath"] == str(tmp_path / "a.txt")
        assert success["error"] is None
        assert skipped["duration"] is None
        assert error["error"] == "exit code 1"
        assert error["outputPath"] is None
        assert error["duration"] is None

    def test_round_trip_through_loader(self, results, config, tmp_path):
        path = ReportWriter(tmp_path).write(results, config, total_duration=3.0)

        report = load_report(path)

        assert report.summary.total_files == 3
        assert report.results[0].output_path == str(tmp_path / "a.txt")
        assert report.results[2].output_path is None

    def test_repeated_writes_never_collide(self, results, config, tmp_path):
        """Test two reports in the same instant get distinct files."""
        writer = ReportWriter(tmp_path)

        with patch("vidbatch.services.report.time.time_ns", return_value=123):
            first = writer.write(results, config, total_duration=1.0)
            second = writer.write(results, config, total_duration=2.0)

        assert first != second
        assert len(report_files(tmp_path)) == 2
        assert json.loads(first.read_text())["summary"]["totalDuration"] == 1.0

    def test_write_failure(self, results, config, tmp_path):
        """Test an unwritable directory raises ReportWriteError."""
        writer = ReportWriter(tmp_path / "missing")

        with pytest.raises(ReportWriteError) as exc_info:
            writer.write(results, config, total_duration=1.0)

        assert isinstance(exc_info.value.cause, OSError)
