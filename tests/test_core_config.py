"""Tests for core configuration."""
import pytest
from pathlib import Path

from vidbatch.core.config import BatchConfig, parse_analyzer_command
from vidbatch.core.errors import StartupFatalError


class TestBatchConfig:
    """Tests for BatchConfig validation."""

    def test_defaults(self, tmp_path: Path):
        """Test default values."""
        config = BatchConfig(directory=tmp_path)

        assert config.directory == tmp_path.resolve()
        assert config.delay == 0.0
        assert config.frame_skip == 30
        assert config.force is False
        assert config.recursive is True
        assert config.extension == ".mp4"
        assert config.analyzer_command == ("video-analyzer",)
        assert config.slim is True
        assert config.sort is False
        assert config.max_buffer == 10 * 1024 * 1024

    def test_missing_directory(self, tmp_path: Path):
        """Test a missing target is a startup error."""
        with pytest.raises(StartupFatalError, match="Directory not found"):
            BatchConfig(directory=tmp_path / "nope")

    def test_not_a_directory(self, tmp_path: Path):
        """Test a file target is a startup error."""
        target = tmp_path / "clip.mp4"
        target.touch()

        with pytest.raises(StartupFatalError, match="Not a valid directory"):
            BatchConfig(directory=target)

    def test_startup_error_is_value_error(self, tmp_path: Path):
        with pytest.raises(ValueError):
            BatchConfig(directory=tmp_path / "nope")

    def test_negative_delay(self, tmp_path: Path):
        with pytest.raises(ValueError, match="Delay"):
            BatchConfig(directory=tmp_path, delay=-1)

    def test_zero_frame_skip(self, tmp_path: Path):
        with pytest.raises(ValueError, match="Frame skip"):
            BatchConfig(directory=tmp_path, frame_skip=0)

    def test_empty_analyzer(self, tmp_path: Path):
        with pytest.raises(ValueError, match="Analyzer"):
            BatchConfig(directory=tmp_path, analyzer_command=())

    @pytest.mark.parametrize("raw", ["mov", ".MOV", " .mov "])
    def test_extension_normalized(self, tmp_path: Path, raw):
        """Test extension gets a leading dot and is lowercased."""
        assert BatchConfig(directory=tmp_path, extension=raw).extension == ".mov"

    def test_empty_extension(self, tmp_path: Path):
        with pytest.raises(ValueError, match="Extension"):
            BatchConfig(directory=tmp_path, extension=".")

    def test_report_options(self, tmp_path: Path):
        """Test the options block uses report key names."""
        config = BatchConfig(
            directory=tmp_path,
            delay=0.5,
            frame_skip=15,
            force=True,
            analyzer_command=("video-analyzer", "--model", "small model"),
        )
        options = config.to_report_options()

        assert options["delay"] == 0.5
        assert options["frameSkip"] == 15
        assert options["force"] is True
        assert options["recursive"] is True
        assert options["analyzer"] == "video-analyzer --model 'small model'"
        assert options["directory"] == str(tmp_path.resolve())

    def test_with_overrides(self, tmp_path: Path):
        """Test creating a modified copy."""
        config = BatchConfig(directory=tmp_path)
        forced = config.with_overrides(force=True, frame_skip=5)

        assert forced.force is True
        assert forced.frame_skip == 5
        assert config.force is False


class TestParseAnalyzerCommand:
    """Tests for analyzer command splitting."""

    def test_single_program(self):
        assert parse_analyzer_command("video-analyzer") == ("video-analyzer",)

    def test_quoted_arguments(self):
        assert parse_analyzer_command('python "/opt/my tools/analyze.py"') == (
            "python",
            "/opt/my tools/analyze.py",
        )
