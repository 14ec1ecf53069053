"""Tests for EventLogger -- 4 tests."""

import json
import time

import pytest


def _entries(log_dir) -> list[dict]:
    log_files = list(log_dir.glob("*.jsonl"))
    assert len(log_files) == 1
    return [json.loads(line) for line in log_files[0].read_text().splitlines()]


class TestEventLogger:
    def test_log_writes_valid_jsonl(self, event_logger, tmp_config):
        """Log entry produces valid JSONL in a dated log file."""
        event_logger.log("test.event", {"key": "value"})
        entries = _entries(tmp_config.log_dir)
        assert len(entries) == 1
        assert entries[0]["event_type"] == "test.event"
        assert entries[0]["data"]["key"] == "value"
        assert entries[0]["duration_ms"] is None

    def test_timed_captures_duration_and_context(self, event_logger, tmp_config):
        """timed() records duration_ms and fields added to the yielded dict."""
        with event_logger.timed("test.timed", atoms_file="a.json") as ctx:
            time.sleep(0.05)  # 50ms
            ctx["edges"] = 3
        entry = _entries(tmp_config.log_dir)[-1]
        assert entry["duration_ms"] >= 40  # Allow some tolerance
        assert entry["data"]["status"] == "success"
        assert entry["data"]["edges"] == 3
        assert entry["data"]["atoms_file"] == "a.json"

    def test_timed_captures_error_status(self, event_logger, tmp_config):
        """timed() records error status on exception and re-raises."""
        with pytest.raises(ValueError, match="test error"), event_logger.timed("test.error"):
            raise ValueError("test error")  # noqa: EM101
        entry = _entries(tmp_config.log_dir)[-1]
        assert entry["data"]["status"] == "error"
        assert "test error" in entry["data"]["error"]

    def test_creates_missing_log_dir(self, tmp_path):
        """Logger creates its directory on construction."""
        from atomflow.logging.logger import EventLogger

        log_dir = tmp_path / "deep" / "logs"
        EventLogger(log_dir).log("test.mkdir", {})
        assert len(_entries(log_dir)) == 1
