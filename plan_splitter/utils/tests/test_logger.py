"""
Tests for logging utilities
"""

import json
import logging
from unittest.mock import Mock

import pytest

from plan_splitter.utils.logger import (
    SegmentationFormatter,
    SegmentationRunLogger,
    setup_logging,
)


@pytest.fixture
def app_logger():
    """Name of a throwaway application logger, cleaned up afterwards"""
    name = "plan_splitter_test_app"
    yield name
    for logger_name in (name, "performance"):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()


class TestSetupLogging:

    def test_console_only(self, app_logger):
        logger = setup_logging(app_name=app_logger, log_level="DEBUG")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_setup_does_not_duplicate_handlers(self, app_logger):
        setup_logging(app_name=app_logger)
        logger = setup_logging(app_name=app_logger)
        assert len(logger.handlers) == 1

    def test_log_files(self, app_logger, tmp_path):
        logger = setup_logging(app_name=app_logger, log_dir=tmp_path / "logs")
        logger.info("plan stored", extra={"reference": "DP 4021"})
        for handler in logger.handlers:
            handler.flush()

        lines = (tmp_path / "logs" / f"{app_logger}.log").read_text().strip().splitlines()
        last = json.loads(lines[-1])
        assert last["message"] == "plan stored"
        assert last["reference"] == "DP 4021"
        assert (tmp_path / "logs" / "performance.log").exists()


class TestSegmentationFormatter:

    def test_context_fields(self):
        record = logging.LogRecord(
            "plan_splitter", logging.INFO, __file__, 10, "Segmentation started", None, None
        )
        record.project_id = "42"
        record.stage = "start"

        payload = json.loads(SegmentationFormatter().format(record))

        assert payload["level"] == "INFO"
        assert payload["message"] == "Segmentation started"
        assert payload["project_id"] == "42"
        assert payload["stage"] == "start"
        assert "strategy" not in payload


class TestSegmentationRunLogger:

    def test_successful_run(self):
        logger = Mock()

        with SegmentationRunLogger(logger, "bundle.pdf", "42") as run:
            assert run.start_time is not None

        assert run.execution_time >= 0
        assert logger.info.call_count == 2
        assert logger.info.call_args.kwargs["extra"]["stage"] == "done"

    def test_failed_run_propagates(self):
        logger = Mock()

        with pytest.raises(RuntimeError):
            with SegmentationRunLogger(logger, "bundle.pdf", "42"):
                raise RuntimeError("boom")

        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["extra"]["stage"] == "failed"
