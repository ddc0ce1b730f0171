"""Tests for engine logging setup."""

import logging
from logging.handlers import RotatingFileHandler

from core.logging import LOG_FILE_NAME, ROOT_LOGGER_NAME, UtcFormatter, configure_logging, get_logger


class TestConfigureLogging:
    def test_creates_log_dir_and_handlers(self, tmp_path):
        log_dir = tmp_path / "logs"
        logger = configure_logging(log_dir, level="DEBUG", max_bytes=1024 * 1024, backup_count=3)

        assert log_dir.is_dir()
        assert logger.name == ROOT_LOGGER_NAME
        assert logger.level == logging.DEBUG

        file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == 1024 * 1024
        assert file_handlers[0].backupCount == 3
        assert all(isinstance(h.formatter, UtcFormatter) for h in logger.handlers)

    def test_reconfigure_replaces_handlers(self, tmp_path):
        configure_logging(tmp_path)
        logger = configure_logging(tmp_path)
        assert len(logger.handlers) == 2

    def test_messages_reach_log_file(self, tmp_path):
        configure_logging(tmp_path)
        get_logger("reports.test").info("report generated")

        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()
        content = (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8")
        assert "griver.reports.test" in content
        assert "report generated" in content


class TestGetLogger:
    def test_child_of_engine_namespace(self):
        assert get_logger("reports.assembler").name == "griver.reports.assembler"

    def test_root_without_name(self):
        assert get_logger().name == ROOT_LOGGER_NAME


class TestUtcFormatter:
    def test_iso_timestamp(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        record.created = 0
        assert UtcFormatter().formatTime(record) == "1970-01-01T00:00:00+00:00"
