"""
Unit tests for logging setup.
"""

import logging
import logging.handlers

import pytest

from xtreamepg.utils.logging_setup import get_logger, parse_size, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestParseSize:
    """Tests for parse_size."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("10MB", 10 * 1024 * 1024),
            ("512kb", 512 * 1024),
            ("1GB", 1024 * 1024 * 1024),
            ("2048", 2048),
        ],
    )
    def test_valid_sizes(self, value, expected):
        assert parse_size(value) == expected

    def test_invalid_size_uses_default(self):
        assert parse_size("lots", default=42) == 42


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_and_file_handlers(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "app.log"

        root = setup_logging(log_level="DEBUG", log_file_name=str(log_file), max_bytes=1024)

        assert root.level == logging.DEBUG
        assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)
        file_handlers = [
            h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == 1024
        assert log_file.exists()

    def test_console_only(self, tmp_path, restore_root_logger):
        root = setup_logging(log_file_name=str(tmp_path / "x.log"), log_to_file=False)

        assert not any(
            isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers
        )
        assert not (tmp_path / "x.log").exists()

    def test_unknown_level_falls_back_to_info(self, tmp_path, restore_root_logger):
        root = setup_logging(log_level="chatty", log_to_file=False)

        assert root.level == logging.INFO

    def test_get_logger(self):
        assert get_logger("xtreamepg.test").name == "xtreamepg.test"
