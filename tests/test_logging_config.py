"""Tests for logging configuration and file logging."""

import argparse
from unittest.mock import patch

import pytest

from jdocsite.core.config.logging_config import FileLoggingConfig, LoggingConfig
from jdocsite.api.cli.main import setup_logging


class TestFileLoggingConfig:
    """Test FileLoggingConfig validation and functionality."""

    def test_file_logging_config_defaults(self):
        """Test default file logging configuration."""
        config = FileLoggingConfig()
        assert config.enabled is False
        assert config.path == "jdocsite.log"
        assert config.level == "INFO"
        assert config.rotation == "10 MB"
        assert config.retention == "1 week"
        assert "time" in config.format

    def test_file_logging_config_custom_values(self):
        """Test custom file logging configuration."""
        config = FileLoggingConfig(
            enabled=True,
            path="/custom/path.log",
            level="DEBUG",
            rotation="1 day",
            retention="30 days",
            format="Custom format"
        )
        assert config.enabled is True
        assert config.path == "/custom/path.log"
        assert config.level == "DEBUG"
        assert config.rotation == "1 day"
        assert config.retention == "30 days"
        assert config.format == "Custom format"

    def test_file_logging_invalid_level(self):
        """Test that invalid log levels raise ValueError."""
        with pytest.raises(ValueError, match="Invalid log level"):
            FileLoggingConfig(level="INVALID")

    def test_file_logging_invalid_path_empty(self):
        """Test that empty paths raise ValueError."""
        with pytest.raises(ValueError, match="Log file path cannot be empty"):
            FileLoggingConfig(path="")

    def test_file_logging_level_is_upper_cased(self):
        config = FileLoggingConfig(level="debug")
        assert config.level == "DEBUG"


class TestLoggingConfig:
    """Test top-level LoggingConfig functionality."""

    def test_logging_config_defaults(self):
        """File logging is opt-in."""
        config = LoggingConfig()
        assert isinstance(config.file, FileLoggingConfig)
        assert config.is_enabled() is False
        assert config.console_level == "INFO"

    def test_logging_config_file_enabled(self):
        config = LoggingConfig(file=FileLoggingConfig(enabled=True))
        assert config.is_enabled() is True

    def test_invalid_console_level(self):
        with pytest.raises(ValueError, match="Invalid console log level"):
            LoggingConfig(console_level="LOUD")

    def test_extract_cli_overrides_no_args(self):
        """Test CLI override extraction with no logging args."""
        args = argparse.Namespace()
        overrides = LoggingConfig.extract_cli_overrides(args)
        assert overrides is None

    def test_extract_cli_overrides_file_logging(self):
        """Test CLI override extraction for file logging."""
        args = argparse.Namespace(
            log_file="/tmp/test.log",
            log_level="DEBUG"
        )
        overrides = LoggingConfig.extract_cli_overrides(args)
        assert overrides is not None
        assert overrides["file"]["enabled"] is True
        assert overrides["file"]["path"] == "/tmp/test.log"
        assert overrides["file"]["level"] == "DEBUG"

    def test_extract_cli_overrides_partial_file_args(self):
        """Test CLI override extraction with only log_file (no level)."""
        args = argparse.Namespace(log_file="/tmp/test.log")
        overrides = LoggingConfig.extract_cli_overrides(args)
        assert overrides is not None
        assert overrides["file"]["enabled"] is True
        assert "level" not in overrides["file"]

    def test_from_args_applies_overrides(self):
        args = argparse.Namespace(log_file="/tmp/test.log", log_level="WARNING")
        config = LoggingConfig.from_args(args)
        assert config.is_enabled() is True
        assert config.file.path == "/tmp/test.log"
        assert config.file.level == "WARNING"


class TestSetupLogging:
    """Test setup_logging function behavior."""

    @patch('jdocsite.api.cli.main.logger')
    def test_setup_logging_no_config(self, mock_logger):
        """Test setup_logging with no config (console only)."""
        setup_logging(verbose=False, config=None)

        mock_logger.remove.assert_called_once()
        assert mock_logger.add.call_count == 1
        assert mock_logger.add.call_args_list[0][1]['level'] == 'INFO'

    @patch('jdocsite.api.cli.main.logger')
    def test_setup_logging_verbose_no_file_logging(self, mock_logger):
        """Test setup_logging verbose mode without file logging."""
        setup_logging(verbose=True, config=LoggingConfig())

        mock_logger.remove.assert_called_once()
        first_call = mock_logger.add.call_args_list[0]
        assert first_call[1]['level'] == 'DEBUG'

    @patch('jdocsite.api.cli.main.logger')
    def test_setup_logging_file_logging_enabled_console_quiet(self, mock_logger):
        """Test that file logging enabled makes console WARNING+ only."""
        config = LoggingConfig(file=FileLoggingConfig(enabled=True, path="/tmp/test.log"))
        setup_logging(verbose=False, config=config)

        mock_logger.remove.assert_called_once()
        assert mock_logger.add.call_count == 2
        assert mock_logger.add.call_args_list[0][1]['level'] == 'WARNING'

    @patch('jdocsite.api.cli.main.logger')
    def test_setup_logging_verbose_overrides_file_logging_console(self, mock_logger):
        """Test that verbose flag shows full console logging even with file logging."""
        config = LoggingConfig(file=FileLoggingConfig(enabled=True, path="/tmp/test.log"))
        setup_logging(verbose=True, config=config)

        debug_calls = [call for call in mock_logger.add.call_args_list if 'DEBUG' in str(call)]
        assert len(debug_calls) > 0

    @patch('jdocsite.api.cli.main.logger')
    def test_setup_logging_file_config(self, mock_logger):
        """Test that file logging config is applied from a carrier object."""
        class MockConfig:
            def __init__(self):
                self.logging = LoggingConfig(file=FileLoggingConfig(
                    enabled=True,
                    path="/tmp/test.log",
                    level="INFO",
                    rotation="10 MB",
                    retention="1 week"
                ))

        setup_logging(verbose=False, config=MockConfig())

        file_call = None
        for call in mock_logger.add.call_args_list:
            if len(call[0]) > 0 and str(call[0][0]) == '/tmp/test.log':
                file_call = call
                break
        assert file_call is not None
        assert file_call[1]['level'] == 'INFO'
        assert file_call[1]['rotation'] == '10 MB'
        assert file_call[1]['retention'] == '1 week'

    @patch('jdocsite.api.cli.main.logger')
    def test_setup_logging_console_level_from_config(self, mock_logger):
        setup_logging(verbose=False, config=LoggingConfig(console_level="ERROR"))

        assert mock_logger.add.call_args_list[0][1]['level'] == 'ERROR'
