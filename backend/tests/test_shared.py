import logging
from unittest.mock import patch

import pytest

from shared.config import Settings
from shared.logging import setup_logging
from shared.telemetry import setup_metrics, setup_telemetry, setup_tracing


@pytest.fixture
def clean_root_logger():
    """Restore root logger handlers and level after a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_settings_defaults():
    """Test the built-in issuance defaults."""
    config = Settings(_env_file=None)

    assert config.CERT_OUTPUT_DIR == "certs"
    assert config.CERT_KEY_FILENAME == "key.pem"
    assert config.CERT_CERT_FILENAME == "cert.pem"
    assert config.CERT_COMMON_NAME == "localhost"
    assert config.subject_alt_names == ["DNS:localhost", "IP:127.0.0.1"]
    assert config.CERT_VALIDITY_DAYS == 365
    assert config.CERT_KEY_SIZE == 4096
    assert config.TELEMETRY_CONSOLE is False


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("CERT_OUTPUT_DIR", "/tmp/tls")
    monkeypatch.setenv("CERT_VALIDITY_DAYS", "30")
    monkeypatch.setenv("CERT_SUBJECT_ALT_NAMES", "DNS:a.test, ,IP:10.1.1.1")

    config = Settings(_env_file=None)

    assert config.CERT_OUTPUT_DIR == "/tmp/tls"
    assert config.CERT_VALIDITY_DAYS == 30
    assert config.subject_alt_names == ["DNS:a.test", "IP:10.1.1.1"]


def test_setup_logging_stream_only(clean_root_logger):
    """Test that without console telemetry no OTel provider is installed."""
    with (
        patch("shared.logging.settings") as mock_settings,
        patch("shared.logging.set_logger_provider") as mock_set_provider,
    ):
        mock_settings.TELEMETRY_CONSOLE = False
        mock_settings.LOG_LEVEL = "INFO"

        setup_logging()

        mock_set_provider.assert_not_called()
    assert clean_root_logger.level == logging.INFO
    assert any(isinstance(h, logging.StreamHandler) for h in clean_root_logger.handlers)


def test_setup_logging_is_idempotent(clean_root_logger):
    """Test that repeated calls add one stderr handler and only update the level."""
    with patch("shared.logging.settings") as mock_settings:
        mock_settings.TELEMETRY_CONSOLE = False
        mock_settings.LOG_LEVEL = "INFO"

        setup_logging()
        setup_logging("error")

    stream_handlers = [h for h in clean_root_logger.handlers if type(h) is logging.StreamHandler]
    assert len(stream_handlers) == 1
    assert clean_root_logger.level == logging.ERROR


def test_setup_logging_with_telemetry(clean_root_logger):
    """Test that setup_logging configures OTel provider when enabled."""
    with (
        patch("shared.logging.settings") as mock_settings,
        patch("shared.logging.set_logger_provider") as mock_set_provider,
        patch("shared.logging.LoggerProvider") as mock_provider_cls,
        patch("shared.logging.LoggingHandler") as mock_handler_cls,
        patch("shared.logging.BatchLogRecordProcessor"),
        patch("shared.logging.ConsoleLogRecordExporter"),
    ):
        mock_settings.TELEMETRY_CONSOLE = True
        mock_settings.LOG_LEVEL = "WARNING"
        mock_handler_cls.return_value = logging.NullHandler()

        setup_logging("debug")

        mock_provider_cls.assert_called_once()
        mock_set_provider.assert_called_once()
    assert clean_root_logger.level == logging.DEBUG


def test_setup_tracing():
    with (
        patch("shared.telemetry.TracerProvider") as mock_provider_cls,
        patch("shared.telemetry.trace.set_tracer_provider") as mock_set_provider,
        patch("shared.telemetry.BatchSpanProcessor"),
        patch("shared.telemetry.ConsoleSpanExporter"),
    ):
        setup_tracing("test-app")

        mock_provider_cls.assert_called_once()
        mock_set_provider.assert_called_once()


def test_setup_metrics():
    """Test that setup_metrics configures OTel meter provider."""
    with (
        patch("shared.telemetry.MeterProvider") as mock_provider_cls,
        patch("shared.telemetry.metrics.set_meter_provider") as mock_set_provider,
        patch("shared.telemetry.PeriodicExportingMetricReader"),
        patch("shared.telemetry.ConsoleMetricExporter"),
    ):
        setup_metrics("test-app")

        mock_provider_cls.assert_called_once()
        mock_set_provider.assert_called_once()


def test_setup_telemetry_disabled_by_default():
    with (
        patch("shared.telemetry.settings") as mock_settings,
        patch("shared.telemetry.setup_tracing") as mock_tracing,
        patch("shared.telemetry.setup_metrics") as mock_metrics,
    ):
        mock_settings.TELEMETRY_CONSOLE = False

        assert setup_telemetry() is False

        mock_tracing.assert_not_called()
        mock_metrics.assert_not_called()


def test_setup_telemetry_enabled():
    with (
        patch("shared.telemetry.settings") as mock_settings,
        patch("shared.telemetry.setup_tracing") as mock_tracing,
        patch("shared.telemetry.setup_metrics") as mock_metrics,
    ):
        mock_settings.TELEMETRY_CONSOLE = True
        mock_settings.APP_NAME = "devcert"

        assert setup_telemetry() is True

        mock_tracing.assert_called_once_with("devcert")
        mock_metrics.assert_called_once_with("devcert")
