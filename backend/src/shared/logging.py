import logging
import sys

from opentelemetry._logs import set_logger_provider
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor, ConsoleLogRecordExporter

from .config import settings


def _has_handler(root: logging.Logger, handler_type: type) -> bool:
    # Exact type match: pytest's capture handler subclasses StreamHandler
    return any(type(h) is handler_type for h in root.handlers)


def setup_logging(level: str | None = None) -> None:
    """Configure logging for the CLI.

    Log records go to stderr so that stdout carries only the status lines.
    When TELEMETRY_CONSOLE is set, records are also exported through
    OpenTelemetry's console exporter. Repeated calls only update the level.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    root = logging.getLogger()

    if settings.TELEMETRY_CONSOLE and not _has_handler(root, LoggingHandler):
        logger_provider = LoggerProvider()
        logger_provider.add_log_record_processor(
            BatchLogRecordProcessor(ConsoleLogRecordExporter())
        )
        set_logger_provider(logger_provider)

        # Attach OTel LoggingHandler to Python's root logger
        handler = LoggingHandler(
            level=getattr(logging, level_name), logger_provider=logger_provider
        )
        root.addHandler(handler)

    if not _has_handler(root, logging.StreamHandler):
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        root.addHandler(stream_handler)

    root.setLevel(level_name)
