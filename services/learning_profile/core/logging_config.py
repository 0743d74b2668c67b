import logging
import sys
from datetime import datetime, timezone

from pythonjsonlogger.json import JsonFormatter

LOG_FORMAT = '%(timestamp)s %(level)s %(name)s %(module)s %(lineno)d %(message)s'


class CustomJsonFormatter(JsonFormatter):
    """JSON log lines with a UTC ISO-8601 timestamp and the emitting module and line."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            log_record['timestamp'] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record['level'] = (log_record.get('level') or record.levelname).upper()
        log_record['module'] = record.module
        log_record['lineno'] = record.lineno


def _has_json_handler(logger: logging.Logger) -> bool:
    return any(isinstance(h.formatter, CustomJsonFormatter) for h in logger.handlers)


def setup_logging(log_level_str: str = "INFO") -> logging.Logger:
    """
    Configures structured JSON logging on the root logger.

    Safe to call more than once: the JSON handler is installed only the first
    time, later calls just adjust the level.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if _has_json_handler(root_logger):
        root_logger.debug(f"JSON logging already configured, level now {logging.getLevelName(log_level)}")
        return root_logger

    log_handler = logging.StreamHandler(sys.stdout)
    log_handler.setFormatter(CustomJsonFormatter(LOG_FORMAT))
    root_logger.addHandler(log_handler)
    root_logger.info(f"Structured JSON logging configured with level: {logging.getLevelName(log_level)}")
    return root_logger
