import json
import logging
import sys
from datetime import datetime, timezone

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVEL_ALIASES = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def parse_level(name: str) -> int:
    try:
        return _LEVEL_ALIASES[name.strip().upper()]
    except KeyError:
        raise ValueError(f"unknown log level: {name!r}") from None


def level_label(levelno: int) -> str:
    # Aggregators filter on WARN, not WARNING
    if levelno == logging.WARNING:
        return "WARN"
    return logging.getLevelName(levelno)


class JsonFormatter(logging.Formatter):
    """One JSON object per line, ready for Filebeat or Logstash."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": ts.isoformat(timespec="milliseconds"),
            "level": level_label(record.levelno),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class _TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = level_label(record.levelno)
        return super().format(record)


_handler = None


def configure_logging(settings) -> None:
    global _handler
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stdout)
    if settings.log_format == "json":
        _handler.setFormatter(JsonFormatter())
    else:
        _handler.setFormatter(_TextFormatter(TEXT_FORMAT))
    root.addHandler(_handler)
    root.setLevel(parse_level(settings.log_level))


def uvicorn_level(name: str) -> str:
    return "warning" if name.upper() == "WARN" else name.lower()
