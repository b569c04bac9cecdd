from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from pythonjsonlogger import jsonlogger

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(correlation_id)s %(message)s"

# uvicorn installs its own handlers; route them through the root logger instead
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class CorrelationIdFilter(logging.Filter):
    def __init__(self, correlation_id: str):
        super().__init__()
        self._correlation_id = correlation_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = self._correlation_id
        return True


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def _with_filter(
    handler: logging.Handler,
    formatter: logging.Formatter,
    correlation_filter: logging.Filter,
) -> logging.Handler:
    handler.setFormatter(formatter)
    handler.addFilter(correlation_filter)
    return handler


def configure_logging(
    log_dir: Path,
    correlation_id: str,
    level: int = logging.INFO,
    *,
    log_to_files: bool = True,
) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    correlation_filter = CorrelationIdFilter(correlation_id)
    text_formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    root.addHandler(_with_filter(logging.StreamHandler(), text_formatter, correlation_filter))

    if log_to_files:
        log_dir.mkdir(parents=True, exist_ok=True)
        utc_day = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        root.addHandler(
            _with_filter(
                logging.FileHandler(log_dir / f"webmail-{utc_day}.log", encoding="utf-8"),
                text_formatter,
                correlation_filter,
            )
        )
        root.addHandler(
            _with_filter(
                logging.FileHandler(log_dir / f"webmail-{utc_day}.jsonl", encoding="utf-8"),
                jsonlogger.JsonFormatter(fmt=JSON_FORMAT),
                correlation_filter,
            )
        )

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True


def get_logger(name: str, correlation_id: str) -> logging.LoggerAdapter:
    base_logger = logging.getLogger(name)
    return logging.LoggerAdapter(base_logger, extra={"correlation_id": correlation_id})
