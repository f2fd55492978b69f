# aurora/config/logging_config.py
"""
Logging setup for Aurora Risk Lab (loguru)

Modules log through ``from loguru import logger`` and never configure
sinks themselves. Entry points call ``configure_logging()`` once, which
picks console-only or file logging from settings.
"""

import json
import sys
import time
from pathlib import Path

from loguru import logger

from aurora.config.settings import get_settings

settings = get_settings()

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"


def _json_sink_formatter(record) -> str:
    payload = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
        "message": record["message"],
        "extra": {k: str(v) for k, v in record["extra"].items() if k != "serialized"},
        "exception": str(record["exception"]) if record["exception"] else None,
    }
    record["extra"]["serialized"] = json.dumps(payload)
    return "{extra[serialized]}\n"


def _is_backtest_record(record) -> bool:
    return record["extra"].get("type") == "backtest"


def setup_logging(
    log_level: str | None = None,
    log_to_file: bool | None = None,
    log_dir: Path | None = None,
    rotation: str = "100 MB",
    retention: str = "30 days",
    compression: str | None = "zip",
    json_logs: bool | None = None,
):
    """
    Replace loguru's default handler with Aurora's sinks

    Args:
        log_level: Minimum level for the console and main log file
        log_to_file: Add file sinks (default: when LOG_FILE_PATH is set)
        log_dir: Directory for log files (default: LOG_FILE_PATH or ./logs)
        rotation: Rotation policy for file sinks
        retention: Retention policy for rotated files
        compression: Compression for rotated files
        json_logs: One JSON object per line in files (default: LOG_FORMAT)
    """
    log_level = log_level or settings.LOG_LEVEL
    if log_to_file is None:
        log_to_file = settings.LOG_FILE_PATH is not None
    if json_logs is None:
        json_logs = settings.LOG_FORMAT == "json"

    logger.remove()
    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level=log_level,
        colorize=True,
        backtrace=True,
        diagnose=settings.is_development,
        enqueue=True,
    )

    if log_to_file:
        log_dir = Path(log_dir or settings.LOG_FILE_PATH or "logs")
        log_dir.mkdir(parents=True, exist_ok=True)

        # file name -> (level, filter)
        file_sinks = {
            "aurora_{time:YYYY-MM-DD}.log": (log_level, None),
            "aurora_errors_{time:YYYY-MM-DD}.log": ("ERROR", None),
            "backtest_{time:YYYY-MM-DD}.log": ("INFO", _is_backtest_record),
        }
        for file_name, (level, record_filter) in file_sinks.items():
            logger.add(
                log_dir / file_name,
                format=_json_sink_formatter if json_logs else FILE_FORMAT,
                level=level,
                filter=record_filter,
                rotation=rotation,
                retention=retention,
                compression=compression,
                enqueue=True,
            )

    logger.info(f"Logging configured: level={log_level}, file_logging={log_to_file}")


def configure_logging():
    """
    Environment preset: JSON files with short retention in production,
    verbose console logging everywhere else
    """
    if settings.is_production:
        setup_logging(
            log_level="INFO",
            log_to_file=True,
            rotation="50 MB",
            retention="14 days",
            json_logs=True,
        )
    else:
        setup_logging(log_level="DEBUG" if settings.DEBUG else None, log_to_file=None)


class timed_operation:
    """
    Log the start, end and wall time of a block

    Exceptions are logged and propagate.

    Usage:
        with timed_operation("OHLC fetch", "DEBUG"):
            await collector.fetch_many(assets, days)
    """

    def __init__(self, operation_name: str, log_level: str = "INFO"):
        self.operation_name = operation_name
        self.log_level = log_level
        self.elapsed: float | None = None
        self._started = 0.0

    def __enter__(self):
        self._started = time.perf_counter()
        logger.log(self.log_level, f"{self.operation_name}: started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self._started
        if exc_type is not None:
            logger.error(f"{self.operation_name}: failed after {self.elapsed:.3f}s ({exc_val})")
            return False
        logger.log(self.log_level, f"{self.operation_name}: done in {self.elapsed:.3f}s")
        return False


def log_backtest_run(assets: list, start_date, end_date, summary: dict):
    """
    Record a finished backtest; routed to the backtest log file
    """
    logger.bind(
        type="backtest",
        assets=",".join(assets),
        start_date=str(start_date),
        end_date=str(end_date),
    ).info(
        f"Backtest {', '.join(assets)} [{start_date} -> {end_date}]: "
        f"return {summary.get('totalReturn', '0.00')}%, "
        f"max drawdown {summary.get('maxDrawdown', '0.00')}%"
    )


__all__ = [
    "configure_logging",
    "log_backtest_run",
    "setup_logging",
    "timed_operation",
]
