"""
Structured logging for frame requests.
Every event goes to the standard logger as `[event] key=value ...` and,
optionally, to a JSON Lines file for later analysis.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class StructuredLogger:
    """
    Logger that outputs both human-readable and machine-parseable events.

    Usage:
        logger = StructuredLogger("framefetch", log_dir=Path("logs"))
        logger.info("fetch_completed",
                    url="http://host/stream/12",
                    packets=1,
                    duration_ms=8.4)
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
    ):
        """
        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_json: Enable JSON file logging
            enable_console: Enable output through the standard logger
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = enable_json and log_dir is not None
        self.enable_console = enable_console

        self._logger = logging.getLogger(name)
        self._json_file = None
        if self.enable_json:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            json_log_path = log_dir / f"framefetch_{timestamp}.jsonl"
            self._json_file = open(json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        # Added to every JSON entry
        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
        }

    def emit(self, level: str, event: str, **context) -> None:
        """Logs `event` at `level` ("DEBUG", "INFO", "WARNING" or "ERROR")."""
        if self.enable_console:
            fields = " ".join(f"{k}={v}" for k, v in context.items())
            self._logger.log(_LEVELS[level], f"[{event}] {fields}".rstrip())

        if not self._json_file or self._json_file.closed:
            return
        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }
        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except OSError as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def debug(self, event: str, **context) -> None:
        self.emit("DEBUG", event, **context)

    def info(self, event: str, **context) -> None:
        self.emit("INFO", event, **context)

    def warning(self, event: str, **context) -> None:
        self.emit("WARNING", event, **context)

    def error(self, event: str, **context) -> None:
        self.emit("ERROR", event, **context)

    def close(self) -> None:
        """Close JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class FetchLogger:
    """Specialized logger for frame requests."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def fetch_started(self, operation: str, url: str):
        """Log request started."""
        self.logger.debug("fetch_started", operation=operation, url=url)

    def fetch_completed(
        self,
        operation: str,
        url: str,
        packets: int,
        size_bytes: int,
        multipart: bool,
        duration_ms: float,
    ):
        """Log request answered with packets."""
        self.logger.debug(
            "fetch_completed",
            operation=operation,
            url=url,
            packets=packets,
            size_bytes=size_bytes,
            multipart=multipart,
            duration_ms=round(duration_ms, 2),
        )

    def fetch_no_data(self, operation: str, url: str, status: int, reason: str):
        """Log request answered without data."""
        self.logger.debug(
            "fetch_no_data",
            operation=operation,
            url=url,
            status=status,
            reason=reason,
        )

    def fetch_failed(self, operation: str, url: str, error: str, duration_ms: float):
        """Log request failed."""
        self.logger.error(
            "fetch_failed",
            operation=operation,
            url=url,
            error=error,
            duration_ms=round(duration_ms, 2),
        )


# Global logger factory
def create_structured_logger(
    log_dir: Path | None = None, enable_json: bool = False
) -> tuple[StructuredLogger, FetchLogger]:
    """
    Create all structured loggers.

    Returns:
        Tuple of (base_logger, fetch_logger)
    """
    base = StructuredLogger("framefetch", log_dir=log_dir, enable_json=enable_json)
    fetch = FetchLogger(base)

    return base, fetch
