"""Logging and operation metrics for the InkFlow data layer.

Log records of the ``inkflow`` logger go to a rotating file under
``~/.inkflow/logs`` (and optionally the console). Every service operation
runs inside ``timed_operation``, which feeds the process-wide ``metrics``
collector reported by the ``get_metrics`` tool.
"""
import logging
import os
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterator, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = Path.home() / ".inkflow" / "logs"
LOG_FILE_NAME = "inkflow.log"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def _find_file_handler(
    target: logging.Logger, log_file: Path
) -> Optional[RotatingFileHandler]:
    wanted = os.path.abspath(log_file)
    for handler in target.handlers:
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == wanted:
            return handler
    return None


def _has_console_handler(target: logging.Logger) -> bool:
    return any(
        type(handler) is logging.StreamHandler for handler in target.handlers
    )


def configure_logging(
    log_dir: Optional[Union[str, Path]] = None,
    level: int = logging.INFO,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
    console: bool = True,
) -> Path:
    """Attach a rotating log file (and a console stream) to ``inkflow``.

    Calling this again with the same directory only updates the level;
    handlers are never stacked.

    Args:
        log_dir: Directory for ``inkflow.log``. Defaults to ~/.inkflow/logs
        level: Level for the logger and its handlers
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files to keep
        console: Also write records to stderr

    Returns:
        The log directory
    """
    log_path = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / LOG_FILE_NAME

    inkflow_logger = logging.getLogger("inkflow")
    inkflow_logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    handlers = []
    file_handler = _find_file_handler(inkflow_logger, log_file)
    if file_handler is None:
        file_handler = RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        handlers.append(file_handler)
    file_handler.setLevel(level)

    if console and not _has_console_handler(inkflow_logger):
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        inkflow_logger.addHandler(handler)

    inkflow_logger.info(f"Logging to {log_file} (rotates at {max_bytes} bytes)")
    return log_path


@dataclass
class OperationStats:
    """Running totals for one operation name."""

    calls: int = 0
    failures: int = 0
    total_ms: float = 0.0
    slowest_ms: float = 0.0
    last_error: Optional[str] = None
    last_error_at: Optional[datetime] = None

    def add(self, duration_ms: float, error: Optional[str]) -> None:
        self.calls += 1
        self.total_ms += duration_ms
        self.slowest_ms = max(self.slowest_ms, duration_ms)
        if error is not None:
            self.failures += 1
            self.last_error = error
            self.last_error_at = datetime.now(timezone.utc)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "count": self.calls,
            "success_count": self.calls - self.failures,
            "error_count": self.failures,
            "avg_duration_ms": round(self.total_ms / self.calls, 2) if self.calls else 0.0,
            "max_duration_ms": round(self.slowest_ms, 2),
            "last_error": self.last_error,
            "last_error_time": (
                self.last_error_at.isoformat() if self.last_error_at else None
            ),
        }


class MetricsCollector:
    """In-memory, thread-safe operation metrics for the running process."""

    def __init__(self) -> None:
        self._stats: Dict[str, OperationStats] = {}
        self._lock = Lock()
        self._started = time.monotonic()

    def record_operation(
        self, operation: str, duration_ms: float, error: Optional[str] = None
    ) -> None:
        """Count one call of ``operation``; a non-None ``error`` marks a failure."""
        with self._lock:
            self._stats.setdefault(operation, OperationStats()).add(duration_ms, error)

    def get_metrics(self) -> Dict[str, Dict[str, Any]]:
        """Per-operation snapshot, keyed by operation name."""
        with self._lock:
            return {name: stats.as_dict() for name, stats in self._stats.items()}

    def get_summary(self) -> Dict[str, Any]:
        """Totals across every operation since start (or the last reset)."""
        with self._lock:
            calls = sum(s.calls for s in self._stats.values())
            failures = sum(s.failures for s in self._stats.values())
            return {
                "uptime_seconds": round(time.monotonic() - self._started, 1),
                "total_operations": calls,
                "total_errors": failures,
                "operations_tracked": sorted(self._stats),
            }

    def reset(self) -> None:
        with self._lock:
            self._stats.clear()
            self._started = time.monotonic()


metrics = MetricsCollector()


@contextmanager
def timed_operation(operation: str, **context: Any) -> Iterator[Dict[str, Any]]:
    """Time the enclosed block and record it under ``operation``.

    The yielded dict collects result details for the closing debug line.
    Exceptions are recorded as failures and re-raised unchanged.

    Example:
        with timed_operation("git_commit", path=path) as op:
            op["output"] = operator.commit(path, message)[:40]
    """
    op_id = uuid.uuid4().hex[:8]
    details: Dict[str, Any] = {}
    if context:
        logger.debug(f"[{op_id}] {operation} started with {context}")

    error: Optional[str] = None
    started = time.perf_counter()
    try:
        yield details
    except Exception as e:
        error = str(e) or type(e).__name__
        raise
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        metrics.record_operation(operation, elapsed_ms, error)
        outcome = "ok" if error is None else f"failed: {error}"
        logger.debug(
            f"[{op_id}] {operation} {outcome} in {elapsed_ms:.1f}ms"
            + (f" {details}" if details else "")
        )
