"""
Structured logging system for llprogress.

Provides centralized logging with console and file outputs, log levels,
and run metrics for monitoring how Learning Locker pages were consumed.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics about fetched pages and parsed statements.
    """

    def __init__(
        self,
        name: str = "llprogress",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console (stderr, keeps stdout for reports)
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers

        self.metrics = {
            "api_calls": 0,
            "pages_fetched": 0,
            "non_ok_responses": 0,
            "statements_seen": 0,
            "facts_parsed": 0,
            "records_skipped": 0,
            "skips_by_reason": {},
            "errors_by_type": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"llprogress_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_api_call(self):
        """Increment API call counter."""
        self.metrics["api_calls"] += 1

    def record_page(self, statements: int, ok: bool = True):
        """Record a decoded page and how many statements it carried."""
        self.metrics["pages_fetched"] += 1
        self.metrics["statements_seen"] += statements
        if not ok:
            self.metrics["non_ok_responses"] += 1

    def record_fact(self):
        self.metrics["facts_parsed"] += 1

    def record_skip(self, reason: str):
        """Record a statement that produced no progress fact."""
        self.metrics["records_skipped"] += 1
        skips = self.metrics["skips_by_reason"]
        skips[reason] = skips.get(reason, 0) + 1

    def record_error(self, error_type: str):
        """Record a fatal error by type name."""
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = self.metrics.copy()
        seen = metrics_copy["statements_seen"]
        if seen > 0:
            metrics_copy["parse_rate"] = round(metrics_copy["facts_parsed"] / seen, 3)
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Learning Locker Session Metrics ===")
        self.info(f"API Calls: {metrics['api_calls']}")
        self.info(f"Pages: {metrics['pages_fetched']} ({metrics['non_ok_responses']} non-OK)")
        self.info(
            f"Statements: {metrics['statements_seen']} seen, "
            f"{metrics['facts_parsed']} parsed, {metrics['records_skipped']} skipped"
        )

        if metrics["skips_by_reason"]:
            self.info("Skip Reasons:")
            for reason, count in metrics["skips_by_reason"].items():
                self.info(f"  {reason}: {count}")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "llprogress",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
