"""
Logging utilities for showing configurator log output in the status bar.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from queue import Queue
from typing import Optional

# Status bar display time per level; 0 keeps the message until replaced
INFO_TIMEOUT_MS = 4000
STICKY_LEVEL = logging.WARNING


@dataclass(frozen=True)
class StatusMessage:
    text: str
    levelno: int

    @property
    def timeout_ms(self) -> int:
        return 0 if self.levelno >= STICKY_LEVEL else INFO_TIMEOUT_MS


class QueueLogHandler(logging.Handler):
    """
    Puts a StatusMessage on a queue for every record.

    Records may arrive from worker threads (image decoding); only the
    main window's timer-driven drain touches widgets.
    """

    def __init__(self, log_queue: Queue, level: int = logging.INFO):
        super().__init__(level)
        self.log_queue = log_queue
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.log_queue.put(StatusMessage(self.format(record), record.levelno))
        except Exception:
            self.handleError(record)


def attach_queue_handler(
    log_queue: Queue,
    logger_name: Optional[str] = "home_configurator",
    level: int = logging.INFO,
) -> QueueLogHandler:
    """
    Attach a QueueLogHandler to the package logger.

    The logger level is lowered to `level` if needed so INFO messages
    reach the status bar without enabling them on other loggers.

    Returns:
        The attached handler (for later removal)
    """
    logger = logging.getLogger(logger_name)
    handler = QueueLogHandler(log_queue, level)
    logger.addHandler(handler)
    if logger.level == logging.NOTSET or logger.level > level:
        logger.setLevel(level)
    return handler


def detach_queue_handler(handler: QueueLogHandler, logger_name: Optional[str] = "home_configurator") -> None:
    logging.getLogger(logger_name).removeHandler(handler)
