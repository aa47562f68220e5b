"""
Logging configuration for deck image generation.

Every module logs through a loguru logger bound to its module name. The host
application decides where messages go; :func:`setup_logging` is a convenience
that installs this library's own sinks without touching anyone else's.
"""

import sys
import time

from loguru import logger

from config.settings import settings

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function} - {message}"

# Handlers installed by setup_logging, replaced on each call
_handler_ids: list[int] = []


def setup_logging(console: bool = True) -> None:
    """Install the stderr sink and, when enabled, the rotating file sink.

    Calling it again replaces the sinks from the previous call. Handlers
    added by the host application are left alone, except loguru's stock
    stderr handler, which is dropped so console output is not duplicated.

    Args:
        console: Log to stderr at ``settings.log_level``
    """
    while _handler_ids:
        logger.remove(_handler_ids.pop())

    if console:
        try:
            logger.remove(0)
        except ValueError:
            pass
        _handler_ids.append(
            logger.add(
                sys.stderr,
                level=settings.log_level,
                format=LOG_FORMAT,
            )
        )

    if settings.log_to_file:
        log_dir = settings.logs_dir
        log_dir.mkdir(parents=True, exist_ok=True)

        _handler_ids.append(
            logger.add(
                log_dir / "deck-images_{time:YYYY-MM-DD}.log",
                level="DEBUG",
                format=LOG_FORMAT,
                rotation=settings.log_rotation,
                retention=settings.log_retention,
                compression="gz",
                enqueue=True,
            )
        )

    logger.info("Logging initialized (level={})", settings.log_level)


def get_logger(name: str):
    """Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance

    Example:
        >>> from core.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Resolving card {}", card_id)
    """
    return logger.bind(module=name)


class log_operation:
    """Context manager for logging operations with timing.

    Example:
        >>> with log_operation("Rendering deck image", decklist_id=42):
        ...     render()
        # Logs: "Rendering deck image [decklist_id=42] completed in 0.84s"
    """

    def __init__(self, operation: str, **context):
        self.operation = operation
        self.context = context
        self.start_time = None

    def _context_str(self) -> str:
        return " ".join(f"{k}={v}" for k, v in self.context.items())

    def __enter__(self):
        self.start_time = time.time()
        logger.debug("{} [{}] starting...", self.operation, self._context_str())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time

        if exc_type is None:
            logger.info(
                "{} [{}] completed in {:.2f}s",
                self.operation,
                self._context_str(),
                duration,
            )
        else:
            logger.error(
                "{} [{}] failed after {:.2f}s: {}",
                self.operation,
                self._context_str(),
                duration,
                exc_val,
            )

        return False  # Don't suppress exceptions
