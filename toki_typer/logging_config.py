"""Logging configuration for the exercise."""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from toki_typer.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_file_handler: Optional[logging.Handler] = None
_startup_buffer: Optional[logging.handlers.MemoryHandler] = None


def capture_startup_logs() -> None:
    """Hold records emitted before setup_logging, such as config fallbacks.

    setup_logging replays them into the log file at the configured level.
    """
    global _startup_buffer

    root_logger = logging.getLogger()
    if _startup_buffer is None:
        _startup_buffer = logging.handlers.MemoryHandler(
            capacity=1000, flushLevel=logging.CRITICAL + 1
        )
        root_logger.addHandler(_startup_buffer)
    root_logger.setLevel(logging.DEBUG)


def setup_logging(settings: Settings) -> None:
    """Set up logging configuration.

    The terminal belongs to the TUI, so records only go to a rotating file.
    Without a log file, logging stays silent.
    """
    global _file_handler

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level.upper())

    if _file_handler is not None:
        root_logger.removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None

    if not settings.log_file:
        _release_startup_buffer(root_logger)
        return

    Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
    _file_handler = logging.handlers.RotatingFileHandler(
        settings.log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    _file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    _file_handler.setLevel(settings.log_level.upper())
    root_logger.addHandler(_file_handler)
    _release_startup_buffer(root_logger, _file_handler)

    # Set logging levels for third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.info("Logging configured successfully")


def _release_startup_buffer(
    root_logger: logging.Logger, target: Optional[logging.Handler] = None
) -> None:
    global _startup_buffer

    if _startup_buffer is None:
        return
    root_logger.removeHandler(_startup_buffer)
    if target is not None:
        for record in _startup_buffer.buffer:
            if record.levelno >= target.level:
                target.handle(record)
    _startup_buffer.buffer.clear()
    _startup_buffer.close()
    _startup_buffer = None
