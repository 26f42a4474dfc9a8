"""
Logging Configuration
Sets up the 'scrollscene' logger hierarchy for the application.

The frame loop runs ~60 times per second; modules that log from inside it
are kept at INFO unless frame tracing is explicitly requested.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'

# Modules that log from the per-frame tick
FRAME_LOGGERS = (
    "scrollscene.controller.targets",
    "scrollscene.controller.triggers",
)


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None, trace_frames: bool = False) -> None:
    """
    Configure console (and optional file) output for the scene engine.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        trace_frames: Let the per-frame modules log at DEBUG as well.
    """
    logger = logging.getLogger("scrollscene")
    logger.setLevel(level)

    # Re-running setup must not duplicate output
    if logger.hasHandlers():
        logger.handlers.clear()

    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, mode='w', encoding='utf-8'), level))

    frame_level = level if trace_frames else max(level, logging.INFO)
    for name in FRAME_LOGGERS:
        logging.getLogger(name).setLevel(frame_level)

    logger.info(f"Logging initialized (level {logging.getLevelName(level)}).")
