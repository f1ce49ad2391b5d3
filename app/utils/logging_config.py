"""
Logging Configuration
=====================
Centralised setup for the service: colored console output on stderr plus
a dated log file under ``logs/``.

Call setup_logging() once at process start (main.py does). Modules then
use ``logging.getLogger(__name__)``; records propagate to the root
handlers configured here.
"""
import logging
import os
import sys
from datetime import datetime
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers forced to the configured level and routed through the root handlers
SERVICE_LOGGERS = ("app", "main", "uvicorn", "uvicorn.error", "uvicorn.access")


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors each record by level."""

    cyan = "\x1b[36m"
    green = "\x1b[32m"
    yellow = "\x1b[33m"
    red = "\x1b[31m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: cyan,
        logging.INFO: green,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno)
        # Custom levels outside the table are printed uncolored
        fmt = f"{color}{LOG_FORMAT}{self.reset}" if color else LOG_FORMAT
        return logging.Formatter(fmt, datefmt=DATE_FORMAT).format(record)


def setup_logging(level=logging.INFO, log_dir: Optional[str] = "logs"):
    """
    Configure root logging for the service.

    Parameters
    ----------
    level : int
        Level applied to the root logger and SERVICE_LOGGERS.
    log_dir : str or None
        Directory for the dated log file; None disables file logging.
    """
    root_logger = logging.getLogger()

    # Clear existing handlers to prevent duplicate logs on reload
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter())
    root_logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(
            os.path.join(log_dir, f"service_{datetime.now().strftime('%Y%m%d')}.log")
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    for logger_name in SERVICE_LOGGERS:
        service_logger = logging.getLogger(logger_name)
        service_logger.setLevel(level)
        service_logger.propagate = True

    root_logger.info("Logging initialized (console%s).", " + file" if log_dir else "")
