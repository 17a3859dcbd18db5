"""
Logging configuration for the YaYa transactions proxy.

All ``yaya_proxy.*`` loggers write to a rotating file under LOG_DIR
(default ./logs); warnings and errors are echoed to the console.
"""

import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler

SERVICE_LOGGER = "yaya_proxy"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5


def setup_logging() -> Path:
    """
    Attach file + console handlers to the service logger. Safe to call more
    than once (create_app runs it per app). Returns the log file path.
    """
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    log_dir = Path(os.getenv("LOG_DIR") or Path.cwd() / "logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "yaya_proxy.log"

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    file_handler = RotatingFileHandler(log_file, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8")
    file_handler.setFormatter(formatter)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)

    service_logger = logging.getLogger(SERVICE_LOGGER)
    service_logger.setLevel(level)
    for handler in list(service_logger.handlers):
        service_logger.removeHandler(handler)
        handler.close()
    service_logger.addHandler(file_handler)
    service_logger.addHandler(console_handler)

    # httpx logs every request at INFO; the retry policy already logs attempts
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return log_file
