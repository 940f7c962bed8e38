# /gradebook/core/logging_config.py

import logging
import os
from typing import Optional

from . import config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configures the root logger with a console handler and, when a log file is
    configured, a file handler using the same format.

    Safe to call more than once; handlers are only attached the first time.
    """
    level = (level or config.LOG_LEVEL).upper()
    log_file = log_file if log_file is not None else config.LOG_FILE

    root = logging.getLogger()
    root.setLevel(level)

    if not getattr(root, "_gradebook_configured", False):
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)

        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

        root._gradebook_configured = True

    # SQL echo is too chatty at INFO.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logger initialized (level=%s, file=%s)", level, log_file or "-")
