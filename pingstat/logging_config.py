# pingstat/logging_config.py
import logging
from typing import Optional

FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logger(name: str = "pingstat",
                 level: int = logging.INFO,
                 log_file: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(FORMAT)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
    else:
        for handler in logger.handlers:
            handler.setLevel(level)

    return logger
