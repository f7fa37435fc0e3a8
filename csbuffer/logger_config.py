import logging
from typing import Optional

LOGGER_NAME = "csbuffer"


def setup_logger(name: str = LOGGER_NAME, level: int = logging.WARNING,
                 log_file: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    if not logger.handlers:
        formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(message)s')

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    for handler in logger.handlers:
        handler.setLevel(level)

    return logger


def level_for(diagnostics: bool, verbose: bool) -> int:
    """-t는 DEBUG, -v는 INFO, 기본은 WARNING"""
    if diagnostics:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING
