# logger_setup.py
import logging
import os

from config import LOG_DIR


def setup_logger(name, log_file, level=logging.INFO):
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    formatter = logging.Formatter('%(asctime)s | %(name)s | %(levelname)s | %(message)s')

    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = logging.FileHandler(log_file, mode='a')
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    logger.propagate = False
    return logger


def service_logger(name, log_dir=None):
    return setup_logger(name, os.path.join(log_dir or LOG_DIR, f"{name}.log"))
