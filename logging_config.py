"""Настройка логирования движка нормализации."""

import logging
import sys
from pathlib import Path
from typing import Optional

from settings import get_settings

ROOT_LOGGER_NAME = "normalizer"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
    """
    Настроить логгер normalizer: вывод в stdout и, если задан, в файл.
    Без аргументов уровень и файл берутся из настроек.
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper())
    log_file_path = log_file or settings.log_file
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file_path:
        log_file_path = Path(log_file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Логгер модуля под общим логгером normalizer"""
    if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        setup_logging()

    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
