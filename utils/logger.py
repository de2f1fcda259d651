"""Логирование: ротация файлов и цветная консоль."""

import logging
import os
from logging.handlers import TimedRotatingFileHandler

from colorlog import ColoredFormatter


def custom_rotator(source, dest):
    """Переименовывает архивные логи в формат stats_YYYY-MM-DD.log."""
    dirname, basename = os.path.split(dest)
    date_part = basename.split('.')[-1]
    new_name = os.path.join(dirname, f"stats_{date_part}.log")
    if os.path.exists(new_name):
        os.remove(new_name)
    os.rename(source, new_name)


def setup_logger(log_dir: str = "logs", console_level: str = "INFO"):
    """
    Настраивает корневой логгер для всего приложения.
    - Пишет DEBUG логи в файл с ротацией.
    - Пишет логи уровня console_level в консоль с цветовым выделением.
    - Фильтрует "шумные" логи от сторонних библиотек.
    """
    os.makedirs(log_dir, exist_ok=True)

    # --- Форматтеры ---
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)-25s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_formatter = ColoredFormatter(
        "%(log_color)s%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'bold_red',
        }
    )

    # --- Обработчик для файла (с ротацией) ---
    file_handler = TimedRotatingFileHandler(
        filename=os.path.join(log_dir, "stats.log"),
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8"
    )
    file_handler.setFormatter(file_formatter)
    file_handler.setLevel(logging.DEBUG)
    file_handler.rotator = custom_rotator

    # --- Обработчик для консоли ---
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(getattr(logging, console_level.upper(), logging.INFO))

    # --- Корневой логгер ---
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # --- Фильтрация логов сторонних библиотек ---
    logging.getLogger("redis").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.info("Система логирования успешно настроена. (dir=%s, console=%s)", log_dir, console_level)


def log_error(error: Exception, context: str = ""):
    """
    Логирует исключение с полным traceback.
    """
    logger = logging.getLogger()
    error_message = f"Произошла ошибка: {context}" if context else "Произошла ошибка"
    logger.error(error_message, exc_info=error)

