"""Точка входа: настройка логирования и запуск uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from config import load_settings
from server import create_app
from utils.logger import setup_logger

logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    setup_logger(settings.log_dir, settings.log_level)
    app = create_app(settings)
    logger.info("Запуск сервера статистики на %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Сервер остановлен пользователем.")
    except Exception:
        logger.exception("Критическая ошибка при запуске")
