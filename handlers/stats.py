"""Обработчики статистики: запись скачивания и отдача агрегатов через API."""

from __future__ import annotations

import logging

from config import Settings
from services.stats import StatsSnapshot, StatsStore
from utils.logger import log_error
from utils.response import AUTH_KEY_MISSING, GENERIC_ERROR, create_response

logger = logging.getLogger(__name__)

API_KEY_PREFIX = "API-Key "


class StatsHandler:
    """
    Создаётся один раз в точке сборки приложения и получает готовый StatsStore.
    Если инициализация при старте не удалась, повторяется при первом обращении.
    """

    def __init__(self, stats: StatsStore, settings: Settings):
        self.stats = stats
        self.settings = settings

    async def _ensure_initialized(self) -> bool:
        if self.stats.initialized:
            return True
        return (await self.stats.initialize()).ok

    def _is_authorized(self, authorization: str | None) -> bool:
        if not self.settings.auth_enabled:
            return True
        return bool(authorization) and authorization.startswith(API_KEY_PREFIX)

    async def record_download(self, source: str | None = None) -> bool:
        """Учитывает скачивание. Никогда не бросает: статистика не должна ломать загрузку."""
        try:
            if not await self._ensure_initialized():
                logger.warning("⚠️ [STATS] Хранилище не инициализировано, скачивание не учтено")
                return False
            return (await self.stats.record_download(source)).ok
        except Exception as e:
            log_error(e, "запись скачивания в статистику")
            return False

    async def handle_stats_request(self, authorization: str | None = None) -> tuple[int, dict]:
        """Возвращает (status, body) для GET /stats."""
        if not self._is_authorized(authorization):
            logger.info("🔒 [AUTH] Запрос статистики без корректного API-ключа")
            return create_response("error", {"code": AUTH_KEY_MISSING})

        try:
            if not await self._ensure_initialized():
                logger.warning("⚠️ [STATS] Хранилище не инициализировано, отдаём нулевые значения")

            snapshot: StatsSnapshot = await self.stats.snapshot()
            return create_response("success", {"data": snapshot.as_dict()})
        except Exception as e:
            log_error(e, "обработка запроса статистики")
            return create_response("error", {"code": GENERIC_ERROR})
