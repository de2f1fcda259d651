"""Агрегатор статистики скачиваний: общий счётчик, гистограммы по дням и по соцсетям."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Callable

from redis_db.store import BaseStore
from utils.result import Result, capture

logger = logging.getLogger(__name__)

TOTAL_DOWNLOADS = "totalDownloads"
DAILY_STATS = "dailyStats"
SOCIAL_MEDIA_STATS = "socialMediaStats"

DATE_FORMAT = "%Y-%m-%d"
WEEK_DAYS = 7


def _as_count(value) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _parse_day(key: str) -> date | None:
    try:
        return datetime.strptime(key, DATE_FORMAT).date()
    except (TypeError, ValueError):
        logger.debug("⚠️ [STATS] Пропущен ключ дня, который не разбирается как дата: %r", key)
        return None


@dataclass
class StatsSnapshot:
    total_downloads: int = 0
    downloads_today: int = 0
    downloads_this_week: int = 0
    downloads_this_month: int = 0
    social_media_stats: dict[str, int] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {
            "totalDownloads": self.total_downloads,
            "downloadsToday": self.downloads_today,
            "downloadsThisWeek": self.downloads_this_week,
            "downloadsThisMonth": self.downloads_this_month,
            "socialMediaStats": dict(self.social_media_stats),
        }


class StatsStore:
    """
    Статистика скачиваний поверх хранилища ключ-значение.

    Каждое поле обновляется отдельным чтением и записью, без транзакций:
    при параллельных вызовах record_download последняя запись побеждает
    и часть инкрементов может потеряться.
    """

    def __init__(self, store: BaseStore, today: Callable[[], date] = date.today):
        self._store = store
        self._today = today
        self._initialized = False

    @property
    def store(self) -> BaseStore:
        return self._store

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ------------------------------- Initialization ------------------------------------

    async def _ensure_fields(self) -> None:
        defaults = {TOTAL_DOWNLOADS: 0, DAILY_STATS: {}, SOCIAL_MEDIA_STATS: {}}
        for key, zero in defaults.items():
            if not await self._store.has(key):
                await self._store.set(key, zero)
                logger.debug("🆕 [STATS] Создано поле %s", key)

    async def initialize(self) -> Result[bool]:
        """
        Создаёт отсутствующие поля с нулевыми значениями. Существующие не трогает,
        поэтому повторный вызов безопасен. При ошибке хранилища остаётся
        неинициализированным, следующий вызов попробует снова.
        """
        result = await capture(self._ensure_fields(), None, "инициализация хранилища статистики")
        self._initialized = result.ok
        if result.ok:
            logger.info("✅ [STATS] Хранилище статистики инициализировано (%s)", self._store.backend)
            return Result.success(True)
        return Result.failure(result.error, False)

    # ------------------------------- Recording ------------------------------------

    async def _record(self, source: str | None) -> bool:
        # Сначала все чтения, потом записи: упавшее чтение не оставляет полузаписанных полей.
        total = _as_count(await self._store.get(TOTAL_DOWNLOADS))
        daily = await self._store.get(DAILY_STATS) or {}
        social = (await self._store.get(SOCIAL_MEDIA_STATS) or {}) if source else None

        today = self._today().isoformat()
        daily[today] = _as_count(daily.get(today)) + 1

        await self._store.set(TOTAL_DOWNLOADS, total + 1)
        await self._store.set(DAILY_STATS, daily)
        if social is not None:
            social[source] = _as_count(social.get(source)) + 1
            await self._store.set(SOCIAL_MEDIA_STATS, social)
        return True

    async def record_download(self, source: str | None = None) -> Result[bool]:
        """
        Учитывает одно скачивание: +1 к общему счётчику, к сегодняшнему дню
        и, если source непустой, к счётчику этой соцсети. Не бросает исключений.
        """
        result = await capture(self._record(source), False, f"запись скачивания (source={source})")
        if result.ok:
            logger.debug("📥 [STATS] Скачивание учтено: source=%s", source)
        return result

    # ------------------------------- Raw reads ------------------------------------

    async def _read_count(self, key: str) -> int:
        return _as_count(await self._store.get(key))

    async def _read_mapping(self, key: str) -> dict[str, int]:
        raw = await self._store.get(key)
        if not isinstance(raw, dict):
            return {}
        return {str(k): _as_count(v) for k, v in raw.items()}

    async def fetch_total_downloads(self) -> Result[int]:
        return await capture(self._read_count(TOTAL_DOWNLOADS), 0, "чтение общего числа скачиваний")

    async def fetch_daily_stats(self) -> Result[dict[str, int]]:
        return await capture(self._read_mapping(DAILY_STATS), {}, "чтение статистики по дням")

    async def fetch_social_media_stats(self) -> Result[dict[str, int]]:
        return await capture(self._read_mapping(SOCIAL_MEDIA_STATS), {}, "чтение статистики по соцсетям")

    # ------------------------------- Getters ------------------------------------

    async def get_total_downloads(self) -> int:
        return (await self.fetch_total_downloads()).unwrap_or(0)

    async def get_daily_stats(self) -> dict[str, int]:
        return (await self.fetch_daily_stats()).unwrap_or({})

    async def get_social_media_stats(self) -> dict[str, int]:
        return (await self.fetch_social_media_stats()).unwrap_or({})

    async def get_downloads_today(self) -> int:
        daily = await self.get_daily_stats()
        return daily.get(self._today().isoformat(), 0)

    async def get_downloads_this_week(self) -> int:
        """Сумма за дни из [сегодня - 7 дней, сегодня] включительно, по календарным датам."""
        today = self._today()
        week_ago = today - timedelta(days=WEEK_DAYS)
        total = 0
        for key, count in (await self.get_daily_stats()).items():
            day = _parse_day(key)
            if day is not None and week_ago <= day <= today:
                total += count
        return total

    async def get_downloads_this_month(self) -> int:
        """Сумма за дни текущего календарного месяца и года."""
        today = self._today()
        total = 0
        for key, count in (await self.get_daily_stats()).items():
            day = _parse_day(key)
            if day is not None and (day.year, day.month) == (today.year, today.month):
                total += count
        return total

    async def snapshot(self) -> StatsSnapshot:
        """Собирает все агрегаты; ошибка в одном поле не обнуляет остальные."""
        return StatsSnapshot(
            total_downloads=await self.get_total_downloads(),
            downloads_today=await self.get_downloads_today(),
            downloads_this_week=await self.get_downloads_this_week(),
            downloads_this_month=await self.get_downloads_this_month(),
            social_media_stats=await self.get_social_media_stats(),
        )
