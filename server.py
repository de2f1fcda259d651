"""FastAPI сервер: отдача видео, учёт скачиваний и эндпоинт статистики."""

from __future__ import annotations

import asyncio
import logging
import os

import aiofiles
from fastapi import FastAPI, Header, Request
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from starlette.background import BackgroundTask

from config import Settings, load_settings
from handlers.stats import StatsHandler
from redis_db.store import BaseStore, create_store
from services.stats import StatsStore
from utils.platform_detect import detect_platform

logger = logging.getLogger(__name__)

TEMPLATES_DIR = "templates"


def resolve_source(source: str | None, url: str | None) -> str | None:
    """
    Метка соцсети для статистики. Переданный source берётся как есть (без пробелов по краям),
    иначе определяется по url. Если ничего нет, возвращает None.
    """
    if source and source.strip():
        return source.strip()
    if url:
        return detect_platform(url)
    return None


async def _read_template(name: str, fallback: str) -> str:
    try:
        async with aiofiles.open(os.path.join(TEMPLATES_DIR, name), encoding="utf-8") as f:
            return await f.read()
    except OSError:
        return fallback


def create_app(settings: Settings | None = None, store: BaseStore | None = None) -> FastAPI:
    """
    Точка сборки: одно хранилище, один StatsStore и один StatsHandler на процесс.
    Инициализация статистики выполняется один раз при старте.
    """
    settings = settings or load_settings()
    store = store or create_store(settings.store_name, settings.redis_url)
    stats = StatsStore(store)
    handler = StatsHandler(stats, settings)

    app = FastAPI()
    app.state.settings = settings
    app.state.store = store
    app.state.stats = stats
    app.state.stats_handler = handler

    # ------------------------------- Stats API ------------------------------------
    @app.get("/stats")
    async def get_stats(authorization: str | None = Header(default=None)) -> JSONResponse:
        """Агрегаты скачиваний: всего, сегодня, за неделю, за месяц и по соцсетям."""
        status, body = await handler.handle_stats_request(authorization)
        return JSONResponse(content=body, status_code=status)

    # ------------------------------- Video File Serve ------------------------------------
    @app.get("/video/{name}.mp4")
    async def serve_video(name: str, source: str | None = None, url: str | None = None):
        """
        Отдаёт mp4-файл из папки загрузок и после отправки учитывает скачивание.
        Метка source сохраняется как передана, регистр не меняется.
        """
        file_name = f"{os.path.basename(name)}.mp4"
        file_path = os.path.join(settings.download_dir, file_name)
        if not await asyncio.to_thread(os.path.isfile, file_path):
            html = await _read_template(
                "video_not_found.html", "<h1>404 Not Found</h1><p>Видео не найдено.</p>"
            )
            return HTMLResponse(content=html, status_code=404)

        label = resolve_source(source, url)
        logger.info("📤 [VIDEO] Отдаём файл %s | source=%s", file_name, label)
        return FileResponse(
            file_path,
            media_type="video/mp4",
            filename=file_name,
            background=BackgroundTask(handler.record_download, label),
        )

    @app.exception_handler(404)
    async def custom_404_handler(request: Request, exc):
        html = await _read_template(
            "page_not_found.html", "<h1>404 Not Found</h1><p>Страница не найдена.</p>"
        )
        return HTMLResponse(content=html, status_code=404)

    # ------------------------------- Startup / Shutdown ------------------------------------
    @app.on_event("startup")
    async def on_startup() -> None:
        """Инициализация хранилища статистики."""
        logger.info("🚀 [STARTUP] FastAPI запущен (бэкенд статистики: %s)", store.backend)
        result = await stats.initialize()
        if not result.ok:
            logger.error("❌ [STARTUP] Статистика не инициализирована, повторим при первом запросе")

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await store.close()
        logger.info("🛑 [SHUTDOWN] Хранилище статистики закрыто")

    return app
