import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class Settings:
    redis_url: str | None = None
    store_name: str = "stats"
    api_key_url: str | None = None
    auth_required: bool = False
    download_dir: str = "downloads"
    log_dir: str = "logs"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def auth_enabled(self) -> bool:
        """Проверка ключа включается только при наличии обоих параметров."""
        return bool(self.api_key_url) and self.auth_required


def load_settings() -> Settings:
    """Собирает настройки из переменных окружения (.env подхватывается при импорте)."""
    return Settings(
        redis_url=os.getenv("REDIS_URL") or None,
        store_name=os.getenv("STATS_STORE_NAME", "stats"),
        api_key_url=os.getenv("API_KEY_URL") or None,
        auth_required=_env_flag("API_AUTH_REQUIRED"),
        download_dir=os.getenv("DOWNLOAD_DIR", "downloads"),
        log_dir=os.getenv("LOG_DIR", "logs"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
