import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

PLATFORM_HOSTS = {
    "youtube": ("youtube.com", "youtu.be"),
    "tiktok": ("tiktok.com",),
    "instagram": ("instagram.com",),
    "twitter": ("twitter.com", "x.com"),
    "reddit": ("reddit.com", "redd.it"),
    "vimeo": ("vimeo.com",),
    "soundcloud": ("soundcloud.com", "snd.sc"),
    "facebook": ("facebook.com", "fb.watch"),
    "pinterest": ("pinterest.com", "pin.it"),
    "twitch": ("twitch.tv",),
    "vk": ("vk.com", "vkvideo.ru"),
    "bilibili": ("bilibili.com", "b23.tv"),
    "dailymotion": ("dailymotion.com", "dai.ly"),
    "tumblr": ("tumblr.com",),
    "streamable": ("streamable.com",),
    "loom": ("loom.com",),
    "ok": ("ok.ru",),
    "rutube": ("rutube.ru",),
    "snapchat": ("snapchat.com",),
}


def _host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def detect_platform(url: str) -> str | None:
    """
    Определяет соцсеть по ссылке. Для неизвестных сайтов возвращает None:
    такие скачивания не попадают в статистику по соцсетям.
    """
    try:
        if not isinstance(url, str) or not url.strip():
            raise ValueError("Пустой или не строковый URL")

        candidate = url.strip()
        if "://" not in candidate:
            candidate = "https://" + candidate
        host = (urlparse(candidate).hostname or "").lower()

        for platform, domains in PLATFORM_HOSTS.items():
            if any(_host_matches(host, domain) for domain in domains):
                return platform

        logger.warning("⚠️ [DETECT] Платформа не определена для URL: %s", url)
        return None
    except ValueError:
        logger.exception("❌ [EXCEPTION] Ошибка определения платформы для URL: %r", url)
        return None
