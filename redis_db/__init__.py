import redis.asyncio as redis


def create_redis(redis_url: str) -> redis.Redis:
    """
    Создаёт асинхронный клиент Redis с автоматическим декодированием строк.
    Подключение ленивое: сеть трогается только при первой команде.
    """
    return redis.from_url(redis_url, decode_responses=True)
