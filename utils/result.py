"""Явный результат операции: успех со значением или ошибка с безопасным значением по умолчанию."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    ok: bool
    value: T
    error: Exception | None = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: Exception, default: T) -> "Result[T]":
        return cls(ok=False, value=default, error=error)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default

    def __bool__(self) -> bool:
        return self.ok


async def capture(awaitable: Awaitable[T], default: Any, what: str) -> Result:
    """
    Выполняет корутину и превращает любое исключение в Result.failure.
    Ошибка логируется с traceback, наружу ничего не пробрасывается.
    """
    try:
        return Result.success(await awaitable)
    except Exception as e:
        logger.error("❌ [STATS] Ошибка: %s", what, exc_info=e)
        return Result.failure(e, default)
